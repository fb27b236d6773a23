"""Persistent JSON config: colors, keybindings, and built-in themes.

Loading is defensive: a missing or malformed file falls back to the default
theme, unknown keys are ignored, and wrongly typed values are dropped.
Colors are stored as ``#rrggbb`` strings and resolved to xterm-256 SGR
fragments here, so the styled-text engine only ever sees escape sequences.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

from platformdirs import user_config_dir

from .highlight import CURRENT_MATCH_STYLE, OTHER_MATCH_STYLE
from .hyperlinks import LinkStyle
from .markdown import MarkdownTheme

logger = logging.getLogger(__name__)

APP_NAME = "bleamd"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_CODE_STYLE = "monokai"


def hex_to_ansi256(value: str) -> int:
    """Convert ``#rrggbb`` (or ``#rgb``) to the nearest xterm-256 color index.

    Raises ``ValueError`` for anything that is not a hex color.
    """
    text = value.strip().lstrip("#")
    if len(text) == 3:
        text = "".join(ch * 2 for ch in text)
    if len(text) != 6:
        raise ValueError(f"invalid hex color: {value!r}")
    r, g, b = (int(text[i : i + 2], 16) for i in (0, 2, 4))
    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        return 232 + round((r - 8) / 247 * 24)
    return 16 + 36 * round(r / 255 * 5) + 6 * round(g / 255 * 5) + round(b / 255 * 5)


def _sgr_color(value: str, code: int) -> str:
    if not value:
        return ""
    try:
        index = hex_to_ansi256(value)
    except ValueError:
        logger.debug("ignoring invalid color %r", value)
        return ""
    return f"\x1b[{code};5;{index}m"


def fg(value: str) -> str:
    """Foreground SGR fragment for a hex color, ``""`` when unset/invalid."""
    return _sgr_color(value, 38)


def bg(value: str) -> str:
    """Background SGR fragment for a hex color, ``""`` when unset/invalid."""
    return _sgr_color(value, 48)


def underline_color(value: str) -> str:
    """Underline-color SGR fragment (CSI 58) for a hex color."""
    return _sgr_color(value, 58)


@dataclass
class Colors:
    heading: str = "#5fd7ff"
    text: str = ""
    link: str = "#5fafff"
    link_url: str = "#0087ff"
    code: str = "#ffaf5f"
    quote: str = "#8a8a8a"
    rule: str = "#585858"
    list_marker: str = "#ffd75f"
    search_match_bg: str = "#ffff00"
    search_match_fg: str = "#000000"
    search_current_bg: str = "#ffaf00"
    search_current_fg: str = "#000000"
    hyperlink_underline: str = "#00afff"
    hyperlink_hovered_underline: str = "#ffaf00"
    status_bar_text: str = "#626262"
    status_bar_bg: str = ""
    hovered_link_url: str = "#5fafff"
    help_box_border: str = "#00d7ff"
    search_box_border: str = "#00d7ff"


@dataclass
class Keybindings:
    scroll_up: list[str] = field(default_factory=lambda: ["Up", "k"])
    scroll_down: list[str] = field(default_factory=lambda: ["Down", "j"])
    scroll_left: list[str] = field(default_factory=lambda: ["Left", "h"])
    scroll_right: list[str] = field(default_factory=lambda: ["Right", "l"])
    page_up: list[str] = field(default_factory=lambda: ["PageUp", "b", "C-u"])
    page_down: list[str] = field(default_factory=lambda: ["PageDown", "Space", "f", "C-d"])
    go_to_top: list[str] = field(default_factory=lambda: ["g", "Home"])
    go_to_bottom: list[str] = field(default_factory=lambda: ["G", "End"])
    start_search: list[str] = field(default_factory=lambda: ["/"])
    next_match: list[str] = field(default_factory=lambda: ["n"])
    prev_match: list[str] = field(default_factory=lambda: ["N"])
    clear_search: list[str] = field(default_factory=lambda: ["C-l"])
    show_help: list[str] = field(default_factory=lambda: ["?"])
    quit: list[str] = field(default_factory=lambda: ["q", "C-c"])
    toggle_mouse: list[str] = field(default_factory=lambda: ["m"])
    toggle_case: list[str] = field(default_factory=lambda: ["i"])


@dataclass
class Config:
    colors: Colors = field(default_factory=Colors)
    keybindings: Keybindings = field(default_factory=Keybindings)
    code_style: str = DEFAULT_CODE_STYLE

    def markdown_theme(self) -> MarkdownTheme:
        c = self.colors
        return MarkdownTheme(
            heading="\x1b[1m" + fg(c.heading),
            text=fg(c.text),
            link=fg(c.link),
            link_url=fg(c.link_url),
            code=fg(c.code),
            quote=fg(c.quote),
            rule=fg(c.rule),
            list_marker=fg(c.list_marker),
            code_style=self.code_style,
        )

    def search_styles(self) -> tuple[str, str]:
        """Return ``(current, other)`` highlight fragments for search hits."""
        c = self.colors
        current = bg(c.search_current_bg) + fg(c.search_current_fg)
        other = bg(c.search_match_bg) + fg(c.search_match_fg)
        return current or CURRENT_MATCH_STYLE, other or OTHER_MATCH_STYLE

    def link_style(self) -> LinkStyle:
        c = self.colors
        return LinkStyle(
            underline=underline_color(c.hyperlink_underline),
            hovered_underline=underline_color(c.hyperlink_hovered_underline),
        )

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def default_config() -> Config:
    return Config()


def onedark_config() -> Config:
    return Config(
        colors=Colors(
            heading="#61afef",
            text="#abb2bf",
            link="#56b6c2",
            link_url="#61afef",
            code="#e5c07b",
            quote="#5c6370",
            rule="#3e4451",
            list_marker="#c678dd",
            search_match_bg="#e5c07b",
            search_match_fg="#282c34",
            search_current_bg="#d19a66",
            search_current_fg="#282c34",
            hyperlink_underline="#61afef",
            hyperlink_hovered_underline="#e06c75",
            status_bar_text="#5c6370",
            status_bar_bg="#21252b",
            hovered_link_url="#98c379",
            help_box_border="#61afef",
            search_box_border="#c678dd",
        ),
        code_style="one-dark",
    )


THEMES = {
    "default": default_config,
    "onedark": onedark_config,
    "one-dark": onedark_config,
}


def available_theme_names() -> list[str]:
    return ["default", "onedark"]


def theme_config(name: str) -> Config | None:
    factory = THEMES.get(name.strip().lower())
    return factory() if factory is not None else None


def load_config_data() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _apply_colors(colors: Colors, raw: object) -> None:
    if not isinstance(raw, dict):
        return
    for item in fields(Colors):
        value = raw.get(item.name)
        if isinstance(value, str):
            setattr(colors, item.name, value.strip())


def _apply_keybindings(keybindings: Keybindings, raw: object) -> None:
    if not isinstance(raw, dict):
        return
    for item in fields(Keybindings):
        value = raw.get(item.name)
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            continue
        keys = [key for key in value if isinstance(key, str) and key]
        if keys:
            setattr(keybindings, item.name, keys)


def config_from_data(data: dict[str, object]) -> Config:
    """Build a ``Config`` from decoded JSON, keeping defaults for bad fields."""
    config = default_config()
    _apply_colors(config.colors, data.get("colors"))
    _apply_keybindings(config.keybindings, data.get("keybindings"))
    code_style = data.get("code_style")
    if isinstance(code_style, str) and code_style.strip():
        config.code_style = code_style.strip()
    return config


def load_config() -> Config:
    return config_from_data(load_config_data())


def save_config(config: Config) -> None:
    """Persist ``config`` as pretty-printed JSON; raises ``OSError`` on failure."""
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_PATH.write_text(json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8")
