"""Help overlay content and rounded-box rendering.

The box is built from the active key map, so rebinding a key in the config
changes the help text too. Rendering is presentation-only and side-effect
free; the caller composites the rows over the frame.
"""

from __future__ import annotations

from ..ansi import RESET, clip_line, pad_visible, visible_length
from ..keys import Action, KeyMap

HEADING_STYLE = "\033[1;38;5;81m"
KEY_STYLE = "\033[38;5;229m"
HINT_STYLE = "\033[2;38;5;250m"
DEFAULT_BORDER_STYLE = "\033[38;5;45m"
TITLE = "bleamd help"

_SECTIONS: tuple[tuple[str, tuple[tuple[tuple[Action, ...], str], ...]], ...] = (
    (
        "NAVIGATION",
        (
            ((Action.SCROLL_UP, Action.SCROLL_DOWN), "scroll line"),
            ((Action.SCROLL_LEFT, Action.SCROLL_RIGHT), "scroll sideways"),
            ((Action.PAGE_UP, Action.PAGE_DOWN), "half page"),
            ((Action.GO_TO_TOP, Action.GO_TO_BOTTOM), "top / bottom"),
        ),
    ),
    (
        "SEARCH",
        (
            ((Action.START_SEARCH,), "search"),
            ((Action.NEXT_MATCH, Action.PREV_MATCH), "next / previous match"),
            ((Action.TOGGLE_CASE,), "toggle case sensitivity"),
            ((Action.CLEAR_SEARCH,), "clear search"),
        ),
    ),
    (
        "GENERAL",
        (
            ((Action.SHOW_HELP,), "this help"),
            ((Action.TOGGLE_MOUSE,), "toggle mouse capture"),
            ((Action.QUIT,), "quit"),
        ),
    ),
)

_NOTES = (
    "Click a link to open it in the browser.",
    "Disable mouse capture to select text.",
)


def _keys_text(keymap: KeyMap, actions: tuple[Action, ...]) -> str:
    labels: list[str] = []
    for action in actions:
        labels.extend(keymap.labels(action))
    return "/".join(labels) if labels else "-"


def help_lines(keymap: KeyMap) -> list[str]:
    """Return the styled body lines of the help overlay."""
    lines: list[str] = []
    for title, entries in _SECTIONS:
        if lines:
            lines.append("")
        lines.append(f"{HEADING_STYLE}{title}{RESET}")
        keys = [_keys_text(keymap, actions) for actions, _description in entries]
        key_width = max(len(text) for text in keys)
        for text, (_actions, description) in zip(keys, entries):
            padding = " " * (key_width - len(text))
            lines.append(f"  {KEY_STYLE}{text}{RESET}{padding}  {description}")
    lines.append("")
    lines.append(f"{HEADING_STYLE}NOTES{RESET}")
    lines.extend(f"  {note}" for note in _NOTES)
    lines.append("")
    lines.append(f"{HINT_STYLE}Press any key to close{RESET}")
    return lines


def rounded_box(
    body: list[str],
    width: int,
    border_style: str = DEFAULT_BORDER_STYLE,
    title: str = "",
) -> list[str]:
    """Frame ``body`` rows in a rounded box ``width`` columns wide.

    Body rows are clipped or padded to the inner width with one column of
    horizontal padding on each side.
    """
    inner = max(1, width - 2)
    text_width = max(0, inner - 2)
    top_rule = "─" * inner
    if title and len(title) + 2 <= inner:
        left = (inner - len(title) - 2) // 2
        top_rule = "─" * left + f" {title} " + "─" * (inner - left - len(title) - 2)
    rows = [f"{border_style}╭{top_rule}╮{RESET}"]
    for line in body:
        text = pad_visible(clip_line(line, 0, text_width), text_width)
        rows.append(f"{border_style}│{RESET} {text}{RESET} {border_style}│{RESET}")
    rows.append(f"{border_style}╰{'─' * inner}╯{RESET}")
    return rows


def render_help_box(
    keymap: KeyMap,
    width: int,
    height: int,
    border_style: str = DEFAULT_BORDER_STYLE,
) -> list[str]:
    """Build the help overlay rows sized to fit a ``width`` x ``height`` screen."""
    body = help_lines(keymap)
    content_width = max(visible_length(line) for line in body)
    box_width = min(max(1, width), max(len(TITLE) + 4, content_width + 4))
    max_body = max(0, height - 2)
    return rounded_box(body[:max_body], box_width, border_style, title=TITLE)
