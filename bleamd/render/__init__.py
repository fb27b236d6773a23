"""Frame builder: turns the hyperlinked document and view state into screen rows.

Building a frame is pure. The returned ``Frame`` carries the rows to draw,
the link hit-table for the visible content, and the status text, so the
controller can hit-test pointer events against exactly what was drawn.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..ansi import RESET, clip_line, composite, pad_visible, visible_length
from ..config import Config, bg, fg
from ..highlight import highlight
from ..hyperlinks import LinkSpan, extract_links
from ..keys import Action, KeyMap, key_label
from ..state import Mode, ViewState
from .help import render_help_box, rounded_box

STATUS_SEPARATOR = " │ "
SEARCH_BOX_MAX_WIDTH = 60
SEARCH_PROMPT = "Search: "
SEARCH_CURSOR = "█"


@dataclass(frozen=True)
class Frame:
    lines: tuple[str, ...]
    links: tuple[LinkSpan, ...]
    hovered_url: str | None
    status_text: str


def status_hints(state: ViewState, keymap: KeyMap) -> list[str]:
    """Key hints for the status bar, depending on the mode."""

    def hint(action: Action, text: str) -> str:
        label = keymap.first_label(action)
        return f"{label} {text}" if label else ""

    if state.mode is Mode.HELP:
        return ["any key close help"]
    if state.mode is Mode.SEARCHING:
        return ["Enter search", "Esc cancel"]
    mouse_text = "mouse off" if state.mouse_enabled else "mouse on"
    if state.mode is Mode.SEARCH_NAV:
        hints = [
            hint(Action.NEXT_MATCH, "next"),
            hint(Action.PREV_MATCH, "prev"),
            hint(Action.TOGGLE_CASE, "case"),
            f"{key_label('ESC')} clear",
            hint(Action.SHOW_HELP, "help"),
        ]
    else:
        hints = [
            hint(Action.START_SEARCH, "search"),
            hint(Action.SHOW_HELP, "help"),
            hint(Action.TOGGLE_MOUSE, mouse_text),
            hint(Action.QUIT, "quit"),
        ]
    return [text for text in hints if text]


def status_bar(state: ViewState, keymap: KeyMap, config: Config) -> tuple[str, str]:
    """Return ``(styled row, plain status text)`` for the bottom row."""
    colors = config.colors
    base = fg(colors.status_bar_text) + bg(colors.status_bar_bg)
    if state.hovered_url:
        text = state.hovered_url
        body = fg(colors.hovered_link_url) + bg(colors.status_bar_bg) + text
    else:
        text = state.message or STATUS_SEPARATOR.join(status_hints(state, keymap))
        body = base + text
    row = clip_line(body, 0, state.width)
    fill = max(0, state.width - visible_length(row))
    return f"{row}{base}{' ' * fill}{RESET}", text


def search_box(state: ViewState, config: Config) -> list[str]:
    """Three rows of the centered rounded ``Search:`` prompt."""
    box_width = min(state.width, SEARCH_BOX_MAX_WIDTH)
    text_width = max(0, box_width - 4)
    text = SEARCH_PROMPT + state.search_input + SEARCH_CURSOR
    if len(text) > text_width:
        # Keep the tail visible while typing past the box width.
        text = text[len(text) - text_width:]
    rows = rounded_box([text], box_width, fg(config.colors.search_box_border))
    indent = " " * max(0, (state.width - box_width) // 2)
    return [indent + row for row in rows]


def build_frame(document: str, state: ViewState, keymap: KeyMap, config: Config) -> Frame:
    """Compose one screen for ``document`` (already hyperlinked) and ``state``."""
    search = state.search
    content = document
    if search.matches:
        current_style, other_style = config.search_styles()
        content = highlight(content, search.matches, search.current_index, current_style, other_style)

    rows = state.content_rows()
    doc_lines = content.split("\n")
    visible = doc_lines[state.y_offset : state.y_offset + rows]
    clipped = [clip_line(line, state.x_offset, state.width) for line in visible]
    links = tuple(extract_links("\n".join(clipped))) if clipped else ()

    lines = [pad_visible(line + RESET, state.width) for line in clipped]
    lines.extend(" " * state.width for _ in range(rows - len(lines)))

    if state.prompt_open:
        lines.extend(search_box(state, config))
    if search.active:
        lines.append(clip_line(fg(config.colors.status_bar_text) + search.status_text(), 0, state.width) + RESET)

    bar, status_text = status_bar(state, keymap, config)
    lines.append(bar)

    if state.mode is Mode.HELP:
        box = render_help_box(keymap, state.width, state.height, fg(config.colors.help_box_border))
        box_width = visible_length(box[0]) if box else 0
        x = max(0, (state.width - box_width) // 2)
        y = max(0, (len(lines) - len(box)) // 2)
        lines = composite(lines, box, x, y)

    return Frame(
        lines=tuple(lines),
        links=links,
        hovered_url=state.hovered_url,
        status_text=status_text,
    )
