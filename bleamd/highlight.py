"""Apply search-hit highlighting to ANSI-rendered document lines.

Functions here preserve existing ANSI style sequences while layering match
emphasis on top, distinguishing the current hit from the others.
"""

from __future__ import annotations

from collections.abc import Sequence

from .ansi import RESET, active_sgr, control_runs, is_sgr, strip_with_mapping
from .search import SearchMatch

CURRENT_MATCH_STYLE = "\x1b[48;5;214m\x1b[30m"
OTHER_MATCH_STYLE = "\x1b[48;5;226m\x1b[30m"


def highlight_line(
    line: str,
    matches: Sequence[SearchMatch],
    current: SearchMatch | None,
    style_current: str = CURRENT_MATCH_STYLE,
    style_other: str = OTHER_MATCH_STYLE,
    reset: str = RESET,
) -> str:
    """Wrap each match of one line in its highlight style.

    Raw slices between matches are cut at glyph boundaries taken from the
    position map, so control runs between matches survive untouched. After
    each highlighted span the line's own style is replayed, along with any
    non-style control runs (hyperlink markers) that sat inside the span.
    """
    if not matches:
        return line
    _plain, position_map = strip_with_mapping(line)
    out: list[str] = []
    raw_cursor = 0
    for match in sorted(matches, key=lambda item: item.column):
        end_col = match.column + len(match.text)
        if not match.text or match.column < 0 or end_col > len(position_map):
            continue
        start_raw = position_map[match.column]
        if start_raw < raw_cursor:
            continue
        end_raw = position_map[end_col - 1] + 1
        out.append(line[raw_cursor:start_raw])
        is_current = (
            current is not None
            and current.line_number == match.line_number
            and current.column == match.column
        )
        out.append(style_current if is_current else style_other)
        out.append(match.text)
        out.append(reset)
        inner = [seq for seq in control_runs(line[start_raw:end_raw]) if not is_sgr(seq)]
        out.append(active_sgr(line[:end_raw]))
        out.extend(inner)
        raw_cursor = end_raw
    out.append(line[raw_cursor:])
    return "".join(out)


def highlight(
    content: str,
    matches: Sequence[SearchMatch],
    current_index: int,
    style_current: str = CURRENT_MATCH_STYLE,
    style_other: str = OTHER_MATCH_STYLE,
    reset: str = RESET,
) -> str:
    """Highlight every match in ``content``; ``current_index`` picks the current hit."""
    if not matches:
        return content
    current = matches[current_index] if 0 <= current_index < len(matches) else None
    by_line: dict[int, list[SearchMatch]] = {}
    for match in matches:
        by_line.setdefault(match.line_number, []).append(match)

    lines = content.split("\n")
    for line_number, line_matches in by_line.items():
        if 0 <= line_number < len(lines):
            lines[line_number] = highlight_line(
                lines[line_number],
                line_matches,
                current,
                style_current=style_current,
                style_other=style_other,
                reset=reset,
            )
    return "\n".join(lines)
