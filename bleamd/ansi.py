"""ANSI-aware position mapping, clipping, and overlay composition.

Every helper here treats control sequences (CSI style changes and OSC
hyperlink markers) as atomic runs that never count toward visible width.
Visible positions are counted in codepoints.
"""

from __future__ import annotations

from collections.abc import Iterator

ESC = "\x1b"
BEL = "\x07"
ST = "\x1b\\"
RESET = "\x1b[0m"
OSC8_PREFIX = "\x1b]8;;"
OSC8_CLOSE = OSC8_PREFIX + ST


def control_end(text: str, i: int) -> int:
    """Return the end index of the control sequence starting at ``i``.

    Returns ``i`` itself when ``text[i]`` does not start a sequence. A lone
    ESC, or ESC followed by anything other than ``[`` or ``]``, is visible.
    Unterminated sequences run to the end of ``text``.
    """
    n = len(text)
    if text[i] != ESC or i + 1 >= n:
        return i
    kind = text[i + 1]
    if kind == "[":
        j = i + 2
        while j < n:
            ch = text[j]
            if ("A" <= ch <= "Z") or ("a" <= ch <= "z"):
                return j + 1
            j += 1
        return n
    if kind == "]":
        j = i + 2
        while j < n:
            ch = text[j]
            if ch == BEL:
                return j + 1
            if ch == ESC and j + 1 < n and text[j + 1] == "\\":
                return j + 2
            j += 1
        return n
    return i


def iter_runs(text: str) -> Iterator[tuple[int, int, bool]]:
    """Yield ``(start, end, is_control)`` for each control run and glyph.

    Glyphs are yielded one codepoint at a time.
    """
    i = 0
    n = len(text)
    while i < n:
        end = control_end(text, i)
        if end > i:
            yield i, end, True
            i = end
            continue
        yield i, i + 1, False
        i += 1


def strip_with_mapping(line: str) -> tuple[str, list[int]]:
    """Strip control sequences and map each visible char to its raw index.

    ``position_map[i]`` is the index in ``line`` of ``plain[i]``; the map is
    strictly increasing and never points inside a control run.
    """
    plain: list[str] = []
    position_map: list[int] = []
    for start, _end, is_control in iter_runs(line):
        if is_control:
            continue
        plain.append(line[start])
        position_map.append(start)
    return "".join(plain), position_map


def strip_ansi(text: str) -> str:
    """Return ``text`` with every control sequence removed."""
    if ESC not in text:
        return text
    return strip_with_mapping(text)[0]


def visible_length(text: str) -> int:
    """Count visible codepoints in ``text``."""
    if ESC not in text:
        return len(text)
    return len(strip_with_mapping(text)[1])


def control_runs(text: str) -> list[str]:
    """Return every control sequence of ``text`` in order."""
    return [text[start:end] for start, end, is_control in iter_runs(text) if is_control]


def is_sgr(seq: str) -> bool:
    return seq.startswith("\x1b[") and seq.endswith("m")


def _is_full_reset(seq: str) -> bool:
    params = seq[2:-1]
    return params in ("", "0") or params.startswith("0;")


def active_sgr(text: str) -> str:
    """Return the SGR sequences still in effect at the end of ``text``.

    Everything before the last full reset is dropped, so replaying the result
    restores the style that was active at the cut point.
    """
    active: list[str] = []
    for seq in control_runs(text):
        if not is_sgr(seq):
            continue
        if _is_full_reset(seq):
            active = []
            if seq in (RESET, "\x1b[m"):
                continue
        active.append(seq)
    return "".join(active)


def open_hyperlink(text: str) -> str | None:
    """Return the OSC 8 opener left unclosed at the end of ``text``, if any."""
    opener: str | None = None
    for seq in control_runs(text):
        if not seq.startswith(OSC8_PREFIX):
            continue
        body = seq[len(OSC8_PREFIX):]
        url = body[:-2] if body.endswith(ST) else body.rstrip(BEL)
        opener = seq if url else None
    return opener


def active_style(text: str) -> str:
    """Return control sequences that re-establish the state at end of ``text``."""
    return active_sgr(text) + (open_hyperlink(text) or "")


def close_style(text: str) -> str:
    """Return sequences that close any hyperlink or style left open by ``text``."""
    out = ""
    if open_hyperlink(text) is not None:
        out += OSC8_CLOSE
    if active_sgr(text):
        out += RESET
    return out


def truncate_visible(line: str, n: int) -> str:
    """Return the shortest raw prefix of ``line`` holding ``n`` visible chars.

    Lines that already fit are returned unchanged, trailing control runs
    included. Control runs are never split.
    """
    _plain, position_map = strip_with_mapping(line)
    if len(position_map) <= n:
        return line
    if n <= 0:
        return ""
    return line[: position_map[n - 1] + 1]


def skip_visible(line: str, n: int) -> str:
    """Return the raw suffix of ``line`` starting at visible position ``n``.

    The suffix is prefixed with the style and hyperlink state active at the
    cut, so the remainder keeps its styling. Control runs sitting between the
    ``n``-th and the next visible char are part of the suffix itself.
    """
    if n <= 0:
        return line
    _plain, position_map = strip_with_mapping(line)
    if len(position_map) <= n:
        return ""
    cut = position_map[n - 1] + 1
    return active_style(line[:cut]) + line[cut:]


def clip_line(line: str, x: int, width: int) -> str:
    """Return the ``width``-column viewport of ``line`` starting at column ``x``.

    When the right edge cuts the line, any hyperlink or style still open at
    the cut is closed so it cannot bleed past the viewport.
    """
    if width <= 0:
        return ""
    shifted = skip_visible(line, max(0, x))
    clipped = truncate_visible(shifted, width)
    if len(clipped) < len(shifted):
        clipped += close_style(clipped)
    return clipped


def pad_visible(line: str, width: int) -> str:
    """Right-pad ``line`` with spaces to ``width`` visible columns."""
    missing = width - visible_length(line)
    if missing <= 0:
        return line
    return line + " " * missing


def composite(background: list[str], overlay: list[str], x: int, y: int) -> list[str]:
    """Overlay styled ``overlay`` rows onto ``background`` at column ``x``, row ``y``.

    Each affected row becomes: background prefix up to ``x`` (space padded when
    short, with open styles closed), the overlay row verbatim, then the
    background resumed after the overlay's visible width.
    """
    x = max(0, x)
    frame = list(background)
    for offset, row in enumerate(overlay):
        target = y + offset
        if target < 0 or target >= len(frame):
            continue
        bg_row = frame[target]
        left = truncate_visible(bg_row, x)
        left_len = visible_length(left)
        if left_len < x:
            left = left + " " * (x - left_len)
        right = skip_visible(bg_row, x + visible_length(row))
        frame[target] = left + close_style(left) + row + right
    return frame
