"""OSC 8 hyperlink injection and on-screen link hit-testing.

The renderer leaves links as ``[text](url)`` markup whose URL part is itself
colored, so plain bracket matching would trip over the ``[`` inside every
``ESC [`` style sequence. Injection therefore anchors on ``](`` and scans
backward for the nearest bracket that is not preceded by ESC.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .ansi import ESC, OSC8_CLOSE, OSC8_PREFIX, ST, strip_ansi, visible_length

logger = logging.getLogger(__name__)

UNDERLINE_ON = "\x1b[4m"
UNDERLINE_OFF = "\x1b[24m"
UNDERLINE_COLOR_RESET = "\x1b[59m"

_HYPERLINK_RE = re.compile(r"\x1b\]8;;([^\x1b\x07]+)(?:\x1b\\|\x07)(.*?)\x1b\]8;;(?:\x1b\\|\x07)")


@dataclass(frozen=True)
class LinkStyle:
    """Already-resolved underline color fragments for links."""

    underline: str = "\x1b[58;5;39m"
    hovered_underline: str = "\x1b[58;5;214m"


@dataclass(frozen=True)
class LinkSpan:
    url: str
    text: str
    x: int
    y: int
    width: int

    def contains(self, x: int, y: int) -> bool:
        return y == self.y and self.x <= x < self.x + self.width


@dataclass(frozen=True)
class _LinkCandidate:
    start: int
    end: int
    text: str
    url: str


def looks_like_url(value: str) -> bool:
    return "://" in value or value.startswith("mailto:")


def osc8_open(url: str) -> str:
    return f"{OSC8_PREFIX}{url}{ST}"


def hyperlink(url: str, text: str, underline_color: str = "") -> str:
    """Wrap ``text`` in an underlined OSC 8 hyperlink to ``url``."""
    if underline_color:
        return (
            f"{underline_color}{UNDERLINE_ON}{osc8_open(url)}{text}{OSC8_CLOSE}"
            f"{UNDERLINE_COLOR_RESET}{UNDERLINE_OFF}"
        )
    return f"{UNDERLINE_ON}{osc8_open(url)}{text}{OSC8_CLOSE}{UNDERLINE_OFF}"


def _find_open_bracket(text: str, close_pos: int, line_start: int) -> int:
    """Scan left from ``close_pos`` for the nearest ``[`` opening the link text.

    A bracket right after ESC belongs to a control sequence and is skipped.
    """
    pos = close_pos - 1
    while pos >= line_start:
        if text[pos] == "[" and (pos == 0 or text[pos - 1] != ESC):
            return pos
        pos -= 1
    return -1


def _target_url(raw_target: str) -> str | None:
    """Recover the literal URL from a colored ``(...)`` link target."""
    url = strip_ansi(raw_target).strip()
    space = url.find(" ")
    if space >= 0:
        url = url[:space]
    if not looks_like_url(url):
        return None
    return url


def find_link_markup(text: str) -> list[_LinkCandidate]:
    """Locate ``[text](url)`` markup, skipping brackets owned by control sequences.

    Candidates never cross a line break and never overlap an earlier one.
    """
    candidates: list[_LinkCandidate] = []
    last_end = 0
    search_from = 0
    while True:
        close = text.find("](", search_from)
        if close < 0:
            break
        search_from = close + 2
        line_start = text.rfind("\n", 0, close) + 1
        line_end = text.find("\n", close)
        if line_end < 0:
            line_end = len(text)

        open_pos = _find_open_bracket(text, close, line_start)
        if open_pos < 0 or open_pos < last_end:
            continue
        paren_end = text.find(")", close + 2, line_end)
        if paren_end < 0:
            continue
        url = _target_url(text[close + 2 : paren_end])
        if url is None:
            continue
        candidates.append(
            _LinkCandidate(start=open_pos, end=paren_end + 1, text=text[open_pos + 1 : close], url=url)
        )
        last_end = paren_end + 1
    return candidates


def inject_hyperlinks(text: str, hover_url: str | None = None, style: LinkStyle | None = None) -> str:
    """Replace link markup in styled ``text`` with underlined OSC 8 hyperlinks.

    The captured link text keeps its own control sequences. The underline
    color switches to the hovered variant for links whose URL equals
    ``hover_url``.
    """
    style = style or LinkStyle()
    candidates = find_link_markup(text)
    result = text
    for candidate in reversed(candidates):
        hovered = bool(hover_url) and candidate.url == hover_url
        color = style.hovered_underline if hovered else style.underline
        replacement = hyperlink(candidate.url, candidate.text, color)
        result = result[: candidate.start] + replacement + result[candidate.end :]
    logger.debug("injected %d hyperlinks (hover=%r)", len(candidates), hover_url)
    return result


def extract_links(text: str) -> list[LinkSpan]:
    """Build the pointer hit-table for on-screen ``text``.

    ``x`` is the visible column where the link text starts and ``y`` the line
    index; both are relative to ``text``, so callers pass the clipped frame.
    """
    links: list[LinkSpan] = []
    for y, line in enumerate(text.split("\n")):
        if OSC8_PREFIX not in line:
            continue
        for match in _HYPERLINK_RE.finditer(line):
            link_text = match.group(2)
            links.append(
                LinkSpan(
                    url=match.group(1),
                    text=strip_ansi(link_text),
                    x=visible_length(line[: match.start(2)]),
                    y=y,
                    width=visible_length(link_text),
                )
            )
    return links


def link_at(links: list[LinkSpan], x: int, y: int) -> LinkSpan | None:
    """Return the link under screen cell ``(x, y)``, if any."""
    for link in links:
        if link.contains(x, y):
            return link
    return None
