"""Full-text search over styled document lines.

Matches are found in the plain projection of each line and carry both the
visible column and the raw index, so callers can highlight or scroll to them
without re-scanning control sequences.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from .ansi import strip_with_mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchMatch:
    line_number: int  # 0-based
    column: int  # 0-based visible column
    raw_column: int  # index into the raw line
    text: str


def fold_case(text: str) -> str:
    """Lower-case ``text`` without changing its length.

    Characters whose lower-case form expands to several codepoints are kept
    as-is so visible columns stay aligned with the original.
    """
    if text.isascii():
        return text.lower()
    out: list[str] = []
    for ch in text:
        lowered = ch.lower()
        out.append(lowered if len(lowered) == 1 else ch)
    return "".join(out)


def find_matches(term: str, content: str, case_sensitive: bool = False) -> tuple[SearchMatch, ...]:
    """Find every non-overlapping occurrence of ``term`` in ``content``.

    Results are ordered by line, then column.
    """
    if not term:
        return ()
    needle = term if case_sensitive else fold_case(term)
    matches: list[SearchMatch] = []
    for line_number, line in enumerate(content.split("\n")):
        plain, position_map = strip_with_mapping(line)
        haystack = plain if case_sensitive else fold_case(plain)
        cursor = 0
        while True:
            found = haystack.find(needle, cursor)
            if found < 0:
                break
            end = found + len(needle)
            matches.append(
                SearchMatch(
                    line_number=line_number,
                    column=found,
                    raw_column=position_map[found],
                    text=plain[found:end],
                )
            )
            cursor = end
    return tuple(matches)


@dataclass(frozen=True)
class SearchState:
    """Search term, its match list, and the cyclic match cursor.

    Transitions return new values; ``current_index`` is ``-1`` when no match
    is selected.
    """

    term: str = ""
    matches: tuple[SearchMatch, ...] = ()
    current_index: int = -1
    case_sensitive: bool = False

    @property
    def active(self) -> bool:
        return bool(self.term)

    @property
    def match_count(self) -> int:
        return len(self.matches)

    @property
    def current_match(self) -> SearchMatch | None:
        if 0 <= self.current_index < len(self.matches):
            return self.matches[self.current_index]
        return None

    def set_term(self, term: str, content: str) -> SearchState:
        """Recompute all matches for ``term``; the cursor starts at none."""
        if not term:
            return self.clear()
        matches = find_matches(term, content, self.case_sensitive)
        logger.debug("search %r: %d matches", term, len(matches))
        return replace(self, term=term, matches=matches, current_index=-1)

    def clear(self) -> SearchState:
        return SearchState(case_sensitive=self.case_sensitive)

    def refresh(self, content: str) -> SearchState:
        """Recompute matches against re-rendered ``content``, clamping the cursor."""
        if not self.term:
            return self
        matches = find_matches(self.term, content, self.case_sensitive)
        index = min(self.current_index, len(matches) - 1)
        return replace(self, matches=matches, current_index=index)

    def toggle_case_sensitive(self, content: str) -> SearchState:
        """Flip case sensitivity and recompute the match list from scratch."""
        toggled = replace(self, case_sensitive=not self.case_sensitive)
        if not self.term:
            return toggled
        return toggled.set_term(self.term, content)

    def next_match(self) -> SearchState:
        if not self.matches:
            return self
        return replace(self, current_index=(self.current_index + 1) % len(self.matches))

    def prev_match(self) -> SearchState:
        if not self.matches:
            return self
        index = self.current_index - 1
        if index < 0:
            index = len(self.matches) - 1
        return replace(self, current_index=index)

    def status_text(self) -> str:
        if not self.term:
            return ""
        if not self.matches:
            return f"No matches for: {self.term}"
        position = max(0, self.current_index) + 1
        return f"Match {position} of {len(self.matches)}: {self.term}"
