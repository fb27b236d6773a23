from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .hyperlinks import LinkSpan
from .search import SearchState


class Mode(Enum):
    READING = "reading"
    SEARCHING = "searching"
    SEARCH_NAV = "search_nav"
    HELP = "help"


@dataclass(frozen=True)
class ViewState:
    width: int = 80
    height: int = 24
    mode: Mode = Mode.READING
    x_offset: int = 0
    y_offset: int = 0
    search_input: str = ""
    search: SearchState = SearchState()
    hovered_url: str | None = None
    mouse_enabled: bool = True
    links: tuple[LinkSpan, ...] = ()
    message: str = ""

    @property
    def prompt_open(self) -> bool:
        return self.mode is Mode.SEARCHING

    def content_rows(self) -> int:
        """Rows left for document text after status bar, search row and prompt."""
        rows = self.height - 1
        if self.search.active:
            rows -= 1
        if self.prompt_open:
            rows -= 3
        return max(1, rows)
