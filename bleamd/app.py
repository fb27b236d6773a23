"""Viewer controller: document pipeline plus key and mouse transitions.

``Viewer`` owns the raw Markdown, renders it for the current width, injects
hyperlinks for the current hover target, and keeps search matches in sync
with that exact text. Every event produces a new immutable ``ViewState``;
nothing here touches the terminal.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace

from .ansi import visible_length
from .badges import process_badges
from .browser import open_url
from .config import Config
from .hyperlinks import inject_hyperlinks, link_at
from .input import parse_mouse_token
from .keys import Action, KeyMap
from .markdown import render
from .render import Frame, build_frame
from .search import SearchState
from .state import Mode, ViewState

HORIZONTAL_STEP = 4
_CANCEL_KEYS = {"ESC", "CTRL_C", "CTRL_G"}


class Viewer:
    def __init__(
        self,
        markdown: str,
        config: Config | None = None,
        width: int = 80,
        height: int = 24,
        logger: logging.Logger | None = None,
        opener: Callable[[str], str | None] = open_url,
    ) -> None:
        self.config = config or Config()
        self.keymap = KeyMap.from_keybindings(self.config.keybindings)
        self.logger = logger or logging.getLogger(__name__)
        self._opener = opener
        self._theme = self.config.markdown_theme()
        self._link_style = self.config.link_style()
        self.source = process_badges(markdown)
        self.state = ViewState(width=max(1, width), height=max(1, height))
        self.document = ""
        self._rendered = ""
        self._rendered_width = -1
        self._line_count = 0
        self._max_line_width = 0
        self._rebuild()

    # -- document pipeline --------------------------------------------------

    def _rebuild(self) -> None:
        width = self.state.width
        if width != self._rendered_width:
            self._rendered = render(self.source, width, theme=self._theme).rstrip("\n")
            self._rendered_width = width
            self.logger.debug("rendered document at width %d", width)
        self.document = inject_hyperlinks(self._rendered, self.state.hovered_url, self._link_style)
        lines = self.document.split("\n")
        self._line_count = len(lines)
        self._max_line_width = max((visible_length(line) for line in lines), default=0)
        search = self.state.search.refresh(self.document)
        self.state = replace(self.state, search=search)
        self._clamp()

    @property
    def line_count(self) -> int:
        return self._line_count

    def max_y_offset(self) -> int:
        return max(0, self._line_count - self.state.content_rows())

    def max_x_offset(self) -> int:
        return max(0, self._max_line_width - self.state.width)

    def _clamp(self) -> None:
        y = min(max(0, self.state.y_offset), self.max_y_offset())
        x = min(max(0, self.state.x_offset), self.max_x_offset())
        if (x, y) != (self.state.x_offset, self.state.y_offset):
            self.state = replace(self.state, x_offset=x, y_offset=y)

    def _set(self, **changes: object) -> None:
        self.state = replace(self.state, **changes)
        self._clamp()

    def scroll_by(self, dy: int = 0, dx: int = 0) -> None:
        self._set(y_offset=self.state.y_offset + dy, x_offset=self.state.x_offset + dx)

    def scroll_to_line(self, line: int) -> None:
        """Scroll so ``line`` sits in the middle of the content area."""
        self._set(y_offset=line - self.state.content_rows() // 2)

    def _scroll_to_current_match(self) -> None:
        match = self.state.search.current_match
        if match is not None:
            self.scroll_to_line(match.line_number)

    def resize(self, width: int, height: int) -> None:
        self.state = replace(self.state, width=max(1, width), height=max(1, height))
        self._rebuild()

    def set_hover(self, url: str | None) -> None:
        if url == self.state.hovered_url:
            return
        self.state = replace(self.state, hovered_url=url)
        self._rebuild()

    # -- search -------------------------------------------------------------

    def _search_done_mode(self, search: SearchState) -> Mode:
        return Mode.SEARCH_NAV if search.active else Mode.READING

    def execute_search(self, term: str) -> None:
        term = term.strip()
        if not term:
            self.cancel_search_prompt()
            return
        search = self.state.search.set_term(term, self.document).next_match()
        self._set(mode=Mode.SEARCH_NAV, search=search, search_input="")
        self._scroll_to_current_match()

    def cancel_search_prompt(self) -> None:
        self._set(mode=self._search_done_mode(self.state.search), search_input="")

    def clear_search(self) -> None:
        self._set(mode=Mode.READING, search=self.state.search.clear(), search_input="")

    def _move_match(self, forward: bool) -> None:
        search = self.state.search
        if not search.active:
            return
        search = search.next_match() if forward else search.prev_match()
        self._set(search=search)
        self._scroll_to_current_match()

    def _toggle_case(self) -> None:
        search = self.state.search.toggle_case_sensitive(self.document)
        if search.active:
            search = search.next_match()
        self._set(search=search)
        self._scroll_to_current_match()

    def _handle_search_input(self, key: str) -> bool:
        text = self.state.search_input
        if key == "ENTER":
            self.execute_search(text)
        elif key in _CANCEL_KEYS:
            self.cancel_search_prompt()
        elif key == "BACKSPACE":
            self._set(search_input=text[:-1])
        elif key == "SPACE":
            self._set(search_input=text + " ")
        elif len(key) == 1 and key.isprintable():
            self._set(search_input=text + key)
        return False

    # -- events -------------------------------------------------------------

    def perform(self, action: Action) -> bool:
        """Run ``action``; returns ``True`` when the viewer should quit."""
        page = max(1, self.state.height // 2)
        if action is Action.QUIT:
            return True
        if action is Action.SCROLL_UP:
            self.scroll_by(dy=-1)
        elif action is Action.SCROLL_DOWN:
            self.scroll_by(dy=1)
        elif action is Action.SCROLL_LEFT:
            self.scroll_by(dx=-HORIZONTAL_STEP)
        elif action is Action.SCROLL_RIGHT:
            self.scroll_by(dx=HORIZONTAL_STEP)
        elif action is Action.PAGE_UP:
            self.scroll_by(dy=-page)
        elif action is Action.PAGE_DOWN:
            self.scroll_by(dy=page)
        elif action is Action.GO_TO_TOP:
            self._set(y_offset=0)
        elif action is Action.GO_TO_BOTTOM:
            self._set(y_offset=self.max_y_offset())
        elif action is Action.START_SEARCH:
            self._set(mode=Mode.SEARCHING, search_input="")
        elif action is Action.NEXT_MATCH:
            self._move_match(forward=True)
        elif action is Action.PREV_MATCH:
            self._move_match(forward=False)
        elif action is Action.CLEAR_SEARCH:
            self.clear_search()
        elif action is Action.SHOW_HELP:
            self._set(mode=Mode.HELP)
        elif action is Action.TOGGLE_MOUSE:
            enabled = not self.state.mouse_enabled
            self._set(mouse_enabled=enabled)
            if not enabled:
                self.set_hover(None)
            self.logger.debug("mouse capture %s", "on" if enabled else "off")
        elif action is Action.TOGGLE_CASE:
            self._toggle_case()
        return False

    def handle_key(self, key: str) -> bool:
        """Apply one input token; returns ``True`` when the viewer should quit."""
        mouse = parse_mouse_token(key)
        if mouse is not None:
            self.handle_mouse(*mouse)
            return False
        if self.state.message:
            self._set(message="")

        mode = self.state.mode
        if mode is Mode.HELP:
            self._set(mode=self._search_done_mode(self.state.search))
            return False
        if mode is Mode.SEARCHING:
            return self._handle_search_input(key)
        if mode is Mode.SEARCH_NAV:
            if key == "ESC" or (key == "q" and not self.keymap.is_bound("q", Action.QUIT)):
                self.clear_search()
                return False

        action = self.keymap.action_for(key)
        if action is None:
            return False
        return self.perform(action)

    def handle_mouse(self, kind: str, x: int, y: int) -> None:
        """Apply a decoded mouse event at zero-based screen cell ``(x, y)``."""
        if self.state.mode is Mode.HELP or not self.state.mouse_enabled:
            return
        if kind == "WHEEL_UP":
            self.scroll_by(dy=-1)
        elif kind == "WHEEL_DOWN":
            self.scroll_by(dy=1)
        elif kind == "MOVE":
            link = link_at(list(self.state.links), x, y)
            self.set_hover(link.url if link is not None else None)
        elif kind == "LEFT_DOWN":
            link = link_at(list(self.state.links), x, y)
            if link is None:
                return
            self.logger.info("opening %s", link.url)
            error = self._opener(link.url)
            if error:
                self.logger.warning("%s", error)
            self._set(message=error or "")

    def frame(self) -> Frame:
        """Build the current screen and remember its link table for hit-testing."""
        frame = build_frame(self.document, self.state, self.keymap, self.config)
        self.state = replace(self.state, links=frame.links)
        return frame
