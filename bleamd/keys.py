"""Key map: normalized key tokens to viewer actions.

Config files name keys loosely (``Up``, ``ArrowUp``, ``PgDn``, ``C-d``,
``Ctrl+d``). Those names are normalized once into the tokens produced by
:func:`bleamd.input.read_key`, so dispatch is a single dict lookup.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum

from .config import Keybindings


class Action(Enum):
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    SCROLL_LEFT = "scroll_left"
    SCROLL_RIGHT = "scroll_right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    GO_TO_TOP = "go_to_top"
    GO_TO_BOTTOM = "go_to_bottom"
    START_SEARCH = "start_search"
    NEXT_MATCH = "next_match"
    PREV_MATCH = "prev_match"
    CLEAR_SEARCH = "clear_search"
    SHOW_HELP = "show_help"
    QUIT = "quit"
    TOGGLE_MOUSE = "toggle_mouse"
    TOGGLE_CASE = "toggle_case"


_ALIASES = {
    "up": "UP",
    "arrowup": "UP",
    "down": "DOWN",
    "arrowdown": "DOWN",
    "left": "LEFT",
    "arrowleft": "LEFT",
    "right": "RIGHT",
    "arrowright": "RIGHT",
    "pgup": "PGUP",
    "pageup": "PGUP",
    "pgdn": "PGDN",
    "pgdown": "PGDN",
    "pagedn": "PGDN",
    "pagedown": "PGDN",
    "home": "HOME",
    "end": "END",
    "space": "SPACE",
    "esc": "ESC",
    "escape": "ESC",
    "enter": "ENTER",
    "return": "ENTER",
    "tab": "TAB",
    "backspace": "BACKSPACE",
}

_LABELS = {
    "UP": "↑",
    "DOWN": "↓",
    "LEFT": "←",
    "RIGHT": "→",
    "PGUP": "PgUp",
    "PGDN": "PgDn",
    "HOME": "Home",
    "END": "End",
    "SPACE": "Space",
    "ESC": "Esc",
    "ENTER": "Enter",
    "TAB": "Tab",
    "BACKSPACE": "Backspace",
}


def normalize_key(name: str) -> str:
    """Return the input token for a config key name.

    Single characters keep their case, so ``g`` and ``G`` stay distinct.
    """
    if name == " ":
        return "SPACE"
    text = name.strip()
    if len(text) == 1:
        return text
    lowered = text.lower()
    if lowered in _ALIASES:
        return _ALIASES[lowered]
    for prefix in ("c-", "ctrl+", "ctrl-"):
        if lowered.startswith(prefix) and len(text) == len(prefix) + 1:
            return "CTRL_" + text[-1].upper()
    if text.upper().startswith("CTRL_") or text.upper() in _LABELS:
        return text.upper()
    return text


def key_label(token: str) -> str:
    """Short human label for a key token, for status hints and help."""
    if token in _LABELS:
        return _LABELS[token]
    if token.startswith("CTRL_"):
        return "Ctrl+" + token[len("CTRL_"):].lower()
    return token


@dataclass
class KeyMap:
    bindings: dict[str, Action]
    keys_by_action: dict[Action, list[str]]

    @classmethod
    def from_keybindings(cls, keybindings: Keybindings) -> KeyMap:
        """Build the lookup tables; a key bound twice keeps its first action."""
        bindings: dict[str, Action] = {}
        keys_by_action: dict[Action, list[str]] = {}
        for item in fields(Keybindings):
            action = Action(item.name)
            tokens = [normalize_key(name) for name in getattr(keybindings, item.name)]
            keys_by_action[action] = tokens
            for token in tokens:
                bindings.setdefault(token, action)
        return cls(bindings=bindings, keys_by_action=keys_by_action)

    def action_for(self, key: str) -> Action | None:
        return self.bindings.get(key)

    def is_bound(self, key: str, action: Action) -> bool:
        return self.bindings.get(key) is action

    def labels(self, action: Action) -> list[str]:
        return [key_label(token) for token in self.keys_by_action.get(action, [])]

    def first_label(self, action: Action) -> str:
        labels = self.labels(action)
        return labels[0] if labels else ""
