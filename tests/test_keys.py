from __future__ import annotations

import unittest

from bleamd.config import Keybindings
from bleamd.keys import Action, KeyMap, key_label, normalize_key


class NormalizeKeyTests(unittest.TestCase):
    def test_aliases_map_to_input_tokens(self) -> None:
        cases = {
            "Up": "UP",
            "ArrowUp": "UP",
            "PageDown": "PGDN",
            "PgDn": "PGDN",
            "pgup": "PGUP",
            "Space": "SPACE",
            " ": "SPACE",
            "Escape": "ESC",
            "Esc": "ESC",
            "C-d": "CTRL_D",
            "Ctrl+u": "CTRL_U",
            "Enter": "ENTER",
            "Home": "HOME",
        }
        for name, token in cases.items():
            with self.subTest(name=name):
                self.assertEqual(normalize_key(name), token)

    def test_single_characters_keep_case(self) -> None:
        self.assertEqual(normalize_key("g"), "g")
        self.assertEqual(normalize_key("G"), "G")
        self.assertEqual(normalize_key("/"), "/")

    def test_key_labels(self) -> None:
        self.assertEqual(key_label("CTRL_L"), "Ctrl+l")
        self.assertEqual(key_label("PGDN"), "PgDn")
        self.assertEqual(key_label("n"), "n")


class KeyMapTests(unittest.TestCase):
    def test_default_bindings_dispatch(self) -> None:
        keymap = KeyMap.from_keybindings(Keybindings())
        self.assertIs(keymap.action_for("j"), Action.SCROLL_DOWN)
        self.assertIs(keymap.action_for("DOWN"), Action.SCROLL_DOWN)
        self.assertIs(keymap.action_for("SPACE"), Action.PAGE_DOWN)
        self.assertIs(keymap.action_for("CTRL_D"), Action.PAGE_DOWN)
        self.assertIs(keymap.action_for("G"), Action.GO_TO_BOTTOM)
        self.assertIs(keymap.action_for("CTRL_C"), Action.QUIT)
        self.assertIsNone(keymap.action_for("z"))

    def test_custom_bindings_replace_defaults(self) -> None:
        keymap = KeyMap.from_keybindings(Keybindings(quit=["x"]))
        self.assertIs(keymap.action_for("x"), Action.QUIT)
        self.assertIsNone(keymap.action_for("q"))
        self.assertTrue(keymap.is_bound("x", Action.QUIT))
        self.assertFalse(keymap.is_bound("q", Action.QUIT))

    def test_first_binding_wins_on_conflict(self) -> None:
        keymap = KeyMap.from_keybindings(Keybindings(scroll_up=["k"], quit=["k"]))
        self.assertIs(keymap.action_for("k"), Action.SCROLL_UP)

    def test_labels_follow_config_order(self) -> None:
        keymap = KeyMap.from_keybindings(Keybindings())
        self.assertEqual(keymap.labels(Action.PAGE_UP), ["PgUp", "b", "Ctrl+u"])
        self.assertEqual(keymap.first_label(Action.START_SEARCH), "/")


if __name__ == "__main__":
    unittest.main()
