"""Search highlight compositing over styled and hyperlinked lines."""

from __future__ import annotations

import unittest

from bleamd.ansi import strip_ansi
from bleamd.highlight import highlight, highlight_line
from bleamd.search import find_matches

CUR = "<C>"
OTHER = "<O>"
RST = "<R>"


class HighlightLineTests(unittest.TestCase):
    def test_current_and_other_matches_get_distinct_styles(self) -> None:
        content = "a foo b foo c"
        matches = find_matches("foo", content)
        result = highlight(content, matches, 1, CUR, OTHER, RST)
        self.assertEqual(result, "a <O>foo<R> b <C>foo<R> c")

    def test_no_current_match_uses_other_style_everywhere(self) -> None:
        matches = find_matches("foo", "foo foo")
        result = highlight("foo foo", matches, -1, CUR, OTHER, RST)
        self.assertEqual(result, "<O>foo<R> <O>foo<R>")

    def test_active_style_is_replayed_after_match(self) -> None:
        line = "\x1b[1mfoo bar\x1b[0m"
        matches = find_matches("foo", line)
        result = highlight_line(line, matches, matches[0], CUR, OTHER, RST)
        self.assertEqual(result, "\x1b[1m<C>foo<R>\x1b[1m bar\x1b[0m")

    def test_control_runs_between_matches_survive(self) -> None:
        line = "foo \x1b[32mgreen\x1b[0m foo"
        matches = find_matches("foo", line)
        result = highlight_line(line, matches, None, CUR, OTHER, RST)
        self.assertIn("\x1b[32mgreen\x1b[0m", result)
        self.assertEqual(result.count("<O>"), 2)

    def test_hyperlink_marker_inside_match_is_kept(self) -> None:
        opener = "\x1b]8;;http://x.io\x1b\\"
        closer = "\x1b]8;;\x1b\\"
        line = f"see {opener}docs{closer} now"
        matches = find_matches("docs now", line)
        result = highlight_line(line, matches, matches[0], "\x1b[7m", "\x1b[4m", "\x1b[0m")

        self.assertIn(opener, result)
        self.assertIn(closer, result)
        self.assertEqual(strip_ansi(result), "see docs now")

    def test_plain_projection_is_unchanged(self) -> None:
        content = "\x1b[31mred foo\x1b[0m\nplain foo and foo"
        matches = find_matches("foo", content)
        result = highlight(content, matches, 0)
        self.assertEqual(strip_ansi(result), strip_ansi(content))

    def test_stale_matches_are_skipped(self) -> None:
        matches = find_matches("longer text", "longer text")
        self.assertEqual(highlight_line("short", matches, None, CUR, OTHER, RST), "short")

    def test_empty_match_list_returns_content(self) -> None:
        self.assertEqual(highlight("abc", (), -1), "abc")


if __name__ == "__main__":
    unittest.main()
