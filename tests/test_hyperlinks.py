"""Hyperlink injection and link hit-table tests.

Protects the bracket scan against the ``[`` inside style sequences and checks
hover-dependent underline colors and on-screen link positions.
"""

from __future__ import annotations

import unittest

from bleamd.ansi import strip_ansi
from bleamd.hyperlinks import (
    LinkSpan,
    LinkStyle,
    extract_links,
    find_link_markup,
    hyperlink,
    inject_hyperlinks,
    link_at,
)

STYLE = LinkStyle(underline="<U>", hovered_underline="<H>")


class InjectHyperlinksTests(unittest.TestCase):
    def test_plain_markup_becomes_osc8_link(self) -> None:
        result = inject_hyperlinks("see [docs](http://example.com) now", style=STYLE)
        self.assertEqual(result, "see " + hyperlink("http://example.com", "docs", "<U>") + " now")

    def test_hyperlink_sequence_layout(self) -> None:
        self.assertEqual(
            hyperlink("http://a.b", "t", "\x1b[58;5;39m"),
            "\x1b[58;5;39m\x1b[4m\x1b]8;;http://a.b\x1b\\t\x1b]8;;\x1b\\\x1b[59m\x1b[24m",
        )
        self.assertEqual(hyperlink("http://a.b", "t"), "\x1b[4m\x1b]8;;http://a.b\x1b\\t\x1b]8;;\x1b\\\x1b[24m")

    def test_colored_url_is_stripped(self) -> None:
        text = "[docs](\x1b[38;5;33mhttp://example.com\x1b[0m)"
        (candidate,) = find_link_markup(text)
        self.assertEqual(candidate.url, "http://example.com")

    def test_brackets_inside_style_sequences_are_ignored(self) -> None:
        text = "\x1b[1mbold \x1b[38;5;75m[\x1b[4mlink\x1b[0m](https://a.io)\x1b[0m"
        (candidate,) = find_link_markup(text)
        self.assertEqual(candidate.text, "\x1b[4mlink\x1b[0m")
        self.assertEqual(candidate.url, "https://a.io")
        self.assertEqual(text[candidate.start], "[")

        injected = inject_hyperlinks(text, style=STYLE)
        self.assertTrue(injected.startswith("\x1b[1mbold \x1b[38;5;75m<U>"))
        self.assertEqual(strip_ansi(injected).replace("<U>", ""), "bold link")

    def test_link_at_line_start_is_found(self) -> None:
        (candidate,) = find_link_markup("[a](mailto:me@x.org)")
        self.assertEqual(candidate.start, 0)
        self.assertEqual(candidate.url, "mailto:me@x.org")

    def test_title_after_url_is_dropped(self) -> None:
        (candidate,) = find_link_markup('[a](http://x.com "Title")')
        self.assertEqual(candidate.url, "http://x.com")

    def test_nearest_bracket_opens_link_text(self) -> None:
        (candidate,) = find_link_markup("[[license: a/b]](https://github.com/a/b)")
        self.assertEqual(candidate.start, 1)
        self.assertEqual(candidate.text, "license: a/b]")

    def test_literal_close_bracket_stays_in_link_text(self) -> None:
        injected = inject_hyperlinks("[x] y](https://u.example)", style=STYLE)
        self.assertEqual(injected, hyperlink("https://u.example", "x] y", "<U>"))

    def test_non_url_targets_are_left_literal(self) -> None:
        for text in ("[a](./other.md)", "[a](#anchor)", "[a](http://x", "a](http://x)"):
            with self.subTest(text=text):
                self.assertEqual(inject_hyperlinks(text, style=STYLE), text)

    def test_links_do_not_span_lines(self) -> None:
        text = "[a\nb](http://x.y)"
        self.assertEqual(inject_hyperlinks(text, style=STYLE), text)

    def test_multiple_links_are_replaced(self) -> None:
        result = inject_hyperlinks("[a](http://a.io) and [b](http://b.io)", style=STYLE)
        self.assertEqual(
            result,
            hyperlink("http://a.io", "a", "<U>") + " and " + hyperlink("http://b.io", "b", "<U>"),
        )

    def test_hover_swaps_only_matching_link_color(self) -> None:
        text = "[a](http://a.io) [b](http://b.io)"
        hovered = inject_hyperlinks(text, hover_url="http://b.io", style=STYLE)
        self.assertEqual(
            hovered,
            hyperlink("http://a.io", "a", "<U>") + " " + hyperlink("http://b.io", "b", "<H>"),
        )
        self.assertNotIn("<H>", inject_hyperlinks(text, hover_url="http://c.io", style=STYLE))


class ExtractLinksTests(unittest.TestCase):
    def test_positions_are_visible_columns(self) -> None:
        text = "\x1b[1mab\x1b[0m " + hyperlink("http://x.io", "\x1b[34mlink\x1b[0m", "\x1b[58;5;39m")
        text += "\n" + "  " + hyperlink("http://y.io", "two")
        links = extract_links(text)
        self.assertEqual(
            links,
            [
                LinkSpan(url="http://x.io", text="link", x=3, y=0, width=4),
                LinkSpan(url="http://y.io", text="two", x=2, y=1, width=3),
            ],
        )

    def test_bel_terminated_links_are_found(self) -> None:
        (link,) = extract_links("x\x1b]8;;http://b.io\x07bel\x1b]8;;\x07")
        self.assertEqual((link.url, link.x, link.width), ("http://b.io", 1, 3))

    def test_link_at_hit_tests_cells(self) -> None:
        links = [LinkSpan(url="u", text="link", x=3, y=0, width=4)]
        self.assertIsNotNone(link_at(links, 3, 0))
        self.assertIsNotNone(link_at(links, 6, 0))
        self.assertIsNone(link_at(links, 7, 0))
        self.assertIsNone(link_at(links, 4, 1))


if __name__ == "__main__":
    unittest.main()
