"""shields.io badge parsing and Markdown rewriting."""

from __future__ import annotations

import unittest

from bleamd.badges import format_badge_text, parse_shields_badge, process_badges


class ParseShieldsBadgeTests(unittest.TestCase):
    def test_known_badge_urls(self) -> None:
        cases = (
            (
                "https://img.shields.io/github/license/guttermonk/bleamd.svg?style=for-the-badge",
                ("license", "guttermonk/bleamd", "blue"),
            ),
            (
                "https://img.shields.io/github/stars/guttermonk/bleamd?style=for-the-badge",
                ("stars", "guttermonk/bleamd", "yellow"),
            ),
            (
                "https://img.shields.io/badge/build-passing-green",
                ("build", "passing", "green"),
            ),
        )
        for url, expected in cases:
            with self.subTest(url=url):
                self.assertEqual(parse_shields_badge(url), expected)

    def test_github_badge_color_query_overrides_default(self) -> None:
        label, _message, color = parse_shields_badge("https://img.shields.io/github/license/a/b?color=red")
        self.assertEqual((label, color), ("license", "red"))

    def test_static_badge_labels_are_url_decoded(self) -> None:
        label, message, color = parse_shields_badge("https://img.shields.io/badge/code%20style-black-000000")
        self.assertEqual((label, message, color), ("code style", "black", "000000"))

    def test_unknown_path_falls_back_to_path_label(self) -> None:
        self.assertEqual(
            parse_shields_badge("https://img.shields.io/pypi/v/requests"),
            ("pypi/v/requests", "", ""),
        )

    def test_format_badge_text(self) -> None:
        self.assertEqual(format_badge_text("build", "passing"), "[build: passing]")
        self.assertEqual(format_badge_text("build", ""), "[build]")
        self.assertEqual(format_badge_text("", ""), "[badge]")


class ProcessBadgesTests(unittest.TestCase):
    def test_linked_license_badge(self) -> None:
        source = (
            "[![GitHub license](https://img.shields.io/github/license/guttermonk/bleamd.svg)]"
            "(https://github.com/guttermonk/bleamd/blob/master/LICENSE)"
        )
        self.assertEqual(
            process_badges(source),
            "[[license: guttermonk/bleamd]](https://github.com/guttermonk/bleamd/blob/master/LICENSE)",
        )

    def test_linked_stars_badge(self) -> None:
        source = (
            "[![GitHub stars](https://img.shields.io/github/stars/guttermonk/bleamd)]"
            "(https://github.com/guttermonk/bleamd/stargazers)"
        )
        self.assertIn("[stars: guttermonk/bleamd]", process_badges(source))

    def test_standalone_badge(self) -> None:
        source = "Status: ![Build](https://img.shields.io/badge/build-passing-green) done"
        self.assertEqual(process_badges(source), "Status: [build: passing] done")

    def test_other_images_are_untouched(self) -> None:
        source = "![logo](https://example.com/logo.png)"
        self.assertEqual(process_badges(source), source)


if __name__ == "__main__":
    unittest.main()
