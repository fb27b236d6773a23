"""Rewrite shields.io badge images into plain-text badges.

Runs on the raw Markdown source before rendering, so badges show up as
``[label: message]`` text (and stay clickable when the badge was linked).
"""

from __future__ import annotations

import re
from urllib.parse import parse_qs, unquote_plus, urlparse

_LINKED_BADGE_RE = re.compile(r"\[!\[[^\]]*\]\((https://img\.shields\.io/[^)]+)\)\]\(([^)]+)\)")
_STANDALONE_BADGE_RE = re.compile(r"!\[[^\]]*\]\((https://img\.shields\.io/[^)]+)\)")

_DEFAULT_GITHUB_COLORS = {"license": "blue", "stars": "yellow"}


def _url_decode(value: str) -> str:
    for encoded, decoded in (("%20", " "), ("%2F", "/"), ("%2D", "-"), ("%5F", "_")):
        value = value.replace(encoded, decoded)
    return unquote_plus(value)


def parse_shields_badge(badge_url: str) -> tuple[str, str, str]:
    """Extract ``(label, message, color)`` from a shields.io badge URL.

    Understands GitHub license/stars badges and static
    ``/badge/<label>-<message>-<color>`` badges; anything else falls back to
    the URL path as the label.
    """
    try:
        parsed = urlparse(badge_url)
    except ValueError:
        return "badge", "", ""
    path = parsed.path.lstrip("/")
    query = parse_qs(parsed.query)

    for kind in ("license", "stars"):
        prefix = f"github/{kind}/"
        if path.startswith(prefix):
            parts = path.split("/")
            if len(parts) >= 4:
                user = parts[2]
                repo = parts[3].removesuffix(".svg")
                color = query.get("color", [""])[0] or _DEFAULT_GITHUB_COLORS[kind]
                return kind, f"{user}/{repo}", color

    if path.startswith("badge/"):
        parts = path[len("badge/"):].split("-")
        if len(parts) >= 3:
            label = "-".join(parts[:-2])
            message = parts[-2]
            color = parts[-1]
        elif len(parts) == 2:
            label, message, color = parts[0], parts[1], ""
        else:
            label, message, color = parts[0], "", ""
        return _url_decode(label), _url_decode(message), color

    return path, "", ""


def format_badge_text(label: str, message: str) -> str:
    if label and message:
        return f"[{label}: {message}]"
    if label:
        return f"[{label}]"
    return "[badge]"


def process_badges(markdown: str) -> str:
    """Replace linked and standalone shields.io badges in ``markdown``.

    Linked badges become ``[[label: message]](link)`` so the link survives.
    """

    def linked(match: re.Match[str]) -> str:
        label, message, _color = parse_shields_badge(match.group(1))
        return f"[{format_badge_text(label, message)}]({match.group(2)})"

    def standalone(match: re.Match[str]) -> str:
        label, message, _color = parse_shields_badge(match.group(1))
        return format_badge_text(label, message)

    result = _LINKED_BADGE_RE.sub(linked, markdown)
    return _STANDALONE_BADGE_RE.sub(standalone, result)
