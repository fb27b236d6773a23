"""Open a URL with the platform's default handler.

Returns an error message string instead of raising, so the viewer can show
the failure in its status bar.
"""

from __future__ import annotations

import subprocess
import sys


def opener_command(url: str, platform: str | None = None) -> list[str]:
    platform = platform or sys.platform
    if platform == "darwin":
        return ["open", url]
    if platform.startswith("win"):
        return ["cmd", "/c", "start", "", url]
    return ["xdg-open", url]


def open_url(url: str) -> str | None:
    """Launch the browser for ``url`` without waiting for it to exit."""
    try:
        subprocess.Popen(
            opener_command(url),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        return f"Failed to open {url}: {exc}"
    return None
