"""Command-line front door for bleamd.

Parses CLI options, loads Markdown from a file or stdin, and either prints
the rendered document or launches the interactive viewer.
"""

from __future__ import annotations

import argparse
import logging
import os
import shutil
import sys
from pathlib import Path

from . import __version__
from .badges import process_badges
from .config import CONFIG_PATH, Config, available_theme_names, load_config, save_config, theme_config
from .hyperlinks import inject_hyperlinks
from .markdown import render
from .runtime import run_viewer

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_render_width() -> int:
    """Resolve default render width from current terminal size."""
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def configure_logging(log_file: str | None) -> logging.Logger:
    """Send package logs to ``log_file``, or nowhere when it is not given.

    Logging never goes to the terminal, which the viewer owns.
    """
    logger = logging.getLogger("bleamd")
    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.setLevel(logging.DEBUG)
    else:
        handler = logging.NullHandler()
    logger.addHandler(handler)
    return logger


def render_document(markdown: str, config: Config, width: int) -> str:
    """Render ``markdown`` with hyperlinks injected, as printed by ``--nopager``."""
    rendered = render(process_badges(markdown), width, theme=config.markdown_theme())
    return inject_hyperlinks(rendered, style=config.link_style())


def init_config(theme: str) -> None:
    config = theme_config(theme)
    if config is None:
        raise SystemExit(f"Unknown theme: {theme} (available: {', '.join(available_theme_names())})")
    if CONFIG_PATH.exists():
        print(f"Config file already exists: {CONFIG_PATH}")
        return
    try:
        save_config(config)
    except OSError as exc:
        raise SystemExit(f"Failed to write config {CONFIG_PATH}: {exc}") from exc
    print(f"Wrote {theme} config to {CONFIG_PATH}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bleamd",
        description="View Markdown in the terminal with search and clickable links.",
    )
    parser.add_argument("paths", nargs="*", metavar="FILE", help="Markdown file to view. Reads stdin when omitted.")
    parser.add_argument("--version", action="store_true", help="Print the version and exit.")
    parser.add_argument(
        "--init-config",
        nargs="?",
        const="default",
        default=None,
        metavar="THEME",
        help=f"Write a theme to the config file ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--config-path", action="store_true", help="Print the config file location and exit.")
    parser.add_argument("--nopager", action="store_true", help="Print the rendered document without paging.")
    parser.add_argument(
        "--width",
        type=_positive_int,
        default=None,
        help="Render width for --nopager output (default: terminal width).",
    )
    parser.add_argument("--log-file", metavar="PATH", default=None, help="Write debug logs to PATH.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and view a Markdown file or stdin."""
    args = build_parser().parse_args(argv)
    logger = configure_logging(args.log_file)

    if args.version or args.paths == ["version"]:
        print(f"bleamd {__version__}")
        return
    if args.config_path:
        print(CONFIG_PATH)
        return
    if args.init_config is not None:
        init_config(args.init_config)
        return

    if len(args.paths) > 1:
        raise SystemExit("Only one file can be viewed at a time.")
    if args.paths:
        path = Path(args.paths[0])
        if not path.is_file():
            raise SystemExit(f"File not found: {path}")
        try:
            markdown = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise SystemExit(f"Cannot read {path}: {exc}") from exc
        # Relative links and images resolve against the document's directory.
        os.chdir(path.resolve().parent)
    elif not sys.stdin.isatty():
        markdown = sys.stdin.read()
    else:
        raise SystemExit("Usage: bleamd FILE  or  bleamd < FILE")

    config = load_config()
    if args.nopager or not sys.stdout.isatty():
        width = args.width if args.width is not None else _default_render_width()
        sys.stdout.write(render_document(markdown, config, width))
        return
    logger.debug("viewing %s", args.paths[0] if args.paths else "<stdin>")
    run_viewer(markdown, config, logger)


if __name__ == "__main__":
    main()
