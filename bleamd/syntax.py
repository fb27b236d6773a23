"""Pygments-backed highlighting for fenced code blocks."""

from __future__ import annotations

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

_FALLBACK_STYLE = "monokai"
_FORMATTERS: dict[str, Terminal256Formatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()


def _normalize_style(style: str) -> str:
    """Validate/canonicalize requested style name with cache-backed checks."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return _FALLBACK_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return _FALLBACK_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    """Return cached Pygments terminal formatter for style name."""
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def highlight_code(code: str, language: str, style: str = _FALLBACK_STYLE) -> list[str]:
    """Highlight ``code`` as ``language`` and return one styled string per line.

    Unknown languages are rendered through the plain text lexer.
    """
    formatter = _formatter_for_style(_normalize_style(style))
    try:
        lexer = get_lexer_by_name(language) if language else TextLexer()
    except ClassNotFound:
        lexer = TextLexer()
    rendered = pygments_highlight(code, lexer, formatter)
    return rendered.rstrip("\n").split("\n")
