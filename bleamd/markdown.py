"""Markdown renderer -- turns Markdown source into styled terminal text.

Parsing is done by ``markdown-it-py``; fenced code goes through Pygments.
Links are emitted as ``[text](url)`` markup with a colored URL, leaving the
conversion to clickable OSC 8 hyperlinks to :mod:`bleamd.hyperlinks`. Link
markup is wrapped as one unit measured by its text only, since the URL part
disappears once the link is injected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .ansi import RESET, visible_length
from .hyperlinks import looks_like_url
from .syntax import highlight_code

BOLD = "\x1b[1m"
ITALIC = "\x1b[3m"
STRIKE = "\x1b[9m"
DEFAULT_LEFT_PAD = 4
MIN_TEXT_WIDTH = 20

_WHITESPACE_RE = re.compile(r"(\s+)")
_INLINE_STYLES = {
    "strong_open": BOLD,
    "em_open": ITALIC,
    "s_open": STRIKE,
}
_INLINE_CLOSERS = {"strong_close", "em_close", "s_close"}

_parser = MarkdownIt("commonmark").enable(["table", "strikethrough"])


@dataclass(frozen=True)
class MarkdownTheme:
    """SGR fragments used for each Markdown element."""

    heading: str = "\x1b[1m\x1b[38;5;81m"
    text: str = ""
    link: str = "\x1b[38;5;75m"
    link_url: str = "\x1b[38;5;33m"
    code: str = "\x1b[38;5;215m"
    quote: str = "\x1b[38;5;245m"
    rule: str = "\x1b[38;5;240m"
    list_marker: str = "\x1b[38;5;221m"
    code_style: str = "monokai"


@dataclass
class _Atom:
    text: str
    width: int
    space: bool = False
    newline: bool = False


@dataclass
class _Indent:
    first: str
    rest: str
    width: int
    used: bool = False


@dataclass
class _ListState:
    ordered: bool
    next_number: int = 1


def _styled(text: str, style: str) -> str:
    return f"{style}{text}{RESET}" if style and text else text


def _join_words(atoms: list[_Atom]) -> list[_Atom]:
    """Glue atoms with no whitespace between them, e.g. ``**bold**.``."""
    joined: list[_Atom] = []
    for atom in atoms:
        previous = joined[-1] if joined else None
        if (
            previous is not None
            and not (atom.space or atom.newline)
            and not (previous.space or previous.newline)
        ):
            joined[-1] = _Atom(previous.text + atom.text, previous.width + atom.width)
        else:
            joined.append(atom)
    return joined


def wrap_atoms(atoms: list[_Atom], width: int) -> list[str]:
    """Greedy word wrap over pre-measured atoms; oversized words get their own line."""
    lines: list[str] = []
    current: list[str] = []
    current_width = 0
    pending_space = False
    for atom in _join_words(atoms):
        if atom.newline:
            lines.append("".join(current))
            current, current_width, pending_space = [], 0, False
            continue
        if atom.space:
            pending_space = bool(current)
            continue
        needed = atom.width + (1 if pending_space else 0)
        if current and current_width + needed > width:
            lines.append("".join(current))
            current, current_width = [atom.text], atom.width
        else:
            if pending_space:
                current.append(" ")
                current_width += 1
            current.append(atom.text)
            current_width += atom.width
        pending_space = False
    if current or not lines:
        lines.append("".join(current))
    return lines


class _Renderer:
    def __init__(self, theme: MarkdownTheme, width: int, left_pad: int) -> None:
        self.theme = theme
        self.width = width
        self.left_pad = left_pad
        self.lines: list[str] = []
        self._indents: list[_Indent] = []
        self._lists: list[_ListState] = []

    # -- inline -------------------------------------------------------------

    def _text_atoms(self, content: str, style: str, atoms: list[_Atom]) -> None:
        for piece in _WHITESPACE_RE.split(content):
            if not piece:
                continue
            if piece.isspace():
                atoms.append(_Atom(" ", 1, space=True))
            else:
                atoms.append(_Atom(_styled(piece, style), len(piece)))

    def _link_atom(self, text: str, href: str) -> _Atom:
        if not text:
            text = _styled(href, self.theme.link)
        if looks_like_url(href):
            target = _styled(href, self.theme.link_url)
            return _Atom(f"[{text}]({target})", visible_length(text))
        markup = f"[{text}]({href})"
        return _Atom(markup, visible_length(markup))

    def _flatten(self, children: list[Token], style: str) -> str:
        parts: list[str] = []
        for atom in self.inline_atoms(children, style):
            parts.append(" " if atom.space or atom.newline else atom.text)
        return "".join(parts)

    def inline_atoms(self, children: list[Token] | None, base_style: str = "") -> list[_Atom]:
        atoms: list[_Atom] = []
        styles: list[str] = [base_style] if base_style else []
        tokens = children or []
        i = 0
        while i < len(tokens):
            token = tokens[i]
            kind = token.type
            style = "".join(styles)
            if kind == "text":
                self._text_atoms(token.content, style, atoms)
            elif kind == "softbreak":
                atoms.append(_Atom(" ", 1, space=True))
            elif kind == "hardbreak":
                atoms.append(_Atom("", 0, newline=True))
            elif kind == "code_inline":
                self._text_atoms(token.content, style + self.theme.code, atoms)
            elif kind in _INLINE_STYLES:
                styles.append(_INLINE_STYLES[kind])
            elif kind in _INLINE_CLOSERS:
                if len(styles) > (1 if base_style else 0):
                    styles.pop()
            elif kind == "link_open":
                depth = 1
                j = i + 1
                inner: list[Token] = []
                while j < len(tokens):
                    if tokens[j].type == "link_open":
                        depth += 1
                    elif tokens[j].type == "link_close":
                        depth -= 1
                        if depth == 0:
                            break
                    inner.append(tokens[j])
                    j += 1
                href = str(token.attrGet("href") or "")
                atoms.append(self._link_atom(self._flatten(inner, style + self.theme.link), href))
                i = j + 1
                continue
            elif kind == "image":
                src = str(token.attrGet("src") or "")
                alt = token.content or "image"
                atoms.append(self._link_atom(_styled(alt, style + self.theme.link), src))
            elif kind == "html_inline":
                self._text_atoms(token.content, self.theme.quote, atoms)
            i += 1
        return atoms

    # -- block --------------------------------------------------------------

    def text_width(self) -> int:
        used = self.left_pad + sum(indent.width for indent in self._indents)
        return max(MIN_TEXT_WIDTH, self.width - used)

    def emit(self, text: str) -> None:
        prefix: list[str] = []
        for indent in self._indents:
            prefix.append(indent.rest if indent.used else indent.first)
            indent.used = True
        self.lines.append(" " * self.left_pad + "".join(prefix) + text)

    def blank(self) -> None:
        if self.lines and self.lines[-1] != "":
            self.lines.append("")

    def emit_wrapped(self, atoms: list[_Atom]) -> None:
        for line in wrap_atoms(atoms, self.text_width()):
            self.emit(line)

    def render(self, tokens: list[Token]) -> list[str]:
        i = 0
        while i < len(tokens):
            i = self._render_block(tokens, i)
        while self.lines and self.lines[-1] == "":
            self.lines.pop()
        return self.lines

    def _render_block(self, tokens: list[Token], i: int) -> int:
        token = tokens[i]
        kind = token.type
        theme = self.theme

        if kind == "heading_open":
            level = int(token.tag[1:]) if token.tag[1:].isdigit() else 1
            marker = _Atom(_styled("#" * level, theme.heading), level)
            atoms = [marker, _Atom(" ", 1, space=True)]
            atoms.extend(self.inline_atoms(tokens[i + 1].children, theme.heading))
            self.emit_wrapped(atoms)
            self.blank()
            return i + 3
        if kind == "paragraph_open":
            self.emit_wrapped(self.inline_atoms(tokens[i + 1].children, theme.text))
            if not token.hidden:
                self.blank()
            return i + 3
        if kind in ("bullet_list_open", "ordered_list_open"):
            ordered = kind == "ordered_list_open"
            start = token.attrGet("start") if ordered else None
            self._lists.append(_ListState(ordered=ordered, next_number=int(start or 1)))
            return i + 1
        if kind in ("bullet_list_close", "ordered_list_close"):
            if self._lists:
                self._lists.pop()
            if not self._lists:
                self.blank()
            return i + 1
        if kind == "list_item_open":
            state = self._lists[-1] if self._lists else _ListState(ordered=False)
            if state.ordered:
                marker = f"{state.next_number}."
                state.next_number += 1
            else:
                marker = "•"
            width = len(marker) + 1
            self._indents.append(_Indent(_styled(marker, theme.list_marker) + " ", " " * width, width))
            return i + 1
        if kind == "blockquote_open":
            bar = _styled("│", theme.quote) + " "
            self._indents.append(_Indent(bar, bar, 2))
            return i + 1
        if kind in ("list_item_close", "blockquote_close"):
            if self._indents:
                self._indents.pop()
            if kind == "blockquote_close":
                self.blank()
            return i + 1
        if kind in ("fence", "code_block"):
            language = token.info.strip().split()[0] if token.info.strip() else ""
            for line in highlight_code(token.content, language, theme.code_style):
                self.emit("  " + line)
            self.blank()
            return i + 1
        if kind == "hr":
            self.emit(_styled("─" * self.text_width(), theme.rule))
            self.blank()
            return i + 1
        if kind == "table_open":
            return self._render_table(tokens, i)
        if kind == "html_block":
            for line in token.content.rstrip("\n").split("\n"):
                self.emit(_styled(line, theme.quote))
            self.blank()
            return i + 1
        return i + 1

    def _render_table(self, tokens: list[Token], i: int) -> int:
        rows: list[list[tuple[str, int]]] = []
        header_rows = 0
        in_header = False
        j = i + 1
        while j < len(tokens) and tokens[j].type != "table_close":
            kind = tokens[j].type
            if kind == "thead_open":
                in_header = True
            elif kind == "thead_close":
                in_header = False
            elif kind == "tr_open":
                rows.append([])
                if in_header:
                    header_rows += 1
            elif kind == "inline" and rows:
                style = BOLD if in_header else self.theme.text
                atoms = self.inline_atoms(tokens[j].children, style)
                text = "".join(" " if atom.space or atom.newline else atom.text for atom in atoms)
                width = sum(1 if atom.space or atom.newline else atom.width for atom in atoms)
                rows[-1].append((text, width))
            j += 1

        columns = max((len(row) for row in rows), default=0)
        widths = [0] * columns
        for row in rows:
            for col, (_text, width) in enumerate(row):
                widths[col] = max(widths[col], width)
        separator = _styled(" │ ", self.theme.rule)
        for row_idx, row in enumerate(rows):
            cells = []
            for col in range(columns):
                text, width = row[col] if col < len(row) else ("", 0)
                cells.append(text + " " * (widths[col] - width))
            self.emit(separator.join(cells).rstrip())
            if row_idx + 1 == header_rows:
                self.emit(_styled("─┼─".join("─" * width for width in widths), self.theme.rule))
        self.blank()
        return j + 1


def render(
    markdown: str,
    width: int,
    left_pad: int = DEFAULT_LEFT_PAD,
    theme: MarkdownTheme | None = None,
) -> str:
    """Render ``markdown`` to styled text laid out for ``width`` columns.

    The result ends with a newline; link markup is left for hyperlink
    injection.
    """
    renderer = _Renderer(theme or MarkdownTheme(), width, left_pad)
    lines = renderer.render(_parser.parse(markdown))
    return "\n".join(lines) + "\n"
