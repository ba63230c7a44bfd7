"""Splitting .csg text into leveled statement records."""

from __future__ import annotations

import re
from typing import NamedTuple

from csg2xcsg.errors import LexError

_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")

# '%' (background) and '*' (disable) remove a statement from the model
_DISABLING_MODIFIERS = "%*"
_MODIFIERS = "!#%*"


class SourceRecord(NamedTuple):
    """One statement of the .csg file: signature, nesting level, line number."""

    signature: str
    level: int
    line: int


class _Scanner:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def advance(self) -> str:
        c = self.text[self.pos]
        self.pos += 1
        if c == "\n":
            self.line += 1
        return c

    def skip_blank(self) -> None:
        """Skip whitespace, // comments and /* */ comments."""
        while not self.at_end():
            c = self.peek()
            if c.isspace():
                self.advance()
            elif self.text.startswith("//", self.pos):
                while not self.at_end() and self.peek() != "\n":
                    self.advance()
            elif self.text.startswith("/*", self.pos):
                start_line = self.line
                end = self.text.find("*/", self.pos + 2)
                if end < 0:
                    raise LexError(f"line {start_line}: unterminated block comment")
                while self.pos < end + 2:
                    self.advance()
            else:
                return

    def read_call(self) -> str:
        """Read ``name(args)`` and return it with whitespace outside strings removed."""
        m = _IDENTIFIER_RE.match(self.text, self.pos)
        if m is None:
            raise LexError(f"line {self.line}: expected a module name, got {self.peek()!r}")
        name = m.group(0)
        self.pos = m.end()
        self.skip_blank()
        if self.peek() != "(":
            raise LexError(f"line {self.line}: expected '(' after {name!r}")

        start_line = self.line
        parts = [name]
        depth = 0
        while True:
            if self.at_end():
                raise LexError(f"line {start_line}: unbalanced parentheses in {name!r}")
            c = self.advance()
            if c == '"':
                parts.append(c)
                parts.append(self._read_string_tail(start_line))
                continue
            if c.isspace():
                continue
            parts.append(c)
            if c == "(":
                depth += 1
            elif c == ")":
                depth -= 1
                if depth == 0:
                    return "".join(parts)

    def _read_string_tail(self, start_line: int) -> str:
        chars = []
        while True:
            if self.at_end():
                raise LexError(f"line {start_line}: unterminated string literal")
            c = self.advance()
            chars.append(c)
            if c == "\\" and not self.at_end():
                chars.append(self.advance())
            elif c == '"':
                return "".join(chars)


def lex_csg(text: str) -> list[SourceRecord]:
    """Split .csg source into ``SourceRecord`` entries in document order.

    Top-level statements get level 0, statements inside a ``{ }`` block get
    the level of the block owner plus one.

    Raises:
        LexError: On unbalanced braces or parentheses and malformed statements.
    """
    scanner = _Scanner(text)
    records: list[SourceRecord] = []
    level = 0
    disabled_at: int | None = None

    while True:
        scanner.skip_blank()
        if scanner.at_end():
            break

        c = scanner.peek()
        if c == "}":
            if level == 0:
                raise LexError(f"line {scanner.line}: unmatched '}}'")
            scanner.advance()
            level -= 1
            if disabled_at is not None and level == disabled_at:
                disabled_at = None
            continue
        if c == ";":
            scanner.advance()
            continue

        disabled = False
        while c and c in _MODIFIERS:
            if c in _DISABLING_MODIFIERS:
                disabled = True
            scanner.advance()
            scanner.skip_blank()
            c = scanner.peek()

        line = scanner.line
        signature = scanner.read_call()
        scanner.skip_blank()
        terminator = scanner.peek()
        if terminator not in (";", "{"):
            raise LexError(f"line {scanner.line}: expected ';' or '{{' after {signature}")
        scanner.advance()

        if disabled_at is None and not disabled:
            records.append(SourceRecord(signature, level, line))
        if terminator == "{":
            if disabled and disabled_at is None:
                disabled_at = level
            level += 1

    if level != 0:
        raise LexError(f"unexpected end of input: {level} unclosed block(s)")
    return records
