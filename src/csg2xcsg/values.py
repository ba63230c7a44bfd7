"""Literal values found in .csg parameter lists: scalars and nested vectors."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from csg2xcsg.errors import LiteralError

_LITERAL_TOKEN_RE = re.compile(
    r"""
    ([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)  # NUMBER
    |([+-]?[A-Za-z_][A-Za-z0-9_]*)               # WORD (true, false, undef, inf, nan)
    |("(?:[^"\\]|\\.)*")                          # STRING
    |(\[)                                         # LBRACKET
    |(\])                                         # RBRACKET
    |(,)                                          # COMMA
    |(\s+)                                        # WHITESPACE (skip)
    """,
    re.VERBOSE,
)

_SPECIAL_FLOATS = {"inf", "+inf", "-inf", "nan", "+nan", "-nan"}


@dataclass(frozen=True)
class Scalar:
    """A single number, boolean or string literal.

    ``text`` keeps the literal as written (strings without their quotes) so
    that values can be copied to the output without reformatting.
    """

    text: str
    value: float | bool | str

    def size(self) -> int:
        return 1

    def get(self, index: int) -> Value:
        if index != 0:
            raise LiteralError(f"Scalar {self.text!r} has no element {index}")
        return self

    def is_vector(self) -> bool:
        return False

    def to_double(self) -> float:
        if isinstance(self.value, bool) or isinstance(self.value, str):
            raise LiteralError(f"Expected a number, got {self.text!r}")
        return float(self.value)

    def to_int(self) -> int:
        number = self.to_double()
        if not math.isfinite(number):
            raise LiteralError(f"Expected an integer, got {self.text!r}")
        return int(number)

    def to_bool(self) -> bool:
        if isinstance(self.value, bool):
            return self.value
        if isinstance(self.value, str):
            raise LiteralError(f"Expected a boolean, got string {self.text!r}")
        return self.value != 0.0

    def to_string(self) -> str:
        return self.text


@dataclass(frozen=True)
class Vector:
    """An ordered sequence of values, possibly nested."""

    items: tuple[Value, ...]

    def size(self) -> int:
        return len(self.items)

    def get(self, index: int) -> Value:
        if index < 0 or index >= len(self.items):
            raise LiteralError(
                f"Vector index {index} out of range (size {len(self.items)}): {self.to_string()}"
            )
        return self.items[index]

    def is_vector(self) -> bool:
        return True

    def to_double(self) -> float:
        if len(self.items) == 1:
            return self.items[0].to_double()
        raise LiteralError(f"Expected a number, got vector {self.to_string()}")

    def to_int(self) -> int:
        if len(self.items) == 1:
            return self.items[0].to_int()
        raise LiteralError(f"Expected an integer, got vector {self.to_string()}")

    def to_bool(self) -> bool:
        # OpenSCAD truthiness: empty vectors are false
        return len(self.items) > 0

    def to_string(self) -> str:
        return "[" + ",".join(item.to_string() for item in self.items) + "]"


Value = Scalar | Vector


class _Unparseable(Exception):
    pass


class _Token:
    __slots__ = ("kind", "text")

    def __init__(self, kind: str, text: str = ""):
        self.kind = kind
        self.text = text


def _tokenize_literal(raw: str) -> list[_Token]:
    tokens: list[_Token] = []
    pos = 0
    while pos < len(raw):
        m = _LITERAL_TOKEN_RE.match(raw, pos)
        if m is None:
            raise _Unparseable(raw)
        pos = m.end()
        if m.group(1) is not None:
            tokens.append(_Token("NUMBER", m.group(1)))
        elif m.group(2) is not None:
            tokens.append(_Token("WORD", m.group(2)))
        elif m.group(3) is not None:
            tokens.append(_Token("STRING", m.group(3)))
        elif m.group(4) is not None:
            tokens.append(_Token("LBRACKET"))
        elif m.group(5) is not None:
            tokens.append(_Token("RBRACKET"))
        elif m.group(6) is not None:
            tokens.append(_Token("COMMA"))
        # group(7) is whitespace, skip
    tokens.append(_Token("EOF"))
    return tokens


class _LiteralParser:
    """Recursive descent parser for scalar and vector literals."""

    def __init__(self, tokens: list[_Token]):
        self.tokens = tokens
        self.pos = 0

    def _peek(self) -> _Token:
        return self.tokens[self.pos]

    def _advance(self) -> _Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def parse(self) -> Value | None:
        if self._peek().kind == "WORD" and self._peek().text == "undef":
            self._advance()
            if self._peek().kind != "EOF":
                raise _Unparseable("undef")
            return None
        value = self._value()
        if self._peek().kind != "EOF":
            raise _Unparseable(self._peek().kind)
        return value

    def _value(self) -> Value:
        tok = self._advance()
        if tok.kind == "NUMBER":
            return Scalar(tok.text, float(tok.text))
        if tok.kind == "WORD":
            return _word(tok.text)
        if tok.kind == "STRING":
            return Scalar(_unquote(tok.text), _unquote(tok.text))
        if tok.kind == "LBRACKET":
            return self._vector()
        raise _Unparseable(tok.kind)

    def _vector(self) -> Vector:
        items: list[Value] = []
        if self._peek().kind == "RBRACKET":
            self._advance()
            return Vector(())
        items.append(self._value())
        while self._peek().kind == "COMMA":
            self._advance()
            items.append(self._value())
        if self._advance().kind != "RBRACKET":
            raise _Unparseable("vector")
        return Vector(tuple(items))


def _word(text: str) -> Scalar:
    if text == "true":
        return Scalar(text, True)
    if text == "false":
        return Scalar(text, False)
    if text.lower() in _SPECIAL_FLOATS:
        return Scalar(text, float(text))
    raise _Unparseable(text)


def _unquote(text: str) -> str:
    body = text[1:-1]
    return re.sub(r"\\(.)", r"\1", body)


def parse_value(raw: str, line: int = 0) -> Value | None:
    """Parse one literal from a parameter list.

    Args:
        raw: Literal text, e.g. ``10``, ``true``, ``"abc"`` or ``[[0,0],[1,0]]``.
        line: .csg line number the literal came from (kept for diagnostics).

    Returns:
        The parsed value, or None for ``undef`` and for text that is not a
        literal (such values are left out of the parameter mapping).
    """
    try:
        return _LiteralParser(_tokenize_literal(raw.strip())).parse()
    except _Unparseable:
        return None
