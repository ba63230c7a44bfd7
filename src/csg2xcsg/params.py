"""Splitting a .csg signature into named parameter values."""

from __future__ import annotations

from csg2xcsg.values import Value, parse_value


def signature_tag(signature: str) -> str:
    """Return the function name of a signature, i.e. the text before '('."""
    index = signature.find("(")
    if index < 0:
        return signature.strip()
    return signature[:index].strip()


def positional_name(position: int) -> str:
    """Generated name for the parameter at 0-based ``position`` without a name."""
    return f"_p{position:03d}"


def _argument_text(signature: str) -> str:
    """Strip the tag and the outer parentheses from a signature."""
    start = signature.find("(")
    if start < 0:
        return ""
    end = signature.rfind(")")
    if end < start:
        end = len(signature)
    return signature[start + 1 : end]


def _split_parameters(text: str) -> list[tuple[str | None, str]]:
    """Split ``name1=value1,value2,...`` at top-level commas.

    Commas and '=' only count outside brackets and string literals. Returns
    ``(name, raw_value)`` pairs with ``name`` None for positional parameters.
    """
    pairs: list[tuple[str | None, str]] = []
    depth = 0
    in_string = False
    escaped = False
    equals_at = -1
    start = 0

    def flush(end: int) -> None:
        chunk = text[start:end]
        if not chunk.strip():
            return
        if equals_at >= 0:
            name = text[start:equals_at].strip()
            pairs.append((name, text[equals_at + 1 : end]))
        else:
            pairs.append((None, chunk))

    for i, c in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif c == "\\":
                escaped = True
            elif c == '"':
                in_string = False
            continue
        if c == '"':
            in_string = True
        elif c == "[":
            depth += 1
        elif c == "]":
            depth -= 1
        elif c == "=" and depth == 0 and equals_at < 0:
            equals_at = i
        elif c == "," and depth == 0:
            flush(i)
            start = i + 1
            equals_at = -1
    flush(len(text))
    return pairs


def parse_parameters(signature: str, line: int = 0) -> dict[str, Value]:
    """Parse the parameter list of a signature such as ``cube(size=[1,2,3],center=true)``.

    Parameters given without a name are stored under ``_p000``, ``_p001``, ...
    after their position in the list. Values that do not parse (including
    ``undef``) are left out.
    """
    params: dict[str, Value] = {}
    for position, (name, raw) in enumerate(_split_parameters(_argument_text(signature))):
        if name is None:
            name = positional_name(position)
        value = parse_value(raw, line)
        if value is not None:
            params[name] = value
    return params
