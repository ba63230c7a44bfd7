"""Conversion entry points: .csg text, records or files in, xcsg documents out."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from csg2xcsg.emitter import emit_root
from csg2xcsg.encoders import EncodeContext
from csg2xcsg.errors import Csg2XcsgError
from csg2xcsg.lexer import SourceRecord, lex_csg
from csg2xcsg.mapping import DEFAULT_TAG_MAPPING, TagMapping
from csg2xcsg.tree import Node, build_tree
from csg2xcsg.warning_policy import WarningPolicy
from csg2xcsg.xml_writer import XcsgDocument


def convert_records(
    records: Sequence[SourceRecord],
    *,
    mapping: TagMapping = DEFAULT_TAG_MAPPING,
    warning_policy: WarningPolicy | None = None,
) -> XcsgDocument:
    """Build the node tree from ``records`` and translate it to an xcsg document.

    Raises:
        StructureError: If the records do not nest properly.
        ConversionError: On the first node that cannot be translated.
    """
    root = build_tree(records)
    return convert_tree(root, mapping=mapping, warning_policy=warning_policy)


def convert_tree(
    root: Node,
    *,
    mapping: TagMapping = DEFAULT_TAG_MAPPING,
    warning_policy: WarningPolicy | None = None,
) -> XcsgDocument:
    ctx = EncodeContext(mapping=mapping, warning_policy=warning_policy)
    document = XcsgDocument()
    emit_root(root, document, ctx)
    return document


def convert_text(
    text: str,
    *,
    mapping: TagMapping = DEFAULT_TAG_MAPPING,
    warning_policy: WarningPolicy | None = None,
) -> XcsgDocument:
    """Convert .csg source text to an xcsg document."""
    return convert_records(lex_csg(text), mapping=mapping, warning_policy=warning_policy)


def read_csg(source: Path) -> str:
    try:
        return source.read_text(encoding="utf-8")
    except OSError as e:
        raise Csg2XcsgError(f"Cannot read file: {e}") from e


def convert_file(
    source: Path,
    output: Path,
    *,
    mapping: TagMapping = DEFAULT_TAG_MAPPING,
    warning_policy: WarningPolicy | None = None,
) -> XcsgDocument:
    """Convert a .csg file and write the xcsg XML to ``output``.

    Nothing is written when the conversion fails.
    """
    document = convert_text(read_csg(source), mapping=mapping, warning_policy=warning_policy)
    try:
        document.write(output)
    except OSError as e:
        raise Csg2XcsgError(f"Cannot write {output}: {e}") from e
    return document


def dump_tree(node: Node) -> list[str]:
    """Render the tree one node per line, indented by level, with its parameters."""
    lines: list[str] = []
    if not node.is_root:
        parts = [" " * node.level + node.tag]
        for name, value in node.parameters.items():
            parts.append(f"{name}={value.to_string()}")
        lines.append(" ".join(parts))
    for child in node.children:
        lines.extend(dump_tree(child))
    return lines
