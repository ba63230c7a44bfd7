"""In-memory node tree rebuilt from leveled .csg records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from csg2xcsg.errors import (
    ConversionError,
    LiteralError,
    MalformedParameterError,
    MissingParameterError,
    StructureError,
)
from csg2xcsg.lexer import SourceRecord
from csg2xcsg.params import parse_parameters, positional_name, signature_tag
from csg2xcsg.transform import compose, matrix_from_value
from csg2xcsg.values import Value

ROOT_LEVEL = -1
ROOT_SIGNATURE = "root()"
GROUP_TAG = "group"
MATRIX_TAG = "multmatrix"


@dataclass(eq=False)
class Node:
    """One .csg statement with its parsed parameters and owned children."""

    level: int
    line: int
    signature: str
    parameters: dict[str, Value] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    transform: np.ndarray | None = None

    @classmethod
    def from_record(cls, record: SourceRecord) -> Node:
        return cls(
            level=record.level,
            line=record.line,
            signature=record.signature,
            parameters=parse_parameters(record.signature, record.line),
        )

    @classmethod
    def root(cls) -> Node:
        return cls(level=ROOT_LEVEL, line=0, signature=ROOT_SIGNATURE)

    @property
    def tag(self) -> str:
        return signature_tag(self.signature)

    @property
    def is_root(self) -> bool:
        return self.level == ROOT_LEVEL

    @property
    def has_transform(self) -> bool:
        return self.transform is not None

    def is_dummy(self) -> bool:
        """True for a group with no children or only dummy children."""
        if self.tag != GROUP_TAG:
            return False
        return all(child.is_dummy() for child in self.children)

    def size_children(self) -> int:
        """Number of children that are not dummy."""
        return sum(1 for child in self.children if not child.is_dummy())

    def non_dummy_children(self) -> list[Node]:
        return [child for child in self.children if not child.is_dummy()]

    # -- diagnostics -------------------------------------------------------

    def error(self, cls: type[ConversionError], message: str) -> ConversionError:
        """Build an exception of ``cls`` pointing at this node's source statement."""
        return cls(message, line=self.line, tag=self.tag, signature=self.signature)

    # -- parameter access --------------------------------------------------

    def find(self, name: str) -> Value | None:
        return self.parameters.get(name)

    def value(self, name: str) -> Value:
        """Return a required parameter."""
        value = self.parameters.get(name)
        if value is None:
            raise self.error(
                MissingParameterError, f"parameter {name!r} not found for {self.tag}"
            )
        return value

    def double(self, name: str, default: float | None = None) -> float:
        value = self.parameters.get(name)
        if value is None and default is not None:
            return default
        return self.convert(name, lambda: self.value(name).to_double())

    def text(self, name: str, default: str | None = None) -> str:
        value = self.parameters.get(name)
        if value is None and default is not None:
            return default
        return self.value(name).to_string()

    def convert(self, name: str, getter):
        """Run ``getter`` and report literal conversion failures against ``name``."""
        try:
            return getter()
        except LiteralError as e:
            raise self.error(MalformedParameterError, f"parameter {name!r}: {e}") from e

    # -- transforms --------------------------------------------------------

    def parameter_matrix(self) -> np.ndarray | None:
        """Read the positional 4x4 matrix of a multmatrix node; None for other tags."""
        if self.tag != MATRIX_TAG:
            return None
        name = positional_name(0)
        matrix = self.parameters.get(name)
        if matrix is None:
            raise self.error(MissingParameterError, f"{self.tag} matrix parameter not found")
        try:
            return matrix_from_value(matrix)
        except ValueError as e:
            raise self.error(MalformedParameterError, f"{self.tag} {e}") from e

    def assign_matrix(self) -> None:
        """Set the transform from the matrix parameter (multmatrix)."""
        self.transform = self.parameter_matrix()

    def apply_correction(self, correction: np.ndarray) -> None:
        """Set the transform to ``correction`` composed on the left of the matrix parameter.

        The stored transform is never read; repeated calls give the same result.
        """
        self.transform = compose(correction, self.parameter_matrix())


def build_tree(records: Sequence[SourceRecord]) -> Node:
    """Rebuild the node tree from records ordered as in the source file.

    The returned root is synthetic (level -1, signature ``root()``); records
    at level 0 become its children.

    Raises:
        StructureError: If a record skips a nesting level or the first record
            is not at level 0.
    """
    root = Node.root()
    index = _attach_children(root, records, 0)
    if index < len(records):
        record = records[index]
        raise StructureError(
            f".csg file line {record.line}: unexpected nesting level {record.level} "
            f"for {record.signature}"
        )
    return root


def _attach_children(parent: Node, records: Sequence[SourceRecord], index: int) -> int:
    """Attach records at ``parent.level + 1`` to ``parent``; return the next unused index."""
    expected = parent.level + 1
    while index < len(records):
        record = records[index]
        if record.level == expected:
            child = Node.from_record(record)
            parent.children.append(child)
            index = _attach_children(child, records, index + 1)
        elif record.level > expected:
            raise StructureError(
                f".csg file line {record.line}: level {record.level} skips a level "
                f"below {parent.signature} (expected {expected})"
            )
        else:
            break
    return index
