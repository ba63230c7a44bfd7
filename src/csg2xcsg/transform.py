"""4x4 homogeneous transforms and their xcsg ``tmatrix`` representation."""

from __future__ import annotations

import math

import numpy as np

from csg2xcsg.errors import LiteralError
from csg2xcsg.values import Value
from csg2xcsg.xml_writer import OutputNode

_EPSILON = 1e-15


def identity() -> np.ndarray:
    return np.eye(4, dtype=np.float64)


def rotation_x(degrees: float) -> np.ndarray:
    """Rotation about the X axis, right-handed."""
    a = math.radians(degrees)
    c, s = math.cos(a), math.sin(a)
    mat = identity()
    mat[1, 1] = c
    mat[1, 2] = -s
    mat[2, 1] = s
    mat[2, 2] = c
    mat[np.abs(mat) < _EPSILON] = 0.0
    return mat


def rotation_z(radians: float) -> np.ndarray:
    """Rotation about the Z axis, right-handed."""
    c, s = math.cos(radians), math.sin(radians)
    mat = identity()
    mat[0, 0] = c
    mat[0, 1] = -s
    mat[1, 0] = s
    mat[1, 1] = c
    return mat


# OpenSCAD's rotate_extrude revolves the XY profile around Z, xcsg's around Y
ROTATE_EXTRUDE_CORRECTION: np.ndarray = rotation_x(-90.0)
ROTATE_EXTRUDE_CORRECTION.flags.writeable = False


def matrix_from_value(value: Value) -> np.ndarray:
    """Read a row-major 4x4 matrix from a nested vector literal.

    Raises:
        ValueError: If the value is not exactly 4 rows of 4 numbers.
    """
    if not value.is_vector() or value.size() != 4:
        raise ValueError(f"matrix has {value.size()} rows, expected 4")
    mat = identity()
    for i in range(4):
        row = value.get(i)
        if not row.is_vector() or row.size() != 4:
            raise ValueError(f"matrix row {i} has {row.size()} columns, expected 4")
        for j in range(4):
            try:
                mat[i, j] = row.get(j).to_double()
            except LiteralError as e:
                raise ValueError(f"matrix element ({i},{j}): {e}") from e
    return mat


def compose(correction: np.ndarray, matrix: np.ndarray | None) -> np.ndarray:
    """Left-multiply ``correction`` onto ``matrix``; ``matrix`` is applied first."""
    if matrix is None:
        return np.array(correction, dtype=np.float64)
    return correction @ matrix


def write_transform(target: OutputNode, matrix: np.ndarray) -> OutputNode:
    """Append a ``tmatrix`` block with four ``trow`` rows of ``c0..c3``."""
    xml_matrix = target.add_child("tmatrix")
    for irow in range(4):
        xml_row = xml_matrix.add_child("trow")
        for icol in range(4):
            xml_row.add_property(f"c{icol}", float(matrix[irow, icol]))
    return xml_matrix
