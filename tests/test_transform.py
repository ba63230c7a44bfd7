"""Tests for 4x4 transform helpers and tmatrix output."""

import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from csg2xcsg.transform import (
    ROTATE_EXTRUDE_CORRECTION,
    compose,
    identity,
    matrix_from_value,
    rotation_x,
    rotation_z,
    write_transform,
)
from csg2xcsg.values import parse_value
from csg2xcsg.xml_writer import XcsgDocument


class TestRotations:
    def test_rotate_extrude_correction_is_exact(self):
        expected = np.array(
            [[1, 0, 0, 0], [0, 0, 1, 0], [0, -1, 0, 0], [0, 0, 0, 1]], dtype=np.float64
        )
        assert np.array_equal(ROTATE_EXTRUDE_CORRECTION, expected)

    def test_correction_is_read_only(self):
        with pytest.raises(ValueError):
            ROTATE_EXTRUDE_CORRECTION[0, 0] = 2.0

    def test_rotation_x_maps_y_to_z(self):
        assert_allclose(rotation_x(90.0) @ [0, 1, 0, 0], [0, 0, 1, 0], atol=1e-12)

    def test_rotation_z_maps_x_to_y(self):
        assert_allclose(rotation_z(math.pi / 2) @ [1, 0, 0, 0], [0, 1, 0, 0], atol=1e-12)


class TestMatrixFromValue:
    def test_row_major(self):
        value = parse_value("[[1,2,3,4],[5,6,7,8],[9,10,11,12],[0,0,0,1]]")
        mat = matrix_from_value(value)
        assert mat[0, 3] == 4.0
        assert mat[2, 0] == 9.0

    def test_scalar_rejected(self):
        with pytest.raises(ValueError, match="1 rows, expected 4"):
            matrix_from_value(parse_value("1"))

    def test_non_numeric_element(self):
        value = parse_value('[[1,0,0,0],[0,1,0,0],[0,0,1,"x"],[0,0,0,1]]')
        with pytest.raises(ValueError, match=r"element \(2,3\)"):
            matrix_from_value(value)


class TestCompose:
    def test_without_matrix_copies_correction(self):
        result = compose(ROTATE_EXTRUDE_CORRECTION, None)
        assert_allclose(result, ROTATE_EXTRUDE_CORRECTION)
        result[0, 0] = 5.0
        assert ROTATE_EXTRUDE_CORRECTION[0, 0] == 1.0

    def test_correction_on_the_left(self):
        param = identity()
        param[:3, 3] = [1, 2, 3]
        result = compose(ROTATE_EXTRUDE_CORRECTION, param)
        assert_allclose(result, ROTATE_EXTRUDE_CORRECTION @ param)
        # the parameter translation is applied first, then rotated
        assert_allclose(result[:3, 3], [1, 3, -2])


class TestWriteTransform:
    def test_rows_and_columns(self):
        doc = XcsgDocument()
        mat = np.arange(16, dtype=np.float64).reshape(4, 4)
        write_transform(doc, mat)
        tmatrix = doc.element.find("tmatrix")
        rows = tmatrix.findall("trow")
        assert len(rows) == 4
        values = [[float(row.get(f"c{j}")) for j in range(4)] for row in rows]
        assert_allclose(values, mat)
        assert rows[1].get("c2") == "6"
