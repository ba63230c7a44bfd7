"""Shared fixtures for csg2xcsg tests."""

import pytest


@pytest.fixture
def simple_csg() -> str:
    """A small model as OpenSCAD writes it to a .csg file."""
    return """\
group() {
	multmatrix([[1, 0, 0, 10], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]]) {
		cube(size = [2, 3, 4], center = true);
	}
	difference() {
		sphere($fn = 0, $fa = 12, $fs = 2, r = 5);
		cylinder($fn = 0, $fa = 12, $fs = 2, h = 20, r1 = 1, r2 = 1, center = true);
	}
}
"""


@pytest.fixture
def flat_mapping_yaml() -> str:
    """Mapping override that keeps linear_extrude as a flat extrusion."""
    return "tags:\n  linear_extrude: linear_extrude\n"
