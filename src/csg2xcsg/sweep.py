"""Spline control points for linear_extrude translated to an xcsg sweep."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from csg2xcsg.transform import rotation_z

# Control points per full turn of twist
SEGMENTS_PER_TURN = 36
# Upper bound on segments for one sweep, from twist or slices
MAX_SEGMENTS = 100_000

_BASE_TANGENT = np.array([0.0, 1.0, 0.0, 0.0])


@dataclass(frozen=True)
class ControlPoint:
    """Spline path point and the profile orientation vector at that point."""

    x: float
    y: float
    z: float
    vx: float
    vy: float
    vz: float


def segment_count(twist_degrees: float, slices: int | None = None) -> int:
    """Number of sweep segments for a twist angle, at least ``slices`` when given."""
    nseg = 1
    if twist_degrees != 0.0:
        turns = abs(twist_degrees) / 360.0
        # rounding keeps e.g. 36 * (100/360) from landing just above 10
        nseg = max(1, math.ceil(round(SEGMENTS_PER_TURN * turns, 9)))
    if slices is not None and slices > nseg:
        nseg = slices
    return nseg


def sweep_control_points(
    height: float,
    twist_degrees: float = 0.0,
    slices: int | None = None,
    scale: tuple[float, float] = (1.0, 1.0),
    center: bool = False,
) -> list[ControlPoint]:
    """Build the straight sweep path along +Z for a linear extrusion.

    The profile orientation starts as (0, 1, 0) and turns about Z by
    ``-twist_degrees`` over the full height (OpenSCAD twists clockwise).
    Its x/y components carry the cross-section scale, interpolated linearly
    from 1 at the base to ``scale`` at the top.
    """
    nseg = segment_count(twist_degrees, slices)
    twist = -math.radians(twist_degrees)
    z0 = -0.5 * height if center else 0.0

    points: list[ControlPoint] = []
    for i in range(nseg + 1):
        t = i / nseg
        tangent = rotation_z(twist * t) @ _BASE_TANGENT
        scx = 1.0 + (scale[0] - 1.0) * t
        scy = 1.0 + (scale[1] - 1.0) * t
        points.append(
            ControlPoint(
                x=0.0,
                y=0.0,
                z=z0 + height * t,
                vx=float(tangent[0]) * scx,
                vy=float(tangent[1]) * scy,
                vz=float(tangent[2]),
            )
        )
    return points
