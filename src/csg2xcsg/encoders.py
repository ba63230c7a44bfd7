"""Per-tag encoders writing xcsg attributes and child elements for one node."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from csg2xcsg.dimension import dimension
from csg2xcsg.errors import (
    DomainError,
    MalformedParameterError,
    UnsupportedVariantError,
)
from csg2xcsg.mapping import DEFAULT_TAG_MAPPING, TagMapping
from csg2xcsg.sweep import MAX_SEGMENTS, segment_count, sweep_control_points
from csg2xcsg.transform import ROTATE_EXTRUDE_CORRECTION
from csg2xcsg.tree import Node
from csg2xcsg.warning_policy import WarningPolicy, emit_warning
from csg2xcsg.xml_writer import OutputNode

# Thin slab standing in for the cutting plane of projection(cut=true)
CUT_SLAB_WIDTH = 1.0e4
CUT_SLAB_THICKNESS = 1.0e-4


@dataclass(frozen=True)
class EncodeContext:
    """Settings shared by every node of one conversion."""

    mapping: TagMapping = DEFAULT_TAG_MAPPING
    warning_policy: WarningPolicy | None = None


Encoder = Callable[[Node, OutputNode, EncodeContext], OutputNode]


def _finite(node: Node, name: str, value: float) -> float:
    if not math.isfinite(value):
        raise node.error(DomainError, f"{name} must be finite (got {value})")
    return value


def _positive(node: Node, name: str, value: float | None = None, label: str | None = None) -> float:
    if value is None:
        value = node.double(name)
    _finite(node, label or name, value)
    if not value > 0.0:
        raise node.error(DomainError, f"{label or name} must be > 0.0 (got {value:g})")
    return value


def _non_negative(node: Node, name: str) -> float:
    value = _finite(node, name, node.double(name))
    if value < 0.0:
        raise node.error(DomainError, f"{name} must be >= 0.0 (got {value:g})")
    return value


def _flag(node: Node, name: str, default: bool | None = None) -> bool:
    if default is not None and node.find(name) is None:
        return default
    return node.convert(name, lambda: node.value(name).to_bool())


def _extents(node: Node, name: str, labels: tuple[str, ...]) -> list[float]:
    """Read a size given either as one scalar or as one value per axis."""
    size = node.value(name)
    if size.size() > 1:
        if size.size() < len(labels):
            raise node.error(
                MalformedParameterError,
                f"{name} has {size.size()} values, expected {len(labels)}",
            )
        values = node.convert(name, lambda: [size.get(i).to_double() for i in range(len(labels))])
    else:
        uniform = node.convert(name, size.to_double)
        values = [uniform] * len(labels)
    return [_positive(node, name, v, label) for v, label in zip(values, labels)]


# -- 2d ---------------------------------------------------------------------


def _encode_circle(node: Node, out: OutputNode, ctx: EncodeContext) -> OutputNode:
    out.add_property("r", _positive(node, "r"))
    return out


def _encode_rectangle(node: Node, out: OutputNode, ctx: EncodeContext) -> OutputNode:
    dx, dy = _extents(node, "size", ("dx", "dy"))
    out.add_property("dx", dx)
    out.add_property("dy", dy)
    out.add_property("center", _flag(node, "center"))
    return out


def _encode_polygon(node: Node, out: OutputNode, ctx: EncodeContext) -> OutputNode:
    points = node.value("points")
    if not points.is_vector():
        raise node.error(MalformedParameterError, "polygon points must be a vector of points")
    npoints = points.size()
    path = list(range(npoints))

    paths = node.find("paths")
    if paths is not None and paths.is_vector() and paths.size() > 0:
        # only one path is allowed, the outer one
        if paths.size() > 1:
            raise node.error(
                UnsupportedVariantError, "polygon with internal hole(s) is not supported"
            )
        outer = paths.get(0)
        path = node.convert("paths", lambda: [outer.get(i).to_int() for i in range(outer.size())])

    xml_vertices = out.add_child("vertices")
    for index in path:
        if index < 0 or index >= npoints:
            raise node.error(
                MalformedParameterError,
                f"polygon path index {index} out of range ({npoints} points)",
            )
        point = points.get(index)
        if not point.is_vector() or point.size() < 2:
            raise node.error(
                MalformedParameterError,
                f"polygon point {index} must have 2 values, got {point.to_string()}",
            )
        x, y = node.convert("points", lambda: (point.get(0).to_double(), point.get(1).to_double()))
        xml_vertex = xml_vertices.add_child("vertex")
        xml_vertex.add_property("x", x)
        xml_vertex.add_property("y", y)
    return out


def _encode_offset(node: Node, out: OutputNode, ctx: EncodeContext) -> OutputNode:
    # r gives a rounded offset, delta a sharp one
    if node.find("r") is not None:
        delta = _finite(node, "r", node.double("r"))
        rounded = True
    else:
        delta = _finite(node, "delta", node.double("delta"))
        rounded = False
    out.add_property("delta", delta)
    out.add_property("round", rounded)
    out.add_property("chamfer", _flag(node, "chamfer", default=False))
    return out


def _encode_projection(node: Node, out: OutputNode, ctx: EncodeContext) -> OutputNode:
    # a plain projection is a no-op here; a cut becomes the projection of an
    # intersection with a very thin slab around z=0
    if not _flag(node, "cut"):
        return out

    emit_warning(
        "W02",
        "projection(cut=true) approximated by intersection with a "
        f"{CUT_SLAB_THICKNESS:g} thick slab",
        policy=ctx.warning_policy,
        line=node.line,
        tag=node.tag,
    )
    xml_intersection = out.add_child("intersection3d")
    xml_cuboid = xml_intersection.add_child("cuboid")
    xml_cuboid.add_property("dx", CUT_SLAB_WIDTH)
    xml_cuboid.add_property("dy", CUT_SLAB_WIDTH)
    xml_cuboid.add_property("dz", CUT_SLAB_THICKNESS)
    xml_cuboid.add_property("center", True)
    return xml_intersection


# -- 3d ---------------------------------------------------------------------


def _encode_cone(node: Node, out: OutputNode, ctx: EncodeContext) -> OutputNode:
    h = _positive(node, "h")
    r1 = _non_negative(node, "r1")
    r2 = _non_negative(node, "r2")
    if r1 + r2 <= 0.0:
        raise node.error(DomainError, "r1+r2 must be > 0.0")
    out.add_property("h", h)
    out.add_property("r1", r1)
    out.add_property("r2", r2)
    out.add_property("center", _flag(node, "center"))
    return out


def _encode_sphere(node: Node, out: OutputNode, ctx: EncodeContext) -> OutputNode:
    out.add_property("r", _positive(node, "r"))
    return out


def _encode_cuboid(node: Node, out: OutputNode, ctx: EncodeContext) -> OutputNode:
    dx, dy, dz = _extents(node, "size", ("dx", "dy", "dz"))
    out.add_property("dx", dx)
    out.add_property("dy", dy)
    out.add_property("dz", dz)
    out.add_property("center", _flag(node, "center"))
    return out


def _sweep_scale(node: Node) -> tuple[float, float]:
    scale = node.find("scale")
    if scale is None:
        return (1.0, 1.0)
    if scale.is_vector() and scale.size() > 1:
        scx, scy = node.convert(
            "scale", lambda: (scale.get(0).to_double(), scale.get(1).to_double())
        )
    else:
        scx = scy = node.convert("scale", scale.to_double)
    return (_finite(node, "scale", scx), _finite(node, "scale", scy))


def _encode_sweep(node: Node, out: OutputNode, ctx: EncodeContext) -> OutputNode:
    height = _positive(node, "height")
    twist = _finite(node, "twist", node.double("twist", 0.0))
    slices = None
    if node.find("slices") is not None:
        slices = node.convert("slices", node.value("slices").to_int)

    nseg = segment_count(twist, slices)
    if nseg > MAX_SEGMENTS:
        raise node.error(
            DomainError, f"sweep needs {nseg} segments, more than the limit of {MAX_SEGMENTS}"
        )

    points = sweep_control_points(
        height,
        twist_degrees=twist,
        slices=slices,
        scale=_sweep_scale(node),
        center=_flag(node, "center", default=False),
    )

    xml_path = out.add_child("spline_path")
    for cp in points:
        xml_point = xml_path.add_child("cpoint")
        xml_point.add_property("x", cp.x)
        xml_point.add_property("y", cp.y)
        xml_point.add_property("z", cp.z)
        xml_point.add_property("vx", cp.vx)
        xml_point.add_property("vy", cp.vy)
        xml_point.add_property("vz", cp.vz)
    return out


def _encode_linear_extrude(node: Node, out: OutputNode, ctx: EncodeContext) -> OutputNode:
    if _finite(node, "twist", node.double("twist", 0.0)) != 0.0:
        raise node.error(
            UnsupportedVariantError, "linear_extrude with non-zero twist is not supported"
        )
    out.add_property("dz", _positive(node, "height"))
    out.add_property("center", _flag(node, "center", default=False))
    return out


def _encode_rotate_extrude(node: Node, out: OutputNode, ctx: EncodeContext) -> OutputNode:
    angle = _finite(node, "angle", node.double("angle", 360.0))
    out.add_property("angle", math.radians(angle))
    node.apply_correction(ROTATE_EXTRUDE_CORRECTION)
    return out


def _encode_polyhedron(node: Node, out: OutputNode, ctx: EncodeContext) -> OutputNode:
    points = node.value("points")
    npoints = points.size() if points.is_vector() else 1
    if npoints < 4:
        raise node.error(
            MalformedParameterError,
            f"polyhedron with too few points ({npoints}, expected at least 4)",
        )

    xml_vertices = out.add_child("vertices")
    for ip in range(npoints):
        point = points.get(ip)
        if not point.is_vector():
            raise node.error(
                MalformedParameterError,
                f"illegal polyhedron point value at position {ip}: {point.to_string()}",
            )
        if point.size() < 3:
            raise node.error(
                MalformedParameterError,
                f"polyhedron points must have 3 values (position {ip} has {point.size()})",
            )
        coords = node.convert("points", lambda: [point.get(i).to_double() for i in range(3)])
        xml_vertex = xml_vertices.add_child("vertex")
        for axis, coord in zip(("x", "y", "z"), coords):
            xml_vertex.add_property(axis, coord)

    # older OpenSCAD versions wrote the faces as 'triangles'
    faces_name = "faces"
    if node.find("faces") is None and node.find("triangles") is not None:
        faces_name = "triangles"
    faces = node.value(faces_name)
    xml_faces = out.add_child("faces")
    for iface in range(faces.size()):
        face = faces.get(iface)
        nfv = face.size() if face.is_vector() else 1
        if nfv < 3:
            raise node.error(
                MalformedParameterError,
                f"polyhedron face {iface} must have 3 or more vertices (has {nfv})",
            )
        indices = node.convert(faces_name, lambda: [face.get(i).to_int() for i in range(nfv)])
        xml_face = xml_faces.add_child("face")
        # OpenSCAD winds faces the opposite way to xcsg
        for index in reversed(indices):
            if index < 0 or index >= npoints:
                raise node.error(
                    MalformedParameterError,
                    f"polyhedron face {iface} index {index} out of range ({npoints} points)",
                )
            xml_face.add_child("fv").add_property("index", index)
    return out


# -- booleans ---------------------------------------------------------------


def check_same_dimension(node: Node, xcsg_tag: str) -> None:
    """Reject children of different dimension under one boolean operator."""
    dims: set[int] = set()
    for child in node.non_dummy_children():
        dim = dimension(child)
        if dim > 0:
            dims.add(dim)
        if len(dims) > 1:
            raise node.error(
                UnsupportedVariantError,
                f"mixed dimension children provided to '{node.tag}' --> {xcsg_tag}",
            )


def _encode_binary_boolean(node: Node, out: OutputNode, ctx: EncodeContext) -> OutputNode:
    if node.size_children() < 2:
        raise node.error(
            UnsupportedVariantError,
            f"fewer than 2 children provided to '{node.tag}' --> {out.tag}",
        )
    check_same_dimension(node, out.tag)
    return out


def _encode_nary_boolean(node: Node, out: OutputNode, ctx: EncodeContext) -> OutputNode:
    check_same_dimension(node, out.tag)
    return out


ENCODERS: dict[str, Encoder] = {
    "circle": _encode_circle,
    "rectangle": _encode_rectangle,
    "polygon": _encode_polygon,
    "offset2d": _encode_offset,
    "projection2d": _encode_projection,
    "cone": _encode_cone,
    "sphere": _encode_sphere,
    "cuboid": _encode_cuboid,
    "sweep": _encode_sweep,
    "linear_extrude": _encode_linear_extrude,
    "rotate_extrude": _encode_rotate_extrude,
    "polyhedron": _encode_polyhedron,
}
for _dim in ("2d", "3d"):
    ENCODERS["union" + _dim] = _encode_nary_boolean
    ENCODERS["hull" + _dim] = _encode_nary_boolean
    ENCODERS["difference" + _dim] = _encode_binary_boolean
    ENCODERS["intersection" + _dim] = _encode_binary_boolean
    ENCODERS["minkowski" + _dim] = _encode_binary_boolean
del _dim
