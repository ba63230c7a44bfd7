"""Deciding whether a node produces 2d or 3d geometry."""

from __future__ import annotations

from csg2xcsg.errors import UnsupportedConstructError
from csg2xcsg.tree import Node

GENERATOR_DIMENSIONS: dict[str, int] = {
    "circle": 2,
    "square": 2,
    "polygon": 2,
    "projection": 2,
    "sphere": 3,
    "cylinder": 3,
    "cube": 3,
    "polyhedron": 3,
    "linear_extrude": 3,
    "rotate_extrude": 3,
}

UNSUPPORTED_TAGS: dict[str, str] = {
    "text": "'text' is not supported",
    "surface": "'surface' is not supported",
    "import": "'import' is not supported with this file type",
    "resize": "'resize' is not supported",
}

# Tags whose dimension comes from their children, matched as prefixes
PASS_THROUGH_PREFIXES: tuple[str, ...] = (
    "group",
    "color",
    "multmatrix",
    "unio",
    "diff",
    "inte",
    "mink",
    "offs",
    "rend",
    "hull",
)


def _check_supported(node: Node) -> None:
    reason = UNSUPPORTED_TAGS.get(node.tag)
    if reason is not None:
        raise node.error(UnsupportedConstructError, reason)


def is_pass_through(tag: str) -> bool:
    return tag.startswith(PASS_THROUGH_PREFIXES)


def dimension(node: Node) -> int:
    """Return 2 or 3 for the geometry ``node`` produces, 0 if none can be found.

    Generator tags have a fixed dimension. Other nodes take the dimension of
    their first non-dummy child that has one; siblings are not compared here.

    Raises:
        UnsupportedConstructError: If the node, or a child inspected on the way,
            is text/surface/import/resize.
    """
    tag = node.tag
    dim = GENERATOR_DIMENSIONS.get(tag, 0)
    if dim > 0:
        return dim
    _check_supported(node)

    for child in node.children:
        if child.is_dummy():
            continue
        child_tag = child.tag
        if child_tag in GENERATOR_DIMENSIONS:
            dim = GENERATOR_DIMENSIONS[child_tag]
        elif is_pass_through(child_tag):
            dim = dimension(child)
        else:
            _check_supported(child)
        if dim > 0:
            return dim
    return 0
