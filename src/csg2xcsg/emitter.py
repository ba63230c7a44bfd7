"""Recursive translation of the node tree into the xcsg output tree."""

from __future__ import annotations

from csg2xcsg.dimension import dimension
from csg2xcsg.encoders import ENCODERS, EncodeContext, check_same_dimension
from csg2xcsg.errors import UnsupportedConstructError, UnsupportedVariantError
from csg2xcsg.mapping import WILDCARD, resolve_tag
from csg2xcsg.transform import write_transform
from csg2xcsg.tree import MATRIX_TAG, Node
from csg2xcsg.warning_policy import emit_warning
from csg2xcsg.xml_writer import OutputNode

ROOT_TEMPLATE = "union*"

# xcsg rejects difference/intersection with a single operand
_SINGLE_CHILD_FALLBACK: dict[str, str] = {
    "difference2d": "union2d",
    "difference3d": "union3d",
    "intersection2d": "union2d",
    "intersection3d": "union3d",
}


def emit_root(root: Node, parent: OutputNode, ctx: EncodeContext) -> OutputNode:
    """Emit the synthetic root as a union of all top-level objects.

    Raises:
        UnsupportedVariantError: If the document contains no 2d or 3d geometry,
            or mixes both at top level.
    """
    xcsg_tag = resolve_tag(ROOT_TEMPLATE, dimension(root))
    if xcsg_tag.endswith(WILDCARD):
        raise UnsupportedVariantError(
            "document dimension could not be determined, no geometry found"
        )
    check_same_dimension(root, xcsg_tag)
    xml_root = parent.add_child(xcsg_tag)
    for child in root.children:
        emit_node(child, xml_root, ctx)
    return xml_root


def emit_node(node: Node, parent: OutputNode, ctx: EncodeContext) -> OutputNode | None:
    """Emit ``node`` and its subtree below ``parent``.

    Returns the element created for the node, or None when the node has no
    geometry and was skipped.

    Raises:
        ConversionError: Subclasses describe the first problem found; no
            partial output is meant to be used after a failure.
    """
    openscad_tag = node.tag
    dim = dimension(node)

    template = ctx.mapping.target(openscad_tag)
    if template is None:
        raise node.error(UnsupportedConstructError, f"'{openscad_tag}' is not supported")

    if dim == 0:
        if not node.is_dummy():
            emit_warning(
                "W03",
                f"'{openscad_tag}' produces no geometry and is skipped",
                policy=ctx.warning_policy,
                line=node.line,
                tag=openscad_tag,
            )
        return None

    if openscad_tag == MATRIX_TAG:
        node.assign_matrix()

    xcsg_tag = resolve_tag(template, dim)

    fallback = _SINGLE_CHILD_FALLBACK.get(xcsg_tag)
    if fallback is not None and node.size_children() == 1:
        emit_warning(
            "W01",
            f"'{openscad_tag}' with a single child is emitted as {fallback}",
            policy=ctx.warning_policy,
            line=node.line,
            tag=openscad_tag,
        )
        xcsg_tag = fallback

    encoder = ENCODERS.get(xcsg_tag)
    if encoder is None:
        raise node.error(
            UnsupportedConstructError, f"not supported: '{openscad_tag}' --> {xcsg_tag}"
        )

    xml_this = parent.add_child(xcsg_tag)
    xml_target = encoder(node, xml_this, ctx)

    if node.has_transform:
        write_transform(xml_target, node.transform)

    for child in node.children:
        emit_node(child, xml_target, ctx)
    return xml_this
