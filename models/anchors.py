"""
Anchor location and connector endpoint resolution.

Every node exposes four anchors at the midpoints of its bounding box
edges. Circles use their bounding square, not the circumference.
Connector endpoints bound to an anchor are always resolved from the
node's current geometry; the literal coordinates stored on a bound
endpoint are never read.
"""

import math
from typing import TYPE_CHECKING, Optional

from .shape import Anchor, AnchorRef, Position, Shape

if TYPE_CHECKING:
    from .diagram import DiagramModel


# Pointer must be strictly closer than this to snap to an anchor
ANCHOR_SNAP_DISTANCE = 10.0


def anchor_points(shape: Shape) -> dict[Anchor, Position]:
    """Return the four anchor positions of a node (empty for other kinds)."""
    if not shape.is_node:
        return {}

    cx = shape.x + shape.width / 2
    cy = shape.y + shape.height / 2
    return {
        Anchor.NORTH: Position(cx, shape.y),
        Anchor.SOUTH: Position(cx, shape.y + shape.height),
        Anchor.EAST: Position(shape.x + shape.width, cy),
        Anchor.WEST: Position(shape.x, cy),
    }


def anchor_position(shape: Shape, anchor: Anchor) -> Position:
    """Position of a single anchor on a node."""
    points = anchor_points(shape)
    if anchor in points:
        return points[anchor]
    return Position(shape.x + shape.width / 2, shape.y + shape.height / 2)


def find_anchor(
    shape: Shape,
    x: float,
    y: float,
    threshold: float = ANCHOR_SNAP_DISTANCE,
) -> Optional[Anchor]:
    """
    Find the anchor of a node nearest to a pointer position.

    Args:
        shape: Node to test
        x, y: Pointer position
        threshold: Exclusive snap distance

    Returns:
        The nearest anchor within the threshold, or None
    """
    best: Optional[Anchor] = None
    best_distance = threshold
    for anchor, point in anchor_points(shape).items():
        distance = math.hypot(x - point.x, y - point.y)
        if distance < best_distance:
            best = anchor
            best_distance = distance
    return best


def anchor_at(
    diagram: "DiagramModel",
    x: float,
    y: float,
    exclude_id: Optional[int] = None,
) -> Optional[tuple[Shape, Anchor]]:
    """
    Find the topmost node anchor under the pointer.

    Nodes are scanned in reverse creation order so the most recently
    created node wins where anchors overlap.
    """
    for shape in reversed(diagram.shapes()):
        if not shape.is_node or shape.id == exclude_id:
            continue
        anchor = find_anchor(shape, x, y)
        if anchor is not None:
            return shape, anchor
    return None


def resolve_endpoint(
    diagram: "DiagramModel",
    ref: Optional[AnchorRef],
    literal: Position,
) -> Position:
    """Live position of one connector endpoint."""
    if ref is not None:
        node = diagram.get(ref.shape_id)
        if node is not None and node.is_node:
            return anchor_position(node, ref.anchor)
    return Position(literal.x, literal.y)


def resolve_endpoints(diagram: "DiagramModel", connector: Shape) -> tuple[Position, Position]:
    """Live (start, end) positions of a connector."""
    return (
        resolve_endpoint(diagram, connector.start_node, connector.start),
        resolve_endpoint(diagram, connector.end_node, connector.end),
    )
