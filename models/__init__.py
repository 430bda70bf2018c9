"""
Models package.

This package contains the data models of the diagram editor:
- Shapes and their kinds, anchors and styles
- Anchor location and connector endpoint resolution
- The diagram store (DiagramModel)
"""

from .shape import (
    ShapeKind,
    Anchor,
    Position,
    AnchorRef,
    ShapeStyle,
    Shape,
)
from .anchors import (
    ANCHOR_SNAP_DISTANCE,
    anchor_points,
    anchor_position,
    find_anchor,
    anchor_at,
    resolve_endpoint,
    resolve_endpoints,
)
from .diagram import (
    DiagramModel,
    EDITABLE_PROPERTIES,
    MIN_LINE_WIDTH,
    MAX_LINE_WIDTH,
)


__all__ = [
    # Shapes
    "ShapeKind",
    "Anchor",
    "Position",
    "AnchorRef",
    "ShapeStyle",
    "Shape",
    # Anchors
    "ANCHOR_SNAP_DISTANCE",
    "anchor_points",
    "anchor_position",
    "find_anchor",
    "anchor_at",
    "resolve_endpoint",
    "resolve_endpoints",
    # Diagram
    "DiagramModel",
    "EDITABLE_PROPERTIES",
    "MIN_LINE_WIDTH",
    "MAX_LINE_WIDTH",
]
