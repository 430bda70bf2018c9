"""
Hit testing.

Decides what the pointer is touching. All connector tests use live
endpoint resolution so a connector bound to a node that has moved is
hit where it is drawn.
"""

import math
from typing import Callable, Optional

from models import DiagramModel, Shape, ShapeKind
from models.anchors import resolve_endpoints


# Max distance from a connector segment that still counts as a hit
LINE_HIT_TOLERANCE = 8.0

# Text hit band relative to the baseline
TEXT_ASCENT = 16.0
TEXT_DESCENT = 4.0

# Rough advance of a 16px sans-serif glyph when no font metrics are available
DEFAULT_CHAR_WIDTH = 8.0

TextMeasurer = Callable[[str], float]


def estimate_text_width(text: str) -> float:
    """Fallback text measurer based on character count."""
    return len(text) * DEFAULT_CHAR_WIDTH


def point_to_segment_distance(px: float, py: float,
                              x1: float, y1: float,
                              x2: float, y2: float) -> float:
    """Distance from a point to the segment (x1, y1)-(x2, y2)."""
    dx = x2 - x1
    dy = y2 - y1
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(px - x1, py - y1)

    t = ((px - x1) * dx + (py - y1) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(px - (x1 + t * dx), py - (y1 + t * dy))


def text_bounds(shape: Shape, measure_text: Optional[TextMeasurer] = None) -> tuple[float, float, float, float]:
    """Derived (x, y, width, height) hit box of a text shape."""
    measure = measure_text or estimate_text_width
    width = measure(shape.label)
    return (shape.x, shape.y - TEXT_ASCENT, width, TEXT_ASCENT + TEXT_DESCENT)


def contains_point(
    diagram: DiagramModel,
    shape: Shape,
    x: float,
    y: float,
    measure_text: Optional[TextMeasurer] = None,
) -> bool:
    """
    Check whether a point lies on a shape.

    Args:
        diagram: Diagram used to resolve connector bindings
        shape: Shape to test
        x, y: Pointer position
        measure_text: Returns the rendered width of a string

    Returns:
        True if the point hits the shape
    """
    if shape.kind.is_connector:
        start, end = resolve_endpoints(diagram, shape)
        distance = point_to_segment_distance(x, y, start.x, start.y, end.x, end.y)
        return distance < LINE_HIT_TOLERANCE

    if shape.kind == ShapeKind.CIRCLE:
        radius = min(shape.width, shape.height) / 2
        cx = shape.x + shape.width / 2
        cy = shape.y + shape.height / 2
        return math.hypot(x - cx, y - cy) <= radius

    if shape.kind == ShapeKind.TEXT:
        left, top, width, height = text_bounds(shape, measure_text)
        return left <= x <= left + width and top <= y <= top + height

    return (shape.x <= x <= shape.x + shape.width and
            shape.y <= y <= shape.y + shape.height)


def shape_at(
    diagram: DiagramModel,
    x: float,
    y: float,
    measure_text: Optional[TextMeasurer] = None,
) -> Optional[Shape]:
    """Topmost shape under the pointer (latest created wins)."""
    for shape in reversed(diagram.shapes()):
        if contains_point(diagram, shape, x, y, measure_text):
            return shape
    return None
