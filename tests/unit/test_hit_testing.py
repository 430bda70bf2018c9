"""
Unit tests for hit testing.
"""

import pytest
from models import ShapeKind, Position
from services import (
    LINE_HIT_TOLERANCE, point_to_segment_distance, text_bounds,
    contains_point, shape_at,
)


def fixed_width(text):
    return 50.0


class TestSegmentDistance:
    """Tests for point_to_segment_distance."""

    def test_perpendicular(self):
        assert point_to_segment_distance(5, 3, 0, 0, 10, 0) == pytest.approx(3)

    def test_clamped_to_start(self):
        """Beyond the segment the distance is to the nearer endpoint."""
        assert point_to_segment_distance(-3, 4, 0, 0, 10, 0) == pytest.approx(5)

    def test_clamped_to_end(self):
        assert point_to_segment_distance(13, 4, 0, 0, 10, 0) == pytest.approx(5)

    def test_zero_length(self):
        assert point_to_segment_distance(3, 4, 0, 0, 0, 0) == pytest.approx(5)


class TestContainsPoint:
    """Tests for per-kind containment."""

    def test_rectangle_inclusive(self, empty_diagram):
        rect = empty_diagram.add_node(ShapeKind.RECTANGLE, 0, 0, 100, 40)
        assert contains_point(empty_diagram, rect, 0, 0)
        assert contains_point(empty_diagram, rect, 100, 40)
        assert not contains_point(empty_diagram, rect, 101, 20)

    def test_circle(self, empty_diagram):
        """Circles use the radius of the smaller box extent."""
        circle = empty_diagram.add_node(ShapeKind.CIRCLE, 0, 0, 100, 40)
        assert contains_point(empty_diagram, circle, 50, 20)
        assert contains_point(empty_diagram, circle, 70, 20)
        # Inside the bounding box but outside the radius
        assert not contains_point(empty_diagram, circle, 90, 20)

    def test_connector_tolerance(self, empty_diagram):
        line = empty_diagram.add_connector(ShapeKind.LINE, Position(0, 0), Position(100, 0))
        assert contains_point(empty_diagram, line, 50, 7.9)
        assert not contains_point(empty_diagram, line, 50, LINE_HIT_TOLERANCE)
        assert not contains_point(empty_diagram, line, 120, 0)

    def test_text_band(self, empty_diagram):
        """Text hit box spans 16 above to 4 below the baseline."""
        text = empty_diagram.add_text(10, 100, "label")
        assert text_bounds(text, fixed_width) == (10, 84, 50, 20)
        assert contains_point(empty_diagram, text, 30, 90, fixed_width)
        assert contains_point(empty_diagram, text, 60, 104, fixed_width)
        assert not contains_point(empty_diagram, text, 30, 105, fixed_width)
        assert not contains_point(empty_diagram, text, 61, 90, fixed_width)

    def test_bound_connector_hit_after_node_move(self, connected_diagram):
        """Bound connectors are hit where they are drawn."""
        arrow = connected_diagram.get(3)
        assert contains_point(connected_diagram, arrow, 150, 20)

        connected_diagram.get(2).move_to(200, 200)
        # Now from (100, 20) to (200, 220)
        assert not contains_point(connected_diagram, arrow, 180, 20)
        assert contains_point(connected_diagram, arrow, 150, 120)


class TestShapeAt:
    """Tests for topmost-shape lookup."""

    def test_latest_shape_wins(self, empty_diagram):
        first = empty_diagram.add_node(ShapeKind.RECTANGLE, 0, 0, 100, 100)
        second = empty_diagram.add_node(ShapeKind.RECTANGLE, 50, 50, 100, 100)
        assert shape_at(empty_diagram, 75, 75).id == second.id
        assert shape_at(empty_diagram, 25, 25).id == first.id

    def test_miss(self, connected_diagram):
        assert shape_at(connected_diagram, 150, 300) is None

    def test_connector_between_nodes(self, connected_diagram):
        assert shape_at(connected_diagram, 150, 22).kind == ShapeKind.ARROW
