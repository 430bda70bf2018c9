"""
Unit tests for shape model classes.

Tests:
- ShapeKind classification
- Shape kind immutability
- Connector helpers (binding checks, free-end translation)
"""

import pytest
from models import Shape, ShapeKind, Anchor, AnchorRef, Position, ShapeStyle


class TestShapeKind:
    """Tests for ShapeKind classification."""

    def test_node_kinds(self):
        """Rectangles and circles are nodes."""
        assert ShapeKind.RECTANGLE.is_node
        assert ShapeKind.CIRCLE.is_node
        assert not ShapeKind.LINE.is_node
        assert not ShapeKind.TEXT.is_node

    def test_connector_kinds(self):
        """Lines and arrows are connectors."""
        assert ShapeKind.LINE.is_connector
        assert ShapeKind.ARROW.is_connector
        assert not ShapeKind.RECTANGLE.is_connector
        assert not ShapeKind.TEXT.is_connector


class TestShape:
    """Tests for Shape class."""

    def test_defaults(self):
        """New shapes get the default style."""
        shape = Shape(id=1, kind=ShapeKind.RECTANGLE)
        style = ShapeStyle()
        assert shape.stroke_color == style.stroke_color == "#000000"
        assert shape.fill_color == style.fill_color == "#ffffff"
        assert shape.line_width == style.line_width == 2

    def test_kind_is_immutable(self):
        """Reassigning the kind raises."""
        shape = Shape(id=1, kind=ShapeKind.RECTANGLE)
        with pytest.raises(AttributeError):
            shape.kind = ShapeKind.CIRCLE
        assert shape.kind == ShapeKind.RECTANGLE

    def test_name_and_display_label(self):
        """Unlabelled shapes display their generated name."""
        shape = Shape(id=7, kind=ShapeKind.CIRCLE)
        assert shape.name == "node7"
        assert shape.display_label == "node7"
        shape.label = "Server"
        assert shape.display_label == "Server"

    def test_is_bound(self):
        """A connector is bound only when both ends are attached."""
        line = Shape(id=3, kind=ShapeKind.LINE, start_node=AnchorRef(1, Anchor.EAST))
        assert not line.is_bound
        line.end_node = AnchorRef(2, Anchor.WEST)
        assert line.is_bound

    def test_references(self):
        """references() checks either endpoint."""
        line = Shape(id=3, kind=ShapeKind.LINE,
                     start_node=AnchorRef(1, Anchor.EAST),
                     end_node=AnchorRef(2, Anchor.WEST))
        assert line.references(1)
        assert line.references(2)
        assert not line.references(3)

    def test_translate_free_ends_moves_only_unbound(self):
        """Only unbound literal endpoints are translated."""
        line = Shape(id=3, kind=ShapeKind.LINE,
                     start=Position(0, 0), end=Position(50, 50),
                     start_node=AnchorRef(1, Anchor.NORTH))
        line.translate_free_ends(10, -5)
        assert line.start.to_tuple() == (0, 0)
        assert line.end.to_tuple() == (60, 45)

    def test_move_to(self):
        """move_to repositions the origin."""
        shape = Shape(id=1, kind=ShapeKind.TEXT, x=5, y=5, label="hi")
        shape.move_to(20, 30)
        assert (shape.x, shape.y) == (20, 30)
