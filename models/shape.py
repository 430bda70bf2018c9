"""
Shape data models.

A diagram is made of a single kind of record, Shape, tagged with a
ShapeKind. Nodes (rectangles, circles) and text use the bounding box
fields; connectors (lines, arrows) use literal start/end positions and
optional anchor references to nodes in the same diagram.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ShapeKind(Enum):
    """Kinds of diagram elements. Values match the editor tool names."""
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    LINE = "line"
    ARROW = "arrow"
    TEXT = "text"

    @property
    def is_node(self) -> bool:
        return self in (ShapeKind.RECTANGLE, ShapeKind.CIRCLE)

    @property
    def is_connector(self) -> bool:
        return self in (ShapeKind.LINE, ShapeKind.ARROW)


class Anchor(Enum):
    """Named attachment points on a node's bounding box."""
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"


@dataclass
class Position:
    """2D position on the canvas."""
    x: float = 0.0
    y: float = 0.0

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def translated(self, dx: float, dy: float) -> "Position":
        return Position(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class AnchorRef:
    """
    Weak reference from a connector endpoint to an anchor on a node.

    Only the node id is stored; the node itself is looked up in the
    diagram whenever the endpoint is read.
    """
    shape_id: int
    anchor: Anchor


@dataclass
class ShapeStyle:
    """Stroke/fill appearance applied to newly created shapes."""
    stroke_color: str = "#000000"
    fill_color: str = "#ffffff"
    line_width: int = 2


@dataclass
class Shape:
    """
    A diagram element.

    Attributes:
        id: Store-assigned identifier, unique and never reused
        kind: Element kind, fixed at creation
        x, y, width, height: Bounding box (nodes); baseline origin (text)
        label: Node caption or text content
        stroke_color: Outline color ("#rrggbb")
        fill_color: Fill color ("#rrggbb"), used by nodes only
        line_width: Stroke width
        start, end: Literal connector endpoints
        start_node, end_node: Anchor bindings for connector endpoints
    """
    id: int
    kind: ShapeKind
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    label: str = ""
    stroke_color: str = "#000000"
    fill_color: str = "#ffffff"
    line_width: int = 2

    # Connector fields
    start: Position = field(default_factory=Position)
    end: Position = field(default_factory=Position)
    start_node: Optional[AnchorRef] = None
    end_node: Optional[AnchorRef] = None

    def __setattr__(self, name, value):
        if name == "kind" and "kind" in self.__dict__:
            raise AttributeError("Shape kind cannot change after creation")
        super().__setattr__(name, value)

    @property
    def is_node(self) -> bool:
        return self.kind.is_node

    @property
    def is_connector(self) -> bool:
        return self.kind.is_connector

    @property
    def is_bound(self) -> bool:
        """True if both connector endpoints are attached to nodes."""
        return self.start_node is not None and self.end_node is not None

    @property
    def name(self) -> str:
        """Identifier-derived name used in exports."""
        return f"node{self.id}"

    @property
    def display_label(self) -> str:
        return self.label or self.name

    def references(self, shape_id: int) -> bool:
        """Check if either connector endpoint is bound to a node."""
        return any(
            ref is not None and ref.shape_id == shape_id
            for ref in (self.start_node, self.end_node)
        )

    def move_to(self, x: float, y: float):
        """Reposition the origin of a node or text shape."""
        self.x = x
        self.y = y

    def translate_free_ends(self, dx: float, dy: float):
        """Translate the unbound literal endpoints of a connector."""
        if self.start_node is None:
            self.start = self.start.translated(dx, dy)
        if self.end_node is None:
            self.end = self.end.translated(dx, dy)
