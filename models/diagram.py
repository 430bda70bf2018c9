"""
Diagram model.

The DiagramModel is the ordered store of every shape on the canvas.
Iteration order is creation order, which is also draw order.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from .anchors import resolve_endpoints
from .shape import AnchorRef, Position, Shape, ShapeKind, ShapeStyle

logger = logging.getLogger(__name__)


HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")
MIN_LINE_WIDTH = 1
MAX_LINE_WIDTH = 10

# Properties the property editor may write, per kind
EDITABLE_PROPERTIES = {
    ShapeKind.RECTANGLE: ("label", "stroke_color", "fill_color", "line_width"),
    ShapeKind.CIRCLE: ("label", "stroke_color", "fill_color", "line_width"),
    ShapeKind.LINE: ("stroke_color", "line_width"),
    ShapeKind.ARROW: ("stroke_color", "line_width"),
    ShapeKind.TEXT: ("label", "stroke_color"),
}


@dataclass
class DiagramModel:
    """
    Root model containing every shape of a diagram.

    Connector bindings are store-relative ids. Deleting a node freezes
    the connectors bound to it into freestanding lines.
    """
    _shapes: dict[int, Shape] = field(default_factory=dict, repr=False)
    _next_id: int = field(default=1, repr=False)

    # Bumped on every mutation so observers can tell when to refresh
    revision: int = 0

    def __len__(self) -> int:
        return len(self._shapes)

    def __iter__(self) -> Iterator[Shape]:
        return iter(list(self._shapes.values()))

    def __contains__(self, shape_id: int) -> bool:
        return shape_id in self._shapes

    def touch(self):
        """Record a mutation made directly on a shape (e.g. a drag)."""
        self.revision += 1

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create(
        self,
        kind: ShapeKind,
        x: float = 0.0,
        y: float = 0.0,
        width: float = 0.0,
        height: float = 0.0,
        label: str = "",
        start: Optional[Position] = None,
        end: Optional[Position] = None,
        start_node: Optional[AnchorRef] = None,
        end_node: Optional[AnchorRef] = None,
        style: Optional[ShapeStyle] = None,
    ) -> Optional[Shape]:
        """
        Create a shape, assign it the next id and append it.

        Node boxes with a negative extent are normalized to the min corner.
        Returns None if a connector binding does not name an existing node.
        """
        if not isinstance(kind, ShapeKind):
            logger.warning(f"Refusing to create shape of unknown kind {kind!r}")
            return None

        if kind.is_connector:
            for ref in (start_node, end_node):
                if ref is not None and not self._is_valid_ref(ref):
                    logger.warning(f"Refusing {kind.value} bound to missing node {ref.shape_id}")
                    return None
        elif start_node is not None or end_node is not None:
            logger.warning(f"Refusing anchor bindings on {kind.value} shape")
            return None

        if kind.is_node:
            if width < 0:
                x, width = x + width, -width
            if height < 0:
                y, height = y + height, -height

        style = style or ShapeStyle()
        shape = Shape(
            id=self._next_id,
            kind=kind,
            x=x,
            y=y,
            width=width,
            height=height,
            label=label if not kind.is_connector else "",
            stroke_color=style.stroke_color,
            fill_color=style.fill_color,
            line_width=style.line_width,
            start=start or Position(),
            end=end or Position(),
            start_node=start_node,
            end_node=end_node,
        )
        self._next_id += 1
        self._shapes[shape.id] = shape
        self.revision += 1
        logger.debug(f"Created {kind.value} {shape.name}")
        return shape

    def add_node(self, kind: ShapeKind, x: float, y: float, width: float,
                 height: float, label: str = "",
                 style: Optional[ShapeStyle] = None) -> Optional[Shape]:
        """Create a rectangle or circle."""
        if not kind.is_node:
            logger.warning(f"{kind.value} is not a node kind")
            return None
        return self.create(kind, x, y, width, height, label=label, style=style)

    def add_text(self, x: float, y: float, text: str,
                 style: Optional[ShapeStyle] = None) -> Optional[Shape]:
        """Create a text shape with its baseline origin at (x, y)."""
        return self.create(ShapeKind.TEXT, x, y, label=text, style=style)

    def add_connector(
        self,
        kind: ShapeKind,
        start: Optional[Position] = None,
        end: Optional[Position] = None,
        start_node: Optional[AnchorRef] = None,
        end_node: Optional[AnchorRef] = None,
        style: Optional[ShapeStyle] = None,
    ) -> Optional[Shape]:
        """Create a line or arrow, free or bound."""
        if not kind.is_connector:
            logger.warning(f"{kind.value} is not a connector kind")
            return None
        return self.create(kind, start=start, end=end, start_node=start_node,
                           end_node=end_node, style=style)

    def _is_valid_ref(self, ref: AnchorRef) -> bool:
        node = self._shapes.get(ref.shape_id)
        return node is not None and node.is_node

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, shape_id: Optional[int]) -> Optional[Shape]:
        """Get a shape by id."""
        if shape_id is None:
            return None
        return self._shapes.get(shape_id)

    def shapes(self) -> list[Shape]:
        """All shapes in creation order."""
        return list(self._shapes.values())

    def nodes(self) -> list[Shape]:
        """Rectangles and circles in creation order."""
        return [s for s in self._shapes.values() if s.is_node]

    def connectors(self) -> list[Shape]:
        """Lines and arrows in creation order."""
        return [s for s in self._shapes.values() if s.is_connector]

    def connectors_for(self, node_id: int) -> list[Shape]:
        """Connectors with at least one endpoint bound to a node."""
        return [c for c in self.connectors() if c.references(node_id)]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_property(self, shape_id: int, name: str, value: Any) -> bool:
        """
        Write a single editable property of a shape.

        Returns:
            True if the value was accepted and applied
        """
        shape = self._shapes.get(shape_id)
        if shape is None:
            return False

        if name not in EDITABLE_PROPERTIES[shape.kind]:
            logger.warning(f"Property '{name}' is not editable on {shape.kind.value}")
            return False

        if name in ("stroke_color", "fill_color"):
            if not isinstance(value, str) or not HEX_COLOR.match(value):
                logger.warning(f"Invalid color {value!r} for {shape.name}")
                return False
        elif name == "line_width":
            if isinstance(value, bool) or not isinstance(value, int):
                logger.warning(f"Invalid line width {value!r} for {shape.name}")
                return False
            if not MIN_LINE_WIDTH <= value <= MAX_LINE_WIDTH:
                logger.warning(f"Line width {value} out of range for {shape.name}")
                return False
        elif name == "label":
            value = "" if value is None else str(value)

        setattr(shape, name, value)
        self.revision += 1
        return True

    def delete(self, shape_id: int) -> Optional[Shape]:
        """
        Remove a shape.

        Connectors bound to a deleted node keep their last resolved
        endpoints as literal positions and lose both bindings.
        """
        shape = self._shapes.get(shape_id)
        if shape is None:
            return None

        if shape.is_node:
            for connector in self.connectors_for(shape_id):
                start, end = resolve_endpoints(self, connector)
                connector.start = start
                connector.end = end
                connector.start_node = None
                connector.end_node = None
                logger.debug(f"Unbound {connector.name} from deleted {shape.name}")

        del self._shapes[shape_id]
        self.revision += 1
        logger.debug(f"Deleted {shape.kind.value} {shape.name}")
        return shape

    def clear(self):
        """Remove every shape. Ids keep increasing afterwards."""
        self._shapes.clear()
        self.revision += 1
