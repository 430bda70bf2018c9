"""
Editor tool state machine.

Interprets pointer gestures (down, move*, up) according to the active
tool and commits the result to the diagram. Preview geometry is kept
on the machine and never written to the diagram until pointer-up.

Text entry is handed to the host as a TextRequest continuation, so a
modal dialog and an asynchronous prompt work the same way.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Optional

from models import (
    Anchor, AnchorRef, DiagramModel, Position, Shape, ShapeKind, ShapeStyle,
    anchor_at, anchor_position,
)
from .hit_testing import TextMeasurer, estimate_text_width, shape_at

logger = logging.getLogger(__name__)


# Node drags must exceed this in both axes to be committed
MIN_NODE_SIZE = 5.0


class Tool(Enum):
    """Editor tools. Values match ShapeKind values for drawing tools."""
    SELECT = "select"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    LINE = "line"
    ARROW = "arrow"
    TEXT = "text"

    @property
    def shape_kind(self) -> Optional[ShapeKind]:
        if self == Tool.SELECT:
            return None
        return ShapeKind(self.value)

    @property
    def is_connector(self) -> bool:
        return self in (Tool.LINE, Tool.ARROW)


class GestureState(Enum):
    """Phase of the pointer gesture in progress."""
    IDLE = auto()
    DRAGGING_SHAPE = auto()
    DRAWING_NEW_SHAPE = auto()
    CONNECTING_FROM_ANCHOR = auto()


class PreviewKind(Enum):
    """Outline drawn while a gesture is in progress."""
    RECTANGLE = auto()
    CIRCLE = auto()
    SEGMENT = auto()


@dataclass
class Preview:
    """
    Rubber-band geometry for the renderer.

    RECTANGLE: (x, y, width, height) box, already normalized.
    CIRCLE: centre (x, y) and radius in width.
    SEGMENT: from (x, y) to (x2, y2).
    """
    kind: PreviewKind
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    x2: float = 0.0
    y2: float = 0.0


@dataclass
class HoveredAnchor:
    shape_id: int
    anchor: Anchor


class TextRequest:
    """
    Pending request for text from the operator.

    The host resolves it exactly once with submit() or decline().
    Further calls are ignored.
    """

    def __init__(self, title: str, initial_text: str,
                 on_complete: Callable[[Optional[str]], None]):
        self.title = title
        self.initial_text = initial_text
        self._on_complete = on_complete
        self._resolved = False

    @property
    def resolved(self) -> bool:
        return self._resolved

    def submit(self, text: str):
        """Resolve with the entered text."""
        self._resolve(text)

    def decline(self):
        """Resolve as cancelled."""
        self._resolve(None)

    def _resolve(self, text: Optional[str]):
        if self._resolved:
            return
        self._resolved = True
        self._on_complete(text)


TextPrompt = Callable[[TextRequest], None]


@dataclass
class EditorSession:
    """
    Everything one editor instance works on.

    Attributes:
        diagram: Shape store
        tool: Active tool
        selected_id: Id of the selected shape, if any
        hovered: Anchor under the pointer while idle
        default_style: Style given to new shapes
        measure_text: Rendered width of a text label
    """
    diagram: DiagramModel = field(default_factory=DiagramModel)
    tool: Tool = Tool.SELECT
    selected_id: Optional[int] = None
    hovered: Optional[HoveredAnchor] = None
    default_style: ShapeStyle = field(default_factory=ShapeStyle)
    measure_text: TextMeasurer = estimate_text_width

    @property
    def selected(self) -> Optional[Shape]:
        return self.diagram.get(self.selected_id)


class ToolStateMachine:
    """
    Gesture interpreter for an EditorSession.

    Handlers take canvas coordinates. A handler returns True when the
    diagram was changed so the host can re-serialize and repaint.
    """

    def __init__(self, session: Optional[EditorSession] = None,
                 text_prompt: Optional[TextPrompt] = None):
        self.session = session or EditorSession()
        self._text_prompt = text_prompt
        self._state = GestureState.IDLE
        self._preview: Optional[Preview] = None
        self._pending_text: Optional[TextRequest] = None

        # Gesture bookkeeping
        self._start = Position()
        self._last_pointer = Position()
        self._drag_offset = Position()
        self._source: Optional[AnchorRef] = None

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def preview(self) -> Optional[Preview]:
        return self._preview

    @property
    def pending_text(self) -> Optional[TextRequest]:
        return self._pending_text

    @property
    def diagram(self) -> DiagramModel:
        return self.session.diagram

    # ------------------------------------------------------------------
    # Tool and selection
    # ------------------------------------------------------------------

    def set_tool(self, tool: Tool):
        """Switch tools, abandoning any gesture in progress."""
        self.cancel()
        self.session.tool = tool
        self.session.hovered = None
        logger.debug(f"Tool set to {tool.value}")

    def cancel(self):
        """Abandon the current gesture without touching the diagram."""
        if self._state != GestureState.IDLE:
            logger.debug(f"Cancelled gesture in state {self._state.name}")
        self._reset()

    def _reset(self):
        self._state = GestureState.IDLE
        self._preview = None
        self._source = None

    def delete_selected(self) -> bool:
        """Delete the selected shape."""
        shape = self.session.selected
        if shape is None:
            return False
        self.cancel()
        self.diagram.delete(shape.id)
        self.session.selected_id = None
        logger.info(f"Deleted {shape.kind.value} {shape.name}")
        return True

    def relabel_selected(self) -> bool:
        """
        Ask the operator for a new label for the selected node.

        Returns:
            True if a text request was issued
        """
        shape = self.session.selected
        if shape is None or not shape.is_node or self._pending_text is not None:
            return False

        shape_id = shape.id

        def on_complete(text: Optional[str]):
            self._pending_text = None
            if text is not None and shape_id in self.diagram:
                self.diagram.set_property(shape_id, "label", text)
                logger.info(f"Relabelled node{shape_id}")

        return self._request_text("Enter label:", shape.label, on_complete)

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def pointer_down(self, x: float, y: float) -> bool:
        """Start a gesture."""
        if self._pending_text is not None:
            return False

        tool = self.session.tool
        self._start = Position(x, y)
        self._last_pointer = Position(x, y)

        if tool == Tool.SELECT:
            shape = shape_at(self.diagram, x, y, self.session.measure_text)
            if shape is None:
                self.session.selected_id = None
                return False
            self.session.selected_id = shape.id
            if shape.is_connector:
                self._drag_offset = Position(x - shape.start.x, y - shape.start.y)
            else:
                self._drag_offset = Position(x - shape.x, y - shape.y)
            self._state = GestureState.DRAGGING_SHAPE
            logger.debug(f"Dragging {shape.name}")
            return False

        if tool.is_connector:
            hit = anchor_at(self.diagram, x, y)
            if hit is not None:
                node, anchor = hit
                self._source = AnchorRef(node.id, anchor)
                self._state = GestureState.CONNECTING_FROM_ANCHOR
                origin = anchor_position(node, anchor)
                self._preview = Preview(PreviewKind.SEGMENT, origin.x, origin.y, x2=x, y2=y)
                logger.debug(f"Connecting from {node.name}.{anchor.value}")
                return False

        self._state = GestureState.DRAWING_NEW_SHAPE
        self._preview = None
        return False

    def pointer_move(self, x: float, y: float) -> bool:
        """Advance the current gesture, or track hover while idle."""
        if self._pending_text is not None:
            return False

        if self._state == GestureState.IDLE:
            self._update_hover(x, y)
            return False

        if self._state == GestureState.DRAGGING_SHAPE:
            return self._drag_to(x, y)

        if self._state == GestureState.CONNECTING_FROM_ANCHOR:
            node = self.diagram.get(self._source.shape_id) if self._source else None
            if node is None:
                self._reset()
                return False
            origin = anchor_position(node, self._source.anchor)
            self._preview = Preview(PreviewKind.SEGMENT, origin.x, origin.y, x2=x, y2=y)
            self._update_hover(x, y, exclude_id=node.id)
            return False

        self._preview = self._drawing_preview(x, y)
        return False

    def pointer_up(self, x: float, y: float) -> bool:
        """Finish the current gesture, committing or discarding it."""
        if self._pending_text is not None:
            return False

        state = self._state
        revision = self.diagram.revision

        if state == GestureState.DRAGGING_SHAPE:
            self._drag_to(x, y)
        elif state == GestureState.CONNECTING_FROM_ANCHOR:
            self._finish_connection(x, y)
        elif state == GestureState.DRAWING_NEW_SHAPE:
            self._finish_drawing(x, y)

        self._reset()
        self._update_hover(x, y)
        # A synchronous text prompt commits before we get here
        return self.diagram.revision != revision

    # ------------------------------------------------------------------
    # Gesture internals
    # ------------------------------------------------------------------

    def _update_hover(self, x: float, y: float, exclude_id: Optional[int] = None):
        tool = self.session.tool
        if tool != Tool.SELECT and not tool.is_connector:
            self.session.hovered = None
            return
        hit = anchor_at(self.diagram, x, y, exclude_id=exclude_id)
        self.session.hovered = HoveredAnchor(hit[0].id, hit[1]) if hit else None

    def _drag_to(self, x: float, y: float) -> bool:
        shape = self.session.selected
        if shape is None:
            self._reset()
            return False

        if shape.is_connector:
            if shape.is_bound:
                # Both ends follow their nodes
                return False
            dx = x - self._last_pointer.x
            dy = y - self._last_pointer.y
            self._last_pointer = Position(x, y)
            if dx == 0 and dy == 0:
                return False
            shape.translate_free_ends(dx, dy)
        else:
            new_x = x - self._drag_offset.x
            new_y = y - self._drag_offset.y
            if new_x == shape.x and new_y == shape.y:
                return False
            shape.move_to(new_x, new_y)

        self.diagram.touch()
        return True

    def _drawing_preview(self, x: float, y: float) -> Optional[Preview]:
        tool = self.session.tool
        sx, sy = self._start.x, self._start.y
        width = x - sx
        height = y - sy

        if tool.is_connector:
            return Preview(PreviewKind.SEGMENT, sx, sy, x2=x, y2=y)
        if tool == Tool.RECTANGLE:
            return Preview(PreviewKind.RECTANGLE, min(sx, x), min(sy, y), abs(width), abs(height))
        if tool == Tool.CIRCLE:
            radius = min(abs(width), abs(height)) / 2
            return Preview(PreviewKind.CIRCLE, sx + width / 2, sy + height / 2, radius)
        return None

    def _finish_connection(self, x: float, y: float) -> bool:
        source = self._source
        if source is None or source.shape_id not in self.diagram:
            return False

        hit = anchor_at(self.diagram, x, y, exclude_id=source.shape_id)
        if hit is None:
            logger.debug("Connection released away from any anchor, discarded")
            return False

        node, anchor = hit
        connector = self.diagram.add_connector(
            self.session.tool.shape_kind,
            start_node=source,
            end_node=AnchorRef(node.id, anchor),
            style=self.session.default_style,
        )
        if connector is None:
            return False
        logger.info(
            f"Connected node{source.shape_id}.{source.anchor.value} -> "
            f"{node.name}.{anchor.value} with {connector.kind.value} {connector.name}"
        )
        return True

    def _finish_drawing(self, x: float, y: float) -> bool:
        tool = self.session.tool
        sx, sy = self._start.x, self._start.y
        width = x - sx
        height = y - sy
        style = self.session.default_style

        if tool == Tool.TEXT:
            def on_complete(text: Optional[str]):
                self._pending_text = None
                if text:
                    shape = self.diagram.add_text(sx, sy, text, style=style)
                    logger.info(f"Created text {shape.name}")
                else:
                    logger.debug("Text entry declined, discarded")

            self._request_text("Enter text:", "", on_complete)
            return False

        if tool.is_connector:
            shape = self.diagram.add_connector(
                tool.shape_kind, start=Position(sx, sy), end=Position(x, y), style=style,
            )
            logger.info(f"Created free {shape.kind.value} {shape.name}")
            return True

        if abs(width) > MIN_NODE_SIZE and abs(height) > MIN_NODE_SIZE:
            shape = self.diagram.add_node(
                tool.shape_kind, min(sx, x), min(sy, y), abs(width), abs(height), style=style,
            )
            logger.info(f"Created {shape.kind.value} {shape.name}")
            return True

        logger.debug(f"Drag of {abs(width)}x{abs(height)} below minimum node size, discarded")
        return False

    def _request_text(self, title: str, initial: str,
                      on_complete: Callable[[Optional[str]], None]) -> bool:
        request = TextRequest(title, initial, on_complete)
        if self._text_prompt is None:
            logger.debug("No text prompt available, declining")
            request.decline()
            return False
        self._pending_text = request
        self._text_prompt(request)
        return True
