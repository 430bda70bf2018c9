"""
Diagram canvas for visual editing.

Paints the diagram with QPainter and forwards pointer and keyboard
events to the ToolStateMachine. Connector endpoints are resolved
through the same anchor functions the hit tester uses, so what is drawn
is what can be clicked.
"""

import math
import logging
from typing import Optional
from PyQt6.QtCore import Qt, QPointF, QRectF, pyqtSignal
from PyQt6.QtGui import (
    QPainter, QPen, QBrush, QColor, QFont, QFontMetricsF,
    QPolygonF, QMouseEvent, QKeyEvent, QPaintEvent
)
from PyQt6.QtWidgets import QWidget, QInputDialog

from models import Shape, ShapeKind, anchor_points, resolve_endpoints
from services import (
    EditorSession, ToolStateMachine, Tool, TextRequest, PreviewKind,
    UISettings, text_bounds,
)

# Setup logger for this module
logger = logging.getLogger(__name__)


# Color scheme
COLORS = {
    "background": QColor("#FFFFFF"),
    "grid": QColor("#F1F3F5"),
    "selection": QColor("#0d6efd"),        # Blue glow / text box
    "anchor": QColor("#dee2e6"),           # Light gray
    "anchor_selected": QColor("#6c757d"),  # Gray on selected node
    "anchor_hover": QColor("#0d6efd"),     # Blue under pointer
    "anchor_outline": QColor("#495057"),
    "preview": QColor("#666666"),
}

ARROW_HEAD_LENGTH = 15.0
ARROW_HEAD_ANGLE = math.pi / 6


class DiagramCanvas(QWidget):
    """
    Main canvas widget for drawing and editing diagrams.

    Signals:
        diagramChanged(): The diagram was mutated by an edit
        selectionChanged(object): Selected Shape or None
    """

    diagramChanged = pyqtSignal()
    selectionChanged = pyqtSignal(object)

    def __init__(self, session: EditorSession, ui_settings: Optional[UISettings] = None,
                 parent=None):
        super().__init__(parent)
        self._ui = ui_settings or UISettings()

        self._text_font = QFont(self._ui.text_font_family)
        self._text_font.setPixelSize(self._ui.text_font_size)
        self._label_font = QFont(self._ui.text_font_family)
        self._label_font.setPixelSize(self._ui.label_font_size)
        self._text_metrics = QFontMetricsF(self._text_font)

        self.session = session
        self.session.measure_text = self._text_metrics.horizontalAdvance
        self.machine = ToolStateMachine(session, text_prompt=self._prompt_text)

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMinimumSize(400, 300)
        self._last_selected_id: Optional[int] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def set_tool(self, tool: Tool):
        """Activate a tool."""
        self.machine.set_tool(tool)
        self._update_cursor()
        self.update()

    def delete_selected(self):
        """Delete the selected shape."""
        if self.machine.delete_selected():
            self._after_edit(True)

    def clear_diagram(self):
        """Remove every shape."""
        self.machine.cancel()
        self.session.selected_id = None
        self.session.diagram.clear()
        self._after_edit(True)

    def refresh(self):
        """Repaint after an external change (e.g. property edit)."""
        if self.session.selected is None:
            self.session.selected_id = None
        self._emit_selection()
        self.update()

    # ------------------------------------------------------------------
    # Prompt
    # ------------------------------------------------------------------

    def _prompt_text(self, request: TextRequest):
        """Resolve a text request with a modal input dialog."""
        text, ok = QInputDialog.getText(
            self, "Diagram Editor", request.title, text=request.initial_text
        )
        if ok:
            request.submit(text)
        else:
            request.decline()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        pos = event.position()
        changed = self.machine.pointer_down(pos.x(), pos.y())
        self._after_edit(changed)
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent):
        pos = event.position()
        changed = self.machine.pointer_move(pos.x(), pos.y())
        self._update_cursor()
        self._after_edit(changed)
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(event)
            return
        pos = event.position()
        changed = self.machine.pointer_up(pos.x(), pos.y())
        self._after_edit(changed)
        event.accept()

    def mouseDoubleClickEvent(self, event: QMouseEvent):
        revision = self.session.diagram.revision
        self.machine.relabel_selected()
        self._after_edit(self.session.diagram.revision != revision)
        event.accept()

    def keyPressEvent(self, event: QKeyEvent):
        if event.key() in (Qt.Key.Key_Delete, Qt.Key.Key_Backspace):
            self.delete_selected()
            event.accept()
        elif event.key() == Qt.Key.Key_Escape:
            self.machine.cancel()
            self.update()
            event.accept()
        else:
            super().keyPressEvent(event)

    def _after_edit(self, changed: bool):
        if changed:
            self.diagramChanged.emit()
        # An edit may have rewritten the selected shape, so listeners reload it
        self._emit_selection(force=changed)
        self.update()

    def _emit_selection(self, force: bool = False):
        selected_id = self.session.selected_id
        if force or selected_id != self._last_selected_id:
            self._last_selected_id = selected_id
            self.selectionChanged.emit(self.session.selected)

    def _update_cursor(self):
        if self.session.hovered is not None or self.session.tool != Tool.SELECT:
            self.setCursor(Qt.CursorShape.CrossCursor)
        else:
            self.unsetCursor()

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), COLORS["background"])

        if self._ui.show_grid:
            self._draw_grid(painter)

        show_all_anchors = self.session.tool.is_connector
        for shape in self.session.diagram:
            selected = shape.id == self.session.selected_id
            self._draw_shape(painter, shape, selected)
            if shape.is_node and (selected or show_all_anchors):
                self._draw_anchors(painter, shape, selected)

        self._draw_preview(painter)
        painter.end()

    def _draw_grid(self, painter: QPainter):
        grid_size = max(self._ui.grid_size, 5)
        painter.setPen(QPen(COLORS["grid"], 1))
        rect = self.rect()

        x = 0
        while x < rect.right():
            painter.drawLine(x, rect.top(), x, rect.bottom())
            x += grid_size
        y = 0
        while y < rect.bottom():
            painter.drawLine(rect.left(), y, rect.right(), y)
            y += grid_size

    def _draw_shape(self, painter: QPainter, shape: Shape, selected: bool):
        painter.save()
        stroke = QColor(shape.stroke_color)
        width = shape.line_width + 1 if selected else shape.line_width

        if selected:
            glow_color = QColor(COLORS["selection"])
            glow_color.setAlpha(80)
            self._stroke_outline(painter, shape, QPen(glow_color, width + 4))

        pen = QPen(stroke, width)
        painter.setPen(pen)
        painter.setBrush(QBrush(QColor(shape.fill_color)))

        if shape.kind == ShapeKind.RECTANGLE:
            painter.drawRect(QRectF(shape.x, shape.y, shape.width, shape.height))
        elif shape.kind == ShapeKind.CIRCLE:
            radius = min(shape.width, shape.height) / 2
            center = QPointF(shape.x + shape.width / 2, shape.y + shape.height / 2)
            painter.drawEllipse(center, radius, radius)
        elif shape.kind.is_connector:
            self._draw_connector(painter, shape, pen)
        elif shape.kind == ShapeKind.TEXT:
            painter.setFont(self._text_font)
            painter.setPen(stroke)
            painter.drawText(QPointF(shape.x, shape.y), shape.label)
            if selected:
                x, y, w, h = text_bounds(shape, self.session.measure_text)
                painter.setPen(QPen(COLORS["selection"], 1))
                painter.setBrush(Qt.BrushStyle.NoBrush)
                painter.drawRect(QRectF(x - 2, y, w + 4, h))

        if shape.is_node and shape.label:
            painter.setFont(self._label_font)
            painter.setPen(stroke)
            painter.drawText(
                QRectF(shape.x, shape.y, shape.width, shape.height),
                Qt.AlignmentFlag.AlignCenter,
                shape.label,
            )
        painter.restore()

    def _stroke_outline(self, painter: QPainter, shape: Shape, pen: QPen):
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        if shape.kind == ShapeKind.RECTANGLE:
            painter.drawRect(QRectF(shape.x, shape.y, shape.width, shape.height))
        elif shape.kind == ShapeKind.CIRCLE:
            radius = min(shape.width, shape.height) / 2
            painter.drawEllipse(
                QPointF(shape.x + shape.width / 2, shape.y + shape.height / 2), radius, radius
            )
        elif shape.kind.is_connector:
            start, end = resolve_endpoints(self.session.diagram, shape)
            painter.drawLine(QPointF(start.x, start.y), QPointF(end.x, end.y))

    def _draw_connector(self, painter: QPainter, shape: Shape, pen: QPen):
        start, end = resolve_endpoints(self.session.diagram, shape)
        painter.drawLine(QPointF(start.x, start.y), QPointF(end.x, end.y))
        if shape.kind != ShapeKind.ARROW:
            return

        angle = math.atan2(end.y - start.y, end.x - start.x)
        head = QPolygonF([
            QPointF(end.x, end.y),
            QPointF(end.x - ARROW_HEAD_LENGTH * math.cos(angle - ARROW_HEAD_ANGLE),
                    end.y - ARROW_HEAD_LENGTH * math.sin(angle - ARROW_HEAD_ANGLE)),
            QPointF(end.x - ARROW_HEAD_LENGTH * math.cos(angle + ARROW_HEAD_ANGLE),
                    end.y - ARROW_HEAD_LENGTH * math.sin(angle + ARROW_HEAD_ANGLE)),
        ])
        painter.setBrush(QBrush(pen.color()))
        painter.drawPolygon(head)

    def _draw_anchors(self, painter: QPainter, shape: Shape, selected: bool):
        painter.save()
        radius = self._ui.anchor_radius
        hovered = self.session.hovered
        painter.setPen(QPen(COLORS["anchor_outline"], 1))

        for anchor, point in anchor_points(shape).items():
            if hovered and hovered.shape_id == shape.id and hovered.anchor == anchor:
                color = COLORS["anchor_hover"]
            elif selected:
                color = COLORS["anchor_selected"]
            else:
                color = COLORS["anchor"]
            painter.setBrush(QBrush(color))
            painter.drawEllipse(QPointF(point.x, point.y), radius, radius)
        painter.restore()

    def _draw_preview(self, painter: QPainter):
        preview = self.machine.preview
        if preview is None:
            return

        painter.save()
        pen = QPen(COLORS["preview"], 2, Qt.PenStyle.DashLine)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)

        if preview.kind == PreviewKind.SEGMENT:
            painter.drawLine(QPointF(preview.x, preview.y), QPointF(preview.x2, preview.y2))
        elif preview.kind == PreviewKind.RECTANGLE:
            painter.drawRect(QRectF(preview.x, preview.y, preview.width, preview.height))
        elif preview.kind == PreviewKind.CIRCLE:
            painter.drawEllipse(QPointF(preview.x, preview.y), preview.width, preview.width)
        painter.restore()
