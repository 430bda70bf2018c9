"""
Integration tests for the canvas and property panel wiring.

Runs the Qt widgets on the offscreen platform, so no display is needed.
"""

import os
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtCore import Qt, QPoint
from PyQt6.QtTest import QTest
from PyQt6.QtWidgets import QApplication

from services import EditorSession
import views.diagram_canvas as diagram_canvas
from views import DiagramCanvas, PropertyPanel


@pytest.fixture(scope="module")
def qt_app() -> QApplication:
    """Shared application instance."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


class FakeInputDialog:
    """Replacement for QInputDialog that always answers with a fixed label."""
    reply = "Start"

    @staticmethod
    def getText(parent, title, label, text=""):
        return FakeInputDialog.reply, True


@pytest.fixture
def wired_canvas(qt_app, connected_diagram, monkeypatch):
    """Canvas over the two-node diagram with a property panel listening."""
    monkeypatch.setattr(diagram_canvas, "QInputDialog", FakeInputDialog)

    canvas = DiagramCanvas(EditorSession(diagram=connected_diagram))
    canvas.resize(400, 300)
    panel = PropertyPanel()
    panel.set_diagram(connected_diagram)

    labels = []
    canvas.selectionChanged.connect(lambda shape: labels.append(shape.label if shape else None))
    canvas.selectionChanged.connect(panel.set_selection)
    canvas.show()
    yield canvas, panel, labels
    canvas.close()


class TestSelectionReload:
    """The panel sees edits made on the canvas to the selected shape."""

    def test_relabel_reloads_selection(self, wired_canvas, connected_diagram):
        canvas, panel, labels = wired_canvas

        QTest.mouseClick(canvas, Qt.MouseButton.LeftButton, pos=QPoint(50, 20))
        assert canvas.session.selected_id == 1
        assert labels[-1] == "A"

        QTest.mouseDClick(canvas, Qt.MouseButton.LeftButton, pos=QPoint(50, 20))
        assert connected_diagram.get(1).label == "Start"
        assert labels[-1] == "Start"
        assert panel._label_edit.text() == "Start"

    def test_leaving_label_field_keeps_relabel(self, wired_canvas, connected_diagram):
        """Finishing an untouched label field does not restore the old label."""
        canvas, panel, _ = wired_canvas

        QTest.mouseClick(canvas, Qt.MouseButton.LeftButton, pos=QPoint(50, 20))
        QTest.mouseDClick(canvas, Qt.MouseButton.LeftButton, pos=QPoint(50, 20))
        panel._label_edit.editingFinished.emit()

        assert connected_diagram.get(1).label == "Start"
