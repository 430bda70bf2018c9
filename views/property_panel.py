"""
Property panel for editing the selected shape.

Shows only the properties editable on the selected shape's kind and
writes each change back through DiagramModel.set_property.
"""

from typing import Optional
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QFont, QColor
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QFormLayout, QLabel, QLineEdit,
    QSpinBox, QPushButton, QColorDialog
)

from models import (
    DiagramModel, Shape, EDITABLE_PROPERTIES, MIN_LINE_WIDTH, MAX_LINE_WIDTH
)


class SectionHeader(QLabel):
    """Styled section header."""

    def __init__(self, text: str, parent=None):
        super().__init__(text, parent)
        font = QFont("SF Pro Display", 11)
        font.setWeight(QFont.Weight.DemiBold)
        self.setFont(font)
        self.setStyleSheet("""
            QLabel {
                color: #374151;
                padding: 2px 0 4px 0;
                border-bottom: 1px solid #E5E7EB;
                margin-top: 8px;
            }
        """)


class ColorButton(QPushButton):
    """Button showing a color swatch; opens a color picker when clicked."""

    colorChanged = pyqtSignal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._color = "#000000"
        self.setFixedHeight(24)
        self.clicked.connect(self._pick)

    def set_color(self, color: str):
        self._color = color
        self.setText(color)
        self.setStyleSheet(f"""
            QPushButton {{
                background: {color};
                color: {self._contrast(color)};
                border: 1px solid #D1D5DB;
                border-radius: 4px;
            }}
        """)

    def _pick(self):
        chosen = QColorDialog.getColor(QColor(self._color), self, "Choose Color")
        if chosen.isValid():
            color = chosen.name()
            self.set_color(color)
            self.colorChanged.emit(color)

    @staticmethod
    def _contrast(color: str) -> str:
        return "#000000" if QColor(color).lightness() > 128 else "#FFFFFF"


class PropertyPanel(QWidget):
    """
    Panel for displaying and editing shape properties.

    Signals:
        propertiesChanged(): A property was written to the diagram
        deleteRequested(): The operator asked to delete the selection
    """

    propertiesChanged = pyqtSignal()
    deleteRequested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._diagram: Optional[DiagramModel] = None
        self._shape: Optional[Shape] = None
        self._setup_ui()
        self.set_selection(None)

    def set_diagram(self, diagram: DiagramModel):
        self._diagram = diagram

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(6)

        layout.addWidget(SectionHeader("Properties"))

        self._empty_label = QLabel("Select a shape to edit its properties")
        self._empty_label.setStyleSheet("color: #9CA3AF; font-size: 12px;")
        self._empty_label.setWordWrap(True)
        layout.addWidget(self._empty_label)

        self._form_widget = QWidget()
        form = QFormLayout(self._form_widget)
        form.setContentsMargins(0, 0, 0, 0)

        self._kind_label = QLabel()
        form.addRow("Shape Type:", self._kind_label)

        self._label_edit = QLineEdit()
        self._label_edit.editingFinished.connect(self._on_label_edited)
        form.addRow("Label:", self._label_edit)

        self._stroke_button = ColorButton()
        self._stroke_button.colorChanged.connect(
            lambda color: self._write("stroke_color", color)
        )
        form.addRow("Border Color:", self._stroke_button)

        self._width_spin = QSpinBox()
        self._width_spin.setRange(MIN_LINE_WIDTH, MAX_LINE_WIDTH)
        self._width_spin.valueChanged.connect(
            lambda value: self._write("line_width", value)
        )
        form.addRow("Border Width:", self._width_spin)

        self._fill_button = ColorButton()
        self._fill_button.colorChanged.connect(
            lambda color: self._write("fill_color", color)
        )
        form.addRow("Fill Color:", self._fill_button)

        self._rows = {
            "label": self._label_edit,
            "stroke_color": self._stroke_button,
            "line_width": self._width_spin,
            "fill_color": self._fill_button,
        }
        self._form = form
        layout.addWidget(self._form_widget)

        self._delete_button = QPushButton("Delete Shape")
        self._delete_button.setStyleSheet("""
            QPushButton {
                background: #DC3545;
                color: white;
                border: none;
                border-radius: 6px;
                padding: 6px;
            }
            QPushButton:hover {
                background: #BB2D3B;
            }
        """)
        self._delete_button.clicked.connect(lambda: self.deleteRequested.emit())
        layout.addWidget(self._delete_button)
        layout.addStretch()

    def set_selection(self, shape: Optional[Shape]):
        """Show the properties of a shape, or the empty hint."""
        self._shape = shape
        has_shape = shape is not None
        self._empty_label.setVisible(not has_shape)
        self._form_widget.setVisible(has_shape)
        self._delete_button.setVisible(has_shape)
        if not has_shape:
            return

        editable = EDITABLE_PROPERTIES[shape.kind]
        for name, widget in self._rows.items():
            self._form.setRowVisible(widget, name in editable)

        # Block signals while loading values so nothing is written back
        for widget in self._rows.values():
            widget.blockSignals(True)
        self._kind_label.setText(shape.kind.value)
        self._label_edit.setText(shape.label)
        self._stroke_button.set_color(shape.stroke_color)
        self._fill_button.set_color(shape.fill_color)
        self._width_spin.setValue(int(shape.line_width))
        for widget in self._rows.values():
            widget.blockSignals(False)

    def _on_label_edited(self):
        if self._shape is not None and self._label_edit.text() != self._shape.label:
            self._write("label", self._label_edit.text())

    def _write(self, name: str, value):
        if self._diagram is None or self._shape is None:
            return
        if self._diagram.set_property(self._shape.id, name, value):
            self.propertiesChanged.emit()
