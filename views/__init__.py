"""Views package."""

from .diagram_canvas import DiagramCanvas
from .property_panel import PropertyPanel
from .dot_preview import DotPreviewPanel
from .main_window import MainWindow

__all__ = [
    "DiagramCanvas",
    "PropertyPanel",
    "DotPreviewPanel",
    "MainWindow",
]
