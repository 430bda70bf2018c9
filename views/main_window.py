"""
Main application window.

Assembles the tool bar, canvas, property panel and DOT preview, and
keeps the preview in step with every edit.
"""

import logging
from pathlib import Path
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QActionGroup, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QToolBar, QLabel, QSplitter,
    QStatusBar, QMessageBox, QFileDialog
)

from services import DotExporter, EditorSession, Tool, get_settings
from views import DiagramCanvas, PropertyPanel, DotPreviewPanel

logger = logging.getLogger(__name__)


TOOL_LABELS = [
    (Tool.SELECT, "Select", "V"),
    (Tool.RECTANGLE, "Rectangle", "R"),
    (Tool.CIRCLE, "Circle", "C"),
    (Tool.LINE, "Line", "L"),
    (Tool.ARROW, "Arrow", "A"),
    (Tool.TEXT, "Text", "T"),
]


class ToolBar(QToolBar):
    """Toolbar with one exclusive action per editor tool."""

    def __init__(self, parent=None):
        super().__init__("Tools", parent)
        self.setMovable(False)
        self.actions_by_tool: dict[Tool, QAction] = {}
        self._group = QActionGroup(self)
        self._group.setExclusive(True)

        self.setStyleSheet("""
            QToolBar {
                background: #F9FAFB;
                border-bottom: 1px solid #E5E7EB;
                padding: 6px 12px;
                spacing: 6px;
            }
        """)

        for tool, label, shortcut in TOOL_LABELS:
            action = QAction(label, self)
            action.setCheckable(True)
            action.setShortcut(QKeySequence(shortcut))
            action.setData(tool)
            self._group.addAction(action)
            self.addAction(action)
            self.actions_by_tool[tool] = action

        self.actions_by_tool[Tool.SELECT].setChecked(True)

    @property
    def group(self) -> QActionGroup:
        return self._group


class MainWindow(QMainWindow):
    """
    Main application window.

    Layout:
    ┌─────────────────────────────────────────────┐
    │  Menu Bar / Tool Bar                        │
    ├───────────────────────────┬─────────────────┤
    │                           │  Properties     │
    │       Canvas              ├─────────────────┤
    │                           │  DOT Preview    │
    ├───────────────────────────┴─────────────────┤
    │  Status Bar                                 │
    └─────────────────────────────────────────────┘
    """

    def __init__(self):
        super().__init__()

        # Settings manager (JSON file based)
        self.settings_manager = get_settings()

        # Models
        self.session = EditorSession(default_style=self.settings_manager.default_style())
        self.exporter = DotExporter()

        # Setup
        self._setup_window()
        self._setup_menu()
        self._setup_toolbar()
        self._setup_central_widget()
        self._setup_status_bar()
        self._connect_signals()

        self._load_window_settings()
        self._on_diagram_changed()

    def _load_window_settings(self):
        """Restore window geometry and state."""
        geometry, state = self.settings_manager.get_window_geometry()
        if geometry:
            self.restoreGeometry(geometry)
        if state:
            self.restoreState(state)

    def _save_window_settings(self):
        """Save window geometry and state."""
        self.settings_manager.save_window_geometry(
            bytes(self.saveGeometry()),
            bytes(self.saveState())
        )

    def closeEvent(self, event):
        """Handle window close - save settings."""
        self._save_window_settings()
        super().closeEvent(event)

    def _setup_window(self):
        """Configure window properties."""
        self.setWindowTitle("Diagram Editor")
        self.setMinimumSize(1000, 700)
        self.resize(1300, 850)
        self.setStyleSheet("""
            QMainWindow {
                background: #F3F4F6;
            }
            QSplitter::handle {
                background: #E5E7EB;
            }
        """)

    def _setup_menu(self):
        """Create menu bar."""
        menubar = self.menuBar()

        # File menu
        file_menu = menubar.addMenu("&File")

        export_action = QAction("&Export DOT...", self)
        export_action.setShortcut(QKeySequence("Ctrl+E"))
        export_action.triggered.connect(self._on_export_dot)
        file_menu.addAction(export_action)

        file_menu.addSeparator()

        exit_action = QAction("E&xit", self)
        exit_action.setShortcut(QKeySequence.StandardKey.Quit)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        # Edit menu
        edit_menu = menubar.addMenu("&Edit")

        delete_action = QAction("&Delete Selected", self)
        delete_action.triggered.connect(lambda: self.canvas.delete_selected())
        edit_menu.addAction(delete_action)

        clear_action = QAction("&Clear Canvas", self)
        clear_action.triggered.connect(self._on_clear_canvas)
        edit_menu.addAction(clear_action)

    def _setup_toolbar(self):
        """Create and add toolbar."""
        self.toolbar = ToolBar()
        self.addToolBar(self.toolbar)

    def _setup_central_widget(self):
        """Create the main layout with all panels."""
        central = QWidget()
        self.setCentralWidget(central)

        layout = QHBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        splitter = QSplitter(Qt.Orientation.Horizontal)

        # Center - Canvas
        self.canvas = DiagramCanvas(self.session, self.settings_manager.ui)
        splitter.addWidget(self.canvas)

        # Right panel - Properties and DOT preview
        right_splitter = QSplitter(Qt.Orientation.Vertical)
        right_splitter.setStyleSheet("""
            QSplitter {
                background: white;
                border-left: 1px solid #E5E7EB;
            }
        """)

        self.property_panel = PropertyPanel()
        self.property_panel.set_diagram(self.session.diagram)
        right_splitter.addWidget(self.property_panel)

        self.dot_preview = DotPreviewPanel()
        self.dot_preview.setVisible(self.settings_manager.ui.show_dot_preview)
        right_splitter.addWidget(self.dot_preview)
        right_splitter.setSizes([300, 300])

        splitter.addWidget(right_splitter)
        splitter.setSizes([950, 350])
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 0)

        layout.addWidget(splitter)

    def _setup_status_bar(self):
        """Create status bar."""
        status = QStatusBar()
        status.setStyleSheet("""
            QStatusBar {
                background: #F9FAFB;
                border-top: 1px solid #E5E7EB;
                padding: 4px 8px;
                color: #6B7280;
                font-size: 12px;
            }
        """)
        self.setStatusBar(status)

        self._count_label = QLabel("Nodes: 0  Edges: 0")
        status.addWidget(self._count_label)
        status.addWidget(QWidget(), 1)
        status.addWidget(QLabel("Drag from an anchor to connect • Double-click to relabel • Del to delete"))

    def _connect_signals(self):
        """Connect all signals."""
        self.toolbar.group.triggered.connect(
            lambda action: self.canvas.set_tool(action.data())
        )
        self.canvas.diagramChanged.connect(self._on_diagram_changed)
        self.canvas.selectionChanged.connect(self.property_panel.set_selection)
        self.property_panel.propertiesChanged.connect(self._on_properties_changed)
        self.property_panel.deleteRequested.connect(self.canvas.delete_selected)

    def _on_diagram_changed(self):
        """Re-serialize after any edit."""
        diagram = self.session.diagram
        self.dot_preview.set_text(self.exporter.generate(diagram))
        edges = sum(1 for c in diagram.connectors() if c.is_bound)
        self._count_label.setText(f"Nodes: {len(diagram.nodes())}  Edges: {edges}")

    def _on_properties_changed(self):
        self.canvas.refresh()
        self._on_diagram_changed()

    def _on_clear_canvas(self):
        """Clear the diagram after confirmation."""
        if len(self.session.diagram) == 0:
            return

        reply = QMessageBox.question(
            self,
            "Clear Canvas",
            "Are you sure you want to clear the canvas?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )

        if reply == QMessageBox.StandardButton.Yes:
            self.canvas.clear_diagram()
            self.statusBar().showMessage("Canvas cleared", 2000)

    def _on_export_dot(self):
        """Export the diagram as a DOT file."""
        start_dir = self.settings_manager.get_export_directory()
        filepath, _ = QFileDialog.getSaveFileName(
            self,
            "Export DOT",
            str(Path(start_dir) / "diagram.dot") if start_dir else "diagram.dot",
            "Graphviz DOT (*.dot);;All Files (*)"
        )
        if not filepath:
            return

        if self.exporter.export_to_file(self.session.diagram, filepath):
            self.settings_manager.set_export_directory(filepath)
            self.settings_manager.add_recent_export(filepath)
            self.statusBar().showMessage(f"Exported to {filepath}", 3000)
        else:
            QMessageBox.warning(self, "Export Failed", f"Could not write {filepath}")
