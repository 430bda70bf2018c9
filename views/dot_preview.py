"""
DOT preview panel.

Read-only view of the graph description generated from the current
diagram, with light syntax highlighting.
"""

from PyQt6.QtCore import QRegularExpression
from PyQt6.QtGui import QColor, QFont, QSyntaxHighlighter, QTextCharFormat, QTextDocument
from PyQt6.QtWidgets import QLabel, QPlainTextEdit, QVBoxLayout, QWidget


class DotHighlighter(QSyntaxHighlighter):
    """Syntax highlighter for DOT source."""

    def __init__(self, document: QTextDocument):
        super().__init__(document)
        self._highlighting_rules = []

        # Keywords
        keyword_format = QTextCharFormat()
        keyword_format.setForeground(QColor("#CF222E"))  # Red
        keyword_format.setFontWeight(QFont.Weight.Bold)
        for word in ("digraph", "graph", "node", "edge", "subgraph"):
            pattern = QRegularExpression(rf"\b{word}\b")
            self._highlighting_rules.append((pattern, keyword_format))

        # Attribute names
        attr_format = QTextCharFormat()
        attr_format.setForeground(QColor("#8250DF"))  # Purple
        pattern = QRegularExpression(r"\b[a-z]+(?==)")
        self._highlighting_rules.append((pattern, attr_format))

        # Edge operators
        op_format = QTextCharFormat()
        op_format.setForeground(QColor("#953800"))  # Orange
        op_format.setFontWeight(QFont.Weight.Bold)
        pattern = QRegularExpression(r"->|--")
        self._highlighting_rules.append((pattern, op_format))

        # Strings
        string_format = QTextCharFormat()
        string_format.setForeground(QColor("#0A3069"))  # Dark blue
        pattern = QRegularExpression(r'"[^"\\]*(\\.[^"\\]*)*"')
        self._highlighting_rules.append((pattern, string_format))

    def highlightBlock(self, text: str):
        for pattern, fmt in self._highlighting_rules:
            iterator = pattern.globalMatch(text)
            while iterator.hasNext():
                match = iterator.next()
                self.setFormat(match.capturedStart(), match.capturedLength(), fmt)


class DotPreviewPanel(QWidget):
    """Panel showing the live DOT export."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(6)

        title = QLabel("DOT Preview")
        font = QFont("SF Pro Display", 11)
        font.setWeight(QFont.Weight.DemiBold)
        title.setFont(font)
        title.setStyleSheet("color: #374151;")
        layout.addWidget(title)

        self._editor = QPlainTextEdit()
        self._editor.setReadOnly(True)
        self._editor.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        mono = QFont("Menlo", 10)
        mono.setStyleHint(QFont.StyleHint.Monospace)
        self._editor.setFont(mono)
        self._editor.setStyleSheet("""
            QPlainTextEdit {
                background: #F9FAFB;
                border: 1px solid #E5E7EB;
                border-radius: 6px;
                padding: 6px;
            }
        """)
        self._highlighter = DotHighlighter(self._editor.document())
        layout.addWidget(self._editor)

    def set_text(self, text: str):
        """Replace the preview, keeping the scroll position."""
        if text == self._editor.toPlainText():
            return
        bar = self._editor.verticalScrollBar()
        position = bar.value()
        self._editor.setPlainText(text)
        bar.setValue(position)

    def text(self) -> str:
        return self._editor.toPlainText()
