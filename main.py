#!/usr/bin/env python3
"""
Diagram Editor entry point.

Usage:
    python main.py                          # Start the editor
    python main.py --debug                  # Debug logging
    python main.py --config my.json         # Use another settings file
    python main.py --reset-settings         # Restore default settings first
"""

import sys
import logging
import argparse
from typing import Optional, Sequence
from PyQt6.QtWidgets import QApplication
from PyQt6.QtGui import QFont, QPalette, QColor

from services import get_settings
from views import MainWindow

logger = logging.getLogger(__name__)


APP_NAME = "Diagram Editor"
APP_VERSION = "0.1.0"

# Palette roles shared with the canvas colour scheme
PALETTE = {
    QPalette.ColorRole.Window: "#F3F4F6",
    QPalette.ColorRole.WindowText: "#111827",
    QPalette.ColorRole.Base: "#FFFFFF",
    QPalette.ColorRole.Text: "#374151",
    QPalette.ColorRole.Button: "#FFFFFF",
    QPalette.ColorRole.ButtonText: "#374151",
    QPalette.ColorRole.Highlight: "#0d6efd",
    QPalette.ColorRole.HighlightedText: "#FFFFFF",
}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="diagram-editor",
        description="Draw node/connector diagrams and export them as Graphviz DOT",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--config", metavar="PATH",
                        help="Settings file to use instead of the per-user one")
    parser.add_argument("--reset-settings", action="store_true",
                        help="Restore default settings before starting")
    return parser.parse_args(argv)


def setup_logging(debug: bool = False):
    """Send log records to the console."""
    level = logging.DEBUG if debug else logging.INFO

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    ))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    logger.debug("Debug logging enabled")


def create_application(argv: list) -> QApplication:
    """Create the QApplication with the editor's font and palette."""
    app = QApplication(argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)

    font = app.font()
    font.setPointSize(10)
    font.setStyleHint(QFont.StyleHint.SansSerif)
    app.setFont(font)

    palette = app.palette()
    for role, color in PALETTE.items():
        palette.setColor(role, QColor(color))
    app.setPalette(palette)
    return app


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(debug=args.debug)

    # First call fixes the settings location for the whole process
    settings = get_settings(args.config)
    if args.reset_settings:
        settings.reset()
        logger.info("Settings reset to defaults")
    logger.info(f"{APP_NAME} {APP_VERSION} using settings at {settings.settings_path}")

    app = create_application(sys.argv[:1])
    window = MainWindow()
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
