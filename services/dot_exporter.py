"""
Graphviz DOT exporter.

Generates a DOT graph description from a DiagramModel. Output is a pure
function of the diagram's state so identical diagrams export
byte-for-byte identical documents.
"""

import logging
from pathlib import Path
from typing import Union

from models import DiagramModel, Shape, ShapeKind

logger = logging.getLogger(__name__)


# Diagram kind -> DOT node shape
DOT_NODE_SHAPES = {
    ShapeKind.RECTANGLE: "box",
    ShapeKind.CIRCLE: "ellipse",
}

# Diagram kind -> DOT edge operator
DOT_EDGE_OPERATORS = {
    ShapeKind.ARROW: "->",
    ShapeKind.LINE: "--",
}


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _color(value: str) -> str:
    return "#" + value.lstrip("#")


def _width(value: float) -> str:
    return f"{value:g}"


class DotExporter:
    """
    Serializes diagrams to DOT.

    Nodes are written in creation order. Only connectors with both ends
    bound to existing nodes become edges; free connectors have no node
    identity to reference.
    """

    HEADER = [
        "digraph G {",
        "  node [shape=record];",
        "  rankdir=TB;",
    ]
    FOOTER = "}"

    def generate(self, diagram: DiagramModel) -> str:
        """
        Generate the DOT document for a diagram.

        Args:
            diagram: The diagram to serialize

        Returns:
            DOT source text, newline terminated
        """
        lines = list(self.HEADER)
        lines.append("")

        for shape in diagram.nodes():
            lines.append(self._node_line(shape))

        lines.append("")

        for connector in diagram.connectors():
            line = self._edge_line(diagram, connector)
            if line:
                lines.append(line)

        lines.append(self.FOOTER)
        return "\n".join(lines) + "\n"

    def _node_line(self, shape: Shape) -> str:
        return (
            f'  {shape.name} [label="{_escape(shape.display_label)}", '
            f"shape={DOT_NODE_SHAPES[shape.kind]}, style=filled, "
            f'fillcolor="{_color(shape.fill_color)}", '
            f'color="{_color(shape.stroke_color)}", '
            f"penwidth={_width(shape.line_width)}];"
        )

    def _edge_line(self, diagram: DiagramModel, connector: Shape) -> str:
        if not connector.is_bound:
            return ""
        source = diagram.get(connector.start_node.shape_id)
        target = diagram.get(connector.end_node.shape_id)
        if source is None or target is None:
            return ""
        return (
            f"  {source.name} {DOT_EDGE_OPERATORS[connector.kind]} {target.name} "
            f'[color="{_color(connector.stroke_color)}", '
            f"penwidth={_width(connector.line_width)}];"
        )

    def export_to_file(self, diagram: DiagramModel, filepath: Union[str, Path]) -> bool:
        """
        Write the DOT document for a diagram to a file.

        Returns:
            True if successful, False otherwise
        """
        try:
            Path(filepath).write_text(self.generate(diagram), encoding="utf-8")
        except OSError as e:
            logger.error(f"Error exporting DOT to {filepath}: {e}")
            return False
        logger.info(f"Exported {len(diagram.nodes())} nodes to {filepath}")
        return True


def generate_dot(diagram: DiagramModel) -> str:
    """Convenience function to generate DOT for a diagram."""
    return DotExporter().generate(diagram)
