"""
Unit tests for DOT export.

Tests:
- Exact document layout
- Node and edge attributes
- Omission of connectors that are not fully bound
- Label escaping
- File export
"""

import pytest
from models import DiagramModel, ShapeKind, Anchor, AnchorRef, Position
from services import DotExporter, generate_dot


@pytest.fixture
def exporter() -> DotExporter:
    return DotExporter()


class TestGenerate:
    """Tests for DotExporter.generate."""

    def test_empty_diagram(self, exporter, empty_diagram):
        assert exporter.generate(empty_diagram) == (
            "digraph G {\n"
            "  node [shape=record];\n"
            "  rankdir=TB;\n"
            "\n"
            "\n"
            "}\n"
        )

    def test_connected_diagram(self, exporter, connected_diagram):
        """Two nodes joined by an arrow."""
        assert exporter.generate(connected_diagram) == (
            "digraph G {\n"
            "  node [shape=record];\n"
            "  rankdir=TB;\n"
            "\n"
            '  node1 [label="A", shape=box, style=filled, fillcolor="#ffffff", color="#000000", penwidth=2];\n'
            '  node2 [label="B", shape=box, style=filled, fillcolor="#ffffff", color="#000000", penwidth=2];\n'
            "\n"
            '  node1 -> node2 [color="#000000", penwidth=2];\n'
            "}\n"
        )

    def test_circle_and_line(self, exporter, empty_diagram):
        """Circles map to ellipses and lines to the undirected operator."""
        a = empty_diagram.add_node(ShapeKind.CIRCLE, 0, 0, 50, 50)
        b = empty_diagram.add_node(ShapeKind.RECTANGLE, 100, 0, 50, 50, label="B")
        empty_diagram.add_connector(
            ShapeKind.LINE,
            start_node=AnchorRef(a.id, Anchor.EAST),
            end_node=AnchorRef(b.id, Anchor.WEST),
        )
        dot = exporter.generate(empty_diagram)
        assert '  node1 [label="node1", shape=ellipse,' in dot
        assert "  node1 -- node2 [" in dot

    def test_style_attributes(self, exporter, connected_diagram):
        connected_diagram.set_property(1, "fill_color", "#ff0000")
        connected_diagram.set_property(1, "line_width", 5)
        connected_diagram.set_property(3, "stroke_color", "#00aa00")
        dot = exporter.generate(connected_diagram)
        assert 'fillcolor="#ff0000", color="#000000", penwidth=5];' in dot
        assert 'node1 -> node2 [color="#00aa00", penwidth=2];' in dot

    def test_unbound_connectors_omitted(self, exporter, connected_diagram):
        """Free and half-bound connectors have no edge line."""
        connected_diagram.add_connector(ShapeKind.ARROW, Position(0, 0), Position(10, 10))
        connected_diagram.add_connector(
            ShapeKind.LINE, end=Position(500, 500), start_node=AnchorRef(2, Anchor.SOUTH),
        )
        dot = exporter.generate(connected_diagram)
        assert dot.count("->") == 1
        assert "--" not in dot

    def test_text_not_exported(self, exporter, empty_diagram):
        empty_diagram.add_text(0, 20, "caption")
        assert "caption" not in exporter.generate(empty_diagram)

    def test_deleted_node_drops_edge(self, exporter, connected_diagram):
        connected_diagram.delete(2)
        dot = exporter.generate(connected_diagram)
        assert "node2" not in dot
        assert "->" not in dot

    def test_deterministic(self, exporter, connected_diagram):
        assert exporter.generate(connected_diagram) == exporter.generate(connected_diagram)
        assert generate_dot(connected_diagram) == exporter.generate(connected_diagram)

    def test_label_escaping(self, exporter, empty_diagram):
        empty_diagram.add_node(ShapeKind.RECTANGLE, 0, 0, 50, 50, label='say "hi" \\ bye')
        dot = exporter.generate(empty_diagram)
        assert 'label="say \\"hi\\" \\\\ bye"' in dot

    def test_nodes_in_creation_order(self, exporter, empty_diagram):
        for label in ("first", "second", "third"):
            empty_diagram.add_node(ShapeKind.RECTANGLE, 0, 0, 10, 10, label=label)
        dot = exporter.generate(empty_diagram)
        assert dot.index("first") < dot.index("second") < dot.index("third")


class TestExportToFile:
    """Tests for DotExporter.export_to_file."""

    def test_writes_document(self, exporter, connected_diagram, temp_dir):
        path = temp_dir / "diagram.dot"
        assert exporter.export_to_file(connected_diagram, path)
        assert path.read_text(encoding="utf-8") == exporter.generate(connected_diagram)

    def test_unwritable_path(self, exporter, connected_diagram, temp_dir):
        path = temp_dir / "missing" / "diagram.dot"
        assert not exporter.export_to_file(connected_diagram, path)
