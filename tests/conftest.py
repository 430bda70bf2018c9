"""
Pytest configuration and shared fixtures for diagram editor tests.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Generator, Optional

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from models import DiagramModel, Shape, ShapeKind, Anchor, AnchorRef
from services import EditorSession, ToolStateMachine, TextRequest, Tool


# ============== Temporary Directory Fixtures ==============

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    tmp = tempfile.mkdtemp(prefix="diagram_editor_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


# ============== Model Fixtures ==============

@pytest.fixture
def empty_diagram() -> DiagramModel:
    """Create an empty diagram."""
    return DiagramModel()


@pytest.fixture
def connected_diagram() -> DiagramModel:
    """
    Create a diagram with two rectangles joined by an arrow.

    node1: rectangle (0, 0, 100, 40) labelled "A"
    node2: rectangle (200, 0, 100, 40) labelled "B"
    node3: arrow from node1.east to node2.west
    """
    diagram = DiagramModel()
    a = diagram.add_node(ShapeKind.RECTANGLE, 0, 0, 100, 40, label="A")
    b = diagram.add_node(ShapeKind.RECTANGLE, 200, 0, 100, 40, label="B")
    diagram.add_connector(
        ShapeKind.ARROW,
        start_node=AnchorRef(a.id, Anchor.EAST),
        end_node=AnchorRef(b.id, Anchor.WEST),
    )
    return diagram


# ============== Editor Fixtures ==============

class FakePrompt:
    """
    Scripted stand-in for the text dialog.

    Answers each request with the next queued reply: a string submits,
    None declines. With defer=True requests are only recorded.
    """

    def __init__(self, *replies: Optional[str], defer: bool = False):
        self.replies = list(replies)
        self.defer = defer
        self.requests: list[TextRequest] = []

    def __call__(self, request: TextRequest):
        self.requests.append(request)
        if self.defer:
            return
        reply = self.replies.pop(0) if self.replies else None
        if reply is None:
            request.decline()
        else:
            request.submit(reply)


@pytest.fixture
def session() -> EditorSession:
    """Create an editor session on an empty diagram."""
    return EditorSession()


@pytest.fixture
def machine(session: EditorSession) -> ToolStateMachine:
    """Create a tool state machine without a text prompt."""
    return ToolStateMachine(session)


def drag(machine: ToolStateMachine, x1: float, y1: float, x2: float, y2: float) -> bool:
    """Perform a full down/move/up gesture, returning the pointer-up result."""
    machine.pointer_down(x1, y1)
    machine.pointer_move(x2, y2)
    return machine.pointer_up(x2, y2)


def draw(machine: ToolStateMachine, tool: Tool, x1: float, y1: float,
         x2: float, y2: float) -> Optional[Shape]:
    """Draw with a tool and return the newest shape, if one was created."""
    machine.set_tool(tool)
    before = len(machine.diagram)
    drag(machine, x1, y1, x2, y2)
    if len(machine.diagram) == before:
        return None
    return machine.diagram.shapes()[-1]
