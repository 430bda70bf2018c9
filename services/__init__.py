"""Services package."""

from .hit_testing import (
    LINE_HIT_TOLERANCE,
    estimate_text_width,
    point_to_segment_distance,
    text_bounds,
    contains_point,
    shape_at,
)
from .tool_state import (
    MIN_NODE_SIZE,
    Tool,
    GestureState,
    PreviewKind,
    Preview,
    HoveredAnchor,
    TextRequest,
    EditorSession,
    ToolStateMachine,
)
from .dot_exporter import DotExporter, generate_dot
from .settings_manager import (
    SettingsManager,
    AppSettings,
    StyleDefaults,
    UISettings,
    PathSettings,
    get_settings,
    reset_settings_manager,
)

__all__ = [
    # Hit testing
    "LINE_HIT_TOLERANCE",
    "estimate_text_width",
    "point_to_segment_distance",
    "text_bounds",
    "contains_point",
    "shape_at",
    # Tool state machine
    "MIN_NODE_SIZE",
    "Tool",
    "GestureState",
    "PreviewKind",
    "Preview",
    "HoveredAnchor",
    "TextRequest",
    "EditorSession",
    "ToolStateMachine",
    # Export
    "DotExporter",
    "generate_dot",
    # Settings
    "SettingsManager",
    "AppSettings",
    "StyleDefaults",
    "UISettings",
    "PathSettings",
    "get_settings",
    "reset_settings_manager",
]
