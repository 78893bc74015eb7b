"""
Mindmap Core - Entity models, undo/redo history and layout algorithms.

This package holds everything with real invariants: the document model,
the snapshot history store and the deterministic layout engine. Hosts
(the HTTP backend, tests) build on these and never reach around them.
"""

from .models import (
    # Enums
    NodeKind,
    Tier,
    KIND_TIERS,
    # Core models
    Position,
    Node,
    Edge,
    DocumentSnapshot,
)

from .config import LayoutConfig, HistoryConfig, Settings, settings
from .validation import (
    ContractViolation,
    check_document,
    validate_document,
    validation_summary,
    ValidationIssue,
    IssueSeverity,
)
from .history import HistoryStore
from .layout import (
    tiered_layout,
    radial_layout,
    fallback_layout,
    layout_mindmap,
    row_positions,
    radial_positions,
    staggered_grid_positions,
)

__all__ = [
    # Enums
    "NodeKind",
    "Tier",
    "KIND_TIERS",
    # Models
    "Position",
    "Node",
    "Edge",
    "DocumentSnapshot",
    # Config
    "LayoutConfig",
    "HistoryConfig",
    "Settings",
    "settings",
    # Validation
    "ContractViolation",
    "check_document",
    "validate_document",
    "validation_summary",
    "ValidationIssue",
    "IssueSeverity",
    # History
    "HistoryStore",
    # Layout
    "tiered_layout",
    "radial_layout",
    "fallback_layout",
    "layout_mindmap",
    "row_positions",
    "radial_positions",
    "staggered_grid_positions",
]
