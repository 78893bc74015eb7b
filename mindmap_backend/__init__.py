"""
Mindmap Backend - HTTP host around the mindmap core.

Serves one document per app: interactive edits, undo/redo, layout and
import of generated mindmaps.
"""

from .document_manager import DocumentManager
from .generated import GeneratedMindmapError, parse_generated_mindmap
from .main import create_app

__all__ = [
    "DocumentManager",
    "GeneratedMindmapError",
    "parse_generated_mindmap",
    "create_app",
]
