"""
Pydantic request models for the HTTP API.

Node/edge payloads reuse the core models so validation rules (non-empty ids,
closed node kinds) are identical over HTTP and in-process.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field, model_validator

from mindmap_core import Edge, Node, NodeKind


class DocumentRequest(BaseModel):
    """A full document, used for commit and reset."""
    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)


class CreateNodeRequest(BaseModel):
    """Request to create a new node."""
    kind: NodeKind
    id: Optional[str] = None
    label: Optional[str] = None
    x: float = 0.0
    y: float = 0.0
    data: dict[str, Any] = Field(default_factory=dict)


class UpdateNodeRequest(BaseModel):
    """Payload fields to merge into a node's data."""
    data: dict[str, Any]


class MoveNodeRequest(BaseModel):
    x: float
    y: float


class CreateEdgeRequest(BaseModel):
    """Request to create a new edge."""
    source: str
    target: str
    id: Optional[str] = None
    label: str = ""
    animated: bool = True
    style: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode='before')
    @classmethod
    def convert_legacy_fields(cls, data: Any) -> Any:
        """Convert legacy 'from'/'to' fields to 'source'/'target'."""
        if isinstance(data, dict):
            data = dict(data)
            if 'from' in data and 'source' not in data:
                data['source'] = data.pop('from')
            if 'to' in data and 'target' not in data:
                data['target'] = data.pop('to')
        return data


class LayoutRequest(BaseModel):
    """
    Nodes to position. Items are left unvalidated so malformed generated
    records still get the fallback layout instead of a 422.
    """
    nodes: Optional[list[Any]] = None  # None = the current document
    strategy: str = "tiered"


class AutoLayoutRequest(BaseModel):
    strategy: str = "tiered"


class ImportMindmapRequest(BaseModel):
    """Generated mindmap, either as raw text or as parsed records."""
    content: Optional[str] = None
    nodes: Optional[list[Any]] = None
    edges: Optional[list[Any]] = None
    strategy: str = "tiered"

    @model_validator(mode='after')
    def check_source(self) -> "ImportMindmapRequest":
        if self.content is None and self.nodes is None:
            raise ValueError("Provide either 'content' or 'nodes'")
        return self
