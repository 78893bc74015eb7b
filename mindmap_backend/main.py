"""
Mindmap Backend - FastAPI Application

It provides:
- REST API for document edits (nodes, edges, full-document commits)
- Undo/redo over the document history
- Layout of generated node sets and import of generated mindmaps
- CORS configuration for local frontend development

Each app owns its DocumentManager (on `app.state`), so several documents
can be served from one process and tests get a fresh one per app.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from mindmap_core import NodeKind, Position, Settings, settings as default_settings

from .document_manager import DocumentManager
from .generated import parse_generated_mindmap
from .schemas import (
    AutoLayoutRequest,
    CreateEdgeRequest,
    CreateNodeRequest,
    DocumentRequest,
    ImportMindmapRequest,
    LayoutRequest,
    MoveNodeRequest,
    UpdateNodeRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_manager(request: Request) -> DocumentManager:
    return request.app.state.manager


def _document_response(manager: DocumentManager) -> dict:
    return {"success": True, **manager.get_state()}


def _serialize(item) -> dict:
    return item.to_json_dict() if hasattr(item, "to_json_dict") else item


# --- Health Check ---

@router.get("/health")
async def health_check(manager: DocumentManager = Depends(get_manager)):
    """Health check endpoint."""
    return {"status": "ok", "nodes": len(manager.nodes)}


# --- Document State ---

@router.get("/document")
async def get_document(manager: DocumentManager = Depends(get_manager)):
    """Get the current document and history state."""
    return manager.get_state()


@router.post("/document/commit")
async def commit_document(request: DocumentRequest, manager: DocumentManager = Depends(get_manager)):
    """Replace the document with the given one as a new history entry."""
    try:
        manager.commit_document(request.nodes, request.edges)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _document_response(manager)


@router.post("/document/reset")
async def reset_document(request: DocumentRequest, manager: DocumentManager = Depends(get_manager)):
    """Start a new session, clearing history."""
    try:
        manager.reset(request.nodes, request.edges)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _document_response(manager)


# --- Undo/Redo ---

@router.post("/undo")
async def undo(manager: DocumentManager = Depends(get_manager)):
    """Undo the last change. At the start of history the document is unchanged."""
    manager.undo()
    return _document_response(manager)


@router.post("/redo")
async def redo(manager: DocumentManager = Depends(get_manager)):
    """Redo the last undone change. At the end of history the document is unchanged."""
    manager.redo()
    return _document_response(manager)


# --- Node Operations ---

@router.post("/nodes")
async def create_node(request: CreateNodeRequest, manager: DocumentManager = Depends(get_manager)):
    """Create a new node."""
    try:
        node = manager.add_node(
            kind=request.kind,
            label=request.label,
            position=Position(x=request.x, y=request.y),
            data=request.data,
            node_id=request.id
        )
        return {"success": True, "node": node.to_json_dict()}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/nodes/{node_id}")
async def get_node(node_id: str, manager: DocumentManager = Depends(get_manager)):
    """Get a specific node."""
    node = manager.get_node(node_id)
    if node:
        return {"success": True, "node": node.to_json_dict()}
    raise HTTPException(status_code=404, detail="Node not found")


@router.patch("/nodes/{node_id}")
async def update_node(node_id: str, request: UpdateNodeRequest, manager: DocumentManager = Depends(get_manager)):
    """Merge fields into a node's content."""
    node = manager.update_node(node_id, request.data)
    if node:
        return {"success": True, "node": node.to_json_dict()}
    raise HTTPException(status_code=404, detail="Node not found")


@router.post("/nodes/{node_id}/move")
async def move_node(node_id: str, request: MoveNodeRequest, manager: DocumentManager = Depends(get_manager)):
    """Move a node."""
    node = manager.move_node(node_id, request.x, request.y)
    if node:
        return {"success": True, "node": node.to_json_dict()}
    raise HTTPException(status_code=404, detail="Node not found")


@router.delete("/nodes/{node_id}")
async def delete_node(node_id: str, manager: DocumentManager = Depends(get_manager)):
    """Delete a node and its connected edges."""
    if manager.delete_node(node_id):
        return {"success": True}
    raise HTTPException(status_code=404, detail="Node not found")


# --- Edge Operations ---

@router.post("/edges")
async def create_edge(request: CreateEdgeRequest, manager: DocumentManager = Depends(get_manager)):
    """Connect two nodes."""
    try:
        edge = manager.connect(
            source=request.source,
            target=request.target,
            label=request.label,
            animated=request.animated,
            style=request.style,
            edge_id=request.id
        )
        return {"success": True, "edge": edge.to_json_dict()}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/edges/{edge_id}")
async def delete_edge(edge_id: str, manager: DocumentManager = Depends(get_manager)):
    """Delete an edge."""
    if manager.delete_edge(edge_id):
        return {"success": True}
    raise HTTPException(status_code=404, detail="Edge not found")


# --- Layout ---

@router.post("/layout")
async def compute_layout(request: LayoutRequest, manager: DocumentManager = Depends(get_manager)):
    """Compute positions for a node set without changing the document."""
    try:
        positioned = manager.layout(request.nodes, strategy=request.strategy)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "nodes": [_serialize(n) for n in positioned]}


@router.post("/layout/auto")
async def auto_layout(request: AutoLayoutRequest, manager: DocumentManager = Depends(get_manager)):
    """Rearrange the current document."""
    try:
        success = manager.auto_layout(strategy=request.strategy)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if success:
        return _document_response(manager)
    raise HTTPException(status_code=400, detail="No nodes to layout")


@router.post("/mindmap/import")
async def import_mindmap(request: ImportMindmapRequest, manager: DocumentManager = Depends(get_manager)):
    """Lay out a generated mindmap and make it the document."""
    try:
        if request.content is not None:
            nodes, edges = parse_generated_mindmap(request.content)
        else:
            nodes, edges = request.nodes, request.edges or []
        manager.import_generated(nodes, edges, strategy=request.strategy)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _document_response(manager)


# --- Enums for Frontend ---

@router.get("/enums/kinds")
async def get_kinds():
    """Get available node kinds and their layout tiers."""
    return {"kinds": [{"kind": k.value, "tier": k.tier.value} for k in NodeKind]}


# --- FastAPI App ---

def create_app(
    manager: Optional[DocumentManager] = None,
    app_settings: Optional[Settings] = None
) -> FastAPI:
    """Build an app serving one document."""
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="Mindmap API",
        description="Backend API for the mindmap editor",
        version="1.0.0",
    )
    app.state.manager = manager if manager is not None else DocumentManager.from_settings(app_settings)

    # CORS for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


def run():
    """Console entry point: serve with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=default_settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting mindmap backend on %s:%d", default_settings.host, default_settings.port)
    uvicorn.run(create_app(), host=default_settings.host, port=default_settings.port)


if __name__ == "__main__":
    run()
