"""Pytest configuration and shared fixtures for mindmap tests."""

import pytest

from mindmap_core import Edge, HistoryStore, Node, NodeKind


def make_node(node_id, kind=NodeKind.SUB_TOPIC, label=None, x=0.0, y=0.0):
    return Node(
        id=node_id,
        kind=kind,
        position={"x": x, "y": y},
        data={"label": label if label is not None else node_id},
    )


def make_edge(source, target, edge_id=None):
    return Edge(id=edge_id or f"{source}->{target}", source=source, target=target)


def ids(items):
    return [item.id for item in items]


@pytest.fixture
def store():
    """Default HistoryStore instance."""
    return HistoryStore()


@pytest.fixture
def node_a():
    return make_node("a", NodeKind.CHAPTER, label="Root")


@pytest.fixture
def node_b():
    return make_node("b", NodeKind.MAIN_TOPIC, label="Branch")


@pytest.fixture
def generated_nodes():
    """Raw records in the shape a generator returns them."""
    return [
        {"id": "chapter-1", "type": "chapter", "data": {"label": "Topic"}},
        {"id": "main-topic-1", "type": "main-topic", "data": {"label": "One"}},
        {"id": "main-topic-2", "type": "main-topic", "data": {"label": "Two"}},
        {"id": "sub-topic-1", "type": "sub-topic", "data": {"label": "Detail"}},
    ]


@pytest.fixture
def generated_edges():
    return [
        {"id": "edge-1", "source": "chapter-1", "target": "main-topic-1", "animated": True},
        {"id": "edge-2", "source": "chapter-1", "target": "main-topic-2", "animated": True},
        {"id": "edge-3", "source": "main-topic-1", "target": "sub-topic-1"},
    ]
