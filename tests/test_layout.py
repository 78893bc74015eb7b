"""Unit tests for the layout module."""

import math

import pytest

from mindmap_core import LayoutConfig, Node, NodeKind, Tier
from mindmap_core.layout import (
    fallback_layout,
    layout_mindmap,
    partition_by_tier,
    radial_layout,
    radial_positions,
    row_positions,
    staggered_grid_positions,
    tiered_layout,
)

from conftest import ids, make_node

P = NodeKind.CHAPTER
S = NodeKind.MAIN_TOPIC
L = NodeKind.SUB_TOPIC


def xy(node):
    return (node.position.x, node.position.y)


class TestPositionHelpers:
    """Tests for the coordinate helpers."""

    def test_row_positions_symmetric(self):
        assert row_positions(3, 500, 300) == [200, 500, 800]
        assert row_positions(2, 500, 300) == [350, 650]
        assert row_positions(1, 500, 300) == [500]
        assert row_positions(0, 500, 300) == []

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 7])
    def test_row_positions_mean_is_center(self, count):
        xs = row_positions(count, 123.5, 77.25)
        assert sum(xs) / count == pytest.approx(123.5)

    def test_radial_positions(self):
        points = radial_positions(4, 500, 300, 300)
        assert points[0] == pytest.approx((800, 300))
        assert points[1] == pytest.approx((500, 600))
        assert points[2] == pytest.approx((200, 300))
        assert points[3] == pytest.approx((500, 0))

    def test_staggered_grid_positions(self):
        points = staggered_grid_positions(4, 0, 0, 100, 50, 3)
        assert points == [(0, 0), (100, 0), (200, 0), (50, 50)]


class TestPartition:
    """Tests for tier partitioning."""

    def test_stable_partition(self):
        nodes = [make_node("l1", L), make_node("p1", P), make_node("s1", S),
                 make_node("l2", NodeKind.STICKY_NOTE), make_node("p2", P)]
        groups = partition_by_tier(nodes)
        assert ids(groups[Tier.PRIMARY]) == ["p1", "p2"]
        assert ids(groups[Tier.SECONDARY]) == ["s1"]
        assert ids(groups[Tier.LEAF]) == ["l1", "l2"]


class TestTieredLayout:
    """Tests for the tiered layout."""

    def test_empty_input(self):
        assert tiered_layout([]) == []

    def test_scenario_three_tiers(self):
        nodes = [make_node("c1", P), make_node("m1", S), make_node("m2", S), make_node("s1", L)]
        result = tiered_layout(nodes)

        assert ids(result) == ["c1", "m1", "m2", "s1"]
        assert xy(result[0]) == pytest.approx((500, 100))
        assert xy(result[1]) == pytest.approx((350, 250))
        assert xy(result[2]) == pytest.approx((650, 250))
        assert xy(result[3]) == pytest.approx((500, 400))

    def test_output_grouped_by_tier(self):
        nodes = [make_node("l1", L), make_node("s1", S), make_node("p1", P),
                 make_node("l2", L), make_node("s2", S), make_node("p2", P)]
        result = tiered_layout(nodes)
        assert ids(result) == ["p1", "p2", "s1", "s2", "l1", "l2"]

    @pytest.mark.parametrize("kind", [P, S, L, NodeKind.ARROW])
    def test_single_node_centered_on_top_row(self, kind):
        result = tiered_layout([make_node("only", kind)])
        assert xy(result[0]) == pytest.approx((500, 100))

    def test_missing_secondary_tier_leaves_no_gap(self):
        nodes = [make_node("p", P), make_node("l", L)]
        result = tiered_layout(nodes)
        assert result[0].position.y == 100
        assert result[1].position.y == 250

    def test_leaf_rows_wrap_and_center_independently(self):
        nodes = [make_node("p", P)] + [make_node(f"l{i}", L) for i in range(6)]
        result = tiered_layout(nodes)
        leaves = result[1:]

        first_row = [xy(n) for n in leaves[:4]]
        assert first_row == [(50, 250), (350, 250), (650, 250), (950, 250)]
        second_row = [xy(n) for n in leaves[4:]]
        assert second_row == [(350, 400), (650, 400)]

    def test_rows_centered(self):
        nodes = [make_node(f"s{i}", S) for i in range(5)]
        result = tiered_layout(nodes)
        assert sum(n.position.x for n in result) / 5 == pytest.approx(500)
        assert {n.position.y for n in result} == {100}

    def test_non_overlapping(self):
        nodes = ([make_node(f"p{i}", P) for i in range(2)]
                 + [make_node(f"s{i}", S) for i in range(3)]
                 + [make_node(f"l{i}", L) for i in range(9)])
        positions = [xy(n) for n in tiered_layout(nodes)]
        assert len(set(positions)) == len(positions)

    def test_deterministic(self):
        nodes = [make_node("c", P), make_node("m", S), make_node("s1", L), make_node("s2", L)]
        first = [xy(n) for n in tiered_layout(nodes)]
        second = [xy(n) for n in tiered_layout(nodes)]
        assert first == second

    def test_does_not_mutate_input(self):
        nodes = [make_node("l", L, x=7, y=9), make_node("p", P, x=1, y=2)]
        result = tiered_layout(nodes)
        assert ids(nodes) == ["l", "p"]
        assert xy(nodes[0]) == (7, 9)
        assert xy(nodes[1]) == (1, 2)
        result[0].data["label"] = "changed"
        assert nodes[1].label == "p"

    def test_keeps_payload(self):
        node = make_node("p", P, label="Root")
        node.data["content"] = "Body"
        result = tiered_layout([node])
        assert result[0].data == {"label": "Root", "content": "Body"}
        assert result[0].kind is P

    def test_accepts_mappings(self, generated_nodes):
        result = tiered_layout(generated_nodes)
        assert all(isinstance(n, Node) for n in result)
        assert ids(result) == ["chapter-1", "main-topic-1", "main-topic-2", "sub-topic-1"]

    def test_custom_config(self):
        config = LayoutConfig(center_x=0, top_y=0, horizontal_spacing=10, level_spacing=20, leaf_columns=2)
        nodes = [make_node(f"l{i}", L) for i in range(3)]
        result = tiered_layout(nodes, config)
        assert [xy(n) for n in result] == [(-5, 0), (5, 0), (0, 20)]


class TestFallbackLayout:
    """Degenerate input never raises."""

    def test_unknown_kind_uses_fallback(self):
        raw = [
            {"id": "a", "type": "chapter"},
            {"id": "b", "type": "concept"},
            {"id": "c", "type": "sub-topic"},
        ]
        result = tiered_layout(raw)
        assert [n["id"] for n in result] == ["a", "b", "c"]
        assert [n["position"] for n in result] == [
            {"x": 100, "y": 100},
            {"x": 350, "y": 150},
            {"x": 600, "y": 100},
        ]
        assert "position" not in raw[0]

    @pytest.mark.parametrize("strategy", [tiered_layout, radial_layout])
    def test_single_pass_iterable_keeps_every_item(self, strategy):
        raw = iter([
            {"id": "a", "type": "chapter"},
            {"id": "b", "type": "concept"},
            {"id": "c", "type": "sub-topic"},
        ])
        result = strategy(raw)
        assert [n["id"] for n in result] == ["a", "b", "c"]
        assert result[0]["position"] == {"x": 100, "y": 100}

    def test_single_pass_iterable_of_valid_nodes(self):
        result = tiered_layout(n for n in [make_node("s"), make_node("p", P)])
        assert ids(result) == ["p", "s"]

    def test_missing_id_uses_fallback(self):
        result = tiered_layout([{"type": "chapter"}, make_node("p", P)])
        assert result[0]["position"] == {"x": 100, "y": 100}
        assert isinstance(result[1], Node)
        assert xy(result[1]) == (350, 150)

    def test_non_node_items_dropped(self):
        result = tiered_layout([42, {"id": "a", "type": "oops"}, None])
        assert len(result) == 1
        assert result[0]["position"] == {"x": 100, "y": 100}

    @pytest.mark.parametrize("bad_input", [None, 5])
    def test_non_collection_input(self, bad_input):
        assert tiered_layout(bad_input) == []
        assert fallback_layout(bad_input) == []

    def test_x_increases_monotonically(self):
        result = fallback_layout([make_node(f"n{i}") for i in range(5)])
        xs = [n.position.x for n in result]
        assert xs == sorted(xs)
        assert len(set(xs)) == 5


class TestRadialLayout:
    """Tests for the radial layout."""

    def test_positions(self):
        nodes = [make_node("m1", S), make_node("c", P), make_node("m2", S), make_node("s1", L),
                 make_node("s2", L)]
        result = radial_layout(nodes, LayoutConfig(detail_columns=1))

        assert ids(result) == ["c", "m1", "m2", "s1", "s2"]
        assert xy(result[0]) == pytest.approx((500, 300))
        assert xy(result[1]) == pytest.approx((800, 300))
        assert xy(result[2]) == pytest.approx((200, 300))
        assert xy(result[3]) == pytest.approx((-100, 600))
        assert xy(result[4]) == pytest.approx((50, 750))

    def test_secondaries_on_ring(self):
        nodes = [make_node("c", P)] + [make_node(f"m{i}", S) for i in range(5)]
        for node in radial_layout(nodes)[1:]:
            distance = math.hypot(node.position.x - 500, node.position.y - 300)
            assert distance == pytest.approx(300)

    def test_fallback(self):
        result = radial_layout([{"id": "x", "type": "concept"}])
        assert result == [{"id": "x", "type": "concept", "position": {"x": 100, "y": 100}}]


class TestLayoutMindmap:
    """Tests for strategy dispatch."""

    def test_default_is_tiered(self):
        nodes = [make_node("c", P), make_node("m", S)]
        assert [xy(n) for n in layout_mindmap(nodes)] == [xy(n) for n in tiered_layout(nodes)]

    def test_radial(self):
        nodes = [make_node("c", P)]
        assert xy(layout_mindmap(nodes, "radial")[0]) == (500, 300)

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="Unknown layout strategy"):
            layout_mindmap([], "spiral")
