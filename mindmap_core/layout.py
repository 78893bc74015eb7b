"""
Layout algorithms for mindmap nodes.

Provides the layout strategies applied to generated or imported mindmaps:
- Tiered: primary row, secondary row, then a wrapped grid of leaf nodes,
  every row centered on the same vertical axis
- Radial: primaries in a row, secondaries on a ring around them, leaves on
  a staggered grid below
- Fallback: a plain staggered line, used whenever the input can't be
  classified into tiers

Layout functions never mutate their input; they return new, positioned
copies. Output is grouped primary, secondary, leaf, each group keeping its
input order.
"""

import copy
import logging
import math
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Optional

from .config import LayoutConfig
from .models import Node, Position, Tier, coerce_node

logger = logging.getLogger(__name__)

TIER_ORDER = (Tier.PRIMARY, Tier.SECONDARY, Tier.LEAF)


# --- Position helpers ---

def row_positions(count: int, center_x: float, spacing: float) -> list[float]:
    """
    X coordinates for `count` nodes in one row, symmetric around `center_x`.

    The i-th node sits at center_x - (count - 1) * spacing / 2 + i * spacing.
    """
    start = center_x - (count - 1) * spacing / 2
    return [start + i * spacing for i in range(count)]


def radial_positions(
    count: int,
    center_x: float,
    center_y: float,
    radius: float
) -> list[tuple[float, float]]:
    """Evenly spaced points on a circle, starting at angle 0."""
    positions = []
    for i in range(count):
        angle = 2 * math.pi * i / count
        positions.append((center_x + radius * math.cos(angle),
                          center_y + radius * math.sin(angle)))
    return positions


def staggered_grid_positions(
    count: int,
    start_x: float,
    start_y: float,
    horizontal_spacing: float,
    vertical_spacing: float,
    columns: int
) -> list[tuple[float, float]]:
    """
    Grid positions filled row by row.

    Odd rows are shifted right by half a column for a less rigid look.
    """
    positions = []
    for i in range(count):
        row, col = divmod(i, columns)
        x_offset = horizontal_spacing / 2 if row % 2 else 0
        positions.append((start_x + col * horizontal_spacing + x_offset,
                          start_y + row * vertical_spacing))
    return positions


# --- Classification ---

def partition_by_tier(nodes: Iterable[Node]) -> dict[Tier, list[Node]]:
    """Stable partition of nodes by tier."""
    groups: dict[Tier, list[Node]] = {tier: [] for tier in TIER_ORDER}
    for node in nodes:
        groups[node.tier].append(node)
    return groups


def _as_list(nodes: Any) -> Optional[list]:
    """Read the input once; None when it isn't iterable."""
    try:
        return list(nodes)
    except TypeError:
        logger.warning("Layout input is not a collection: %r", type(nodes).__name__)
        return None


def _classify(nodes: list) -> dict[Tier, list[Node]]:
    # Raises TypeError/ValueError (pydantic ValidationError) on bad input
    return partition_by_tier([coerce_node(item) for item in nodes])


def _place(node: Node, x: float, y: float) -> Node:
    return node.model_copy(deep=True, update={"position": Position(x=x, y=y)})


def _chunk(items: list, size: int) -> list[list]:
    return [items[i:i + size] for i in range(0, len(items), size)]


# --- Strategies ---

def fallback_layout(nodes: Any, config: Optional[LayoutConfig] = None) -> list:
    """
    Place every item on a staggered line, in input order.

    Accepts anything: Node instances come back as positioned copies, mappings
    as copied dicts with a `position` key, and any other item is dropped.
    A non-iterable input yields an empty list.

    Args:
        nodes: Items to place
        config: Layout constants (defaults to LayoutConfig())

    Returns:
        A new list of positioned items
    """
    config = config or LayoutConfig()
    items = _as_list(nodes)
    if items is None:
        return []

    placed: list = []
    for item in items:
        i = len(placed)
        x = config.fallback_x + i * config.fallback_step
        y = config.fallback_y + (i % 2) * config.fallback_stagger
        if isinstance(item, Node):
            placed.append(_place(item, x, y))
        elif isinstance(item, Mapping):
            copied = copy.deepcopy(dict(item))
            copied["position"] = {"x": x, "y": y}
            placed.append(copied)
        else:
            logger.warning("Dropping non-node item from layout: %r", item)
    return placed


def tiered_layout(nodes: Any, config: Optional[LayoutConfig] = None) -> list:
    """
    Arrange nodes in centered rows by tier.

    Primary nodes take the top row, secondary nodes the next one, and leaf
    nodes a grid of at most `leaf_columns` per row below that. Each row is
    centered on `center_x` using its own node count. Empty tiers take no
    row, so there are never gaps between rows.

    Falls back to `fallback_layout` when any item can't be read as a Node.

    Args:
        nodes: Nodes (or node mappings) to arrange
        config: Layout constants (defaults to LayoutConfig())

    Returns:
        New list of positioned nodes: primary, then secondary, then leaf
    """
    config = config or LayoutConfig()
    items = _as_list(nodes)
    if items is None:
        return []
    try:
        groups = _classify(items)
    except (TypeError, ValueError) as exc:
        logger.warning("Tiered layout not possible, using fallback: %s", exc)
        return fallback_layout(items, config)

    rows: list[list[Node]] = []
    for tier in TIER_ORDER:
        members = groups[tier]
        if tier is Tier.LEAF:
            rows.extend(_chunk(members, config.leaf_columns))
        elif members:
            rows.append(members)

    result = []
    for level, row in enumerate(rows):
        y = config.top_y + level * config.level_spacing
        xs = row_positions(len(row), config.center_x, config.horizontal_spacing)
        for node, x in zip(row, xs):
            result.append(_place(node, x, y))

    logger.debug("Tiered layout placed %d nodes in %d rows", len(result), len(rows))
    return result


def radial_layout(nodes: Any, config: Optional[LayoutConfig] = None) -> list:
    """
    Arrange nodes around the primary node.

    Primary nodes run right from (center_x, center_y), secondary nodes sit
    on a circle of `radius` around that point, and leaf nodes fill a
    staggered grid of `detail_columns` per row starting below-left of it.

    Falls back to `fallback_layout` when any item can't be read as a Node.
    """
    config = config or LayoutConfig()
    items = _as_list(nodes)
    if items is None:
        return []
    try:
        groups = _classify(items)
    except (TypeError, ValueError) as exc:
        logger.warning("Radial layout not possible, using fallback: %s", exc)
        return fallback_layout(items, config)

    result = []
    for i, node in enumerate(groups[Tier.PRIMARY]):
        result.append(_place(node, config.center_x + i * config.horizontal_spacing, config.center_y))

    secondary = groups[Tier.SECONDARY]
    ring = radial_positions(len(secondary), config.center_x, config.center_y, config.radius)
    for node, (x, y) in zip(secondary, ring):
        result.append(_place(node, x, y))

    leaves = groups[Tier.LEAF]
    grid = staggered_grid_positions(
        len(leaves),
        config.center_x - 2 * config.horizontal_spacing,
        config.center_y + config.radius,
        config.horizontal_spacing,
        config.level_spacing,
        config.detail_columns,
    )
    for node, (x, y) in zip(leaves, grid):
        result.append(_place(node, x, y))

    return result


STRATEGIES: dict[str, Callable[..., list]] = {
    "tiered": tiered_layout,
    "radial": radial_layout,
}


def layout_mindmap(
    nodes: Any,
    strategy: str = "tiered",
    config: Optional[LayoutConfig] = None
) -> list:
    """
    Lay out a mindmap with the named strategy ("tiered" or "radial").

    Raises:
        ValueError: if the strategy name is unknown
    """
    try:
        layout = STRATEGIES[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown layout strategy: {strategy!r} (expected one of {', '.join(STRATEGIES)})"
        ) from None
    return layout(nodes, config)
