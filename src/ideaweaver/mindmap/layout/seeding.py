# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Initial placement for nodes that have no position yet.

"""
Layout seeding for the idea mindmap.

Only nodes without a position are placed; existing entries are never
touched, so seeding can run after every structural change. Placement
walks the tree depth-first from Root so each parent has a position before
its children are placed around it:

- Root at the origin
- branches of Root evenly on a circle of radius R1
- nested branches and idea children on a small circle around their parent
- leaves of a branch (or of Root) in concentric rings
"""

from typing import Dict, List, Optional, Tuple
import logging
import math

from ...config import SeedingConfig
from ..graph import NodeGraph
from ..model import ROOT_ID, Node, NodeKind, Point, Positions

logger = logging.getLogger(__name__)


def root_circle_position(index: int, total: int, radius: float) -> Point:
    """Branch of Root: evenly spaced, first one straight up."""
    angle = 2 * math.pi * index / max(1, total) - math.pi / 2
    return (math.cos(angle) * radius, math.sin(angle) * radius)


def child_circle_position(
    base: Point, index: int, total: int, radius: float, min_slots: int = 4
) -> Point:
    """Small circle around a non-Root parent."""
    slots = max(total, min_slots)
    angle = 2 * math.pi * index / slots - math.pi / 2
    return (base[0] + math.cos(angle) * radius,
            base[1] + math.sin(angle) * radius)


def ring_position(base: Point, index: int, config: SeedingConfig) -> Point:
    """Concentric rings of ``ring_capacity`` slots around ``base``."""
    capacity = config.ring_capacity
    ring = index // capacity
    angle = (config.leaf_start_angle
             + 2 * math.pi * (index % capacity) / capacity
             + ring * config.ring_offset)
    radius = config.ring_base + ring * config.ring_spacing
    return (base[0] + math.cos(angle) * radius,
            base[1] + math.sin(angle) * radius)


class LayoutSeeder:
    """Assigns positions to unplaced nodes."""

    def __init__(self, config: Optional[SeedingConfig] = None):
        self.config = config or SeedingConfig()

    def seed(self, graph: NodeGraph, positions: Positions) -> Positions:
        """
        Fill in missing positions.

        Args:
            graph: Projected node tree.
            positions: Current positions (not modified).

        Returns:
            New positions dict with an entry for every node of ``graph``.
        """
        result: Positions = dict(positions)
        placed = 0

        if ROOT_ID not in result:
            result[ROOT_ID] = (0.0, 0.0)
            placed += 1

        stack: List[str] = [ROOT_ID]
        visited = set()
        while stack:
            parent_id = stack.pop()
            if parent_id in visited:
                continue
            visited.add(parent_id)
            children = graph.children(parent_id)
            for node, point in self._place_children(graph.get(parent_id), children, result):
                result[node.id] = point
                placed += 1
            # Reverse so the first child is expanded first.
            stack.extend(child.id for child in reversed(children))

        if placed:
            logger.debug(f"Seeded {placed} of {len(graph)} node positions")
        return result

    def _place_children(
        self,
        parent: Optional[Node],
        children: List[Node],
        positions: Positions
    ) -> List[Tuple[Node, Point]]:
        if parent is None:
            return []
        cfg = self.config
        base = positions.get(parent.id, (0.0, 0.0))
        branches = [c for c in children if c.kind is NodeKind.BRANCH]
        leaves = [c for c in children if c.kind is NodeKind.LEAF]
        placements: List[Tuple[Node, Point]] = []

        for index, branch in enumerate(branches):
            if branch.id in positions:
                continue
            if parent.kind is NodeKind.ROOT:
                point = root_circle_position(index, len(branches), cfg.branch_radius)
                point = (base[0] + point[0], base[1] + point[1])
            else:
                point = child_circle_position(
                    base, index, len(branches), cfg.nested_radius, cfg.child_min_slots)
            placements.append((branch, point))

        for index, leaf in enumerate(leaves):
            if leaf.id in positions:
                continue
            if parent.kind is NodeKind.LEAF:
                point = child_circle_position(
                    base, index, len(leaves), cfg.child_radius, cfg.child_min_slots)
            else:
                point = ring_position(base, index, cfg)
            placements.append((leaf, point))

        return placements


def seed_positions(
    graph: NodeGraph,
    positions: Optional[Positions] = None,
    config: Optional[SeedingConfig] = None
) -> Positions:
    """Functional form of :meth:`LayoutSeeder.seed`."""
    return LayoutSeeder(config).seed(graph, positions or {})
