# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Radial layout algorithm for mind maps.

"""
Radial layout placing branches on a ring around Root.

Root sits at the origin, branches of Root are spread over a ring and each
subtree fans out on a shrinking arc inside its parent's angular slice.
Ideas hanging directly off Root get their own inner ring.
"""

from typing import Any, Dict, List, Optional
import math

from ..graph import NodeGraph
from ..model import ROOT_ID, NodeKind, Positions


def radial(
    graph: NodeGraph,
    options: Optional[Dict[str, Any]] = None
) -> Positions:
    """
    Compute radial layout for a mind map graph.

    Args:
        graph: Projected node tree.
        options: Optional parameters:
            - branch_radius: Ring radius for branches of Root (default: 300)
            - child_radius: First ring radius below a branch (default: 180)
            - shrink: Radius factor per level (default: 0.6)
            - arc_fill: Share of a slice handed to a subtree (default: 0.8)
            - root_ring: Ring radius for ideas directly on Root (default: 220)

    Returns:
        Dictionary mapping node IDs to (x, y) positions.
    """
    options = options or {}
    branch_radius = options.get('branch_radius', 300)
    child_radius = options.get('child_radius', 180)
    shrink = options.get('shrink', 0.6)
    arc_fill = options.get('arc_fill', 0.8)
    root_ring = options.get('root_ring', 220)

    if ROOT_ID not in graph:
        return {}

    positions: Positions = {ROOT_ID: (0.0, 0.0)}

    def place_children(parent_id: str, radius: float, start: float, span: float) -> None:
        children = graph.children(parent_id)
        if not children:
            return
        base = positions[parent_id]
        step = span / max(len(children), 1)
        for index, child in enumerate(children):
            angle = start + step * (index + 0.5)
            positions[child.id] = (base[0] + math.cos(angle) * radius,
                                   base[1] + math.sin(angle) * radius)
            child_span = step * 0.9
            place_children(child.id, radius * shrink, angle - child_span / 2, child_span)

    top = graph.children(ROOT_ID)
    branches = [n for n in top if n.kind is NodeKind.BRANCH]
    loose = [n for n in top if n.kind is not NodeKind.BRANCH]

    step = 2 * math.pi / max(len(branches), 1)
    for index, branch in enumerate(branches):
        angle = -math.pi / 2 + step * index
        positions[branch.id] = (math.cos(angle) * branch_radius,
                                math.sin(angle) * branch_radius)
        half = step * arc_fill / 2
        place_children(branch.id, child_radius, angle - half, step * arc_fill)

    loose_step = 2 * math.pi / max(len(loose), 1)
    for index, node in enumerate(loose):
        angle = loose_step * index
        positions[node.id] = (math.cos(angle) * root_ring,
                              math.sin(angle) * root_ring)
        place_children(node.id, child_radius * shrink, angle - loose_step * 0.45,
                       loose_step * 0.9)

    _place_stragglers(graph, positions)
    return positions


def _place_stragglers(graph: NodeGraph, positions: Positions) -> None:
    """Anything not reached from Root goes on a wide outer ring."""
    missing: List[str] = [n.id for n in graph.nodes if n.id not in positions]
    if not missing:
        return
    radius = 600.0
    for index, node_id in enumerate(missing):
        angle = 2 * math.pi * index / len(missing)
        positions[node_id] = (math.cos(angle) * radius, math.sin(angle) * radius)
