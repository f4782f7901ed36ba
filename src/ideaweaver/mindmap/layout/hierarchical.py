# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Hierarchical (tree) layout algorithm for mind maps.

"""
Hierarchical layout arranging nodes in tree structure.

Each subtree gets a band as wide as the sum of its children's bands (at
least one node slot) and the parent is centred over its band. Root sits at
the origin; ``direction`` picks whether levels grow downwards or rightwards.
"""

from typing import Any, Dict, Optional, Tuple
import logging

from ..graph import NodeGraph
from ..model import ROOT_ID, Positions

logger = logging.getLogger(__name__)

DIRECTIONS = ('vertical', 'horizontal')


def hierarchical(
    graph: NodeGraph,
    options: Optional[Dict[str, Any]] = None
) -> Positions:
    """
    Compute hierarchical tree layout for a mind map graph.

    Args:
        graph: Projected node tree.
        options: Optional parameters:
            - direction: 'vertical' or 'horizontal' (default: 'vertical')
            - node_spacing: Band size of a single node across the tree
              (default: 180 vertical, 80 horizontal)
            - level_spacing: Distance between levels
              (default: 140 vertical, 220 horizontal)

    Returns:
        Dictionary mapping node IDs to (x, y) positions.
    """
    options = options or {}
    direction = options.get('direction', 'vertical')
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown tree direction: {direction!r}")
    horizontal = direction == 'horizontal'
    node_spacing = options.get('node_spacing', 80 if horizontal else 180)
    level_spacing = options.get('level_spacing', 220 if horizontal else 140)

    if ROOT_ID not in graph:
        return {}

    # Calculate subtree band sizes
    band: Dict[str, float] = {}

    def calc_band(node_id: str) -> float:
        children = graph.children(node_id)
        if not children:
            band[node_id] = node_spacing
            return node_spacing
        total = sum(calc_band(child.id) for child in children)
        band[node_id] = max(node_spacing, total)
        return band[node_id]

    calc_band(ROOT_ID)

    # Position nodes: ``across`` runs along a level, ``depth`` between levels
    placed: Dict[str, Tuple[float, float]] = {}

    def position_subtree(node_id: str, across: float, depth: float) -> None:
        placed[node_id] = (across, depth)
        children = graph.children(node_id)
        total = sum(band[child.id] for child in children)
        cursor = across - total / 2
        for child in children:
            width = band[child.id]
            position_subtree(child.id, cursor + width / 2, depth + level_spacing)
            cursor += width

    position_subtree(ROOT_ID, 0.0, 0.0)

    # Handle disconnected nodes on one extra level
    orphans = [n.id for n in graph.nodes if n.id not in placed]
    if orphans:
        logger.debug(f"Tree layout: {len(orphans)} unreachable nodes")
        depth = max(d for _, d in placed.values()) + level_spacing
        cursor = -node_spacing * (len(orphans) - 1) / 2
        for node_id in orphans:
            placed[node_id] = (cursor, depth)
            cursor += node_spacing

    if horizontal:
        return {nid: (float(d), float(a)) for nid, (a, d) in placed.items()}
    return {nid: (float(a), float(d)) for nid, (a, d) in placed.items()}


def tree_vertical(graph: NodeGraph, options: Optional[Dict[str, Any]] = None) -> Positions:
    return hierarchical(graph, dict(options or {}, direction='vertical'))


def tree_horizontal(graph: NodeGraph, options: Optional[Dict[str, Any]] = None) -> Positions:
    return hierarchical(graph, dict(options or {}, direction='horizontal'))
