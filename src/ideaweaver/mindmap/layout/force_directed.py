# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Force-directed layout algorithm with NumPy acceleration.

"""
Force-directed layout using spring-electric model.

Nodes repel each other within a cutoff distance and parent/child pairs are
pulled towards an ideal edge length. Root is pinned at the origin and
children take most of the spring pull. All pairwise forces are computed
with NumPy broadcasting.
"""

from typing import Any, Dict, Optional

import numpy as np

from ..graph import NodeGraph
from ..model import ROOT_ID, Positions


def force_directed(
    graph: NodeGraph,
    positions: Optional[Positions] = None,
    options: Optional[Dict[str, Any]] = None
) -> Positions:
    """
    Compute force-directed layout for a mind map graph.

    Args:
        graph: Projected node tree.
        positions: Starting positions; missing nodes start near the origin.
        options: Optional parameters:
            - iterations: Number of iterations (default: 100)
            - repulsion: Repulsion strength (default: 8000)
            - attraction: Spring constant (default: 0.05)
            - damping: Velocity damping (default: 0.85)
            - min_distance: Repulsion acts below 3x this (default: 120)
            - ideal_length: Rest length of an edge (default: 200)
            - parent_share: Share of spring pull applied to the parent (default: 0.3)
            - extent: Half size of the clamping box (default: 1900)
            - seed: Seed for the start jitter (default: 0)

    Returns:
        Dictionary mapping node IDs to (x, y) positions.
    """
    options = options or {}
    iterations = options.get('iterations', 100)
    repulsion = options.get('repulsion', 8000)
    attraction = options.get('attraction', 0.05)
    damping = options.get('damping', 0.85)
    min_distance = options.get('min_distance', 120)
    ideal_length = options.get('ideal_length', 200)
    parent_share = options.get('parent_share', 0.3)
    extent = options.get('extent', 1900)
    seed = options.get('seed', 0)

    nodes = graph.nodes
    if not nodes:
        return {}
    positions = positions or {}

    n = len(nodes)
    node_ids = [node.id for node in nodes]
    id_to_idx = {nid: i for i, nid in enumerate(node_ids)}

    # Initialize positions from the current layout, jitter the rest
    rng = np.random.default_rng(seed)
    pos = (rng.random((n, 2)) - 0.5) * 400
    for i, nid in enumerate(node_ids):
        if nid in positions:
            pos[i] = positions[nid]

    fixed = np.zeros(n, dtype=bool)
    if ROOT_ID in id_to_idx:
        fixed[id_to_idx[ROOT_ID]] = True
        pos[id_to_idx[ROOT_ID]] = (0.0, 0.0)
    free = ~fixed

    # Parent/child index pairs
    pairs = [(id_to_idx[p], id_to_idx[c]) for p, c in graph.edges()
             if p in id_to_idx and c in id_to_idx]
    parent_idx = np.array([p for p, _ in pairs], dtype=int)
    child_idx = np.array([c for _, c in pairs], dtype=int)

    velocity = np.zeros((n, 2))
    cutoff = min_distance * 3

    for _ in range(iterations):
        # Repulsion between all pairs within the cutoff
        diff = pos[:, np.newaxis, :] - pos[np.newaxis, :, :]  # (n, n, 2)
        dist = np.sqrt(np.sum(diff ** 2, axis=2))
        dist = np.maximum(dist, 1.0)

        strength = np.where(dist < cutoff, repulsion / (dist ** 2), 0.0)
        np.fill_diagonal(strength, 0.0)
        velocity += np.sum(diff / dist[:, :, np.newaxis] * strength[:, :, np.newaxis], axis=1)

        # Springs along edges
        if len(pairs):
            delta = pos[parent_idx] - pos[child_idx]
            length = np.maximum(np.sqrt(np.sum(delta ** 2, axis=1)), 1e-9)
            pull = ((length - ideal_length) * attraction)[:, np.newaxis] * delta / length[:, np.newaxis]
            np.add.at(velocity, child_idx, pull)
            np.add.at(velocity, parent_idx, -pull * parent_share)

        velocity[fixed] = 0.0
        pos[free] += velocity[free]
        velocity *= damping
        np.clip(pos, -extent, extent, out=pos)

    return {node_ids[i]: (float(pos[i, 0]), float(pos[i, 1])) for i in range(n)}
