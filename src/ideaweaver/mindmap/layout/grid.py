# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Grid layout algorithm for mind maps.

"""
Grid layout placing nodes in a regular grid pattern.

Nodes are ordered Root first, then branches, then leaves (stable within a
kind) and laid out row by row, then shifted so Root lands on the origin.
"""

from typing import Any, Dict, Optional
import math

from ..graph import NodeGraph
from ..model import ROOT_ID, NodeKind, Positions

KIND_PRIORITY = {
    NodeKind.ROOT: 0,
    NodeKind.BRANCH: 1,
    NodeKind.LEAF: 2,
}


def grid(
    graph: NodeGraph,
    options: Optional[Dict[str, Any]] = None
) -> Positions:
    """
    Compute grid layout for a mind map graph.

    Args:
        graph: Projected node tree.
        options: Optional parameters:
            - cell_width: Width of each grid cell (default: 300)
            - cell_height: Height of each grid cell (default: 180)
            - columns: Number of columns (default: ceil(sqrt(1.5 * n)))

    Returns:
        Dictionary mapping node IDs to (x, y) positions.
    """
    options = options or {}
    cell_width = options.get('cell_width', 300)
    cell_height = options.get('cell_height', 180)
    columns = options.get('columns', 0)

    nodes = sorted(graph.nodes, key=lambda n: KIND_PRIORITY[n.kind])
    if not nodes:
        return {}

    if columns <= 0:
        columns = math.ceil(math.sqrt(len(nodes) * 1.5))

    start_x = -columns * cell_width / 2
    positions: Positions = {}
    for i, node in enumerate(nodes):
        row = i // columns
        col = i % columns
        positions[node.id] = (start_x + col * cell_width + cell_width / 2,
                              row * cell_height + cell_height / 2)

    # Shift so Root sits at the origin
    if ROOT_ID in positions:
        ox, oy = positions[ROOT_ID]
        positions = {nid: (x - ox, y - oy) for nid, (x, y) in positions.items()}

    return positions
