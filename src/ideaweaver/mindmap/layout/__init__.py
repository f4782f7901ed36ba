# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Mind map layout algorithms.

"""
Layout algorithms for mind map visualization.

Provides:
- Incremental seeding (only nodes without a position)
- Force-directed layout (NumPy spring-electric model)
- Radial layout (branches on a ring around Root)
- Hierarchical layouts (vertical and horizontal trees)
- Grid layout (kind priority order)

The full layouts replace every position; run a collision settle after them.
"""

from typing import Any, Callable, Dict, List, Optional

from ..graph import NodeGraph
from ..model import Positions
from .force_directed import force_directed
from .grid import grid
from .hierarchical import hierarchical, tree_horizontal, tree_vertical
from .radial import radial
from .seeding import LayoutSeeder, seed_positions

LAYOUTS: Dict[str, Callable[..., Positions]] = {
    'radial': radial,
    'tree-vertical': tree_vertical,
    'tree-horizontal': tree_horizontal,
    'grid': grid,
}


def layout_names() -> List[str]:
    return sorted(list(LAYOUTS) + ['force'])


def apply_layout(
    name: str,
    graph: NodeGraph,
    positions: Optional[Positions] = None,
    options: Optional[Dict[str, Any]] = None
) -> Positions:
    """
    Run the named full layout.

    Args:
        name: One of :func:`layout_names`.
        graph: Projected node tree.
        positions: Current positions (used as the start of 'force').
        options: Passed through to the layout function.

    Raises:
        ValueError: Unknown layout name.
    """
    if name == 'force':
        return force_directed(graph, positions, options)
    if name not in LAYOUTS:
        raise ValueError(f"Unknown layout {name!r}; expected one of {layout_names()}")
    return LAYOUTS[name](graph, options)


__all__ = [
    'LayoutSeeder',
    'seed_positions',
    'apply_layout',
    'layout_names',
    'force_directed',
    'radial',
    'hierarchical',
    'tree_vertical',
    'tree_horizontal',
    'grid',
]
