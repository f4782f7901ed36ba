# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Bounds and fit-to-viewport computations.

"""
Centering helpers for mind map layouts.

These never move nodes; they compute the world bounding box of a layout
and the camera (zoom, pan) that frames it in a viewport of a given size.
"""

from typing import Dict, Optional, Tuple

from ..model import Point, Positions

Bounds = Tuple[float, float, float, float]


def layout_bounds(
    positions: Positions,
    half_extents: Optional[Dict[str, Tuple[float, float]]] = None
) -> Optional[Bounds]:
    """
    World bounding box ``(min_x, min_y, max_x, max_y)`` of the given nodes.

    Args:
        positions: Node centres.
        half_extents: Optional half sizes; centres only if omitted.

    Returns:
        None for an empty layout.
    """
    if not positions:
        return None
    half_extents = half_extents or {}

    min_x = min_y = float('inf')
    max_x = max_y = float('-inf')
    for nid, (x, y) in positions.items():
        hw, hh = half_extents.get(nid, (0.0, 0.0))
        min_x = min(min_x, x - hw)
        max_x = max(max_x, x + hw)
        min_y = min(min_y, y - hh)
        max_y = max(max_y, y + hh)
    return min_x, min_y, max_x, max_y


def bounds_center(bounds: Bounds) -> Point:
    min_x, min_y, max_x, max_y = bounds
    return (min_x + max_x) / 2, (min_y + max_y) / 2


def fit_to_viewport(
    bounds: Bounds,
    viewport_width: float,
    viewport_height: float,
    padding: float = 50.0,
    min_zoom: float = 0.0,
    max_zoom: float = 1.0
) -> Tuple[float, Point]:
    """
    Camera that shows ``bounds`` centred in the viewport.

    Uses the ``screen = (world + pan) * zoom`` transform.

    Returns:
        (zoom, pan)
    """
    min_x, min_y, max_x, max_y = bounds
    graph_width = max(max_x - min_x, 1.0)
    graph_height = max(max_y - min_y, 1.0)

    available_width = max(viewport_width - 2 * padding, 1.0)
    available_height = max(viewport_height - 2 * padding, 1.0)

    zoom = min(available_width / graph_width, available_height / graph_height, max_zoom)
    zoom = max(zoom, min_zoom)

    center_x, center_y = bounds_center(bounds)
    pan = (viewport_width / (2 * zoom) - center_x,
           viewport_height / (2 * zoom) - center_y)
    return zoom, pan
