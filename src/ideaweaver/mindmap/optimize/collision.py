# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Bounding-box collision resolution for mindmap nodes.

"""
Collision resolution for mind map layouts.

Iteratively pushes apart overlapping node boxes. Each overlapping pair is
separated along the axis with the smaller penetration (minimum translation),
each node moving half the overlap. Two entry points:

- settle: every pair of visible non-Root nodes, run after structural changes
- drag_local: only pairs involving the dragged node, run on each drag update

Root never moves and is not part of any pair.
"""

from typing import Dict, List, Optional, Sequence, Tuple
import logging

import numpy as np

from ...config import CollisionConfig
from ..model import Node, Positions
from ..sizes import SizeCache

logger = logging.getLogger(__name__)

HalfExtents = Dict[str, Tuple[float, float]]


def separation(
    a: Tuple[float, float],
    b: Tuple[float, float],
    half_a: Tuple[float, float],
    half_b: Tuple[float, float]
) -> Optional[Tuple[int, float]]:
    """
    Push needed to separate box ``a`` from box ``b``.

    Returns:
        None if the boxes do not overlap, else ``(axis, push)`` where
        ``axis`` is 0 for x, 1 for y and ``push`` is the signed distance
        ``a`` moves (``b`` moves by ``-push``).
    """
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    overlap_x = (half_a[0] + half_b[0]) - abs(dx)
    overlap_y = (half_a[1] + half_b[1]) - abs(dy)
    if overlap_x <= 0 or overlap_y <= 0:
        return None
    if overlap_x < overlap_y:
        return 0, (overlap_x / 2 if dx >= 0 else -overlap_x / 2)
    return 1, (overlap_y / 2 if dy >= 0 else -overlap_y / 2)


def _shift(point: Tuple[float, float], axis: int, amount: float) -> Tuple[float, float]:
    if axis == 0:
        return (point[0] + amount, point[1])
    return (point[0], point[1] + amount)


def resolve_pairs(
    positions: Positions,
    half_extents: HalfExtents,
    node_ids: Sequence[str],
    passes: int
) -> Tuple[Positions, int]:
    """
    Relax every unordered pair of ``node_ids``.

    Returns:
        (new positions, passes run)
    """
    pos = dict(positions)
    ids = [nid for nid in node_ids if nid in pos and nid in half_extents]
    n = len(ids)
    run = 0

    for _ in range(passes):
        run += 1
        moved = False
        for i in range(n):
            nid_i = ids[i]
            for j in range(i + 1, n):
                nid_j = ids[j]
                result = separation(pos[nid_i], pos[nid_j],
                                    half_extents[nid_i], half_extents[nid_j])
                if result is None:
                    continue
                axis, push = result
                pos[nid_i] = _shift(pos[nid_i], axis, push)
                pos[nid_j] = _shift(pos[nid_j], axis, -push)
                moved = True
        if not moved:
            break

    return pos, run


def resolve_against(
    positions: Positions,
    half_extents: HalfExtents,
    moving_id: str,
    others: Sequence[str],
    passes: int
) -> Tuple[Positions, int]:
    """Relax only pairs ``(moving_id, other)``; both sides take half the push."""
    pos = dict(positions)
    if moving_id not in pos or moving_id not in half_extents:
        return pos, 0
    others = [o for o in others if o != moving_id and o in pos and o in half_extents]
    run = 0

    for _ in range(passes):
        run += 1
        moved = False
        for other in others:
            result = separation(pos[moving_id], pos[other],
                                half_extents[moving_id], half_extents[other])
            if result is None:
                continue
            axis, push = result
            pos[moving_id] = _shift(pos[moving_id], axis, push)
            pos[other] = _shift(pos[other], axis, -push)
            moved = True
        if not moved:
            break

    return pos, run


def overlapping_pairs(
    positions: Positions,
    half_extents: HalfExtents,
    node_ids: Optional[Sequence[str]] = None,
    tolerance: float = 1e-9
) -> List[Tuple[str, str]]:
    """
    Vectorized scan for pairs whose boxes still overlap.

    Args:
        positions: Node positions.
        half_extents: Half width/height per node (padding included).
        node_ids: Restrict the scan (default: every id in both maps).
        tolerance: Overlaps at or below this are treated as touching.

    Returns:
        Sorted list of ``(id_a, id_b)`` pairs, ``id_a`` earlier in order.
    """
    ids = [nid for nid in (node_ids if node_ids is not None else positions)
           if nid in positions and nid in half_extents]
    if len(ids) < 2:
        return []

    pos = np.array([positions[nid] for nid in ids], dtype=float)
    half = np.array([half_extents[nid] for nid in ids], dtype=float)

    diff = np.abs(pos[:, np.newaxis, :] - pos[np.newaxis, :, :])   # (n, n, 2)
    reach = half[:, np.newaxis, :] + half[np.newaxis, :, :]        # (n, n, 2)
    overlap = reach - diff

    is_overlap = (overlap[:, :, 0] > tolerance) & (overlap[:, :, 1] > tolerance)
    is_overlap = np.triu(is_overlap, k=1)

    rows, cols = np.nonzero(is_overlap)
    return [(ids[i], ids[j]) for i, j in zip(rows.tolist(), cols.tolist())]


class CollisionResolver:
    """Removes box overlaps among visible non-Root nodes."""

    def __init__(
        self,
        config: Optional[CollisionConfig] = None,
        sizes: Optional[SizeCache] = None
    ):
        self.config = config or CollisionConfig()
        self.sizes = sizes or SizeCache(self.config)

    def half_extents(self, nodes: Sequence[Node]) -> HalfExtents:
        return {node.id: self.sizes.half_extents(node, self.config.padding)
                for node in nodes}

    @staticmethod
    def _movable(nodes: Sequence[Node]) -> List[Node]:
        return [node for node in nodes if not node.is_root]

    def settle(self, positions: Positions, visible: Sequence[Node]) -> Positions:
        """Global settle: every visible non-Root node may move."""
        movable = self._movable(visible)
        extents = self.half_extents(movable)
        result, run = resolve_pairs(
            positions, extents, [n.id for n in movable], self.config.settle_passes)
        if run >= self.config.settle_passes:
            remaining = overlapping_pairs(result, extents, [n.id for n in movable])
            if remaining:
                logger.debug(f"Settle hit pass cap with {len(remaining)} overlaps left")
        return result

    def drag_local(
        self,
        positions: Positions,
        visible: Sequence[Node],
        dragged_id: str
    ) -> Positions:
        """Drag update: resolve the dragged node against every other visible node."""
        movable = self._movable(visible)
        if dragged_id not in {n.id for n in movable}:
            return dict(positions)
        extents = self.half_extents(movable)
        result, _ = resolve_against(
            positions, extents, dragged_id, [n.id for n in movable],
            self.config.drag_passes)
        return result

    def overlaps(
        self,
        positions: Positions,
        visible: Sequence[Node],
        tolerance: float = 1e-9
    ) -> List[Tuple[str, str]]:
        movable = self._movable(visible)
        return overlapping_pairs(positions, self.half_extents(movable),
                                 [n.id for n in movable], tolerance)


def settle(
    positions: Positions,
    visible: Sequence[Node],
    config: Optional[CollisionConfig] = None,
    sizes: Optional[SizeCache] = None
) -> Positions:
    """Functional form of :meth:`CollisionResolver.settle`."""
    return CollisionResolver(config, sizes).settle(positions, visible)
