# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Measured node sizes feeding collision half extents.

"""
Side cache of measured node bounding boxes.

Renderers measure nodes asynchronously and report ``(node_id, width,
height)`` through :meth:`SizeCache.observe`. The collision resolver reads
the cache at the start of each pass; measurements never move nodes.
"""

import threading
from typing import Dict, Optional, Tuple

from ..config import CollisionConfig
from .model import Node, NodeKind


class SizeCache:
    """Thread-safe ``{node_id: (width, height)}`` cache."""

    def __init__(self, config: Optional[CollisionConfig] = None):
        self.config = config or CollisionConfig()
        self._sizes: Dict[str, Tuple[float, float]] = {}
        self._lock = threading.Lock()

    def observe(self, node_id: str, width: float, height: float) -> bool:
        """
        Record a measurement.

        Returns:
            True if the cached size changed by at least the tolerance.
        """
        tolerance = self.config.measure_tolerance
        with self._lock:
            current = self._sizes.get(node_id)
            if (current and abs(current[0] - width) < tolerance
                    and abs(current[1] - height) < tolerance):
                return False
            self._sizes[node_id] = (float(width), float(height))
            return True

    def measured(self, node_id: str) -> Optional[Tuple[float, float]]:
        with self._lock:
            return self._sizes.get(node_id)

    def forget(self, node_id: str) -> None:
        with self._lock:
            self._sizes.pop(node_id, None)

    def rename(self, old_id: str, new_id: str) -> None:
        with self._lock:
            if old_id in self._sizes:
                self._sizes[new_id] = self._sizes.pop(old_id)

    def default_half_extents(self, kind: NodeKind) -> Tuple[float, float]:
        size = {
            NodeKind.ROOT: self.config.root_size,
            NodeKind.BRANCH: self.config.branch_size,
            NodeKind.LEAF: self.config.leaf_size,
        }[kind]
        return size.half_width, size.half_height

    def half_extents(self, node: Node, padding: Optional[float] = None) -> Tuple[float, float]:
        """Half width/height of ``node`` plus padding."""
        if padding is None:
            padding = self.config.padding
        measured = self.measured(node.id)
        if measured is not None:
            half_w, half_h = measured[0] / 2, measured[1] / 2
        else:
            half_w, half_h = self.default_half_extents(node.kind)
        return half_w + padding, half_h + padding

    def snapshot(self) -> Dict[str, Tuple[float, float]]:
        with self._lock:
            return dict(self._sizes)
