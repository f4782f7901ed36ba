# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Mind map layout optimization passes.

"""
Optimization passes for mind map layouts.

Provides passes that refine node positions after seeding:
- Collision resolution (push apart overlapping node boxes)
- Centering (bounds and fit-to-viewport camera)
"""

from .collision import (
    CollisionResolver,
    overlapping_pairs,
    resolve_against,
    resolve_pairs,
    separation,
    settle,
)
from .centering import bounds_center, fit_to_viewport, layout_bounds

__all__ = [
    'CollisionResolver',
    'overlapping_pairs',
    'resolve_against',
    'resolve_pairs',
    'separation',
    'settle',
    'bounds_center',
    'fit_to_viewport',
    'layout_bounds',
]
