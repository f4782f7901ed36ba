# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# IdeaWeaver: spatial layout and interaction engine for idea mindmaps.

"""
IdeaWeaver mindmap engine.

Subpackages:
    config: Engine configuration (YAML layered on dataclass defaults)
    mindmap: Node graph, layout seeding, collision resolution, viewport
             and pointer interaction for the idea mindmap view
"""

__version__ = '0.3.0'

__all__ = ['__version__']
