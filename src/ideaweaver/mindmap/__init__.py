# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Idea mindmap spatial engine.

"""
Mindmap engine for IdeaWeaver.

Positions a Root/Branch/Leaf hierarchy in a 2D world, keeps node boxes
apart and drives a pan/zoom camera plus drag and link gestures.

Modules:
- graph: project ideas and branches into a node tree
- layout: seeding and full layouts
- optimize: collision resolution and centering
- viewport: zoom/pan camera
- interaction: pointer gesture state machine
- session: owner of all mutable state
- persistence, store: backend contract, background writes, SQLite
- io: JSON Lines records
"""

from .errors import BranchError, MindmapError, RelationshipError
from .graph import CollapseState, NodeGraph, project_nodes
from .interaction import GestureState, InteractionController
from .layout import LayoutSeeder, apply_layout
from .model import (
    ROOT_ID,
    BranchRecord,
    IdeaRecord,
    Node,
    NodeKind,
    branch_node_id,
)
from .optimize import CollisionResolver, overlapping_pairs
from .persistence import InMemoryBackend, MindmapBackend, StatusChannel
from .session import LinkMode, MindmapSession
from .sizes import SizeCache
from .store import SqliteMindmapStore
from .viewport import ScrollAction, ViewportController

__all__ = [
    'ROOT_ID',
    'BranchRecord',
    'IdeaRecord',
    'Node',
    'NodeKind',
    'branch_node_id',
    'MindmapError',
    'RelationshipError',
    'BranchError',
    'NodeGraph',
    'CollapseState',
    'project_nodes',
    'LayoutSeeder',
    'apply_layout',
    'CollisionResolver',
    'overlapping_pairs',
    'SizeCache',
    'ViewportController',
    'ScrollAction',
    'InteractionController',
    'GestureState',
    'LinkMode',
    'MindmapSession',
    'MindmapBackend',
    'InMemoryBackend',
    'StatusChannel',
    'SqliteMindmapStore',
]
