# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Core data types for the idea mindmap engine.

"""
Data types shared by the mindmap engine.

Ideas and branches are the records handed to us by the host application;
nodes are what the engine projects them into. Positions are plain
``{node_id: (x, y)}`` dicts in world coordinates.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


ROOT_ID = 'root'
BRANCH_PREFIX = 'branch:'

Point = Tuple[float, float]
Positions = Dict[str, Point]


class NodeKind(Enum):
    """Kind of a mindmap node."""
    ROOT = 'root'
    BRANCH = 'branch'
    LEAF = 'leaf'


def normalize_branch_name(value: Optional[str]) -> str:
    """Trim a branch label; blank labels mean 'no branch'."""
    if not value:
        return ''
    return value.strip()


def branch_node_id(name: str) -> str:
    """Node id of the branch called ``name``."""
    return f"{BRANCH_PREFIX}{name}"


def branch_name_from_id(node_id: Optional[str]) -> Optional[str]:
    """Inverse of :func:`branch_node_id`, None for non-branch ids."""
    if node_id and node_id.startswith(BRANCH_PREFIX):
        return node_id[len(BRANCH_PREFIX):]
    return None


@dataclass(frozen=True)
class IdeaRecord:
    """An idea as supplied by the host application."""
    id: str
    title: str = ""
    parent_idea_id: Optional[str] = None
    branch_label: Optional[str] = None
    x: Optional[float] = None
    y: Optional[float] = None

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None


@dataclass(frozen=True)
class BranchRecord:
    """A named grouping scoped to one mindmap."""
    name: str
    parent_link: Optional[str] = None
    color_slot: Optional[int] = None


@dataclass(frozen=True)
class Node:
    """A projected mindmap node."""
    id: str
    kind: NodeKind
    label: str
    parent_id: Optional[str] = None
    idea_id: Optional[str] = None
    branch_name: Optional[str] = None

    @property
    def is_root(self) -> bool:
        return self.kind is NodeKind.ROOT
