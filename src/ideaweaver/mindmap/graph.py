# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Projection of ideas and branches into the mindmap node tree.

"""
Node graph for the idea mindmap.

The host application owns flat lists of ideas and branches. This module
projects them into a single-rooted parent-pointer tree:

    root
     +-- branch:Marketing          (explicit link, else Root)
     |     +-- idea-1              (branch label)
     |           +-- idea-2        (explicit idea parent)
     +-- idea-3                    (no branch, no parent)

Projection is pure; call it again whenever the domain lists change.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple
import logging

from .model import (
    ROOT_ID,
    BranchRecord,
    IdeaRecord,
    Node,
    NodeKind,
    branch_node_id,
    normalize_branch_name,
)

logger = logging.getLogger(__name__)


def collect_branch_names(
    ideas: Sequence[IdeaRecord],
    branches: Sequence[BranchRecord]
) -> List[str]:
    """Explicit branches first, then new idea labels in order of appearance."""
    names: List[str] = []
    seen: Set[str] = set()
    for branch in branches:
        name = normalize_branch_name(branch.name)
        if name and name not in seen:
            seen.add(name)
            names.append(name)
    for idea in ideas:
        name = normalize_branch_name(idea.branch_label)
        if name and name not in seen:
            seen.add(name)
            names.append(name)
    return names


def project_nodes(
    ideas: Sequence[IdeaRecord],
    branches: Sequence[BranchRecord],
    root_label: str
) -> List[Node]:
    """
    Project domain records into mindmap nodes.

    Args:
        ideas: Ideas of the current mindmap, in display order.
        branches: Branch records scoped to the current mindmap.
        root_label: Display label of the Root node.

    Returns:
        Root first, then branch nodes, then leaf nodes.
    """
    idea_ids = {idea.id for idea in ideas}
    names = collect_branch_names(ideas, branches)
    branch_ids = {branch_node_id(name) for name in names}
    known_ids = idea_ids | branch_ids | {ROOT_ID}

    links: Dict[str, Optional[str]] = {}
    for branch in branches:
        name = normalize_branch_name(branch.name)
        if name and name not in links:
            links[name] = branch.parent_link

    nodes: List[Node] = [Node(id=ROOT_ID, kind=NodeKind.ROOT, label=root_label)]

    for name in names:
        node_id = branch_node_id(name)
        link = links.get(name)
        parent_id = link if link in known_ids and link != node_id else ROOT_ID
        nodes.append(Node(
            id=node_id,
            kind=NodeKind.BRANCH,
            label=name,
            parent_id=parent_id,
            branch_name=name,
        ))

    for idea in ideas:
        name = normalize_branch_name(idea.branch_label)
        if idea.parent_idea_id in idea_ids and idea.parent_idea_id != idea.id:
            parent_id = idea.parent_idea_id
        elif name:
            parent_id = branch_node_id(name)
        else:
            parent_id = ROOT_ID
        nodes.append(Node(
            id=idea.id,
            kind=NodeKind.LEAF,
            label=idea.title,
            parent_id=parent_id,
            idea_id=idea.id,
            branch_name=name or None,
        ))

    return _break_cycles(nodes)


def _break_cycles(nodes: List[Node]) -> List[Node]:
    """Reattach to Root the first node of every parent cycle."""
    parents = {node.id: node.parent_id for node in nodes}
    result: List[Node] = []
    for node in nodes:
        if node.parent_id is not None and _is_own_ancestor(node.id, parents):
            logger.warning(f"Parent cycle through {node.id!r}; reattaching to root")
            parents[node.id] = ROOT_ID
            node = Node(
                id=node.id,
                kind=node.kind,
                label=node.label,
                parent_id=ROOT_ID,
                idea_id=node.idea_id,
                branch_name=node.branch_name,
            )
        result.append(node)
    return result


def _is_own_ancestor(node_id: str, parents: Dict[str, Optional[str]]) -> bool:
    seen: Set[str] = set()
    current = parents.get(node_id)
    while current is not None and current not in seen:
        if current == node_id:
            return True
        seen.add(current)
        current = parents.get(current)
    return False


class NodeGraph:
    """Read-only tree view over projected nodes."""

    def __init__(self, nodes: Iterable[Node]):
        self.nodes: List[Node] = list(nodes)
        self._by_id: Dict[str, Node] = {node.id: node for node in self.nodes}
        self._children: Dict[str, List[str]] = defaultdict(list)
        for node in self.nodes:
            if node.parent_id is not None:
                self._children[node.parent_id].append(node.id)

    @classmethod
    def project(
        cls,
        ideas: Sequence[IdeaRecord],
        branches: Sequence[BranchRecord],
        root_label: str
    ) -> 'NodeGraph':
        return cls(project_nodes(ideas, branches, root_label))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, node_id: str) -> Optional[Node]:
        return self._by_id.get(node_id)

    def ids(self) -> Set[str]:
        return set(self._by_id)

    def children(self, node_id: str) -> List[Node]:
        return [self._by_id[c] for c in self._children.get(node_id, [])]

    def branches(self) -> List[Node]:
        return [n for n in self.nodes if n.kind is NodeKind.BRANCH]

    def edges(self) -> List[Tuple[str, str]]:
        """(parent_id, child_id) for every non-Root node."""
        return [(n.parent_id, n.id) for n in self.nodes if n.parent_id is not None]

    def ancestors(self, node_id: str) -> List[str]:
        """Parent first, Root last."""
        result: List[str] = []
        seen: Set[str] = {node_id}
        node = self._by_id.get(node_id)
        while node is not None and node.parent_id is not None:
            if node.parent_id in seen:
                break
            result.append(node.parent_id)
            seen.add(node.parent_id)
            node = self._by_id.get(node.parent_id)
        return result

    def descendants(self, node_id: str) -> Set[str]:
        """Transitive children of ``node_id`` (excluding itself)."""
        result: Set[str] = set()
        stack = list(self._children.get(node_id, []))
        while stack:
            current = stack.pop()
            if current in result:
                continue
            result.add(current)
            stack.extend(self._children.get(current, []))
        return result

    def is_descendant(self, node_id: str, potential_ancestor_id: str) -> bool:
        """Check if node_id is a descendant of potential_ancestor_id."""
        return potential_ancestor_id in self.ancestors(node_id)

    def would_create_cycle(self, node_id: str, new_parent_id: str) -> bool:
        """True if making ``new_parent_id`` the parent of ``node_id`` loops."""
        if node_id == new_parent_id:
            return True
        return node_id in self.ancestors(new_parent_id)

    def branch_descendant_names(self, name: str) -> List[str]:
        """Names of every branch below the branch ``name``, in graph order."""
        below = self.descendants(branch_node_id(name))
        return [n.branch_name for n in self.nodes
                if n.kind is NodeKind.BRANCH and n.id in below]

    def hidden_ids(self, collapsed: Iterable[str]) -> Set[str]:
        """Nodes with a collapsed branch among their proper ancestors."""
        hidden: Set[str] = set()
        for name in collapsed:
            hidden |= self.descendants(branch_node_id(name))
        return hidden

    def visible_nodes(self, collapsed: Iterable[str]) -> List[Node]:
        hidden = self.hidden_ids(collapsed)
        return [n for n in self.nodes if n.id not in hidden]


class CollapseState:
    """Set of collapsed branch names with closure-aware toggling."""

    def __init__(self, collapsed: Optional[Iterable[str]] = None):
        self._collapsed: Set[str] = set(collapsed or ())

    def __contains__(self, name: object) -> bool:
        return name in self._collapsed

    def __iter__(self):
        return iter(sorted(self._collapsed))

    def __len__(self) -> int:
        return len(self._collapsed)

    def toggle(self, graph: NodeGraph, name: str) -> bool:
        """
        Collapse or expand ``name`` together with all its descendant branches.

        Returns:
            True if the branch is now collapsed.
        """
        closure = [name] + graph.branch_descendant_names(name)
        if name in self._collapsed:
            self._collapsed.difference_update(closure)
            return False
        self._collapsed.update(closure)
        return True

    def rename(self, old: str, new: str) -> None:
        if old in self._collapsed:
            self._collapsed.discard(old)
            self._collapsed.add(new)

    def prune(self, names: Iterable[str]) -> None:
        """Forget branches that no longer exist."""
        self._collapsed &= set(names)
