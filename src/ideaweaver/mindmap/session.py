# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Owner of all mutable mindmap state.

"""
Mindmap session.

Holds the domain records, the projected graph, live and confirmed
positions, collapse state and the viewport, and runs every structural
mutation: seed what is new, settle collisions, call the backend.

Usage:
    session = MindmapSession(backend)
    session.load(ideas, branches, "Launch plan")
    session.create_branch("Marketing")
    session.relink("idea-7", "branch:Marketing")
    session.persist_changed_positions()
    ...
    session.poll()       # adopt finished writes as confirmed
"""

from dataclasses import replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from ..config import EngineConfig
from .errors import BranchError, MindmapError, RelationshipError
from .graph import CollapseState, NodeGraph
from .layout import LayoutSeeder, apply_layout as run_layout
from .model import (
    ROOT_ID,
    BranchRecord,
    IdeaRecord,
    Node,
    NodeKind,
    Point,
    Positions,
    branch_name_from_id,
    branch_node_id,
    normalize_branch_name,
)
from .optimize import CollisionResolver, layout_bounds
from .persistence import (
    MindmapBackend,
    PersistenceQueue,
    PositionWrite,
    StatusChannel,
    WriteOutcome,
)
from .sizes import SizeCache
from .viewport import ViewportController

logger = logging.getLogger(__name__)


class LinkMode(Enum):
    """What an armed link gesture changes."""
    BRANCH_PARENT = 'branch_parent'   # re-parent a branch
    IDEA_PARENT = 'idea_parent'       # re-parent an idea


class MindmapSession:
    """Single-threaded owner of a mindmap's layout state."""

    def __init__(
        self,
        backend: MindmapBackend,
        config: Optional[EngineConfig] = None,
        viewport_size: Tuple[float, float] = (1200, 700)
    ):
        self.config = config or EngineConfig()
        self.backend = backend
        self.sizes = SizeCache(self.config.collision)
        self.seeder = LayoutSeeder(self.config.seeding)
        self.resolver = CollisionResolver(self.config.collision, self.sizes)
        self.viewport = ViewportController(self.config.viewport, viewport_size)
        self.status = StatusChannel(self.config.interaction.status_ttl)
        self.persistence = PersistenceQueue(
            backend, self.config.interaction.persist_workers, self.status)

        self.ideas: List[IdeaRecord] = []
        self.branches: List[BranchRecord] = []
        self.root_label = ''
        self.graph = NodeGraph.project([], [], '')
        self.collapsed = CollapseState()
        self.positions: Positions = {}
        self.confirmed: Positions = {}
        self._confirmed_sequence: Dict[str, int] = {}
        self.selected_id: Optional[str] = None

    # ------------------------------------------------------------------
    # Loading and refresh
    # ------------------------------------------------------------------

    def load(
        self,
        ideas: Sequence[IdeaRecord],
        branches: Sequence[BranchRecord],
        root_label: str
    ) -> Positions:
        """
        Replace the domain records.

        Persisted idea coordinates become confirmed positions; live
        positions already held for surviving nodes win over them.
        """
        self.ideas = list(ideas)
        self.branches = list(branches)
        self.root_label = root_label
        for idea in self.ideas:
            if idea.has_position:
                point = (float(idea.x), float(idea.y))
                self.confirmed[idea.id] = point
                self.positions.setdefault(idea.id, point)
        self._refresh()
        logger.debug(f"Loaded {len(self.ideas)} ideas, {len(self.branches)} branches")
        return self.positions

    def _refresh(self, settle: bool = True) -> None:
        """Re-project, drop stale state, seed new nodes, optionally settle."""
        self.graph = NodeGraph.project(self.ideas, self.branches, self.root_label)
        ids = self.graph.ids()
        self.positions = {nid: p for nid, p in self.positions.items() if nid in ids}
        self.confirmed = {nid: p for nid, p in self.confirmed.items() if nid in ids}
        self.collapsed.prune(n.branch_name for n in self.graph.branches())
        if self.selected_id not in ids:
            self.selected_id = None
        self.positions = self.seeder.seed(self.graph, self.positions)
        if settle:
            self.settle()

    def settle(self) -> Positions:
        self.positions = self.resolver.settle(self.positions, self.visible_nodes())
        return self.positions

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def node(self, node_id: str) -> Node:
        node = self.graph.get(node_id)
        if node is None:
            raise RelationshipError(f"Unknown node: {node_id!r}")
        return node

    def branch_names(self) -> List[str]:
        return [n.branch_name for n in self.graph.branches()]

    def visible_nodes(self) -> List[Node]:
        return self.graph.visible_nodes(self.collapsed)

    def is_visible(self, node_id: str) -> bool:
        if node_id not in self.graph:
            return False
        return node_id not in self.graph.hidden_ids(self.collapsed)

    def visible_edges(self) -> List[Tuple[str, str]]:
        hidden = self.graph.hidden_ids(self.collapsed)
        return [(p, c) for p, c in self.graph.edges() if c not in hidden]

    def search(self, query: str) -> List[Node]:
        """Nodes whose label contains ``query``, case-insensitively."""
        needle = query.strip().lower()
        if not needle:
            return []
        return [n for n in self.graph.nodes if needle in n.label.lower()]

    def hit_test(self, screen_point: Point) -> Optional[str]:
        """Topmost visible node under a screen point."""
        wx, wy = self.viewport.world_from_screen(screen_point)
        for node in reversed(self.visible_nodes()):
            pos = self.positions.get(node.id)
            if pos is None:
                continue
            hw, hh = self.sizes.half_extents(node, padding=0.0)
            if abs(wx - pos[0]) <= hw and abs(wy - pos[1]) <= hh:
                return node.id
        return None

    def _effective_branch(self, node_id: str) -> Optional[str]:
        """Branch a node belongs to: its own label or nearest branch above."""
        for nid in [node_id] + self.graph.ancestors(node_id):
            node = self.graph.get(nid)
            if node is None:
                continue
            if node.kind is NodeKind.BRANCH or (node.kind is NodeKind.LEAF and node.branch_name):
                return node.branch_name
        return None

    def _idea_index(self, idea_id: str) -> int:
        for i, idea in enumerate(self.ideas):
            if idea.id == idea_id:
                return i
        raise RelationshipError(f"Unknown idea: {idea_id!r}")

    def _branch_index(self, name: str) -> Optional[int]:
        for i, branch in enumerate(self.branches):
            if normalize_branch_name(branch.name) == name:
                return i
        return None

    def _set_branch_link(self, name: str, parent_id: Optional[str]) -> None:
        link = None if parent_id == ROOT_ID else parent_id
        index = self._branch_index(name)
        if index is None:
            self.branches.append(BranchRecord(name, link, self.next_color_slot()))
        else:
            self.branches[index] = replace(self.branches[index], parent_link=link)

    def _backend_call(self, method: str, *args) -> bool:
        """
        Forward a structural change to the backend.

        Failures are logged and posted as an error status; the in-memory
        change stands either way.

        Returns:
            True if the backend accepted the call.
        """
        try:
            getattr(self.backend, method)(*args)
        except Exception as e:
            logger.warning(f"Backend {method}{args!r} failed: {e}")
            self.status.post(f"Could not save change ({method}): {e}", 'error')
            return False
        return True

    # ------------------------------------------------------------------
    # Branch mutations
    # ------------------------------------------------------------------

    def next_color_slot(self) -> int:
        used = [b.color_slot for b in self.branches
                if b.color_slot is not None and b.color_slot >= 0]
        top = max(used) if used else -1
        return (top + 1) % self.config.interaction.palette_size

    def create_branch(self, name: str, parent_id: str = ROOT_ID) -> BranchRecord:
        """
        Create a branch, or move an existing one under ``parent_id``.

        Raises:
            BranchError: Blank name.
            RelationshipError: Unknown parent or a parent below the branch.
        """
        name = normalize_branch_name(name)
        if not name:
            raise BranchError("Branch name must not be blank")
        if parent_id not in self.graph:
            raise RelationshipError(f"Unknown parent: {parent_id!r}")

        node_id = branch_node_id(name)
        if node_id in self.graph:
            if self.graph.would_create_cycle(node_id, parent_id):
                raise RelationshipError(
                    f"Cannot place branch {name!r} under its own descendant")
            self._backend_call('update_parent', node_id, parent_id)
            self._set_branch_link(name, parent_id)
            logger.info(f"Moved branch {name!r} under {parent_id!r}")
        else:
            link = None if parent_id == ROOT_ID else parent_id
            slot = self.next_color_slot()
            self._backend_call('create_branch', name, link, slot)
            self.branches.append(BranchRecord(name, link, slot))
            logger.info(f"Created branch {name!r} (colour slot {slot})")

        self._refresh()
        return self.branches[self._branch_index(name)]

    def rename_branch(self, old: str, new: str) -> None:
        """
        Rename a branch, carrying its position, size, collapse flag,
        idea labels and child branch links along.
        """
        old = normalize_branch_name(old)
        new = normalize_branch_name(new)
        if not new:
            raise BranchError("Branch name must not be blank")
        names = self.branch_names()
        if old not in names:
            raise BranchError(f"Unknown branch: {old!r}")
        if new == old:
            return
        if new in names:
            raise BranchError(f"Branch {new!r} already exists")

        self._backend_call('rename_branch', old, new)

        old_id, new_id = branch_node_id(old), branch_node_id(new)
        for store in (self.positions, self.confirmed):
            if old_id in store:
                store[new_id] = store.pop(old_id)
        self.sizes.rename(old_id, new_id)
        self.collapsed.rename(old, new)
        if self.selected_id == old_id:
            self.selected_id = new_id

        self.ideas = [replace(i, branch_label=new)
                      if normalize_branch_name(i.branch_label) == old else i
                      for i in self.ideas]
        renamed: List[BranchRecord] = []
        for branch in self.branches:
            if normalize_branch_name(branch.name) == old:
                branch = replace(branch, name=new)
            if branch.parent_link == old_id:
                branch = replace(branch, parent_link=new_id)
            renamed.append(branch)
        self.branches = renamed

        logger.info(f"Renamed branch {old!r} to {new!r}")
        self._refresh(settle=False)

    def delete_branch(self, name: str) -> None:
        """Delete a branch; its children move to the branch's own parent."""
        name = normalize_branch_name(name)
        node_id = branch_node_id(name)
        node = self.graph.get(node_id)
        if node is None:
            raise BranchError(f"Unknown branch: {name!r}")
        new_parent = node.parent_id or ROOT_ID
        target = self.graph.get(new_parent)
        new_label = self._effective_branch(new_parent)
        if new_label == name:
            new_label = None

        children = self.graph.children(node_id)
        for child in children:
            self._backend_call('update_parent', child.id, new_parent)
        self._backend_call('delete_branch', name)

        child_ids = {c.id for c in children}
        for child in children:
            if child.kind is NodeKind.BRANCH:
                self._set_branch_link(child.branch_name, new_parent)
        ideas: List[IdeaRecord] = []
        for idea in self.ideas:
            if normalize_branch_name(idea.branch_label) == name:
                idea = replace(idea, branch_label=new_label)
                if idea.id in child_ids and target.kind is NodeKind.LEAF:
                    idea = replace(idea, parent_idea_id=new_parent)
            ideas.append(idea)
        self.ideas = ideas
        self.branches = [b for b in self.branches if normalize_branch_name(b.name) != name]

        self.sizes.forget(node_id)
        logger.info(f"Deleted branch {name!r}; {len(children)} children moved to {new_parent!r}")
        self._refresh()

    def toggle_branch(self, name: str) -> bool:
        """Collapse/expand a branch and its descendant branches; True if collapsed."""
        name = normalize_branch_name(name)
        if name not in self.branch_names():
            raise BranchError(f"Unknown branch: {name!r}")
        collapsed = self.collapsed.toggle(self.graph, name)
        self.settle()
        return collapsed

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------

    def check_relink(self, node_id: str, new_parent_id: str) -> None:
        """Raise RelationshipError if the relink would break the tree."""
        if node_id == new_parent_id:
            raise RelationshipError("Cannot link an item to itself")
        self.node(node_id)
        self.node(new_parent_id)
        if node_id == ROOT_ID:
            raise RelationshipError("The root cannot be re-parented")
        if self.graph.would_create_cycle(node_id, new_parent_id):
            raise RelationshipError(
                f"Linking {node_id!r} under {new_parent_id!r} would create a cycle")

    def relink(self, node_id: str, new_parent_id: str) -> None:
        """
        Move ``node_id`` under ``new_parent_id``.

        Branches keep their name and change their parent link. Ideas under
        a branch take its label; ideas under an idea take that idea's
        branch; ideas under Root lose both parent and label.
        """
        try:
            self.check_relink(node_id, new_parent_id)
        except RelationshipError as e:
            logger.warning(f"Rejected relink {node_id!r} -> {new_parent_id!r}: {e}")
            raise

        node = self.graph.get(node_id)
        target = self.graph.get(new_parent_id)
        self._backend_call('update_parent', node_id, new_parent_id)

        if node.kind is NodeKind.BRANCH:
            self._set_branch_link(node.branch_name, new_parent_id)
        else:
            index = self._idea_index(node.idea_id)
            idea = self.ideas[index]
            if target.kind is NodeKind.BRANCH:
                idea = replace(idea, parent_idea_id=None, branch_label=target.branch_name)
            elif target.kind is NodeKind.LEAF:
                idea = replace(idea, parent_idea_id=target.idea_id,
                               branch_label=self._effective_branch(target.id))
            else:
                idea = replace(idea, parent_idea_id=None, branch_label=None)
            self.ideas[index] = idea

        logger.info(f"Relinked {node_id!r} under {new_parent_id!r}")
        self._refresh()

    def apply_link(self, mode: LinkMode, source_id: str, target_id: str) -> None:
        """Apply an armed link gesture once the user picks ``target_id``."""
        source = self.node(source_id)
        if mode is LinkMode.BRANCH_PARENT and source.kind is not NodeKind.BRANCH:
            raise RelationshipError(f"{source_id!r} is not a branch")
        if mode is LinkMode.IDEA_PARENT and source.kind is not NodeKind.LEAF:
            raise RelationshipError(f"{source_id!r} is not an idea")
        self.relink(source_id, target_id)
        target = self.graph.get(target_id)
        if mode is LinkMode.BRANCH_PARENT:
            self.status.post(f"Branch linked to {target.label}.")
        else:
            self.status.post(f'Linked under "{target.label}".')

    def reassign_on_drop(self, node_id: str) -> Optional[str]:
        """
        Move a dropped idea into the nearest branch within capture radius.

        Returns:
            The branch name it joined, or None if nothing changed.
        """
        node = self.graph.get(node_id)
        pos = self.positions.get(node_id)
        if node is None or node.kind is not NodeKind.LEAF or pos is None:
            return None

        closest: Optional[Tuple[float, Node]] = None
        for branch in self.graph.branches():
            bpos = self.positions.get(branch.id)
            if bpos is None:
                continue
            distance = ((bpos[0] - pos[0]) ** 2 + (bpos[1] - pos[1]) ** 2) ** 0.5
            if closest is None or distance < closest[0]:
                closest = (distance, branch)

        if closest is None or closest[0] >= self.config.interaction.capture_radius:
            return None
        branch = closest[1]
        if branch.branch_name == node.branch_name:
            return None
        if self.graph.would_create_cycle(node_id, branch.id):
            logger.debug(f"Drop of {node_id!r} near {branch.id!r} ignored: below it")
            return None

        self._backend_call('update_parent', node_id, branch.id)
        index = self._idea_index(node.idea_id)
        self.ideas[index] = replace(self.ideas[index], parent_idea_id=None,
                                    branch_label=branch.branch_name)
        logger.info(f"Dropped {node_id!r} into branch {branch.branch_name!r}")
        self._refresh(settle=False)
        return branch.branch_name

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    def observe_size(self, node_id: str, width: float, height: float) -> bool:
        return self.sizes.observe(node_id, width, height)

    def drag_node(self, node_id: str, dx: float, dy: float) -> Positions:
        """Translate a node by a world delta and resolve it against its neighbours."""
        x, y = self.positions.get(node_id, (0.0, 0.0))
        moved = dict(self.positions)
        moved[node_id] = (x + dx, y + dy)
        self.positions = self.resolver.drag_local(moved, self.visible_nodes(), node_id)
        return self.positions

    def changed_positions(self) -> List[PositionWrite]:
        return [PositionWrite(nid, x, y) for nid, (x, y) in self.positions.items()
                if nid != ROOT_ID and self.confirmed.get(nid) != (x, y)]

    def persist_changed_positions(self) -> int:
        """Queue a write for every node that moved since its last confirmed save."""
        writes = self.changed_positions()
        self.persistence.submit(writes)
        return len(writes)

    def poll(self) -> List[WriteOutcome]:
        """Drain finished writes; successful ones become confirmed."""
        outcomes = self.persistence.drain()
        for outcome in outcomes:
            if not outcome.ok:
                continue
            if outcome.sequence < self._confirmed_sequence.get(outcome.node_id, 0):
                continue
            self._confirmed_sequence[outcome.node_id] = outcome.sequence
            if outcome.node_id in self.graph:
                self.confirmed[outcome.node_id] = (outcome.x, outcome.y)
        return outcomes

    def flush(self, timeout: Optional[float] = None) -> List[WriteOutcome]:
        """Wait for queued writes, then :meth:`poll`."""
        self.persistence.flush(timeout)
        return self.poll()

    def apply_layout(self, name: str) -> Positions:
        """Replace every position with a full layout, settle and save."""
        self.positions = run_layout(name, self.graph, self.positions)
        self.settle()
        logger.info(f"Applied {name!r} layout to {len(self.positions)} nodes")
        self.persist_changed_positions()
        return self.positions

    # ------------------------------------------------------------------
    # Camera
    # ------------------------------------------------------------------

    def focus_node(self, node_id: str) -> Point:
        """Select a node, expand whatever hides it and centre the view on it."""
        if node_id not in self.graph:
            raise MindmapError(f"Unknown node: {node_id!r}")
        expanded = False
        for ancestor in reversed(self.graph.ancestors(node_id)):
            name = branch_name_from_id(ancestor)
            if name is not None and name in self.collapsed:
                self.collapsed.toggle(self.graph, name)
                expanded = True
        if expanded:
            self.settle()
        self.selected_id = node_id
        return self.viewport.center_on(self.positions[node_id])

    def center_view(self) -> Point:
        return self.viewport.center_on(self.positions.get(ROOT_ID, (0.0, 0.0)))

    def fit_to_view(self) -> None:
        visible = self.visible_nodes()
        extents = {n.id: self.sizes.half_extents(n, padding=0.0) for n in visible}
        shown = {n.id: self.positions[n.id] for n in visible if n.id in self.positions}
        self.viewport.fit(layout_bounds(shown, extents))

    def close(self) -> None:
        self.persistence.close()
