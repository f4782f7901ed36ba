# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# JSON Lines I/O for mindmap records.

"""
JSON Lines I/O for mindmap records.

One JSON object per line, tagged by ``type``:

    {"type": "root", "label": "Launch plan"}
    {"type": "branch", "name": "Marketing", "parent_link": null, "color_slot": 0}
    {"type": "idea", "id": "i1", "title": "Blog post", "branch_label": "Marketing"}
    {"type": "position", "id": "branch:Marketing", "x": 0.0, "y": -320.0}

Blank lines, malformed JSON and records missing required fields are skipped.

Usage:
    from ideaweaver.mindmap.io import read_all, write_positions

    doc = read_all(sys.stdin)
    write_positions(positions, sys.stdout)
"""

import json
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, TextIO, Union
import logging

from .model import BranchRecord, IdeaRecord, Positions

logger = logging.getLogger(__name__)


@dataclass
class RootLabel:
    """The Root node's display label."""
    label: str


@dataclass
class PositionRecord:
    """A node position."""
    id: str
    x: float
    y: float


MindmapObject = Union[RootLabel, IdeaRecord, BranchRecord, PositionRecord]


@dataclass
class MindmapDocument:
    """Everything read from one stream."""
    root_label: str = "Root"
    ideas: List[IdeaRecord] = field(default_factory=list)
    branches: List[BranchRecord] = field(default_factory=list)
    positions: Positions = field(default_factory=dict)


# ============================================================================
# CONVERSION
# ============================================================================

def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def object_from_dict(d: Dict[str, Any]) -> Optional[MindmapObject]:
    """Typed record for a decoded line, None for unknown types."""
    obj_type = d.get("type")
    if obj_type == "root":
        return RootLabel(label=str(d.get("label", "")))
    if obj_type == "idea":
        return IdeaRecord(
            id=str(d["id"]),
            title=d.get("title", ""),
            parent_idea_id=d.get("parent_idea_id"),
            branch_label=d.get("branch_label"),
            x=_optional_float(d.get("x")),
            y=_optional_float(d.get("y")),
        )
    if obj_type == "branch":
        slot = d.get("color_slot")
        return BranchRecord(
            name=str(d["name"]),
            parent_link=d.get("parent_link"),
            color_slot=None if slot is None else int(slot),
        )
    if obj_type == "position":
        return PositionRecord(id=str(d["id"]), x=float(d["x"]), y=float(d["y"]))
    return None


def object_to_dict(obj: MindmapObject) -> Dict[str, Any]:
    """JSON-serializable dict for a record."""
    if isinstance(obj, RootLabel):
        return {"type": "root", "label": obj.label}
    if isinstance(obj, IdeaRecord):
        return {
            "type": "idea",
            "id": obj.id,
            "title": obj.title,
            "parent_idea_id": obj.parent_idea_id,
            "branch_label": obj.branch_label,
            "x": obj.x,
            "y": obj.y,
        }
    if isinstance(obj, BranchRecord):
        return {
            "type": "branch",
            "name": obj.name,
            "parent_link": obj.parent_link,
            "color_slot": obj.color_slot,
        }
    if isinstance(obj, PositionRecord):
        return {"type": "position", "id": obj.id, "x": obj.x, "y": obj.y}
    raise TypeError(f"Not a mindmap record: {obj!r}")


# ============================================================================
# READER FUNCTIONS
# ============================================================================

def read_jsonl(stream: TextIO = sys.stdin) -> Iterator[Dict[str, Any]]:
    """Read raw JSON objects from JSON Lines stream."""
    for lineno, line in enumerate(stream, 1):
        line = line.strip()
        if not line:
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError:
            logger.debug(f"Skipping malformed line {lineno}")
            continue
        if isinstance(obj, dict):
            yield obj


def read_objects(stream: TextIO = sys.stdin) -> Iterator[MindmapObject]:
    """Read typed mindmap records from JSON Lines stream."""
    for d in read_jsonl(stream):
        try:
            obj = object_from_dict(d)
        except (KeyError, TypeError, ValueError) as e:
            logger.debug(f"Skipping incomplete {d.get('type')!r} record: {e}")
            continue
        if obj is not None:
            yield obj


def read_all(stream: TextIO = sys.stdin) -> MindmapDocument:
    """Read every record, grouped into a document."""
    doc = MindmapDocument()
    for obj in read_objects(stream):
        if isinstance(obj, RootLabel):
            doc.root_label = obj.label
        elif isinstance(obj, IdeaRecord):
            doc.ideas.append(obj)
        elif isinstance(obj, BranchRecord):
            doc.branches.append(obj)
        elif isinstance(obj, PositionRecord):
            doc.positions[obj.id] = (obj.x, obj.y)
    return doc


def read_positions_dict(stream: TextIO = sys.stdin) -> Positions:
    """Read positions as dict {id: (x, y)}."""
    return {obj.id: (obj.x, obj.y) for obj in read_objects(stream)
            if isinstance(obj, PositionRecord)}


# ============================================================================
# WRITER FUNCTIONS
# ============================================================================

def write_jsonl(obj: Dict[str, Any], stream: TextIO = sys.stdout) -> None:
    """Write a JSON object as a single line."""
    print(json.dumps(obj, ensure_ascii=False), file=stream)


def write_object(obj: MindmapObject, stream: TextIO = sys.stdout) -> None:
    write_jsonl(object_to_dict(obj), stream)


def write_positions(positions: Positions, stream: TextIO = sys.stdout) -> None:
    """Write positions dict as JSON Lines."""
    for node_id, (x, y) in positions.items():
        write_object(PositionRecord(node_id, float(x), float(y)), stream)


def write_document(doc: MindmapDocument, stream: TextIO = sys.stdout) -> None:
    """Write a full snapshot: root, branches, ideas, then positions."""
    write_object(RootLabel(doc.root_label), stream)
    for branch in doc.branches:
        write_object(branch, stream)
    for idea in doc.ideas:
        write_object(idea, stream)
    write_positions(doc.positions, stream)
