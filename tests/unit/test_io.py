"""Tests for JSON Lines record I/O."""

import io
import json

import pytest

from ideaweaver.mindmap.io import (
    MindmapDocument,
    PositionRecord,
    RootLabel,
    object_to_dict,
    read_all,
    read_objects,
    read_positions_dict,
    write_document,
    write_positions,
)
from ideaweaver.mindmap.model import BranchRecord, IdeaRecord


SAMPLE = """\
{"type": "root", "label": "Launch plan"}
{"type": "branch", "name": "Marketing", "parent_link": null, "color_slot": 0}

{"type": "idea", "id": "i1", "title": "Blog post", "branch_label": "Marketing"}
not json at all
{"type": "idea", "title": "no id"}
{"type": "idea", "id": "i2", "parent_idea_id": "i1", "x": 10, "y": "20.5"}
{"type": "position", "id": "branch:Marketing", "x": 0, "y": -320}
{"type": "comment", "text": "ignored"}
[1, 2, 3]
"""


class TestReading:
    """Tests for the readers."""

    def test_read_all(self):
        doc = read_all(io.StringIO(SAMPLE))
        assert doc.root_label == 'Launch plan'
        assert doc.branches == [BranchRecord('Marketing', None, 0)]
        assert [i.id for i in doc.ideas] == ['i1', 'i2']
        assert doc.ideas[1] == IdeaRecord('i2', '', 'i1', None, 10.0, 20.5)
        assert doc.positions == {'branch:Marketing': (0.0, -320.0)}

    def test_bad_lines_skipped(self):
        objects = list(read_objects(io.StringIO(SAMPLE)))
        assert len(objects) == 5

    def test_default_root_label(self):
        doc = read_all(io.StringIO('{"type": "idea", "id": "i1"}\n'))
        assert doc.root_label == 'Root'

    def test_read_positions_dict(self):
        assert read_positions_dict(io.StringIO(SAMPLE)) == {'branch:Marketing': (0.0, -320.0)}


class TestWriting:
    """Tests for the writers."""

    def test_write_positions(self):
        out = io.StringIO()
        write_positions({'i1': (1, 2.5)}, out)
        assert json.loads(out.getvalue()) == {'type': 'position', 'id': 'i1', 'x': 1.0, 'y': 2.5}

    def test_snapshot_reads_back(self):
        doc = MindmapDocument(
            root_label='Launch',
            ideas=[IdeaRecord('i1', 'Blog post', branch_label='A', x=1.0, y=2.0)],
            branches=[BranchRecord('A', None, 3)],
            positions={'branch:A': (0.0, -320.0)},
        )
        out = io.StringIO()
        write_document(doc, out)
        lines = out.getvalue().splitlines()
        assert [json.loads(line)['type'] for line in lines] == ['root', 'branch', 'idea', 'position']
        assert read_all(io.StringIO(out.getvalue())) == doc

    def test_unknown_object_rejected(self):
        with pytest.raises(TypeError):
            object_to_dict({'type': 'idea'})

    def test_object_to_dict(self):
        assert object_to_dict(RootLabel('R')) == {'type': 'root', 'label': 'R'}
        assert object_to_dict(PositionRecord('i1', 1.0, 2.0))['x'] == 1.0
