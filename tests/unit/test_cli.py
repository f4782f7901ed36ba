"""Tests for the ideaweaver-layout command."""

import io
import json

import pytest

from ideaweaver.mindmap.cli import main
from ideaweaver.mindmap.store import SqliteMindmapStore

MAP = """\
{"type": "root", "label": "Launch"}
{"type": "branch", "name": "A", "parent_link": null, "color_slot": 0}
{"type": "idea", "id": "i1", "title": "Blog post", "branch_label": "A"}
"""


@pytest.fixture
def map_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv('IDEAWEAVER_CONFIG', raising=False)
    path = tmp_path / 'map.jsonl'
    path.write_text(MAP)
    return path


def read_lines(text):
    return [json.loads(line) for line in text.splitlines() if line.strip()]


def test_seeds_positions(map_file, capsys):
    assert main([str(map_file)]) == 0
    records = read_lines(capsys.readouterr().out)
    positions = {r['id']: (r['x'], r['y']) for r in records}
    assert positions['root'] == (0.0, 0.0)
    assert positions['branch:A'] == pytest.approx((0.0, -320.0))
    assert positions['i1'] == pytest.approx((0.0, -460.0))


def test_layout_option(map_file, capsys):
    assert main([str(map_file), '--layout', 'tree-vertical']) == 0
    positions = {r['id']: (r['x'], r['y']) for r in read_lines(capsys.readouterr().out)}
    assert positions['branch:A'] == (0.0, 140.0)
    assert positions['i1'] == (0.0, 280.0)


def test_snapshot_from_stdin(map_file, capsys, monkeypatch):
    monkeypatch.setattr('sys.stdin', io.StringIO(map_file.read_text()))
    assert main(['--snapshot']) == 0
    types = [r['type'] for r in read_lines(capsys.readouterr().out)]
    assert types == ['root', 'branch', 'idea', 'position', 'position', 'position']


def test_db_receives_positions(map_file, tmp_path, capsys):
    db = tmp_path / 'map.sqlite'
    assert main([str(map_file), '--db', str(db)]) == 0
    capsys.readouterr()
    with SqliteMindmapStore(db) as store:
        assert [b.name for b in store.load_branches()] == ['A']
        positions = store.load_positions()
    assert set(positions) == {'branch:A', 'i1'}
    assert positions['i1'] == pytest.approx((0.0, -460.0))


def test_unknown_layout_rejected(map_file):
    with pytest.raises(SystemExit):
        main([str(map_file), '--layout', 'spiral'])
