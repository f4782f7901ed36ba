"""Tests for the SQLite mindmap store."""

import pytest

from ideaweaver.mindmap.model import BranchRecord, IdeaRecord
from ideaweaver.mindmap.session import MindmapSession
from ideaweaver.mindmap.store import SqliteMindmapStore


@pytest.fixture
def store(tmp_path):
    s = SqliteMindmapStore(tmp_path / "maps" / "mindmap.sqlite")
    yield s
    s.close()


class TestIdeasAndBranches:
    """Tests for record storage."""

    def test_ideas_keep_insertion_order(self, store):
        store.add_idea(IdeaRecord('i2', 'Second'))
        store.add_idea(IdeaRecord('i1', 'First', branch_label='A'))
        store.add_idea(IdeaRecord('i2', 'Second, edited'))
        ideas = store.load_ideas()
        assert [i.id for i in ideas] == ['i2', 'i1']
        assert ideas[0].title == 'Second, edited'
        assert ideas[1].branch_label == 'A'

    def test_branches_roundtrip(self, store):
        store.create_branch('A', None, 0)
        store.create_branch('B', 'branch:A', 1)
        assert store.load_branches() == [
            BranchRecord('A', None, 0),
            BranchRecord('B', 'branch:A', 1),
        ]

    def test_remove_idea(self, store):
        store.add_idea(IdeaRecord('i1'))
        store.update_position('i1', 1.0, 2.0)
        store.remove_idea('i1')
        assert store.load_ideas() == []
        assert store.load_positions() == {}

    def test_memory_database(self):
        with SqliteMindmapStore(':memory:') as s:
            s.add_idea(IdeaRecord('i1'))
            assert s.stats() == {'ideas': 1, 'branches': 0, 'node_positions': 0}


class TestBackendCalls:
    """Tests for the MindmapBackend operations."""

    def test_update_position_updates_idea(self, store):
        store.add_idea(IdeaRecord('i1'))
        store.update_position('i1', 10.0, 20.0)
        store.update_position('branch:A', -5.0, 3.0)
        assert store.load_positions() == {'i1': (10.0, 20.0), 'branch:A': (-5.0, 3.0)}
        idea = store.load_ideas()[0]
        assert (idea.x, idea.y) == (10.0, 20.0)

    def test_rename_branch(self, store):
        store.create_branch('A', None, 0)
        store.create_branch('C', 'branch:A', 1)
        store.add_idea(IdeaRecord('i1', branch_label='A'))
        store.update_position('branch:A', 0.0, -320.0)

        store.rename_branch('A', 'B')

        assert store.load_branches() == [
            BranchRecord('B', None, 0),
            BranchRecord('C', 'branch:B', 1),
        ]
        assert store.load_ideas()[0].branch_label == 'B'
        assert store.load_positions() == {'branch:B': (0.0, -320.0)}

    def test_delete_branch_moves_labels_to_parent(self, store):
        store.create_branch('A', None, 0)
        store.create_branch('B', 'branch:A', 1)
        store.add_idea(IdeaRecord('i1', branch_label='B'))
        store.update_position('branch:B', 1.0, 1.0)

        store.delete_branch('B')

        assert [b.name for b in store.load_branches()] == ['A']
        assert store.load_ideas()[0].branch_label == 'A'
        assert 'branch:B' not in store.load_positions()

    def test_delete_top_branch_clears_labels(self, store):
        store.create_branch('A', None, 0)
        store.add_idea(IdeaRecord('i1', branch_label='A'))
        store.delete_branch('A')
        assert store.load_ideas()[0].branch_label is None

    def test_delete_branch_under_idea_takes_idea_label(self, store):
        store.add_idea(IdeaRecord('i1', branch_label='A'))
        store.create_branch('C', 'i1', 0)
        store.add_idea(IdeaRecord('i4', branch_label='C'))
        store.delete_branch('C')
        assert store.load_ideas()[1].branch_label == 'A'

    def test_update_parent_branch(self, store):
        store.create_branch('A', None, 0)
        store.create_branch('B', None, 1)
        store.update_parent('branch:B', 'branch:A')
        store.update_parent('branch:Z', 'root')
        branches = {b.name: b.parent_link for b in store.load_branches()}
        assert branches == {'A': None, 'B': 'branch:A', 'Z': None}

    def test_update_parent_idea(self, store):
        store.add_idea(IdeaRecord('i1', branch_label='A'))
        store.add_idea(IdeaRecord('i2'))

        store.update_parent('i2', 'i1')
        i2 = store.load_ideas()[1]
        assert (i2.parent_idea_id, i2.branch_label) == ('i1', 'A')

        store.update_parent('i2', 'branch:B')
        i2 = store.load_ideas()[1]
        assert (i2.parent_idea_id, i2.branch_label) == (None, 'B')

        store.update_parent('i2', 'root')
        i2 = store.load_ideas()[1]
        assert (i2.parent_idea_id, i2.branch_label) == (None, None)

    def test_reopen_keeps_data(self, tmp_path):
        path = tmp_path / "mindmap.sqlite"
        with SqliteMindmapStore(path) as s:
            s.create_branch('A', None, 0)
        with SqliteMindmapStore(path) as s:
            assert [b.name for b in s.load_branches()] == ['A']


class TestSessionIntegration:
    """A session driving the store as its backend."""

    def test_positions_and_branches_reach_store(self, store):
        store.create_branch('A', None, 0)
        store.add_idea(IdeaRecord('i1', 'Blog post', branch_label='A'))
        session = MindmapSession(store)
        try:
            session.load(store.load_ideas(), store.load_branches(), 'Launch')
            session.persist_changed_positions()
            session.flush(timeout=5)
            session.create_branch('B')
        finally:
            session.close()

        assert store.load_branches() == [BranchRecord('A', None, 0), BranchRecord('B', None, 1)]
        positions = store.load_positions()
        assert positions['branch:A'] == pytest.approx((0.0, -320.0))
        assert positions['i1'] == session.positions['i1']
        idea = store.load_ideas()[0]
        assert (idea.x, idea.y) == session.positions['i1']

    def test_reload_restores_positions(self, store):
        store.add_idea(IdeaRecord('i1', 'Blog post', x=500.0, y=360.0))
        session = MindmapSession(store)
        try:
            session.load(store.load_ideas(), store.load_branches(), 'Launch')
            assert session.positions['i1'] == (500.0, 360.0)
            assert session.changed_positions() == []
        finally:
            session.close()
