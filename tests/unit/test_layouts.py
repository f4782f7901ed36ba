"""Tests for the full-map layouts."""

import math

import pytest

from ideaweaver.mindmap.graph import NodeGraph
from ideaweaver.mindmap.layout import apply_layout, layout_names
from ideaweaver.mindmap.layout.grid import grid
from ideaweaver.mindmap.layout.hierarchical import hierarchical
from ideaweaver.mindmap.model import BranchRecord, IdeaRecord


@pytest.fixture
def graph():
    """Root > A > i1 > i2, Root > B, Root > i3."""
    ideas = [
        IdeaRecord('i1', 'Blog post', branch_label='A'),
        IdeaRecord('i2', 'Draft', parent_idea_id='i1'),
        IdeaRecord('i3', 'Loose idea'),
    ]
    return NodeGraph.project(ideas, [BranchRecord('A'), BranchRecord('B')], 'Launch')


def assert_point(actual, expected):
    assert actual == pytest.approx(expected, abs=1e-9)


class TestRadial:
    """Tests for the radial layout."""

    def test_branches_on_ring(self, graph):
        positions = apply_layout('radial', graph)
        assert positions['root'] == (0.0, 0.0)
        assert_point(positions['branch:A'], (0.0, -300.0))
        assert_point(positions['branch:B'], (0.0, 300.0))
        assert_point(positions['i3'], (220.0, 0.0))

    def test_children_fan_out_from_parent(self, graph):
        positions = apply_layout('radial', graph)
        ax, ay = positions['branch:A']
        x, y = positions['i1']
        assert math.hypot(x - ax, y - ay) == pytest.approx(180.0)
        assert set(positions) == set(graph.ids())


class TestTree:
    """Tests for the hierarchical layouts."""

    def test_vertical(self, graph):
        positions = apply_layout('tree-vertical', graph)
        assert positions['root'] == (0.0, 0.0)
        assert positions['branch:A'] == (-180.0, 140.0)
        assert positions['branch:B'] == (0.0, 140.0)
        assert positions['i3'] == (180.0, 140.0)
        assert positions['i1'] == (-180.0, 280.0)
        assert positions['i2'] == (-180.0, 420.0)

    def test_horizontal_swaps_axes(self, graph):
        positions = apply_layout('tree-horizontal', graph)
        assert positions['branch:A'] == (220.0, -80.0)
        assert positions['i3'] == (220.0, 80.0)
        assert positions['i2'] == (660.0, -80.0)

    def test_unknown_direction(self, graph):
        with pytest.raises(ValueError):
            hierarchical(graph, {'direction': 'diagonal'})


class TestGrid:
    """Tests for the grid layout."""

    def test_kind_order(self, graph):
        positions = grid(graph)
        assert positions['root'] == (0.0, 0.0)
        assert positions['branch:A'] == (300.0, 0.0)
        assert positions['branch:B'] == (600.0, 0.0)
        assert positions['i1'] == (0.0, 180.0)

    def test_fixed_columns(self, graph):
        positions = grid(graph, {'columns': 2, 'cell_width': 100, 'cell_height': 50})
        assert positions['root'] == (0.0, 0.0)
        assert positions['i3'] == (100.0, 100.0)


class TestForce:
    """Tests for the force-directed layout."""

    def test_root_pinned_and_finite(self, graph):
        positions = apply_layout('force', graph, {'branch:A': (50.0, 50.0)})
        assert positions['root'] == (0.0, 0.0)
        assert set(positions) == set(graph.ids())
        for x, y in positions.values():
            assert math.isfinite(x) and math.isfinite(y)
            assert abs(x) <= 1900 and abs(y) <= 1900

    def test_deterministic(self, graph):
        assert apply_layout('force', graph) == apply_layout('force', graph)

    def test_seed_changes_start(self, graph):
        first = apply_layout('force', graph, options={'seed': 1, 'iterations': 0})
        second = apply_layout('force', graph, options={'seed': 2, 'iterations': 0})
        assert first['i1'] != second['i1']


def test_layout_names():
    assert layout_names() == ['force', 'grid', 'radial', 'tree-horizontal', 'tree-vertical']


def test_unknown_layout(graph):
    with pytest.raises(ValueError):
        apply_layout('spiral', graph)


@pytest.mark.parametrize('name', layout_names())
def test_root_at_origin(graph, name):
    assert apply_layout(name, graph)['root'] == (0.0, 0.0)
