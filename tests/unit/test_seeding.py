"""Tests for incremental layout seeding."""

import math

import pytest

from ideaweaver.config import SeedingConfig
from ideaweaver.mindmap.graph import NodeGraph
from ideaweaver.mindmap.layout.seeding import (
    LayoutSeeder,
    child_circle_position,
    ring_position,
    root_circle_position,
    seed_positions,
)
from ideaweaver.mindmap.model import ROOT_ID, BranchRecord, IdeaRecord


def approx_point(point):
    return pytest.approx(point, abs=1e-6)


class TestSeedingRules:
    """Tests for the placement formulas."""

    def test_two_root_branches_top_and_bottom(self):
        """Two branches of Root land at (0,-320) and (0,320)."""
        graph = NodeGraph.project([], [BranchRecord('A'), BranchRecord('B')], 'Root')
        positions = LayoutSeeder().seed(graph, {})
        assert positions[ROOT_ID] == (0.0, 0.0)
        assert positions['branch:A'] == approx_point((0.0, -320.0))
        assert positions['branch:B'] == approx_point((0.0, 320.0))

    def test_first_leaf_of_first_branch(self):
        """The first leaf of a branch at (0,-320) seeds at (0,-460)."""
        graph = NodeGraph.project(
            [IdeaRecord('i1', branch_label='A')], [BranchRecord('A'), BranchRecord('B')], 'Root')
        positions = LayoutSeeder().seed(graph, {})
        assert positions['i1'] == approx_point((0.0, -460.0))

    def test_leaf_ring_wraps_after_capacity(self):
        """The sixth leaf starts ring 1: radius 220, angle offset 0.35."""
        config = SeedingConfig()
        point = ring_position((0.0, 0.0), 5, config)
        angle = -math.pi / 2 + 0.35
        assert point == approx_point((220 * math.cos(angle), 220 * math.sin(angle)))

    def test_ring_slots_evenly_spaced(self):
        config = SeedingConfig()
        points = [ring_position((0.0, 0.0), i, config) for i in range(5)]
        for point in points:
            assert math.hypot(*point) == pytest.approx(140.0)
        assert points[0] == approx_point((0.0, -140.0))

    def test_leaf_directly_under_root(self):
        graph = NodeGraph.project([IdeaRecord('i1')], [], 'Root')
        positions = LayoutSeeder().seed(graph, {})
        assert positions['i1'] == approx_point((0.0, -140.0))

    def test_nested_branch_on_small_circle(self):
        """A branch under a branch sits 120 from its parent."""
        graph = NodeGraph.project(
            [], [BranchRecord('A'), BranchRecord('B', parent_link='branch:A')], 'Root')
        positions = LayoutSeeder().seed(graph, {})
        assert positions['branch:A'] == approx_point((0.0, -320.0))
        assert positions['branch:B'] == approx_point((0.0, -440.0))

    def test_child_circle_has_minimum_slots(self):
        """Two children still use quarter turns."""
        second = child_circle_position((0.0, 0.0), 1, 2, 120.0)
        assert second == approx_point((120.0, 0.0))

    def test_idea_chain_placed_recursively(self):
        """Idea children circle their parent idea, depth first."""
        graph = NodeGraph.project(
            [
                IdeaRecord('i1', branch_label='A'),
                IdeaRecord('i2', parent_idea_id='i1'),
                IdeaRecord('i3', parent_idea_id='i2'),
            ],
            [BranchRecord('A')],
            'Root',
        )
        positions = LayoutSeeder().seed(graph, {})
        assert positions['i2'] == approx_point((0.0, -580.0))
        assert positions['i3'] == approx_point((0.0, -700.0))

    def test_root_circle_single_branch(self):
        assert root_circle_position(0, 1, 320.0) == approx_point((0.0, -320.0))


class TestSeedingIncremental:
    """Tests for idempotence and respecting existing positions."""

    def graph(self):
        return NodeGraph.project(
            [IdeaRecord('i1', branch_label='A'), IdeaRecord('i2', branch_label='B')],
            [BranchRecord('A'), BranchRecord('B')],
            'Root',
        )

    def test_idempotent(self):
        seeder = LayoutSeeder()
        first = seeder.seed(self.graph(), {})
        second = seeder.seed(self.graph(), first)
        assert first == second

    def test_existing_positions_kept(self):
        """Placed nodes never move; their children seed around them."""
        existing = {'branch:A': (500.0, 500.0)}
        positions = LayoutSeeder().seed(self.graph(), existing)
        assert positions['branch:A'] == (500.0, 500.0)
        assert positions['i1'] == approx_point((500.0, 360.0))
        assert existing == {'branch:A': (500.0, 500.0)}

    def test_every_node_gets_a_position(self):
        graph = self.graph()
        positions = seed_positions(graph)
        assert set(positions) == graph.ids()

    def test_root_not_moved_when_present(self):
        positions = LayoutSeeder().seed(self.graph(), {ROOT_ID: (10.0, 20.0)})
        assert positions[ROOT_ID] == (10.0, 20.0)
        assert positions['branch:A'] == approx_point((10.0, -300.0))

    def test_custom_radius(self):
        config = SeedingConfig(branch_radius=100.0)
        graph = NodeGraph.project([], [BranchRecord('A')], 'Root')
        positions = LayoutSeeder(config).seed(graph, {})
        assert positions['branch:A'] == approx_point((0.0, -100.0))
