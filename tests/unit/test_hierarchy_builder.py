"""
Unit tests for timing_analyzer.processors.hierarchy_builder module.
"""
from unittest.mock import Mock

import pytest
from timing_analyzer.core.types import TimingPath
from timing_analyzer.processors import hierarchy_builder
from timing_analyzer.processors.hierarchy_builder import HierarchyBuilder, TimingForest
from timing_analyzer.processors.timing_calculator import TimingCalculator


def names(forest, indices):
    return [forest.nodes[i].timing_path.name for i in indices]


class TestBuildForest:
    """Tests for level-by-level tree reconstruction."""

    def test_empty_mapping(self):
        forest = HierarchyBuilder().build_forest({})
        assert len(forest) == 0
        assert forest.roots == []
        assert forest.dropped == []

    def test_every_complete_chain_appears_once(self, timer_factory):
        root = TimingPath("root", 1)
        a = TimingPath("a", 1, root)
        b = TimingPath("b", 2, root)
        a1 = TimingPath("a1", 1, a)
        timers = {a1: timer_factory(1), b: timer_factory(2), root: timer_factory(10), a: timer_factory(3)}

        forest = HierarchyBuilder().build_forest(timers)

        assert len(forest) == 4
        assert sorted(node.timing_path.name for node in forest.nodes) == ["a", "a1", "b", "root"]
        root_node = forest.nodes[forest.roots[0]]
        assert sorted(names(forest, root_node.children)) == ["a", "b"]
        a_node = forest.find(a)
        assert names(forest, a_node.children) == ["a1"]
        assert forest.nodes[a_node.parent].timing_path == root

    def test_roots_in_first_registration_order(self, timer_factory):
        second = TimingPath("second", 5)
        first = TimingPath("first", 2)
        forest = HierarchyBuilder().build_forest({second: timer_factory(1), first: timer_factory(1)})
        assert names(forest, forest.roots) == ["second", "first"]

    def test_children_keep_append_order(self, timer_factory):
        root = TimingPath("root", 1)
        late = TimingPath("late", 9, root)
        early = TimingPath("early", 1, root)
        forest = HierarchyBuilder().build_forest(
            {root: timer_factory(1), late: timer_factory(1), early: timer_factory(1)}
        )
        assert names(forest, forest.nodes[forest.roots[0]].children) == ["late", "early"]

    def test_node_references_merged_timer(self, timer_factory):
        root = TimingPath("root", 1)
        timers = {root: timer_factory(10, 20)}
        forest = HierarchyBuilder().build_forest(timers)
        node = forest.nodes[forest.roots[0]]
        assert node.timer is timers[root]
        assert node.adjusted_driver_time == 30

    def test_deep_tree_is_built_iteratively(self, timer_factory):
        path = TimingPath("level-0", 1)
        timers = {path: timer_factory(1)}
        for level in range(1, 3000):
            path = TimingPath(f"level-{level}", 1, path)
            timers[path] = timer_factory(1)

        forest = HierarchyBuilder().build_forest(timers)

        assert len(forest) == 3000
        assert len(forest.ancestors(forest.find(path).index)) == 2999


class TestOrphans:
    """Tests for timers whose parent was never recorded."""

    @pytest.fixture
    def orphan_timers(self, timer_factory):
        root = TimingPath("root", 1)
        child = TimingPath("child", 1, root)
        missing = TimingPath("missing", 7, root)
        orphan = TimingPath("orphan", 7, missing)
        orphan_child = TimingPath("orphan-child", 7, orphan)
        return {
            root: timer_factory(10),
            orphan: timer_factory(3),
            child: timer_factory(4),
            orphan_child: timer_factory(1),
        }

    def test_orphans_are_excluded(self, orphan_timers):
        forest = HierarchyBuilder(warn_on_dropped_nodes=False).build_forest(orphan_timers)
        assert sorted(node.timing_path.name for node in forest.nodes) == ["child", "root"]
        assert sorted(p.name for p in forest.dropped) == ["orphan", "orphan-child"]

    def test_parent_root_missing_entirely(self, timer_factory):
        absent_root = TimingPath("absent", 1)
        child = TimingPath("child", 1, absent_root)
        kept = TimingPath("kept", 2)
        forest = HierarchyBuilder(warn_on_dropped_nodes=False).build_forest(
            {child: timer_factory(1), kept: timer_factory(1)}
        )
        assert names(forest, forest.roots) == ["kept"]
        assert forest.dropped == [child]

    def test_warning_logged_for_dropped_nodes(self, orphan_timers, monkeypatch):
        mock_logger = Mock()
        monkeypatch.setattr(hierarchy_builder, "logger", mock_logger)

        HierarchyBuilder().build_forest(orphan_timers)

        mock_logger.warning.assert_called_once()
        message = mock_logger.warning.call_args[0][0]
        assert "Dropped 2 timer(s)" in message
        assert "orphan" in message

    def test_warning_can_be_disabled(self, orphan_timers, monkeypatch):
        mock_logger = Mock()
        monkeypatch.setattr(hierarchy_builder, "logger", mock_logger)

        HierarchyBuilder(warn_on_dropped_nodes=False).build_forest(orphan_timers)

        mock_logger.warning.assert_not_called()

    def test_no_warning_without_orphans(self, timer_factory, monkeypatch):
        mock_logger = Mock()
        monkeypatch.setattr(hierarchy_builder, "logger", mock_logger)

        HierarchyBuilder().build_forest({TimingPath("root", 1): timer_factory(1)})

        mock_logger.warning.assert_not_called()


class TestAdjustmentDuringBuild:
    """The builder applies the calculator as distributed nodes are created."""

    def test_ancestors_adjusted_when_calculator_given(self, distributed_scenario):
        timers, _, _ = distributed_scenario
        forest = HierarchyBuilder(TimingCalculator()).build_forest(timers)
        assert forest.nodes[forest.roots[0]].adjusted_driver_time == 60

    def test_no_adjustment_without_calculator(self, distributed_scenario):
        timers, _, _ = distributed_scenario
        forest = HierarchyBuilder().build_forest(timers)
        assert forest.nodes[forest.roots[0]].adjusted_driver_time == 100


class TestTimingForest:
    """Tests for the node arena."""

    def test_add_node_links_parent_and_child(self, timer_factory):
        forest = TimingForest()
        root = forest.add_node(TimingPath("root", 1), timer_factory(1))
        child = forest.add_node(TimingPath("child", 1, TimingPath("root", 1)), timer_factory(1), root)
        assert forest.roots == [root]
        assert forest.nodes[root].children == [child]
        assert forest.ancestors(child) == [root]
        assert forest.ancestors(root) == []
