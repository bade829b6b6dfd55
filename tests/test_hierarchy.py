"""Tests for single hierarchies: insertion, merging and loop detection."""

from __future__ import annotations

import pytest

from articulation.config.policies import HierarchyPolicy
from articulation.entities.core import Joint
from articulation.hierarchy.hierarchy import Hierarchy, MergeInconsistencyError


def J(name: str, body0: str, body1: str) -> Joint:
    return Joint(name=name, body0=body0, body1=body1)


def test_seeded_hierarchy_has_root_and_child() -> None:
    hierarchy = Hierarchy(J("j1", "A", "B"), 0)
    assert hierarchy.root.body_name == "A"
    assert hierarchy.node_count == 2
    assert "B" in hierarchy
    assert "C" not in hierarchy
    assert [edge.as_tuple() for edge in hierarchy.edges()] == [("j1", "A", "B")]


def test_insert_reports_whether_joint_was_placed() -> None:
    hierarchy = Hierarchy(J("j1", "A", "B"), 0)
    assert hierarchy.insert(J("j2", "B", "C"))
    assert not hierarchy.insert(J("j3", "X", "Y"))
    assert hierarchy.node_count == 3


def test_merge_absorbs_connected_fragment() -> None:
    source = Hierarchy(J("j1", "A", "B"), 0)
    other = Hierarchy(J("j3", "C", "D"), 1)
    other.insert(J("j2", "B", "C"))  # rotates other's root to B

    assert other.root.body_name == "B"
    assert source.merge(other)
    bodies = [node.body_name for node in source.root.iter_nodes()]
    assert bodies == ["A", "B", "C", "D"]
    assert source.issues == []


def test_merge_treats_existing_edges_as_duplicates() -> None:
    source = Hierarchy(J("j1", "A", "B"), 0)
    other = Hierarchy(J("j1", "A", "B"), 1)
    assert source.merge(other)
    assert source.node_count == 2


def test_merge_without_shared_bodies_fails() -> None:
    source = Hierarchy(J("j1", "A", "B"), 0)
    other = Hierarchy(J("j2", "C", "D"), 1)
    assert not source.merge(other)
    assert source.node_count == 2


def _partially_mergeable(monkeypatch: pytest.MonkeyPatch) -> Hierarchy:
    other = Hierarchy(J("j2", "B", "C"), 1)
    monkeypatch.setattr(other, "edges", lambda: [J("j2", "B", "C"), J("jx", "X", "Y")])
    return other


def test_merge_leftovers_are_recorded_when_lenient(monkeypatch: pytest.MonkeyPatch) -> None:
    source = Hierarchy(J("j1", "A", "B"), 0)
    assert source.merge(_partially_mergeable(monkeypatch))
    assert len(source.issues) == 1
    issue = source.issues[0]
    assert issue.source_index == 0
    assert issue.absorbed_index == 1
    assert [joint.name for joint in issue.unconsumed] == ["jx"]


def test_merge_leftovers_raise_when_strict(monkeypatch: pytest.MonkeyPatch) -> None:
    policy = HierarchyPolicy(strict_merge_validation=True)
    source = Hierarchy(J("j1", "A", "B"), 0, policy=policy)
    with pytest.raises(MergeInconsistencyError) as excinfo:
        source.merge(_partially_mergeable(monkeypatch))
    assert [joint.name for joint in excinfo.value.issue.unconsumed] == ["jx"]


def test_find_loop_joints_flags_parallel_edge() -> None:
    first, second = J("j1", "A", "B"), J("j2", "A", "B")
    hierarchy = Hierarchy(first, 0)
    hierarchy.insert(second)

    assert hierarchy.find_loop_joints([first, second]) == ["j2"]
    assert hierarchy.loop_joints() == ["j2"]
    assert hierarchy.root.child_edge(1).is_loop_joint


def test_find_loop_joints_follows_registration_order() -> None:
    first, second = J("j1", "A", "B"), J("j2", "A", "B")
    hierarchy = Hierarchy(first, 0)
    hierarchy.insert(second)

    assert hierarchy.find_loop_joints([second, first]) == ["j1"]


def test_log_chain_keeps_grafting() -> None:
    policy = HierarchyPolicy(log_chain=True, indent="  ")
    hierarchy = Hierarchy(J("j1", "A", "B"), 0, policy=policy)
    assert hierarchy.insert(J("j2", "B", "C"))
    assert hierarchy.render() == ["j1 : A->B : loop(false)", "  j2 : B->C : loop(false)"]
