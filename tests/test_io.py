"""Tests for dataset loading, builder population and forest export."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from articulation.hierarchy.builder import HierarchyBuilder
from articulation.hierarchy.io import (
    Dataset,
    DatasetError,
    export_forest,
    load_dataset,
    populate_builder,
    render_dot,
    render_forest,
    write_validation_report,
)
from articulation.hierarchy.validator import ForestValidator


@pytest.fixture()
def dataset_payload() -> dict:
    return {
        "bodies": ["A", "B", "C", "X"],
        "joints": [
            {"name": "j1", "body0": "A", "body1": "B"},
            ["j2", "B", "C"],
            ["j3", "A", "C"],
        ],
    }


@pytest.fixture()
def built(dataset_payload: dict) -> HierarchyBuilder:
    builder = HierarchyBuilder()
    populate_builder(builder, Dataset.model_validate(dataset_payload))
    builder.build()
    return builder


def test_load_yaml_dataset_accepts_row_and_mapping_joints(tmp_path: Path, dataset_payload: dict) -> None:
    path = tmp_path / "robot.yaml"
    path.write_text(yaml.safe_dump(dataset_payload), encoding="utf-8")

    dataset = load_dataset(path)

    assert dataset.bodies == ["A", "B", "C", "X"]
    assert [joint.as_tuple() for joint in dataset.joints] == [
        ("j1", "A", "B"),
        ("j2", "B", "C"),
        ("j3", "A", "C"),
    ]


def test_load_json_dataset(tmp_path: Path, dataset_payload: dict) -> None:
    path = tmp_path / "robot.json"
    path.write_text(json.dumps(dataset_payload), encoding="utf-8")
    assert len(load_dataset(path).joints) == 3


def test_load_empty_yaml_gives_empty_dataset(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    dataset = load_dataset(path)
    assert dataset.bodies == []
    assert dataset.joints == []


@pytest.mark.parametrize(
    ("filename", "content"),
    [
        ("robot.txt", "bodies: []"),
        ("robot.yaml", "- just\n- a list\n"),
        ("robot.yaml", "bodies: [A\n"),
        ("robot.json", '{"joints": [{"name": "j", "body0": "A"}]}'),
    ],
)
def test_load_dataset_errors(tmp_path: Path, filename: str, content: str) -> None:
    path = tmp_path / filename
    path.write_text(content, encoding="utf-8")
    with pytest.raises(DatasetError):
        load_dataset(path)


def test_load_missing_dataset(tmp_path: Path) -> None:
    with pytest.raises(DatasetError):
        load_dataset(tmp_path / "missing.yaml")


def test_populate_builder_strict_raises_on_rejection() -> None:
    dataset = Dataset.model_validate({"bodies": ["A", "B"], "joints": [["j1", "A", "ghost"]]})
    with pytest.raises(DatasetError):
        populate_builder(HierarchyBuilder(), dataset)


def test_populate_builder_lenient_reports_rejections() -> None:
    dataset = Dataset.model_validate(
        {
            "bodies": ["A", "B", "A"],
            "joints": [["j1", "A", "B"], ["j1", "B", "A"], ["j2", "A", "ghost"]],
        }
    )
    builder = HierarchyBuilder()

    rejected = populate_builder(builder, dataset, strict=False)

    assert rejected == [
        {"kind": "body", "name": "A", "reason": "duplicate-name"},
        {"kind": "joint", "name": "j1", "reason": "duplicate-name"},
        {"kind": "joint", "name": "j2", "reason": "unknown-body"},
    ]
    assert builder.body_count() == 2
    assert builder.joint_count() == 1


def test_render_dot_marks_loop_edges(built: HierarchyBuilder) -> None:
    dot = render_dot(built)
    assert dot.startswith("digraph articulation {")
    assert '"X" [shape=box, style=dotted];' in dot
    assert '"A" -> "C" [label="j3", style=dashed];' in dot
    assert '"A" -> "B" [label="j1"];' in dot


def test_render_forest_formats(built: HierarchyBuilder) -> None:
    assert render_forest(built).startswith("DisconnectedRigidBodyCount: 1")
    assert json.loads(render_forest(built, format="json"))["loop_joints"] == ["j3"]
    with pytest.raises(ValueError):
        render_forest(built, format="xml")


@pytest.mark.parametrize("fmt", ["json", "dot", "text"])
def test_export_forest_writes_file(tmp_path: Path, built: HierarchyBuilder, fmt: str) -> None:
    target = export_forest(built, tmp_path / "nested" / f"forest.{fmt}", format=fmt)
    assert target.exists()
    assert target.read_text(encoding="utf-8").endswith("\n")


def test_export_forest_rejects_unknown_format(tmp_path: Path, built: HierarchyBuilder) -> None:
    with pytest.raises(ValueError):
        export_forest(built, tmp_path / "forest.xml", format="xml")


def test_write_validation_report(tmp_path: Path, built: HierarchyBuilder) -> None:
    report = ForestValidator().run(built)
    path = write_validation_report(report, tmp_path / "report.json")
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["passed"] is True
    assert payload["statistics"]["hierarchy_count"] == 1
