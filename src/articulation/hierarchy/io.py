"""I/O utilities for hierarchy datasets and built forests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Mapping

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from articulation.entities.core import Joint, RegistrationStatus
from articulation.utils.helpers import ensure_directory, serialize_json, write_text
from articulation.utils.logging import get_logger

from .builder import HierarchyBuilder
from .tree import TreeNode
from .validator import ValidationReport

_LOGGER = get_logger(module=__name__)

_SUPPORTED_SUFFIXES = {".json", ".yaml", ".yml"}


class DatasetError(ValueError):
    """Raised when a dataset cannot be loaded or registered."""


class Dataset(BaseModel):
    """Raw input collection: body names plus joints referencing them."""

    bodies: List[str] = Field(default_factory=list)
    joints: List[Joint] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _coerce_joint_rows(cls, values: Any) -> Any:
        """Accept ``[name, body0, body1]`` rows alongside mappings."""

        if not isinstance(values, Mapping):
            return values
        rows = values.get("joints")
        if not isinstance(rows, list):
            return values
        coerced = []
        for row in rows:
            if isinstance(row, (list, tuple)) and len(row) == 3:
                coerced.append({"name": row[0], "body0": row[1], "body1": row[2]})
            else:
                coerced.append(row)
        return {**values, "joints": coerced}


def load_dataset(path: str | Path) -> Dataset:
    """Load a YAML or JSON dataset file into a :class:`Dataset`."""

    source = Path(path)
    if not source.exists():
        raise DatasetError(f"dataset file not found: {source}")
    suffix = source.suffix.lower()
    if suffix not in _SUPPORTED_SUFFIXES:
        raise DatasetError(
            f"unsupported dataset format '{suffix}'; expected one of {sorted(_SUPPORTED_SUFFIXES)}"
        )
    text = source.read_text(encoding="utf-8")
    try:
        payload = json.loads(text) if suffix == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DatasetError(f"could not parse dataset {source}: {exc}") from exc
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise DatasetError(f"dataset {source} must contain a mapping at the top level")
    try:
        dataset = Dataset.model_validate(payload)
    except ValidationError as exc:
        raise DatasetError(f"invalid dataset {source}: {exc}") from exc
    _LOGGER.info(
        "Loaded dataset",
        path=str(source),
        bodies=len(dataset.bodies),
        joints=len(dataset.joints),
    )
    return dataset


def populate_builder(
    builder: HierarchyBuilder,
    dataset: Dataset,
    *,
    strict: bool = True,
) -> List[dict]:
    """Register every body and joint of ``dataset``; return the rejections.

    With ``strict`` enabled any rejection raises :class:`DatasetError` after
    the whole dataset has been attempted.
    """

    rejected: List[dict] = []
    for name in dataset.bodies:
        status = builder.register_body(name)
        if status is not RegistrationStatus.ACCEPTED:
            rejected.append({"kind": "body", "name": name, "reason": status.value})
    for joint in dataset.joints:
        status = builder.register_joint(joint.name, joint.body0, joint.body1)
        if status is not RegistrationStatus.ACCEPTED:
            rejected.append({"kind": "joint", "name": joint.name, "reason": status.value})
    if rejected and strict:
        summary = ", ".join(f"{item['kind']} '{item['name']}' ({item['reason']})" for item in rejected)
        raise DatasetError(f"{len(rejected)} record(s) rejected: {summary}")
    return rejected


def render_dot(builder: HierarchyBuilder) -> str:
    """Render the forest as a Graphviz digraph; loop joints are dashed."""

    lines = ["digraph articulation {"]
    for name in builder.disconnected_bodies:
        escaped = name.replace('"', '\\"')
        lines.append(f'  "{escaped}" [shape=box, style=dotted];')
    for position in range(builder.hierarchy_count()):
        root = builder.hierarchy_root(position)
        if root is None:
            continue
        lines.append(f"  subgraph cluster_{position} {{")
        lines.append(f'    label="Hierarchy[{position}]";')
        lines.extend(_dot_edges(root))
        lines.append("  }")
    lines.append("}")
    return "\n".join(lines)


def _dot_edges(node: TreeNode) -> List[str]:
    lines: List[str] = []
    for edge in node.child_edges():
        parent = edge.parent.replace('"', '\\"')
        child = edge.child.replace('"', '\\"')
        label = edge.joint.replace('"', '\\"')
        style = ", style=dashed" if edge.is_loop_joint else ""
        lines.append(f'    "{parent}" -> "{child}" [label="{label}"{style}];')
    for child in node.children:
        lines.extend(_dot_edges(child))
    return lines


def export_forest(
    builder: HierarchyBuilder,
    output_path: str | Path,
    *,
    format: str = "json",
) -> Path:
    path = Path(output_path)
    ensure_directory(path.parent)
    format = format.lower()
    if format == "json":
        serialize_json(builder.to_dict(), path)
    elif format == "dot":
        write_text(render_dot(builder), path)
    elif format == "text":
        write_text(builder.render_text(), path)
    else:
        raise ValueError(f"unsupported forest export format: {format}")
    _LOGGER.info("Exported hierarchy forest", path=str(path), format=format)
    return path.resolve()


def render_forest(builder: HierarchyBuilder, *, format: str = "text") -> str:
    """Return the forest in ``format`` without touching the filesystem."""

    format = format.lower()
    if format == "json":
        return json.dumps(builder.to_dict(), indent=2, sort_keys=True, ensure_ascii=False)
    if format == "dot":
        return render_dot(builder)
    if format == "text":
        return builder.render_text()
    raise ValueError(f"unsupported forest export format: {format}")


def write_validation_report(report: ValidationReport, output_path: str | Path) -> Path:
    path = Path(output_path)
    ensure_directory(path.parent)
    serialize_json(report.to_dict(), path)
    return path.resolve()


__all__ = [
    "Dataset",
    "DatasetError",
    "load_dataset",
    "populate_builder",
    "render_dot",
    "render_forest",
    "export_forest",
    "write_validation_report",
]
