"""Policy models controlling hierarchy construction and reporting."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal, Mapping, MutableMapping, Sequence

import yaml
from pydantic import BaseModel, Field, field_validator


class HierarchyPolicy(BaseModel):
    """Configuration for the hierarchy builder and its diagnostics."""

    strict_merge_validation: bool = Field(
        default=False,
        description=(
            "Raise MergeInconsistencyError when a successful merge leaves edges "
            "unconsumed instead of logging and continuing."
        ),
    )
    log_chain: bool = Field(
        default=False,
        description="Log the rendered tree at DEBUG after every successful graft.",
    )
    indent: str = Field(
        default="    ",
        min_length=1,
        description="Indent unit used by the text dump.",
    )
    export_format: Literal["text", "json", "dot"] = Field(
        default="text",
        description="Default format used when exporting a built forest.",
    )

    @field_validator("indent")
    @classmethod
    def _reject_newlines(cls, value: str) -> str:
        if "\n" in value or "\r" in value:
            raise ValueError("indent must not contain line breaks")
        return value


class Policies(BaseModel):
    """Root policy container."""

    hierarchy: HierarchyPolicy = Field(default_factory=HierarchyPolicy)


def _ensure_nested_mapping(
    cursor: MutableMapping[str, Any], part: str, full_path: Sequence[str]
) -> MutableMapping[str, Any]:
    existing = cursor.get(part)
    if existing is None:
        next_cursor: MutableMapping[str, Any] = {}
        cursor[part] = next_cursor
        return next_cursor
    if not isinstance(existing, MutableMapping):
        raise ValueError(
            "Cannot override policy path '"
            f"{'/'.join(full_path)}"
            "' because segment '"
            f"{part}"
            "' resolves to a non-mapping value"
        )
    return existing


def _resolve_env_overrides(raw: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Apply ARTICULATION_POLICY__ environment variable overrides.

    ``ARTICULATION_POLICY__HIERARCHY__LOG_CHAIN=true`` becomes
    ``{"hierarchy": {"log_chain": True}}``. Values are JSON-decoded when
    possible, otherwise kept as raw strings.
    """

    prefix = "ARTICULATION_POLICY__"
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue
        parts = [segment.lower() for segment in key[len(prefix) :].split("__") if segment]
        if not parts:
            continue
        cursor: MutableMapping[str, Any] = raw
        for index, part in enumerate(parts[:-1], start=1):
            cursor = _ensure_nested_mapping(cursor, part, parts[: index + 1])
        try:
            parsed = json.loads(value)
        except (TypeError, json.JSONDecodeError):
            parsed = value
        cursor[parts[-1]] = parsed
    return raw


def load_policies(source: os.PathLike[str] | str | Mapping[str, Any]) -> Policies:
    """Load policies from a mapping or YAML file with environment overrides."""

    if isinstance(source, Mapping):
        raw: MutableMapping[str, Any] = dict(source)
    else:
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Policy file not found: {path}")
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle)
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, MutableMapping):
            raise ValueError(
                f"Policy file '{path}' must contain a mapping at the top level"
            )
        raw = dict(loaded)
    hydrated = _resolve_env_overrides(raw)
    return Policies.model_validate(hydrated)


__all__ = ["HierarchyPolicy", "Policies", "load_policies"]
