"""Shared helpers used across the articulation CLI modules."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, MutableMapping
from uuid import uuid4

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from articulation.config.settings import Settings
from articulation.hierarchy.builder import HierarchyBuilder
from articulation.hierarchy.validator import ValidationReport
from articulation.utils.logging import configure_logging

console = Console()


class CLIError(RuntimeError):
    """Exception raised for user-facing CLI errors."""


@dataclass(slots=True)
class CLIState:
    """State object attached to ``typer.Context`` for downstream commands."""

    settings: Settings
    overrides: Dict[str, Any]
    environment: str
    run_id: str
    verbose: bool


def _merge_dict(dest: MutableMapping[str, Any], src: Mapping[str, Any]) -> None:
    for key, value in src.items():
        if isinstance(value, Mapping) and isinstance(dest.get(key), MutableMapping):
            _merge_dict(dest[key], value)  # type: ignore[index]
        elif isinstance(value, Mapping):
            dest[key] = dict(value)
        else:
            dest[key] = value


def parse_override(argument: str) -> Dict[str, Any]:
    """Parse dotted ``key=value`` overrides into nested dictionaries."""

    if "=" not in argument:
        raise typer.BadParameter("Overrides must be expressed as dotted.key=value")
    dotted, value = argument.split("=", 1)
    cursor: MutableMapping[str, Any] = {}
    current = cursor
    segments = [segment.strip() for segment in dotted.split(".") if segment.strip()]
    if not segments:
        raise typer.BadParameter("Override keys must not be empty")
    for segment in segments[:-1]:
        nested: Dict[str, Any] = {}
        current[segment] = nested
        current = nested
    try:
        parsed_value = json.loads(value)
    except json.JSONDecodeError:
        parsed_value = value
    current[segments[-1]] = parsed_value
    return cursor


def merge_overrides(overrides: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Merge override dictionaries using deep semantics."""

    result: Dict[str, Any] = {}
    for override in overrides:
        _merge_dict(result, override)
    return result


def resolve_settings(environment: str | None, overrides: Dict[str, Any]) -> Settings:
    """Construct :class:`Settings` with environment and overrides applied."""

    payload = dict(overrides)
    if environment:
        payload["environment"] = environment
    try:
        return Settings(**payload)
    except ValidationError as exc:
        raise CLIError(f"Invalid configuration: {exc}") from exc


def configure_state(
    ctx: typer.Context,
    *,
    environment: str | None,
    overrides: Iterable[Dict[str, Any]],
    run_id: str | None,
    verbose: bool,
) -> None:
    """Populate ``ctx.obj`` with :class:`CLIState` and initialise logging."""

    merged = merge_overrides(overrides)
    settings = resolve_settings(environment, merged)
    resolved_run_id = run_id or f"cli-{uuid4().hex[:8]}"
    configure_logging(settings, level="DEBUG" if verbose else None, run_id=resolved_run_id)
    ctx.obj = CLIState(
        settings=settings,
        overrides=merged,
        environment=settings.environment,
        run_id=resolved_run_id,
        verbose=verbose,
    )


def get_state(ctx: typer.Context) -> CLIState:
    """Return the previously configured :class:`CLIState`."""

    if ctx.obj is None:
        raise CLIError("CLI context is not initialised")
    if not isinstance(ctx.obj, CLIState):  # pragma: no cover - defensive guard
        raise CLIError("Unexpected CLI context payload")
    return ctx.obj


def resolve_path(path: str | Path, *, must_exist: bool = True) -> Path:
    target = Path(path).expanduser().resolve()
    if must_exist and not target.exists():
        raise CLIError(f"Path does not exist: {target}")
    return target


def render_summary(builder: HierarchyBuilder, report: ValidationReport | None = None) -> None:
    """Print forest statistics and validation findings as Rich tables."""

    table = Table(title="Hierarchy Summary", show_header=False, box=None)
    for key, value in builder.statistics().items():
        table.add_row(key.replace("_", " "), str(value))
    roots = [
        builder.hierarchy_root(index).body_name  # type: ignore[union-attr]
        for index in range(builder.hierarchy_count())
    ]
    table.add_row("roots", ", ".join(roots) or "-")
    loops = builder.loop_joints()
    table.add_row("loop joints", ", ".join(loops) or "-")
    console.print(table)

    if report is None:
        return
    if report.violations or report.warnings:
        findings = Table(title="Validation Findings")
        findings.add_column("Severity")
        findings.add_column("Code")
        findings.add_column("Detail")
        for item in report.violations:
            findings.add_row("violation", item["code"], item["detail"])
        for item in report.warnings:
            findings.add_row("warning", item["code"], item["detail"])
        console.print(findings)
    status = "[green]passed[/green]" if report.passed else "[bold red]failed[/bold red]"
    console.print(f"Validation {status}")


__all__ = [
    "CLIError",
    "CLIState",
    "console",
    "parse_override",
    "merge_overrides",
    "resolve_settings",
    "configure_state",
    "get_state",
    "resolve_path",
    "render_summary",
]
