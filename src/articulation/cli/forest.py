"""Commands that build, validate and export hierarchy forests."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from articulation.demo import demo_dataset
from articulation.hierarchy.hierarchy import MergeInconsistencyError
from articulation.hierarchy.io import Dataset, DatasetError, render_forest
from articulation.hierarchy.main import AssemblyResult, assemble_forest

from .common import CLIError, CLIState, console, get_state, render_summary, resolve_path

_FORMATS = ("text", "json", "dot")


def _resolve_format(state: CLIState, requested: str | None) -> str:
    fmt = (requested or state.settings.policies.hierarchy.export_format).lower()
    if fmt not in _FORMATS:
        raise CLIError(f"--format must be one of {', '.join(_FORMATS)}")
    return fmt


def _assemble(
    state: CLIState,
    dataset: Dataset | Path,
    *,
    strict: bool,
    output: Path | None = None,
    output_format: str | None = None,
    report_path: Path | None = None,
) -> AssemblyResult:
    try:
        return assemble_forest(
            dataset,
            settings=state.settings,
            strict=strict,
            output_path=output,
            output_format=output_format,
            validation_report_path=report_path,
        )
    except DatasetError as exc:
        raise CLIError(str(exc)) from exc
    except MergeInconsistencyError as exc:
        raise CLIError(f"Merge inconsistency detected: {exc}") from exc


def _emit(result: AssemblyResult, fmt: str, output: Path | None, state: CLIState) -> None:
    if output is not None:
        console.print(f"[green]Forest written to[/green] {output}")
        render_summary(result.builder, result.validation_report if state.verbose else None)
        return
    typer.echo(render_forest(result.builder, format=fmt))


def build_command(
    ctx: typer.Context,
    dataset: Path = typer.Argument(..., help="YAML or JSON dataset listing bodies and joints."),
    output_format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format: text, json or dot. Defaults to the configured policy.",
        show_default=False,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        help="Write the forest to this file instead of standard output.",
    ),
    report: Optional[Path] = typer.Option(
        None,
        "--report",
        help="Optional path for the JSON validation report.",
    ),
    lenient: bool = typer.Option(
        False,
        "--lenient",
        help="Skip rejected bodies and joints instead of aborting.",
    ),
) -> None:
    """Build the hierarchy forest for DATASET."""

    state = get_state(ctx)
    fmt = _resolve_format(state, output_format)
    result = _assemble(
        state,
        resolve_path(dataset),
        strict=not lenient,
        output=output,
        output_format=fmt,
        report_path=report,
    )
    if result.rejected:
        console.print(f"[yellow]Skipped {len(result.rejected)} rejected record(s)[/yellow]")
    _emit(result, fmt, output, state)


def validate_command(
    ctx: typer.Context,
    dataset: Path = typer.Argument(..., help="YAML or JSON dataset listing bodies and joints."),
    report: Optional[Path] = typer.Option(
        None,
        "--report",
        help="Optional path for the JSON validation report.",
    ),
    lenient: bool = typer.Option(
        False,
        "--lenient",
        help="Skip rejected bodies and joints instead of aborting.",
    ),
) -> None:
    """Build DATASET and check the forest invariants; exit 1 on violations."""

    state = get_state(ctx)
    result = _assemble(state, resolve_path(dataset), strict=not lenient, report_path=report)
    render_summary(result.builder, result.validation_report)
    if not result.validation_report.passed:
        raise typer.Exit(code=1)


def demo_command(
    ctx: typer.Context,
    output_format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format: text, json or dot. Defaults to the configured policy.",
        show_default=False,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        help="Write the forest to this file instead of standard output.",
    ),
) -> None:
    """Build the bundled robot dataset and print its forest."""

    state = get_state(ctx)
    fmt = _resolve_format(state, output_format)
    result = _assemble(
        state,
        demo_dataset(),
        strict=False,
        output=output,
        output_format=fmt,
    )
    _emit(result, fmt, output, state)


__all__ = ["build_command", "validate_command", "demo_command"]
