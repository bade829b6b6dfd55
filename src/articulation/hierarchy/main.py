"""Public entry points tying dataset loading, building and reporting together."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from articulation.config.settings import Settings
from articulation.utils.logging import get_logger, log_timing, logging_context

from .builder import HierarchyBuilder
from .io import Dataset, export_forest, load_dataset, populate_builder, write_validation_report
from .validator import ForestValidator, ValidationReport

_LOGGER = get_logger(module=__name__)


@dataclass(slots=True)
class AssemblyResult:
    """Materialised results returned by :func:`assemble_forest`."""

    builder: HierarchyBuilder
    validation_report: ValidationReport
    rejected: List[dict] = field(default_factory=list)

    @property
    def hierarchy_count(self) -> int:
        return self.builder.hierarchy_count()

    def to_manifest(self) -> dict:
        return {
            "forest": self.builder.to_dict(),
            "validation": self.validation_report.to_dict(),
            "rejected": list(self.rejected),
        }


def assemble_forest(
    dataset: Dataset | str | Path,
    *,
    settings: Settings | None = None,
    strict: bool = True,
    output_path: str | Path | None = None,
    output_format: str | None = None,
    validation_report_path: str | Path | None = None,
) -> AssemblyResult:
    """Load ``dataset``, build its hierarchies and validate the forest.

    ``dataset`` may be a :class:`Dataset` or a path to a YAML/JSON file. With
    ``strict`` enabled any rejected record aborts with ``DatasetError``.
    """

    cfg = settings or Settings()
    if cfg.create_dirs:
        cfg.paths.ensure_exists()
    policy = cfg.policies.hierarchy

    if not isinstance(dataset, Dataset):
        dataset = load_dataset(dataset)

    builder = HierarchyBuilder(policy=policy)
    with logging_context(step="hierarchy-build"):
        rejected = populate_builder(builder, dataset, strict=strict)
        with log_timing("hierarchy-build", logger_=_LOGGER):
            builder.build()
        report = ForestValidator().run(builder)

    if output_path:
        export_forest(builder, output_path, format=output_format or policy.export_format)
    if validation_report_path:
        write_validation_report(report, validation_report_path)

    _LOGGER.info(
        "Forest assembly completed",
        hierarchies=builder.hierarchy_count(),
        rejected=len(rejected),
        passed=report.passed,
    )
    return AssemblyResult(builder=builder, validation_report=report, rejected=rejected)


__all__ = ["AssemblyResult", "assemble_forest"]
