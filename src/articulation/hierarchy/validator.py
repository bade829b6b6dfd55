"""Invariant validation helpers for built hierarchy forests."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List

from articulation.utils.logging import get_logger

from .builder import HierarchyBuilder


@dataclass(slots=True)
class ValidationReport:
    """Structured validation output used by the CLI and exports."""

    passed: bool
    violations: List[dict] = field(default_factory=list)
    warnings: List[dict] = field(default_factory=list)
    statistics: dict = field(default_factory=dict)
    generated_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "violations": list(self.violations),
            "warnings": list(self.warnings),
            "statistics": dict(self.statistics),
            "generated_at": self.generated_at,
        }


class ForestChecker:
    """Checks a built forest against the body and joint coverage invariants."""

    def validate_bodies(self, builder: HierarchyBuilder) -> List[dict]:
        """Each body is disconnected or the body of exactly one non-loop node."""

        placements: Counter[str] = Counter()
        anywhere: set[str] = set()
        for hierarchy in builder.hierarchies:
            for node in hierarchy.root.iter_nodes():
                anywhere.add(node.body_name)
                if not node.is_loop_joint:
                    placements[node.body_name] += 1

        violations: List[dict] = []
        disconnected = set(builder.disconnected_bodies)
        registered = {body.name for body in builder.registry.bodies()}
        for name in sorted(registered):
            if name in disconnected:
                if name in anywhere:
                    violations.append(
                        {
                            "code": "disconnected-body-placed",
                            "body": name,
                            "detail": "disconnected body also appears inside a hierarchy",
                        }
                    )
                continue
            count = placements.get(name, 0)
            if count == 0:
                violations.append(
                    {
                        "code": "body-missing",
                        "body": name,
                        "detail": "connected body does not appear as a tree node",
                    }
                )
            elif count > 1:
                violations.append(
                    {
                        "code": "body-duplicated",
                        "body": name,
                        "detail": f"body appears as {count} non-loop nodes",
                    }
                )
        for name in sorted(anywhere - registered):
            violations.append(
                {
                    "code": "unknown-body",
                    "body": name,
                    "detail": "tree node references an unregistered body",
                }
            )
        return violations

    def validate_joints(self, builder: HierarchyBuilder) -> List[dict]:
        """Each joint is represented by exactly one edge across the forest."""

        occurrences: Counter[str] = Counter(
            node.joint_name
            for hierarchy in builder.hierarchies
            for node in hierarchy.root.iter_nodes()
            if node.joint_name
        )
        violations: List[dict] = []
        for joint in builder.registry.iter_joints():
            count = occurrences.get(joint.name, 0)
            if count == 1:
                continue
            violations.append(
                {
                    "code": "joint-missing" if count == 0 else "joint-duplicated",
                    "joint": joint.name,
                    "detail": f"joint is represented by {count} edges",
                }
            )
        return violations

    def check_edge_endpoints(self, builder: HierarchyBuilder) -> List[dict]:
        """Edges whose bodies differ from the joint's registered endpoints."""

        registered: Dict[str, frozenset[str]] = {
            joint.name: frozenset((joint.body0, joint.body1))
            for joint in builder.registry.iter_joints()
        }
        warnings: List[dict] = []
        for hierarchy in builder.hierarchies:
            for edge in hierarchy.edges():
                expected = registered.get(edge.name)
                if expected is None or expected == frozenset((edge.body0, edge.body1)):
                    continue
                warnings.append(
                    {
                        "code": "edge-endpoint-mismatch",
                        "joint": edge.name,
                        "detail": (
                            f"edge {edge.body0}->{edge.body1} does not match "
                            f"registered endpoints {sorted(expected)}"
                        ),
                    }
                )
        return warnings

    def analyze_merge_issues(self, builder: HierarchyBuilder) -> List[dict]:
        return [
            {
                "code": "merge-inconsistency",
                "detail": (
                    f"hierarchy {issue.absorbed_index} merged into {issue.source_index} "
                    f"with {len(issue.unconsumed)} unconsumed edge(s)"
                ),
                "joints": [joint.name for joint in issue.unconsumed],
            }
            for issue in builder.merge_issues
        ]


class ForestValidator:
    """High-level orchestrator combining forest checks into a report."""

    def __init__(self, checker: ForestChecker | None = None) -> None:
        self._checker = checker or ForestChecker()
        self._logger = get_logger(module=f"{__name__}.ForestValidator")

    def run(self, builder: HierarchyBuilder) -> ValidationReport:
        violations: List[dict] = []
        violations.extend(self._checker.validate_bodies(builder))
        violations.extend(self._checker.validate_joints(builder))
        violations.extend(self._checker.analyze_merge_issues(builder))
        warnings = self._checker.check_edge_endpoints(builder)

        report = ValidationReport(
            passed=not violations,
            violations=violations,
            warnings=warnings,
            statistics=builder.statistics(),
        )
        self._logger.info(
            "Forest validation completed",
            passed=report.passed,
            violations=len(report.violations),
            warnings=len(report.warnings),
        )
        return report


__all__ = ["ForestChecker", "ForestValidator", "ValidationReport"]
