"""Hierarchy builder that turns unordered bodies and joints into a forest."""

from __future__ import annotations

from typing import Any, Dict, List

from articulation.config.policies import HierarchyPolicy
from articulation.entities.core import Joint, RegistrationStatus
from articulation.utils.logging import get_logger

from .hierarchy import Hierarchy, MergeIssue
from .registry import EntityRegistry
from .tree import TreeNode, render_tree

_LOGGER = get_logger(module=__name__)


class HierarchyBuilder:
    """Main coordinator for hierarchy construction.

    Usage::

        builder = HierarchyBuilder()
        for body in bodies:
            builder.add_body(body)
        for name, body0, body1 in joints:
            builder.add_joint(name, body0, body1)
        builder.build()

    after which the forest is queried through :meth:`hierarchy_root` and the
    unreferenced bodies through :meth:`disconnected_body`.
    """

    def __init__(self, policy: HierarchyPolicy | None = None) -> None:
        self._policy = policy or HierarchyPolicy()
        self._registry = EntityRegistry()
        self._hierarchies: List[Hierarchy] = []
        self._disconnected: List[str] = []
        self._merge_issues: List[MergeIssue] = []
        self._merge_count = 0

    @property
    def policy(self) -> HierarchyPolicy:
        return self._policy

    @property
    def registry(self) -> EntityRegistry:
        return self._registry

    @property
    def hierarchies(self) -> List[Hierarchy]:
        return list(self._hierarchies)

    @property
    def disconnected_bodies(self) -> List[str]:
        return list(self._disconnected)

    @property
    def merge_issues(self) -> List[MergeIssue]:
        return list(self._merge_issues)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Return to the initial empty state."""

        self._registry.clear()
        self._clear_results()

    def register_body(self, name: str) -> RegistrationStatus:
        return self._registry.register_body(name)

    def register_joint(self, name: str, body0: str, body1: str) -> RegistrationStatus:
        return self._registry.register_joint(name, body0, body1)

    def add_body(self, name: str) -> bool:
        """Register a rigid body; ``False`` if the name is taken or empty."""

        return bool(self.register_body(name))

    def add_joint(self, name: str, body0: str, body1: str) -> bool:
        """Register a joint; ``False`` on a duplicate name or unknown body."""

        return bool(self.register_joint(name, body0, body1))

    def body_count(self) -> int:
        return self._registry.body_count()

    def body(self, index: int) -> str | None:
        record = self._registry.body_at(index)
        return record.name if record is not None else None

    def joint_count(self) -> int:
        return self._registry.joint_count()

    def joint(self, index: int) -> Joint | None:
        return self._registry.joint_at(index)

    # ------------------------------------------------------------------
    # Primary entry point
    # ------------------------------------------------------------------
    def build(self) -> int:
        """Compute hierarchies and disconnected bodies; return the hierarchy count."""

        self._clear_results()
        self._disconnected = self._registry.disconnected_bodies()

        joints = self._registry.joints()
        for joint in joints:
            self._place_joint(joint)

        if len(self._hierarchies) > 1:
            self._merge_fragments()

        loop_total = 0
        for hierarchy in self._hierarchies:
            loop_total += len(hierarchy.find_loop_joints(joints))
            self._merge_issues.extend(hierarchy.issues)

        _LOGGER.info(
            "Hierarchy build completed",
            hierarchies=len(self._hierarchies),
            disconnected=len(self._disconnected),
            joints=len(joints),
            loop_joints=loop_total,
            merges=self._merge_count,
        )
        return len(self._hierarchies)

    def _clear_results(self) -> None:
        self._hierarchies = []
        self._disconnected = []
        self._merge_issues = []
        self._merge_count = 0

    def _place_joint(self, joint: Joint) -> None:
        for hierarchy in self._hierarchies:
            if hierarchy.insert(joint):
                return
        self._hierarchies.append(
            Hierarchy(joint, len(self._hierarchies), policy=self._policy)
        )

    def _merge_fragments(self) -> None:
        """Merge fragments pairwise until a full scan merges nothing.

        For a fixed source every later fragment is tried in turn and absorbed
        fragments are dropped; once a source absorbed anything the scan
        restarts from the first hierarchy.
        """

        while True:
            merged_any = False
            for i, source in enumerate(self._hierarchies):
                survivors = self._hierarchies[: i + 1]
                for other in self._hierarchies[i + 1 :]:
                    if source.merge(other):
                        merged_any = True
                        self._merge_count += 1
                    else:
                        survivors.append(other)
                if merged_any:
                    self._hierarchies = survivors
                    break
            if not merged_any:
                return

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    def disconnected_body_count(self) -> int:
        return len(self._disconnected)

    def disconnected_body(self, index: int) -> str | None:
        if 0 <= index < len(self._disconnected):
            return self._disconnected[index]
        return None

    def hierarchy_count(self) -> int:
        return len(self._hierarchies)

    def hierarchy_root(self, index: int) -> TreeNode | None:
        if 0 <= index < len(self._hierarchies):
            return self._hierarchies[index].root
        return None

    def loop_joints(self) -> List[str]:
        return [name for hierarchy in self._hierarchies for name in hierarchy.loop_joints()]

    def statistics(self) -> Dict[str, Any]:
        """Return structural statistics for summaries and exports."""

        node_counts = [hierarchy.node_count for hierarchy in self._hierarchies]
        return {
            "body_count": self._registry.body_count(),
            "joint_count": self._registry.joint_count(),
            "hierarchy_count": len(self._hierarchies),
            "disconnected_count": len(self._disconnected),
            "loop_joint_count": len(self.loop_joints()),
            "merge_count": self._merge_count,
            "merge_issue_count": len(self._merge_issues),
            "max_depth": max((h.root.height for h in self._hierarchies), default=0),
            "largest_hierarchy": max(node_counts, default=0),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "disconnected_bodies": self.disconnected_bodies,
            "hierarchies": [hierarchy.root.to_dict() for hierarchy in self._hierarchies],
            "loop_joints": self.loop_joints(),
            "merge_issues": [issue.to_dict() for issue in self._merge_issues],
            "statistics": self.statistics(),
        }

    def render_text(self) -> str:
        """Render the disconnected list and every hierarchy as indented text."""

        separator = "=" * 56
        indent = self._policy.indent
        lines = [f"DisconnectedRigidBodyCount: {len(self._disconnected)}"]
        for position, name in enumerate(self._disconnected):
            lines.append(f"{indent}RigidBody[{position}]={name}")
        lines.append(f"Found {len(self._hierarchies)} hierarchies")
        for position, hierarchy in enumerate(self._hierarchies):
            lines.append(separator)
            lines.append(f"Hierarchy[{position}] root={hierarchy.root.body_name}")
            lines.append(separator)
            lines.extend(render_tree(hierarchy.root, indent=indent))
            lines.append(separator)
            lines.append("")
        return "\n".join(lines)

    def debug_print(self) -> None:
        print(self.render_text())


__all__ = ["HierarchyBuilder"]
