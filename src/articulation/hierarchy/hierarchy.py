"""A single rooted hierarchy grown from joints and merged with fragments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from articulation.config.policies import HierarchyPolicy
from articulation.entities.core import Joint
from articulation.utils.logging import get_logger

from .tree import TreeNode, render_tree

_LOGGER = get_logger(module=__name__)


class MergeInconsistencyError(RuntimeError):
    """Raised when a merge succeeds but leaves fragment edges unplaced."""

    def __init__(self, issue: "MergeIssue") -> None:
        self.issue = issue
        names = ", ".join(joint.name for joint in issue.unconsumed)
        super().__init__(
            f"merge of hierarchy {issue.absorbed_index} into {issue.source_index} "
            f"left {len(issue.unconsumed)} edge(s) unconsumed: {names}"
        )


@dataclass(slots=True)
class MergeIssue:
    """Edges that could not be re-derived while folding one fragment into another."""

    source_index: int
    absorbed_index: int
    unconsumed: List[Joint] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "source_index": self.source_index,
            "absorbed_index": self.absorbed_index,
            "unconsumed": [joint.model_dump() for joint in self.unconsumed],
        }


class Hierarchy:
    """One connected component rooted at a single :class:`TreeNode`.

    A hierarchy is seeded from one joint: ``body0`` becomes the root and
    ``body1`` its first child. The root node object is never replaced, so
    handles returned by :attr:`root` stay valid across rotations and merges.
    """

    def __init__(self, joint: Joint, index: int, *, policy: HierarchyPolicy | None = None) -> None:
        self._policy = policy or HierarchyPolicy()
        self.index = index
        self.root = TreeNode(body_name=joint.body0)
        self.root.children.append(TreeNode(body_name=joint.body1, joint_name=joint.name))
        self.issues: List[MergeIssue] = []
        self._log_chain("Seeded hierarchy", joint)

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------
    def __contains__(self, body: str) -> bool:
        return any(node.body_name == body for node in self.root.iter_nodes())

    def __repr__(self) -> str:
        return f"<Hierarchy index={self.index} root={self.root.body_name!r} nodes={self.node_count}>"

    @property
    def policy(self) -> HierarchyPolicy:
        return self._policy

    @property
    def node_count(self) -> int:
        return 1 + self.root.descendant_count

    def nodes(self) -> List[TreeNode]:
        return list(self.root.iter_nodes())

    def edges(self) -> List[Joint]:
        """Flatten the tree into ``Joint(parent, child)`` records in tree order."""

        return list(self.root.iter_joints())

    def loop_joints(self) -> List[str]:
        return [node.joint_name for node in self.root.iter_nodes() if node.is_loop_joint]

    def render(self) -> List[str]:
        return render_tree(self.root, indent=self._policy.indent)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def insert(self, joint: Joint) -> bool:
        """Graft ``joint`` onto the first node touching one of its bodies."""

        created = self.root.graft(joint)
        if created is None:
            return False
        self._log_chain("Grafted joint", joint)
        return True

    def contains_edge(self, joint: Joint) -> bool:
        """True when ``joint`` already exists as a direct parent -> child edge."""

        return self.root.has_edge(joint)

    def merge(self, other: Hierarchy) -> bool:
        """Fold every edge of ``other`` into this hierarchy.

        Edges are rescanned until a pass consumes nothing, because an edge may
        only become insertable after an earlier edge of the same batch has been
        grafted. This is O(edges^2) in the worst case.
        """

        pending = other.edges()
        merged = False
        progress = True
        while progress and pending:
            progress = False
            remaining: List[Joint] = []
            for joint in pending:
                if self.contains_edge(joint):
                    merged = True
                elif self.insert(joint):
                    merged = True
                    progress = True
                else:
                    remaining.append(joint)
            pending = remaining

        if merged and pending:
            issue = MergeIssue(
                source_index=self.index,
                absorbed_index=other.index,
                unconsumed=list(pending),
            )
            if self._policy.strict_merge_validation:
                raise MergeInconsistencyError(issue)
            _LOGGER.warning(
                "Merge left fragment edges unconsumed",
                source=self.index,
                absorbed=other.index,
                unconsumed=[joint.name for joint in pending],
            )
            self.issues.append(issue)
        if merged:
            _LOGGER.debug(
                "Merged hierarchy fragment",
                source=self.index,
                absorbed=other.index,
                root=self.root.body_name,
            )
        return merged

    def find_loop_joints(self, joints: Sequence[Joint] | Iterable[Joint]) -> List[str]:
        """Flag redundant edges, visiting joints in their registration order.

        The first node attached via each joint is checked against the bodies
        already seen (seeded with the root body). A repeat body marks that
        node's edge as a loop joint. Returns the flagged joint names.
        """

        nodes = self.nodes()
        ordered: List[TreeNode] = []
        for joint in joints:
            for node in nodes:
                if node.joint_name == joint.name:
                    ordered.append(node)
                    break

        seen = {self.root.body_name}
        flagged: List[str] = []
        for node in ordered:
            if node.body_name in seen:
                node.is_loop_joint = True
                flagged.append(node.joint_name)
            else:
                seen.add(node.body_name)
        if flagged:
            _LOGGER.debug("Flagged loop joints", hierarchy=self.index, joints=flagged)
        return flagged

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def _log_chain(self, message: str, joint: Joint) -> None:
        if not self._policy.log_chain:
            return
        _LOGGER.debug(
            message,
            hierarchy=self.index,
            joint=joint.name,
            body0=joint.body0,
            body1=joint.body1,
            tree="\n".join(self.render()),
        )


__all__ = ["Hierarchy", "MergeInconsistencyError", "MergeIssue"]
