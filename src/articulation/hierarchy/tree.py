"""Tree node primitives for rigid body hierarchies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List

from articulation.entities.core import Joint, JointEdge


@dataclass(slots=True, eq=False)
class TreeNode:
    """One rigid body's position inside a hierarchy.

    ``joint_name`` is the joint attaching this node to its parent and is empty
    for the root. Children are owned exclusively and kept in graft order.
    Nodes compare by identity so handles stay valid when ``body_name`` is
    rewritten during a root rotation.
    """

    body_name: str
    joint_name: str = ""
    is_loop_joint: bool = False
    children: List[TreeNode] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Read-only handle API
    # ------------------------------------------------------------------
    @property
    def is_root(self) -> bool:
        return not self.joint_name

    def child_count(self) -> int:
        return len(self.children)

    def child(self, index: int) -> TreeNode | None:
        if 0 <= index < len(self.children):
            return self.children[index]
        return None

    def child_edge(self, index: int) -> JointEdge | None:
        """Return ``(joint, parent, child, is_loop_joint)`` for one child."""

        if not 0 <= index < len(self.children):
            return None
        return self.child_edges()[index]

    def child_edges(self) -> List[JointEdge]:
        return [
            JointEdge(
                joint=node.joint_name,
                parent=self.body_name,
                child=node.body_name,
                is_loop_joint=node.is_loop_joint,
            )
            for node in self.children
        ]

    # ------------------------------------------------------------------
    # Grafting
    # ------------------------------------------------------------------
    def graft(self, joint: Joint) -> TreeNode | None:
        """Attach ``joint`` at the first node touching one of its bodies.

        A node matching ``body0`` gains a new child for ``body1``. A node
        matching ``body1`` is rotated: a new ``body1`` node takes over its
        children and the node itself is renamed to ``body0``, so the node
        object survives. Otherwise the children are searched depth-first.
        Returns the created node, or ``None`` when nothing matched.
        """

        if self.body_name == joint.body0:
            created = TreeNode(body_name=joint.body1, joint_name=joint.name)
            self.children.append(created)
            return created
        if self.body_name == joint.body1:
            created = TreeNode(
                body_name=joint.body1,
                joint_name=joint.name,
                children=self.children,
            )
            self.children = [created]
            self.body_name = joint.body0
            return created
        for child in self.children:
            created = child.graft(joint)
            if created is not None:
                return created
        return None

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------
    def iter_nodes(self) -> Iterator[TreeNode]:
        """Traverse the subtree in pre-order, yielding self first."""

        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def iter_joints(self) -> Iterator[Joint]:
        """Yield every edge as a ``Joint(parent, child)`` record.

        Each node emits all of its direct child edges before descending, so a
        parent edge always precedes the edges below it.
        """

        for child in self.children:
            yield Joint(name=child.joint_name, body0=self.body_name, body1=child.body_name)
        for child in self.children:
            yield from child.iter_joints()

    def has_edge(self, joint: Joint) -> bool:
        """True when this subtree holds exactly ``joint`` as a parent -> child edge."""

        for node in self.iter_nodes():
            if node.body_name != joint.body0:
                continue
            for child in node.children:
                if child.body_name == joint.body1 and child.joint_name == joint.name:
                    return True
        return False

    def find_by_joint(self, joint_name: str) -> TreeNode | None:
        for node in self.iter_nodes():
            if node.joint_name == joint_name:
                return node
        return None

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------
    @property
    def descendant_count(self) -> int:
        return sum(1 + child.descendant_count for child in self.children)

    @property
    def height(self) -> int:
        """Longest root-to-leaf edge count below this node."""

        if not self.children:
            return 0
        return 1 + max(child.height for child in self.children)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "body": self.body_name,
            "joint": self.joint_name or None,
            "is_loop_joint": self.is_loop_joint,
            "children": [child.to_dict() for child in self.children],
        }

    def __repr__(self) -> str:
        return (
            f"<TreeNode {self.body_name!r} joint={self.joint_name!r} "
            f"loop={self.is_loop_joint} children={len(self.children)}>"
        )


def render_tree(node: TreeNode, *, indent: str = "    ", depth: int = 0) -> List[str]:
    """Render ``node``'s edges as indented lines.

    Every child edge of a node is listed before any grandchild, one indent
    unit deeper per level.
    """

    lines: List[str] = []
    prefix = indent * depth
    for edge in node.child_edges():
        loop = "true" if edge.is_loop_joint else "false"
        lines.append(f"{prefix}{edge.joint} : {edge.parent}->{edge.child} : loop({loop})")
    for child in node.children:
        lines.extend(render_tree(child, indent=indent, depth=depth + 1))
    return lines


__all__ = ["TreeNode", "render_tree"]
