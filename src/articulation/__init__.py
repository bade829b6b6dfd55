"""Derive rigid body hierarchies from unordered bodies and joints."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("articulation")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.1.0"

from .config.settings import Settings, get_settings
from .entities import Joint, JointEdge, RegistrationStatus, RigidBody
from .hierarchy import (
    HierarchyBuilder,
    MergeInconsistencyError,
    TreeNode,
    assemble_forest,
)

__all__ = [
    "__version__",
    "Settings",
    "get_settings",
    "RigidBody",
    "Joint",
    "JointEdge",
    "RegistrationStatus",
    "HierarchyBuilder",
    "TreeNode",
    "MergeInconsistencyError",
    "assemble_forest",
]
