"""Hierarchy construction public API."""

from __future__ import annotations

from .builder import HierarchyBuilder
from .hierarchy import Hierarchy, MergeInconsistencyError, MergeIssue
from .io import Dataset, DatasetError, export_forest, load_dataset, populate_builder, render_forest
from .main import AssemblyResult, assemble_forest
from .registry import EntityRegistry
from .tree import TreeNode, render_tree
from .validator import ForestChecker, ForestValidator, ValidationReport

__all__ = [
    "assemble_forest",
    "AssemblyResult",
    "HierarchyBuilder",
    "Hierarchy",
    "MergeInconsistencyError",
    "MergeIssue",
    "EntityRegistry",
    "TreeNode",
    "render_tree",
    "Dataset",
    "DatasetError",
    "load_dataset",
    "populate_builder",
    "export_forest",
    "render_forest",
    "ForestChecker",
    "ForestValidator",
    "ValidationReport",
]
