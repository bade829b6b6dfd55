"""Configuration utilities for the articulation toolkit."""

from .policies import HierarchyPolicy, Policies, load_policies
from .settings import PathsConfig, Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "PathsConfig",
    "Policies",
    "HierarchyPolicy",
    "load_policies",
]
