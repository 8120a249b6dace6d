"""Dependency graph model and bounded graph algorithms."""

from .algorithms import DEFAULT_LIMITS, dependency_depth, detect_cycles
from .models import DependencyGraph, GraphLimits

__all__ = [
    "DependencyGraph",
    "GraphLimits",
    "DEFAULT_LIMITS",
    "detect_cycles",
    "dependency_depth",
]
