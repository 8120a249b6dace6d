"""Concurrent analysis engine."""

from .engine import Engine, ProgressCallback, discover_internal_prefixes
from .models import AnalysisJob, JobResult
from .pool import WorkerPool

__all__ = [
    "Engine",
    "ProgressCallback",
    "WorkerPool",
    "AnalysisJob",
    "JobResult",
    "discover_internal_prefixes",
]
