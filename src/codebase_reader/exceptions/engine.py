"""Worker pool exceptions."""

from .base import CodebaseReaderError


class EngineError(CodebaseReaderError):
    """Base class for worker pool errors."""

    pass


class QueueFullError(EngineError):
    """Raised when a job is submitted while the bounded job queue is full."""

    def __init__(self, capacity: int):
        super().__init__("Job queue is full", details={"capacity": str(capacity)})
        self.capacity = capacity


class PoolNotRunningError(EngineError):
    """Raised when a job is submitted to a stopped pool."""

    def __init__(self) -> None:
        super().__init__("Worker pool is not running")
