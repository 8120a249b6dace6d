"""Exception hierarchy for Codebase Reader."""

from .analysis import (
    AnalysisError,
    AnalysisTimeoutError,
    FileAccessError,
    ParsingError,
    UnsupportedExtensionError,
)
from .base import CodebaseReaderError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidParserError,
    InvalidPathError,
)
from .engine import EngineError, PoolNotRunningError, QueueFullError

__all__ = [
    "CodebaseReaderError",
    "AnalysisError",
    "AnalysisTimeoutError",
    "FileAccessError",
    "ParsingError",
    "UnsupportedExtensionError",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidParserError",
    "InvalidPathError",
    "EngineError",
    "PoolNotRunningError",
    "QueueFullError",
]
