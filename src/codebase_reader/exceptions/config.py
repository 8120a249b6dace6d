"""Configuration exceptions: paths, settings, parser registration."""

from pathlib import Path
from typing import Any, Union

from .base import CodebaseReaderError


class ConfigurationError(CodebaseReaderError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a provided path is invalid."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class InvalidParserError(ConfigurationError):
    """Raised when a parser cannot be registered."""

    def __init__(self, reason: str, parser: Any = None):
        details = {"reason": reason}
        if parser is not None:
            details["parser"] = type(parser).__name__
        super().__init__(f"Invalid parser: {reason}", details=details)
        self.reason = reason
        self.parser = parser
