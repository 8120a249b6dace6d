"""Analysis-related exceptions: file access, parsing, unsupported files."""

from pathlib import Path
from typing import List, Union

from .base import CodebaseReaderError

PathLike = Union[str, Path]


class AnalysisError(CodebaseReaderError):
    """Base class for analysis-related errors."""

    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed, read, or exceeds the size ceiling."""

    def __init__(self, filepath: PathLike, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when file content cannot be parsed at all.

    Recoverable syntax problems are recorded as ``ParseError`` entries on the
    result instead; this exception is reserved for content a parser cannot
    even begin to read (e.g. undecodable bytes).
    """

    def __init__(self, filepath: PathLike, language: str, reason: str):
        super().__init__(
            f"Failed to parse {language} file: {filepath}",
            details={"filepath": str(filepath), "language": language, "reason": reason},
        )
        self.filepath = filepath
        self.language = language
        self.reason = reason


class UnsupportedExtensionError(AnalysisError):
    """Raised when no parser is registered for a file's extension."""

    def __init__(self, filepath: PathLike, extension: str, supported: List[str]):
        super().__init__(
            f"No parser registered for extension: {extension or '<none>'}",
            details={"filepath": str(filepath), "supported": ", ".join(sorted(supported))},
        )
        self.filepath = filepath
        self.extension = extension
        self.supported = supported


class AnalysisTimeoutError(AnalysisError):
    """Raised when a directory run exceeds its configured deadline."""

    def __init__(self, timeout_seconds: float, completed: int, total: int):
        super().__init__(
            f"Analysis timed out after {timeout_seconds}s",
            details={"completed": str(completed), "total": str(total)},
        )
        self.timeout_seconds = timeout_seconds
        self.completed = completed
        self.total = total
