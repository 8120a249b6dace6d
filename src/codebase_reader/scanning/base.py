"""Parser contract shared by every language implementation."""

from abc import ABC, abstractmethod

from ..exceptions import ParsingError
from .models import AnalysisResult


class Parser(ABC):
    """Abstract base class for language parsers.

    Implementations must not abort on malformed input: syntax problems are
    recorded as ``ParseError`` entries on a still-valid partial result. Only
    content that cannot be read at all raises ``ParsingError``.
    """

    @abstractmethod
    def parse(self, path: str, content: bytes) -> AnalysisResult:
        """
        Analyze file content.

        Args:
            path: File path, recorded on the result
            content: Raw file bytes

        Returns:
            Structural analysis of the file

        Raises:
            ParsingError: If the content cannot be decoded
        """
        pass

    @abstractmethod
    def supported_extensions(self) -> set[str]:
        """
        File extensions handled by this parser.

        Returns:
            Lower-case, dot-prefixed extensions (e.g. {".py"})
        """
        pass

    @abstractmethod
    def language_name(self) -> str:
        """Human-readable language name (e.g. "Python")."""
        pass

    def decode(self, path: str, content: bytes) -> str:
        """Decode file bytes as UTF-8, tolerating a byte-order mark."""
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParsingError(path, self.language_name(), f"Encoding error: {e}")

    def new_result(self, path: str, text: str) -> AnalysisResult:
        """Create an empty result with the physical line count filled in."""
        return AnalysisResult(
            file_path=path,
            language=self.language_name(),
            line_count=len(text.split("\n")),
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(language={self.language_name()!r})"
