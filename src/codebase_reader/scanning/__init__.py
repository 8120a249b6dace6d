"""File discovery and language parsing."""

from .base import Parser
from .go_parser import GoParser
from .languages import LANGUAGES, LanguageProfile, get_language_profile
from .models import (
    AnalysisResult,
    ClassInfo,
    ClassKind,
    Dependency,
    DependencyKind,
    FunctionInfo,
    ParseError,
)
from .python_parser import PythonParser
from .registry import ParserRegistry, extension_of, normalize_extension
from .walker import FileWalker, WalkResult, WalkStats


def default_registry() -> ParserRegistry:
    """A registry holding one instance of every shipped parser."""
    registry = ParserRegistry()
    registry.register(GoParser())
    registry.register(PythonParser())
    return registry


__all__ = [
    # Parser contract
    "Parser",
    "ParserRegistry",
    "default_registry",
    "normalize_extension",
    "extension_of",
    # Parsers
    "GoParser",
    "PythonParser",
    # Language profiles
    "LanguageProfile",
    "LANGUAGES",
    "get_language_profile",
    # Walking
    "FileWalker",
    "WalkResult",
    "WalkStats",
    # Models
    "AnalysisResult",
    "FunctionInfo",
    "ClassInfo",
    "ClassKind",
    "Dependency",
    "DependencyKind",
    "ParseError",
]
