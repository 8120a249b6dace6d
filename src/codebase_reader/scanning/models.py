"""Per-file structural models produced by parsers.

A parser creates an ``AnalysisResult``; the metrics calculator then decorates
it in place (line classification, rollups, maintainability, debt,
dependencies). After that it is treated as read-only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class DependencyKind(str, Enum):
    """Classification of an import."""

    STANDARD = "standard"
    INTERNAL = "internal"
    EXTERNAL = "external"


class ClassKind(str, Enum):
    """What a ``ClassInfo`` was declared as."""

    CLASS = "class"
    STRUCT = "struct"
    INTERFACE = "interface"


@dataclass
class ParseError:
    """A recoverable syntax problem found while parsing.

    Attributes:
        line: 1-indexed line number (0 if unknown)
        column: 1-indexed column number (0 if unknown)
        message: Human-readable description
    """

    line: int
    column: int
    message: str


@dataclass
class FunctionInfo:
    """A function or method.

    Attributes:
        name: Function name
        line_start: First line (1-indexed)
        line_end: Last line (1-indexed)
        parameters: Parameter declarations as written
        return_type: Declared return type ("" if none)
        complexity: Cyclomatic complexity, base 1
        is_public: Exported/public by the language's convention
        is_async: Declared async
        has_docstring: Has a docstring or doc comment
        lines_of_code: Line span, set by the calculator
        parameter_count: Number of parameters, set by the calculator
    """

    name: str
    line_start: int
    line_end: int
    parameters: list[str] = field(default_factory=list)
    return_type: str = ""
    complexity: int = 1
    is_public: bool = False
    is_async: bool = False
    has_docstring: bool = False
    lines_of_code: int = 0
    parameter_count: int = 0


@dataclass
class ClassInfo:
    """A class, struct or interface.

    Attributes:
        name: Type name
        line_start: First line (1-indexed)
        line_end: Last line (1-indexed)
        kind: class, struct or interface
        methods: Methods declared in the body
        fields: Field descriptors as written
        base_classes: Base class names (empty where the language has none)
        is_public: Exported/public by the language's convention
        has_docstring: Has a docstring or doc comment
        complexity: Sum of method complexities, set by the calculator
        lines_of_code: Line span, set by the calculator
        method_count: Number of methods, set by the calculator
        field_count: Number of fields, set by the calculator
    """

    name: str
    line_start: int
    line_end: int
    kind: ClassKind = ClassKind.CLASS
    methods: list[FunctionInfo] = field(default_factory=list)
    fields: list[str] = field(default_factory=list)
    base_classes: list[str] = field(default_factory=list)
    is_public: bool = False
    has_docstring: bool = False
    complexity: int = 0
    lines_of_code: int = 0
    method_count: int = 0
    field_count: int = 0


@dataclass
class Dependency:
    """An import made by a file.

    ``usage_count`` is always 1: usage sites are not counted.
    """

    name: str
    kind: DependencyKind
    file_path: str
    usage_count: int = 1
    version: Optional[str] = None


@dataclass
class AnalysisResult:
    """Complete analysis of a single file."""

    file_path: str
    language: str
    line_count: int = 0
    code_lines: int = 0
    comment_lines: int = 0
    blank_lines: int = 0
    functions: list[FunctionInfo] = field(default_factory=list)
    classes: list[ClassInfo] = field(default_factory=list)
    imports: list[str] = field(default_factory=list)
    dependencies: list[Dependency] = field(default_factory=list)
    complexity: int = 0
    maintainability_index: float = 100.0
    technical_debt: float = 0.0
    errors: list[ParseError] = field(default_factory=list)
    analyzed_at: datetime = field(default_factory=datetime.now)

    max_line_length: int = 0
    average_line_length: float = 0.0
    import_count: int = 0

    # Reserved; never computed.
    code_duplication: float = 0.0
    test_coverage: float = 0.0

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def function_count(self) -> int:
        """Top-level functions plus methods."""
        return len(self.functions) + sum(len(c.methods) for c in self.classes)

    @property
    def class_count(self) -> int:
        return len(self.classes)

    def all_functions(self) -> list[FunctionInfo]:
        """Top-level functions followed by every class's methods."""
        result = list(self.functions)
        for cls in self.classes:
            result.extend(cls.methods)
        return result
