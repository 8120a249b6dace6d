"""Per-file derived metrics.

The calculator decorates a parser's ``AnalysisResult`` in place: line
classification, complexity rollups, maintainability index, technical debt
and dependency classification. Each step only reads what earlier steps
wrote, so the result is a pure function of (result, content).
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Union

from ..scanning.languages import LanguageProfile, get_language_profile
from ..scanning.models import AnalysisResult, Dependency
from .dependencies import DependencyClassifier

# Technical debt thresholds and weights
COMPLEXITY_THRESHOLD = 10
COMPLEXITY_WEIGHT = 0.5
PARAMETER_THRESHOLD = 5
PARAMETER_WEIGHT = 0.3
FUNCTION_LINES_THRESHOLD = 50
FUNCTION_LINES_WEIGHT = 0.1
CLASS_METHODS_THRESHOLD = 20
CLASS_METHODS_WEIGHT = 0.2
CLASS_LINES_THRESHOLD = 200
CLASS_LINES_WEIGHT = 0.05
LINE_LENGTH_THRESHOLD = 120
LINE_LENGTH_WEIGHT = 0.01
COMMENT_RATIO_THRESHOLD = 0.1
COMMENT_RATIO_WEIGHT = 10.0


class Calculator:
    """Computes file-level metrics.

    Args:
        internal_prefixes: Import prefixes treated as project-internal
    """

    def __init__(self, internal_prefixes: Iterable[str] = ()):
        self.classifier = DependencyClassifier(internal_prefixes)

    def calculate(self, result: AnalysisResult, content: Union[bytes, str]) -> AnalysisResult:
        """Decorate ``result`` with every derived metric and return it."""
        if isinstance(content, bytes):
            content = content.decode("utf-8-sig", errors="replace")

        self.classify_lines(result, content)
        self.rollup_complexity(result)
        result.maintainability_index = maintainability_index(result.code_lines, result.complexity)
        result.technical_debt = technical_debt(result)
        self.classify_dependencies(result)
        return result

    # ── Lines ──────────────────────────────────────────────────

    @staticmethod
    def classify_lines(result: AnalysisResult, text: str) -> None:
        lines = text.split("\n")
        profile = get_language_profile(result.language)

        code = comment = blank = 0
        total_length = max_length = 0
        open_block: Optional[str] = None

        for raw in lines:
            line = raw.rstrip("\r")
            total_length += len(line)
            max_length = max(max_length, len(line))
            stripped = line.strip()

            if open_block is not None:
                comment += 1
                if open_block in stripped:
                    open_block = None
                continue
            if not stripped:
                blank += 1
                continue
            if profile is None:
                code += 1
                continue

            kind, open_block = _classify_line(stripped, profile)
            if kind == "comment":
                comment += 1
            else:
                code += 1

        result.line_count = len(lines)
        result.code_lines = code
        result.comment_lines = comment
        result.blank_lines = blank
        result.max_line_length = max_length
        result.average_line_length = total_length / len(lines) if lines else 0.0

    # ── Complexity ─────────────────────────────────────────────

    @staticmethod
    def rollup_complexity(result: AnalysisResult) -> None:
        total = 0
        for fn in result.functions:
            fn.complexity = max(1, fn.complexity)
            fn.lines_of_code = fn.line_end - fn.line_start + 1
            fn.parameter_count = len(fn.parameters)
            total += fn.complexity

        for cls in result.classes:
            class_complexity = 0
            for method in cls.methods:
                method.complexity = max(1, method.complexity)
                method.lines_of_code = method.line_end - method.line_start + 1
                method.parameter_count = len(method.parameters)
                class_complexity += method.complexity
            cls.complexity = class_complexity
            cls.lines_of_code = cls.line_end - cls.line_start + 1
            cls.method_count = len(cls.methods)
            cls.field_count = len(cls.fields)
            total += class_complexity

        result.complexity = total

    # ── Dependencies ───────────────────────────────────────────

    def classify_dependencies(self, result: AnalysisResult) -> None:
        result.import_count = len(result.imports)
        dependencies = []
        for name in result.imports:
            kind, version = self.classifier.classify(name, result.language)
            dependencies.append(
                Dependency(name=name, kind=kind, file_path=result.file_path, version=version)
            )
        result.dependencies = dependencies


def _classify_line(stripped: str, profile: LanguageProfile) -> tuple[str, Optional[str]]:
    """
    Classify a non-blank line outside any block comment.

    Returns:
        ("comment" or "code", closing delimiter of a block comment left open)
    """
    if stripped.startswith(profile.line_comments):
        return "comment", None

    for opener, closer in profile.block_comments:
        if stripped.startswith(opener):
            rest = stripped[len(opener) :]
            return "comment", (None if closer in rest else closer)

        if profile.block_at_line_start:
            continue
        index = _find_outside_strings(stripped, opener)
        if index > 0:
            rest = stripped[index + len(opener) :]
            return "code", (None if closer in rest else closer)

    return "code", None


def _find_outside_strings(text: str, needle: str) -> int:
    """Index of ``needle`` outside double-quoted and backquoted literals, or -1."""
    quote: Optional[str] = None
    i = 0
    while i < len(text):
        ch = text[i]
        if quote is not None:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in "\"`":
            quote = ch
        elif text.startswith(needle, i):
            return i
        i += 1
    return -1


def maintainability_index(code_lines: int, complexity: int) -> float:
    """
    ``171 - 5.2 ln(V) - 0.23 C - 16.2 ln(L)`` clamped to [0, 100].

    ``L`` is the code line count and ``V`` approximates Halstead volume as
    ``2 * L``. A file without code lines scores 100.
    """
    if code_lines <= 0:
        return 100.0

    loc = max(code_lines, 1)
    volume = max(2.0 * loc, 1.0)
    mi = 171.0 - 5.2 * math.log(volume) - 0.23 * complexity - 16.2 * math.log(loc)
    return min(100.0, max(0.0, mi))


def technical_debt(result: AnalysisResult) -> float:
    """Additive penalty for oversized or under-documented code. Never negative."""
    debt = 0.0

    for fn in result.all_functions():
        if fn.complexity > COMPLEXITY_THRESHOLD:
            debt += (fn.complexity - COMPLEXITY_THRESHOLD) * COMPLEXITY_WEIGHT
        if fn.parameter_count > PARAMETER_THRESHOLD:
            debt += (fn.parameter_count - PARAMETER_THRESHOLD) * PARAMETER_WEIGHT
        if fn.lines_of_code > FUNCTION_LINES_THRESHOLD:
            debt += (fn.lines_of_code - FUNCTION_LINES_THRESHOLD) * FUNCTION_LINES_WEIGHT

    for cls in result.classes:
        if cls.method_count > CLASS_METHODS_THRESHOLD:
            debt += (cls.method_count - CLASS_METHODS_THRESHOLD) * CLASS_METHODS_WEIGHT
        if cls.lines_of_code > CLASS_LINES_THRESHOLD:
            debt += (cls.lines_of_code - CLASS_LINES_THRESHOLD) * CLASS_LINES_WEIGHT

    if result.max_line_length > LINE_LENGTH_THRESHOLD:
        debt += (result.max_line_length - LINE_LENGTH_THRESHOLD) * LINE_LENGTH_WEIGHT

    if result.code_lines > 0:
        ratio = result.comment_lines / result.code_lines
        if ratio < COMMENT_RATIO_THRESHOLD:
            debt += (COMMENT_RATIO_THRESHOLD - ratio) * COMMENT_RATIO_WEIGHT

    return max(0.0, debt)
