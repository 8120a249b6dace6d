"""Fold per-file results into one project-level analysis."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from ..graph import DependencyGraph, GraphLimits, dependency_depth, detect_cycles
from ..logging_config import get_logger
from ..scanning.models import AnalysisResult, DependencyKind
from .models import (
    DirectoryStats,
    EnhancedProjectAnalysis,
    LanguageStats,
    ProjectMetrics,
)
from .scoring import quality_score

logger = get_logger(__name__)

TEST_FILE_PATTERNS = ("_test.", "test_", ".test.", "spec.", "_spec.")


def is_test_file(path: str) -> bool:
    """Test files are recognized by name (case-insensitive substrings)."""
    name = Path(path).name.lower()
    return any(pattern in name for pattern in TEST_FILE_PATTERNS)


class Aggregator:
    """Builds an ``EnhancedProjectAnalysis`` from calculated file results."""

    def __init__(self, limits: Optional[GraphLimits] = None):
        self.limits = limits or GraphLimits()

    def aggregate(self, results: Sequence[AnalysisResult], root: str) -> EnhancedProjectAnalysis:
        """
        Compute project metrics, language and directory rollups, the
        dependency graph (with cycles and depth) and the quality score.

        The input results are only read.
        """
        analysis = EnhancedProjectAnalysis(
            root_path=root,
            total_files=len(results),
            total_lines=sum(r.line_count for r in results),
            file_results=list(results),
        )
        analysis.project_metrics = self.project_metrics(results)
        analysis.languages = self.language_stats(results)
        analysis.directory_stats = self.directory_stats(results, root)
        analysis.dependency_graph = self.dependency_graph(results)

        metrics = analysis.project_metrics
        analysis.quality_score = quality_score(
            maintainability=metrics.maintainability_index,
            average_complexity=metrics.average_complexity,
            documentation=metrics.documentation_ratio,
            test_coverage=metrics.test_coverage,
            duplication=metrics.code_duplication,
        )

        logger.debug(
            f"Aggregated {analysis.total_files} files: "
            f"grade {analysis.quality_score.grade}, "
            f"{len(analysis.dependency_graph.cycles)} cycles"
        )
        return analysis

    # ── Project metrics ────────────────────────────────────────

    @staticmethod
    def project_metrics(results: Sequence[AnalysisResult]) -> ProjectMetrics:
        metrics = ProjectMetrics()
        if not results:
            return metrics

        total_mi = 0.0
        code_lines = comment_lines = 0
        documented = entities = 0

        for result in results:
            metrics.total_complexity += result.complexity
            metrics.max_complexity = max(metrics.max_complexity, result.complexity)
            metrics.technical_debt += result.technical_debt
            total_mi += result.maintainability_index
            code_lines += result.code_lines
            comment_lines += result.comment_lines

            for fn in result.functions:
                entities += 1
                documented += fn.has_docstring
            for cls in result.classes:
                entities += 1
                documented += cls.has_docstring
                for method in cls.methods:
                    entities += 1
                    documented += method.has_docstring

        count = len(results)
        metrics.average_complexity = metrics.total_complexity / count
        metrics.maintainability_index = total_mi / count
        if entities:
            metrics.documentation_ratio = documented / entities * 100
        if comment_lines:
            metrics.code_to_comment_ratio = code_lines / comment_lines
        return metrics

    # ── Language and directory rollups ─────────────────────────

    @staticmethod
    def _add(stats: LanguageStats, result: AnalysisResult) -> None:
        stats.file_count += 1
        stats.line_count += result.line_count
        stats.function_count += result.function_count
        stats.class_count += result.class_count
        stats.complexity += result.complexity
        stats.max_complexity = max(stats.max_complexity, result.complexity)
        stats.maintainability_index += result.maintainability_index
        stats.technical_debt += result.technical_debt
        stats.code_lines += result.code_lines
        stats.comment_lines += result.comment_lines
        stats.blank_lines += result.blank_lines
        if is_test_file(result.file_path):
            stats.test_files += 1

    @staticmethod
    def _finish(stats: LanguageStats) -> None:
        # maintainability_index holds a running sum until here
        if stats.file_count:
            stats.average_complexity = stats.complexity / stats.file_count
            stats.maintainability_index /= stats.file_count

    def language_stats(self, results: Sequence[AnalysisResult]) -> dict[str, LanguageStats]:
        languages: dict[str, LanguageStats] = {}
        for result in results:
            self._add(languages.setdefault(result.language, LanguageStats()), result)
        for stats in languages.values():
            self._finish(stats)
        return dict(sorted(languages.items()))

    def directory_stats(
        self, results: Sequence[AnalysisResult], root: str
    ) -> dict[str, DirectoryStats]:
        directories: dict[str, DirectoryStats] = {}

        for result in results:
            directory = _relative_dir(result.file_path, root)
            stats = directories.get(directory)
            if stats is None:
                stats = directories[directory] = DirectoryStats(path=directory)
            stats.file_count += 1
            stats.line_count += result.line_count
            stats.complexity += result.complexity
            self._add(stats.languages.setdefault(result.language, LanguageStats()), result)

        for stats in directories.values():
            for lang_stats in stats.languages.values():
                self._finish(lang_stats)
            if stats.languages:
                stats.maintainability_index = sum(
                    s.maintainability_index for s in stats.languages.values()
                ) / len(stats.languages)

        return dict(sorted(directories.items()))

    # ── Dependency graph ───────────────────────────────────────

    def dependency_graph(self, results: Sequence[AnalysisResult]) -> DependencyGraph:
        graph = DependencyGraph()
        maps = {
            DependencyKind.INTERNAL: graph.internal,
            DependencyKind.EXTERNAL: graph.external,
            DependencyKind.STANDARD: graph.standard,
        }
        for result in results:
            for dep in result.dependencies:
                maps[dep.kind].setdefault(result.file_path, []).append(dep.name)

        graph.cycles = detect_cycles(graph.internal, self.limits)
        graph.max_depth = dependency_depth(graph.internal, self.limits)
        return graph


def _relative_dir(path: str, root: str) -> str:
    directory = Path(path).parent
    if root and directory.is_relative_to(root):
        directory = directory.relative_to(root)
    return directory.as_posix()
