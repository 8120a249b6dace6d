"""Project-level metric models produced by the aggregator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ..graph.models import DependencyGraph
from ..scanning.models import AnalysisResult


@dataclass
class ProjectMetrics:
    """Metrics folded over every analyzed file.

    Attributes:
        total_complexity: Sum of file complexities
        average_complexity: Mean file complexity
        max_complexity: Highest file complexity
        maintainability_index: Mean file maintainability index (0-100)
        technical_debt: Sum of file debt scores
        documentation_ratio: Percentage of documented functions, methods
            and classes
        code_to_comment_ratio: Code lines per comment line (0 without comments)
        code_duplication: Reserved, always 0
        test_coverage: Reserved, always 0
    """

    total_complexity: int = 0
    average_complexity: float = 0.0
    max_complexity: int = 0
    maintainability_index: float = 0.0
    technical_debt: float = 0.0
    documentation_ratio: float = 0.0
    code_to_comment_ratio: float = 0.0
    code_duplication: float = 0.0
    test_coverage: float = 0.0


@dataclass
class LanguageStats:
    """Rollup of the files of one language, project-wide or per directory."""

    file_count: int = 0
    line_count: int = 0
    function_count: int = 0
    class_count: int = 0
    complexity: int = 0
    average_complexity: float = 0.0
    max_complexity: int = 0
    maintainability_index: float = 0.0
    technical_debt: float = 0.0
    code_lines: int = 0
    comment_lines: int = 0
    blank_lines: int = 0
    test_files: int = 0


@dataclass
class DirectoryStats:
    """Rollup of the files directly inside one directory."""

    path: str
    file_count: int = 0
    line_count: int = 0
    complexity: int = 0
    maintainability_index: float = 0.0
    languages: dict[str, LanguageStats] = field(default_factory=dict)


@dataclass
class QualityScore:
    """Weighted composite quality score and its inputs."""

    overall: float = 0.0
    grade: str = "F"
    maintainability: float = 0.0
    complexity: float = 0.0
    documentation: float = 0.0
    test_coverage: float = 0.0
    code_duplication: float = 0.0


@dataclass
class FileFailure:
    """A file that could not be read or parsed during a run."""

    path: str
    reason: str


@dataclass
class EnhancedProjectAnalysis:
    """Terminal artifact of a directory run. Not mutated after aggregation."""

    root_path: str
    total_files: int = 0
    total_lines: int = 0
    languages: dict[str, LanguageStats] = field(default_factory=dict)
    file_results: list[AnalysisResult] = field(default_factory=list)
    generated_at: datetime = field(default_factory=datetime.now)
    analysis_duration: float = 0.0
    project_metrics: ProjectMetrics = field(default_factory=ProjectMetrics)
    directory_stats: dict[str, DirectoryStats] = field(default_factory=dict)
    dependency_graph: DependencyGraph = field(default_factory=DependencyGraph)
    quality_score: QualityScore = field(default_factory=QualityScore)
    failures: list[FileFailure] = field(default_factory=list)
    walk_errors: int = 0

    @property
    def failed_files(self) -> int:
        return len(self.failures)
