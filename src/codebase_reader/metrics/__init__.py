"""File and project metrics."""

from .aggregator import TEST_FILE_PATTERNS, Aggregator, is_test_file
from .calculator import Calculator, maintainability_index, technical_debt
from .dependencies import DependencyClassifier
from .models import (
    DirectoryStats,
    EnhancedProjectAnalysis,
    FileFailure,
    LanguageStats,
    ProjectMetrics,
    QualityScore,
)
from .scoring import complexity_score, grade_for, quality_score

__all__ = [
    "Aggregator",
    "Calculator",
    "DependencyClassifier",
    "maintainability_index",
    "technical_debt",
    "quality_score",
    "complexity_score",
    "grade_for",
    "is_test_file",
    "TEST_FILE_PATTERNS",
    "ProjectMetrics",
    "LanguageStats",
    "DirectoryStats",
    "QualityScore",
    "FileFailure",
    "EnhancedProjectAnalysis",
]
