"""Composite quality score and letter grades."""

from .models import QualityScore

WEIGHTS = {
    "maintainability": 0.30,
    "complexity": 0.25,
    "documentation": 0.20,
    "test_coverage": 0.15,
    "duplication": 0.10,
}

# (minimum score, grade), highest first
GRADE_THRESHOLDS = [(90.0, "A"), (80.0, "B"), (70.0, "C"), (60.0, "D")]


def grade_for(score: float) -> str:
    """Letter grade for a 0-100 score: >=90 A, >=80 B, >=70 C, >=60 D, else F."""
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"


def complexity_score(average_complexity: float) -> float:
    """Normalize average file complexity to 0-100 (``100 - 5 * avg``, clamped)."""
    return min(100.0, max(0.0, 100.0 - average_complexity * 5))


def quality_score(
    maintainability: float,
    average_complexity: float,
    documentation: float,
    test_coverage: float = 0.0,
    duplication: float = 0.0,
) -> QualityScore:
    """
    Weighted composite of the project's quality inputs.

    Args:
        maintainability: Mean maintainability index (0-100)
        average_complexity: Mean file cyclomatic complexity
        documentation: Documentation ratio (0-100)
        test_coverage: Test coverage percentage (reserved, 0)
        duplication: Duplication percentage (reserved, 0)

    Returns:
        QualityScore with overall score, grade and component values
    """
    normalized = complexity_score(average_complexity)
    overall = (
        maintainability * WEIGHTS["maintainability"]
        + max(0.0, 100.0 - normalized) * WEIGHTS["complexity"]
        + documentation * WEIGHTS["documentation"]
        + test_coverage * WEIGHTS["test_coverage"]
        + max(0.0, 100.0 - duplication) * WEIGHTS["duplication"]
    )
    return QualityScore(
        overall=overall,
        grade=grade_for(overall),
        maintainability=maintainability,
        complexity=normalized,
        documentation=documentation,
        test_coverage=test_coverage,
        code_duplication=duplication,
    )
