"""Tests for metrics/aggregator.py - folding file results into a project view."""

import os

import pytest

from codebase_reader.graph import GraphLimits
from codebase_reader.metrics import Aggregator, is_test_file
from codebase_reader.scanning import (
    AnalysisResult,
    ClassInfo,
    Dependency,
    DependencyKind,
    FunctionInfo,
)

ROOT = os.path.join(os.sep, "project")


def _result(rel_path, language="Go", complexity=1, mi=80.0, imports=(), **kwargs):
    path = os.path.join(ROOT, *rel_path.split("/"))
    result = AnalysisResult(
        file_path=path,
        language=language,
        complexity=complexity,
        maintainability_index=mi,
        **kwargs,
    )
    result.dependencies = [
        Dependency(name=name, kind=kind, file_path=path) for name, kind in imports
    ]
    return result


# ── test file detection ────────────────────────────────────────


class TestIsTestFile:
    @pytest.mark.parametrize(
        "path",
        ["cart_test.go", "test_cart.py", "cart.test.js", "cart.spec.ts", "cart_spec.rb", "TEST_X.PY"],
    )
    def test_recognized(self, path):
        assert is_test_file(path)

    @pytest.mark.parametrize("path", ["cart.go", "testing.py", "contest.py"])
    def test_not_test_files(self, path):
        assert not is_test_file(path)


# ── project metrics ────────────────────────────────────────────


class TestProjectMetrics:
    def test_empty(self):
        analysis = Aggregator().aggregate([], ROOT)
        assert analysis.total_files == 0
        assert analysis.project_metrics.average_complexity == 0.0
        assert analysis.project_metrics.documentation_ratio == 0.0
        assert analysis.dependency_graph.cycles == []

    def test_means_and_max(self):
        results = [
            _result("a.go", complexity=2, mi=90.0, technical_debt=1.5),
            _result("b.go", complexity=6, mi=70.0, technical_debt=0.5),
        ]
        metrics = Aggregator().aggregate(results, ROOT).project_metrics
        assert metrics.total_complexity == 8
        assert metrics.average_complexity == 4.0
        assert metrics.max_complexity == 6
        assert metrics.maintainability_index == 80.0
        assert metrics.technical_debt == 2.0

    def test_documentation_ratio_counts_every_entity(self):
        documented = FunctionInfo("f", 1, 2, has_docstring=True)
        bare = FunctionInfo("g", 3, 4)
        method = FunctionInfo("m", 6, 7, has_docstring=True)
        cls = ClassInfo("C", 5, 8, methods=[method])
        results = [_result("a.py", language="Python", functions=[documented, bare], classes=[cls])]

        metrics = Aggregator().aggregate(results, ROOT).project_metrics
        # f, m documented; g, C not
        assert metrics.documentation_ratio == pytest.approx(50.0)

    def test_code_to_comment_ratio(self):
        results = [
            _result("a.go", code_lines=30, comment_lines=5),
            _result("b.go", code_lines=10, comment_lines=5),
        ]
        assert Aggregator().aggregate(results, ROOT).project_metrics.code_to_comment_ratio == 4.0

    def test_no_comments_ratio_is_zero(self):
        results = [_result("a.go", code_lines=30)]
        assert Aggregator().aggregate(results, ROOT).project_metrics.code_to_comment_ratio == 0.0

    def test_totals(self):
        results = [_result("a.go", line_count=10), _result("b.go", line_count=5)]
        analysis = Aggregator().aggregate(results, ROOT)
        assert analysis.total_files == 2
        assert analysis.total_lines == 15
        assert analysis.file_results == results

    def test_inputs_not_mutated(self):
        result = _result("a.go", complexity=3, mi=50.0)
        Aggregator().aggregate([result], ROOT)
        assert (result.complexity, result.maintainability_index) == (3, 50.0)


# ── rollups ────────────────────────────────────────────────────


class TestRollups:
    def test_language_stats(self):
        results = [
            _result("a.go", complexity=2, mi=90.0),
            _result("a_test.go", complexity=4, mi=70.0),
            _result("tool.py", language="Python", complexity=1),
        ]
        languages = Aggregator().aggregate(results, ROOT).languages
        assert list(languages) == ["Go", "Python"]
        go = languages["Go"]
        assert go.file_count == 2
        assert go.complexity == 6
        assert go.average_complexity == 3.0
        assert go.maintainability_index == 80.0
        assert go.max_complexity == 4
        assert go.test_files == 1

    def test_directory_stats(self):
        results = [
            _result("main.go", complexity=1, line_count=10),
            _result("cart/cart.go", complexity=3, line_count=20, mi=60.0),
            _result("cart/cart_test.go", complexity=1, line_count=5, mi=100.0),
            _result("cart/tool.py", language="Python", complexity=2, mi=50.0),
        ]
        dirs = Aggregator().aggregate(results, ROOT).directory_stats
        assert list(dirs) == [".", "cart"]

        cart = dirs["cart"]
        assert cart.path == "cart"
        assert cart.file_count == 3
        assert cart.line_count == 25
        assert cart.complexity == 6
        assert cart.languages["Go"].file_count == 2
        assert cart.languages["Go"].average_complexity == 2.0
        assert cart.languages["Go"].maintainability_index == 80.0
        assert cart.languages["Go"].test_files == 1
        # Mean of the per-language averages
        assert cart.maintainability_index == pytest.approx(65.0)


# ── dependency graph ───────────────────────────────────────────


class TestDependencyGraph:
    def test_partitioned_by_kind(self):
        results = [
            _result(
                "a.go",
                imports=[
                    ("fmt", DependencyKind.STANDARD),
                    ("github.com/x/y", DependencyKind.EXTERNAL),
                    ("./b", DependencyKind.INTERNAL),
                ],
            )
        ]
        graph = Aggregator().aggregate(results, ROOT).dependency_graph
        path = results[0].file_path
        assert graph.standard == {path: ["fmt"]}
        assert graph.external == {path: ["github.com/x/y"]}
        assert graph.internal == {path: ["./b"]}
        assert graph.max_depth == 2

    def test_cycles_over_internal_edges(self):
        a = os.path.join(ROOT, "a.py")
        b = os.path.join(ROOT, "b.py")
        results = [
            _result("a.py", language="Python", imports=[(b, DependencyKind.INTERNAL)]),
            _result("b.py", language="Python", imports=[(a, DependencyKind.INTERNAL)]),
        ]
        graph = Aggregator().aggregate(results, ROOT).dependency_graph
        assert graph.has_cycles
        assert graph.cycles == [[a, b, a]]

    def test_limits_are_applied(self):
        names = [os.path.join(ROOT, f"{i}.go") for i in range(20)]
        results = [
            _result(f"{i}.go", imports=[(names[i + 1], DependencyKind.INTERNAL)])
            for i in range(19)
        ]
        graph = Aggregator(GraphLimits(max_depth=5)).aggregate(results, ROOT).dependency_graph
        assert graph.max_depth <= 5


# ── quality score ──────────────────────────────────────────────


class TestQuality:
    def test_score_derived_from_project_metrics(self):
        results = [_result("a.go", complexity=20, mi=100.0)]
        analysis = Aggregator().aggregate(results, ROOT)
        # mi 100, complexity term 25, no documentation, duplication term 10
        assert analysis.quality_score.overall == pytest.approx(65.0)
        assert analysis.quality_score.grade == "D"
