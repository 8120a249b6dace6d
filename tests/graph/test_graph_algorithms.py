"""Tests for graph/algorithms.py - bounded cycle detection and depth."""

from codebase_reader.graph import DependencyGraph, GraphLimits, dependency_depth, detect_cycles


# ── detect_cycles ──────────────────────────────────────────────


class TestDetectCycles:
    def test_three_node_cycle(self):
        cycles = detect_cycles({"A": ["B"], "B": ["C"], "C": ["A"]})
        assert cycles == [["A", "B", "C", "A"]]

    def test_cycle_starts_and_ends_with_same_node(self):
        for cycle in detect_cycles({"x": ["y"], "y": ["x"]}):
            assert cycle[0] == cycle[-1]
            assert len(set(cycle)) >= 2

    def test_acyclic_graph(self):
        assert detect_cycles({"A": ["B"], "B": ["C"], "C": []}) == []

    def test_empty_graph(self):
        assert detect_cycles({}) == []

    def test_self_edge_ignored(self):
        assert detect_cycles({"A": ["A", "B"], "B": []}) == []

    def test_cycle_suffix_excludes_entry_path(self):
        """The reported cycle starts where the path re-enters itself."""
        cycles = detect_cycles({"A": ["B"], "B": ["C"], "C": ["D"], "D": ["B"]})
        assert cycles == [["B", "C", "D", "B"]]

    def test_one_cycle_per_root(self):
        graph = {"A": ["B", "C"], "B": ["A"], "C": ["A"]}
        assert len(detect_cycles(graph)) == 1

    def test_disjoint_cycles_each_reported(self):
        graph = {"A": ["B"], "B": ["A"], "X": ["Y"], "Y": ["X"]}
        assert detect_cycles(graph) == [["A", "B", "A"], ["X", "Y", "X"]]

    def test_edges_to_unknown_nodes(self):
        assert detect_cycles({"A": ["fmt", "os"]}) == []

    def test_depth_limit_terminates(self):
        chain = {str(i): [str(i + 1)] for i in range(50)}
        chain["50"] = ["0"]
        assert detect_cycles(chain, GraphLimits(max_depth=10)) == []

    def test_node_limit_terminates(self):
        graph = {str(i): [str(i + 1)] for i in range(1000)}
        assert detect_cycles(graph, GraphLimits(max_nodes=5)) == []

    def test_long_chain_does_not_recurse(self):
        """Deep graphs are walked iteratively."""
        n = 5000
        graph = {str(i): [str(i + 1)] for i in range(n)}
        graph[str(n)] = ["0"]
        cycles = detect_cycles(graph, GraphLimits(max_depth=10_000))
        assert len(cycles) == 1
        assert len(cycles[0]) == n + 2


# ── dependency_depth ───────────────────────────────────────────


class TestDependencyDepth:
    def test_chain(self):
        assert dependency_depth({"A": ["B"], "B": ["C"], "C": []}) >= 3

    def test_chain_counts_nodes(self):
        assert dependency_depth({"A": ["B"], "B": ["C"], "C": []}) == 3

    def test_empty_graph(self):
        assert dependency_depth({}) == 0

    def test_single_node(self):
        assert dependency_depth({"A": []}) == 1

    def test_leaf_outside_map_counts(self):
        assert dependency_depth({"A": ["B"]}) == 2

    def test_cycle_terminates(self):
        assert dependency_depth({"A": ["B"], "B": ["C"], "C": ["A"]}) == 3

    def test_longest_branch_wins(self):
        graph = {"A": ["B", "D"], "B": ["C"], "C": [], "D": []}
        assert dependency_depth(graph) == 3

    def test_diamond(self):
        graph = {"A": ["B", "C"], "B": ["D"], "C": ["D"], "D": ["E"]}
        assert dependency_depth(graph) == 4

    def test_depth_limit_bounds_result(self):
        chain = {str(i): [str(i + 1)] for i in range(100)}
        assert dependency_depth(chain, GraphLimits(max_depth=10)) <= 10


# ── DependencyGraph ────────────────────────────────────────────


class TestDependencyGraph:
    def test_edge_count_spans_all_kinds(self):
        graph = DependencyGraph(
            internal={"a.go": ["./b"]},
            external={"a.go": ["github.com/x/y"]},
            standard={"a.go": ["fmt", "os"]},
        )
        assert graph.edge_count == 4
        assert not graph.has_cycles

    def test_unused_is_reserved(self):
        assert DependencyGraph().unused == []
