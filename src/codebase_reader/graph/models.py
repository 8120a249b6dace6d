"""Dependency graph models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class GraphLimits:
    """Safety bounds for traversals over arbitrary dependency graphs.

    Attributes:
        max_depth: Longest path a traversal follows before backing off
        max_nodes: Total node expansions before a traversal gives up
    """

    max_depth: int = 1000
    max_nodes: int = 100_000


@dataclass
class DependencyGraph:
    """Per-file dependencies partitioned by classification.

    Edges are directed: ``internal[A]`` containing B means file A imports B.
    Cycles and depth are computed over the internal map only.
    """

    internal: dict[str, list[str]] = field(default_factory=dict)
    external: dict[str, list[str]] = field(default_factory=dict)
    standard: dict[str, list[str]] = field(default_factory=dict)
    cycles: list[list[str]] = field(default_factory=list)
    max_depth: int = 0

    # Reserved; never computed.
    unused: list[str] = field(default_factory=list)

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)

    @property
    def edge_count(self) -> int:
        return sum(
            len(targets)
            for adjacency in (self.internal, self.external, self.standard)
            for targets in adjacency.values()
        )
