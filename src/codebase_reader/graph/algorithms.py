"""Bounded graph algorithms: circular dependencies and dependency depth.

Both walk the graph with an explicit stack so deep chains never hit Python's
recursion limit, and both stop early once a ``GraphLimits`` bound is reached.
Start nodes are visited in sorted order so results are deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping, Sequence

from ..logging_config import get_logger
from .models import GraphLimits

logger = get_logger(__name__)

Adjacency = Mapping[str, Sequence[str]]

DEFAULT_LIMITS = GraphLimits()


def detect_cycles(adjacency: Adjacency, limits: GraphLimits = DEFAULT_LIMITS) -> list[list[str]]:
    """
    Find circular dependencies with a depth-first search.

    Each unvisited node starts a search. When a search reaches a node that is
    already on its current path, the cycle (the path from that node's
    position through the current node, closed by repeating the first node)
    is recorded and the search from that root ends. At most one cycle is
    reported per root. Self-edges are ignored.

    Args:
        adjacency: node -> nodes it depends on
        limits: Traversal bounds

    Returns:
        Cycles such as ``["a", "b", "c", "a"]``
    """
    cycles: list[list[str]] = []
    visited: set[str] = set()

    for root in sorted(adjacency):
        if root in visited:
            continue
        if len(visited) >= limits.max_nodes:
            logger.warning(f"Cycle detection stopped at the {limits.max_nodes} node limit")
            break

        visited.add(root)
        path = [root]
        position = {root: 0}
        iterators: list[Iterator[str]] = [iter(adjacency.get(root, ()))]

        while iterators:
            child = next(iterators[-1], None)
            if child is None:
                iterators.pop()
                del position[path.pop()]
                continue

            if child == path[-1]:
                continue
            if child in position:
                cycles.append(path[position[child] :] + [child])
                break
            if child in visited:
                continue
            if len(path) >= limits.max_depth:
                logger.debug(f"Depth limit {limits.max_depth} reached below {root}")
                continue
            if len(visited) >= limits.max_nodes:
                continue

            visited.add(child)
            position[child] = len(path)
            path.append(child)
            iterators.append(iter(adjacency.get(child, ())))

    return cycles


@dataclass
class _Frame:
    node: str
    children: Iterator[str]
    deepest_child: int = 0
    # False once the result depended on the current path (a cycle was cut
    # or a limit was hit), in which case it must not be memoized
    exact: bool = True


def dependency_depth(adjacency: Adjacency, limits: GraphLimits = DEFAULT_LIMITS) -> int:
    """
    Length, in nodes, of the longest dependency chain.

    A node already on the current path contributes 0, so cycles terminate.
    Results for nodes whose subtree never touched the current path are
    memoized.

    Args:
        adjacency: node -> nodes it depends on
        limits: Traversal bounds

    Returns:
        Maximum depth over all start nodes; 0 for an empty graph
    """
    memo: dict[str, int] = {}
    best = 0
    expansions = 0
    limited = False

    for start in sorted(adjacency):
        if start in memo:
            best = max(best, memo[start])
            continue

        on_path = {start}
        stack = [_Frame(start, iter(adjacency.get(start, ())))]

        while stack:
            frame = stack[-1]
            child = next(frame.children, None)

            if child is not None:
                if child in on_path:
                    frame.exact = False
                elif child in memo:
                    frame.deepest_child = max(frame.deepest_child, memo[child])
                elif len(stack) >= limits.max_depth or expansions >= limits.max_nodes:
                    frame.exact = False
                    limited = True
                else:
                    expansions += 1
                    on_path.add(child)
                    stack.append(_Frame(child, iter(adjacency.get(child, ()))))
                continue

            stack.pop()
            on_path.discard(frame.node)
            depth = frame.deepest_child + 1
            if frame.exact:
                memo[frame.node] = depth

            if stack:
                parent = stack[-1]
                parent.deepest_child = max(parent.deepest_child, depth)
                parent.exact = parent.exact and frame.exact
            else:
                best = max(best, depth)

    if limited:
        logger.warning(
            f"Dependency depth truncated by limits "
            f"(max_depth={limits.max_depth}, max_nodes={limits.max_nodes})"
        )
    return best
