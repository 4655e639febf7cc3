"""
Algorithm for finding a maximum cardinality matching in bipartite graphs.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from .graph import BipartiteGraph, LeftVertex, RightVertex


def maximum_cardinality_matching(
        num_vertex: int,
        edges: list[tuple[int, int]]
        ) -> list[tuple[int, int]]:
    """Compute a maximum-cardinality matching in the bipartite graph
    given by "edges".

    The graph is specified as a list of edges, each edge specified as a
    tuple of a left vertex and a right vertex.
    Left vertices and right vertices are indexed by non-negative integers
    in two separate ranges 0 .. n-1, where "n" is "num_vertex".
    There may be multiple edges between the same pair of vertices;
    such duplicates have no effect on the result.
    The graph may be non-connected (i.e. contain multiple components).

    The matching is found with Kuhn's algorithm: an augmenting path is
    searched from every left vertex, in the order in which left vertices
    first appear in the edge list. The search is depth-first and explores
    edges in input order. The result is therefore fully determined by
    the order of the edge list.

    This function takes time O(n * (n + m)), where "m" is the number
    of edges.
    This function uses O(n + m) memory.

    Parameters:
        num_vertex: Size of the left and right vertex id spaces.
        edges: List of edges, each edge specified as a tuple "(u, v)"
            where "u" is a left vertex and "v" is a right vertex.

    Returns:
        List of matched pairs "(u, v)", ordered by right vertex index.

    Raises:
        MalformedInput: If a vertex index is out of range.
        TypeError: If the input contains invalid data types.
        InvariantViolation: If the matching algorithm fails.
            This can only happen if there is a bug in the algorithm.
    """

    graph = BipartiteGraph(num_vertex, edges)

    engine = MatchingEngine(graph)
    engine.compute()

    # Verification is a redundant step; if the matching algorithm is correct,
    # verification will always pass.
    engine.verify_maximum()

    return engine.pairs()


class MatchingError(Exception):
    """Raised when verification of the matching fails.

    This can only happen if there is a bug in the algorithm.
    """


class InvariantViolation(MatchingError):
    """Raised when the matching state is inconsistent or not maximum."""


class AugmentingPath(NamedTuple):
    """Represents an augmenting path.

    "edges" lists the unmatched edges of the path as "(u, v)" tuples.
    The first edge ends in a free right vertex.
    The last edge starts in the free left vertex where the search started.
    Consecutive edges "(u1, v1)", "(u2, v2)" are linked by the matched
    edge "(u1, v2)".
    """
    edges: list[tuple[LeftVertex, RightVertex]]


class MatchingEngine:
    """Holds the matching state and runs Kuhn's algorithm on a graph.

    An engine instance belongs to exactly one graph and must not be
    shared between concurrent computations.
    """

    def __init__(self, graph: BipartiteGraph) -> None:
        """Set up an empty matching for the specified graph."""

        num_vertex = graph.num_vertex

        # Reference to the input graph.
        # The graph does not change while the algorithm runs.
        self.graph = graph

        # Each vertex is either single (unmatched) or matched to
        # a vertex on the other side.
        #
        # If left vertex "u" is matched to right vertex "v",
        # "left_mate[u] == v" and "right_mate[v] == u".
        #
        # If a vertex is unmatched, its mate is -1.
        #
        # Initially all vertices are unmatched.
        self.left_mate: list[int] = num_vertex * [-1]
        self.right_mate: list[int] = num_vertex * [-1]

        # "visited[u]" is True if left vertex "u" has been explored by
        # a search since the last change of the matching.
        #
        # A search that fails explores every left vertex reachable through
        # an alternating path, and none of them is adjacent to a free right
        # vertex. Those vertices stay useless until the matching changes,
        # so the marks are only cleared after a successful augmentation.
        self.visited: list[bool] = num_vertex * [False]

    def reset(self) -> None:
        """Remove all matched pairs and clear the visited marks."""

        num_vertex = self.graph.num_vertex
        self.left_mate = num_vertex * [-1]
        self.right_mate = num_vertex * [-1]
        self.reset_visited()

    def reset_visited(self) -> None:
        """Clear the visited marks."""
        self.visited = self.graph.num_vertex * [False]

    def find_augmenting_path(
            self,
            start: LeftVertex
            ) -> Optional[AugmentingPath]:
        """Search an augmenting path that starts in left vertex "start".

        The search is depth-first. Left vertices are explored in stack
        order and edges in input order. Left vertices that are already
        marked as visited are not explored again.

        This function does not change the matching.

        This function takes time O(n + m).

        Returns:
            The augmenting path if one was found, otherwise None.

        Raises:
            ValueError: If "start" is out of range or already matched.
        """

        if not (0 <= start < self.graph.num_vertex):
            raise ValueError(f"Left vertex {start} out of range")
        if self.left_mate[start] != -1:
            raise ValueError(f"Left vertex {start} is already matched")

        # "parent[x]" is the left vertex from which left vertex "x" was
        # reached through the right vertex matched to "x".
        parent: dict[LeftVertex, LeftVertex] = {}

        # "stack" holds left vertices that must be explored.
        # A vertex may be pushed more than once via different edges
        # before it is explored.
        stack: list[LeftVertex] = [start]

        while stack:
            cur = stack.pop()

            if self.visited[cur]:
                continue
            self.visited[cur] = True

            for to in self.graph.adjacent[cur]:
                mate = self.right_mate[to]
                if mate == -1:
                    # Found a free right vertex.
                    return self.trace_augmenting_path(start, cur, to, parent)
                mate = LeftVertex(mate)
                if not self.visited[mate]:
                    # The parent of a vertex is frozen once the vertex
                    # is visited.
                    parent[mate] = cur
                    stack.append(mate)

        # No augmenting path through this vertex.
        return None

    def trace_augmenting_path(
            self,
            start: LeftVertex,
            u: LeftVertex,
            v: RightVertex,
            parent: dict[LeftVertex, LeftVertex]
            ) -> AugmentingPath:
        """Trace back from the free right vertex "v" to "start".

        Edge "(u, v)" is the final edge of the augmenting path.

        This function takes time O(n).
        """

        edges: list[tuple[LeftVertex, RightVertex]] = []

        while True:
            edges.append((u, v))
            if u == start:
                break
            v = RightVertex(self.left_mate[u])
            u = parent[u]

        return AugmentingPath(edges)

    def augment_matching(self, path: AugmentingPath) -> None:
        """Augment the matching through the specified augmenting path.

        Every unmatched edge of the path becomes matched. Every matched
        edge of the path is replaced, since both of its endpoints get
        a new mate. Left vertices that were matched before the path was
        flipped are rerouted to a different right vertex instead of
        losing their mate.

        This function takes time O(n).
        """

        # Check that the path ends in a free right vertex and starts
        # in a free left vertex.
        assert len(path.edges) > 0
        assert self.right_mate[path.edges[0][1]] == -1
        assert self.left_mate[path.edges[-1][0]] == -1

        for (u, v) in path.edges:
            self.right_mate[v] = u
            self.left_mate[u] = v

    def augment_from(self, start: LeftVertex) -> bool:
        """Search an augmenting path from "start" and augment the matching.

        Returns:
            True if the matching was augmented, increasing the number
            of matched pairs by 1.
            False if there is no augmenting path that starts in "start".

        Raises:
            ValueError: If "start" is out of range or already matched.
        """

        path = self.find_augmenting_path(start)
        if path is None:
            return False

        self.augment_matching(path)
        self.reset_visited()
        return True

    def compute(self) -> int:
        """Compute a maximum matching from scratch.

        Any existing matching is discarded first. Calling this function
        repeatedly produces the same matching every time.

        This function takes time O(n * (n + m)).

        Returns:
            Number of matched pairs.
        """

        self.reset()

        num_matched = 0
        for u in self.graph.left_vertices:
            if self.augment_from(u):
                num_matched += 1

        return num_matched

    def matching_size(self) -> int:
        """Return the number of matched pairs."""
        return sum(1 for u in self.right_mate if u != -1)

    def pairs(self) -> list[tuple[int, int]]:
        """Return matched pairs "(u, v)", ordered by right vertex index."""
        return [(u, v) for (v, u) in enumerate(self.right_mate) if u != -1]

    def verify(self) -> None:
        """Check that the current matching is a valid matching."""
        _verify_matching(self)

    def verify_maximum(self) -> None:
        """Check that the current matching is valid and maximum."""
        _verify_matching(self)
        _verify_maximum(self)


def _verify_matching(engine: MatchingEngine) -> None:
    """Verify that the mate arrays describe a valid matching in the graph.

    This function takes time O(n + m).

    Raises:
        InvariantViolation: If the matching is not consistent.
    """

    num_vertex = engine.graph.num_vertex
    left_mate = engine.left_mate
    right_mate = engine.right_mate

    if (len(left_mate) != num_vertex) or (len(right_mate) != num_vertex):
        raise InvariantViolation(
            "Verification failed: mate arrays do not match graph size")

    for (v, u) in enumerate(right_mate):
        if u == -1:
            continue
        if not (0 <= u < num_vertex):
            raise InvariantViolation(
                f"Verification failed: right vertex {v} matched to"
                f" invalid left vertex {u}")
        if left_mate[u] != v:
            raise InvariantViolation(
                f"Verification failed: asymmetric match of right vertex {v}"
                f" and left vertex {u}")
        if not engine.graph.has_edge(LeftVertex(u), RightVertex(v)):
            raise InvariantViolation(
                f"Verification failed: matched pair ({u}, {v})"
                " is not an edge")

    for (u, v) in enumerate(left_mate):
        if v == -1:
            continue
        if not (0 <= v < num_vertex):
            raise InvariantViolation(
                f"Verification failed: left vertex {u} matched to"
                f" invalid right vertex {v}")
        if right_mate[v] != u:
            raise InvariantViolation(
                f"Verification failed: right vertex {v} claimed by"
                f" left vertex {u} but matched to {right_mate[v]}")


def _verify_maximum(engine: MatchingEngine) -> None:
    """Verify that no augmenting path exists.

    This function takes time O(n + m), since every left vertex is
    explored at most once over all searches.

    Raises:
        InvariantViolation: If an augmenting path exists.
    """

    engine.reset_visited()

    for u in engine.graph.left_vertices:
        if engine.left_mate[u] == -1:
            path = engine.find_augmenting_path(u)
            if path is not None:
                raise InvariantViolation(
                    "Verification failed: augmenting path from"
                    f" left vertex {u} to right vertex {path.edges[0][1]}")

    engine.reset_visited()
