"""Bipartite graph representation for the matching algorithm."""

from __future__ import annotations

from typing import NewType


# Left and right vertices are drawn from two separate id spaces.
# Left vertex 3 and right vertex 3 are unrelated vertices.
LeftVertex = NewType("LeftVertex", int)
RightVertex = NewType("RightVertex", int)


class MalformedInput(ValueError):
    """Raised when the input does not describe a valid bipartite graph."""


class BipartiteGraph:
    """Representation of the input graph.

    These data remain unchanged while the algorithm runs.
    """

    def __init__(
            self,
            num_vertex: int,
            edges: list[tuple[int, int]]
            ) -> None:
        """Initialize the graph representation and prepare an adjacency list.

        Left vertices and right vertices are both indexed by integers
        in range 0 .. n-1, where "n" is "num_vertex".

        This function takes time O(n + m).

        Parameters:
            num_vertex: Size of the left and right vertex id spaces.
            edges: List of edges, each edge specified as a tuple "(u, v)"
                where "u" is a left vertex and "v" is a right vertex.

        Raises:
            MalformedInput: If a vertex index is out of range.
            TypeError: If the input contains invalid data types.
        """

        _check_input_types(num_vertex, edges)

        if num_vertex < 0:
            raise MalformedInput(
                f"Number of vertices must be non-negative, got {num_vertex}")

        for (u, v) in edges:
            if not (0 <= u < num_vertex):
                raise MalformedInput(
                    f"Left vertex {u} in edge ({u}, {v}) out of range"
                    f" 0 .. {num_vertex - 1}")
            if not (0 <= v < num_vertex):
                raise MalformedInput(
                    f"Right vertex {v} in edge ({u}, {v}) out of range"
                    f" 0 .. {num_vertex - 1}")

        self.num_vertex: int = num_vertex

        # "edges[e] = (u, v)" in input order.
        # Duplicate edges are kept; they are redundant but harmless.
        self.edges: list[tuple[LeftVertex, RightVertex]] = [
            (LeftVertex(u), RightVertex(v)) for (u, v) in edges]

        # "adjacent[u]" is the list of right vertices adjacent to
        # left vertex "u", in input order. The order determines which
        # augmenting path is found first.
        self.adjacent: list[list[RightVertex]] = [
            [] for _u in range(num_vertex)]

        # Distinct left and right vertices that have at least one edge,
        # in order of first appearance in the edge list.
        self.left_vertices: list[LeftVertex] = []
        self.right_vertices: list[RightVertex] = []

        seen_left = num_vertex * [False]
        seen_right = num_vertex * [False]
        for (u, v) in self.edges:
            self.adjacent[u].append(v)
            if not seen_left[u]:
                seen_left[u] = True
                self.left_vertices.append(u)
            if not seen_right[v]:
                seen_right[v] = True
                self.right_vertices.append(v)

    def neighbors(self, u: LeftVertex) -> list[RightVertex]:
        """Return the right vertices adjacent to left vertex "u"."""
        return self.adjacent[u]

    def has_edge(self, u: LeftVertex, v: RightVertex) -> bool:
        """Return True if the graph contains the edge "(u, v)"."""
        return v in self.adjacent[u]


def _check_input_types(num_vertex: int, edges: list[tuple[int, int]]) -> None:
    """Check that the input consists of valid data types.

    This function takes time O(m).

    Raises:
        TypeError: If the input contains invalid data types.
    """

    if isinstance(num_vertex, bool) or not isinstance(num_vertex, int):
        raise TypeError('"num_vertex" must be an integer')

    if not isinstance(edges, list):
        raise TypeError('"edges" must be a list')

    for e in edges:
        if (not isinstance(e, tuple)) or (len(e) != 2):
            raise TypeError("Each edge must be specified as a 2-tuple")

        (u, v) = e

        if (isinstance(u, bool) or isinstance(v, bool)
                or (not isinstance(u, int)) or (not isinstance(v, int))):
            raise TypeError("Edge endpoints must be integers")
