"""
segevo.core.graph
=================

Undirected weighted graph over pixel indices.

The graph is a plain adjacency / weight store: no traversal algorithms are
exposed here. Edges are registered during problem construction and the graph
is frozen afterwards, so every individual can read it concurrently.
"""

from __future__ import annotations

import operator

import networkx as nx
import numpy as np

from segevo.core.errors import GraphFrozenError, InvalidIndexError, NoSuchEdgeError


class PixelGraph:
    """Weighted adjacency store with one node per pixel.

    Parameters
    ----------
    node_count : int
        Number of nodes; valid indices are ``0 .. node_count - 1``.
    """

    def __init__(self, node_count: int) -> None:
        if node_count < 0:
            raise ValueError("node_count must be >= 0")
        self._node_count = node_count
        self._graph = nx.Graph()
        self._graph.add_nodes_from(range(node_count))
        self._frozen = False
        self._edge_cache: tuple[np.ndarray, np.ndarray, np.ndarray] | None = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def add_connection(self, i: int, j: int, weight: float) -> None:
        """Register an undirected edge between ``i`` and ``j``.

        Adding the same unordered pair twice overwrites the weight.
        """
        if self._frozen:
            raise GraphFrozenError("PixelGraph is frozen; connections can only be added during construction.")
        self._check_index(i)
        self._check_index(j)
        if weight < 0:
            raise ValueError(f"Edge weight must be non-negative, got {weight}.")
        self._graph.add_edge(i, j, weight=float(weight))
        self._edge_cache = None

    def freeze(self) -> None:
        """Forbid any further modification."""
        self._frozen = True
        nx.freeze(self._graph)

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def node_count(self) -> int:
        return self._node_count

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    def neighbors(self, i: int) -> list[tuple[int, float]]:
        """Return ``(j, weight)`` for every node connected to ``i``."""
        self._check_index(i)
        return [(j, data["weight"]) for j, data in self._graph.adj[i].items()]

    def has_connection(self, i: int, j: int) -> bool:
        self._check_index(i)
        self._check_index(j)
        return self._graph.has_edge(i, j)

    def weight(self, i: int, j: int) -> float:
        self._check_index(i)
        self._check_index(j)
        try:
            return self._graph.adj[i][j]["weight"]
        except KeyError:
            raise NoSuchEdgeError(f"Pixels {i} and {j} are not connected.") from None

    def edge_arrays(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return read-only ``(u, v, weight)`` arrays, one entry per edge."""
        if self._edge_cache is None:
            m = self.edge_count
            u = np.empty(m, dtype=np.int64)
            v = np.empty(m, dtype=np.int64)
            w = np.empty(m, dtype=np.float64)
            for k, (a, b, weight) in enumerate(self._graph.edges(data="weight")):
                u[k], v[k], w[k] = a, b, weight
            for arr in (u, v, w):
                arr.setflags(write=False)
            self._edge_cache = (u, v, w)
        return self._edge_cache

    def __len__(self) -> int:
        return self._node_count

    def __repr__(self) -> str:
        return f"PixelGraph(nodes={self._node_count}, edges={self.edge_count}, frozen={self._frozen})"

    def _check_index(self, i: int) -> None:
        try:
            operator.index(i)
        except TypeError:
            raise InvalidIndexError(f"Node index {i!r} is not an integer.") from None
        if not (0 <= i < self._node_count):
            raise InvalidIndexError(f"Node index {i} outside [0, {self._node_count}).")
