import numpy as np
import pytest

from segevo.core.errors import GraphFrozenError, InvalidIndexError, NoSuchEdgeError
from segevo.core.graph import PixelGraph


def _square() -> PixelGraph:
    # 0 - 1
    # |   |
    # 2 - 3
    g = PixelGraph(4)
    g.add_connection(0, 1, 0.5)
    g.add_connection(0, 2, 1.0)
    g.add_connection(1, 3, 2.0)
    g.add_connection(2, 3, 0.25)
    return g


def test_weight_is_symmetric():
    g = _square()
    assert g.weight(0, 1) == 0.5
    assert g.weight(1, 0) == 0.5
    assert g.weight(3, 2) == 0.25
    assert g.edge_count == 4
    assert g.node_count == len(g) == 4


def test_neighbors():
    g = _square()
    assert sorted(g.neighbors(0)) == [(1, 0.5), (2, 1.0)]
    assert sorted(g.neighbors(3)) == [(1, 2.0), (2, 0.25)]


def test_neighbors_deterministic_for_same_construction():
    assert _square().neighbors(0) == _square().neighbors(0)


def test_missing_edge_raises():
    g = _square()
    assert not g.has_connection(0, 3)
    with pytest.raises(NoSuchEdgeError):
        g.weight(0, 3)
    with pytest.raises(KeyError):
        g.weight(1, 2)


@pytest.mark.parametrize(("i", "j"), [(-1, 0), (0, 4), (10, 2), (0, 1.5), ("0", 1)])
def test_add_connection_invalid_index(i, j):
    g = PixelGraph(4)
    with pytest.raises(InvalidIndexError):
        g.add_connection(i, j, 1.0)


def test_queries_invalid_index():
    g = _square()
    with pytest.raises(InvalidIndexError):
        g.neighbors(4)
    with pytest.raises(IndexError):
        g.weight(0, -1)


def test_last_write_wins_during_construction():
    g = PixelGraph(2)
    g.add_connection(0, 1, 1.0)
    g.add_connection(1, 0, 3.0)
    assert g.weight(0, 1) == 3.0
    assert g.edge_count == 1


def test_negative_weight_rejected():
    with pytest.raises(ValueError):
        PixelGraph(2).add_connection(0, 1, -0.1)


def test_frozen_graph_rejects_new_connections():
    g = _square()
    g.freeze()
    assert g.frozen
    with pytest.raises(GraphFrozenError):
        g.add_connection(0, 3, 1.0)
    assert g.weight(0, 1) == 0.5


def test_edge_arrays():
    g = _square()
    u, v, w = g.edge_arrays()
    assert len(u) == len(v) == len(w) == 4
    pairs = {(min(a, b), max(a, b)): weight for a, b, weight in zip(u.tolist(), v.tolist(), w.tolist(), strict=True)}
    assert pairs == {(0, 1): 0.5, (0, 2): 1.0, (1, 3): 2.0, (2, 3): 0.25}
    assert not w.flags.writeable
    # cached until the graph changes
    assert g.edge_arrays()[2] is w


def test_empty_graph():
    g = PixelGraph(3)
    u, v, w = g.edge_arrays()
    assert u.size == v.size == w.size == 0
    assert g.neighbors(1) == []
    assert np.all(w >= 0)
