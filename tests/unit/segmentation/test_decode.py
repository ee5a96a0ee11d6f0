import numpy as np
import pytest

from conftest import random_image
from segevo.core.direction import Direction
from segevo.core.genotype import DirectionGenotype
from segevo.segmentation.decode import decode_segments, link_targets, segments_from_labels
from segevo.segmentation.problem import ProblemInstance

N, U, D, L, R = Direction.NONE, Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT


def _problem(width: int, height: int) -> ProblemInstance:
    return ProblemInstance(random_image(width, height, seed=width * 31 + height))


def _decode(problem: ProblemInstance, directions) -> list[int]:
    genes = np.array([int(d) for d in directions], dtype=np.int8)
    return decode_segments(genes, problem.neighbor_table).tolist()


def test_chain_into_root():
    assert _decode(_problem(3, 1), [R, R, N]) == [0, 0, 0]


def test_every_pixel_its_own_root():
    assert _decode(_problem(2, 2), [N, N, N, N]) == [0, 1, 2, 3]


def test_two_pixel_cycle():
    assert _decode(_problem(2, 2), [R, L, R, L]) == [0, 0, 1, 1]


def test_four_pixel_cycle_terminates():
    # 0 -> 1 -> 3 -> 2 -> 0
    labels = _decode(_problem(2, 2), [R, D, U, L])
    assert labels == [0, 0, 0, 0]


def test_tail_feeding_into_cycle():
    # 0 feeds the 1 <-> 2 cycle, 3 <-> 4 is a separate cycle
    assert _decode(_problem(5, 1), [R, R, L, R, L]) == [0, 0, 0, 1, 1]


def test_merging_chains():
    # 3x2: both rows drain into pixel 2, which points down to 5, which points up
    labels = _decode(_problem(3, 2), [R, R, D, R, R, U])
    assert labels == [0] * 6


def test_labels_consistent_with_links(rng):
    problem = _problem(30, 20)
    for _ in range(5):
        genotype = DirectionGenotype.random(problem, rng=rng)
        labels = decode_segments(genotype.genes, problem.neighbor_table)
        targets = link_targets(genotype.genes, problem.neighbor_table)
        assert np.array_equal(labels, labels[targets])
        # labels are dense and numbered from zero
        assert set(labels.tolist()) == set(range(labels.max() + 1))


def test_decode_is_deterministic(rng):
    problem = _problem(12, 9)
    genotype = DirectionGenotype.random(problem, rng=rng)
    first = decode_segments(genotype.genes, problem.neighbor_table)
    second = decode_segments(genotype.genes.copy(), problem.neighbor_table)
    assert np.array_equal(first, second)


def test_off_grid_link_rejected():
    problem = _problem(2, 2)
    with pytest.raises(ValueError):
        decode_segments(np.array([U, N, N, N], dtype=np.int8), problem.neighbor_table)


def test_segments_from_labels():
    segments = segments_from_labels(np.array([1, 0, 1, 2, 0]))
    assert [s.tolist() for s in segments] == [[1, 4], [0, 2], [3]]
    assert segments_from_labels(np.array([], dtype=np.int64)) == []
