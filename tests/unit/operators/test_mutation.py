import numpy as np
import pytest

from conftest import random_image
from segevo.core.direction import Direction
from segevo.core.genotype import DirectionGenotype, Genotype
from segevo.operators.mutation import NeighborDirectionMutation
from segevo.segmentation.problem import ProblemInstance


@pytest.fixture
def genotype(random_problem, rng) -> DirectionGenotype:
    return DirectionGenotype.random(random_problem, rng=rng)


def test_mutation_returns_new_genotype(genotype, rng):
    before = genotype.genes.copy()
    mutated = NeighborDirectionMutation(probability=1.0, rng=rng).mutate(genotype)
    assert mutated is not genotype
    assert np.array_equal(genotype.genes, before)
    assert mutated.problem is genotype.problem


def test_zero_probability_is_identity(genotype, rng):
    mutated = NeighborDirectionMutation(probability=0.0, rng=rng).mutate(genotype)
    assert mutated == genotype


def test_full_probability_changes_every_pixel_with_alternatives(genotype, rng):
    mutated = NeighborDirectionMutation(probability=1.0, rng=rng).mutate(genotype)
    assert np.all(mutated.genes != genotype.genes)


def test_mutated_directions_stay_on_grid(random_problem, rng):
    g = DirectionGenotype.random(random_problem, rng=rng)
    op = NeighborDirectionMutation(probability=0.3, rng=rng)
    for _ in range(50):
        g = op.mutate(g)
        targets = random_problem.neighbor_table[np.arange(len(g)), g.genes]
        assert np.all(targets >= 0)
        assert np.all(g.genes != Direction.NONE)


def test_mutation_rate_roughly_respected(rng):
    problem = ProblemInstance(random_image(40, 40))
    g = DirectionGenotype.random(problem, rng=rng)
    mutated = NeighborDirectionMutation(probability=0.1, rng=rng).mutate(g)
    changed = np.mean(mutated.genes != g.genes)
    assert 0.05 < changed < 0.15


def test_pixels_without_alternative_keep_direction(rng):
    # in a 2x1 image each pixel has exactly one neighbour
    problem = ProblemInstance(random_image(2, 1))
    g = DirectionGenotype.from_directions([Direction.RIGHT, Direction.LEFT], problem)
    mutated = NeighborDirectionMutation(probability=1.0, rng=rng).mutate(g)
    assert mutated == g


def test_root_pixels_are_repointed(rng):
    problem = ProblemInstance(random_image(2, 1))
    g = DirectionGenotype(np.array([Direction.NONE, Direction.LEFT], dtype=np.int8), problem)
    mutated = NeighborDirectionMutation(probability=1.0, rng=rng).mutate(g)
    assert mutated.genes.tolist() == [Direction.RIGHT, Direction.LEFT]


def test_unsupported_genotype():
    class _Other(Genotype):
        def __eq__(self, other):
            return False

        def __hash__(self):
            return 0

        def __len__(self):
            return 0

        def copy(self):
            return self

    with pytest.raises(TypeError) as e:
        NeighborDirectionMutation().mutate(_Other(np.zeros(1)))
    assert "DirectionGenotype" in str(e.value)


@pytest.mark.parametrize("probability", [-0.1, 1.1])
def test_invalid_probability(probability):
    with pytest.raises(ValueError):
        NeighborDirectionMutation(probability=probability)
