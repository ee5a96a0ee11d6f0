import numpy as np
import pytest

from conftest import random_image
from segevo.engine import EngineState, GAConfig
from segevo.operators.replacement import ElitismReplacement, GenerationalReplacement
from segevo.operators.selection import CopySelection, TournamentSelection
from segevo.segmentation.algorithm import SegmentationGeneticAlgorithm
from segevo.segmentation.individual import SegmentationIndividual
from segevo.segmentation.problem import ProblemInstance


@pytest.fixture
def problem() -> ProblemInstance:
    return ProblemInstance(random_image(6, 5, seed=3))


def test_default_operators(problem):
    ga = SegmentationGeneticAlgorithm(problem, GAConfig(population_size=8, elitism=1, tournament_size=4))
    assert isinstance(ga.selection, TournamentSelection)
    assert ga.selection.k == 4
    assert isinstance(ga.replacement, ElitismReplacement)
    assert ga.replacement.elite_size == 1
    assert ga.mutation.probability == ga.config.mutation_rate
    assert ga.get_problem_instance() is problem


def test_initial_population(problem):
    ga = SegmentationGeneticAlgorithm(problem, GAConfig(population_size=10, seed=1))
    ga.initialize()
    assert ga.population.get_size() == 10
    assert all(isinstance(ind, SegmentationIndividual) for ind in ga.population)
    assert all(ind.problem is problem for ind in ga.population)
    assert len({ind.genotype for ind in ga.population}) > 1


@pytest.mark.parametrize("size", [1, 7, 10])
def test_offspring_count_matches_population_size(problem, size):
    ga = SegmentationGeneticAlgorithm(problem, GAConfig(population_size=size, elitism=0, seed=2))
    ga.initialize()
    offspring = ga.create_offspring()
    assert offspring.get_size() == size
    assert all(child.problem is problem for child in offspring)
    assert all(child.age == 0 for child in offspring)


def test_offspring_do_not_alias_parents(problem):
    ga = SegmentationGeneticAlgorithm(problem, GAConfig(population_size=6, crossover_rate=0.0, seed=4))
    ga.initialize()
    parents_before = [ind.directions.copy() for ind in ga.population]
    offspring = ga.create_offspring()
    parent_ids = {id(ind) for ind in ga.population}
    assert not any(id(child) in parent_ids for child in offspring)
    for ind, before in zip(ga.population, parents_before, strict=True):
        assert np.array_equal(ind.directions, before)


def test_placeholder_policy_keeps_population(problem):
    config = GAConfig(population_size=5, crossover_rate=0.0, mutation_rate=0.0, elitism=0, seed=5)
    ga = SegmentationGeneticAlgorithm(
        problem, config, selection=CopySelection(), replacement=GenerationalReplacement()
    )
    ga.initialize()
    before = [ind.directions.copy() for ind in ga.population]
    for _ in range(3):
        ga.step()
    after = [ind.directions for ind in ga.population]
    assert all(np.array_equal(a, b) for a, b in zip(before, after, strict=True))


def test_elitism_makes_best_fitness_monotonic(problem):
    ga = SegmentationGeneticAlgorithm(problem, GAConfig(population_size=12, elitism=1, seed=6))
    ga.initialize()
    best = [ga.stats.best_fitness]
    for _ in range(15):
        ga.step()
        best.append(ga.stats.best_fitness)
    assert all(b2 >= b1 for b1, b2 in zip(best, best[1:]))


def test_seeded_runs_are_reproducible(problem):
    def run() -> list[float]:
        ga = SegmentationGeneticAlgorithm(problem, GAConfig(population_size=8, generation_limit=5, seed=11))
        ga.run()
        return [h["best"] for h in ga.stats.history]

    assert run() == run()


def test_run_terminates(problem):
    ga = SegmentationGeneticAlgorithm(problem, GAConfig(population_size=6, generation_limit=4, seed=7))
    final = ga.run()
    assert ga.state is EngineState.TERMINATED
    assert final.get_size() == 6
    best = final.get_fittest_individual()
    assert best.to_label_image().shape == (problem.height, problem.width)


def test_thread_pool_matches_synchronous_run(problem):
    def run(num_workers: int) -> list[tuple[float, float]]:
        config = GAConfig(population_size=8, generation_limit=4, num_workers=num_workers, seed=13)
        ga = SegmentationGeneticAlgorithm(problem, config)
        ga.run()
        return [(h["best"], h["mean"]) for h in ga.stats.history]

    assert run(2) == run(0)
