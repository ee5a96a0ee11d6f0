"""Genetic algorithm evolving segmentations of one problem instance."""

from __future__ import annotations

import logging
from concurrent.futures import Executor

from segevo.core.individual import Population
from segevo.engine import GAConfig, GeneticAlgorithm
from segevo.operators.crossover import CrossoverOperator, UniformDirectionCrossover
from segevo.operators.mutation import MutationOperator, NeighborDirectionMutation
from segevo.operators.replacement import ElitismReplacement, ReplacementStrategy
from segevo.operators.selection import SelectionStrategy, TournamentSelection
from segevo.segmentation.individual import SegmentationIndividual
from segevo.segmentation.problem import ProblemInstance


class SegmentationGeneticAlgorithm(GeneticAlgorithm):
    """
    Segmentation GA.

    Default policy: tournament selection, uniform crossover with probability
    ``crossover_rate``, per-pixel mutation at ``mutation_rate`` and elitist
    replacement keeping ``elitism`` parents. Every operator can be swapped,
    e.g. ``CopySelection`` + ``GenerationalReplacement`` with zero rates
    reproduces a plain copy-and-replace loop.
    """

    def __init__(  # noqa: PLR0913
        self,
        problem_instance: ProblemInstance,
        config: GAConfig | None = None,
        selection: SelectionStrategy | None = None,
        crossover: CrossoverOperator | None = None,
        mutation: MutationOperator | None = None,
        replacement: ReplacementStrategy | None = None,
        executor: Executor | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(config=config, executor=executor, logger=logger)
        self.problem_instance = problem_instance
        self.selection = selection or TournamentSelection(k=self.config.tournament_size, rng=self.rng)
        self.crossover = crossover or UniformDirectionCrossover(rng=self.rng)
        self.mutation = mutation or NeighborDirectionMutation(self.config.mutation_rate, rng=self.rng)
        self.replacement = replacement or ElitismReplacement(elite_size=self.config.elitism)

    def get_problem_instance(self) -> ProblemInstance:
        return self.problem_instance

    def create_initial_population(self) -> Population:
        population = Population()
        for _ in range(self.config.population_size):
            population.add_individual(SegmentationIndividual.create_random_individual(self.problem_instance, self.rng))
        self.logger.debug(
            "Created initial population of %d over %r", population.get_size(), self.problem_instance
        )
        return population

    def create_offspring(self) -> Population:
        """
        Create offspring for the next generation.

        - selection picks ``population_size`` parents
        - consecutive parents are paired (an odd last parent pairs with the first)
        - each pair is crossed with probability ``crossover_rate``, else copied
        - every child is then mutated
        """
        size = self.config.population_size
        parents = self.selection.select(self.population, n_parents=size)

        offspring = Population()
        for i in range(0, len(parents), 2):
            p1 = parents[i]
            p2 = parents[i + 1] if i + 1 < len(parents) else parents[0]

            if self.rng.random() < self.config.crossover_rate:
                child1_gen, child2_gen = self.crossover.crossover(p1.genotype, p2.genotype)
                children = [SegmentationIndividual(child1_gen), SegmentationIndividual(child2_gen)]
            else:
                children = [p1.copy(), p2.copy()]
                for child in children:
                    child.age = 0

            for child in children:
                if len(offspring) < size:
                    child.mutate(self.mutation)
                    offspring.add_individual(child)

        return offspring

    def insert_offspring(self, offspring: Population) -> None:
        self.population = self.replacement.replace(self.population, offspring, self.config.population_size)
