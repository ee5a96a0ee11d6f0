"""
segevo.operators.replacement
============================

Replacement strategies decide which individuals form the next generation
from the current population and the freshly evaluated offspring.

Available strategies:
- GenerationalReplacement
- ElitismReplacement
- MuPlusLambdaReplacement

Each strategy implements the `replace` method:
    replace(parents, offspring, population_size) -> new_population
"""

from abc import ABC, abstractmethod

from segevo.core.individual import Population, descending_fitness


class ReplacementStrategy(ABC):
    """Abstract base class for replacement strategies."""

    @abstractmethod
    def replace(self, parents: Population, offspring: Population, population_size: int) -> Population:
        """
        Form the next population.

        Args:
            parents (Population): The current population.
            offspring (Population): The newly created offspring.
            population_size (int): The desired size of the new population.

        Returns:
            Population: The new population after replacement.
        """
        pass

    @staticmethod
    def _validate(population_size: int) -> None:
        if population_size <= 0:
            raise ValueError("population_size must be > 0")


class GenerationalReplacement(ReplacementStrategy):
    """
    Replaces the entire parent population with the offspring population.

    - Maximizes exploration but may lose good solutions.
    """

    def replace(self, parents: Population, offspring: Population, population_size: int) -> Population:
        self._validate(population_size)
        return Population(offspring[:population_size])


class ElitismReplacement(ReplacementStrategy):
    """
    Keeps the best ``elite_size`` parents, fills the rest with the best offspring.

    - Ensures that the best found solution is never lost.
    """

    def __init__(self, elite_size: int = 1):
        if elite_size < 0:
            raise ValueError("elite_size must be >= 0")
        self.elite_size = elite_size

    def replace(self, parents: Population, offspring: Population, population_size: int) -> Population:
        self._validate(population_size)
        elites = sorted(parents, key=descending_fitness)[: min(self.elite_size, population_size)]
        remaining_slots = population_size - len(elites)
        best_offspring = sorted(offspring, key=descending_fitness)[:remaining_slots]
        for ind in elites:
            ind.age += 1
        return Population(elites + best_offspring)


class MuPlusLambdaReplacement(ReplacementStrategy):
    """
    (μ + λ)-Strategy

    Parents and offspring compete for survival; the best ``population_size``
    of the combined pool survive. Parents win ties against offspring.
    """

    def replace(self, parents: Population, offspring: Population, population_size: int) -> Population:
        self._validate(population_size)
        survivors = sorted(list(parents) + list(offspring), key=descending_fitness)[:population_size]
        parent_ids = {id(p) for p in parents}
        for ind in survivors:
            if id(ind) in parent_ids:
                ind.age += 1
        return Population(survivors)
