"""Core individual abstraction and population container.

An :class:`Individual` couples a genotype with evolutionary metadata (cached
fitness, age). Concrete problem families implement the abstract operations;
the engine only talks to this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from segevo.core.errors import EmptyPopulationError, IncompatibleGenomeError
from segevo.core.genotype import Genotype


class Individual(ABC):
    """Represents a single candidate solution.

    Parameters
    ----------
    genotype : Genotype
        Underlying genetic representation.
    age : int, default 0
        Non-negative integer counting generations survived.
    """

    def __init__(self, genotype: Genotype, age: int = 0) -> None:
        if age < 0:
            raise ValueError("age must be non-negative")
        self.genotype = genotype
        self.age: int = age

    @property
    def fitness(self) -> float:
        return self.get_fitness()

    @abstractmethod
    def get_fitness(self) -> float:
        """Return the (cached) fitness; higher is better."""

    @abstractmethod
    def mutate(self) -> None:
        """Perform a mutation on the individual, in place."""

    @abstractmethod
    def crossover(self, parent_b: Individual) -> Individual:
        """Return a new individual recombined from ``self`` and ``parent_b``."""

    @abstractmethod
    def copy(self) -> Individual:
        """Create a deep copy preserving metadata."""

    @abstractmethod
    def is_compatible(self, other: Individual) -> bool:
        """Whether ``other`` encodes a solution of the same problem instance."""

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(genotype={self.genotype.__class__.__name__}(len={len(self.genotype)}), "
            f"age={self.age})"
        )


def descending_fitness(ind: Individual) -> float:
    """Sort key ordering individuals from fittest to least fit."""
    return -ind.fitness


class Population(list):
    """List of individuals sharing one problem instance.

    Order carries no rank; it only breaks fitness ties (earlier wins).
    """

    def __init__(self, individuals: Iterable[Individual] = ()) -> None:
        super().__init__()
        for ind in individuals:
            self.add_individual(ind)

    def add_individual(self, ind: Individual) -> None:
        if self and not self[0].is_compatible(ind):
            raise IncompatibleGenomeError(f"{ind!r} does not share this population's problem instance.")
        self.append(ind)

    def get_individuals(self) -> Population:
        return self

    def get_size(self) -> int:
        return len(self)

    def get_fittest_individual(self) -> Individual:
        if not self:
            raise EmptyPopulationError("Cannot take the fittest individual of an empty population.")
        # max() keeps the first of equal maxima
        return max(self, key=lambda ind: ind.fitness)

    def sorted_by_fitness(self) -> list[Individual]:
        """Fittest first; stable, so ties keep insertion order."""
        return sorted(self, key=descending_fitness)

    def __getitem__(self, item):
        result = super().__getitem__(item)
        if isinstance(item, slice):
            return Population(result)
        return result

    def __add__(self, other) -> Population:
        return Population(list(self) + list(other))
