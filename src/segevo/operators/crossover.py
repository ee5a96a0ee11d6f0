"""
segevo.operators.crossover
==========================

Crossover (recombination) operators for direction genotypes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from segevo.core.errors import IncompatibleGenomeError
from segevo.core.genotype import DirectionGenotype, Genotype


# =============================================================================
# Base class
# =============================================================================
class CrossoverOperator(ABC):
    """Abstract base class for crossover operators supporting RNG injection.

    Parameters
    ----------
    rng : numpy.random.Generator | None, default None
        Optional RNG for deterministic behavior. If ``None`` a new default
        generator is created.
    """

    supported_genotypes: tuple[type[Genotype], ...] = ()

    def __init__(self, rng: np.random.Generator | None = None):
        self.rng: np.random.Generator = rng if rng is not None else np.random.default_rng()

    @abstractmethod
    def crossover(self, parent1: Genotype, parent2: Genotype) -> tuple[Genotype, Genotype]:
        """Return two offspring created from parent1 and parent2."""
        pass

    def _check_parents(self, parent1: Genotype, parent2: Genotype) -> None:
        if not (isinstance(parent1, self.supported_genotypes) and isinstance(parent2, self.supported_genotypes)):
            names = tuple(st.__name__ for st in self.supported_genotypes)
            raise TypeError(f"{self.__class__.__name__} is only applicable to {names}.")


# =============================================================================
# DirectionGenotype crossovers
# =============================================================================
class UniformDirectionCrossover(CrossoverOperator):
    """
    Per-pixel coin flip between the two parents.

    The second child takes every gene the first one did not, so both children
    together hold exactly the parents' genes. Any mix of valid parents is
    valid, since both parents index the same neighbour table.
    """

    supported_genotypes: tuple[type[Genotype], ...] = (DirectionGenotype,)

    def __init__(self, swap_probability: float = 0.5, rng: np.random.Generator | None = None):
        super().__init__(rng=rng)
        if not (0.0 <= swap_probability <= 1.0):
            raise ValueError("swap_probability must be in [0,1]")
        self.swap_probability = swap_probability

    def crossover(
        self, parent1: DirectionGenotype, parent2: DirectionGenotype
    ) -> tuple[DirectionGenotype, DirectionGenotype]:  # type: ignore[override]
        self._check_parents(parent1, parent2)
        if not parent1.is_compatible(parent2):
            raise IncompatibleGenomeError("Parents were built over different problem instances.")
        mask = self.rng.random(len(parent1)) < self.swap_probability
        child1 = np.where(mask, parent2.genes, parent1.genes)
        child2 = np.where(mask, parent1.genes, parent2.genes)
        return DirectionGenotype(child1, parent1.problem), DirectionGenotype(child2, parent1.problem)
