"""
segevo.operators.mutation
=========================

Mutation operators for direction genotypes. Operators never modify their
input: they return a mutated copy.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from segevo.core.direction import Direction
from segevo.core.genotype import DirectionGenotype, Genotype, pick_valid_directions


# =============================================================================
# Base class
# =============================================================================
class MutationOperator(ABC):
    """Abstract base class for mutation operators supporting RNG injection."""

    supported_genotypes: tuple[type[Genotype], ...] = ()

    def __init__(self, rng: np.random.Generator | None = None):
        self.rng: np.random.Generator = rng if rng is not None else np.random.default_rng()

    @abstractmethod
    def mutate(self, genotype: Genotype) -> Genotype:
        """Return a mutated copy of the genotype."""
        pass

    def _check_supported(self, genotype: Genotype) -> None:
        if not isinstance(genotype, self.supported_genotypes):
            names = tuple(st.__name__ for st in self.supported_genotypes)
            raise TypeError(f"{self.__class__.__name__} is only applicable to {names}.")


# =============================================================================
# DirectionGenotype mutations
# =============================================================================
class NeighborDirectionMutation(MutationOperator):
    """
    Re-points randomly chosen pixels at a different in-bounds neighbour.

    Each pixel is selected independently with ``probability``; a selected
    pixel draws uniformly among its valid directions other than the current
    one. Pixels with no alternative keep their direction.

    Parameters:
        probability (float): Per-pixel mutation probability.
        rng (numpy.random.Generator | None): Optional RNG.
    """

    supported_genotypes: tuple[type[Genotype], ...] = (DirectionGenotype,)

    def __init__(self, probability: float = 0.05, rng: np.random.Generator | None = None):
        super().__init__(rng=rng)
        if not (0.0 <= probability <= 1.0):
            raise ValueError("probability must be in [0,1]")
        self.probability = probability

    def mutate(self, genotype: DirectionGenotype) -> DirectionGenotype:  # type: ignore[override]
        self._check_supported(genotype)
        genes = genotype.genes.copy()
        selected = np.flatnonzero(self.rng.random(len(genes)) < self.probability)
        if selected.size == 0:
            return DirectionGenotype(genes, genotype.problem)

        options = genotype.problem.valid_direction_mask[selected].copy()
        current = genes[selected].astype(np.int64)
        pointing = current != Direction.NONE
        # cardinal columns are Direction value - 1
        options[np.flatnonzero(pointing), current[pointing] - 1] = False

        replacement = pick_valid_directions(options, self.rng)
        has_choice = options.any(axis=1)
        genes[selected[has_choice]] = replacement[has_choice]
        return DirectionGenotype(genes, genotype.problem)
