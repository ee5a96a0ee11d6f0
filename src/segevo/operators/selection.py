"""
segevo.operators.selection
==========================

Parent selection strategies. Every strategy implements

    select(self, population, n_parents) -> Population

and returns references to members of ``population``; the engine copies the
parents before recombining them.
"""

from collections.abc import Sequence

import numpy as np

from segevo.core.individual import Individual, Population


class SelectionStrategy:
    """Base class for all selection strategies."""

    def __init__(self, rng: np.random.Generator | None = None):
        self.rng: np.random.Generator = rng if rng is not None else np.random.default_rng()

    def select(self, population: Population, n_parents: int) -> Population:  # pragma: no cover (interface)
        raise NotImplementedError("SelectionStrategy must implement select().")

    # Common input validation helper
    @staticmethod
    def _validate(population: Sequence[Individual], n_parents: int) -> None:
        if len(population) == 0:
            raise ValueError("population must not be empty")
        if n_parents <= 0:
            raise ValueError("n_parents must be > 0")


class CopySelection(SelectionStrategy):
    """
    Identity selection.
    Cycles through the population in order; with ``n_parents == len(population)``
    every member is picked exactly once.
    """

    def select(self, population: Population, n_parents: int) -> Population:
        self._validate(population, n_parents)
        return Population(population[i % len(population)] for i in range(n_parents))


class RandomSelection(SelectionStrategy):
    """
    Random Selection.
    Baseline uniform selection (no dependence on fitness).
    """

    def select(self, population: Population, n_parents: int) -> Population:
        self._validate(population, n_parents)
        chosen = self.rng.choice(len(population), size=n_parents, replace=True)
        return Population(population[i] for i in chosen)


class RankSelection(SelectionStrategy):
    """
    Rank-Based Selection.
    Selection probability depends on sorted order (rank), not raw fitness,
    so negative fitness values are fine.
    """

    def select(self, population: Population, n_parents: int) -> Population:
        self._validate(population, n_parents)
        fitness = np.array([ind.fitness for ind in population], dtype=float)
        ranks = np.argsort(np.argsort(fitness, kind="stable"), kind="stable") + 1  # rank starts at 1
        probs = ranks / np.sum(ranks)
        chosen = self.rng.choice(len(population), size=n_parents, replace=True, p=probs)
        return Population(population[i] for i in chosen)


class TournamentSelection(SelectionStrategy):
    """
    Tournament Selection.
    Randomly draw k distinct individuals and keep the fittest (earliest on ties).
    """

    def __init__(self, k: int = 3, rng: np.random.Generator | None = None):
        super().__init__(rng=rng)
        self.k = k

    def select(self, population: Population, n_parents: int) -> Population:
        self._validate(population, n_parents)
        if self.k <= 0:
            raise ValueError("k must be > 0")
        k = min(self.k, len(population))
        selected: list[Individual] = []
        for _ in range(n_parents):
            contenders = np.sort(self.rng.choice(len(population), size=k, replace=False))
            winner = max((population[i] for i in contenders), key=lambda ind: ind.fitness)
            selected.append(winner)
        return Population(selected)
