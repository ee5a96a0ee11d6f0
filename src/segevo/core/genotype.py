"""
segevo.core.genotype
====================

Genotype representations used by the genetic algorithm.

Only the direction encoding of image segmentations is implemented; the
abstract :class:`Genotype` is kept so further encodings plug into the same
operators and engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

from segevo.core.direction import CARDINAL_DIRECTIONS, Direction

if TYPE_CHECKING:
    from segevo.segmentation.problem import ProblemInstance


class Genotype(ABC):
    """Abstract base class for genotypes."""

    def __init__(self, genes: np.ndarray):
        self.genes: np.ndarray = genes

    @abstractmethod
    def __eq__(self, other) -> bool:
        pass

    @abstractmethod
    def __hash__(self):
        pass

    @abstractmethod
    def __len__(self) -> int:
        """Return the length of the genotype."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(shape={self.as_array().shape})"

    @abstractmethod
    def copy(self) -> Genotype:
        """Create a deep copy of the genotype."""
        pass

    def as_array(self) -> np.ndarray:
        """Return the genes as a numpy array."""
        return self.genes


def pick_valid_directions(mask: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Pick one True column per row of ``mask`` uniformly at random.

    ``mask`` is ``(n, 4)`` in ``CARDINAL_DIRECTIONS`` order. Rows without any
    True column get ``Direction.NONE``.
    """
    counts = mask.sum(axis=1)
    draws = np.floor(rng.random(len(mask)) * counts).astype(np.int64)
    column = np.argmax(mask.cumsum(axis=1) > draws[:, None], axis=1)
    cardinal = np.asarray(CARDINAL_DIRECTIONS, dtype=np.int8)
    return np.where(counts > 0, cardinal[column], np.int8(Direction.NONE)).astype(np.int8)


# =============================================================================
# DirectionGenotype
# =============================================================================
class DirectionGenotype(Genotype):
    """One :class:`Direction` per pixel of a problem instance.

    The problem instance is shared, never copied: two genotypes are only
    comparable (and only recombinable) when they reference the same instance.
    """

    def __init__(self, genes: np.ndarray, problem: ProblemInstance):
        if not np.issubdtype(genes.dtype, np.integer):
            raise TypeError(f"DirectionGenotype genes must be integer dtype, got dtype={genes.dtype}.")
        if genes.shape != (problem.pixel_count,):
            raise ValueError(f"Expected {problem.pixel_count} genes, got shape {genes.shape}.")
        targets = problem.neighbor_table[np.arange(len(genes)), np.clip(genes, 0, len(Direction) - 1)]
        if np.any((genes < 0) | (genes >= len(Direction)) | (targets < 0)):
            raise ValueError("Every gene must be a Direction leading to an in-bounds neighbour.")
        super().__init__(genes.astype(np.int8, copy=False))
        self.problem = problem

    @classmethod
    def random(cls, problem: ProblemInstance, rng: np.random.Generator | None = None) -> DirectionGenotype:
        """Create a genotype pointing every pixel at a random in-bounds neighbour.

        Parameters
        ----------
        problem : ProblemInstance
            Instance the genotype encodes a segmentation of.
        rng : numpy.random.Generator | None, default None
            Optional RNG for reproducibility.
        """
        _rng = rng if rng is not None else np.random.default_rng()
        return cls(pick_valid_directions(problem.valid_direction_mask, _rng), problem)

    @classmethod
    def from_directions(cls, directions, problem: ProblemInstance) -> DirectionGenotype:
        """Build a genotype from any iterable of :class:`Direction` values."""
        return cls(np.asarray([int(d) for d in directions], dtype=np.int8), problem)

    def direction(self, i: int) -> Direction:
        return Direction(int(self.genes[i]))

    def is_compatible(self, other: Genotype) -> bool:
        return isinstance(other, DirectionGenotype) and other.problem is self.problem

    def __eq__(self, other) -> bool:
        if not isinstance(other, DirectionGenotype):
            return False
        return other.problem is self.problem and np.array_equal(self.genes, other.genes)

    def __hash__(self):
        return hash((id(self.problem), self.genes.tobytes()))

    def __len__(self) -> int:
        return self.genes.size

    def copy(self) -> DirectionGenotype:
        return DirectionGenotype(np.copy(self.genes), self.problem)
