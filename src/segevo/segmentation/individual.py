"""Segmentation genome: one direction link per pixel."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from segevo.core.direction import Direction
from segevo.core.errors import IncompatibleGenomeError
from segevo.core.genotype import DirectionGenotype
from segevo.core.individual import Individual
from segevo.operators.crossover import CrossoverOperator, UniformDirectionCrossover
from segevo.operators.mutation import MutationOperator, NeighborDirectionMutation
from segevo.segmentation.decode import decode_segments, segments_from_labels
from segevo.segmentation.fitness import evaluate_segmentation
from segevo.segmentation.problem import ProblemInstance


class SegmentationIndividual(Individual):
    """Candidate segmentation of a :class:`ProblemInstance`.

    The decoded segment labels and the fitness are computed on first use and
    cached until the direction array is replaced by :meth:`mutate`.
    """

    genotype: DirectionGenotype

    def __init__(self, genotype: DirectionGenotype, age: int = 0) -> None:
        if not isinstance(genotype, DirectionGenotype):
            raise TypeError(f"SegmentationIndividual needs a DirectionGenotype, got {type(genotype).__name__}.")
        super().__init__(genotype, age)
        self._fitness: float | None = None
        self._labels: np.ndarray | None = None

    @classmethod
    def create_random_individual(
        cls, problem: ProblemInstance, rng: np.random.Generator | None = None
    ) -> SegmentationIndividual:
        return cls(DirectionGenotype.random(problem, rng))

    @classmethod
    def from_directions(cls, problem: ProblemInstance, directions: Iterable[Direction]) -> SegmentationIndividual:
        return cls(DirectionGenotype.from_directions(directions, problem))

    @property
    def problem(self) -> ProblemInstance:
        return self.genotype.problem

    @property
    def directions(self) -> np.ndarray:
        """Read-only view of the direction array."""
        view = self.genotype.genes.view()
        view.setflags(write=False)
        return view

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------
    def get_segment_labels(self) -> np.ndarray:
        if self._labels is None:
            labels = decode_segments(self.genotype.genes, self.problem.neighbor_table)
            labels.setflags(write=False)
            self._labels = labels
        return self._labels

    def get_segments(self) -> list[np.ndarray]:
        """Pixel indices of every segment, ordered by segment label."""
        return segments_from_labels(self.get_segment_labels())

    @property
    def segment_count(self) -> int:
        labels = self.get_segment_labels()
        return int(labels.max()) + 1 if len(labels) else 0

    def to_label_image(self) -> np.ndarray:
        """Segment labels laid out as a ``(height, width)`` image."""
        return self.get_segment_labels().reshape(self.problem.height, self.problem.width)

    # ------------------------------------------------------------------
    # Individual protocol
    # ------------------------------------------------------------------
    def get_fitness(self) -> float:
        if self._fitness is None:
            self._fitness = evaluate_segmentation(self.problem, self.get_segment_labels())
        return self._fitness

    def mutate(self, operator: MutationOperator | None = None) -> None:
        op = operator if operator is not None else NeighborDirectionMutation()
        self.genotype = op.mutate(self.genotype)
        self._fitness = None
        self._labels = None

    def crossover(
        self, parent_b: Individual, operator: CrossoverOperator | None = None
    ) -> SegmentationIndividual:
        if not self.is_compatible(parent_b):
            raise IncompatibleGenomeError("Cannot cross individuals built over different problem instances.")
        op = operator if operator is not None else UniformDirectionCrossover()
        child, _ = op.crossover(self.genotype, parent_b.genotype)
        return SegmentationIndividual(child)

    def copy(self) -> SegmentationIndividual:
        clone = SegmentationIndividual(self.genotype.copy(), age=self.age)
        clone._fitness = self._fitness
        clone._labels = self._labels  # read-only, safe to share
        return clone

    def is_compatible(self, other: Individual) -> bool:
        return isinstance(other, SegmentationIndividual) and other.problem is self.problem

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SegmentationIndividual):
            return False
        return self.genotype == other.genotype and self.age == other.age

    def __hash__(self):
        return hash((self.genotype, self.age))

    def __repr__(self) -> str:
        fitness = "?" if self._fitness is None else f"{self._fitness:.4f}"
        return f"SegmentationIndividual(pixels={len(self.genotype)}, age={self.age}, fitness={fitness})"
