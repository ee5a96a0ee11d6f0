"""Fitness of a decoded segmentation.

Four terms are combined, higher total is better:

    edge_value   mean weight of pixel-graph edges crossing a segment boundary
    deviation    mean HSB distance of each pixel to its segment centroid
    boundary     share of pixel-graph edges crossing a segment boundary
    degenerate   1 when everything is one segment or every pixel its own

    fitness = edge_weight * edge_value - deviation_weight * deviation
              - boundary_weight * boundary - degenerate_penalty * degenerate
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from segevo.segmentation.problem import ProblemInstance


@dataclass(frozen=True)
class FitnessWeights:
    edge_weight: float = 1.0
    deviation_weight: float = 1.0
    boundary_weight: float = 0.25
    degenerate_penalty: float = 1.0

    def __post_init__(self) -> None:
        for name in ("edge_weight", "deviation_weight", "boundary_weight", "degenerate_penalty"):
            value = getattr(self, name)
            if not np.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a finite value >= 0")


def overall_deviation(hsb: np.ndarray, labels: np.ndarray) -> float:
    """Mean distance of every pixel to the colour centroid of its segment."""
    counts = np.bincount(labels)
    sums = np.stack([np.bincount(labels, weights=hsb[:, c], minlength=len(counts)) for c in range(hsb.shape[1])], axis=1)
    centroids = sums / counts[:, None]
    return float(np.linalg.norm(hsb - centroids[labels], axis=1).mean())


def boundary_terms(u: np.ndarray, v: np.ndarray, w: np.ndarray, labels: np.ndarray) -> tuple[float, float]:
    """Return ``(edge_value, boundary_ratio)`` for the given edge list."""
    if len(w) == 0:
        return 0.0, 0.0
    crossing = labels[u] != labels[v]
    n_crossing = int(np.count_nonzero(crossing))
    if n_crossing == 0:
        return 0.0, 0.0
    return float(w[crossing].mean()), n_crossing / len(w)


def evaluate_segmentation(problem: ProblemInstance, labels: np.ndarray) -> float:
    weights = problem.fitness_weights
    u, v, w = problem.euclidean_distance_graph.edge_arrays()

    edge_value, boundary = boundary_terms(u, v, w, labels)
    deviation = overall_deviation(problem.hsb, labels)
    segment_count = int(labels.max()) + 1 if len(labels) else 0
    degenerate = segment_count <= 1 or segment_count == problem.pixel_count

    return float(
        weights.edge_weight * edge_value
        - weights.deviation_weight * deviation
        - weights.boundary_weight * boundary
        - weights.degenerate_penalty * float(degenerate)
    )
