"""Image segmentation by evolving per-pixel direction genomes."""

from segevo.segmentation.algorithm import SegmentationGeneticAlgorithm
from segevo.segmentation.decode import decode_segments, segments_from_labels
from segevo.segmentation.fitness import FitnessWeights, evaluate_segmentation
from segevo.segmentation.individual import SegmentationIndividual
from segevo.segmentation.problem import ProblemInstance

__all__ = [
    "FitnessWeights",
    "ProblemInstance",
    "SegmentationGeneticAlgorithm",
    "SegmentationIndividual",
    "decode_segments",
    "evaluate_segmentation",
    "segments_from_labels",
]
