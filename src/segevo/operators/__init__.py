"""
segevo.operators
================

Selection, crossover, mutation and replacement operators.

Mutation and crossover work on genotypes and always return new genotypes;
selection and replacement work on populations of evaluated individuals.
"""

from segevo.operators.crossover import CrossoverOperator, UniformDirectionCrossover
from segevo.operators.mutation import MutationOperator, NeighborDirectionMutation
from segevo.operators.replacement import (
    ElitismReplacement,
    GenerationalReplacement,
    MuPlusLambdaReplacement,
    ReplacementStrategy,
)
from segevo.operators.selection import (
    CopySelection,
    RandomSelection,
    RankSelection,
    SelectionStrategy,
    TournamentSelection,
)

__all__ = [
    "CopySelection",
    "CrossoverOperator",
    "ElitismReplacement",
    "GenerationalReplacement",
    "MuPlusLambdaReplacement",
    "MutationOperator",
    "NeighborDirectionMutation",
    "RandomSelection",
    "RankSelection",
    "ReplacementStrategy",
    "SelectionStrategy",
    "TournamentSelection",
    "UniformDirectionCrossover",
]
