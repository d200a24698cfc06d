"""Weight learning for search scoring."""

from .perceptron import (
    LearningConfig, LearningResult, WeightLearner, WeightTable, solution_pairs,
)

__all__ = [
    'LearningConfig',
    'LearningResult',
    'WeightLearner',
    'WeightTable',
    'solution_pairs',
]
