"""
Evolutionary search.

An elitist generational search loop over opaque candidates, plus the
fixed-length parameter vector and a reference linear model that can be
evolved with it.
"""

from .genetic_search import (
    GeneticSearch,
    GenerationRecord,
    Evolvable,
    OffspringOrigin,
    PLACEHOLDER_GENERATION,
    PLACEHOLDER_STEP_SIZE,
    select_best,
    genetic_train,
    get_search,
)
from .vector import Vector, nil, cons
from .model import LinearModel, make_evaluator, mean_squared_error, synthetic_samples

__all__ = [
    # Search loop
    'GeneticSearch',
    'GenerationRecord',
    'Evolvable',
    'OffspringOrigin',
    'PLACEHOLDER_GENERATION',
    'PLACEHOLDER_STEP_SIZE',
    'select_best',
    'genetic_train',
    'get_search',
    # Vectors
    'Vector',
    'nil',
    'cons',
    # Reference model
    'LinearModel',
    'make_evaluator',
    'mean_squared_error',
    'synthetic_samples',
]
