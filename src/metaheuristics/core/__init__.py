"""
Core utilities and enums shared by problems and engines.
"""

from metaheuristics.core.enums import (
	SearchMethod,
	ProblemType,
	LocalSearchMode,
	PlacementHeuristic,
)
from metaheuristics.core.errors import InstanceFormatError, PlacementError
from metaheuristics.core.random_source import RandomSource, TorchRandomSource

__all__ = [
	'SearchMethod',
	'ProblemType',
	'LocalSearchMode',
	'PlacementHeuristic',
	'InstanceFormatError',
	'PlacementError',
	'RandomSource',
	'TorchRandomSource',
]
