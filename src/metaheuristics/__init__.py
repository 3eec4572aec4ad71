"""Metaheuristics - discrete search engines for TSP, QAP and 2D strip packing."""

from metaheuristics.logger import Logger, create_logger
from metaheuristics.progress import ProgressTracker, ProgressStats
from metaheuristics.engines import SearchEngineFactory, SearchResult
from metaheuristics.solver import solve, build_adapter

__all__ = [
	'Logger', 'create_logger',
	'ProgressTracker', 'ProgressStats',
	'SearchEngineFactory', 'SearchResult',
	'solve', 'build_adapter',
]
