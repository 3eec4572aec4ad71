"""
Discrete metaheuristic search engines.

Usage:
	from metaheuristics.core import SearchMethod, TorchRandomSource
	from metaheuristics.problems import TSPAdapter, TSPInstance
	from metaheuristics.engines import SearchEngineFactory

	adapter = TSPAdapter(TSPInstance(costs), rng=TorchRandomSource(seed=42))
	engine = SearchEngineFactory.create(SearchMethod.GENETIC_ALGORITHM, adapter)
	result = engine.run(time_limit=5.0)

	print(result.best_fitness, result.best_individual)
"""

from metaheuristics.engines.base import SearchResult, SearchEngineBase
from metaheuristics.engines.genetic_algorithm import (
	GeneticAlgorithmEngine,
	GeneticAlgorithmConfig,
)
from metaheuristics.engines.particle_swarm import (
	ParticleSwarmEngine,
	ParticleSwarmConfig,
	Particle,
)
from metaheuristics.engines.tabu_search import (
	TabuSearchEngine,
	TabuSearchConfig,
	TabuList,
)
from metaheuristics.engines.iterated_local_search import (
	IteratedLocalSearchEngine,
	IteratedLocalSearchConfig,
)
from metaheuristics.engines.factory import SearchEngineFactory


__all__ = [
	# Base
	'SearchResult',
	'SearchEngineBase',
	# Genetic Algorithm
	'GeneticAlgorithmEngine',
	'GeneticAlgorithmConfig',
	# Particle Swarm
	'ParticleSwarmEngine',
	'ParticleSwarmConfig',
	'Particle',
	# Tabu Search
	'TabuSearchEngine',
	'TabuSearchConfig',
	'TabuList',
	# Iterated Local Search
	'IteratedLocalSearchEngine',
	'IteratedLocalSearchConfig',
	# Factory
	'SearchEngineFactory',
]
