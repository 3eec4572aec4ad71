"""
Factory for creating search engines and their size-dependent defaults.
"""

import math
from typing import Callable, Optional, Union

from metaheuristics.core.enums import SearchMethod
from metaheuristics.core.random_source import RandomSource
from metaheuristics.engines.base import SearchEngineBase
from metaheuristics.engines.genetic_algorithm import GeneticAlgorithmEngine, GeneticAlgorithmConfig
from metaheuristics.engines.iterated_local_search import IteratedLocalSearchEngine, IteratedLocalSearchConfig
from metaheuristics.engines.particle_swarm import ParticleSwarmEngine, ParticleSwarmConfig
from metaheuristics.engines.tabu_search import TabuSearchEngine, TabuSearchConfig
from metaheuristics.problems.base import ProblemAdapter


ConfigType = Union[
	GeneticAlgorithmConfig,
	ParticleSwarmConfig,
	TabuSearchConfig,
	IteratedLocalSearchConfig,
	None,
]

_ENGINES = {
	SearchMethod.GENETIC_ALGORITHM: (GeneticAlgorithmEngine, GeneticAlgorithmConfig),
	SearchMethod.PARTICLE_SWARM: (ParticleSwarmEngine, ParticleSwarmConfig),
	SearchMethod.TABU_SEARCH: (TabuSearchEngine, TabuSearchConfig),
	SearchMethod.ITERATED_LOCAL_SEARCH: (IteratedLocalSearchEngine, IteratedLocalSearchConfig),
}


class SearchEngineFactory:
	"""
	Factory for creating search engines.

	Usage:
		adapter = TSPAdapter(instance, rng=TorchRandomSource(seed=7))

		# Defaults scaled to the instance
		engine = SearchEngineFactory.create(SearchMethod.TABU_SEARCH, adapter)

		# With custom config
		config = GeneticAlgorithmConfig(population_size=80, elitism=2)
		engine = SearchEngineFactory.create(SearchMethod.GENETIC_ALGORITHM, adapter, config=config)

		result = engine.run(time_limit=10.0)
	"""

	@staticmethod
	def default_config(method: Union[SearchMethod, str], problem_size: int) -> ConfigType:
		"""
		Parameters derived from the instance size.

		GA: population max(10, n / 3), mutation probability 0.3.
		TS: ceil(0.25 * 2n) neighbour checks, tabu list of ceil(0.2 * n),
		0.1s of the time limit held back.
		PSO and ILS use their config defaults.
		"""
		if isinstance(method, str):
			method = SearchMethod.parse(method)
		if method == SearchMethod.GENETIC_ALGORITHM:
			return GeneticAlgorithmConfig(
				population_size=int(max(10, problem_size / 3.0)),
				mutation_probability=0.3,
			)
		elif method == SearchMethod.TABU_SEARCH:
			return TabuSearchConfig(
				tabu_list_length=math.ceil(0.20 * problem_size),
				neighbor_checks=max(1, math.ceil(0.25 * (2 * problem_size))),
				time_penalty=0.1,
			)
		elif method == SearchMethod.PARTICLE_SWARM:
			return ParticleSwarmConfig()
		elif method == SearchMethod.ITERATED_LOCAL_SEARCH:
			return IteratedLocalSearchConfig()
		else:
			raise ValueError(f"Unknown search method: {method}")

	@staticmethod
	def create(
		method: Union[SearchMethod, str],
		adapter: ProblemAdapter,
		config: ConfigType = None,
		rng: Optional[RandomSource] = None,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	) -> SearchEngineBase:
		"""
		Create a search engine bound to an adapter.

		Args:
			method: Which metaheuristic to use
			adapter: Problem hooks
			config: Engine-specific configuration; a config of the wrong type
				is rejected, None selects default_config() for the adapter size
			rng: Random source (default: the adapter's)
			verbose: Log progress during the run
			logger: Logging callable (default: print)
		"""
		if isinstance(method, str):
			method = SearchMethod.parse(method)
		if method not in _ENGINES:
			raise ValueError(f"Unknown search method: {method}")
		engine_cls, config_cls = _ENGINES[method]

		if config is None:
			config = SearchEngineFactory.default_config(method, adapter.size)
		elif not isinstance(config, config_cls):
			raise ValueError(f"{method.name} expects {config_cls.__name__}, got {type(config).__name__}")

		return engine_cls(adapter, config=config, rng=rng, verbose=verbose, logger=logger)
