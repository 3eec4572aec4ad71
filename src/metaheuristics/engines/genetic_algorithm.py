"""
Genetic Algorithm engine for permutation problems.

- Population of individuals drawn from the adapter's initial_solution()
- Tournament selection, single-point crossover, per-gene mutation
- Offspring repaired back to permutations and optionally 2-opt improved
- Elitism preserves the best individuals (with their cached fitness)
"""

from dataclasses import dataclass
from typing import Callable, Optional

from torch import Tensor, cat, int64, tensor

from metaheuristics.core.random_source import RandomSource
from metaheuristics.engines.base import SearchEngineBase
from metaheuristics.problems.base import ProblemAdapter
from metaheuristics.progress import ProgressTracker


@dataclass
class GeneticAlgorithmConfig:
	"""
	Configuration for the Genetic Algorithm.

	- population_size: individuals per generation
	- mutation_probability: per-gene probability of resampling the gene
	- crossover_rate: probability a child is a crossover (else a parent copy)
	- elitism: best individuals carried over unchanged (0 = generational)
	- tournament_size: contestants per parent selection
	- repair_enabled / local_search_enabled: hooks applied to every offspring
	"""
	population_size: int = 50
	mutation_probability: float = 0.05
	crossover_rate: float = 0.9
	elitism: int = 1
	tournament_size: int = 3
	repair_enabled: bool = True
	local_search_enabled: bool = True


class GeneticAlgorithmEngine(SearchEngineBase):
	"""
	Genetic Algorithm over permutation individuals.

	Each generation:
	1. Keep the `elitism` best individuals with their cached fitness
	2. Select parents by tournament
	3. Single-point crossover, then per-gene mutation
	4. Repair and (optionally) local search, then evaluate the child
	5. Update the best individual
	"""

	def __init__(
		self,
		adapter: ProblemAdapter,
		config: Optional[GeneticAlgorithmConfig] = None,
		rng: Optional[RandomSource] = None,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	):
		super().__init__(adapter, rng=rng, verbose=verbose, logger=logger)
		self._config = config or GeneticAlgorithmConfig()
		cfg = self._config
		if cfg.population_size < 1:
			raise ValueError(f"population_size must be at least 1, got {cfg.population_size}")
		if not 0 <= cfg.elitism < cfg.population_size:
			raise ValueError(f"elitism must be in [0, population_size), got {cfg.elitism}")
		if cfg.tournament_size < 1:
			raise ValueError(f"tournament_size must be at least 1, got {cfg.tournament_size}")
		for label, p in (("mutation_probability", cfg.mutation_probability), ("crossover_rate", cfg.crossover_rate)):
			if not 0.0 <= p <= 1.0:
				raise ValueError(f"{label} must be in [0, 1], got {p}")

	@property
	def config(self) -> GeneticAlgorithmConfig:
		return self._config

	@property
	def name(self) -> str:
		return "GeneticAlgorithm"

	@property
	def tag(self) -> str:
		return "GA"

	def _search(self, deadline: float, max_iterations: Optional[int], tracker: ProgressTracker) -> int:
		cfg = self._config

		# (individual, fitness) pairs
		population = []
		for _ in range(cfg.population_size):
			individual = self._adapter.initial_solution()
			fitness = self._prepare(individual, cfg.repair_enabled, cfg.local_search_enabled)
			population.append((individual, fitness))
			self._update_best(individual, fitness)

		self._record_initial(min(f for _, f in population))
		self._tick(tracker, [f for _, f in population], 0)

		generation = 0
		while self._keep_going(deadline, generation, max_iterations):
			population.sort(key=lambda pair: pair[1])
			new_population = [(ind.clone(), fit) for ind, fit in population[:cfg.elitism]]

			while len(new_population) < cfg.population_size:
				p1 = self._tournament_select(population)
				p2 = self._tournament_select(population)

				if self._rng.uniform() < cfg.crossover_rate:
					child = self._crossover(p1, p2)
				else:
					child = p1.clone()

				self._mutate(child)
				fitness = self._prepare(child, cfg.repair_enabled, cfg.local_search_enabled)
				new_population.append((child, fitness))

			population = new_population
			generation += 1

			for individual, fitness in population:
				self._update_best(individual, fitness)
			self._tick(tracker, [f for _, f in population], generation)

		return generation

	def _tournament_select(self, population: list[tuple]) -> Tensor:
		"""Best of `tournament_size` distinct random contestants."""
		size = min(self._config.tournament_size, len(population))
		indices = list(range(len(population)))
		for k in range(size):
			pick = self._rng.discrete_uniform(k, len(indices) - 1)
			indices[k], indices[pick] = indices[pick], indices[k]
		best_idx = min(indices[:size], key=lambda i: population[i][1])
		return population[best_idx][0]

	def _crossover(self, parent1: Tensor, parent2: Tensor) -> Tensor:
		"""Single-point crossover: head of parent1, tail of parent2."""
		n = parent1.numel()
		if n < 2:
			return parent1.clone()
		point = self._rng.discrete_uniform(1, n - 1)
		return cat([parent1[:point], parent2[point:]]).clone()

	def _mutate(self, individual: Tensor) -> None:
		"""Resample each gene in [0, n-1] with probability mutation_probability."""
		n = individual.numel()
		values = individual.tolist()
		changed = False
		for gene in range(n):
			if self._rng.uniform() < self._config.mutation_probability:
				values[gene] = self._rng.discrete_uniform(0, n - 1)
				changed = True
		if changed:
			individual.copy_(tensor(values, dtype=int64))

	def __repr__(self) -> str:
		return f"GeneticAlgorithmEngine(config={self._config}, verbose={self._verbose})"
