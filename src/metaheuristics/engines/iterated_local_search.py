"""
Iterated Local Search engine.

Alternates a random perturbation (a few pairwise swaps) with local search
run to convergence. Improvements are accepted; otherwise the search returns
to the best solution of the current restart. After restart_iterations
consecutive failures the search restarts from a fresh initial solution.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from torch import Tensor

from metaheuristics.core.random_source import RandomSource
from metaheuristics.engines.base import SearchEngineBase
from metaheuristics.problems.base import ProblemAdapter
from metaheuristics.progress import ProgressTracker


@dataclass
class IteratedLocalSearchConfig:
	"""
	Configuration for Iterated Local Search.

	- restart_iterations: consecutive non-improving iterations before a restart
	- perturbation_points: random swaps applied per perturbation
	- repair_enabled: repair perturbed solutions before local search
	"""
	restart_iterations: int = 50
	perturbation_points: int = 3
	repair_enabled: bool = True


class IteratedLocalSearchEngine(SearchEngineBase):
	"""Iterated Local Search with restarts."""

	def __init__(
		self,
		adapter: ProblemAdapter,
		config: Optional[IteratedLocalSearchConfig] = None,
		rng: Optional[RandomSource] = None,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	):
		super().__init__(adapter, rng=rng, verbose=verbose, logger=logger)
		self._config = config or IteratedLocalSearchConfig()
		if self._config.restart_iterations < 1:
			raise ValueError(f"restart_iterations must be at least 1, got {self._config.restart_iterations}")
		if self._config.perturbation_points < 1:
			raise ValueError(f"perturbation_points must be at least 1, got {self._config.perturbation_points}")

	@property
	def config(self) -> IteratedLocalSearchConfig:
		return self._config

	@property
	def name(self) -> str:
		return "IteratedLocalSearch"

	@property
	def tag(self) -> str:
		return "ILS"

	def _descend(self, individual: Tensor) -> float:
		"""Repeat local search in place until it stops improving."""
		fitness = self._adapter.fitness(individual)
		while True:
			improved = self._adapter.improve(individual, current_fitness=fitness)
			if not improved < fitness:
				return improved
			fitness = improved

	def _fresh_start(self) -> tuple[Tensor, float]:
		individual = self._adapter.initial_solution()
		if self._config.repair_enabled:
			self._adapter.repair(individual)
		return individual, self._descend(individual)

	def _search(self, deadline: float, max_iterations: Optional[int], tracker: ProgressTracker) -> int:
		cfg = self._config

		# current is always the best solution since the last restart
		current, current_fitness = self._fresh_start()
		self._update_best(current, current_fitness)
		self._record_initial(current_fitness)
		self._tick(tracker, [current_fitness], 0)

		stale = 0
		restarts = 0
		iteration = 0
		while self._keep_going(deadline, iteration, max_iterations):
			candidate = current.clone()
			self._adapter.perturb(candidate, cfg.perturbation_points)
			if cfg.repair_enabled:
				self._adapter.repair(candidate)
			fitness = self._descend(candidate)
			iteration += 1

			if fitness < current_fitness:
				current, current_fitness = candidate, fitness
				stale = 0
				self._update_best(current, current_fitness)
			else:
				stale += 1

			if stale >= cfg.restart_iterations:
				restarts += 1
				current, current_fitness = self._fresh_start()
				self._update_best(current, current_fitness)
				stale = 0
				self._log(f"[ILS] Restart {restarts} at iter {iteration}: start={current_fitness:.4f}, best={self._best_fitness:.4f}")

			self._tick(tracker, [fitness, current_fitness], iteration)

		return iteration

	def __repr__(self) -> str:
		return f"IteratedLocalSearchEngine(config={self._config}, verbose={self._verbose})"
