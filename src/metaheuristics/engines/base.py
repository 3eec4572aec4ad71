"""
Base classes for the discrete search engines.

An engine is constructed with a ProblemAdapter (the problem's hooks) and a
configuration dataclass, and searches the permutation space until its
wall-clock budget is spent.

Budget handling: initialisation always completes, then the clock is polled
once per iteration. The best individual is only ever replaced by a complete,
evaluated individual, so whatever the engine returns is valid.
"""

import math
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Optional

from torch import Tensor

from metaheuristics.core.random_source import RandomSource
from metaheuristics.problems.base import ProblemAdapter
from metaheuristics.progress import ProgressTracker


@dataclass
class SearchResult:
	"""Result of one engine run."""

	best_individual: Tensor
	best_fitness: float
	initial_fitness: float
	improvement_percent: float
	iterations_run: int
	elapsed_seconds: float
	method_name: str
	history: list = field(default_factory=list)  # (iteration, best_fitness) samples

	def __repr__(self) -> str:
		return (
			f"SearchResult("
			f"method={self.method_name}, "
			f"initial={self.initial_fitness:.4f}, "
			f"best={self.best_fitness:.4f}, "
			f"improvement={self.improvement_percent:.2f}%, "
			f"iterations={self.iterations_run})"
		)


class SearchEngineBase(ABC):
	"""
	Abstract base class for search engines.

	Subclasses must implement:
	- name and tag properties
	- _search(): initialise state, then iterate while the budget lasts

	Usage:
		engine = TabuSearchEngine(adapter, TabuSearchConfig(tabu_list_length=7))
		result = engine.run(time_limit=10.0)
		best = result.best_individual
	"""

	def __init__(
		self,
		adapter: ProblemAdapter,
		rng: Optional[RandomSource] = None,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	):
		self._adapter = adapter
		self._rng = rng or adapter.rng
		self._verbose = verbose
		self._logger = logger or print
		self._best: Optional[Tensor] = None
		self._best_fitness = math.inf
		self._initial_fitness: Optional[float] = None

	def _log(self, msg: str) -> None:
		"""Log a message using the configured logger."""
		if self._verbose:
			self._logger(msg)

	@property
	def adapter(self) -> ProblemAdapter:
		return self._adapter

	@property
	def verbose(self) -> bool:
		return self._verbose

	@property
	def best_individual(self) -> Optional[Tensor]:
		"""Best individual of the last run (None before the first run)."""
		return None if self._best is None else self._best.clone()

	@property
	def best_fitness(self) -> float:
		return self._best_fitness

	@property
	@abstractmethod
	def name(self) -> str:
		"""Return the engine name."""
		...

	@property
	@abstractmethod
	def tag(self) -> str:
		"""Short log prefix, e.g. GA."""
		...

	def time_budget(self, time_limit: float) -> float:
		"""Seconds actually searched for a caller-supplied limit."""
		return max(0.0, time_limit)

	def run(self, time_limit: float, max_iterations: Optional[int] = None) -> SearchResult:
		"""
		Search until time_limit seconds have passed (or max_iterations
		iterations completed) and return the best individual found.

		Args:
			time_limit: Wall-clock budget in seconds; 0 only initialises
			max_iterations: Optional cap on iterations after initialisation
		"""
		self._best = None
		self._best_fitness = math.inf
		self._initial_fitness = None

		start = time.monotonic()
		deadline = start + self.time_budget(time_limit)
		tracker = ProgressTracker(logger=self._logger, prefix=f"[{self.tag}]")

		self._log(f"[{self.tag}] {self.name} on {self._adapter!r}, budget={self.time_budget(time_limit):.2f}s")
		iterations = self._search(deadline, max_iterations, tracker)
		elapsed = time.monotonic() - start
		if self._verbose:
			tracker.log_summary()

		initial = self._initial_fitness
		improvement_pct = ((initial - self._best_fitness) / initial * 100) if initial and self._best_fitness < initial else 0.0
		self._log(f"[{self.tag}] Done: {iterations} iterations in {elapsed:.2f}s, best={self._best_fitness:.4f}")

		return SearchResult(
			best_individual=self._best.clone(),
			best_fitness=self._best_fitness,
			initial_fitness=initial,
			improvement_percent=improvement_pct,
			iterations_run=iterations,
			elapsed_seconds=elapsed,
			method_name=self.name,
			history=tracker.best_samples(),
		)

	@abstractmethod
	def _search(
		self,
		deadline: float,
		max_iterations: Optional[int],
		tracker: ProgressTracker,
	) -> int:
		"""Run the search loop; return the number of completed iterations."""
		...

	def _keep_going(self, deadline: float, iteration: int, max_iterations: Optional[int]) -> bool:
		if max_iterations is not None and iteration >= max_iterations:
			return False
		return time.monotonic() < deadline

	def _prepare(self, individual: Tensor, repair: bool, local_search: bool) -> float:
		"""Repair and locally improve in place as configured; return the fitness."""
		if repair:
			self._adapter.repair(individual)
		if local_search:
			return self._adapter.improve(individual)
		return self._adapter.fitness(individual)

	def _update_best(self, individual: Tensor, fitness: float) -> bool:
		"""Record the individual if it is strictly better than the best so far."""
		if fitness < self._best_fitness:
			self._best = individual.clone()
			self._best_fitness = fitness
			return True
		return False

	def _record_initial(self, fitness: float) -> None:
		self._initial_fitness = fitness

	def _tick(self, tracker: ProgressTracker, fitness_values: list[float], iteration: int) -> None:
		tracker.tick(fitness_values, iteration=iteration, log=self._verbose)

	def __repr__(self) -> str:
		return f"{self.__class__.__name__}(adapter={self._adapter!r}, verbose={self._verbose})"
