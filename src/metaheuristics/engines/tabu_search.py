"""
Tabu Search engine for permutation problems.

- Samples a bounded number of swap neighbours per iteration
- Keeps a FIFO tabu list of recent swap moves to avoid cycling
- Aspiration: a tabu move is allowed if it beats the global best
- Always moves to the best admissible neighbour, even if it is worse
"""

from collections import deque
from dataclasses import dataclass
from typing import Callable, Hashable, Iterator, Optional

from metaheuristics.core.random_source import RandomSource
from metaheuristics.engines.base import SearchEngineBase
from metaheuristics.problems.base import ProblemAdapter
from metaheuristics.progress import ProgressTracker


@dataclass
class TabuSearchConfig:
	"""
	Configuration for Tabu Search.

	- tabu_list_length: recent moves kept tabu (oldest evicted first)
	- neighbor_checks: neighbours sampled per iteration
	- time_penalty: seconds held back from the caller's time limit
	- repair_enabled / local_search_enabled: hooks applied to every neighbour
	"""
	tabu_list_length: int = 10
	neighbor_checks: int = 20
	time_penalty: float = 0.0
	repair_enabled: bool = True
	local_search_enabled: bool = False


class TabuList:
	"""Bounded FIFO of forbidden moves."""

	def __init__(self, capacity: int):
		if capacity < 0:
			raise ValueError(f"capacity must be non-negative, got {capacity}")
		self._moves: deque = deque(maxlen=capacity)

	@property
	def capacity(self) -> int:
		return self._moves.maxlen

	def add(self, move: Hashable) -> None:
		"""Append a move, evicting the oldest one when full."""
		self._moves.append(move)

	def clear(self) -> None:
		self._moves.clear()

	def __contains__(self, move: Hashable) -> bool:
		return move in self._moves

	def __len__(self) -> int:
		return len(self._moves)

	def __iter__(self) -> Iterator:
		return iter(self._moves)

	def __repr__(self) -> str:
		return f"TabuList({list(self._moves)}, capacity={self.capacity})"


class TabuSearchEngine(SearchEngineBase):
	"""
	Tabu Search over the pairwise-swap neighbourhood.

	The algorithm:
	1. Start from the adapter's initial solution
	2. Sample neighbor_checks swap neighbours of the current solution
	3. Drop tabu moves unless they improve on the global best
	4. Move to the best remaining neighbour and make its move tabu
	5. Repeat until the budget is spent
	"""

	def __init__(
		self,
		adapter: ProblemAdapter,
		config: Optional[TabuSearchConfig] = None,
		rng: Optional[RandomSource] = None,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	):
		super().__init__(adapter, rng=rng, verbose=verbose, logger=logger)
		self._config = config or TabuSearchConfig()
		if self._config.neighbor_checks < 1:
			raise ValueError(f"neighbor_checks must be at least 1, got {self._config.neighbor_checks}")
		if self._config.tabu_list_length < 0:
			raise ValueError(f"tabu_list_length must be non-negative, got {self._config.tabu_list_length}")

	@property
	def config(self) -> TabuSearchConfig:
		return self._config

	@property
	def name(self) -> str:
		return "TabuSearch"

	@property
	def tag(self) -> str:
		return "TS"

	def time_budget(self, time_limit: float) -> float:
		return max(0.0, time_limit - self._config.time_penalty)

	def _search(self, deadline: float, max_iterations: Optional[int], tracker: ProgressTracker) -> int:
		cfg = self._config

		current = self._adapter.initial_solution()
		current_fitness = self._prepare(current, cfg.repair_enabled, cfg.local_search_enabled)
		self._update_best(current, current_fitness)
		self._record_initial(current_fitness)
		self._tick(tracker, [current_fitness], 0)

		tabu_list = TabuList(cfg.tabu_list_length)

		iteration = 0
		while self._keep_going(deadline, iteration, max_iterations):
			chosen = None
			sampled = []
			for _ in range(cfg.neighbor_checks):
				neighbor, move = self._adapter.neighbor(current)
				fitness = self._prepare(neighbor, cfg.repair_enabled, cfg.local_search_enabled)
				sampled.append(fitness)

				if move in tabu_list and not fitness < self._best_fitness:
					continue
				if chosen is None or fitness < chosen[1]:
					chosen = (neighbor, fitness, move)

			iteration += 1
			if chosen is not None:
				current, current_fitness, move = chosen
				tabu_list.add(move)
				self._update_best(current, current_fitness)

			self._tick(tracker, sampled, iteration)

		return iteration

	def __repr__(self) -> str:
		return f"TabuSearchEngine(config={self._config}, verbose={self._verbose})"
