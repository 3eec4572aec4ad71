"""
Base class for problem adapters.

An adapter is the capability object a search engine is constructed with. It
owns the (read-only) instance and supplies the problem-specific hooks; the
engines never contain problem logic.

Subclasses must implement:
- size property
- initial_solution()
- fitness()

The permutation hooks (repair, perturb, neighbor) and 2-opt local search
are shared by every bundled problem and can be overridden.

Usage:
	adapter = TSPAdapter(instance, rng=TorchRandomSource(seed=1))
	engine = GeneticAlgorithmEngine(adapter)
	result = engine.run(time_limit=5.0)
"""

from abc import ABC, abstractmethod
from typing import Optional, Union

from torch import Tensor

from metaheuristics.core.enums import LocalSearchMode
from metaheuristics.core.random_source import RandomSource, TorchRandomSource
from metaheuristics.problems import permutation
from metaheuristics.problems.two_opt import two_opt_best, two_opt_first


class ProblemAdapter(ABC):
	"""
	Abstract problem adapter over permutation individuals.

	Fitness is minimised by every adapter. Hooks that take an individual
	modify it in place and return it for convenience.
	"""

	def __init__(
		self,
		rng: Optional[RandomSource] = None,
		local_search: Union[LocalSearchMode, str] = LocalSearchMode.FIRST_IMPROVEMENT,
	):
		self._rng = rng or TorchRandomSource()
		if isinstance(local_search, str):
			local_search = LocalSearchMode.parse(local_search)
		self._local_search_mode = local_search

	@property
	def rng(self) -> RandomSource:
		return self._rng

	@property
	def local_search_mode(self) -> LocalSearchMode:
		return self._local_search_mode

	@property
	def name(self) -> str:
		return self.__class__.__name__

	@property
	@abstractmethod
	def size(self) -> int:
		"""Length of an individual."""
		...

	@abstractmethod
	def initial_solution(self) -> Tensor:
		"""Build a fresh starting individual."""
		...

	@abstractmethod
	def fitness(self, individual: Tensor) -> float:
		"""Objective value of a valid individual (lower is better)."""
		...

	def repair(self, individual: Tensor) -> Tensor:
		"""Reassign duplicate slots so the individual is a permutation again."""
		return permutation.repair(individual, self._rng)

	def local_search(self, individual: Tensor) -> Tensor:
		"""Run the configured 2-opt variant in place."""
		if self._local_search_mode == LocalSearchMode.FIRST_IMPROVEMENT:
			two_opt_first(individual, self.fitness)
		elif self._local_search_mode == LocalSearchMode.BEST_IMPROVEMENT:
			two_opt_best(individual, self.fitness)
		return individual

	def improve(self, individual: Tensor, current_fitness: Optional[float] = None) -> float:
		"""
		Run the configured 2-opt variant in place and return the resulting
		fitness, reusing the value computed by the search.

		Args:
			individual: Permutation, modified in place
			current_fitness: Fitness of the individual if already known
		"""
		if self._local_search_mode == LocalSearchMode.FIRST_IMPROVEMENT:
			return two_opt_first(individual, self.fitness, current_fitness)
		elif self._local_search_mode == LocalSearchMode.BEST_IMPROVEMENT:
			return two_opt_best(individual, self.fitness, current_fitness)
		return self.fitness(individual) if current_fitness is None else current_fitness

	def perturb(self, individual: Tensor, strength: int) -> Tensor:
		"""Apply `strength` random swaps in place."""
		return permutation.perturb(individual, strength, self._rng)

	def neighbor(self, individual: Tensor) -> tuple[Tensor, tuple[int, int]]:
		"""Random swap neighbour (a copy) and its move (i, j) with i < j."""
		return permutation.swap_neighbor(individual, self._rng)

	def __repr__(self) -> str:
		return f"{self.name}(size={self.size}, local_search={self._local_search_mode.name})"
