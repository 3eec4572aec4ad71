"""
Traveling salesman problem adapter.

An individual is a tour: position i holds the i-th visited city, and the
tour closes from the last city back to the first.
"""

from dataclasses import dataclass
from typing import Optional, Union

from torch import Tensor, as_tensor, float64, int64, tensor

from metaheuristics.core.enums import LocalSearchMode
from metaheuristics.core.random_source import RandomSource
from metaheuristics.problems import permutation
from metaheuristics.problems.base import ProblemAdapter


@dataclass(frozen=True, eq=False)
class TSPInstance:
	"""Square cost matrix; costs[a, b] is the cost of travelling from a to b."""
	costs: Tensor

	def __post_init__(self):
		costs = as_tensor(self.costs, dtype=float64)
		if costs.dim() != 2 or costs.shape[0] != costs.shape[1] or costs.shape[0] == 0:
			raise ValueError(f"TSP costs must be a non-empty square matrix, got shape {tuple(costs.shape)}")
		object.__setattr__(self, "costs", costs)

	@property
	def num_cities(self) -> int:
		return self.costs.shape[0]


def tour_cost(instance: TSPInstance, tour: Tensor) -> float:
	"""Length of the closed tour."""
	return float(instance.costs[tour, tour.roll(-1)].sum().item())


def grc_solution(instance: TSPInstance, rng: RandomSource, rcl_threshold: float = 1.2) -> Tensor:
	"""
	Greedy randomized construction.

	Starts from a random city. At each step the restricted candidate list
	holds the unvisited cities whose cost from the current city is below
	rcl_threshold times the cheapest one; the next city is drawn uniformly
	from it.
	"""
	n = instance.num_cities
	costs = instance.costs.tolist()
	current = rng.discrete_uniform(0, n - 1)
	tour = [current]
	visited = [False] * n
	visited[current] = True

	while len(tour) < n:
		rcl: list[tuple[float, int]] = []
		best = None
		for city in range(n):
			if visited[city]:
				continue
			cost = costs[current][city]
			if best is None or cost < best:
				best = cost
				rcl = [(c, k) for c, k in rcl if c <= rcl_threshold * best]
				rcl.append((cost, city))
			elif cost < rcl_threshold * best:
				rcl.append((cost, city))
		rcl.sort()
		current = rcl[rng.discrete_uniform(0, len(rcl) - 1)][1]
		visited[current] = True
		tour.append(current)

	return tensor(tour, dtype=int64)


class TSPAdapter(ProblemAdapter):
	"""
	TSP hooks: tour-length fitness, random or GRC start, 2-opt local search.

	Args:
		instance: Cost matrix
		rng: Random source shared with the engine
		local_search: 2-opt variant used by local_search()
		construction: "random" (uniform permutation) or "grc"
		rcl_threshold: Candidate list threshold for "grc"
	"""

	CONSTRUCTIONS = ("random", "grc")

	def __init__(
		self,
		instance: TSPInstance,
		rng: Optional[RandomSource] = None,
		local_search: Union[LocalSearchMode, str] = LocalSearchMode.FIRST_IMPROVEMENT,
		construction: str = "random",
		rcl_threshold: float = 1.2,
	):
		super().__init__(rng=rng, local_search=local_search)
		if construction not in self.CONSTRUCTIONS:
			raise ValueError(f"Unknown construction '{construction}', expected one of {self.CONSTRUCTIONS}")
		self._instance = instance
		self._construction = construction
		self._rcl_threshold = rcl_threshold

	@property
	def instance(self) -> TSPInstance:
		return self._instance

	@property
	def size(self) -> int:
		return self._instance.num_cities

	def initial_solution(self) -> Tensor:
		if self._construction == "grc":
			return grc_solution(self._instance, self._rng, self._rcl_threshold)
		return permutation.random_permutation(self.size, self._rng)

	def fitness(self, individual: Tensor) -> float:
		return tour_cost(self._instance, individual)
