"""
Quadratic assignment problem adapter.

An individual assigns facilities to locations: position i (a location)
holds the facility placed there. The cost is
	sum over i, j of flows[p[i], p[j]] * distances[i, j].
"""

from dataclasses import dataclass
from typing import Optional, Union

from torch import Tensor, as_tensor, float64

from metaheuristics.core.enums import LocalSearchMode
from metaheuristics.core.random_source import RandomSource
from metaheuristics.problems import permutation
from metaheuristics.problems.base import ProblemAdapter


@dataclass(frozen=True, eq=False)
class QAPInstance:
	"""Flow matrix between facilities and distance matrix between locations."""
	flows: Tensor
	distances: Tensor

	def __post_init__(self):
		flows = as_tensor(self.flows, dtype=float64)
		distances = as_tensor(self.distances, dtype=float64)
		for label, matrix in (("flows", flows), ("distances", distances)):
			if matrix.dim() != 2 or matrix.shape[0] != matrix.shape[1] or matrix.shape[0] == 0:
				raise ValueError(f"QAP {label} must be a non-empty square matrix, got shape {tuple(matrix.shape)}")
		if flows.shape != distances.shape:
			raise ValueError(f"QAP flows {tuple(flows.shape)} and distances {tuple(distances.shape)} differ in size")
		object.__setattr__(self, "flows", flows)
		object.__setattr__(self, "distances", distances)

	@property
	def num_facilities(self) -> int:
		return self.flows.shape[0]


def assignment_cost(instance: QAPInstance, assignment: Tensor) -> float:
	return float((instance.flows[assignment][:, assignment] * instance.distances).sum().item())


class QAPAdapter(ProblemAdapter):
	"""QAP hooks: assignment cost, random start, 2-opt local search."""

	def __init__(
		self,
		instance: QAPInstance,
		rng: Optional[RandomSource] = None,
		local_search: Union[LocalSearchMode, str] = LocalSearchMode.FIRST_IMPROVEMENT,
	):
		super().__init__(rng=rng, local_search=local_search)
		self._instance = instance

	@property
	def instance(self) -> QAPInstance:
		return self._instance

	@property
	def size(self) -> int:
		return self._instance.num_facilities

	def initial_solution(self) -> Tensor:
		return permutation.random_permutation(self.size, self._rng)

	def fitness(self, individual: Tensor) -> float:
		return assignment_cost(self._instance, individual)
