"""
Strip-packing adapter.

The individual is the order in which items are handed to the placement
decoder (NPS or bottom-left); the fitness is the strip height the decoded
layout uses.
"""

from typing import Optional, Union

from torch import Tensor

from metaheuristics.core.enums import LocalSearchMode, PlacementHeuristic
from metaheuristics.core.random_source import RandomSource
from metaheuristics.packing.bottom_left import bottom_left_coordinates
from metaheuristics.packing.geometry import Position, StripPackingInstance, packing_height
from metaheuristics.packing.nps import nps_coordinates
from metaheuristics.problems import permutation
from metaheuristics.problems.base import ProblemAdapter


class StripPackingAdapter(ProblemAdapter):
	"""
	2SP hooks: decoded packing height as fitness, random ordering as start,
	2-opt over the ordering as local search.

	Args:
		instance: Item sizes and strip width
		rng: Random source shared with the engine
		local_search: 2-opt variant used by local_search()
		placement: Decoder used by fitness() and decode()
	"""

	def __init__(
		self,
		instance: StripPackingInstance,
		rng: Optional[RandomSource] = None,
		local_search: Union[LocalSearchMode, str] = LocalSearchMode.FIRST_IMPROVEMENT,
		placement: Union[PlacementHeuristic, str] = PlacementHeuristic.NPS,
	):
		super().__init__(rng=rng, local_search=local_search)
		if isinstance(placement, str):
			placement = PlacementHeuristic.parse(placement)
		self._instance = instance
		self._placement = placement

	@property
	def instance(self) -> StripPackingInstance:
		return self._instance

	@property
	def placement(self) -> PlacementHeuristic:
		return self._placement

	@property
	def size(self) -> int:
		return self._instance.num_items

	def decode(self, individual: Tensor) -> list[Position]:
		"""Coordinates of every item for this ordering."""
		if self._placement == PlacementHeuristic.BOTTOM_LEFT:
			return bottom_left_coordinates(self._instance, individual)
		return nps_coordinates(self._instance, individual)

	def initial_solution(self) -> Tensor:
		return permutation.random_permutation(self.size, self._rng)

	def fitness(self, individual: Tensor) -> float:
		return float(packing_height(self._instance, self.decode(individual)))

	def __repr__(self) -> str:
		return (
			f"StripPackingAdapter(size={self.size}, strip_width={self._instance.strip_width}, "
			f"placement={self._placement.name}, local_search={self.local_search_mode.name})"
		)
