"""
Normal Pattern Shifting (NPS) decoder for strip packing.

Turns an item ordering into bottom-left coordinates. Items are placed one at
a time: the first at the origin, every later one at the best of a set of
candidate positions generated from the corners ("seeds") of the items placed
before it.

Candidates per seed:
- top-left seed (x, y + h): the item is pushed flush to the left wall at that
  height, or else rests against the nearest right edge of a placed item that
  gives a feasible spot;
- bottom-right seed (x + w, y): the item is dropped to the floor at that x, or
  else rests on the lowest top edge of a placed item that gives a feasible
  spot.

A spot is feasible when the item lies inside the strip, overlaps nothing
already placed, and both its left and bottom edges are supported (by the
strip or by a placed item).

The chosen candidate maximises the packing quality
	sum(w_k * top_k) / (strip_width * max_top)
over the placed items plus the one being placed. On equal quality, a
candidate whose x is less than or equal to the incumbent's x replaces it;
y is not compared.
"""

from typing import Optional, Sequence, Union

from torch import Tensor

from metaheuristics.core.errors import PlacementError
from metaheuristics.packing.geometry import (
	Position,
	StripPackingInstance,
	fits_strip,
	intervals_overlap,
)


Ordering = Union[Tensor, Sequence[int]]


def nps_is_feasible(
	instance: StripPackingInstance,
	coordinates: Sequence[Optional[Position]],
	placed: Sequence[int],
	item: int,
	position: Position,
) -> bool:
	"""Inside the strip, no overlap with placed items, left and bottom edges supported."""
	if not fits_strip(instance, item, position):
		return False

	x_start, y_start = position
	x_end = x_start + instance.widths[item]
	y_end = y_start + instance.heights[item]
	left_supported = x_start == 0
	bottom_supported = y_start == 0

	for other in placed:
		other_x, other_y = coordinates[other]
		other_x_end = other_x + instance.widths[other]
		other_y_end = other_y + instance.heights[other]
		x_overlap = intervals_overlap(x_start, x_end, other_x, other_x_end)
		y_overlap = intervals_overlap(y_start, y_end, other_y, other_y_end)

		if x_overlap and y_overlap:
			return False
		if x_overlap and y_start == other_y_end:
			bottom_supported = True
		if y_overlap and x_start == other_x_end:
			left_supported = True

	return left_supported and bottom_supported


def choose_position(candidates: Sequence[tuple[Position, float]]) -> Optional[Position]:
	"""
	Highest-quality candidate; on equal quality the later candidate wins when
	its x is not greater than the incumbent's.
	"""
	final = None
	best_quality = None
	for position, quality in candidates:
		if best_quality is None or quality > best_quality:
			best_quality = quality
			final = position
		elif quality == best_quality and position.x <= final.x:
			final = position
	return final


class _NPSState:
	"""Mutable decoding state for one ordering."""

	def __init__(self, instance: StripPackingInstance):
		self.instance = instance
		self.coordinates: list[Optional[Position]] = [None] * instance.num_items
		self.placed: list[int] = []
		self.top_left_seeds: list[Position] = []
		self.bottom_right_seeds: list[Position] = []
		# Running terms of the quality ratio for the placed items
		self.weighted_tops = 0
		self.max_top = 0

	def feasible(self, item: int, position: Position) -> bool:
		return nps_is_feasible(self.instance, self.coordinates, self.placed, item, position)

	def quality(self, item: int, position: Position) -> float:
		top = position.y + self.instance.heights[item]
		numerator = self.weighted_tops + self.instance.widths[item] * top
		return numerator / (self.instance.strip_width * max(self.max_top, top))

	def from_top_left(self, item: int, seed: Position) -> Optional[Position]:
		flush = Position(0, seed.y)
		if self.feasible(item, flush):
			return flush
		best_x = None
		for other in self.placed:
			x = self.coordinates[other].x + self.instance.widths[other]
			if (best_x is None or x < best_x) and self.feasible(item, Position(x, seed.y)):
				best_x = x
		return None if best_x is None else Position(best_x, seed.y)

	def from_bottom_right(self, item: int, seed: Position) -> Optional[Position]:
		floor = Position(seed.x, 0)
		if self.feasible(item, floor):
			return floor
		best_y = None
		for other in self.placed:
			y = self.coordinates[other].y + self.instance.heights[other]
			if (best_y is None or y < best_y) and self.feasible(item, Position(seed.x, y)):
				best_y = y
		return None if best_y is None else Position(seed.x, best_y)

	def candidates(self, item: int) -> list[Position]:
		found = []
		for seed in self.top_left_seeds:
			position = self.from_top_left(item, seed)
			if position is not None:
				found.append(position)
		for seed in self.bottom_right_seeds:
			position = self.from_bottom_right(item, seed)
			if position is not None:
				found.append(position)
		return found

	def place(self, item: int, position: Position) -> None:
		width = self.instance.widths[item]
		top = position.y + self.instance.heights[item]
		self.coordinates[item] = position
		self.placed.append(item)
		self.weighted_tops += width * top
		self.max_top = max(self.max_top, top)
		self.top_left_seeds.append(Position(position.x, top))
		self.bottom_right_seeds.append(Position(position.x + width, position.y))


def nps_coordinates(instance: StripPackingInstance, ordering: Ordering) -> list[Position]:
	"""
	Decode an item ordering into coordinates with the NPS heuristic.

	Args:
		instance: Item sizes and strip width
		ordering: Permutation of 0..n-1 giving the placement order

	Returns:
		Position of each item, indexed by item

	Raises:
		PlacementError: if an item has no feasible candidate position
	"""
	order = ordering.tolist() if isinstance(ordering, Tensor) else list(ordering)
	if len(order) != instance.num_items:
		raise ValueError(f"Ordering has {len(order)} entries for {instance.num_items} items")

	state = _NPSState(instance)
	for index, item in enumerate(order):
		if index == 0:
			state.place(item, Position(0, 0))
			continue

		scored = [(p, state.quality(item, p)) for p in state.candidates(item)]
		position = choose_position(scored)
		if position is None:
			raise PlacementError(item, len(state.placed))
		state.place(item, position)

	return state.coordinates
