"""
Bottom-left (BL) decoder for strip packing.

Each item, in the given order, is tried at the origin, above the current
layout, and at the bottom-right and top-left corners of every placed item.
From every free trial spot the item slides down as far as it can, then left
as far as it can, repeating until it rests. The lowest resting spot wins,
leftmost on ties.
"""

from typing import Sequence, Union

from torch import Tensor

from metaheuristics.packing.geometry import (
	Position,
	StripPackingInstance,
	fits_strip,
	intervals_overlap,
	rectangles_overlap,
)


def _is_free(instance, coordinates, placed, item, position) -> bool:
	if not fits_strip(instance, item, position):
		return False
	return not any(
		rectangles_overlap(instance, item, position, other, coordinates[other])
		for other in placed
	)


def _settle(instance, coordinates, placed, item, position: Position) -> Position:
	"""Slide a free item down, then left, until neither move is possible."""
	width = instance.widths[item]
	height = instance.heights[item]
	x, y = position

	while True:
		floor = 0
		for other in placed:
			other_x, other_y = coordinates[other]
			top = other_y + instance.heights[other]
			if top <= y and intervals_overlap(x, x + width, other_x, other_x + instance.widths[other]):
				floor = max(floor, top)

		wall = 0
		for other in placed:
			other_x, other_y = coordinates[other]
			right = other_x + instance.widths[other]
			if right <= x and intervals_overlap(floor, floor + height, other_y, other_y + instance.heights[other]):
				wall = max(wall, right)

		if (wall, floor) == (x, y):
			return Position(x, y)
		x, y = wall, floor


def bottom_left_coordinates(
	instance: StripPackingInstance,
	ordering: Union[Tensor, Sequence[int]],
) -> list[Position]:
	"""
	Decode an item ordering into coordinates with the bottom-left heuristic.

	Returns:
		Position of each item, indexed by item
	"""
	order = ordering.tolist() if isinstance(ordering, Tensor) else list(ordering)
	if len(order) != instance.num_items:
		raise ValueError(f"Ordering has {len(order)} entries for {instance.num_items} items")

	coordinates: list = [None] * instance.num_items
	placed: list[int] = []
	max_top = 0

	for item in order:
		trials = [Position(0, 0), Position(0, max_top)]
		for other in placed:
			other_x, other_y = coordinates[other]
			trials.append(Position(other_x + instance.widths[other], other_y))
			trials.append(Position(other_x, other_y + instance.heights[other]))

		best = None
		for trial in trials:
			if not _is_free(instance, coordinates, placed, item, trial):
				continue
			resting = _settle(instance, coordinates, placed, item, trial)
			if best is None or (resting.y, resting.x) < (best.y, best.x):
				best = resting

		coordinates[item] = best
		placed.append(item)
		max_top = max(max_top, best.y + instance.heights[item])

	return coordinates
