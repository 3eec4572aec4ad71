"""
Strip-packing instance, placement values and whole-layout checks.

Coordinates are the bottom-left corners of the items, indexed by item. The
strip has a fixed width and unbounded height; the objective is the height
actually used.
"""

from dataclasses import dataclass
from typing import NamedTuple, Sequence


class Position(NamedTuple):
	"""Bottom-left corner of an item, or a seed corner during decoding."""
	x: int
	y: int


@dataclass(frozen=True)
class StripPackingInstance:
	"""
	Item sizes and strip width for the two-dimensional strip-packing problem.

	Attributes:
		widths: Width of each item
		heights: Height of each item
		strip_width: Fixed width of the strip
	"""
	widths: tuple[int, ...]
	heights: tuple[int, ...]
	strip_width: int

	def __post_init__(self):
		widths = tuple(int(w) for w in self.widths)
		heights = tuple(int(h) for h in self.heights)
		if not widths or len(widths) != len(heights):
			raise ValueError(f"Need one height per width and at least one item, got {len(widths)} widths and {len(heights)} heights")
		if self.strip_width <= 0:
			raise ValueError(f"strip_width must be positive, got {self.strip_width}")
		for item, (w, h) in enumerate(zip(widths, heights)):
			if w <= 0 or h <= 0:
				raise ValueError(f"Item {item} has non-positive size {w}x{h}")
			if w > self.strip_width:
				raise ValueError(f"Item {item} (width {w}) is wider than the strip ({self.strip_width})")
		object.__setattr__(self, "widths", widths)
		object.__setattr__(self, "heights", heights)

	@property
	def num_items(self) -> int:
		return len(self.widths)

	@property
	def total_area(self) -> int:
		return sum(w * h for w, h in zip(self.widths, self.heights))


def intervals_overlap(start: int, end: int, other_start: int, other_end: int) -> bool:
	"""Half-open intervals [start, end) and [other_start, other_end) share a point."""
	return other_start < end and other_end > start


def rectangles_overlap(
	instance: StripPackingInstance,
	item: int,
	position: Position,
	other: int,
	other_position: Position,
) -> bool:
	return (
		intervals_overlap(
			position.x, position.x + instance.widths[item],
			other_position.x, other_position.x + instance.widths[other],
		)
		and intervals_overlap(
			position.y, position.y + instance.heights[item],
			other_position.y, other_position.y + instance.heights[other],
		)
	)


def fits_strip(instance: StripPackingInstance, item: int, position: Position) -> bool:
	return position.x >= 0 and position.y >= 0 and position.x + instance.widths[item] <= instance.strip_width


def is_feasible(instance: StripPackingInstance, coordinates: Sequence[Position]) -> bool:
	"""
	Validate a complete layout: every item inside the strip and no two items
	overlapping. Adjacency is not required.
	"""
	if len(coordinates) != instance.num_items:
		return False
	coordinates = [Position(*c) for c in coordinates]
	for item, position in enumerate(coordinates):
		if not fits_strip(instance, item, position):
			return False
		for other in range(item + 1, instance.num_items):
			if rectangles_overlap(instance, item, position, other, coordinates[other]):
				return False
	return True


def packing_height(instance: StripPackingInstance, coordinates: Sequence[Position]) -> int:
	"""Strip height used by the layout: max over items of y + height."""
	return max(y + instance.heights[item] for item, (_, y) in enumerate(coordinates))
