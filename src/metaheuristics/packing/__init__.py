"""
Two-dimensional strip packing: geometry, placement decoders and adapter.

Usage:
	from metaheuristics.packing import StripPackingInstance, nps_coordinates, is_feasible

	instance = StripPackingInstance(widths=(2, 1), heights=(1, 2), strip_width=2)
	layout = nps_coordinates(instance, [0, 1])
	assert is_feasible(instance, layout)
"""

from metaheuristics.packing.geometry import (
	Position,
	StripPackingInstance,
	is_feasible,
	packing_height,
)
from metaheuristics.packing.nps import nps_coordinates, nps_is_feasible, choose_position
from metaheuristics.packing.bottom_left import bottom_left_coordinates
from metaheuristics.packing.adapter import StripPackingAdapter

__all__ = [
	'Position',
	'StripPackingInstance',
	'is_feasible',
	'packing_height',
	'nps_coordinates',
	'nps_is_feasible',
	'choose_position',
	'bottom_left_coordinates',
	'StripPackingAdapter',
]
