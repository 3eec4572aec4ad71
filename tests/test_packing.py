#!/usr/bin/env python3
"""
Unit tests for strip packing: geometry, the NPS and bottom-left decoders,
and the strip-packing adapter.

Tests:
- is_feasible / packing_height on hand-built layouts
- NPS on small instances worked out by hand
- NPS determinism and feasibility (inside the strip, no overlaps, supported)
- NPS tie-break between equal-quality candidates
- Bottom-left decoding and adapter fitness
"""

import pytest
import torch

from metaheuristics.core import PlacementError, PlacementHeuristic, TorchRandomSource
from metaheuristics.packing import (
    Position,
    StripPackingAdapter,
    StripPackingInstance,
    bottom_left_coordinates,
    choose_position,
    is_feasible,
    nps_coordinates,
    nps_is_feasible,
    packing_height,
)
from metaheuristics.problems import is_permutation


def two_item_instance():
    # 2x1 and 1x2 in a strip of width 2
    return StripPackingInstance(widths=(2, 1), heights=(1, 2), strip_width=2)


def square_plus_units_instance():
    # A 2x2 square and two unit squares; a perfect packing has height 2
    return StripPackingInstance(widths=(2, 1, 1), heights=(2, 1, 1), strip_width=3)


def supported(instance, coordinates, item):
    """Left and bottom edges touch the strip or another item."""
    x, y = coordinates[item]
    w, h = instance.widths[item], instance.heights[item]
    left = x == 0
    bottom = y == 0
    for other, (ox, oy) in enumerate(coordinates):
        if other == item:
            continue
        ow, oh = instance.widths[other], instance.heights[other]
        if oy + oh == y and ox < x + w and ox + ow > x:
            bottom = True
        if ox + ow == x and oy < y + h and oy + oh > y:
            left = True
    return left and bottom


# =============================================================================
# Geometry
# =============================================================================

def test_instance_validation():
    with pytest.raises(ValueError):
        StripPackingInstance(widths=(1, 2), heights=(1,), strip_width=3)
    with pytest.raises(ValueError):
        StripPackingInstance(widths=(4,), heights=(1,), strip_width=3)
    with pytest.raises(ValueError):
        StripPackingInstance(widths=(0,), heights=(1,), strip_width=3)
    with pytest.raises(ValueError):
        StripPackingInstance(widths=(1,), heights=(1,), strip_width=0)


def test_is_feasible_detects_overlap_and_overflow():
    instance = two_item_instance()

    assert is_feasible(instance, [Position(0, 0), Position(0, 1)]), "Stacked layout must be feasible"
    assert not is_feasible(instance, [Position(0, 0), Position(1, 0)]), "Overlapping items must be rejected"
    assert not is_feasible(instance, [Position(1, 0), Position(0, 1)]), "Item past the strip edge must be rejected"
    assert not is_feasible(instance, [Position(0, 0)]), "Missing coordinates must be rejected"


def test_is_feasible_detects_enclosed_item():
    """An item lying entirely inside another counts as overlapping."""
    instance = StripPackingInstance(widths=(3, 1), heights=(3, 1), strip_width=3)

    assert not is_feasible(instance, [Position(0, 0), Position(1, 1)]), "Enclosed item must be rejected"


def test_packing_height():
    instance = two_item_instance()
    assert packing_height(instance, [Position(0, 0), Position(0, 1)]) == 3
    assert packing_height(instance, [Position(0, 2), Position(0, 0)]) == 3


# =============================================================================
# NPS
# =============================================================================

def test_nps_two_items_both_orders():
    instance = two_item_instance()

    layout = nps_coordinates(instance, [0, 1])
    assert layout == [Position(0, 0), Position(0, 1)], f"Got {layout}"
    assert packing_height(instance, layout) == 3
    assert is_feasible(instance, layout)

    layout = nps_coordinates(instance, torch.tensor([1, 0]))
    assert layout == [Position(0, 2), Position(0, 0)], f"Got {layout}"
    assert packing_height(instance, layout) == 3
    assert is_feasible(instance, layout)


def test_nps_prefers_compact_candidate():
    """Unit squares go beside the 2x2 square, not on top of it."""
    instance = square_plus_units_instance()

    layout = nps_coordinates(instance, [0, 1, 2])

    assert layout == [Position(0, 0), Position(2, 0), Position(2, 1)], f"Got {layout}"
    assert packing_height(instance, layout) == 2


def test_nps_deterministic():
    instance = StripPackingInstance(widths=(1,) * 7, heights=(1,) * 7, strip_width=3)
    ordering = torch.tensor([4, 0, 6, 2, 5, 1, 3])

    assert nps_coordinates(instance, ordering) == nps_coordinates(instance, ordering.clone()), \
        "Same ordering must decode to identical coordinates"


def test_nps_layouts_feasible_and_supported():
    instance = StripPackingInstance(widths=(1,) * 8, heights=(1,) * 8, strip_width=3)
    gen = torch.Generator().manual_seed(13)
    for _ in range(10):
        ordering = torch.randperm(8, generator=gen)
        layout = nps_coordinates(instance, ordering)

        assert is_feasible(instance, layout), f"Infeasible layout {layout} for {ordering.tolist()}"
        for item in range(instance.num_items):
            assert supported(instance, layout, item), f"Item {item} at {layout[item]} floats"


def test_nps_mixed_sizes_feasible_and_supported():
    gen = torch.Generator().manual_seed(29)
    checked = 0
    for _ in range(40):
        strip_width = int(torch.randint(4, 10, (1,), generator=gen).item())
        n = int(torch.randint(2, 10, (1,), generator=gen).item())
        widths = torch.randint(1, strip_width + 1, (n,), generator=gen).tolist()
        heights = torch.randint(1, 6, (n,), generator=gen).tolist()
        instance = StripPackingInstance(widths=tuple(widths), heights=tuple(heights), strip_width=strip_width)
        ordering = torch.randperm(n, generator=gen)

        try:
            layout = nps_coordinates(instance, ordering)
        except PlacementError:
            continue
        checked += 1

        assert is_feasible(instance, layout), f"Infeasible layout {layout} for {instance}"
        for item in range(n):
            assert supported(instance, layout, item), f"Item {item} at {layout[item]} floats in {instance}"

    assert checked >= 20, f"Too few instances decoded: {checked}"


def test_nps_is_feasible_requires_support():
    instance = square_plus_units_instance()
    coordinates = [Position(0, 0), None, None]

    assert nps_is_feasible(instance, coordinates, [0], 1, Position(2, 0)), "Beside the square, on the floor"
    assert nps_is_feasible(instance, coordinates, [0], 1, Position(0, 2)), "On top of the square"
    assert not nps_is_feasible(instance, coordinates, [0], 1, Position(2, 1)), "Floating item"
    assert not nps_is_feasible(instance, coordinates, [0], 1, Position(1, 1)), "Overlapping item"
    assert not nps_is_feasible(instance, coordinates, [0], 1, Position(3, 0)), "Outside the strip"


def test_choose_position_highest_quality():
    chosen = choose_position([(Position(0, 3), 0.5), (Position(4, 0), 0.9), (Position(1, 1), 0.7)])
    assert chosen == Position(4, 0), f"Got {chosen}"


def test_choose_position_tie_break_compares_x_only():
    """On equal quality a later candidate wins if its x is not greater; y is ignored."""
    chosen = choose_position([(Position(2, 0), 0.8), (Position(2, 5), 0.8)])
    assert chosen == Position(2, 5), f"Later candidate with equal x must win, got {chosen}"

    chosen = choose_position([(Position(1, 5), 0.8), (Position(3, 0), 0.8)])
    assert chosen == Position(1, 5), f"Later candidate with larger x must lose, got {chosen}"


def test_choose_position_empty():
    assert choose_position([]) is None


def test_nps_wrong_ordering_length():
    with pytest.raises(ValueError):
        nps_coordinates(two_item_instance(), [0])


def test_placement_error_is_runtime_error():
    error = PlacementError(item=3, placed=2)
    assert isinstance(error, RuntimeError)
    assert "item 3" in str(error)


# =============================================================================
# Bottom-left
# =============================================================================

def test_bottom_left_two_items():
    instance = two_item_instance()

    assert bottom_left_coordinates(instance, [0, 1]) == [Position(0, 0), Position(0, 1)]
    assert bottom_left_coordinates(instance, [1, 0]) == [Position(0, 2), Position(0, 0)]


def test_bottom_left_fills_gap_beside_square():
    instance = square_plus_units_instance()

    layout = bottom_left_coordinates(instance, torch.tensor([0, 1, 2]))

    assert layout == [Position(0, 0), Position(2, 0), Position(2, 1)], f"Got {layout}"
    assert is_feasible(instance, layout)


def test_bottom_left_random_orderings_feasible():
    instance = StripPackingInstance(
        widths=(3, 1, 2, 2, 1, 4, 1),
        heights=(1, 3, 2, 1, 1, 1, 2),
        strip_width=5,
    )
    gen = torch.Generator().manual_seed(17)
    for _ in range(10):
        ordering = torch.randperm(instance.num_items, generator=gen)
        layout = bottom_left_coordinates(instance, ordering)
        assert is_feasible(instance, layout), f"Infeasible BL layout {layout}"
        assert packing_height(instance, layout) * instance.strip_width >= instance.total_area


# =============================================================================
# Adapter
# =============================================================================

def test_adapter_fitness_is_packing_height():
    adapter = StripPackingAdapter(two_item_instance(), rng=TorchRandomSource(seed=0))

    assert adapter.fitness(torch.tensor([0, 1])) == 3.0
    assert adapter.fitness(torch.tensor([1, 0])) == 3.0
    assert adapter.size == 2


def test_adapter_placement_selection():
    instance = square_plus_units_instance()
    nps = StripPackingAdapter(instance, placement=PlacementHeuristic.NPS)
    bl = StripPackingAdapter(instance, placement="bl")

    assert bl.placement == PlacementHeuristic.BOTTOM_LEFT
    assert nps.decode(torch.tensor([0, 1, 2])) == bl.decode(torch.tensor([0, 1, 2])), \
        "Both decoders find the perfect packing for this ordering"


def test_adapter_initial_solution_and_local_search():
    instance = StripPackingInstance(widths=(1,) * 6, heights=(1,) * 6, strip_width=3)
    adapter = StripPackingAdapter(instance, rng=TorchRandomSource(seed=4), local_search="first")

    ordering = adapter.initial_solution()
    before = adapter.fitness(ordering)
    adapter.local_search(ordering)

    assert is_permutation(ordering), f"Not a permutation: {ordering.tolist()}"
    assert adapter.fitness(ordering) <= before
