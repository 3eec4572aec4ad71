#!/usr/bin/env python3
"""
Unit tests for the TSP and QAP adapters.

Tests:
- Objective values on small hand-computed instances
- Instance validation
- Initial solutions (random and greedy randomized) are permutations
- Adapter hooks dispatch to the configured 2-opt variant
"""

import pytest
import torch

from metaheuristics.core import LocalSearchMode, TorchRandomSource
from metaheuristics.problems import (
    QAPAdapter,
    QAPInstance,
    TSPAdapter,
    TSPInstance,
    assignment_cost,
    grc_solution,
    is_permutation,
    tour_cost,
)


def three_city_instance():
    # 0 -> 1 costs 3, 1 -> 2 costs 4, 2 -> 0 costs 3
    return TSPInstance(torch.tensor([
        [0, 3, 9],
        [9, 0, 4],
        [3, 9, 0],
    ]))


def test_tsp_fitness_closes_the_tour():
    adapter = TSPAdapter(three_city_instance(), rng=TorchRandomSource(seed=0))

    fitness = adapter.fitness(torch.tensor([0, 1, 2]))

    assert fitness == 10.0, f"Expected 3 + 4 + 3 = 10, got {fitness}"


def test_tsp_cost_is_direction_sensitive():
    instance = three_city_instance()

    forward = tour_cost(instance, torch.tensor([0, 1, 2]))
    backward = tour_cost(instance, torch.tensor([0, 2, 1]))

    assert backward == 27.0, f"Expected 9 + 9 + 9 = 27, got {backward}"
    assert forward < backward


def test_tsp_instance_rejects_non_square():
    with pytest.raises(ValueError):
        TSPInstance(torch.zeros(2, 3))
    with pytest.raises(ValueError):
        TSPInstance(torch.zeros(0, 0))


def test_tsp_initial_solutions_are_permutations():
    costs = torch.rand(9, 9, generator=torch.Generator().manual_seed(4))
    for construction in TSPAdapter.CONSTRUCTIONS:
        adapter = TSPAdapter(TSPInstance(costs), rng=TorchRandomSource(seed=2), construction=construction)
        for _ in range(5):
            tour = adapter.initial_solution()
            assert is_permutation(tour), f"{construction} built {tour.tolist()}"


def test_tsp_unknown_construction():
    with pytest.raises(ValueError):
        TSPAdapter(three_city_instance(), construction="nearest")


def test_grc_threshold_one_follows_nearest_neighbour():
    """With threshold 1.0 only the cheapest unvisited city is eligible."""
    costs = torch.tensor([
        [0, 1, 5, 5],
        [5, 0, 1, 5],
        [5, 5, 0, 1],
        [1, 5, 5, 0],
    ])
    rng = TorchRandomSource(seed=8)

    tour = grc_solution(TSPInstance(costs), rng, rcl_threshold=1.0)

    start = tour[0].item()
    expected = [(start + k) % 4 for k in range(4)]
    assert tour.tolist() == expected, f"Expected the cheap cycle {expected}, got {tour.tolist()}"


def test_tsp_local_search_modes():
    costs = torch.rand(8, 8, generator=torch.Generator().manual_seed(6))
    tour = torch.tensor([7, 3, 1, 0, 5, 2, 6, 4])
    for mode in LocalSearchMode:
        adapter = TSPAdapter(TSPInstance(costs), rng=TorchRandomSource(seed=1), local_search=mode)
        individual = tour.clone()
        before = adapter.fitness(individual)
        adapter.local_search(individual)
        after = adapter.fitness(individual)
        assert after <= before, f"{mode.name} worsened {before} -> {after}"
        if mode == LocalSearchMode.NONE:
            assert torch.equal(individual, tour), "NONE must leave the tour unchanged"


def test_adapter_accepts_local_search_name():
    adapter = TSPAdapter(three_city_instance(), local_search="best")
    assert adapter.local_search_mode == LocalSearchMode.BEST_IMPROVEMENT


def test_qap_cost():
    instance = QAPInstance(
        flows=torch.tensor([[0, 1], [2, 0]]),
        distances=torch.tensor([[0, 5], [7, 0]]),
    )

    identity = assignment_cost(instance, torch.tensor([0, 1]))
    swapped = assignment_cost(instance, torch.tensor([1, 0]))

    assert identity == 19.0, f"Expected 1*5 + 2*7 = 19, got {identity}"
    assert swapped == 17.0, f"Expected 2*5 + 1*7 = 17, got {swapped}"


def test_qap_adapter_local_search_finds_better_assignment():
    instance = QAPInstance(
        flows=torch.tensor([[0, 1], [2, 0]]),
        distances=torch.tensor([[0, 5], [7, 0]]),
    )
    adapter = QAPAdapter(instance, rng=TorchRandomSource(seed=0))
    individual = torch.tensor([0, 1])

    adapter.local_search(individual)

    assert individual.tolist() == [1, 0], f"Expected [1, 0], got {individual.tolist()}"
    assert adapter.size == 2


def test_qap_instance_validation():
    with pytest.raises(ValueError):
        QAPInstance(torch.zeros(2, 2), torch.zeros(3, 3))
    with pytest.raises(ValueError):
        QAPInstance(torch.zeros(2, 3), torch.zeros(2, 3))


def test_adapter_repair_and_perturb_share_rng():
    costs = torch.rand(6, 6, generator=torch.Generator().manual_seed(2))
    adapter = TSPAdapter(TSPInstance(costs), rng=TorchRandomSource(seed=5))

    individual = torch.tensor([0, 0, 0, 1, 1, 1])
    adapter.repair(individual)
    assert is_permutation(individual), f"Repair failed: {individual.tolist()}"

    adapter.perturb(individual, 3)
    assert is_permutation(individual), f"Perturb broke the permutation: {individual.tolist()}"

    neighbor, (i, j) = adapter.neighbor(individual)
    assert i < j and is_permutation(neighbor), f"Bad neighbour move ({i}, {j})"
