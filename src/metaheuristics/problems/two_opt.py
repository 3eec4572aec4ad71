"""
2-opt local search over pairwise position swaps.

Both variants borrow the individual for the duration of the search and
modify it in place with a swap / evaluate / swap-back loop. On every exit
path, including an exception raised by the fitness function, the individual
is either unchanged or differs from the input by exactly one swap.

Pairs are enumerated row-major: (0, 1), (0, 2), ..., (0, n-1), (1, 2), ...

Usage:
	fitness = two_opt_first(tour, adapter.fitness)
	fitness = two_opt_best(tour, adapter.fitness, current_fitness=fitness)
"""

from typing import Callable, Optional

from torch import Tensor

from metaheuristics.problems.permutation import swap


FitnessFn = Callable[[Tensor], float]


def two_opt_first(
	individual: Tensor,
	fitness_fn: FitnessFn,
	current_fitness: Optional[float] = None,
) -> float:
	"""
	First-improvement 2-opt.

	Keeps the first swap that strictly lowers the fitness and returns at once.
	If no swap improves, the individual is left as it was.

	Args:
		individual: Permutation, modified in place
		fitness_fn: Fitness to minimise
		current_fitness: Fitness of the individual if already known

	Returns:
		Fitness of the individual as left by the search
	"""
	base_fitness = fitness_fn(individual) if current_fitness is None else current_fitness
	n = individual.numel()

	for i in range(n - 1):
		for j in range(i + 1, n):
			swap(individual, i, j)
			keep = False
			try:
				candidate = fitness_fn(individual)
				keep = candidate < base_fitness
			finally:
				if not keep:
					swap(individual, i, j)
			if keep:
				return candidate

	return base_fitness


def two_opt_best(
	individual: Tensor,
	fitness_fn: FitnessFn,
	current_fitness: Optional[float] = None,
) -> float:
	"""
	Best-improvement 2-opt.

	Evaluates every pairwise swap and applies only the one with the lowest
	fitness, provided it strictly improves on the input. Ties keep the first
	pair in enumeration order.

	Returns:
		Fitness of the individual as left by the search
	"""
	best_fitness = fitness_fn(individual) if current_fitness is None else current_fitness
	best_move = None
	n = individual.numel()

	for i in range(n - 1):
		for j in range(i + 1, n):
			swap(individual, i, j)
			try:
				candidate = fitness_fn(individual)
			finally:
				swap(individual, i, j)
			if candidate < best_fitness:
				best_fitness = candidate
				best_move = (i, j)

	if best_move is not None:
		swap(individual, *best_move)

	return best_fitness
