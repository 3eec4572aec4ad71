"""
Shared operators on permutation-encoded individuals.

An individual is a 1-D int64 tensor of length n. After repair() it holds
every value of 0..n-1 exactly once.
"""

from torch import Tensor, int64, tensor

from metaheuristics.core.random_source import RandomSource


def is_permutation(individual: Tensor) -> bool:
	"""True if the individual contains each of 0..n-1 exactly once."""
	n = individual.numel()
	return sorted(individual.tolist()) == list(range(n))


def random_permutation(n: int, rng: RandomSource) -> Tensor:
	"""Uniform random permutation of 0..n-1 built by drawing from a shrinking pool."""
	pool = list(range(n))
	order = []
	for _ in range(n):
		order.append(pool.pop(rng.discrete_uniform(0, len(pool) - 1)))
	return tensor(order, dtype=int64)


def repair(individual: Tensor, rng: RandomSource) -> Tensor:
	"""
	Restore the permutation invariant in place.

	The first occurrence of each value is kept. Every later duplicate (and any
	value outside 0..n-1) is replaced, scanning left to right, by a value drawn
	uniformly from the values still missing. A valid permutation is returned
	untouched and consumes no random draws.
	"""
	n = individual.numel()
	values = individual.tolist()
	used = [False] * n
	used_count = 0
	repeated = []

	for position, value in enumerate(values):
		if 0 <= value < n and not used[value]:
			used[value] = True
			used_count += 1
		else:
			repeated.append(position)

	if used_count == n:
		return individual

	for position in repeated:
		count = rng.discrete_uniform(1, n - used_count)
		for value in range(n):
			if not used[value]:
				count -= 1
				if count == 0:
					values[position] = value
					used[value] = True
					used_count += 1
					break

	individual.copy_(tensor(values, dtype=individual.dtype))
	return individual


def swap(individual: Tensor, i: int, j: int) -> None:
	"""Swap two positions in place."""
	# Advanced indexing copies the right-hand side before assignment
	individual[[i, j]] = individual[[j, i]]


def random_swap_move(n: int, rng: RandomSource) -> tuple[int, int]:
	"""Two distinct positions, returned as (low, high)."""
	a = rng.discrete_uniform(0, n - 1)
	b = a
	while b == a:
		b = rng.discrete_uniform(0, n - 1)
	return (a, b) if a < b else (b, a)


def swap_neighbor(individual: Tensor, rng: RandomSource) -> tuple[Tensor, tuple[int, int]]:
	"""Copy of the individual with one random pairwise swap, plus that move."""
	neighbor = individual.clone()
	if neighbor.numel() < 2:
		return neighbor, (0, 0)
	move = random_swap_move(neighbor.numel(), rng)
	swap(neighbor, *move)
	return neighbor, move


def perturb(individual: Tensor, strength: int, rng: RandomSource) -> Tensor:
	"""Apply `strength` random pairwise swaps in place."""
	if individual.numel() < 2:
		return individual
	for _ in range(strength):
		swap(individual, *random_swap_move(individual.numel(), rng))
	return individual
