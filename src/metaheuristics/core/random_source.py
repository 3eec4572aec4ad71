"""
Injectable random number sources.

Every random draw in the package (initial solutions, repair, mutation,
particle moves, perturbation) goes through a RandomSource so that an
adapter/engine pair can be made reproducible with a single seed, and tests
can script the exact sequence of draws.

Usage:
	rng = TorchRandomSource(seed=42)
	rng.discrete_uniform(0, 9)   # integer in [0, 9], both ends inclusive
	rng.uniform()                # float in [0, 1)
"""

from typing import Optional, Protocol, runtime_checkable

from torch import Generator, rand, randint


@runtime_checkable
class RandomSource(Protocol):
	"""Protocol for random sources used by adapters and engines."""

	def discrete_uniform(self, low: int, high: int) -> int:
		"""Uniform integer in [low, high], inclusive on both bounds."""
		...

	def uniform(self) -> float:
		"""Uniform float in [0, 1)."""
		...


class TorchRandomSource:
	"""
	RandomSource backed by a dedicated torch.Generator.

	The generator is private to this source, so seeding it does not touch
	torch's global RNG state.
	"""

	def __init__(self, seed: Optional[int] = None):
		self._seed = seed
		self._generator = Generator()
		if seed is None:
			self._generator.seed()
		else:
			self._generator.manual_seed(seed)

	@property
	def seed(self) -> Optional[int]:
		return self._seed

	def discrete_uniform(self, low: int, high: int) -> int:
		if high < low:
			raise ValueError(f"Empty range [{low}, {high}]")
		return int(randint(low, high + 1, (1,), generator=self._generator).item())

	def uniform(self) -> float:
		return float(rand(1, generator=self._generator).item())

	def __repr__(self) -> str:
		return f"TorchRandomSource(seed={self._seed})"
