"""
Discrete Particle Swarm Optimization engine.

Positions are permutation individuals. Instead of a real-valued velocity,
each gene of a particle's next position is drawn from one of three sources:
- the particle's personal best, with probability previous_confidence
- the swarm's global best, with probability neighbor_confidence
- a uniform random gene otherwise

The blended position is then repaired back into a permutation.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from torch import Tensor, int64, tensor

from metaheuristics.core.random_source import RandomSource
from metaheuristics.engines.base import SearchEngineBase
from metaheuristics.problems.base import ProblemAdapter
from metaheuristics.progress import ProgressTracker


@dataclass
class ParticleSwarmConfig:
	"""
	Configuration for discrete PSO.

	- particle_count: swarm size
	- previous_confidence: pull toward the particle's own best
	- neighbor_confidence: pull toward the swarm's global best
	- repair_enabled / local_search_enabled: hooks applied after every move
	"""
	particle_count: int = 30
	previous_confidence: float = 0.3
	neighbor_confidence: float = 0.5
	repair_enabled: bool = True
	local_search_enabled: bool = False


@dataclass
class Particle:
	"""Current position and personal best of one particle."""
	position: Tensor
	fitness: float
	best_position: Tensor
	best_fitness: float


class ParticleSwarmEngine(SearchEngineBase):
	"""
	Discrete PSO over permutation individuals.

	Each sweep moves every particle once, then refreshes the global best
	from the personal bests.
	"""

	def __init__(
		self,
		adapter: ProblemAdapter,
		config: Optional[ParticleSwarmConfig] = None,
		rng: Optional[RandomSource] = None,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	):
		super().__init__(adapter, rng=rng, verbose=verbose, logger=logger)
		self._config = config or ParticleSwarmConfig()
		cfg = self._config
		if cfg.particle_count < 1:
			raise ValueError(f"particle_count must be at least 1, got {cfg.particle_count}")
		if min(cfg.previous_confidence, cfg.neighbor_confidence) < 0.0:
			raise ValueError("Confidences must be non-negative")
		if cfg.previous_confidence + cfg.neighbor_confidence > 1.0:
			raise ValueError(
				f"previous_confidence + neighbor_confidence must not exceed 1, "
				f"got {cfg.previous_confidence} + {cfg.neighbor_confidence}"
			)

	@property
	def config(self) -> ParticleSwarmConfig:
		return self._config

	@property
	def name(self) -> str:
		return "ParticleSwarm"

	@property
	def tag(self) -> str:
		return "PSO"

	def _search(self, deadline: float, max_iterations: Optional[int], tracker: ProgressTracker) -> int:
		cfg = self._config

		swarm = []
		for _ in range(cfg.particle_count):
			position = self._adapter.initial_solution()
			fitness = self._prepare(position, cfg.repair_enabled, cfg.local_search_enabled)
			swarm.append(Particle(position, fitness, position.clone(), fitness))
			self._update_best(position, fitness)

		self._record_initial(min(p.fitness for p in swarm))
		self._tick(tracker, [p.fitness for p in swarm], 0)

		iteration = 0
		while self._keep_going(deadline, iteration, max_iterations):
			global_best = self._best.clone()
			for particle in swarm:
				particle.position = self._move(particle, global_best)
				particle.fitness = self._prepare(particle.position, cfg.repair_enabled, cfg.local_search_enabled)
				if particle.fitness < particle.best_fitness:
					particle.best_position = particle.position.clone()
					particle.best_fitness = particle.fitness

			for particle in swarm:
				self._update_best(particle.best_position, particle.best_fitness)

			iteration += 1
			self._tick(tracker, [p.fitness for p in swarm], iteration)

		return iteration

	def _move(self, particle: Particle, global_best: Tensor) -> Tensor:
		"""Blend personal best, global best and random genes into a new position."""
		cfg = self._config
		n = particle.position.numel()
		personal = particle.best_position.tolist()
		neighbor = global_best.tolist()
		values = []
		for gene in range(n):
			u = self._rng.uniform()
			if u < cfg.previous_confidence:
				values.append(personal[gene])
			elif u < cfg.previous_confidence + cfg.neighbor_confidence:
				values.append(neighbor[gene])
			else:
				values.append(self._rng.discrete_uniform(0, n - 1))
		return tensor(values, dtype=int64)

	def __repr__(self) -> str:
		return f"ParticleSwarmEngine(config={self._config}, verbose={self._verbose})"
