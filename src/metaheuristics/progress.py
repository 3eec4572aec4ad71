"""
Progress tracking for search engines.

Every engine records one tick per completed iteration (a GA generation, a
PSO sweep, a tabu move, an ILS perturbation). The tick history doubles as
the per-iteration best-fitness samples returned in SearchResult.history.
"""

import time
from dataclasses import dataclass
from typing import Callable, List, Optional


@dataclass
class ProgressStats:
	"""Statistics for a single iteration."""
	iteration: int
	best_global: float
	best_current: float
	avg_current: float
	worst_current: float
	elapsed: float
	improved: bool = False


class ProgressTracker:
	"""
	Tracks search progress and logs standardized lines.

	Fitness is minimised.

	Usage:
		tracker = ProgressTracker(logger=print, prefix="[GA]")

		for it in range(iterations):
			fitness_values = [adapter.fitness(ind) for ind in population]
			tracker.tick(fitness_values, iteration=it)

		summary = tracker.summary()

	The tracker logs lines like:
		[GA] [Iter 12 | 0.84s] best=1032.0000, current=1040.0000, avg=1101.2500 *
	"""

	def __init__(
		self,
		logger: Optional[Callable[[str], None]] = None,
		prefix: str = "",
	):
		"""
		Args:
			logger: Callable that logs messages (e.g., Logger instance, print)
			prefix: Prefix for log messages (e.g., "[GA]")
		"""
		self._log = logger or print
		self._prefix = prefix + " " if prefix else ""
		self._start = time.monotonic()

		self._best_global: Optional[float] = None
		self._best_iteration: int = 0
		self._history: List[ProgressStats] = []

	def tick(
		self,
		fitness_values: List[float],
		iteration: Optional[int] = None,
		log: bool = True,
	) -> ProgressStats:
		"""
		Record the fitness values seen in one iteration.

		Args:
			fitness_values: Fitness of the population / neighbours / candidate
			iteration: Iteration number (auto-incremented if None)
			log: Whether to log the line

		Returns:
			ProgressStats for this iteration
		"""
		if not fitness_values:
			raise ValueError("fitness_values cannot be empty")

		it = iteration if iteration is not None else len(self._history)
		best_current = min(fitness_values)
		worst_current = max(fitness_values)
		avg_current = sum(fitness_values) / len(fitness_values)

		improved = self._best_global is None or best_current < self._best_global
		if improved:
			self._best_global = best_current
			self._best_iteration = it

		stats = ProgressStats(
			iteration=it,
			best_global=self._best_global,
			best_current=best_current,
			avg_current=avg_current,
			worst_current=worst_current,
			elapsed=time.monotonic() - self._start,
			improved=improved,
		)
		self._history.append(stats)

		if log:
			self._log_tick(stats)

		return stats

	def _log_tick(self, stats: ProgressStats) -> None:
		improved_str = " *" if stats.improved else ""
		self._log(
			f"{self._prefix}[Iter {stats.iteration} | {stats.elapsed:.2f}s] "
			f"best={stats.best_global:.4f}, "
			f"current={stats.best_current:.4f}, "
			f"avg={stats.avg_current:.4f}{improved_str}"
		)

	@property
	def best_global(self) -> Optional[float]:
		return self._best_global

	@property
	def best_iteration(self) -> int:
		return self._best_iteration

	@property
	def history(self) -> List[ProgressStats]:
		return self._history.copy()

	@property
	def iterations_run(self) -> int:
		return len(self._history)

	def best_samples(self) -> list[tuple[int, float]]:
		"""(iteration, best global fitness) per recorded tick."""
		return [(s.iteration, s.best_global) for s in self._history]

	def summary(self) -> dict:
		"""Get summary statistics."""
		if not self._history:
			return {"iterations": 0}

		first = self._history[0]
		last = self._history[-1]
		if first.best_current:
			improvement = (first.best_current - last.best_global) / first.best_current * 100
		else:
			improvement = 0.0

		return {
			"iterations": len(self._history),
			"initial_fitness": first.best_current,
			"final_fitness": last.best_global,
			"improvement_pct": improvement,
			"best_iteration": self._best_iteration,
			"improvements": sum(1 for s in self._history if s.improved),
			"elapsed": last.elapsed,
		}

	def log_summary(self) -> None:
		"""Log a summary of the search run."""
		s = self.summary()
		if s["iterations"] == 0:
			self._log(f"{self._prefix}No iterations completed")
			return

		self._log(f"{self._prefix}Summary:")
		self._log(f"  Iterations: {s['iterations']}")
		self._log(f"  Initial: {s['initial_fitness']:.4f}")
		self._log(f"  Final: {s['final_fitness']:.4f}")
		self._log(f"  Improvement: {s['improvement_pct']:.2f}%")
		self._log(f"  Best at iteration: {s['best_iteration']}")
		self._log(f"  Total improvements: {s['improvements']}")
		self._log(f"  Elapsed: {s['elapsed']:.2f}s")
