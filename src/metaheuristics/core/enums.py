"""Enums for search engines, problems and their operators."""

from enum import IntEnum, auto


class _NamedEnum(IntEnum):
	"""IntEnum that can be looked up by a case-insensitive name (e.g. from the CLI)."""

	@classmethod
	def parse(cls, name: str):
		key = name.strip().upper().replace("-", "_")
		aliases = getattr(cls, "_aliases", lambda: {})()
		key = aliases.get(key, key)
		try:
			return cls[key]
		except KeyError:
			choices = ", ".join(m.name.lower() for m in cls)
			raise ValueError(f"Unknown {cls.__name__} '{name}' (choose from: {choices})") from None


class SearchMethod(_NamedEnum):
	"""Discrete metaheuristic used to search the permutation space."""
	GENETIC_ALGORITHM = auto()       # Population, crossover, per-gene mutation
	PARTICLE_SWARM = auto()          # Discrete PSO pulled toward personal/global best
	TABU_SEARCH = auto()             # Swap neighbourhood with FIFO tabu list
	ITERATED_LOCAL_SEARCH = auto()   # Perturb + local search, restarts on stagnation

	@staticmethod
	def _aliases() -> dict:
		return {"GA": "GENETIC_ALGORITHM", "PSO": "PARTICLE_SWARM", "TS": "TABU_SEARCH", "ILS": "ITERATED_LOCAL_SEARCH"}


class ProblemType(_NamedEnum):
	"""Combinatorial problems with a bundled adapter."""
	TSP = auto()       # Traveling salesman
	QAP = auto()       # Quadratic assignment
	TWO_SP = auto()    # Two-dimensional strip packing

	@staticmethod
	def _aliases() -> dict:
		return {"2SP": "TWO_SP", "STRIP_PACKING": "TWO_SP"}


class LocalSearchMode(_NamedEnum):
	"""Which 2-opt variant an adapter runs in local_search()."""
	NONE = auto()
	FIRST_IMPROVEMENT = auto()
	BEST_IMPROVEMENT = auto()

	@staticmethod
	def _aliases() -> dict:
		return {"FIRST": "FIRST_IMPROVEMENT", "BEST": "BEST_IMPROVEMENT"}


class PlacementHeuristic(_NamedEnum):
	"""Decoder turning a 2SP item ordering into coordinates."""
	NPS = auto()           # Normal pattern shifting
	BOTTOM_LEFT = auto()   # Bottom-left fill

	@staticmethod
	def _aliases() -> dict:
		return {"BL": "BOTTOM_LEFT"}
