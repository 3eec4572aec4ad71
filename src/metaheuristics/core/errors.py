"""Exception types raised by the metaheuristics package."""


class InstanceFormatError(ValueError):
	"""An instance file could not be parsed into a valid instance."""

	def __init__(self, path, problem: str, reason: str):
		self.path = str(path)
		self.problem = problem
		self.reason = reason
		super().__init__(f"Malformed {problem} instance '{self.path}': {reason}")


class PlacementError(RuntimeError):
	"""A placement decoder found no feasible position for an item."""

	def __init__(self, item: int, placed: int):
		self.item = item
		self.placed = placed
		super().__init__(f"No feasible position for item {item} after placing {placed} items")
