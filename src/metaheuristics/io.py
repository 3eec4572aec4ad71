"""
Plain-text instance readers and solution writers.

Instance files are whitespace-separated integers; line breaks and blank
lines carry no meaning. Layouts:

	TSP: n, then the n x n cost matrix
	QAP: n, then the n x n flow matrix, then the n x n distance matrix
	2SP: n, the strip width, then one "width height" pair per item

Solution files start with the objective value on the first line, followed
by the permutation on one line (TSP, QAP) or one "x y" line per item (2SP).
"""

import os
from typing import Iterator, Sequence, Union

from torch import Tensor, tensor

from metaheuristics.core.errors import InstanceFormatError
from metaheuristics.packing.geometry import Position, StripPackingInstance, packing_height
from metaheuristics.problems.qap import QAPInstance
from metaheuristics.problems.tsp import TSPInstance


PathLike = Union[str, os.PathLike]


class _TokenReader:
	"""Sequential integer reader over the tokens of one instance file."""

	def __init__(self, path: PathLike, problem: str):
		self._path = path
		self._problem = problem
		try:
			with open(path, "r") as f:
				tokens = f.read().split()
		except UnicodeDecodeError as e:
			raise InstanceFormatError(path, problem, f"not a text file ({e.reason})") from e
		self._tokens: Iterator[str] = iter(tokens)
		self._consumed = 0

	def error(self, reason: str) -> InstanceFormatError:
		return InstanceFormatError(self._path, self._problem, reason)

	def next_int(self, what: str) -> int:
		token = next(self._tokens, None)
		if token is None:
			raise self.error(f"unexpected end of file while reading {what}")
		self._consumed += 1
		try:
			return int(token)
		except ValueError:
			raise self.error(f"expected an integer for {what}, got '{token}' (token {self._consumed})") from None

	def next_count(self, what: str) -> int:
		value = self.next_int(what)
		if value <= 0:
			raise self.error(f"{what} must be positive, got {value}")
		return value

	def next_matrix(self, n: int, what: str) -> list[list[int]]:
		return [[self.next_int(f"{what}[{i}][{j}]") for j in range(n)] for i in range(n)]

	def finish(self) -> None:
		extra = sum(1 for _ in self._tokens)
		if extra:
			raise self.error(f"{extra} unexpected trailing token(s)")


def read_tsp_instance(path: PathLike) -> TSPInstance:
	reader = _TokenReader(path, "TSP")
	n = reader.next_count("number of cities")
	costs = reader.next_matrix(n, "costs")
	reader.finish()
	return TSPInstance(tensor(costs))


def read_qap_instance(path: PathLike) -> QAPInstance:
	reader = _TokenReader(path, "QAP")
	n = reader.next_count("number of facilities")
	flows = reader.next_matrix(n, "flows")
	distances = reader.next_matrix(n, "distances")
	reader.finish()
	return QAPInstance(tensor(flows), tensor(distances))


def read_strip_packing_instance(path: PathLike) -> StripPackingInstance:
	reader = _TokenReader(path, "2SP")
	n = reader.next_count("number of items")
	strip_width = reader.next_count("strip width")
	widths, heights = [], []
	for item in range(n):
		widths.append(reader.next_int(f"width of item {item}"))
		heights.append(reader.next_int(f"height of item {item}"))
	reader.finish()
	try:
		return StripPackingInstance(tuple(widths), tuple(heights), strip_width)
	except ValueError as e:
		raise reader.error(str(e)) from e


def _format_objective(value: float) -> str:
	return str(int(value)) if float(value).is_integer() else repr(float(value))


def write_permutation_solution(path: PathLike, individual: Tensor, fitness: float) -> None:
	"""Write a TSP tour or QAP assignment: objective, then the permutation."""
	values = individual.tolist() if isinstance(individual, Tensor) else list(individual)
	with open(path, "w") as f:
		f.write(_format_objective(fitness) + "\n")
		f.write(" ".join(str(v) for v in values) + "\n")


def write_strip_packing_solution(
	path: PathLike,
	instance: StripPackingInstance,
	coordinates: Sequence[Position],
) -> None:
	"""Write a layout: packing height, then one "x y" line per item."""
	if len(coordinates) != instance.num_items:
		raise ValueError(f"Expected {instance.num_items} coordinates, got {len(coordinates)}")
	with open(path, "w") as f:
		f.write(f"{packing_height(instance, coordinates)}\n")
		for position in coordinates:
			f.write(f"{position.x} {position.y}\n")
