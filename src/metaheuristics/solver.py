"""
End-to-end driver: read an instance, search it, write the best solution.

Usage:
	from metaheuristics.solver import solve

	result = solve("tsp", "ts", "berlin52.txt", "berlin52.sol", time_limit=30.0, seed=42)
	print(result)
"""

from typing import Callable, Optional, Union

from metaheuristics.core.enums import LocalSearchMode, PlacementHeuristic, ProblemType, SearchMethod
from metaheuristics.core.random_source import RandomSource, TorchRandomSource
from metaheuristics.engines.base import SearchResult
from metaheuristics.engines.factory import SearchEngineFactory
from metaheuristics.io import (
	PathLike,
	read_qap_instance,
	read_strip_packing_instance,
	read_tsp_instance,
	write_permutation_solution,
	write_strip_packing_solution,
)
from metaheuristics.packing.adapter import StripPackingAdapter
from metaheuristics.problems.base import ProblemAdapter
from metaheuristics.problems.qap import QAPAdapter
from metaheuristics.problems.tsp import TSPAdapter


def build_adapter(
	problem: Union[ProblemType, str],
	input_path: PathLike,
	rng: Optional[RandomSource] = None,
	local_search: Union[LocalSearchMode, str] = LocalSearchMode.FIRST_IMPROVEMENT,
	placement: Union[PlacementHeuristic, str] = PlacementHeuristic.NPS,
) -> ProblemAdapter:
	"""Read the instance file for `problem` and wrap it in its adapter."""
	if isinstance(problem, str):
		problem = ProblemType.parse(problem)

	if problem == ProblemType.TSP:
		return TSPAdapter(read_tsp_instance(input_path), rng=rng, local_search=local_search)
	elif problem == ProblemType.QAP:
		return QAPAdapter(read_qap_instance(input_path), rng=rng, local_search=local_search)
	elif problem == ProblemType.TWO_SP:
		return StripPackingAdapter(
			read_strip_packing_instance(input_path),
			rng=rng,
			local_search=local_search,
			placement=placement,
		)
	else:
		raise ValueError(f"Unknown problem type: {problem}")


def solve(
	problem: Union[ProblemType, str],
	method: Union[SearchMethod, str],
	input_path: PathLike,
	output_path: PathLike,
	time_limit: float,
	seed: Optional[int] = None,
	local_search: Union[LocalSearchMode, str] = LocalSearchMode.FIRST_IMPROVEMENT,
	placement: Union[PlacementHeuristic, str] = PlacementHeuristic.NPS,
	verbose: bool = False,
	logger: Optional[Callable[[str], None]] = None,
) -> SearchResult:
	"""
	Solve one instance file and write the best solution found.

	The engine uses the size-derived defaults of SearchEngineFactory and
	shares one seeded random source with the adapter.

	Args:
		problem: tsp, qap or 2sp
		method: ga, pso, ts or ils
		input_path: Instance file
		output_path: Solution file to write
		time_limit: Wall-clock budget in seconds
		seed: Seed for the random source (None: nondeterministic)
		local_search: 2-opt variant used by the adapter
		placement: 2SP decoder (ignored for TSP and QAP)
		verbose: Log engine progress
		logger: Logging callable (default: print)

	Raises:
		InstanceFormatError: the instance file is malformed
		ValueError: unknown problem, method or operator name
	"""
	if isinstance(method, str):
		method = SearchMethod.parse(method)

	rng = TorchRandomSource(seed)
	adapter = build_adapter(problem, input_path, rng=rng, local_search=local_search, placement=placement)
	engine = SearchEngineFactory.create(method, adapter, verbose=verbose, logger=logger)
	result = engine.run(time_limit)

	if isinstance(adapter, StripPackingAdapter):
		write_strip_packing_solution(output_path, adapter.instance, adapter.decode(result.best_individual))
	else:
		write_permutation_solution(output_path, result.best_individual, result.best_fitness)

	return result
