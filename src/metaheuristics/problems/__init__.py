"""
Problem adapters and shared permutation operators.

Strip packing lives in metaheuristics.packing; its adapter builds on the
same ProblemAdapter base.
"""

from metaheuristics.problems.base import ProblemAdapter
from metaheuristics.problems.permutation import (
	is_permutation,
	random_permutation,
	repair,
	perturb,
	swap_neighbor,
)
from metaheuristics.problems.two_opt import two_opt_first, two_opt_best
from metaheuristics.problems.tsp import TSPInstance, TSPAdapter, tour_cost, grc_solution
from metaheuristics.problems.qap import QAPInstance, QAPAdapter, assignment_cost

__all__ = [
	'ProblemAdapter',
	'is_permutation',
	'random_permutation',
	'repair',
	'perturb',
	'swap_neighbor',
	'two_opt_first',
	'two_opt_best',
	'TSPInstance',
	'TSPAdapter',
	'tour_cost',
	'grc_solution',
	'QAPInstance',
	'QAPAdapter',
	'assignment_cost',
]
