#!/usr/bin/env python3
"""
Metaheuristics CLI

Command-line interface for solving TSP, QAP and 2SP instance files.

Usage:
	metaheuristics solve PROBLEM METHOD INPUT OUTPUT [--time-limit SECONDS] [--seed SEED]
		[--local-search first|best|none] [--placement nps|bl] [--verbose] [--log-dir DIR]

Examples:
	metaheuristics solve tsp ga cities.txt tour.txt --time-limit 10 --seed 42
	metaheuristics solve 2sp ts items.txt layout.txt --placement bl
"""

from pathlib import Path
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from metaheuristics.core.enums import LocalSearchMode, PlacementHeuristic, ProblemType, SearchMethod
from metaheuristics.core.errors import InstanceFormatError, PlacementError
from metaheuristics.logger import Logger
from metaheuristics.solver import solve

app = typer.Typer(
	name="metaheuristics",
	help="Discrete metaheuristics for TSP, QAP and 2D strip packing",
	no_args_is_help=True,
)

console = Console()


@app.callback()
def main():
	"""Solve combinatorial instance files with GA, PSO, TS or ILS."""


@app.command("solve")
def solve_command(
	problem: str = typer.Argument(..., help="Problem type: tsp, qap or 2sp"),
	method: str = typer.Argument(..., help="Search method: ga, pso, ts or ils"),
	input_path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Instance file"),
	output_path: Path = typer.Argument(..., dir_okay=False, help="Solution file to write"),
	time_limit: float = typer.Option(10.0, "--time-limit", "-t", min=0.0, help="Wall-clock budget in seconds"),
	seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
	local_search: str = typer.Option("first", "--local-search", help="2-opt variant: first, best or none"),
	placement: str = typer.Option("nps", "--placement", help="2SP decoder: nps or bl"),
	verbose: bool = typer.Option(False, "--verbose", "-v", help="Print search progress"),
	log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Also write the progress log to this directory"),
):
	"""Search an instance and write the best solution found."""
	try:
		problem_type = ProblemType.parse(problem)
		search_method = SearchMethod.parse(method)
		ls_mode = LocalSearchMode.parse(local_search)
		placement_heuristic = PlacementHeuristic.parse(placement)
	except ValueError as e:
		rprint(f"[red]Error: {e}[/red]")
		raise typer.Exit(2)

	logger = None
	if log_dir is not None:
		name = f"{problem_type.name.lower()}_{search_method.name.lower()}"
		logger = Logger(name, log_dir=str(log_dir), console=verbose)
		logger.header(f"{search_method.name} on {input_path.name}")

	try:
		result = solve(
			problem_type,
			search_method,
			input_path,
			output_path,
			time_limit=time_limit,
			seed=seed,
			local_search=ls_mode,
			placement=placement_heuristic,
			verbose=verbose or logger is not None,
			logger=logger,
		)
	except InstanceFormatError as e:
		rprint(f"[red]Error: {e}[/red]")
		raise typer.Exit(1)
	except PlacementError as e:
		rprint(f"[red]Placement failed: {e}[/red]")
		raise typer.Exit(1)
	finally:
		if logger is not None:
			logger.close()

	table = Table(title=f"{result.method_name} on {input_path.name}")
	table.add_column("Metric", style="cyan")
	table.add_column("Value", justify="right")
	table.add_row("Problem", problem_type.name)
	table.add_row("Initial fitness", f"{result.initial_fitness:.4f}")
	table.add_row("Best fitness", f"[green]{result.best_fitness:.4f}[/green]")
	table.add_row("Improvement", f"{result.improvement_percent:.2f}%")
	table.add_row("Iterations", str(result.iterations_run))
	table.add_row("Elapsed", f"{result.elapsed_seconds:.2f}s")
	table.add_row("Seed", "-" if seed is None else str(seed))
	table.add_row("Output", str(output_path))
	console.print(table)

	if logger is not None:
		rprint(f"[dim]Log: {logger.log_file}[/dim]")


if __name__ == "__main__":
	app()
