#!/usr/bin/env python3
"""
Tests for instance readers, solution writers and the solve() driver.
"""

import pytest
import torch

from metaheuristics.core import InstanceFormatError
from metaheuristics.io import (
    read_qap_instance,
    read_strip_packing_instance,
    read_tsp_instance,
    write_permutation_solution,
    write_strip_packing_solution,
)
from metaheuristics.packing import Position, StripPackingInstance, is_feasible
from metaheuristics.solver import build_adapter, solve


def write(path, text):
    path.write_text(text)
    return path


def test_read_tsp(tmp_path):
    path = write(tmp_path / "tiny.tsp", "3\n0 3 9\n9 0 4\n3 9 0\n")

    instance = read_tsp_instance(path)

    assert instance.num_cities == 3
    assert instance.costs[1, 2].item() == 4.0


def test_read_qap_ignores_blank_lines(tmp_path):
    path = write(tmp_path / "tiny.qap", "2\n\n0 1\n2 0\n\n0 5\n7 0\n")

    instance = read_qap_instance(path)

    assert instance.num_facilities == 2
    assert instance.flows.tolist() == [[0.0, 1.0], [2.0, 0.0]]
    assert instance.distances.tolist() == [[0.0, 5.0], [7.0, 0.0]]


def test_read_strip_packing(tmp_path):
    path = write(tmp_path / "tiny.2sp", "2\n2\n2 1\n1 2\n")

    instance = read_strip_packing_instance(path)

    assert instance == StripPackingInstance(widths=(2, 1), heights=(1, 2), strip_width=2)


@pytest.mark.parametrize("reader, text", [
    (read_tsp_instance, "3\n0 1 2\n1 0 2\n"),            # missing row
    (read_tsp_instance, "2\n0 x\n1 0\n"),                 # non-integer
    (read_tsp_instance, "2\n0 1\n1 0\n7\n"),              # trailing token
    (read_tsp_instance, "0\n"),                           # empty instance
    (read_qap_instance, "2\n0 1\n2 0\n0 5\n"),            # missing distances
    (read_strip_packing_instance, "2\n2\n2 1\n"),         # missing item
    (read_strip_packing_instance, "1\n2\n3 1\n"),         # item wider than strip
])
def test_malformed_instances(tmp_path, reader, text):
    path = write(tmp_path / "bad.txt", text)

    with pytest.raises(InstanceFormatError) as excinfo:
        reader(path)

    assert "bad.txt" in str(excinfo.value), f"Error must name the file: {excinfo.value}"
    assert isinstance(excinfo.value, ValueError)


def test_write_permutation_solution(tmp_path):
    path = tmp_path / "tour.sol"

    write_permutation_solution(path, torch.tensor([2, 0, 1]), 10.0)

    assert path.read_text() == "10\n2 0 1\n"


def test_write_strip_packing_solution(tmp_path):
    path = tmp_path / "layout.sol"
    instance = StripPackingInstance(widths=(2, 1), heights=(1, 2), strip_width=2)

    write_strip_packing_solution(path, instance, [Position(0, 0), Position(0, 1)])

    assert path.read_text() == "3\n0 0\n0 1\n"


def test_build_adapter_by_name(tmp_path):
    path = write(tmp_path / "tiny.2sp", "2\n2\n2 1\n1 2\n")

    adapter = build_adapter("2sp", path, placement="bl")

    assert adapter.size == 2
    assert adapter.placement.name == "BOTTOM_LEFT"


@pytest.mark.parametrize("method", ["ga", "pso", "ts", "ils"])
def test_solve_tsp(tmp_path, method):
    source = write(tmp_path / "tiny.tsp", "3\n0 3 9\n9 0 4\n3 9 0\n")
    target = tmp_path / "tiny.sol"

    result = solve("tsp", method, source, target, time_limit=0.2, seed=1)

    objective, tour = target.read_text().splitlines()
    assert float(objective) == result.best_fitness
    assert sorted(int(v) for v in tour.split()) == [0, 1, 2]
    assert result.best_fitness == 10.0, f"3-city optimum is 10, got {result.best_fitness}"


def test_solve_strip_packing(tmp_path):
    source = write(tmp_path / "items.2sp", "3\n3\n2 2\n1 1\n1 1\n")
    target = tmp_path / "items.sol"

    result = solve("2sp", "ga", source, target, time_limit=0.2, seed=5)

    lines = target.read_text().splitlines()
    assert int(lines[0]) == int(result.best_fitness)
    layout = [Position(*map(int, line.split())) for line in lines[1:]]
    instance = read_strip_packing_instance(source)
    assert is_feasible(instance, layout), f"Written layout infeasible: {layout}"


def test_solve_propagates_format_error(tmp_path):
    source = write(tmp_path / "broken.qap", "2\n0 1\n")

    with pytest.raises(InstanceFormatError):
        solve("qap", "ts", source, tmp_path / "out.sol", time_limit=0.1)
