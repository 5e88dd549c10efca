# tests/test_maze_gen.py
import random
from collections import deque

import pytest

from src.core.config import MazeConfig
from src.core.maze_gen import MazeGenerator, generate_maze
from src.core.terrain import CellKind


def _reachable(grid, src):
    """Plain flood fill over passable cells."""
    seen = {src}
    todo = deque([src])
    while todo:
        cur = todo.popleft()
        for n in grid.neighbors4(cur):
            if n not in seen:
                seen.add(n)
                todo.append(n)
    return seen


@pytest.mark.parametrize("seed", range(25))
def test_exit_is_always_reachable(seed):
    grid = generate_maze(seed=seed)
    assert grid.goal in _reachable(grid, grid.start)


@pytest.mark.parametrize("seed", range(10))
def test_border_is_sealed(seed):
    grid = generate_maze(seed=seed)
    for r in range(grid.rows):
        for c in range(grid.cols):
            if r in (0, grid.rows - 1) or c in (0, grid.cols - 1):
                assert grid.cells[r][c] is CellKind.WALL, (r, c)


def test_default_dimensions_and_fixed_endpoints():
    grid = generate_maze(seed=0)
    assert (grid.rows, grid.cols) == (21, 21)
    assert grid.start == (1, 1)
    assert grid.goal == (19, 19)
    assert grid.kind_at(grid.start) is CellKind.GRASS
    assert grid.kind_at(grid.goal) is CellKind.GRASS


def test_same_seed_same_maze():
    assert generate_maze(seed=42).cells == generate_maze(seed=42).cells
    assert generate_maze(seed=42).cells != generate_maze(seed=43).cells


def test_carve_reaches_every_odd_cell():
    grid = generate_maze(MazeConfig(braid_probability=0.0), seed=5)
    for r in range(1, grid.rows - 1, 2):
        for c in range(1, grid.cols - 1, 2):
            assert grid.kind_at((r, c)) is not CellKind.WALL, (r, c)


def test_without_braiding_the_maze_is_a_tree():
    grid = generate_maze(MazeConfig(braid_probability=0.0), seed=9)
    cells = set(grid.passable_cells())
    edges = sum(1 for c in cells for n in grid.neighbors4(c)) // 2
    assert edges == len(cells) - 1


def test_braiding_opens_loops():
    tree = generate_maze(MazeConfig(braid_probability=0.0), seed=9)
    braided = generate_maze(MazeConfig(braid_probability=1.0), seed=9)
    assert len(set(braided.passable_cells())) > len(set(tree.passable_cells()))
    cells = set(braided.passable_cells())
    edges = sum(1 for c in cells for n in braided.neighbors4(c)) // 2
    assert edges > len(cells) - 1


def test_reskin_respects_probabilities():
    all_grass = generate_maze(MazeConfig(grass_probability=1.0, mud_probability=0.0), seed=1)
    assert {all_grass.kind_at(c) for c in all_grass.passable_cells()} == {CellKind.GRASS}

    all_mud = generate_maze(MazeConfig(grass_probability=0.0, mud_probability=1.0), seed=1)
    kinds = {c: all_mud.kind_at(c) for c in all_mud.passable_cells()}
    assert kinds.pop(all_mud.start) is CellKind.GRASS
    assert kinds.pop(all_mud.goal) is CellKind.GRASS
    assert set(kinds.values()) == {CellKind.MUD}

    all_water = generate_maze(MazeConfig(grass_probability=0.0, mud_probability=0.0), seed=1)
    inner = [all_water.kind_at(c) for c in all_water.passable_cells()
             if c not in (all_water.start, all_water.goal)]
    assert set(inner) == {CellKind.WATER}


def test_terrain_mix_is_roughly_half_grass():
    gen = MazeGenerator(MazeConfig(), random.Random(0))
    counts = {k: 0 for k in CellKind}
    for _ in range(20):
        grid = gen.generate()
        for c in grid.passable_cells():
            counts[grid.kind_at(c)] += 1
    total = counts[CellKind.GRASS] + counts[CellKind.MUD] + counts[CellKind.WATER]
    assert 0.42 < counts[CellKind.GRASS] / total < 0.58
    assert 0.22 < counts[CellKind.MUD] / total < 0.38
    assert 0.13 < counts[CellKind.WATER] / total < 0.27


def test_smallest_maze_still_connects_start_and_exit():
    for seed in range(10):
        grid = generate_maze(MazeConfig(rows=5, cols=7), seed=seed)
        assert grid.goal == (3, 5)
        assert grid.goal in _reachable(grid, grid.start)
