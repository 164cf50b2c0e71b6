import random

import numpy as np
import pytest

from conftest import bfs_distances
from maze.generator import (
    calculate_path,
    create_grid,
    ensure_path_exists,
    gen_dfs_backtracker,
    generate,
    generate_fixed_level,
    generate_seeded,
)
from maze.maze_core import MazeGrid, reachable_cells
from utils.constants import DIRS, FIXED_LEVEL_SEED_STEP
from utils.errors import SaveDataError

SIZES = [(2, 2), (5, 5), (7, 3), (3, 9), (15, 15), (30, 30)]


@pytest.mark.parametrize("width,height", SIZES)
def test_every_cell_reachable_from_start(width, height):
    grid = generate_seeded(width, height, width * 31 + height)
    assert len(reachable_cells(grid, grid.start)) == width * height


@pytest.mark.parametrize("width,height", SIZES)
def test_carving_produces_spanning_tree(width, height):
    grid = generate_seeded(width, height, 99)
    open_horizontal = int((~grid.horizontal[1:height, :]).sum())
    open_vertical = int((~grid.vertical[:, 1:width]).sum())
    assert open_horizontal + open_vertical == width * height - 1
    assert grid.visited.all()


@pytest.mark.parametrize("width,height", SIZES)
def test_boundary_is_walled(width, height):
    grid = generate_seeded(width, height, 5)
    assert grid.horizontal[0, :].all()
    assert grid.horizontal[height, :].all()
    assert grid.vertical[:, 0].all()
    assert grid.vertical[:, width].all()


@pytest.mark.parametrize("seed", range(10))
def test_can_move_is_symmetric(seed):
    grid = generate_seeded(6, 4, seed)
    for y in range(grid.height):
        for x in range(grid.width):
            for dx, dy, _ in DIRS:
                if grid.in_bounds(x + dx, y + dy):
                    assert grid.can_move(x, y, dx, dy) == grid.can_move(x + dx, y + dy, -dx, -dy)
                else:
                    assert grid.can_move(x, y, dx, dy) is False


@pytest.mark.parametrize("seed", range(10))
def test_solution_path_is_valid_and_shortest(seed):
    grid = generate_seeded(8, 8, seed)
    path = grid.solution_path

    assert path[0] == grid.start
    assert path[-1] == grid.end
    for (ax, ay), (bx, by) in zip(path, path[1:]):
        assert grid.can_move(ax, ay, bx - ax, by - ay)

    assert len(path) - 1 == bfs_distances(grid, grid.start)[grid.end]


def test_start_and_end_are_distinct():
    for seed in range(50):
        grid = generate_seeded(2, 2, seed)
        assert grid.start != grid.end


def test_same_seed_same_maze():
    a = generate_seeded(12, 9, 424242)
    b = generate_seeded(12, 9, 424242)

    assert np.array_equal(a.horizontal, b.horizontal)
    assert np.array_equal(a.vertical, b.vertical)
    assert a.start == b.start
    assert a.end == b.end
    assert a.solution_path == b.solution_path


def test_fixed_level_is_reproducible():
    a = generate_fixed_level(3, 10)
    b = generate_seeded(10, 10, 3 * FIXED_LEVEL_SEED_STEP)
    assert a.horizontal.tolist() == b.horizontal.tolist()
    assert a.vertical.tolist() == b.vertical.tolist()
    assert (a.start, a.end) == (b.start, b.end)


def test_generation_leaves_global_random_untouched():
    random.seed(1234)
    before = random.getstate()
    generate(10, 10, random.Random(5))
    assert random.getstate() == before


def test_too_small_maze_is_rejected():
    with pytest.raises(ValueError):
        generate(1, 1, random.Random(0))


def test_dfs_generator_frames_end_with_done():
    rng = random.Random(3)
    grid = create_grid(4, 4, rng)
    frames = list(gen_dfs_backtracker(grid, rng))

    assert frames[-1]["done"] is True
    assert all(not f["done"] for f in frames[:-1])
    carved = [f["carved"] for f in frames if f["carved"] is not None]
    assert len(carved) == 15


def test_ensure_path_exists_carves_manhattan_path():
    grid = MazeGrid(4, 3)
    grid.start = (0, 0)
    grid.end = (2, 1)

    assert ensure_path_exists(grid) is True
    assert grid.can_move(0, 0, 1, 0)
    assert grid.can_move(1, 0, 1, 0)
    assert grid.can_move(2, 0, 0, 1)
    assert grid.get_cell(2, 1)

    assert calculate_path(grid) == [(0, 0), (1, 0), (2, 0), (2, 1)]
    assert ensure_path_exists(grid) is False


def test_unreachable_end_gives_empty_path():
    grid = MazeGrid(3, 3)
    grid.start = (0, 0)
    grid.end = (2, 2)
    assert calculate_path(grid) == []


class TestFailClosedQueries:
    def test_out_of_range_can_move(self, seeded_maze):
        assert seeded_maze.can_move(-1, 0, 1, 0) is False
        assert seeded_maze.can_move(5, 5, -1, 0) is False
        assert seeded_maze.can_move(100, -7, 0, 1) is False

    def test_non_unit_vectors(self, seeded_maze):
        for dx, dy in [(0, 0), (1, 1), (-1, 1), (2, 0), (0, -2)]:
            assert seeded_maze.can_move(2, 2, dx, dy) is False

    def test_get_wall_out_of_range_is_wall(self, seeded_maze):
        assert seeded_maze.get_wall("horizontal", 6, 0) is True
        assert seeded_maze.get_wall("vertical", 0, 6) is True
        assert seeded_maze.get_wall("diagonal", 0, 0) is True

    def test_get_cell_out_of_range(self, seeded_maze):
        assert seeded_maze.get_cell(-1, 0) is False


class TestExportImport:
    def test_round_trip(self, seeded_maze):
        restored = MazeGrid.from_dict(seeded_maze.to_dict())

        assert np.array_equal(restored.horizontal, seeded_maze.horizontal)
        assert np.array_equal(restored.vertical, seeded_maze.vertical)
        assert restored.start == seeded_maze.start
        assert restored.end == seeded_maze.end
        assert restored.solution_path == seeded_maze.solution_path

    def test_wrong_wall_shape(self, seeded_maze):
        data = seeded_maze.to_dict()
        data["walls"]["horizontal"] = data["walls"]["horizontal"][:-1]
        with pytest.raises(SaveDataError):
            MazeGrid.from_dict(data)

    def test_missing_fields(self, seeded_maze):
        data = seeded_maze.to_dict()
        del data["walls"]
        with pytest.raises(SaveDataError):
            MazeGrid.from_dict(data)

    def test_start_outside_maze(self, seeded_maze):
        data = seeded_maze.to_dict()
        data["start"] = [9, 9]
        with pytest.raises(SaveDataError):
            MazeGrid.from_dict(data)
