"""
Maze generation - randomized depth-first backtracker with a guaranteed
start-to-end connection and a precomputed shortest solution path
"""

import logging
import random
from collections import deque

from maze.maze_core import MazeGrid, bfs_shortest_path
from utils.constants import DIRS, FIXED_LEVEL_SEED_STEP

logger = logging.getLogger(__name__)


def pick_start_end(grid, rng):
    """Pick distinct start and end cells uniformly at random"""
    start = (rng.randrange(grid.width), rng.randrange(grid.height))
    while True:
        end = (rng.randrange(grid.width), rng.randrange(grid.height))
        if end != start:
            return start, end


def unvisited_neighbors(grid, x, y):
    """Unvisited in-bounds neighbours in up, right, down, left order"""
    res = []
    for dx, dy, _ in DIRS:
        nx, ny = x + dx, y + dy
        if grid.in_bounds(nx, ny) and not grid.visited[ny, nx]:
            res.append((nx, ny, dx, dy))
    return res


# ========== GENERATOR: DFS BACKTRACKER ==========

def gen_dfs_backtracker(grid, rng):
    """Depth-First Search with backtracking - animated generator carving from grid.start"""
    sx, sy = grid.start
    stack = [(sx, sy)]
    grid.visited[sy, sx] = True

    yield {"current": (sx, sy), "carved": None, "done": False}

    while stack:
        cx, cy = stack[-1]
        neighbors = unvisited_neighbors(grid, cx, cy)

        if neighbors:
            nx, ny, dx, dy = neighbors[rng.randrange(len(neighbors))]
            grid.remove_wall(cx, cy, dx, dy)
            grid.visited[ny, nx] = True
            stack.append((nx, ny))

            yield {"current": (nx, ny), "carved": ((cx, cy), (nx, ny)), "done": False}
        else:
            stack.pop()
            yield {"current": (cx, cy), "carved": None, "done": False}

    yield {"current": (sx, sy), "carved": None, "done": True}


# ========== CONNECTIVITY ==========

def ensure_path_exists(grid):
    """
    Make sure the end is reachable from the start

    Returns:
        bool: True if a path had to be force-carved
    """
    q = deque([grid.start])
    seen = {grid.start}

    while q:
        cur = q.popleft()
        if cur == grid.end:
            return False
        for n in grid.neighbors_open(*cur):
            if n not in seen:
                seen.add(n)
                q.append(n)

    logger.warning("End %s unreachable from start %s, carving a direct path", grid.end, grid.start)
    create_path_to_end(grid)
    return True


def create_path_to_end(grid):
    """Carve a Manhattan path from start to end, horizontal first"""
    x, y = grid.start
    ex, ey = grid.end

    while (x, y) != (ex, ey):
        if x < ex:
            dx, dy = 1, 0
        elif x > ex:
            dx, dy = -1, 0
        elif y < ey:
            dx, dy = 0, 1
        else:
            dx, dy = 0, -1

        grid.remove_wall(x, y, dx, dy)
        x, y = x + dx, y + dy
        grid.visited[y, x] = True


def calculate_path(grid):
    """Recompute and store the shortest start-to-end path"""
    grid.solution_path = bfs_shortest_path(grid, grid.start, grid.end)
    return grid.solution_path


# ========== ENTRY POINTS ==========

def create_grid(width, height, rng):
    """Fresh fully walled grid with start/end picked, ready for carving"""
    if width < 1 or height < 1 or width * height < 2:
        raise ValueError(f"maze needs at least two cells, got {width}x{height}")

    grid = MazeGrid(width, height)
    grid.set_boundary_walls()
    grid.start, grid.end = pick_start_end(grid, rng)
    return grid


def finalize_grid(grid):
    """Connectivity check and solution path once carving is over"""
    ensure_path_exists(grid)
    calculate_path(grid)
    return grid


def generate(width, height, rng=None):
    """
    Generate a maze instantly

    Args:
        width, height: Maze dimensions in cells
        rng: Random source with a randrange() method (random.Random);
             a private unseeded one is created when omitted

    Returns:
        MazeGrid
    """
    if rng is None:
        rng = random.Random()

    grid = create_grid(width, height, rng)
    for _ in gen_dfs_backtracker(grid, rng):
        pass
    finalize_grid(grid)

    logger.debug("Generated %r, solution length %d", grid, len(grid.solution_path))
    return grid


def generate_seeded(width, height, seed):
    """Same seed and size always give the same maze"""
    return generate(width, height, random.Random(seed))


def generate_fixed_level(level=1, size=15):
    """Reproducible maze for a numbered level"""
    return generate_seeded(size, size, level * FIXED_LEVEL_SEED_STEP)
