"""
Core maze data - wall grid, movement queries and pathfinding
"""

from collections import deque

import numpy as np

from utils.constants import DIRS, DIR_NAMES, WALL_HORIZONTAL, WALL_VERTICAL
from utils.errors import SaveDataError
from utils.helpers import parse_cell


class MazeGrid:
    """
    Maze grid with edge-based wall representation

    horizontal[y][x] is the wall above cell (x, y), row `height` is the bottom border.
    vertical[y][x] is the wall left of cell (x, y), column `width` is the right border.
    """
    def __init__(self, width, height):
        self.width = width
        self.height = height

        # Generation-time marker
        self.visited = np.zeros((height, width), dtype=np.bool_)

        # All walls closed
        self.horizontal = np.ones((height + 1, width), dtype=np.bool_)
        self.vertical = np.ones((height, width + 1), dtype=np.bool_)

        self.start = (0, 0)
        self.end = (width - 1, height - 1)
        self.solution_path = []

    def set_boundary_walls(self):
        """Force every border edge to be a wall"""
        self.horizontal[0, :] = True
        self.horizontal[self.height, :] = True
        self.vertical[:, 0] = True
        self.vertical[:, self.width] = True

    def in_bounds(self, x, y):
        """Check if coordinates are within grid bounds"""
        return 0 <= x < self.width and 0 <= y < self.height

    @property
    def size(self):
        return self.width, self.height

    @property
    def total_cells(self):
        return self.width * self.height

    def can_move(self, x, y, dx, dy):
        """
        Check if a single step (dx, dy) from (x, y) crosses no wall

        Anything that is not a unit orthogonal step between two in-bounds
        cells is treated as walled.
        """
        if (dx, dy) not in DIR_NAMES:
            return False
        if not (self.in_bounds(x, y) and self.in_bounds(x + dx, y + dy)):
            return False

        if dx == 1:     # right
            return not self.vertical[y, x + 1]
        if dx == -1:    # left
            return not self.vertical[y, x]
        if dy == 1:     # down
            return not self.horizontal[y + 1, x]
        return not self.horizontal[y, x]  # up

    def remove_wall(self, x, y, dx, dy):
        """Remove the wall on the edge between (x, y) and (x + dx, y + dy)"""
        if dx == 1:
            self.vertical[y, x + 1] = False
        elif dx == -1:
            self.vertical[y, x] = False
        elif dy == 1:
            self.horizontal[y + 1, x] = False
        elif dy == -1:
            self.horizontal[y, x] = False

    def get_wall(self, kind, row, col):
        """Wall state by array kind; out of range counts as a wall"""
        if kind == WALL_HORIZONTAL:
            if 0 <= row <= self.height and 0 <= col < self.width:
                return bool(self.horizontal[row, col])
        elif kind == WALL_VERTICAL:
            if 0 <= row < self.height and 0 <= col <= self.width:
                return bool(self.vertical[row, col])
        return True

    def get_cell(self, x, y):
        """Generation visited marker; out of range is False"""
        if self.in_bounds(x, y):
            return bool(self.visited[y, x])
        return False

    def neighbors_open(self, x, y):
        """Get list of open neighbor cells"""
        res = []
        for dx, dy, _ in DIRS:
            if self.can_move(x, y, dx, dy):
                res.append((x + dx, y + dy))
        return res

    def get_path(self):
        return list(self.solution_path)

    # ========== EXPORT / IMPORT ==========

    def to_dict(self):
        """Plain structure of the maze (walls as nested bool lists)"""
        return {
            'width': self.width,
            'height': self.height,
            'start': list(self.start),
            'end': list(self.end),
            'walls': {
                WALL_HORIZONTAL: self.horizontal.tolist(),
                WALL_VERTICAL: self.vertical.tolist(),
            },
        }

    @classmethod
    def from_dict(cls, data):
        """
        Rebuild a grid from `to_dict()` output

        Raises:
            SaveDataError: if fields are missing or have the wrong shape
        """
        if not isinstance(data, dict):
            raise SaveDataError("maze must be a mapping")
        try:
            walls = data['walls']
            return cls.from_walls(
                data['width'], data['height'],
                walls[WALL_HORIZONTAL], walls[WALL_VERTICAL],
                data['start'], data['end'],
            )
        except (KeyError, TypeError) as e:
            raise SaveDataError(f"maze data is incomplete: {e}") from e

    @classmethod
    def from_walls(cls, width, height, horizontal, vertical, start, end):
        """Rebuild a grid from raw wall arrays; the solution path is recomputed"""
        if not isinstance(width, int) or not isinstance(height, int) or width < 1 or height < 1:
            raise SaveDataError(f"invalid maze size {width!r}x{height!r}")

        try:
            h = np.asarray(horizontal, dtype=np.bool_)
            v = np.asarray(vertical, dtype=np.bool_)
            start = parse_cell(start)
            end = parse_cell(end)
        except ValueError as e:
            raise SaveDataError(f"invalid maze data: {e}") from e

        if h.shape != (height + 1, width) or v.shape != (height, width + 1):
            raise SaveDataError(
                f"wall arrays have shapes {h.shape}/{v.shape}, expected "
                f"{(height + 1, width)}/{(height, width + 1)}"
            )

        grid = cls(width, height)
        if not (grid.in_bounds(*start) and grid.in_bounds(*end)):
            raise SaveDataError(f"start {start} or end {end} outside the maze")

        grid.horizontal[:] = h
        grid.vertical[:] = v
        grid.set_boundary_walls()
        grid.visited[:] = True
        grid.start = start
        grid.end = end
        grid.solution_path = bfs_shortest_path(grid, start, end)
        return grid

    def __repr__(self):
        return f"MazeGrid({self.width}x{self.height}, start={self.start}, end={self.end})"


# ========== PATHFINDING ==========

def reconstruct_path(prev, goal):
    """Reconstruct path from prev dictionary"""
    path = []
    cur = goal
    while cur is not None:
        path.append(cur)
        cur = prev[cur]
    path.reverse()
    return path


def bfs_shortest_path(grid, start, goal):
    """BFS shortest path finder"""
    if start == goal:
        return [start]

    q = deque([start])
    prev = {start: None}

    while q:
        x, y = q.popleft()
        for n in grid.neighbors_open(x, y):
            if n not in prev:
                prev[n] = (x, y)
                if n == goal:
                    return reconstruct_path(prev, goal)
                q.append(n)
    return []


def reachable_cells(grid, start):
    """Set of all cells connected to start through open edges"""
    q = deque([start])
    seen = {start}

    while q:
        x, y = q.popleft()
        for n in grid.neighbors_open(x, y):
            if n not in seen:
                seen.add(n)
                q.append(n)
    return seen
