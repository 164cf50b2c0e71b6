from collections import deque

import pytest

from game.events import GameEvent
from game.game_loop import GameLoop
from maze.generator import generate_seeded
from maze.maze_core import MazeGrid, bfs_shortest_path
from utils.config import GameConfig
from utils.constants import DIRS


class FakeClock:
    """Manually advanced clock standing in for time.time"""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class EventRecorder:
    """Subscribes to every event kind and keeps (kind, payload) in order"""

    def __init__(self, bus):
        self.events = []
        for kind in GameEvent:
            bus.subscribe(kind, self._make_handler(kind))

    def _make_handler(self, kind):
        def handler(payload):
            self.events.append((kind, payload))
        return handler

    def kinds(self):
        return [kind for kind, _ in self.events]

    def of(self, kind):
        return [payload for k, payload in self.events if k == kind]

    def clear(self):
        self.events = []


def open_grid(width, height, start=(0, 0), end=None):
    """Grid with every interior wall removed (only the border stays)"""
    grid = MazeGrid(width, height)
    grid.horizontal[1:height, :] = False
    grid.vertical[:, 1:width] = False
    grid.set_boundary_walls()
    grid.visited[:] = True
    grid.start = start
    grid.end = end if end is not None else (width - 1, height - 1)
    grid.solution_path = bfs_shortest_path(grid, grid.start, grid.end)
    return grid


def bfs_distances(grid, source):
    """Independent BFS over can_move, cell -> edge distance"""
    dist = {source: 0}
    q = deque([source])
    while q:
        x, y = q.popleft()
        for dx, dy, _ in DIRS:
            if grid.can_move(x, y, dx, dy):
                n = (x + dx, y + dy)
                if n not in dist:
                    dist[n] = dist[(x, y)] + 1
                    q.append(n)
    return dist


def walk(game, path):
    """Move the player along consecutive path cells, returning each move result"""
    results = []
    for (ax, ay), (bx, by) in zip(path, path[1:]):
        results.append(game.move_player(bx - ax, by - ay))
    return results


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def seeded_maze():
    return generate_seeded(5, 5, 2024)


@pytest.fixture
def game(clock):
    return GameLoop(GameConfig(maze_size=5), seed=7, clock=clock)


@pytest.fixture
def started_game(game):
    game.start()
    return game


@pytest.fixture
def recorder(game):
    return EventRecorder(game.events)
