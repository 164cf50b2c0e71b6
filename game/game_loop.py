"""
Game Loop - authoritative maze run state: player, moves, visibility and events
"""

import logging
import random
import time

import numpy as np

from game.events import EventBus, GameEvent
from game.game_state import GameStateManager
from game.visibility import VisibilitySystem, parse_view_mode
from maze.generator import generate, generate_fixed_level
from maze.maze_core import MazeGrid, bfs_shortest_path
from utils.config import GameConfig, is_valid_maze_size
from utils.constants import DIR_NAMES, MIN_MAZE_SIZE, MAX_MAZE_SIZE
from utils.errors import SaveDataError
from utils.helpers import mask_to_cells, parse_cell, percent

logger = logging.getLogger(__name__)


class GameLoop:
    """
    Owns one maze run

    The maze grid is generated on construction and on restart(). Every
    accepted move updates the player, recomputes visibility and then emits
    MOVE, CELL_EXPLORED (one per newly explored cell) and possibly VICTORY,
    in that order.
    """
    def __init__(self, config=None, rng=None, seed=None, level=None, clock=time.time):
        """
        Args:
            config: GameConfig (defaults used when omitted)
            rng: Random source for maze generation (random.Random)
            seed: Seed for a private random.Random, ignored when rng is given
            level: Fixed level number; overrides rng/seed
            clock: Callable returning the current time in seconds
        """
        self.config = config or GameConfig()
        problems = self.config.validate()
        if problems:
            raise ValueError("; ".join(problems))

        self.rng = rng if rng is not None else random.Random(seed)
        self.level = level
        self.clock = clock

        self.events = EventBus()
        self.state = GameStateManager(clock)

        self.maze = None
        self.visibility = None
        self.position = (0, 0)
        self.previous_position = (0, 0)
        self.explored = None
        self.visited = None

        self._init_level()

    # ========== SETUP ==========

    def _generate_maze(self):
        size = self.config.maze_size
        if self.level is not None:
            return generate_fixed_level(self.level, size)
        return generate(size, size, self.rng)

    def _init_level(self):
        """Fresh maze, player on the start cell, nothing explored"""
        self.maze = self._generate_maze()

        start = self.maze.start
        self.position = start
        self.previous_position = start

        shape = (self.maze.height, self.maze.width)
        self.explored = np.zeros(shape, dtype=np.bool_)
        self.visited = np.zeros(shape, dtype=np.bool_)
        self.explored[start[1], start[0]] = True
        self.visited[start[1], start[0]] = True

        self.visibility = VisibilitySystem(self.maze, self.config.view_mode, self.config.view_range)
        self.config.view_range = self.visibility.view_range

        self.state.reset()
        self._emit_explored(self._update_visibility())

    def _update_visibility(self):
        """
        Run the visibility system at the player position

        Returns:
            list: Cells explored for the first time in this run
        """
        x, y = self.position
        self.visibility.update(x, y, self.maze)

        newly = []
        for cx, cy in self.visibility.visible_cells():
            if not self.explored[cy, cx]:
                self.explored[cy, cx] = True
                newly.append((cx, cy))
        return newly

    def _emit_explored(self, cells):
        total = self.maze.total_cells
        count = self.explored_count - len(cells)
        for x, y in cells:
            count += 1
            self.events.emit(GameEvent.CELL_EXPLORED, {
                'x': x,
                'y': y,
                'total_explored': count,
                'total_cells': total,
            })

    # ========== FLOW ==========

    def start(self):
        """Start the run; no-op when already running or over"""
        if not self.state.start():
            return False

        self.events.emit(GameEvent.GAME_START, {
            'maze_size': self.config.maze_size,
            'view_mode': self.visibility.mode.value,
            'start': self.position,
            'end': self.maze.end,
        })
        logger.info("Game started on %r", self.maze)
        return True

    def toggle_pause(self):
        """Pause or resume; no-op when not running or over"""
        if not self.state.toggle_pause():
            return False
        logger.info("Game %s", "paused" if self.state.is_paused else "resumed")
        return True

    def restart(self):
        """New maze, reset counters and exploration, running again"""
        self._init_level()
        self.start()
        logger.info("Game restarted")

    def game_over(self):
        """End the run as a defeat (time or move limits are decided by the caller)"""
        if not self.state.defeat():
            return False

        self.events.emit(GameEvent.GAME_OVER, {
            'moves': self.state.moves,
            'elapsed_seconds': self.state.elapsed_seconds(),
        })
        logger.info("Game over after %d moves", self.state.moves)
        return True

    def _victory(self):
        self.state.victory()
        stats = self.get_stats()
        payload = {
            'moves': self.state.moves,
            'elapsed_seconds': self.state.elapsed_seconds(),
            'exploration_rate': stats['exploration_rate'],
            'explored_count': stats['explored'],
            'total_cells': stats['total'],
        }
        self.events.emit(GameEvent.VICTORY, payload)
        logger.info(
            "Victory! moves=%d time=%ds explored=%d%%",
            payload['moves'], payload['elapsed_seconds'], payload['exploration_rate']
        )

    # ========== MOVEMENT ==========

    def move_player(self, dx, dy):
        """
        Try to move the player one cell

        Args:
            dx, dy: Unit direction, exactly one of them non-zero

        Returns:
            bool: True if the move was applied
        """
        if not self.state.can_move():
            return False

        if (dx, dy) not in DIR_NAMES:
            return False

        x, y = self.position
        nx, ny = x + dx, y + dy

        if not self.maze.in_bounds(nx, ny):
            return False

        if not self.maze.can_move(x, y, dx, dy):
            return False

        self.previous_position = (x, y)
        self.position = (nx, ny)
        self.state.moves += 1
        self.visited[ny, nx] = True

        newly = self._update_visibility()

        self.events.emit(GameEvent.MOVE, {
            'from': self.previous_position,
            'to': self.position,
            'moves': self.state.moves,
        })
        self._emit_explored(newly)

        if self.position == self.maze.end:
            self._victory()

        return True

    def get_hint(self):
        """
        Next step along the shortest path to the end

        Returns:
            'up' / 'right' / 'down' / 'left', or None if there is nothing to suggest
        """
        if self.state.is_game_over:
            return None

        path = bfs_shortest_path(self.maze, self.position, self.maze.end)
        if len(path) < 2:
            return None

        (ax, ay), (bx, by) = path[0], path[1]
        return DIR_NAMES[(bx - ax, by - ay)]

    # ========== SETTINGS ==========

    def set_view_mode(self, mode):
        """
        Switch between 'permanent' and 'instant' view

        Returns:
            bool: False for an unknown mode
        """
        try:
            mode = parse_view_mode(mode)
        except ValueError:
            logger.error("Invalid view mode: %r", mode)
            return False

        self.visibility.set_mode(mode)
        self.config.view_mode = mode.value
        self._emit_explored(self._update_visibility())
        return True

    def set_view_range(self, view_range):
        """Change the view window half-size (clamped to 1-5)"""
        self.config.view_range = self.visibility.set_view_range(view_range)
        self._emit_explored(self._update_visibility())
        return self.config.view_range

    def set_maze_size(self, size):
        """
        Resize the maze and restart

        Returns:
            bool: False if size is outside 5-30
        """
        if not is_valid_maze_size(size):
            logger.error("Maze size must be between %d and %d, got %r", MIN_MAZE_SIZE, MAX_MAZE_SIZE, size)
            return False

        self.config.maze_size = size
        self.restart()
        logger.info("Maze size changed to %dx%d", size, size)
        return True

    def load_fixed_level(self, level):
        """Switch to a reproducible numbered level and restart"""
        self.level = level
        self.restart()

    def show_solution(self):
        self.config.show_solution = True

    def hide_solution(self):
        self.config.show_solution = False

    # ========== QUERIES ==========

    @property
    def explored_count(self):
        return int(self.explored.sum())

    @property
    def visited_count(self):
        return int(self.visited.sum())

    def get_solution_path(self):
        return self.maze.get_path()

    def get_player_position(self):
        return self.position

    def is_cell_visible(self, x, y):
        return self.visibility.is_visible(x, y)

    def is_cell_explored(self, x, y):
        if not self.maze.in_bounds(x, y):
            return False
        return bool(self.explored[y, x])

    def is_cell_visited(self, x, y):
        if not self.maze.in_bounds(x, y):
            return False
        return bool(self.visited[y, x])

    def get_stats(self):
        """Move, exploration and efficiency statistics"""
        total = self.maze.total_cells
        moves = self.state.moves
        return {
            'moves': moves,
            'explored': self.explored_count,
            'total': total,
            'exploration_rate': percent(self.explored_count, total),
            'visited': self.visited_count,
            'efficiency': percent(self.visited_count, moves),
        }

    def get_game_state(self):
        """Snapshot of flags, positions and exploration for the UI"""
        snapshot = self.state.to_dict()
        stats = self.get_stats()
        snapshot.update({
            'player_position': self.position,
            'end_position': self.maze.end,
            'explored_cells': stats['explored'],
            'total_cells': stats['total'],
            'exploration_rate': stats['exploration_rate'],
            'elapsed_seconds': self.state.elapsed_seconds(),
        })
        return snapshot

    # ========== EXPORT / IMPORT ==========

    def export_state(self):
        """Plain nested structure of the whole run (JSON serialisable)"""
        x, y = self.position
        px, py = self.previous_position
        return {
            'config': self.config.to_dict(),
            'level': self.level,
            'state': self.state.to_dict(),
            'maze': self.maze.to_dict(),
            'player': {'x': x, 'y': y, 'prev_x': px, 'prev_y': py},
            'explored_cells': [list(c) for c in mask_to_cells(self.explored)],
            'visited_cells': [list(c) for c in mask_to_cells(self.visited)],
            'visibility': self.visibility.export_state(),
        }

    @staticmethod
    def _cells_to_mask(maze, cells, field):
        if not isinstance(cells, (list, tuple)):
            raise SaveDataError(f"{field} must be a list of coordinates")

        mask = np.zeros((maze.height, maze.width), dtype=np.bool_)
        for raw in cells:
            try:
                x, y = parse_cell(raw)
            except ValueError as e:
                raise SaveDataError(f"{field}: {e}") from e
            if not maze.in_bounds(x, y):
                raise SaveDataError(f"{field}: cell {(x, y)} outside the maze")
            mask[y, x] = True
        return mask

    @staticmethod
    def _parse_player(maze, data):
        if not isinstance(data, dict):
            raise SaveDataError("player must be a mapping")
        try:
            position = parse_cell((data['x'], data['y']))
            previous = parse_cell((data.get('prev_x', data['x']), data.get('prev_y', data['y'])))
        except KeyError as e:
            raise SaveDataError(f"player is missing {e}") from e
        except ValueError as e:
            raise SaveDataError(f"player: {e}") from e

        for cell in (position, previous):
            if not maze.in_bounds(*cell):
                raise SaveDataError(f"player cell {cell} outside the maze")
        return position, previous

    def import_state(self, data):
        """
        Restore a run exported by export_state()

        Everything is validated before anything is replaced, so a failed
        import leaves the current run untouched.

        Raises:
            SaveDataError: on missing or malformed fields
        """
        if not isinstance(data, dict):
            raise SaveDataError("saved game must be a mapping")

        missing = [k for k in ('config', 'state', 'maze', 'player', 'explored_cells',
                               'visited_cells', 'visibility') if k not in data]
        if missing:
            raise SaveDataError(f"saved game is missing {', '.join(missing)}")

        config = GameConfig.from_dict(data['config'])
        maze = MazeGrid.from_dict(data['maze'])
        position, previous = self._parse_player(maze, data['player'])
        explored = self._cells_to_mask(maze, data['explored_cells'], 'explored_cells')
        visited = self._cells_to_mask(maze, data['visited_cells'], 'visited_cells')
        phase, moves, start_time, end_time = GameStateManager.parse(data['state'])

        visibility = VisibilitySystem(maze, config.view_mode, config.view_range)
        visibility.import_state(data['visibility'])

        level = data.get('level')
        if level is not None and (isinstance(level, bool) or not isinstance(level, int)):
            raise SaveDataError(f"level must be an integer or null, got {level!r}")

        config.view_mode = visibility.mode.value
        config.view_range = visibility.view_range

        self.config = config
        self.level = level
        self.maze = maze
        self.position = position
        self.previous_position = previous
        self.explored = explored
        self.visited = visited
        self.visibility = visibility
        self.state.restore(phase, moves, start_time, end_time)

        logger.info("Game state imported (%r, phase %s)", maze, phase.name)

    def __repr__(self):
        return f"GameLoop(maze={self.maze!r}, position={self.position}, state={self.state!r})"

