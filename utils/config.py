"""
Game configuration - maze size, view mode and view range
"""

from dataclasses import dataclass, asdict

from utils.constants import (
    MIN_MAZE_SIZE, MAX_MAZE_SIZE, DEFAULT_MAZE_SIZE,
    MIN_VIEW_RANGE, MAX_VIEW_RANGE, DEFAULT_VIEW_RANGE,
    VIEW_MODE_PERMANENT, VIEW_MODE_INSTANT, DEFAULT_VIEW_MODE,
)
from utils.errors import SaveDataError
from utils.helpers import clamp

VIEW_MODES = (VIEW_MODE_PERMANENT, VIEW_MODE_INSTANT)


def is_valid_maze_size(size):
    """Check that a maze side length is an int inside the supported bounds"""
    return isinstance(size, int) and not isinstance(size, bool) and MIN_MAZE_SIZE <= size <= MAX_MAZE_SIZE


def clamp_view_range(view_range):
    """Clamp a view range to the supported 1-5 window"""
    return clamp(int(view_range), MIN_VIEW_RANGE, MAX_VIEW_RANGE)


@dataclass
class GameConfig:
    """Configuration consumed by the game loop"""
    maze_size: int = DEFAULT_MAZE_SIZE
    view_mode: str = DEFAULT_VIEW_MODE
    view_range: int = DEFAULT_VIEW_RANGE
    show_solution: bool = False

    def validate(self):
        """
        Check the configuration

        Returns:
            list: Human readable problems (empty when valid)
        """
        problems = []
        if not is_valid_maze_size(self.maze_size):
            problems.append(
                f"maze_size must be between {MIN_MAZE_SIZE} and {MAX_MAZE_SIZE}, got {self.maze_size!r}"
            )
        if self.view_mode not in VIEW_MODES:
            problems.append(f"view_mode must be one of {VIEW_MODES}, got {self.view_mode!r}")
        if isinstance(self.view_range, bool) or not isinstance(self.view_range, int):
            problems.append(f"view_range must be an integer, got {self.view_range!r}")
        return problems

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        """
        Build a config from exported data

        Raises:
            SaveDataError: if a field is missing or out of range
        """
        if not isinstance(data, dict):
            raise SaveDataError("config must be a mapping")
        try:
            config = cls(
                maze_size=data['maze_size'],
                view_mode=data['view_mode'],
                view_range=data.get('view_range', DEFAULT_VIEW_RANGE),
                show_solution=bool(data.get('show_solution', False)),
            )
        except KeyError as e:
            raise SaveDataError(f"config is missing field {e}") from e

        problems = config.validate()
        if problems:
            raise SaveDataError("; ".join(problems))
        config.view_range = clamp_view_range(config.view_range)
        return config
