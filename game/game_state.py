"""
Game State Machine - tracks the phase of a maze run and its timing
"""

from enum import Enum, auto

from utils.errors import SaveDataError


class GamePhase(Enum):
    """Game phases"""
    NOT_STARTED = auto()
    RUNNING = auto()
    PAUSED = auto()
    VICTORY = auto()
    DEFEAT = auto()


class GameStateManager:
    """
    Manages phase transitions, the move counter and start/end timestamps

    Transitions that do not apply to the current phase are ignored and
    reported as False.
    """
    def __init__(self, clock):
        """
        Args:
            clock: Callable returning the current time in seconds
        """
        self.clock = clock
        self.reset()

    def reset(self):
        """Back to NOT_STARTED with a zero move counter"""
        self.phase = GamePhase.NOT_STARTED
        self.previous_phase = None
        self.moves = 0
        self.start_time = None
        self.end_time = None

    def transition_to(self, new_phase):
        self.previous_phase = self.phase
        self.phase = new_phase

    # ========== TRANSITIONS ==========

    def start(self):
        """NOT_STARTED -> RUNNING"""
        if self.phase != GamePhase.NOT_STARTED:
            return False
        self.start_time = self.clock()
        self.end_time = None
        self.transition_to(GamePhase.RUNNING)
        return True

    def toggle_pause(self):
        """RUNNING <-> PAUSED"""
        if self.phase == GamePhase.RUNNING:
            self.transition_to(GamePhase.PAUSED)
            return True
        if self.phase == GamePhase.PAUSED:
            self.transition_to(GamePhase.RUNNING)
            return True
        return False

    def victory(self):
        """RUNNING -> VICTORY"""
        if self.phase != GamePhase.RUNNING:
            return False
        self.end_time = self.clock()
        self.transition_to(GamePhase.VICTORY)
        return True

    def defeat(self):
        """RUNNING / PAUSED -> DEFEAT"""
        if self.phase not in (GamePhase.RUNNING, GamePhase.PAUSED):
            return False
        self.end_time = self.clock()
        self.transition_to(GamePhase.DEFEAT)
        return True

    # ========== FLAGS ==========

    @property
    def is_running(self):
        return self.phase in (GamePhase.RUNNING, GamePhase.PAUSED)

    @property
    def is_paused(self):
        return self.phase == GamePhase.PAUSED

    @property
    def is_game_over(self):
        return self.phase in (GamePhase.VICTORY, GamePhase.DEFEAT)

    @property
    def is_victory(self):
        return self.phase == GamePhase.VICTORY

    def can_move(self):
        return self.phase == GamePhase.RUNNING

    def elapsed_seconds(self):
        """Whole seconds since start (frozen at the end time once over)"""
        if self.start_time is None:
            return 0
        end = self.end_time if self.end_time is not None else self.clock()
        return max(0, int(end - self.start_time))

    # ========== EXPORT / IMPORT ==========

    def to_dict(self):
        return {
            'phase': self.phase.name,
            'is_running': self.is_running,
            'is_paused': self.is_paused,
            'is_game_over': self.is_game_over,
            'is_victory': self.is_victory,
            'moves': self.moves,
            'start_time': self.start_time,
            'end_time': self.end_time,
        }

    @staticmethod
    def parse(data):
        """
        Validate an exported state

        Returns:
            (phase, moves, start_time, end_time)

        Raises:
            SaveDataError: on missing or malformed fields
        """
        if not isinstance(data, dict):
            raise SaveDataError("game state must be a mapping")
        try:
            phase = GamePhase[data['phase']]
            moves = data['moves']
        except (KeyError, TypeError) as e:
            raise SaveDataError(f"game state is missing or has an unknown {e}") from e

        if isinstance(moves, bool) or not isinstance(moves, int) or moves < 0:
            raise SaveDataError(f"moves must be a non-negative integer, got {moves!r}")

        times = []
        for field in ('start_time', 'end_time'):
            value = data.get(field)
            if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
                raise SaveDataError(f"{field} must be a number or null, got {value!r}")
            times.append(value)

        return phase, moves, times[0], times[1]

    def restore(self, phase, moves, start_time, end_time):
        self.previous_phase = None
        self.phase = phase
        self.moves = moves
        self.start_time = start_time
        self.end_time = end_time

    def get_state_name(self):
        """Get current phase name"""
        return self.phase.name

    def __repr__(self):
        return f"GameStateManager(phase={self.phase.name}, moves={self.moves})"
