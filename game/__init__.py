"""
Game Module - visibility, state machine, events and the game loop
"""

from .events import EventBus, GameEvent
from .game_state import GamePhase, GameStateManager
from .visibility import VisibilitySystem, ViewMode
from .game_loop import GameLoop

__all__ = ['EventBus', 'GameEvent', 'GamePhase', 'GameStateManager',
           'VisibilitySystem', 'ViewMode', 'GameLoop']
