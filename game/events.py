"""
Game events - observer registry used by the game loop to talk to the UI
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class GameEvent(Enum):
    """Event kinds emitted by the game loop"""
    GAME_START = 'on_game_start'
    MOVE = 'on_move'
    CELL_EXPLORED = 'on_cell_explored'
    VICTORY = 'on_victory'
    GAME_OVER = 'on_game_over'


class EventBus:
    """
    Ordered multi-subscriber dispatch keyed by event kind

    Handlers run synchronously in subscription order. A handler that raises
    is logged and skipped; the remaining handlers still receive the event.
    """
    def __init__(self):
        self._handlers = {kind: [] for kind in GameEvent}

    def subscribe(self, kind, handler):
        """
        Register a handler

        Args:
            kind: GameEvent or its value string (e.g. 'on_move')
            handler: Callable taking the payload dict
        """
        self._handlers[GameEvent(kind)].append(handler)
        return handler

    def unsubscribe(self, kind, handler):
        """Remove the first registration of a handler; unknown handlers are ignored"""
        handlers = self._handlers[GameEvent(kind)]
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, kind, payload):
        """Deliver payload to every handler of kind"""
        kind = GameEvent(kind)
        # Snapshot so handlers may (un)subscribe while being called
        for handler in list(self._handlers[kind]):
            try:
                handler(payload)
            except Exception:
                logger.exception("Handler %r for %s failed", handler, kind.value)

    def handler_count(self, kind):
        return len(self._handlers[GameEvent(kind)])

    def clear(self):
        for kind in self._handlers:
            self._handlers[kind] = []
