import pytest

from conftest import FakeClock
from game.game_state import GamePhase, GameStateManager
from utils.errors import SaveDataError


@pytest.fixture
def manager():
    return GameStateManager(FakeClock(50.0))


def test_initial_flags(manager):
    assert manager.phase == GamePhase.NOT_STARTED
    assert not manager.is_running
    assert not manager.is_game_over
    assert manager.elapsed_seconds() == 0


def test_start_is_idempotent(manager):
    assert manager.start() is True
    manager.clock.advance(5)
    assert manager.start() is False
    assert manager.start_time == 50.0


def test_pause_cycle(manager):
    assert manager.toggle_pause() is False
    manager.start()

    assert manager.toggle_pause() is True
    assert manager.is_paused and manager.is_running
    assert not manager.can_move()

    assert manager.toggle_pause() is True
    assert manager.can_move()


def test_victory_freezes_time(manager):
    manager.start()
    manager.clock.advance(12.7)
    assert manager.victory() is True
    manager.clock.advance(100)

    assert manager.is_victory and manager.is_game_over
    assert not manager.is_running
    assert manager.elapsed_seconds() == 12
    assert manager.toggle_pause() is False


def test_defeat_only_while_playing(manager):
    assert manager.defeat() is False
    manager.start()
    manager.toggle_pause()
    assert manager.defeat() is True
    assert manager.is_game_over and not manager.is_victory


def test_parse_round_trip(manager):
    manager.start()
    manager.moves = 4
    assert GameStateManager.parse(manager.to_dict()) == (GamePhase.RUNNING, 4, 50.0, None)


@pytest.mark.parametrize("data", [
    {"moves": 1},
    {"phase": "FLYING", "moves": 1},
    {"phase": ["RUNNING"], "moves": 1},
    {"phase": "RUNNING", "moves": -1},
    {"phase": "RUNNING", "moves": 1, "start_time": "noon"},
])
def test_parse_rejects_bad_state(data):
    with pytest.raises(SaveDataError):
        GameStateManager.parse(data)
