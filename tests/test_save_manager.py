import json

import pytest

from game.game_loop import GameLoop
from game.save_manager import SaveManager
from utils.config import GameConfig
from utils.constants import SAVE_VERSION
from conftest import walk


@pytest.fixture
def manager(tmp_path):
    return SaveManager(tmp_path / "saves")


def test_save_writes_metadata(manager, started_game):
    assert manager.save_game(started_game, "slot1") is True

    with open(manager.save_dir / "slot1.json", encoding="utf-8") as f:
        data = json.load(f)
    assert data["metadata"]["slot_name"] == "slot1"
    assert data["metadata"]["version"] == SAVE_VERSION
    assert manager.current_slot == "slot1"


def test_save_and_load_into_other_game(manager, started_game, clock):
    walk(started_game, started_game.get_solution_path()[:2])
    manager.save_game(started_game, "slot1")

    other = GameLoop(GameConfig(maze_size=9), seed=11, clock=clock)
    assert manager.load_into(other, "slot1") is True
    assert other.position == started_game.position
    assert other.get_stats() == started_game.get_stats()
    assert other.maze.end == started_game.maze.end


def test_missing_slot(manager, game):
    assert manager.load_game("nope") is None
    assert manager.load_into(game, "nope") is False


def test_corrupt_file_is_rejected(manager, game):
    (manager.save_dir / "broken.json").write_text("{not json", encoding="utf-8")
    before = game.export_state()

    assert manager.load_game("broken") is None
    assert manager.load_into(game, "broken") is False
    assert game.export_state() == before


def test_invalid_save_keeps_game(manager, started_game, clock):
    manager.save_game(started_game, "slot1")
    path = manager.save_dir / "slot1.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    data["player"]["x"] = 99
    path.write_text(json.dumps(data), encoding="utf-8")

    other = GameLoop(GameConfig(maze_size=6), seed=3, clock=clock)
    before = other.export_state()
    assert manager.load_into(other, "slot1") is False
    assert other.export_state() == before


def test_list_and_delete(manager, started_game):
    manager.save_game(started_game, "a")
    manager.auto_save(started_game)

    slots = [name for name, _ in manager.get_save_files()]
    assert "a" in slots
    assert "autosave" in slots

    assert manager.delete_save("a") is True
    assert manager.delete_save("a") is False
    assert "a" not in [name for name, _ in manager.get_save_files()]


def test_restore_rejects_malformed_phase(manager, started_game, clock):
    data = started_game.export_state()
    data["state"]["phase"] = ["RUNNING"]

    other = GameLoop(GameConfig(maze_size=6), seed=3, clock=clock)
    before = other.export_state()
    assert manager.restore_game(other, data) is False
    assert other.export_state() == before
