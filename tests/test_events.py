import logging

from game.events import EventBus, GameEvent


def test_handlers_run_in_subscription_order():
    bus = EventBus()
    calls = []
    bus.subscribe(GameEvent.MOVE, lambda p: calls.append(("first", p["moves"])))
    bus.subscribe("on_move", lambda p: calls.append(("second", p["moves"])))

    bus.emit(GameEvent.MOVE, {"moves": 3})
    assert calls == [("first", 3), ("second", 3)]


def test_failing_handler_does_not_stop_delivery(caplog):
    bus = EventBus()
    calls = []

    def broken(payload):
        raise RuntimeError("boom")

    bus.subscribe(GameEvent.VICTORY, broken)
    bus.subscribe(GameEvent.VICTORY, calls.append)

    with caplog.at_level(logging.ERROR, logger="game.events"):
        bus.emit(GameEvent.VICTORY, {"moves": 1})

    assert calls == [{"moves": 1}]
    assert "boom" in caplog.text


def test_unsubscribe():
    bus = EventBus()
    calls = []
    bus.subscribe(GameEvent.GAME_START, calls.append)
    bus.unsubscribe(GameEvent.GAME_START, calls.append)
    bus.unsubscribe(GameEvent.GAME_START, print)

    bus.emit(GameEvent.GAME_START, {})
    assert calls == []
    assert bus.handler_count(GameEvent.GAME_START) == 0


def test_unsubscribe_removes_one_registration():
    bus = EventBus()
    calls = []
    bus.subscribe(GameEvent.MOVE, calls.append)
    bus.subscribe(GameEvent.MOVE, calls.append)
    bus.unsubscribe(GameEvent.MOVE, calls.append)

    bus.emit(GameEvent.MOVE, {"moves": 1})
    assert calls == [{"moves": 1}]
    assert bus.handler_count(GameEvent.MOVE) == 1


def test_events_are_kind_scoped():
    bus = EventBus()
    calls = []
    bus.subscribe(GameEvent.GAME_OVER, calls.append)
    bus.emit(GameEvent.MOVE, {"moves": 1})
    assert calls == []
