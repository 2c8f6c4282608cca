# tests/test_events.py
from graceful.commands.events import Observable


def test_listeners_receive_arguments_in_order():
    events = Observable()
    got = []
    events.on("saved", lambda *a: got.append(("first", a)))
    events.on("saved", lambda *a: got.append(("second", a)))

    assert events.trigger("saved", "notes.txt", 3) == 2
    assert got == [("first", ("notes.txt", 3)), ("second", ("notes.txt", 3))]


def test_once_and_off():
    events = Observable()
    got = []
    events.once("tick", got.append)
    keep = events.on("tick", got.append)

    events.trigger("tick", 1)
    events.trigger("tick", 2)
    assert got == [1, 1, 2]

    assert events.off(keep)
    assert not events.off(keep)
    assert events.trigger("tick", 3) == 0


def test_raising_listener_does_not_stop_the_others(caplog):
    events = Observable()
    got = []

    def bad(*args):
        raise RuntimeError("listener broke")

    events.on("x", bad)
    events.on("x", got.append)

    assert events.trigger("x", "payload") == 2
    assert got == ["payload"]
    assert "Listener for 'x' raised." in caplog.text


def test_trigger_without_listeners():
    assert Observable().trigger("nothing") == 0
