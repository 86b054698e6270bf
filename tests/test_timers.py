"""Tests for the cooperative TimerScheduler."""

import pytest

from api.timers import StartTimer, StopTimer, TimerScheduler


def _recorder(log: list, actions_by_tick: dict | None = None):
    def dispatch(event):
        name = event["payload"]["timer"]
        log.append(name)
        return (actions_by_tick or {}).pop(name, [])

    return dispatch


def test_repeating_timer_fires_every_interval():
    scheduler = TimerScheduler()
    scheduler.start("beat", 100, repeat=True)
    log: list = []
    scheduler.advance(350, _recorder(log))
    assert log == ["beat", "beat", "beat"]
    assert scheduler.now_ms == 350
    assert scheduler.active == frozenset({"beat"})


def test_one_shot_timer_fires_once():
    scheduler = TimerScheduler()
    scheduler.start("once", 100)
    log: list = []
    scheduler.advance(1000, _recorder(log))
    assert log == ["once"]
    assert scheduler.active == frozenset()


def test_ticks_fire_in_time_order():
    scheduler = TimerScheduler()
    scheduler.start("slow", 300)
    scheduler.start("fast", 100, repeat=True)
    log: list = []
    scheduler.advance(300, _recorder(log))
    # At t=300 both are due; "slow" was armed first, so it fires first.
    assert log == ["fast", "fast", "slow", "fast"]


def test_timer_stopped_by_earlier_tick_never_fires():
    scheduler = TimerScheduler()
    scheduler.start("first", 100)
    scheduler.start("second", 200)
    log: list = []
    scheduler.advance(500, _recorder(log, {"first": [StopTimer(name="second")]}))
    assert log == ["first"]


def test_dispatch_can_start_timers_and_return_other_actions():
    scheduler = TimerScheduler()
    scheduler.start("first", 100)
    log: list = []
    marker = object()
    out = scheduler.advance(
        250,
        _recorder(log, {"first": [StartTimer(name="next", interval_ms=100), marker]}),
    )
    assert log == ["first", "next"]
    assert out == [marker]


def test_stop_all_and_apply():
    scheduler = TimerScheduler()
    rest = scheduler.apply(
        [StartTimer(name="a", interval_ms=10), StartTimer(name="b", interval_ms=10), "x"]
    )
    assert rest == ["x"]
    assert scheduler.active == frozenset({"a", "b"})
    scheduler.stop_all()
    log: list = []
    scheduler.advance(100, _recorder(log))
    assert log == []


def test_invalid_arguments():
    scheduler = TimerScheduler()
    with pytest.raises(ValueError):
        scheduler.start("bad", 0)
    with pytest.raises(ValueError):
        scheduler.advance(-1, lambda e: [])
