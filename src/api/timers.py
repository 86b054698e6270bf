"""Cooperative timers for the investigation session.

Time only moves when advance() is called, so the same code drives a real-time
terminal loop and a deterministic test.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass


@dataclass
class StartTimer:
    name: str
    interval_ms: int
    repeat: bool = False


@dataclass
class StopTimer:
    name: str


@dataclass
class _Timer:
    name: str
    interval_ms: int
    repeat: bool
    due_ms: int
    seq: int


class TimerScheduler:
    """Named timers on a manual clock. Starting a running name restarts it."""

    def __init__(self) -> None:
        self.now_ms = 0
        self._timers: dict[str, _Timer] = {}
        self._seq = 0

    @property
    def active(self) -> frozenset[str]:
        return frozenset(self._timers)

    def start(self, name: str, interval_ms: int, repeat: bool = False) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self._seq += 1
        self._timers[name] = _Timer(
            name=name,
            interval_ms=interval_ms,
            repeat=repeat,
            due_ms=self.now_ms + interval_ms,
            seq=self._seq,
        )

    def stop(self, name: str) -> None:
        self._timers.pop(name, None)

    def stop_all(self) -> None:
        self._timers.clear()

    def apply(self, actions: Iterable) -> list:
        """Run StartTimer/StopTimer actions; return the others untouched."""
        rest = []
        for action in actions:
            if isinstance(action, StartTimer):
                self.start(action.name, action.interval_ms, action.repeat)
            elif isinstance(action, StopTimer):
                self.stop(action.name)
            else:
                rest.append(action)
        return rest

    def _next_due(self) -> _Timer | None:
        if not self._timers:
            return None
        return min(self._timers.values(), key=lambda t: (t.due_ms, t.seq))

    def advance(self, ms: int, dispatch: Callable[[dict], Iterable]) -> list:
        """Move the clock forward by ms, firing due timers in order.

        Timers due at the same instant fire in the order they were started
        (a repeating timer keeps its original start order). dispatch receives
        a TICK event and returns actions; timer actions are applied before the
        next timer fires, so a timer stopped by an earlier tick never fires.
        Returns the non-timer actions, in order.
        """
        if ms < 0:
            raise ValueError("ms must not be negative")
        target = self.now_ms + ms
        out: list = []
        while True:
            timer = self._next_due()
            if timer is None or timer.due_ms > target:
                break
            self.now_ms = timer.due_ms
            if timer.repeat:
                timer.due_ms += timer.interval_ms
            else:
                del self._timers[timer.name]
            event = {"type": "TICK", "payload": {"timer": timer.name}}
            out.extend(self.apply(dispatch(event) or []))
        self.now_ms = target
        return out
