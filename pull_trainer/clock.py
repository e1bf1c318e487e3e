"""
Scheduling for the game loop.

GameSession never talks to a real timer. It asks a ``Clock`` for the current
time and for repeating callbacks, so the same session can run inside the
pygame window (``PygameClock``) or under a test that moves virtual time by
hand (``ManualClock``).
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List

import pygame

log = logging.getLogger(__name__)

Callback = Callable[[], None]


class CancelHandle:
    """A scheduled repeating callback. ``cancel()`` may be called any number of times."""

    def __init__(self, interval_ms: float, callback: Callback, due: float):
        self.interval_ms = float(interval_ms)
        self.callback = callback
        self.due = float(due)
        self.active = True

    def cancel(self) -> None:
        self.active = False

    def __repr__(self) -> str:
        state = "active" if self.active else "cancelled"
        return f"CancelHandle(every={self.interval_ms:.0f}ms, due={self.due:.0f}, {state})"


class Clock(ABC):
    def __init__(self):
        self._timers: List[CancelHandle] = []

    @abstractmethod
    def now(self) -> float:
        """Current time in milliseconds."""

    def schedule_repeating(self, interval_ms: float, callback: Callback) -> CancelHandle:
        if interval_ms <= 0:
            raise ValueError(f"interval must be positive, got {interval_ms}")
        handle = CancelHandle(interval_ms, callback, self.now() + interval_ms)
        self._timers.append(handle)
        return handle

    @property
    def active_timers(self) -> List[CancelHandle]:
        self._timers = [t for t in self._timers if t.active]
        return list(self._timers)


class ManualClock(Clock):
    """Virtual time for tests: nothing happens until ``advance`` is called."""

    def __init__(self, start_ms: float = 0.0):
        super().__init__()
        self._now = float(start_ms)

    def now(self) -> float:
        return self._now

    def advance(self, ms: float) -> None:
        end = self._now + ms
        while True:
            due = [t for t in self.active_timers if t.due <= end]
            if not due:
                break
            # min() keeps registration order for timers due at the same time
            handle = min(due, key=lambda t: t.due)
            self._now = handle.due
            handle.due += handle.interval_ms
            handle.callback()
        self._now = end


class PygameClock(Clock):
    """Wall-clock timers polled from the pygame frame loop.

    Each ``pump()`` fires a due timer at most once. A timer that fell behind
    (slow frame, window drag) is rescheduled from the current time instead of
    firing the missed occurrences.
    """

    def __init__(self, get_ticks: Callable[[], int] = pygame.time.get_ticks):
        super().__init__()
        self._get_ticks = get_ticks

    def now(self) -> float:
        return float(self._get_ticks())

    def pump(self) -> int:
        now = self.now()
        fired = 0
        for handle in self.active_timers:
            # An earlier callback in this pump may have cancelled it
            if not handle.active or handle.due > now:
                continue
            handle.due += handle.interval_ms
            if handle.due <= now:
                log.debug("%r fell behind, skipping missed ticks", handle)
                handle.due = now + handle.interval_ms
            handle.callback()
            fired += 1
        return fired
