import enum
import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from clock import CancelHandle, Clock
from scoring import FinalStats, ScoringEngine, SessionStats
from shake import ShakeGenerator
from targets import Target, TargetField

log = logging.getLogger(__name__)

Point = Tuple[float, float]

SECOND_MS = 1000

DIFFICULTY_LEVELS = {
    "Easy": {"target_size": 50, "target_speed": 1, "spawn_interval_ms": 2500},
    "Medium": {"target_size": 40, "target_speed": 2, "spawn_interval_ms": 2000},
    "Hard": {"target_size": 30, "target_speed": 3, "spawn_interval_ms": 1500},
}
DEFAULT_DIFFICULTY = "Medium"


class SessionState(enum.Enum):
    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class PointerOverlay:
    position: Optional[Point]
    adjusted: Optional[Point]
    shake_visible: bool


def normalize_difficulty(level: str) -> str:
    for name in DIFFICULTY_LEVELS:
        if name.lower() == str(level).strip().lower():
            return name
    log.debug("unknown difficulty %r, using %s", level, DEFAULT_DIFFICULTY)
    return DEFAULT_DIFFICULTY


class GameSession:
    """One aim-training run: targets, mouse pull, score and the countdown.

    The session owns its field, shake generator and scoring engine
    outright, so any number of sessions can coexist. Time only enters
    through ``clock``: a fast repeating tick drives the simulation and a
    one second tick drives the countdown.

    Commands that make no sense in the current state (clicking while
    paused, pausing from the menu, ...) are ignored.
    """

    def __init__(
        self,
        clock: Clock,
        width: int = 800,
        height: int = 600,
        difficulty: str = DEFAULT_DIFFICULTY,
        shake_intensity: float = 50,
        session_seconds: int = 60,
        tick_ms: float = 16,
        restart_shake_on_resume: bool = True,
        rng: Optional[random.Random] = None,
        on_tick: Optional[Callable[[SessionStats, Tuple[Target, ...], PointerOverlay], None]] = None,
        on_second: Optional[Callable[[int], None]] = None,
        on_session_end: Optional[Callable[[FinalStats], None]] = None,
    ):
        self.clock = clock
        self.session_seconds = session_seconds
        self.tick_ms = tick_ms
        self.restart_shake_on_resume = restart_shake_on_resume
        self.on_tick = on_tick
        self.on_second = on_second
        self.on_session_end = on_session_end

        self.field = TargetField(width, height, rng=rng)
        self.shake = ShakeGenerator(shake_intensity)
        self.scoring = ScoringEngine()

        self.state = SessionState.MENU
        self.time_left_seconds = session_seconds
        self.final_stats: Optional[FinalStats] = None
        self.pointer: Optional[Point] = None

        self._tick_handle: Optional[CancelHandle] = None
        self._second_handle: Optional[CancelHandle] = None

        self.difficulty = DEFAULT_DIFFICULTY
        self.set_difficulty(difficulty)

    # ---- commands ----

    def start(self) -> None:
        if self.state is SessionState.PLAYING:
            log.debug("start ignored, already playing")
            return
        self._cancel_timers()
        self.scoring.reset()
        self.field.reset()
        self.time_left_seconds = self.session_seconds
        self.final_stats = None
        self.shake.start()
        self.state = SessionState.PLAYING
        self._schedule_timers()
        log.info("session started (%s, shake %s%%)", self.difficulty, self.shake.intensity)

    def pause(self) -> None:
        if self.state is not SessionState.PLAYING:
            log.debug("pause ignored in %s", self.state.value)
            return
        self._cancel_timers()
        self.state = SessionState.PAUSED
        self.shake.stop()
        log.info("session paused with %ss left", self.time_left_seconds)

    def resume(self) -> None:
        if self.state is not SessionState.PAUSED:
            log.debug("resume ignored in %s", self.state.value)
            return
        if self.restart_shake_on_resume:
            self.shake.start()
        else:
            self.shake.resume()
        self.state = SessionState.PLAYING
        self._schedule_timers()
        log.info("session resumed")

    def toggle_pause(self) -> None:
        if self.state is SessionState.PLAYING:
            self.pause()
        elif self.state is SessionState.PAUSED:
            self.resume()

    def reset(self) -> None:
        self._cancel_timers()
        self.state = SessionState.MENU
        self.scoring.reset()
        self.field.reset()
        self.shake.stop()
        self.time_left_seconds = self.session_seconds
        self.final_stats = None
        log.info("session reset to menu")

    def set_difficulty(self, level: str) -> None:
        self.difficulty = normalize_difficulty(level)
        cfg = DIFFICULTY_LEVELS[self.difficulty]
        self.field.configure(cfg["target_size"], cfg["target_speed"], cfg["spawn_interval_ms"])

    def set_shake_intensity(self, value: float) -> None:
        self.shake.intensity = value

    def pointer_moved(self, x: float, y: float) -> None:
        self.pointer = (float(x), float(y))

    def click(self, x: float, y: float) -> Optional[Target]:
        """Shoot at ``(x, y)`` as seen through the current mouse pull.

        Returns the target that was hit, or ``None`` for a miss or when the
        session is not running.
        """
        if self.state is not SessionState.PLAYING:
            log.debug("click ignored in %s", self.state.value)
            return None
        point = self._adjusted((float(x), float(y)))
        target = self.field.hit_test(point)
        if target is None:
            self.scoring.record_miss()
            return None
        self.scoring.record_hit(target.size)
        self.field.remove(target)
        return target

    # ---- queries ----

    @property
    def stats(self) -> SessionStats:
        return self.scoring.snapshot(self.time_left_seconds)

    @property
    def targets(self) -> Tuple[Target, ...]:
        return tuple(self.field.targets)

    @property
    def shake_intensity(self) -> float:
        return self.shake.intensity

    @property
    def shake_offset(self) -> Point:
        return self.shake.offset

    def accuracy(self) -> int:
        return self.scoring.accuracy()

    def pointer_overlay(self) -> PointerOverlay:
        if self.pointer is None:
            return PointerOverlay(None, None, self.shake.visible)
        return PointerOverlay(self.pointer, self._adjusted(self.pointer), self.shake.visible)

    # ---- timers ----

    def _adjusted(self, point: Point) -> Point:
        if not self.shake.armed:
            return point
        ox, oy = self.shake.offset
        return (point[0] + ox, point[1] + oy)

    def _schedule_timers(self) -> None:
        self._cancel_timers()
        self._tick_handle = self.clock.schedule_repeating(self.tick_ms, self._tick)
        self._second_handle = self.clock.schedule_repeating(SECOND_MS, self._second)

    def _cancel_timers(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None
        if self._second_handle is not None:
            self._second_handle.cancel()
            self._second_handle = None

    def _tick(self) -> None:
        if self.state is not SessionState.PLAYING:
            return
        now = self.clock.now()
        self.shake.advance()
        self.field.spawn(now)
        for _ in self.field.advance(now):
            self.scoring.record_miss()
        if self.on_tick is not None:
            self.on_tick(self.stats, self.targets, self.pointer_overlay())

    def _second(self) -> None:
        if self.state is not SessionState.PLAYING:
            return
        self.time_left_seconds = max(0, self.time_left_seconds - 1)
        if self.on_second is not None:
            self.on_second(self.time_left_seconds)
        if self.time_left_seconds <= 0:
            self._end()

    def _end(self) -> None:
        self._cancel_timers()
        self.state = SessionState.GAME_OVER
        self.shake.stop()
        self.final_stats = self.scoring.final_stats()
        log.info(
            "session over: score=%s hits=%d accuracy=%d%% best streak=%d",
            self.final_stats.score,
            self.final_stats.hits,
            self.final_stats.accuracy,
            self.final_stats.best_streak,
        )
        if self.on_session_end is not None:
            self.on_session_end(self.final_stats)
