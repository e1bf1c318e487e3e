import math
from dataclasses import dataclass


@dataclass(frozen=True)
class SessionStats:
    score: float = 0
    hits: int = 0
    misses: int = 0
    streak: int = 0
    best_streak: int = 0
    time_left_seconds: int = 60


@dataclass(frozen=True)
class FinalStats:
    score: float
    hits: int
    misses: int
    best_streak: int
    accuracy: int


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ScoringEngine:
    MIN_POINTS = 10
    SIZE_POINTS = 50
    STREAK_BONUS = 5

    def __init__(self):
        self.score = 0
        self.hits = 0
        self.misses = 0
        self.streak = 0
        self.best_streak = 0

    def record_hit(self, target_size: float) -> float:
        """Score a hit on a target of the given size and return the points.

        Smaller targets are worth more, and every hit already in the current
        streak adds a bonus on top.
        """
        base = max(self.MIN_POINTS, self.SIZE_POINTS - target_size)
        bonus = self.streak * self.STREAK_BONUS
        points = base + bonus
        self.score += points
        self.hits += 1
        self.streak += 1
        self.best_streak = max(self.best_streak, self.streak)
        return points

    def record_miss(self) -> None:
        self.misses += 1
        self.streak = 0

    def accuracy(self) -> int:
        """Integer hit percentage, 0 before any hit or miss."""
        total = self.hits + self.misses
        if total == 0:
            return 0
        return round_half_up(100 * self.hits / total)

    def reset(self) -> None:
        self.score = 0
        self.hits = 0
        self.misses = 0
        self.streak = 0
        self.best_streak = 0

    def snapshot(self, time_left_seconds: int) -> SessionStats:
        return SessionStats(
            score=self.score,
            hits=self.hits,
            misses=self.misses,
            streak=self.streak,
            best_streak=self.best_streak,
            time_left_seconds=time_left_seconds,
        )

    def final_stats(self) -> FinalStats:
        return FinalStats(
            score=self.score,
            hits=self.hits,
            misses=self.misses,
            best_streak=self.best_streak,
            accuracy=self.accuracy(),
        )
