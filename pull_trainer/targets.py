import logging
import random
from typing import List, Optional, Tuple

log = logging.getLogger(__name__)

SIZE_JITTER = 5.0
LIFE_MS_RANGE = (5000.0, 8000.0)


class Target:
    def __init__(
        self,
        x: float,
        y: float,
        size: float,
        vx: float = 0.0,
        vy: float = 0.0,
        created_at: float = 0.0,
        life_ms: float = 5000.0,
        max_life_ms: Optional[float] = None,
        bounds: Tuple[int, int] = (800, 600),
    ):
        self.x = float(x)
        self.y = float(y)
        self.size = float(size)
        self.vx = float(vx)
        self.vy = float(vy)
        self.created_at = float(created_at)
        self.life_ms = float(life_ms)
        # Drives the fade only; expiry is governed by life_ms.
        self.max_life_ms = float(life_ms if max_life_ms is None else max_life_ms)
        self.bounds = bounds

    @property
    def radius(self) -> float:
        return self.size / 2

    def update(self) -> None:
        self.x += self.vx
        self.y += self.vy
        w, h = self.bounds
        r = self.radius
        # Bounce is decided on the unclamped position
        if self.x <= r or self.x >= w - r:
            self.vx = -self.vx
        if self.y <= r or self.y >= h - r:
            self.vy = -self.vy
        self.x = max(r, min(w - r, self.x))
        self.y = max(r, min(h - r, self.y))

    def is_expired(self, now: float) -> bool:
        return now - self.created_at > self.life_ms

    def fade_alpha(self, now: float) -> float:
        ratio = (now - self.created_at) / self.max_life_ms
        return max(0.3, 1.0 - ratio * 0.7)

    def check_collision(self, pos: Tuple[float, float]) -> bool:
        dx = self.x - float(pos[0])
        dy = self.y - float(pos[1])
        return (dx * dx + dy * dy) <= (self.radius * self.radius)

    def __repr__(self) -> str:
        return f"Target(x={self.x:.1f}, y={self.y:.1f}, size={self.size:.1f})"


class TargetField:
    """Owns the live targets of a session.

    Targets are kept in spawn order, which is also the draw order: the last
    one is on top and wins hit-tests when targets overlap.
    """

    def __init__(
        self,
        width: int,
        height: int,
        base_size: float = 40,
        base_speed: float = 2,
        spawn_interval_ms: float = 2000,
        rng: Optional[random.Random] = None,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"field size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.base_size = base_size
        self.base_speed = base_speed
        self.spawn_interval_ms = spawn_interval_ms
        self.rng = rng or random.Random()
        self.targets: List[Target] = []
        self.last_spawn_time: Optional[float] = None

    def configure(self, base_size: float, base_speed: float, spawn_interval_ms: float) -> None:
        self.base_size = base_size
        self.base_speed = base_speed
        self.spawn_interval_ms = spawn_interval_ms

    def _spawn_coord(self, size: float, extent: float) -> float:
        # Keep a full size of margin so a fresh target never starts on a wall,
        # shrinking to the in-bounds range on narrow fields.
        lo, hi = size, extent - size
        if hi < lo:
            lo, hi = size / 2, extent - size / 2
        if hi < lo:
            return extent / 2
        return lo + self.rng.random() * (hi - lo)

    def spawn(self, now: float) -> Optional[Target]:
        if self.last_spawn_time is not None and now - self.last_spawn_time < self.spawn_interval_ms:
            return None
        rng = self.rng
        size = self.base_size + rng.uniform(-SIZE_JITTER, SIZE_JITTER)
        x = self._spawn_coord(size, self.width)
        y = self._spawn_coord(size, self.height)
        target = Target(
            x,
            y,
            size,
            vx=rng.uniform(-1.0, 1.0) * self.base_speed,
            vy=rng.uniform(-1.0, 1.0) * self.base_speed,
            created_at=now,
            life_ms=rng.uniform(*LIFE_MS_RANGE),
            max_life_ms=rng.uniform(*LIFE_MS_RANGE),
            bounds=(self.width, self.height),
        )
        self.targets.append(target)
        self.last_spawn_time = now
        log.debug("spawned %r at t=%.0f", target, now)
        return target

    def advance(self, now: float) -> List[Target]:
        """Move every target and drop the expired ones.

        Returns the expired targets; each one counts as a miss.
        """
        expired = []
        for t in self.targets[:]:
            t.update()
            if t.is_expired(now):
                self.targets.remove(t)
                expired.append(t)
        return expired

    def hit_test(self, point: Tuple[float, float]) -> Optional[Target]:
        for t in reversed(self.targets):
            if t.check_collision(point):
                return t
        return None

    def remove(self, target: Target) -> None:
        if target in self.targets:
            self.targets.remove(target)

    def reset(self) -> None:
        self.targets.clear()
        self.last_spawn_time = None

    def __len__(self) -> int:
        return len(self.targets)
