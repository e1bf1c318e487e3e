import math
from typing import Optional, Tuple

# Phase advance per tick, independent of real frame time.
STEP = 0.1
MAX_INTENSITY = 100


def clamp_intensity(value: float) -> float:
    return max(0, min(MAX_INTENSITY, value))


def offset_at(elapsed: float, intensity: float) -> Tuple[float, float]:
    """Tremor offset after ``elapsed`` shake time at the given intensity.

    Two sine/cosine pairs with incommensurate frequencies per axis give a
    wobble that does not visibly repeat within a session.
    """
    amount = intensity / 10
    x = math.sin(elapsed * 15) * amount + math.sin(elapsed * 23) * amount * 0.5
    y = math.cos(elapsed * 17) * amount + math.cos(elapsed * 19) * amount * 0.5
    return (x, y)


class ShakeGenerator:
    def __init__(self, intensity: float = 50):
        self._intensity = clamp_intensity(intensity)
        self.armed = False
        self.elapsed = 0.0
        self.offset: Tuple[float, float] = (0.0, 0.0)

    @property
    def intensity(self) -> float:
        return self._intensity

    @intensity.setter
    def intensity(self, value: float) -> None:
        self._intensity = clamp_intensity(value)
        if self._intensity == 0:
            self.offset = (0.0, 0.0)

    @property
    def visible(self) -> bool:
        return self.armed and self._intensity > 0

    def start(self) -> None:
        self.elapsed = 0.0
        self.offset = (0.0, 0.0)
        self.armed = True

    def resume(self) -> None:
        # Keeps the phase; the offset is picked up again on the next advance.
        self.armed = True

    def stop(self) -> None:
        self.armed = False
        self.offset = (0.0, 0.0)

    def advance(self, dt: Optional[float] = None) -> Tuple[float, float]:
        """Move the shake phase one tick forward and return the new offset.

        ``dt`` is accepted so the generator can be driven from a frame loop,
        but the phase always moves by ``STEP``.
        """
        if not self.armed or self._intensity == 0:
            self.offset = (0.0, 0.0)
            return self.offset
        self.elapsed += STEP
        self.offset = offset_at(self.elapsed, self._intensity)
        return self.offset
