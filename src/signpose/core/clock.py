"""Frame timing for hosts that drive the blender themselves."""

import time
from typing import Optional

from signpose.constants import MAX_DELTA_TIME


class DeltaClock:
    """Produces the bounded per-tick ``dt`` the spring integrator expects.

    With ``fixed_delta`` set the clock ignores wall time and advances by
    exactly that step, which gives reproducible headless playback.
    """

    def __init__(self, max_delta: float = MAX_DELTA_TIME, fixed_delta: Optional[float] = None):
        if fixed_delta is not None and not fixed_delta > 0.0:
            raise ValueError(f"fixed_delta must be positive, got {fixed_delta}")
        self.max_delta = max_delta
        self.fixed_delta = fixed_delta
        self.elapsed = 0.0
        self.frame = 0
        self._last_time = time.perf_counter()

    @classmethod
    def fixed(cls, fps: float) -> "DeltaClock":
        step = 1.0 / fps
        return cls(max_delta=step, fixed_delta=step)

    def get_delta(self) -> float:
        """Seconds since the last call (or the fixed step), clamped to ``max_delta``."""
        if self.fixed_delta is not None:
            dt = self.fixed_delta
        else:
            now = time.perf_counter()
            dt = now - self._last_time
            self._last_time = now
        dt = min(dt, self.max_delta)
        self.elapsed += dt
        self.frame += 1
        return dt

    def reset(self) -> None:
        self.elapsed = 0.0
        self.frame = 0
        self._last_time = time.perf_counter()
