"""Plays a queue of signs through a PoseBlender.

The host calls ``tick(dt)`` once per frame. The sequencer tracks progress
through the current sign, retargets the blender at the matching point of
the sign, and moves on to the next queued sign when progress reaches 1.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from typing import Iterable, Optional

from signpose.animation.pose_blender import PoseBlender
from signpose.core.events import EventBus, EventType
from signpose.core.pose import Pose
from signpose.core.sign import Sign

logger = logging.getLogger(__name__)


class SignSequencer:
    def __init__(self, blender: PoseBlender | None = None, event_bus: EventBus | None = None):
        self.blender = blender if blender is not None else PoseBlender()
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self._queue: deque[Sign] = deque()
        self._current: Optional[Sign] = None
        self._elapsed = 0.0   # seconds into the current sign, at playback speed
        self._speed = 1.0
        self._paused = False

    # ── State ─────────────────────────────────────────────────────

    @property
    def current_sign(self) -> Optional[Sign]:
        return self._current

    @property
    def queue_length(self) -> int:
        return len(self._queue)

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_animating(self) -> bool:
        return self._current is not None and not self._paused

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def progress(self) -> float:
        """Normalized progress through the current sign (0 when idle)."""
        if self._current is None:
            return 0.0
        duration = self._current.duration_ms / 1000.0
        if duration <= 0.0:
            return 1.0
        return min(self._elapsed / duration, 1.0)

    # ── Control ───────────────────────────────────────────────────

    def queue_signs(self, signs: Iterable[Sign]) -> None:
        """Append signs; playback starts at once if nothing is playing."""
        self._queue.extend(signs)
        if self._current is None and self._queue:
            self._start_next()

    def clear(self) -> None:
        """Drop the current sign and everything queued; the avatar heads to rest."""
        dropped = len(self._queue) + (1 if self._current is not None else 0)
        self._queue.clear()
        self._current = None
        self._elapsed = 0.0
        self.blender.return_to_rest()
        self.event_bus.publish(EventType.QUEUE_CLEARED, dropped=dropped)

    def pause(self) -> None:
        if not self._paused:
            self._paused = True
            self.event_bus.publish(EventType.PLAYBACK_PAUSED)

    def resume(self) -> None:
        if self._paused:
            self._paused = False
            self.event_bus.publish(EventType.PLAYBACK_RESUMED)

    def set_speed(self, speed: float) -> None:
        """Playback rate multiplier (1 = authored duration)."""
        if not speed > 0.0:
            raise ValueError(f"Playback speed must be positive, got {speed}")
        self._speed = speed

    # ── Per-frame ─────────────────────────────────────────────────

    def tick(self, dt: float) -> Pose:
        """Advance playback by *dt* seconds and return the blended pose.

        While paused, progress holds but the blender keeps settling toward
        the last target.
        """
        if not math.isfinite(dt) or dt < 0.0:
            raise ValueError(f"dt must be a finite, non-negative number, got {dt}")
        if self._current is not None and not self._paused:
            self._elapsed += dt * self._speed
            self._advance()
        return self.blender.update(dt)

    def _advance(self) -> None:
        # A long tick may finish several short signs; overflow carries over
        while self._current is not None:
            progress = self.progress
            self.blender.set_target_from_sign(self._current, progress)
            if progress < 1.0:
                return
            overflow = self._elapsed - self._current.duration_ms / 1000.0
            self._complete_current()
            if self._current is not None:
                self._elapsed = max(0.0, overflow)

    def _start_next(self) -> None:
        self._current = self._queue.popleft()
        self._elapsed = 0.0
        logger.debug("Sign started: %s", self._current.gloss)
        self.blender.set_target_from_sign(self._current, 0.0)
        self.event_bus.publish(EventType.SIGN_STARTED, sign=self._current)

    def _complete_current(self) -> None:
        finished = self._current
        self._current = None
        self._elapsed = 0.0
        self.event_bus.publish(EventType.SIGN_COMPLETED, sign=finished)
        if self._queue:
            self._start_next()
        else:
            self.blender.return_to_rest()
            self.event_bus.publish(EventType.QUEUE_EMPTY)
