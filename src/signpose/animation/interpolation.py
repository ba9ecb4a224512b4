"""Easing curves, Catmull-Rom splines, and keyframe interpolation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Generic, Sequence, TypeVar, Union

from signpose.core.math_utils import Vec3, clamp, vec3

T = TypeVar("T")


# ── Easing functions ─────────────────────────────────────────────────

def _ease_linear(t: float) -> float:
    return t


def _ease_in(t: float) -> float:
    return t * t


def _ease_out(t: float) -> float:
    return t * (2.0 - t)


def _ease_in_out(t: float) -> float:
    if t < 0.5:
        return 2.0 * t * t
    return -1.0 + (4.0 - 2.0 * t) * t


def _ease_in_cubic(t: float) -> float:
    return t * t * t


def _ease_out_cubic(t: float) -> float:
    return 1.0 - (1.0 - t) ** 3


def _ease_in_out_cubic(t: float) -> float:
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - (-2.0 * t + 2.0) ** 3 / 2.0


def _ease_out_elastic(t: float) -> float:
    if t == 0.0:
        return 0.0
    if t == 1.0:
        return 1.0
    c4 = (2.0 * math.pi) / 3.0
    return 2.0 ** (-10.0 * t) * math.sin((t * 10.0 - 0.75) * c4) + 1.0


_BACK_C1 = 1.70158
_BACK_C3 = _BACK_C1 + 1.0


def _ease_in_back(t: float) -> float:
    return _BACK_C3 * t * t * t - _BACK_C1 * t * t


def _ease_out_back(t: float) -> float:
    return 1.0 + _BACK_C3 * (t - 1.0) ** 3 + _BACK_C1 * (t - 1.0) ** 2


def _smooth_step(t: float) -> float:
    return t * t * (3.0 - 2.0 * t)


def _smoother_step(t: float) -> float:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


EasingFn = Callable[[float], float]

EASINGS: MappingProxyType[str, EasingFn] = MappingProxyType({
    "linear": _ease_linear,
    "ease_in": _ease_in,
    "ease_out": _ease_out,
    "ease_in_out": _ease_in_out,
    "ease_in_cubic": _ease_in_cubic,
    "ease_out_cubic": _ease_out_cubic,
    "ease_in_out_cubic": _ease_in_out_cubic,
    "ease_out_elastic": _ease_out_elastic,
    "ease_in_back": _ease_in_back,
    "ease_out_back": _ease_out_back,
    "smooth_step": _smooth_step,
    "smoother_step": _smoother_step,
})

DEFAULT_EASING = "ease_in_out_cubic"

Easing = Union[str, EasingFn]


def get_easing(easing: Easing | None) -> EasingFn:
    """Resolve an easing name or callable. Unknown names use the default curve."""
    if callable(easing):
        return easing
    if easing is None:
        return EASINGS[DEFAULT_EASING]
    return EASINGS.get(easing, EASINGS[DEFAULT_EASING])


# ── Splines ──────────────────────────────────────────────────────────

def catmull_rom(p0: float, p1: float, p2: float, p3: float, t: float) -> float:
    """Uniform Catmull-Rom segment between p1 and p2, local t in [0, 1]."""
    t2 = t * t
    t3 = t2 * t
    return 0.5 * (
        2.0 * p1
        + (-p0 + p2) * t
        + (2.0 * p0 - 5.0 * p1 + 4.0 * p2 - p3) * t2
        + (-p0 + 3.0 * p1 - 3.0 * p2 + p3) * t3
    )


def catmull_rom_vec3(p0: Vec3, p1: Vec3, p2: Vec3, p3: Vec3, t: float) -> Vec3:
    return vec3(
        catmull_rom(p0[0], p1[0], p2[0], p3[0], t),
        catmull_rom(p0[1], p1[1], p2[1], p3[1], t),
        catmull_rom(p0[2], p1[2], p2[2], p3[2], t),
    )


# ── Keyframes ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Keyframe(Generic[T]):
    """A value at normalized time 0-1.

    ``easing`` shapes the segment that *ends* at this keyframe.
    """
    time: float
    value: T
    easing: Easing | None = None


def interpolate_keyframes(
    keyframes: Sequence[Keyframe[T]],
    t: float,
    interpolator: Callable[[T, T, float], T],
) -> T:
    """Evaluate a keyframe track at normalized time *t*.

    Keyframes must be sorted by time. Outside the covered range the
    first/last segment is used, which after clamping pins the result to
    the end values.
    """
    if not keyframes:
        raise ValueError("No keyframes provided")
    if len(keyframes) == 1:
        return keyframes[0].value

    t = clamp(t, 0.0, 1.0)

    start, end = keyframes[0], keyframes[-1]
    for a, b in zip(keyframes, keyframes[1:]):
        if a.time <= t <= b.time:
            start, end = a, b
            break

    seg_duration = end.time - start.time
    local_t = (t - start.time) / seg_duration if seg_duration > 0 else 0.0
    local_t = clamp(local_t, 0.0, 1.0)

    eased_t = get_easing(end.easing)(local_t)
    return interpolator(start.value, end.value, eased_t)
