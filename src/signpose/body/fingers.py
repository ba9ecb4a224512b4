"""Finger flexion: handshape lookup and curl estimation from joint sites.

A curl is 0 for a straight digit and 1 for a fully flexed one. Digits have
three joints (MCP, PIP, DIP; thumb CMC/MCP, MCP, IP) and each joint maps a
curl to a local X rotation through its own scale. The thumb flexes less and
also abducts across the palm on its first joint.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Mapping, Sequence

import numpy as np

from signpose.core.math_utils import Vec3, clamp, vec3
from signpose.core.pose import FINGER_NAMES

# Radians of X rotation per unit curl, proximal -> distal
FINGER_JOINT_SCALES = (0.6, 0.8, 0.9)
THUMB_JOINT_SCALE = 0.6
THUMB_ABDUCTION_SCALE = 0.4

DEFAULT_HANDSHAPE = "flat-hand"
DEFAULT_NON_DOMINANT_HANDSHAPE = "open-hand"

# (index, middle, ring, pinky), thumb
HANDSHAPE_CURLS: Mapping[str, tuple[tuple[float, float, float, float], float]] = MappingProxyType({
    "flat-hand": ((0.0, 0.0, 0.0, 0.0), 0.0),
    "open-hand": ((0.1, 0.1, 0.1, 0.1), 0.2),
    "fist": ((1.0, 1.0, 1.0, 1.0), 0.8),
    "s-hand": ((1.0, 1.0, 1.0, 1.0), 0.5),
    "a-hand": ((1.0, 1.0, 1.0, 1.0), 0.3),
    "point": ((0.0, 1.0, 1.0, 1.0), 0.5),
    "claw-hand": ((0.6, 0.6, 0.6, 0.6), 0.4),
    "bent-hand": ((0.5, 0.5, 0.5, 0.5), 0.3),
    "i-hand": ((1.0, 1.0, 1.0, 0.0), 0.8),
    "y-hand": ((1.0, 1.0, 1.0, 0.0), 0.0),
    "u-hand": ((0.0, 0.0, 1.0, 1.0), 0.8),
    "h-hand": ((0.0, 0.0, 1.0, 1.0), 0.5),
    "l-hand": ((0.0, 1.0, 1.0, 1.0), 0.0),
    "x-hand": ((0.3, 1.0, 1.0, 1.0), 0.5),
    "f-hand": ((0.8, 0.0, 0.0, 0.0), 0.8),
    "flat-o": ((0.4, 0.4, 0.4, 0.4), 0.4),
    "e-hand": ((0.7, 0.7, 0.7, 0.7), 0.7),
    "v-hand": ((0.0, 0.0, 1.0, 1.0), 0.5),
    "w-hand": ((0.0, 0.0, 0.0, 1.0), 0.5),
    "r-hand": ((0.0, 0.0, 1.0, 1.0), 0.5),
    "k-hand": ((0.0, 0.0, 1.0, 1.0), 0.3),
    "d-hand": ((0.0, 1.0, 1.0, 1.0), 0.8),
    "g-hand": ((0.0, 1.0, 1.0, 1.0), 0.0),
    # Fingerspelling
    "letter-a": ((1.0, 1.0, 1.0, 1.0), 0.3),
    "letter-b": ((0.0, 0.0, 0.0, 0.0), 1.0),
    "letter-c": ((0.5, 0.5, 0.5, 0.5), 0.5),
    "letter-d": ((0.0, 1.0, 1.0, 1.0), 0.8),
    "letter-e": ((0.8, 0.8, 0.8, 0.8), 0.8),
    "letter-f": ((0.8, 0.0, 0.0, 0.0), 0.8),
    "letter-g": ((0.0, 1.0, 1.0, 1.0), 0.0),
    "letter-h": ((0.0, 0.0, 1.0, 1.0), 0.5),
    "letter-i": ((1.0, 1.0, 1.0, 0.0), 0.8),
    "letter-j": ((1.0, 1.0, 1.0, 0.0), 0.8),
    "letter-k": ((0.0, 0.0, 1.0, 1.0), 0.3),
    "letter-l": ((0.0, 1.0, 1.0, 1.0), 0.0),
    "letter-m": ((0.9, 0.9, 0.9, 1.0), 0.9),
    "letter-n": ((0.9, 0.9, 1.0, 1.0), 0.9),
    "letter-o": ((0.6, 0.6, 0.6, 0.6), 0.6),
    "letter-p": ((0.0, 0.0, 1.0, 1.0), 0.3),
    "letter-q": ((0.0, 1.0, 1.0, 1.0), 0.0),
    "letter-r": ((0.0, 0.0, 1.0, 1.0), 0.5),
    "letter-s": ((1.0, 1.0, 1.0, 1.0), 0.5),
    "letter-t": ((0.9, 1.0, 1.0, 1.0), 0.3),
    "letter-u": ((0.0, 0.0, 1.0, 1.0), 0.8),
    "letter-v": ((0.0, 0.0, 1.0, 1.0), 0.5),
    "letter-w": ((0.0, 0.0, 0.0, 1.0), 0.5),
    "letter-x": ((0.3, 1.0, 1.0, 1.0), 0.5),
    "letter-y": ((1.0, 1.0, 1.0, 0.0), 0.0),
    "letter-z": ((0.0, 1.0, 1.0, 1.0), 0.5),
})


# ── Table mode ───────────────────────────────────────────────────────

def curls_for_handshape(name: str | None, default: str = DEFAULT_HANDSHAPE) -> tuple[list[float], float]:
    """Finger curls and thumb curl for a named handshape.

    Unknown or missing names fall back to *default* without complaint; the
    dictionary vocabulary grows faster than this table.
    """
    fingers, thumb = HANDSHAPE_CURLS.get(name or default, HANDSHAPE_CURLS[default])
    return list(fingers), thumb


# ── Procedural mode ──────────────────────────────────────────────────

def joint_angle(a: Vec3, b: Vec3, c: Vec3) -> float:
    """Interior angle at *b* between segments b->a and b->c.

    A zero-length segment has no direction; the joint is reported straight (pi).
    """
    ba = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    bc = np.asarray(c, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    mag_ba = np.linalg.norm(ba)
    mag_bc = np.linalg.norm(bc)
    if mag_ba < 1e-9 or mag_bc < 1e-9:
        return math.pi
    cos_angle = np.clip(np.dot(ba, bc) / (mag_ba * mag_bc), -1.0, 1.0)
    return float(np.arccos(cos_angle))


def angle_to_curl(angle: float) -> float:
    """Straight (pi) -> 0, right angle (pi/2) or tighter -> 1."""
    half_pi = math.pi / 2
    return clamp(1.0 - (angle - half_pi) / half_pi, 0.0, 1.0)


def estimate_joint_curls(points: Sequence[Vec3], base: Vec3 | None = None) -> list[float]:
    """Per-joint curls for one digit from its joint sites.

    *points* runs proximal to distal (MCP, PIP, DIP, TIP) and must hold 3 or
    4 sites. When *base* (the wrist) is given the first site's flexion is
    included as well.
    """
    if not 3 <= len(points) <= 4:
        raise ValueError(f"Expected 3 or 4 joint positions, got {len(points)}")
    chain = list(points) if base is None else [base, *points]
    return [
        angle_to_curl(joint_angle(chain[i - 1], chain[i], chain[i + 1]))
        for i in range(1, len(chain) - 1)
    ]


def estimate_digit_curl(points: Sequence[Vec3], base: Vec3 | None = None) -> float:
    """Single summary curl for a digit: mean of its joint curls."""
    curls = estimate_joint_curls(points, base)
    return sum(curls) / len(curls)


def estimate_hand_curls(
    digits: Mapping[str, Sequence[Vec3]],
    wrist: Vec3 | None = None,
) -> tuple[list[float], float]:
    """Finger curls (index..pinky) and thumb curl from per-digit joint sites.

    Digits missing from *digits* report 0 (straight).
    """
    fingers = [
        estimate_digit_curl(digits[name], wrist) if name in digits else 0.0
        for name in FINGER_NAMES
    ]
    thumb = estimate_digit_curl(digits["thumb"], wrist) if "thumb" in digits else 0.0
    return fingers, thumb


# ── Curl <-> joint rotation ──────────────────────────────────────────

def curls_to_joint_rotations(
    joint_curls: Sequence[float],
    thumb: bool = False,
    is_right: bool = True,
) -> list[Vec3]:
    """Local Euler rotations for a digit's three joints."""
    mirror = 1.0 if is_right else -1.0
    rotations = []
    for i, curl in enumerate(joint_curls[:3]):
        if thumb:
            z = curl * THUMB_ABDUCTION_SCALE * mirror if i == 0 else 0.0
            rotations.append(vec3(curl * THUMB_JOINT_SCALE, 0.0, z))
        else:
            rotations.append(vec3(curl * FINGER_JOINT_SCALES[i], 0.0, 0.0))
    return rotations


def joint_rotations_to_curls(rotations: Sequence[Vec3], thumb: bool = False) -> list[float]:
    """Invert curls_to_joint_rotations using each joint's X rotation."""
    curls = []
    for i, rot in enumerate(rotations[:3]):
        scale = THUMB_JOINT_SCALE if thumb else FINGER_JOINT_SCALES[i]
        curls.append(clamp(float(rot[0]) / scale, 0.0, 1.0))
    return curls
