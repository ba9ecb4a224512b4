"""Canonical pose types handed to the renderer each frame."""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from signpose.core.math_utils import Vec3, as_vec3, clamp, vec3

FINGER_NAMES = ("index", "middle", "ring", "pinky")


class MouthShape(Enum):
    NEUTRAL = "neutral"
    OPEN = "open"
    SMILE = "smile"
    FROWN = "frown"


@dataclass
class ExpressionState:
    """Face and head state driving blend shapes and the head bone."""
    eyebrows: float = 0.0        # -1 (furrowed) to 1 (raised)
    eye_openness: float = 1.0    # 0 (closed) to 1 (open)
    mouth_shape: MouthShape = MouthShape.NEUTRAL
    head_tilt: Vec3 = field(default_factory=vec3)  # Euler XYZ, radians

    def __post_init__(self):
        self.eyebrows = clamp(float(self.eyebrows), -1.0, 1.0)
        self.eye_openness = clamp(float(self.eye_openness), 0.0, 1.0)
        self.mouth_shape = MouthShape(self.mouth_shape)
        self.head_tilt = as_vec3(self.head_tilt)

    def copy(self) -> "ExpressionState":
        return ExpressionState(
            eyebrows=self.eyebrows,
            eye_openness=self.eye_openness,
            mouth_shape=self.mouth_shape,
            head_tilt=self.head_tilt.copy(),
        )


@dataclass
class LimbPose:
    """One hand: wrist position, wrist rotation, and finger flexion."""
    position: Vec3 = field(default_factory=vec3)
    rotation: Vec3 = field(default_factory=vec3)  # Euler XYZ, radians
    finger_curls: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0, 0.0])
    thumb_curl: float = 0.0

    def __post_init__(self):
        self.position = as_vec3(self.position)
        self.rotation = as_vec3(self.rotation)
        if len(self.finger_curls) != len(FINGER_NAMES):
            raise ValueError(
                f"Expected {len(FINGER_NAMES)} finger curls, got {len(self.finger_curls)}"
            )
        self.finger_curls = [clamp(float(c), 0.0, 1.0) for c in self.finger_curls]
        self.thumb_curl = clamp(float(self.thumb_curl), 0.0, 1.0)

    def copy(self) -> "LimbPose":
        return LimbPose(
            position=self.position.copy(),
            rotation=self.rotation.copy(),
            finger_curls=list(self.finger_curls),
            thumb_curl=self.thumb_curl,
        )


@dataclass
class Pose:
    """Canonical intermediate pose.

    ``bone_rotations`` holds named-bone local Euler rotations produced by the
    retargeters. Bones absent from the map keep whatever rotation the
    renderer last applied.
    """
    right_hand: LimbPose = field(default_factory=LimbPose)
    left_hand: LimbPose = field(default_factory=LimbPose)
    expression: ExpressionState = field(default_factory=ExpressionState)
    bone_rotations: dict[str, Vec3] = field(default_factory=dict)

    def copy(self) -> "Pose":
        return Pose(
            right_hand=self.right_hand.copy(),
            left_hand=self.left_hand.copy(),
            expression=self.expression.copy(),
            bone_rotations={k: v.copy() for k, v in self.bone_rotations.items()},
        )

    def limb(self, is_right: bool) -> LimbPose:
        return self.right_hand if is_right else self.left_hand

    def to_dict(self) -> dict:
        """Plain-Python snapshot (lists and floats) for logging or JSON output."""
        def _limb(limb: LimbPose) -> dict:
            return {
                "position": limb.position.tolist(),
                "rotation": limb.rotation.tolist(),
                "fingerCurls": list(limb.finger_curls),
                "thumbCurl": limb.thumb_curl,
            }

        return {
            "rightHand": _limb(self.right_hand),
            "leftHand": _limb(self.left_hand),
            "expression": {
                "eyebrows": self.expression.eyebrows,
                "eyeOpenness": self.expression.eye_openness,
                "mouthShape": self.expression.mouth_shape.value,
                "headTilt": self.expression.head_tilt.tolist(),
            },
            "bones": {k: v.tolist() for k, v in self.bone_rotations.items()},
        }


@dataclass
class SpringState:
    """Per-limb spring state. Owned by exactly one PoseBlender."""
    position: Vec3 = field(default_factory=vec3)
    velocity: Vec3 = field(default_factory=vec3)

    def __post_init__(self):
        self.position = as_vec3(self.position)
        self.velocity = as_vec3(self.velocity)


# Hands relaxed in front of the torso
REST_RIGHT_POSITION = (0.35, -0.1, 0.2)
REST_LEFT_POSITION = (-0.35, -0.1, 0.15)
REST_FINGER_CURL = 0.1
REST_THUMB_CURL = 0.2


def rest_pose() -> Pose:
    """Relaxed idle pose. Returns a fresh instance on every call."""
    return Pose(
        right_hand=LimbPose(
            position=vec3(*REST_RIGHT_POSITION),
            finger_curls=[REST_FINGER_CURL] * 4,
            thumb_curl=REST_THUMB_CURL,
        ),
        left_hand=LimbPose(
            position=vec3(*REST_LEFT_POSITION),
            finger_curls=[REST_FINGER_CURL] * 4,
            thumb_curl=REST_THUMB_CURL,
        ),
        expression=ExpressionState(),
    )


def t_pose() -> Pose:
    """Bind-pose equivalent: straight fingers, zero rotations, neutral face."""
    return Pose(
        right_hand=LimbPose(position=vec3(*REST_RIGHT_POSITION)),
        left_hand=LimbPose(position=vec3(*REST_LEFT_POSITION)),
        expression=ExpressionState(),
    )


def poses_close(a: Pose, b: Pose, atol: float = 1e-9) -> bool:
    """Approximate structural equality, used by tests and change detection."""
    for la, lb in ((a.right_hand, b.right_hand), (a.left_hand, b.left_hand)):
        if not (np.allclose(la.position, lb.position, atol=atol)
                and np.allclose(la.rotation, lb.rotation, atol=atol)
                and np.allclose(la.finger_curls, lb.finger_curls, atol=atol)
                and abs(la.thumb_curl - lb.thumb_curl) <= atol):
            return False
    ea, eb = a.expression, b.expression
    if (abs(ea.eyebrows - eb.eyebrows) > atol
            or abs(ea.eye_openness - eb.eye_openness) > atol
            or ea.mouth_shape is not eb.mouth_shape
            or not np.allclose(ea.head_tilt, eb.head_tilt, atol=atol)):
        return False
    if a.bone_rotations.keys() != b.bone_rotations.keys():
        return False
    return all(
        np.allclose(a.bone_rotations[k], b.bone_rotations[k], atol=atol)
        for k in a.bone_rotations
    )
