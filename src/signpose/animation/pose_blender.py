"""Temporal smoothing between successive target poses.

Hand positions ride damped springs so the wrists accelerate and settle
naturally. Angles, curls and facial values use a frame-rate independent
exponential approach (``1 - exp(-rate * dt)`` per tick). The mouth shape is
discrete and switches immediately.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from signpose.animation.sign_pose import sign_to_pose
from signpose.animation.spring import SpringConfig, get_spring_preset, step_spring_state
from signpose.constants import DEFAULT_SMOOTHING_RATE, DEFAULT_SPRING_PRESET
from signpose.core.config_loader import load_config_section
from signpose.core.math_utils import lerp, lerp_vec3, vec3
from signpose.core.pose import ExpressionState, LimbPose, Pose, SpringState, rest_pose
from signpose.core.sign import Sign

logger = logging.getLogger(__name__)


def _blend_limb(a: LimbPose, b: LimbPose, t: float) -> LimbPose:
    return LimbPose(
        position=lerp_vec3(a.position, b.position, t),
        rotation=lerp_vec3(a.rotation, b.rotation, t),
        finger_curls=[lerp(ca, cb, t) for ca, cb in zip(a.finger_curls, b.finger_curls)],
        thumb_curl=lerp(a.thumb_curl, b.thumb_curl, t),
    )


def blend_poses(a: Pose, b: Pose, t: float) -> Pose:
    """Linear blend from *a* (t=0) to *b* (t=1).

    The mouth shape switches at t = 0.5. Bones present in only one pose are
    carried over from that pose unchanged.
    """
    bones = {name: rot.copy() for name, rot in a.bone_rotations.items()}
    for name, rot in b.bone_rotations.items():
        bones[name] = lerp_vec3(bones[name], rot, t) if name in bones else rot.copy()

    return Pose(
        right_hand=_blend_limb(a.right_hand, b.right_hand, t),
        left_hand=_blend_limb(a.left_hand, b.left_hand, t),
        expression=ExpressionState(
            eyebrows=lerp(a.expression.eyebrows, b.expression.eyebrows, t),
            eye_openness=lerp(a.expression.eye_openness, b.expression.eye_openness, t),
            mouth_shape=b.expression.mouth_shape if t >= 0.5 else a.expression.mouth_shape,
            head_tilt=lerp_vec3(a.expression.head_tilt, b.expression.head_tilt, t),
        ),
        bone_rotations=bones,
    )


@dataclass(frozen=True)
class BlenderConfig:
    spring_preset: str = DEFAULT_SPRING_PRESET
    smoothing_rate: float = DEFAULT_SMOOTHING_RATE  # 1/s

    def __post_init__(self):
        get_spring_preset(self.spring_preset)  # KeyError on unknown names
        if not self.smoothing_rate > 0.0:
            raise ValueError(f"smoothing_rate must be positive, got {self.smoothing_rate}")

    @classmethod
    def from_dict(cls, data: dict) -> "BlenderConfig":
        return cls(
            spring_preset=data.get("springPreset", DEFAULT_SPRING_PRESET),
            smoothing_rate=float(data.get("smoothingRate", DEFAULT_SMOOTHING_RATE)),
        )

    @classmethod
    def load(cls, name: str = "avatar.json") -> "BlenderConfig":
        """Read the ``blending`` section of an avatar config; defaults on failure."""
        try:
            section = load_config_section(name, "blending")
            config = cls.from_dict(section)
        except (FileNotFoundError, ValueError, KeyError, TypeError) as e:
            logger.warning("Blender config unavailable, using defaults: %s", e)
            return cls()
        logger.info(
            "Loaded blender config: preset=%s rate=%.1f",
            config.spring_preset, config.smoothing_rate,
        )
        return config


class PoseBlender:
    """Moves a current pose toward a target pose, one tick at a time.

    Owns one SpringState per hand. Not thread-safe; drive it from the frame
    loop only.
    """

    def __init__(self, config: BlenderConfig | None = None, initial: Pose | None = None):
        self.config = config if config is not None else BlenderConfig()
        self.spring: SpringConfig = get_spring_preset(self.config.spring_preset)
        self.smoothing_rate = self.config.smoothing_rate
        self.reset(initial)

    # ── Targets ───────────────────────────────────────────────────

    def set_target(self, pose: Pose) -> None:
        self._target = pose.copy()

    def set_target_from_sign(self, sign: Sign, progress: float = 0.0) -> None:
        self._target = sign_to_pose(sign, progress)

    def return_to_rest(self) -> None:
        self._target = rest_pose()

    def set_spring_preset(self, name: str) -> None:
        """Switch spring dynamics; spring velocities carry over."""
        self.spring = get_spring_preset(name)

    def reset(self, pose: Pose | None = None) -> None:
        """Jump straight to *pose* (rest by default) with springs at rest."""
        start = pose.copy() if pose is not None else rest_pose()
        self._current = start
        self._target = start.copy()
        self._springs = {
            is_right: SpringState(position=start.limb(is_right).position)
            for is_right in (True, False)
        }

    # ── Per-frame ─────────────────────────────────────────────────

    def update(self, dt: float, target: Pose | None = None) -> Pose:
        """Advance by *dt* seconds and return a snapshot of the current pose.

        Negative or non-finite dt is rejected before anything changes. A
        zero dt leaves the pose where it is.
        """
        if not math.isfinite(dt) or dt < 0.0:
            raise ValueError(f"dt must be a finite, non-negative number, got {dt}")
        if target is not None:
            self.set_target(target)
        if dt == 0.0:
            return self.current_pose()

        alpha = 1.0 - math.exp(-self.smoothing_rate * dt)
        current, target = self._current, self._target

        for is_right in (True, False):
            cur_limb = current.limb(is_right)
            tgt_limb = target.limb(is_right)
            state = self._springs[is_right]
            step_spring_state(state, tgt_limb.position, self.spring, dt)
            cur_limb.position = state.position.copy()
            cur_limb.rotation = lerp_vec3(cur_limb.rotation, tgt_limb.rotation, alpha)
            cur_limb.finger_curls = [
                lerp(c, t, alpha) for c, t in zip(cur_limb.finger_curls, tgt_limb.finger_curls)
            ]
            cur_limb.thumb_curl = lerp(cur_limb.thumb_curl, tgt_limb.thumb_curl, alpha)

        expr, tgt_expr = current.expression, target.expression
        expr.eyebrows = lerp(expr.eyebrows, tgt_expr.eyebrows, alpha)
        expr.eye_openness = lerp(expr.eye_openness, tgt_expr.eye_openness, alpha)
        expr.head_tilt = lerp_vec3(expr.head_tilt, tgt_expr.head_tilt, alpha)
        expr.mouth_shape = tgt_expr.mouth_shape

        # Bones the target no longer mentions hold their last rotation
        for name, rot in target.bone_rotations.items():
            start = current.bone_rotations.get(name)
            current.bone_rotations[name] = lerp_vec3(start if start is not None else vec3(), rot, alpha)

        return self.current_pose()

    def current_pose(self) -> Pose:
        return self._current.copy()

    def target_pose(self) -> Pose:
        return self._target.copy()
