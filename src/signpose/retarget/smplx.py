"""SMPL-X parameter vectors into a Pose.

The flat vector holds per-joint axis-angle rotations at fixed offsets (see
constants). The body block starts at the left hip; the pelvis lives in the
separate root block, which is never applied: captures encode the root
flipped by pi, so the avatar's Hips stay at identity.

Right-side arm bones come out of the source rig mirrored relative to the
avatar and get their Euler Y and Z negated. The left side passes through.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType

import numpy as np

from signpose.constants import (
    AXIS_ANGLE_EPSILON,
    SMPLX_BODY,
    SMPLX_JAW,
    SMPLX_LEFT_HAND,
    SMPLX_PARAM_COUNT,
    SMPLX_RIGHT_HAND,
)
from signpose.core.frames import SMPLXFrame
from signpose.core.math_utils import (
    Quat,
    Vec3,
    clamp,
    euler_from_quat,
    quat_angle,
    quat_from_rotation_vector,
    vec3,
)
from signpose.core.pose import FINGER_NAMES, MouthShape, Pose, t_pose
from signpose.retarget.named_bone import finger_bone_name

# body_pose order (21 joints, pelvis excluded)
SMPLX_BODY_JOINTS = (
    "left_hip", "right_hip", "spine1",
    "left_knee", "right_knee", "spine2",
    "left_ankle", "right_ankle", "spine3",
    "left_foot", "right_foot", "neck",
    "left_collar", "right_collar", "head",
    "left_shoulder", "right_shoulder",
    "left_elbow", "right_elbow",
    "left_wrist", "right_wrist",
)

SMPLX_TO_BONE = MappingProxyType({
    "spine1": "Spine",
    "spine2": "Spine1",
    "spine3": "Spine2",
    "neck": "Neck",
    "head": "Head",
    "left_collar": "LeftShoulder",
    "right_collar": "RightShoulder",
    "left_shoulder": "LeftArm",
    "right_shoulder": "RightArm",
    "left_elbow": "LeftForeArm",
    "right_elbow": "RightForeArm",
    "left_wrist": "LeftHand",
    "right_wrist": "RightHand",
    "left_hip": "LeftUpLeg",
    "right_hip": "RightUpLeg",
    "left_knee": "LeftLeg",
    "right_knee": "RightLeg",
    "left_ankle": "LeftFoot",
    "right_ankle": "RightFoot",
    # Toe bones are not rigged on the avatar
})

ARM_BONES = frozenset({
    "LeftShoulder", "RightShoulder",
    "LeftArm", "RightArm",
    "LeftForeArm", "RightForeArm",
    "LeftHand", "RightHand",
})

LEG_BONES = frozenset({
    "LeftUpLeg", "RightUpLeg",
    "LeftLeg", "RightLeg",
    "LeftFoot", "RightFoot",
})

SPINE_BONES = frozenset({"Spine", "Spine1", "Spine2", "Neck", "Head"})

# hand_pose order (15 joints per hand); note pinky before ring
SMPLX_HAND_DIGITS = ("index", "middle", "pinky", "ring", "thumb")

ROOT_BONE = "Hips"
JAW_OPEN_THRESHOLD = 0.1  # radians


@dataclass(frozen=True)
class SMPLXRegions:
    """Which bone groups an SMPL-X frame drives.

    Legs are off by default; hosts that trust their leg capture enable them.
    A disabled region contributes no bone rotations and leaves the matching
    Pose fields at their T-pose values.
    """

    root: bool = True
    spine: bool = True
    arms: bool = True
    legs: bool = False
    hands: bool = True

    @classmethod
    def everything(cls) -> "SMPLXRegions":
        return cls(legs=True)

    def allows(self, bone: str) -> bool:
        if bone in LEG_BONES:
            return self.legs
        if bone in ARM_BONES:
            return self.arms
        if bone in SPINE_BONES:
            return self.spine
        if bone == ROOT_BONE:
            return self.root
        return self.hands


DEFAULT_REGIONS = SMPLXRegions()


def decode_axis_angle(aa) -> Quat:
    return quat_from_rotation_vector(aa, epsilon=AXIS_ANGLE_EPSILON)


def mirror_arm_euler(bone: str, euler: Vec3) -> Vec3:
    """Mirror-correct a decoded arm rotation. Only right-side bones change."""
    if bone in ARM_BONES and bone.startswith("Right"):
        return vec3(euler[0], -euler[1], -euler[2])
    return euler


def joint_curl(q: Quat) -> float:
    """Flexion of one finger joint: a right angle counts as fully curled."""
    return clamp(quat_angle(q) / (math.pi / 2), 0.0, 1.0)


def _hand_rotations(block: np.ndarray, is_right: bool) -> tuple[dict[str, Vec3], dict[str, float]]:
    """Decode one hand block into bone rotations and per-digit mean curls."""
    rotations: dict[str, Vec3] = {}
    curls: dict[str, float] = {}
    joints = block.reshape(len(SMPLX_HAND_DIGITS), 3, 3)
    for digit, digit_joints in zip(SMPLX_HAND_DIGITS, joints):
        joint_curls = []
        for n, aa in enumerate(digit_joints, start=1):
            q = decode_axis_angle(aa)
            rotations[finger_bone_name(is_right, digit, n)] = euler_from_quat(q)
            joint_curls.append(joint_curl(q))
        curls[digit] = sum(joint_curls) / len(joint_curls)
    return rotations, curls


def retarget_smplx(frame: SMPLXFrame, regions: SMPLXRegions = DEFAULT_REGIONS) -> Pose:
    """Convert a 182-float SMPL-X frame.

    Raises ValueError for any other length. Betas, expression coefficients
    and camera translation are ignored. Hand positions stay at rest. Only
    bones in enabled *regions* are written; legs are skipped by default.
    """
    params = frame.params
    if params.shape != (SMPLX_PARAM_COUNT,):
        raise ValueError(
            f"SMPL-X frame must have {SMPLX_PARAM_COUNT} parameters, got {params.size}"
        )
    if not np.all(np.isfinite(params)):
        raise ValueError("SMPL-X frame contains non-finite parameters")

    pose = t_pose()
    bones: dict[str, Vec3] = {}
    if regions.root:
        bones[ROOT_BONE] = vec3()

    body = params[SMPLX_BODY].reshape(len(SMPLX_BODY_JOINTS), 3)
    for joint, aa in zip(SMPLX_BODY_JOINTS, body):
        bone = SMPLX_TO_BONE.get(joint)
        if bone is None or not regions.allows(bone):
            continue
        bones[bone] = mirror_arm_euler(bone, euler_from_quat(decode_axis_angle(aa)))

    for is_right, block in ((False, params[SMPLX_LEFT_HAND]), (True, params[SMPLX_RIGHT_HAND])):
        limb = pose.limb(is_right)
        wrist = bones.get("RightHand" if is_right else "LeftHand")
        if wrist is not None:
            limb.rotation = wrist.copy()
        if regions.hands:
            rotations, curls = _hand_rotations(block, is_right)
            bones.update(rotations)
            limb.finger_curls = [curls[name] for name in FINGER_NAMES]
            limb.thumb_curl = curls["thumb"]

    head = bones.get("Head")
    if head is not None:
        pose.expression.head_tilt = head.copy()
    jaw_angle = quat_angle(decode_axis_angle(params[SMPLX_JAW]))
    if jaw_angle > JAW_OPEN_THRESHOLD:
        pose.expression.mouth_shape = MouthShape.OPEN

    pose.bone_rotations = bones
    return pose
