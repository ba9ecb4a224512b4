"""Captured 3D joint positions into a Pose, via two-bone IK.

Captured positions are pelvis-relative in the source convention (Y down,
Z negative toward the viewer); the avatar space is Y up, Z toward the
viewer, so both axes flip. Arm lengths come from the avatar's own rest
skeleton, not from the capture, so a subject with longer arms than the
avatar still produces a pose the avatar can reach.
"""

from __future__ import annotations

import logging

from signpose.body.fingers import estimate_hand_curls
from signpose.body.ik import solve_two_bone_ik
from signpose.body.skeleton import RestSkeleton
from signpose.core.frames import JointPositionFrame
from signpose.core.math_utils import Vec3, vec3
from signpose.core.pose import FINGER_NAMES, Pose, t_pose

logger = logging.getLogger(__name__)

THUMB_JOINTS = ("cmc", "mcp", "ip", "tip")
FINGER_JOINTS = ("mcp", "pip", "dip", "tip")
HEAD_TILT_SCALE = 0.5


def to_avatar_space(p: Vec3) -> Vec3:
    return vec3(p[0], -p[1], -p[2])


def _side(is_right: bool) -> str:
    return "right" if is_right else "left"


def _digit_sites(frame: JointPositionFrame, is_right: bool) -> dict[str, list[Vec3]]:
    """Joint sites per digit, skipping digits with any site missing."""
    side = _side(is_right)
    digits = {}
    for digit in (*FINGER_NAMES, "thumb"):
        names = THUMB_JOINTS if digit == "thumb" else FINGER_JOINTS
        sites = [frame.get(f"{side}_{digit}_{joint}") for joint in names]
        if any(site is None for site in sites):
            continue
        digits[digit] = [to_avatar_space(site) for site in sites]
    return digits


class JointPositionRetargeter:
    """Retargets joint-position frames onto one avatar.

    Limb lengths are read from *skeleton* once, at construction. Build one
    retargeter per avatar and reuse it every frame.
    """

    def __init__(self, skeleton: RestSkeleton | None = None):
        self.skeleton = skeleton if skeleton is not None else RestSkeleton.load_default()
        self._lengths = {
            is_right: self.skeleton.limb_lengths(is_right) for is_right in (True, False)
        }
        self._shoulders = {
            is_right: self.skeleton.shoulder_position(is_right) for is_right in (True, False)
        }

    def retarget(self, frame: JointPositionFrame) -> Pose:
        pose = t_pose()
        bones: dict[str, Vec3] = {}

        for is_right in (True, False):
            side = _side(is_right)
            limb = pose.limb(is_right)
            wrist = frame.get(f"{side}_wrist")
            if wrist is not None:
                target = to_avatar_space(wrist)
                limb.position = target
                self._solve_arm(target, is_right, bones)

            digits = _digit_sites(frame, is_right)
            if digits:
                base = to_avatar_space(wrist) if wrist is not None else None
                fingers, thumb = estimate_hand_curls(digits, base)
                limb.finger_curls = fingers
                limb.thumb_curl = thumb

        head = frame.get("head")
        if head is not None:
            # Raw capture offset from the pelvis, used as a nod/turn hint
            tilt = vec3(-head[2] * HEAD_TILT_SCALE, head[0] * HEAD_TILT_SCALE, 0.0)
            pose.expression.head_tilt = tilt
            bones["Head"] = tilt.copy()

        pose.bone_rotations = bones
        return pose

    def solve_arms(self, pose: Pose) -> Pose:
        """Copy of *pose* with arm bones solved from its hand positions.

        Sign-driven poses only know where the hands are; this fills in the
        upper-arm and forearm rotations. An arm with no solution has both of
        its bones removed, so the renderer holds its previous rotation.
        """
        solved = pose.copy()
        for is_right in (True, False):
            prefix = "Right" if is_right else "Left"
            for bone in (f"{prefix}Arm", f"{prefix}ForeArm"):
                solved.bone_rotations.pop(bone, None)
            self._solve_arm(solved.limb(is_right).position, is_right, solved.bone_rotations)
        return solved

    def _solve_arm(self, target: Vec3, is_right: bool, bones: dict[str, Vec3]) -> None:
        upper, lower = self._lengths[is_right]
        solution = solve_two_bone_ik(self._shoulders[is_right], target, upper, lower, is_right)
        if solution is None:
            # Renderer keeps the arm's previous rotation
            logger.debug("No IK solution for %s arm, holding previous pose", _side(is_right))
            return
        prefix = "Right" if is_right else "Left"
        bones[f"{prefix}Arm"] = solution.root_euler()
        bones[f"{prefix}ForeArm"] = solution.bend_euler()


# Retargeter for the stock avatar, built on first use
_DEFAULT_RETARGETER: JointPositionRetargeter | None = None


def default_retargeter() -> JointPositionRetargeter:
    """Shared retargeter over the default rest skeleton, loaded once."""
    global _DEFAULT_RETARGETER
    if _DEFAULT_RETARGETER is None:
        _DEFAULT_RETARGETER = JointPositionRetargeter(RestSkeleton.load_default())
    return _DEFAULT_RETARGETER


def retarget_joint_positions(frame: JointPositionFrame, skeleton: RestSkeleton | None = None) -> Pose:
    """Convert one frame.

    Without *skeleton* the shared default retargeter is used. Passing a
    skeleton measures it on every call; hold a JointPositionRetargeter
    instead when converting a stream.
    """
    retargeter = default_retargeter() if skeleton is None else JointPositionRetargeter(skeleton)
    return retargeter.retarget(frame)


def solve_arm_bones(pose: Pose, retargeter: JointPositionRetargeter | None = None) -> Pose:
    """Derive arm bone rotations for a pose that only carries hand positions."""
    return (retargeter or default_retargeter()).solve_arms(pose)
