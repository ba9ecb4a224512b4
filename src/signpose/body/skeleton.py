"""Target skeleton rest pose and the bone lengths measured from it."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Optional

import numpy as np

from signpose.constants import DEFAULT_BONE_LENGTH
from signpose.core.config_loader import load_skeleton_config
from signpose.core.math_utils import Vec3, as_vec3

logger = logging.getLogger(__name__)

# Bind pose of the stock avatar, pelvis at the origin, Y up, arms along X.
_BUILTIN_REST_JOINTS: dict[str, tuple[tuple[float, float, float], Optional[str]]] = {
    "Hips": ((0.0, 0.0, 0.0), None),
    "Spine": ((0.0, 0.10, 0.0), "Hips"),
    "Spine1": ((0.0, 0.22, 0.0), "Spine"),
    "Spine2": ((0.0, 0.35, 0.0), "Spine1"),
    "Neck": ((0.0, 0.50, 0.0), "Spine2"),
    "Head": ((0.0, 0.60, 0.0), "Neck"),
    "RightShoulder": ((0.06, 0.45, 0.0), "Spine2"),
    "RightArm": ((0.18, 0.45, 0.0), "RightShoulder"),
    "RightForeArm": ((0.46, 0.45, 0.0), "RightArm"),
    "RightHand": ((0.71, 0.45, 0.0), "RightForeArm"),
    "LeftShoulder": ((-0.06, 0.45, 0.0), "Spine2"),
    "LeftArm": ((-0.18, 0.45, 0.0), "LeftShoulder"),
    "LeftForeArm": ((-0.46, 0.45, 0.0), "LeftArm"),
    "LeftHand": ((-0.71, 0.45, 0.0), "LeftForeArm"),
}


def _side(is_right: bool) -> str:
    return "Right" if is_right else "Left"


class RestSkeleton:
    """Joint rest positions of the target avatar.

    Bone lengths are measured once, here, from the avatar's own bind pose so
    retargeting calibrates itself to whatever rig is loaded.
    """

    def __init__(self, joints: Mapping[str, Vec3], parents: Mapping[str, Optional[str]] | None = None):
        self.joints: Mapping[str, Vec3] = MappingProxyType({k: as_vec3(v) for k, v in joints.items()})
        self.parents: Mapping[str, Optional[str]] = MappingProxyType(dict(parents or {}))
        self._limb_lengths = {
            True: self._measure_limb(True),
            False: self._measure_limb(False),
        }

    @classmethod
    def from_config(cls, data: dict) -> "RestSkeleton":
        """Build from ``{"joints": {name: {"position": [x, y, z], "parent": str|null}}}``."""
        raw = data["joints"]
        joints = {name: entry["position"] for name, entry in raw.items()}
        parents = {name: entry.get("parent") for name, entry in raw.items()}
        return cls(joints, parents)

    @classmethod
    def builtin(cls) -> "RestSkeleton":
        return cls(
            {name: pos for name, (pos, _) in _BUILTIN_REST_JOINTS.items()},
            {name: parent for name, (_, parent) in _BUILTIN_REST_JOINTS.items()},
        )

    @classmethod
    def load_default(cls) -> "RestSkeleton":
        """Load the stock rest pose from config; built-in bind pose on failure."""
        try:
            skeleton = cls.from_config(load_skeleton_config("rest_pose.json"))
        except (FileNotFoundError, ValueError, KeyError, TypeError) as e:
            logger.warning("Rest pose config unavailable, using built-in skeleton: %s", e)
            return cls.builtin()
        logger.info("Loaded rest skeleton: %d joints", len(skeleton.joints))
        return skeleton

    # ── Measurement ───────────────────────────────────────────────

    def joint_distance(self, start: str, end: str) -> float:
        """Rest distance between two joints, or the default bone length if either is missing."""
        a = self.joints.get(start)
        b = self.joints.get(end)
        if a is None or b is None:
            logger.warning(
                "Rest joint missing (%s -> %s), using default length %.2f",
                start, end, DEFAULT_BONE_LENGTH,
            )
            return DEFAULT_BONE_LENGTH
        return float(np.linalg.norm(b - a))

    def bone_length(self, joint: str) -> float:
        """Length of the bone ending at *joint* (distance to its parent)."""
        parent = self.parents.get(joint)
        if parent is None:
            return 0.0
        return self.joint_distance(parent, joint)

    def _measure_limb(self, is_right: bool) -> tuple[float, float]:
        side = _side(is_right)
        return (
            self.joint_distance(f"{side}Arm", f"{side}ForeArm"),
            self.joint_distance(f"{side}ForeArm", f"{side}Hand"),
        )

    def limb_lengths(self, is_right: bool) -> tuple[float, float]:
        """(upper arm, forearm) lengths measured at load time."""
        return self._limb_lengths[is_right]

    def shoulder_position(self, is_right: bool) -> Vec3:
        """Root of the arm chain (the upper-arm joint)."""
        pos = self.joints.get(f"{_side(is_right)}Arm")
        if pos is None:
            return np.zeros(3, dtype=np.float64)
        return pos.copy()
