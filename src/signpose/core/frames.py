"""Skeleton frame variants produced by capture and import.

Each variant is converted to a Pose by its own adapter in signpose.retarget.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

import numpy as np
from numpy.typing import NDArray

from signpose.constants import SMPLX_PARAM_COUNT
from signpose.core.math_utils import Vec3, as_vec3


@dataclass(frozen=True)
class NamedBoneFrame:
    """Bone name -> local Euler rotation (XYZ, radians)."""
    rotations: Mapping[str, Vec3] = field(default_factory=dict)

    def __post_init__(self):
        frozen = {name: as_vec3(rot) for name, rot in self.rotations.items()}
        object.__setattr__(self, "rotations", MappingProxyType(frozen))


@dataclass(frozen=True)
class SMPLXFrame:
    """Flat SMPL-X parameter vector.

    Length is not checked here; the SMPL-X adapter rejects malformed
    vectors at its boundary.
    """
    params: NDArray[np.float64]

    def __post_init__(self):
        arr = np.array(self.params, dtype=np.float64).reshape(-1)
        arr.setflags(write=False)
        object.__setattr__(self, "params", arr)

    @classmethod
    def zeros(cls) -> "SMPLXFrame":
        return cls(np.zeros(SMPLX_PARAM_COUNT, dtype=np.float64))


@dataclass(frozen=True)
class JointPositionFrame:
    """Joint name -> absolute captured position (source convention, Y down).

    Arm joints: ``{side}_shoulder``, ``{side}_elbow``, ``{side}_wrist``.
    Finger joints: ``{side}_{finger}_{mcp|pip|dip|tip}``; the thumb uses
    ``cmc, mcp, ip, tip``. Also ``head`` and ``neck``.
    """
    joints: Mapping[str, Vec3] = field(default_factory=dict)

    def __post_init__(self):
        frozen = {name: as_vec3(p) for name, p in self.joints.items()}
        object.__setattr__(self, "joints", MappingProxyType(frozen))

    def get(self, name: str) -> Vec3 | None:
        return self.joints.get(name)
