"""Analytic two-bone IK (shoulder -> elbow -> wrist) via the law of cosines."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from signpose.constants import IK_MAX_REACH_FACTOR, IK_MIN_REACH_FACTOR
from signpose.core.math_utils import (
    Quat,
    Vec3,
    clamp,
    euler_from_quat,
    normalize,
    quat_from_axis_angle,
    quat_from_unit_vectors,
    quat_multiply,
    vec3,
)

logger = logging.getLogger(__name__)

# Arms in the bind pose point outward along X
RIGHT_REST_DIRECTION = (1.0, 0.0, 0.0)
LEFT_REST_DIRECTION = (-1.0, 0.0, 0.0)


@dataclass(frozen=True)
class IKSolution:
    """Result of a successful solve.

    root_rotation: world-space rotation of the upper bone (quaternion).
    root_angle:    angle between the upper bone and the root->target line.
    bend_angle:    elbow flexion, 0 = straight, pi = folded back on itself.
    reach:         clamped root->target distance actually solved for.
    """
    root_rotation: Quat
    root_angle: float
    bend_angle: float
    reach: float
    is_right: bool

    def root_euler(self) -> Vec3:
        return euler_from_quat(self.root_rotation)

    def bend_euler(self) -> Vec3:
        """Forearm local rotation; the hinge turns about Y, mirrored per side."""
        return vec3(0.0, self.bend_angle if self.is_right else -self.bend_angle, 0.0)


def _law_of_cosines(adjacent_a: float, adjacent_b: float, opposite: float) -> float:
    cos_angle = (adjacent_a * adjacent_a + adjacent_b * adjacent_b - opposite * opposite) / (
        2.0 * adjacent_a * adjacent_b
    )
    return math.acos(clamp(cos_angle, -1.0, 1.0))


def bend_angle_for_reach(upper_length: float, lower_length: float, reach: float) -> float:
    """Elbow flexion needed for the chain to span *reach* (no reach clamping).

    0 at full extension (reach = L1 + L2), pi at full compression
    (reach = |L1 - L2|).
    """
    return math.pi - _law_of_cosines(upper_length, lower_length, reach)


def solve_two_bone_ik(
    root: Vec3,
    target: Vec3,
    upper_length: float,
    lower_length: float,
    is_right: bool = True,
) -> IKSolution | None:
    """Solve a two-bone chain rooted at *root* reaching toward *target*.

    Targets beyond reach are pulled in to just under full extension. Returns
    None when the target is too close to the root for the chain to fold
    onto; callers keep the limb's previous pose in that case.
    """
    if upper_length <= 0.0 or lower_length <= 0.0:
        raise ValueError(
            f"Limb lengths must be positive, got {upper_length}, {lower_length}"
        )

    to_target = np.asarray(target, dtype=np.float64) - np.asarray(root, dtype=np.float64)
    distance = float(np.linalg.norm(to_target))
    reach = min(distance, (upper_length + lower_length) * IK_MAX_REACH_FACTOR)

    if reach < abs(upper_length - lower_length) * IK_MIN_REACH_FACTOR or reach <= 0.0:
        logger.debug("Two-bone IK: target unreachable (reach=%.4f)", reach)
        return None

    root_angle = _law_of_cosines(upper_length, reach, lower_length)

    rest_dir = vec3(*(RIGHT_REST_DIRECTION if is_right else LEFT_REST_DIRECTION))
    direction = to_target / distance
    rotation = quat_from_unit_vectors(rest_dir, direction)

    # Swing the upper bone off the root->target line so the elbow can bend
    axis = np.cross(rest_dir, direction)
    if np.linalg.norm(axis) > 1e-3:
        adjust = quat_from_axis_angle(normalize(axis), -root_angle)
        rotation = quat_multiply(adjust, rotation)

    return IKSolution(
        root_rotation=rotation,
        root_angle=root_angle,
        bend_angle=bend_angle_for_reach(upper_length, lower_length, reach),
        reach=reach,
        is_right=is_right,
    )
