"""Skeleton retargeting: every capture/import frame variant into a Pose."""

from signpose.core.frames import JointPositionFrame, NamedBoneFrame, SMPLXFrame
from signpose.core.pose import Pose
from signpose.retarget.joint_positions import (
    JointPositionRetargeter,
    default_retargeter,
    retarget_joint_positions,
    solve_arm_bones,
)
from signpose.retarget.named_bone import retarget_named_bones
from signpose.retarget.smplx import DEFAULT_REGIONS, SMPLXRegions, retarget_smplx


def retarget_frame(
    frame,
    retargeter: JointPositionRetargeter | None = None,
    regions: SMPLXRegions = DEFAULT_REGIONS,
) -> Pose:
    """Convert any supported skeleton frame into a Pose.

    *retargeter* is only consulted for joint-position frames and defaults to
    the shared one over the stock rest skeleton. *regions* only applies to
    SMPL-X frames.
    """
    if isinstance(frame, JointPositionFrame):
        return (retargeter or default_retargeter()).retarget(frame)
    if isinstance(frame, SMPLXFrame):
        return retarget_smplx(frame, regions)
    if isinstance(frame, NamedBoneFrame):
        return retarget_named_bones(frame)
    raise TypeError(f"Unsupported skeleton frame type: {type(frame).__name__}")


__all__ = [
    "JointPositionRetargeter",
    "SMPLXRegions",
    "default_retargeter",
    "retarget_frame",
    "retarget_joint_positions",
    "retarget_named_bones",
    "retarget_smplx",
    "solve_arm_bones",
]
