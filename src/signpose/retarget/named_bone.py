"""Named-bone frames (bone name -> local Euler) into a Pose."""

from signpose.body.fingers import FINGER_JOINT_SCALES, THUMB_JOINT_SCALE
from signpose.core.frames import NamedBoneFrame
from signpose.core.math_utils import clamp
from signpose.core.pose import FINGER_NAMES, Pose, t_pose

HAND_BONES = {True: "RightHand", False: "LeftHand"}
HEAD_BONE = "Head"


def finger_bone_name(is_right: bool, finger: str, joint: int) -> str:
    """``RightHandIndex1`` style name; *joint* is 1 (proximal) to 3."""
    return f"{HAND_BONES[is_right]}{finger.capitalize()}{joint}"


def _digit_curl(frame: NamedBoneFrame, is_right: bool, finger: str) -> float:
    curls = []
    for joint in (1, 2, 3):
        rot = frame.rotations.get(finger_bone_name(is_right, finger, joint))
        if rot is None:
            continue
        scale = THUMB_JOINT_SCALE if finger == "thumb" else FINGER_JOINT_SCALES[joint - 1]
        curls.append(clamp(float(rot[0]) / scale, 0.0, 1.0))
    if not curls:
        return 0.0
    return sum(curls) / len(curls)


def retarget_named_bones(frame: NamedBoneFrame) -> Pose:
    """Convert a named-bone frame.

    Hand bones drive the limb rotations, the head bone drives head tilt, and
    finger bones are turned back into curls. Every bone in the frame is also
    passed through untouched in ``bone_rotations``. Hand positions stay at
    rest; this frame type carries no positions.
    """
    pose = t_pose()
    for is_right in (True, False):
        limb = pose.limb(is_right)
        hand_rot = frame.rotations.get(HAND_BONES[is_right])
        if hand_rot is not None:
            limb.rotation = hand_rot.copy()
        limb.finger_curls = [_digit_curl(frame, is_right, f) for f in FINGER_NAMES]
        limb.thumb_curl = _digit_curl(frame, is_right, "thumb")

    head = frame.rotations.get(HEAD_BONE)
    if head is not None:
        pose.expression.head_tilt = head.copy()

    pose.bone_rotations = {name: rot.copy() for name, rot in frame.rotations.items()}
    return pose
