"""Sign descriptor -> target pose synthesis."""

import math

from signpose.body.fingers import (
    DEFAULT_NON_DOMINANT_HANDSHAPE,
    curls_for_handshape,
)
from signpose.constants import (
    BOUNCE_AMPLITUDE,
    HEAD_OSCILLATION_SCALE,
    HEAD_TILT_SCALE,
    LOCATION_OFFSET,
    LOCATION_SCALE,
    MOVEMENT_SCALE,
    SQUINT_SCALE,
    WIDE_EYES_SCALE,
    WRIST_ROLL_SCALE,
)
from signpose.core.math_utils import clamp, vec3
from signpose.core.pose import (
    REST_LEFT_POSITION,
    ExpressionState,
    LimbPose,
    Pose,
)
from signpose.core.sign import MarkerType, Sign


def _apply_facial_marker(expr: dict, expression: str, intensity: float) -> None:
    if expression == "raised-eyebrows":
        expr["eyebrows"] = intensity
    elif expression == "furrowed-brows":
        expr["eyebrows"] = -intensity
    elif expression == "wide-eyes":
        expr["eye_openness"] = 1.0 + intensity * WIDE_EYES_SCALE
    elif expression == "squint":
        expr["eye_openness"] = 1.0 - intensity * SQUINT_SCALE


def _apply_head_marker(tilt: list[float], expression: str, intensity: float, progress: float) -> None:
    swing = math.sin(progress * math.pi * 2) * intensity * HEAD_OSCILLATION_SCALE
    if expression == "nod":
        tilt[0] = swing
    elif expression == "shake":
        tilt[1] = swing
    elif expression == "tilt":
        tilt[2] = intensity * HEAD_TILT_SCALE


def sign_to_pose(sign: Sign, progress: float = 0.0) -> Pose:
    """Target pose for *sign* at normalized *progress* (0-1).

    Pure: the same sign and progress always give the same pose. Unknown
    handshapes fall back to a flat hand and unknown non-manual markers are
    ignored.
    """
    progress = clamp(progress, 0.0, 1.0)
    loc = sign.location
    mov = sign.movement
    two_handed = sign.handshape.two_handed

    right_fingers, right_thumb = curls_for_handshape(sign.handshape.dominant)
    if two_handed:
        left_fingers, left_thumb = curls_for_handshape(sign.handshape.non_dominant)
    else:
        left_fingers, left_thumb = curls_for_handshape(DEFAULT_NON_DOMINANT_HANDSHAPE)

    # Base position from sign location
    sx, sy, sz = LOCATION_SCALE
    ox, oy, oz = LOCATION_OFFSET
    right_x = loc.x * sx + ox
    right_y = loc.y * sy + oy
    right_z = loc.z * sz + oz

    if mov.direction is not None:
        dx, dy, dz = mov.direction
        right_x += dx * progress * MOVEMENT_SCALE
        right_y += dy * progress * MOVEMENT_SCALE
        right_z += dz * progress * MOVEMENT_SCALE

    if mov.repetitions and mov.repetitions > 1:
        cycle = (progress * mov.repetitions) % 1.0
        right_y += math.sin(cycle * math.pi * 2) * BOUNCE_AMPLITUDE

    # Non-manual markers
    expr = {"eyebrows": 0.0, "eye_openness": 1.0}
    tilt = [0.0, 0.0, 0.0]
    for marker in sign.non_manual_markers:
        if marker.type is MarkerType.FACIAL:
            _apply_facial_marker(expr, marker.expression, marker.intensity)
        elif marker.type is MarkerType.HEAD:
            _apply_head_marker(tilt, marker.expression, marker.intensity, progress)

    if two_handed:
        left_position = vec3(-right_x, right_y, right_z)
        left_roll = -progress * WRIST_ROLL_SCALE
    else:
        left_position = vec3(*REST_LEFT_POSITION)
        left_roll = 0.0

    return Pose(
        right_hand=LimbPose(
            position=vec3(right_x, right_y, right_z),
            rotation=vec3(progress * WRIST_ROLL_SCALE, 0.0, 0.0),
            finger_curls=right_fingers,
            thumb_curl=right_thumb,
        ),
        left_hand=LimbPose(
            position=left_position,
            rotation=vec3(left_roll, 0.0, 0.0),
            finger_curls=left_fingers,
            thumb_curl=left_thumb,
        ),
        # ExpressionState clamps eyebrows/openness into range
        expression=ExpressionState(
            eyebrows=expr["eyebrows"],
            eye_openness=expr["eye_openness"],
            head_tilt=vec3(*tilt),
        ),
    )
