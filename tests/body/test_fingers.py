"""Tests for handshape lookup and finger curl estimation."""

import math

import numpy as np
import pytest

from signpose.body.fingers import (
    HANDSHAPE_CURLS,
    angle_to_curl, curls_for_handshape, curls_to_joint_rotations,
    estimate_digit_curl, estimate_hand_curls, estimate_joint_curls,
    joint_angle, joint_rotations_to_curls,
)
from signpose.core.math_utils import vec3


def straight_digit(n=4):
    return [vec3(0, 0.02 * i, 0) for i in range(n)]


def right_angle_digit():
    # MCP -> PIP up the Y axis, then each further segment turns another 90 degrees
    return [vec3(0, 0, 0), vec3(0, 0.03, 0), vec3(0, 0.03, 0.02), vec3(0, 0.01, 0.02)]


def test_table_lookup():
    fingers, thumb = curls_for_handshape("point")
    assert fingers == [0.0, 1.0, 1.0, 1.0]
    assert thumb == 0.5


def test_unknown_handshape_falls_back():
    assert curls_for_handshape("no-such-shape") == ([0.0, 0.0, 0.0, 0.0], 0.0)
    assert curls_for_handshape(None, default="fist") == ([1.0, 1.0, 1.0, 1.0], 0.8)


def test_table_values_in_range():
    for fingers, thumb in HANDSHAPE_CURLS.values():
        assert len(fingers) == 4
        assert all(0.0 <= c <= 1.0 for c in fingers)
        assert 0.0 <= thumb <= 1.0


def test_table_is_read_only():
    with pytest.raises(TypeError):
        HANDSHAPE_CURLS["new"] = ((0, 0, 0, 0), 0)


def test_lookup_returns_fresh_list():
    fingers, _ = curls_for_handshape("fist")
    fingers[0] = 0.0
    assert curls_for_handshape("fist")[0][0] == 1.0


def test_joint_angle_straight():
    assert joint_angle(vec3(0, 0, 0), vec3(1, 0, 0), vec3(2, 0, 0)) == pytest.approx(math.pi)


def test_joint_angle_right():
    assert joint_angle(vec3(1, 0, 0), vec3(0, 0, 0), vec3(0, 1, 0)) == pytest.approx(math.pi / 2)


def test_joint_angle_degenerate():
    assert joint_angle(vec3(1, 1, 1), vec3(1, 1, 1), vec3(2, 0, 0)) == math.pi
    assert joint_angle(vec3(0, 0, 0), vec3(1, 0, 0), vec3(1, 0, 0)) == math.pi


@pytest.mark.parametrize("angle, curl", [
    (math.pi, 0.0),
    (3 * math.pi / 4, 0.5),
    (math.pi / 2, 1.0),
    (0.1, 1.0),
])
def test_angle_to_curl(angle, curl):
    assert angle_to_curl(angle) == pytest.approx(curl)


def test_straight_digit_zero_curl():
    assert estimate_joint_curls(straight_digit()) == pytest.approx([0.0, 0.0], abs=1e-6)
    assert estimate_digit_curl(straight_digit()) == pytest.approx(0.0, abs=1e-6)


def test_right_angle_digit_full_curl():
    assert estimate_joint_curls(right_angle_digit()) == pytest.approx([1.0, 1.0])


def test_base_adds_mcp_joint():
    wrist = vec3(0, -0.08, 0)
    curls = estimate_joint_curls(right_angle_digit(), base=wrist)
    assert len(curls) == 3
    assert curls[0] == pytest.approx(0.0, abs=1e-6)


def test_three_points():
    assert len(estimate_joint_curls(straight_digit(3))) == 1


@pytest.mark.parametrize("n", [2, 5])
def test_wrong_point_count_raises(n):
    with pytest.raises(ValueError):
        estimate_joint_curls(straight_digit(n))


def test_degenerate_digit_never_nan():
    points = [vec3(0, 0, 0)] * 4
    curls = estimate_joint_curls(points)
    assert curls == [0.0, 0.0]


def test_estimate_hand_curls_missing_digits():
    fingers, thumb = estimate_hand_curls({"index": right_angle_digit(), "ring": straight_digit()})
    assert fingers == pytest.approx([1.0, 0.0, 0.0, 0.0], abs=1e-6)
    assert thumb == 0.0


def test_estimate_hand_curls_thumb():
    _, thumb = estimate_hand_curls({"thumb": right_angle_digit()})
    assert thumb == pytest.approx(1.0)


def test_curls_to_rotations_finger():
    rots = curls_to_joint_rotations([1.0, 1.0, 1.0])
    np.testing.assert_array_almost_equal([r[0] for r in rots], [0.6, 0.8, 0.9])
    assert all(r[1] == 0.0 and r[2] == 0.0 for r in rots)


def test_curls_to_rotations_thumb_abduction_mirrors():
    right = curls_to_joint_rotations([0.5, 0.5, 0.5], thumb=True, is_right=True)
    left = curls_to_joint_rotations([0.5, 0.5, 0.5], thumb=True, is_right=False)
    assert right[0][0] == pytest.approx(0.3)
    assert right[0][2] == pytest.approx(0.2)
    assert left[0][2] == pytest.approx(-0.2)
    assert right[1][2] == 0.0


def test_rotations_to_curls_inverts():
    curls = [0.2, 0.5, 0.9]
    assert joint_rotations_to_curls(curls_to_joint_rotations(curls)) == pytest.approx(curls)
    thumb = joint_rotations_to_curls(curls_to_joint_rotations(curls, thumb=True), thumb=True)
    assert thumb == pytest.approx(curls)


def test_rotations_to_curls_clamps():
    assert joint_rotations_to_curls([vec3(-1, 0, 0), vec3(5, 0, 0)]) == [0.0, 1.0]


@pytest.mark.parametrize("name, fingers, thumb", [
    ("v-hand", [0.0, 0.0, 1.0, 1.0], 0.5),
    ("w-hand", [0.0, 0.0, 0.0, 1.0], 0.5),
    ("r-hand", [0.0, 0.0, 1.0, 1.0], 0.5),
    ("k-hand", [0.0, 0.0, 1.0, 1.0], 0.3),
    ("d-hand", [0.0, 1.0, 1.0, 1.0], 0.8),
    ("g-hand", [0.0, 1.0, 1.0, 1.0], 0.0),
    ("letter-j", [1.0, 1.0, 1.0, 0.0], 0.8),
    ("letter-p", [0.0, 0.0, 1.0, 1.0], 0.3),
    ("letter-q", [0.0, 1.0, 1.0, 1.0], 0.0),
    ("letter-x", [0.3, 1.0, 1.0, 1.0], 0.5),
    ("letter-z", [0.0, 1.0, 1.0, 1.0], 0.5),
])
def test_letter_and_finger_spread_shapes(name, fingers, thumb):
    assert name in HANDSHAPE_CURLS
    assert curls_for_handshape(name) == (fingers, thumb)


def test_full_alphabet_present():
    for letter in "abcdefghijklmnopqrstuvwxyz":
        assert f"letter-{letter}" in HANDSHAPE_CURLS
