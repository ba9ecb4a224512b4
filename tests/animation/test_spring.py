"""Tests for damped spring integration."""

import numpy as np
import pytest

from signpose.animation.spring import (
    DEFAULT_SPRING_CONFIG, SPRING_PRESETS, SpringConfig,
    get_spring_preset, spring_step, step_spring_state,
)
from signpose.core.math_utils import vec3
from signpose.core.pose import SpringState


def test_preset_values():
    assert SPRING_PRESETS["snappy"] == SpringConfig(400, 30, 0.8)
    assert SPRING_PRESETS["smooth"] == SpringConfig(120, 20, 1)
    assert SPRING_PRESETS["bouncy"] == SpringConfig(180, 12, 1)
    assert SPRING_PRESETS["gentle"] == SpringConfig(80, 15, 1.2)
    assert SPRING_PRESETS["stiff"] == SpringConfig(300, 40, 1)
    assert DEFAULT_SPRING_CONFIG == SpringConfig(170, 26, 1)


def test_unknown_preset_lists_names():
    with pytest.raises(KeyError, match="snappy"):
        get_spring_preset("wobbly")


def test_spring_at_target_stays():
    pos, vel = spring_step(1.0, 0.0, 1.0, DEFAULT_SPRING_CONFIG, 1 / 60)
    assert pos == 1.0
    assert vel == 0.0


def test_single_step_semi_implicit():
    config = SpringConfig(stiffness=100.0, damping=10.0, mass=2.0)
    pos, vel = spring_step(0.0, 1.0, 1.0, config, 0.1)
    # a = (100*1 - 10*1) / 2 = 45
    assert vel == pytest.approx(1.0 + 4.5)
    assert pos == pytest.approx(0.0 + 5.5 * 0.1)


@pytest.mark.parametrize("name", sorted(SPRING_PRESETS))
def test_presets_converge(name):
    config = SPRING_PRESETS[name]
    pos, vel = 0.0, 0.0
    for _ in range(600):  # 10 s at 60 fps
        pos, vel = spring_step(pos, vel, 1.0, config, 1 / 60)
    assert pos == pytest.approx(1.0, abs=1e-3)
    assert abs(vel) < 1e-2


def test_bouncy_overshoots():
    pos, vel = 0.0, 0.0
    peak = 0.0
    for _ in range(120):
        pos, vel = spring_step(pos, vel, 1.0, SPRING_PRESETS["bouncy"], 1 / 60)
        peak = max(peak, pos)
    assert peak > 1.0


def test_vector_spring_axes_independent():
    state = SpringState(position=vec3(0, 0, 0))
    target = vec3(1.0, 0.0, -2.0)
    step_spring_state(state, target, DEFAULT_SPRING_CONFIG, 1 / 60)
    x_pos, x_vel = spring_step(0.0, 0.0, 1.0, DEFAULT_SPRING_CONFIG, 1 / 60)
    z_pos, z_vel = spring_step(0.0, 0.0, -2.0, DEFAULT_SPRING_CONFIG, 1 / 60)
    np.testing.assert_array_almost_equal(state.position, [x_pos, 0.0, z_pos])
    np.testing.assert_array_almost_equal(state.velocity, [x_vel, 0.0, z_vel])


def test_vector_spring_converges():
    state = SpringState(position=vec3(0.35, -0.1, 0.2))
    target = vec3(0.3, 0.12, 0.35)
    for _ in range(600):
        step_spring_state(state, target, SPRING_PRESETS["smooth"], 1 / 60)
    np.testing.assert_allclose(state.position, target, atol=1e-3)
