"""Damped spring integration for hand positions.

Each axis of a vector spring is an independent damped oscillator stepped
with semi-implicit Euler. The axes are not coupled: a spring moving
diagonally settles per axis, not along the straight line to the target.
"""

from dataclasses import dataclass
from types import MappingProxyType

from signpose.core.pose import SpringState
from signpose.core.math_utils import Vec3


@dataclass(frozen=True)
class SpringConfig:
    stiffness: float = 170.0  # pull toward target (higher = snappier)
    damping: float = 26.0     # settling (higher = less bouncy)
    mass: float = 1.0


DEFAULT_SPRING_CONFIG = SpringConfig()

SPRING_PRESETS: MappingProxyType = MappingProxyType({
    "snappy": SpringConfig(stiffness=400.0, damping=30.0, mass=0.8),
    "smooth": SpringConfig(stiffness=120.0, damping=20.0, mass=1.0),
    "bouncy": SpringConfig(stiffness=180.0, damping=12.0, mass=1.0),
    "gentle": SpringConfig(stiffness=80.0, damping=15.0, mass=1.2),
    "stiff": SpringConfig(stiffness=300.0, damping=40.0, mass=1.0),
})


def get_spring_preset(name: str) -> SpringConfig:
    try:
        return SPRING_PRESETS[name]
    except KeyError:
        raise KeyError(
            f"Unknown spring preset {name!r}; expected one of {sorted(SPRING_PRESETS)}"
        ) from None


def spring_step(
    position: float,
    velocity: float,
    target: float,
    config: SpringConfig,
    dt: float,
) -> tuple[float, float]:
    """Advance one scalar spring by *dt* seconds. Returns (position, velocity).

    No clamping is applied; callers must keep dt small (see MAX_DELTA_TIME).
    """
    displacement = position - target
    spring_force = -config.stiffness * displacement
    damping_force = -config.damping * velocity
    acceleration = (spring_force + damping_force) / config.mass

    velocity = velocity + acceleration * dt
    position = position + velocity * dt
    return position, velocity


def step_spring_state(state: SpringState, target: Vec3, config: SpringConfig, dt: float) -> None:
    """Advance a 3D spring in place, one scalar spring per axis."""
    for axis in range(3):
        pos, vel = spring_step(
            float(state.position[axis]),
            float(state.velocity[axis]),
            float(target[axis]),
            config,
            dt,
        )
        state.position[axis] = pos
        state.velocity[axis] = vel
