"""Shared constants and paths for SignPose."""

from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
ASSETS_DIR = PROJECT_ROOT / "assets"
CONFIG_DIR = ASSETS_DIR / "config"
SKELETON_CONFIG_DIR = CONFIG_DIR / "skeleton"

# Frame timing
TARGET_FPS = 60
MAX_DELTA_TIME = 0.1  # Clamp dt to avoid large jumps

# Sign synthesis tuning
LOCATION_SCALE = (0.5, 0.8, 0.5)
LOCATION_OFFSET = (0.15, -0.2, 0.2)
MOVEMENT_SCALE = 0.3
BOUNCE_AMPLITUDE = 0.05
WRIST_ROLL_SCALE = 0.2
HEAD_OSCILLATION_SCALE = 0.3
HEAD_TILT_SCALE = 0.2
WIDE_EYES_SCALE = 0.3
SQUINT_SCALE = 0.5

# Two-bone IK clamp factors
IK_MAX_REACH_FACTOR = 0.999
IK_MIN_REACH_FACTOR = 1.01

# Pose blending
DEFAULT_SPRING_PRESET = "smooth"
DEFAULT_SMOOTHING_RATE = 8.0  # 1/s, exponential lerp for angles and curls

# SMPL-X parameter vector layout
SMPLX_PARAM_COUNT = 182
SMPLX_ROOT = slice(0, 3)
SMPLX_BODY = slice(3, 66)
SMPLX_LEFT_HAND = slice(66, 111)
SMPLX_RIGHT_HAND = slice(111, 156)
SMPLX_JAW = slice(156, 159)
SMPLX_BETAS = slice(159, 169)
SMPLX_EXPRESSION = slice(169, 179)
SMPLX_CAM_TRANS = slice(179, 182)
AXIS_ANGLE_EPSILON = 1e-4

# Fallback limb segment length when a rest joint is missing (metres)
DEFAULT_BONE_LENGTH = 0.25
