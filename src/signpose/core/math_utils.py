"""NumPy-backed math utilities: Vec3, quaternion and Euler operations.

Vectors are plain numpy arrays; quaternions are [x, y, z, w] arrays.
Euler angles are radians in intrinsic XYZ order, matching the renderer's
bone rotation convention.
"""

import numpy as np
from numpy.typing import NDArray

# Type aliases
Vec3 = NDArray[np.float64]
Quat = NDArray[np.float64]  # [x, y, z, w]


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> Vec3:
    return np.array([x, y, z], dtype=np.float64)


def as_vec3(v) -> Vec3:
    """Copy any 3-sequence (tuple, list, array) into a fresh Vec3."""
    arr = np.array(v, dtype=np.float64).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected 3 components, got shape {arr.shape}")
    return arr


# Quaternion operations

def quat_identity() -> Quat:
    return np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float64)


def quat_from_euler(x: float, y: float, z: float) -> Quat:
    """Quaternion from intrinsic XYZ Euler angles (radians); inverse of euler_from_quat."""
    cx, sx = np.cos(x / 2), np.sin(x / 2)
    cy, sy = np.cos(y / 2), np.sin(y / 2)
    cz, sz = np.cos(z / 2), np.sin(z / 2)
    return np.array([
        sx * cy * cz + cx * sy * sz,
        cx * sy * cz - sx * cy * sz,
        cx * cy * sz + sx * sy * cz,
        cx * cy * cz - sx * sy * sz,
    ], dtype=np.float64)


def euler_from_quat(q: Quat) -> Vec3:
    """Convert quaternion [x,y,z,w] to intrinsic XYZ Euler angles (radians).

    Near gimbal lock (|m13| ~ 1) the Z angle is folded into X.
    """
    x, y, z, w = quat_normalize(np.asarray(q, dtype=np.float64))
    m11 = 1 - 2 * (y * y + z * z)
    m12 = 2 * (x * y - z * w)
    m13 = 2 * (x * z + y * w)
    m22 = 1 - 2 * (x * x + z * z)
    m23 = 2 * (y * z - x * w)
    m32 = 2 * (y * z + x * w)
    m33 = 1 - 2 * (x * x + y * y)

    ey = np.arcsin(np.clip(m13, -1.0, 1.0))
    if abs(m13) < 0.9999999:
        ex = np.arctan2(-m23, m33)
        ez = np.arctan2(-m12, m11)
    else:
        ex = np.arctan2(m32, m22)
        ez = 0.0
    return vec3(ex, ey, ez)


def quat_from_axis_angle(axis: Vec3, angle: float) -> Quat:
    """Create quaternion from axis-angle."""
    half = angle / 2
    s = np.sin(half)
    a = normalize(axis)
    return np.array([a[0] * s, a[1] * s, a[2] * s, np.cos(half)], dtype=np.float64)


def quat_from_rotation_vector(rv: Vec3, epsilon: float = 1e-4) -> Quat:
    """Decode a rotation vector (axis * angle) into a quaternion.

    Vectors shorter than *epsilon* decode to the identity.
    """
    rv = np.asarray(rv, dtype=np.float64)
    angle = float(np.linalg.norm(rv))
    if angle < epsilon:
        return quat_identity()
    return quat_from_axis_angle(rv / angle, angle)


def quat_from_unit_vectors(v_from: Vec3, v_to: Vec3) -> Quat:
    """Shortest-arc rotation taking unit vector *v_from* onto *v_to*."""
    r = float(np.dot(v_from, v_to)) + 1.0
    if r < 1e-6:
        # Opposite vectors: rotate 180 degrees about any perpendicular axis
        if abs(v_from[0]) > abs(v_from[2]):
            q = np.array([-v_from[1], v_from[0], 0.0, 0.0], dtype=np.float64)
        else:
            q = np.array([0.0, -v_from[2], v_from[1], 0.0], dtype=np.float64)
    else:
        c = np.cross(v_from, v_to)
        q = np.array([c[0], c[1], c[2], r], dtype=np.float64)
    return quat_normalize(q)


def quat_multiply(a: Quat, b: Quat) -> Quat:
    """Multiply two quaternions (a * b)."""
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return np.array([
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
        aw * bw - ax * bx - ay * by - az * bz,
    ], dtype=np.float64)


def quat_normalize(q: Quat) -> Quat:
    n = np.linalg.norm(q)
    if n < 1e-10:
        return quat_identity()
    return q / n


def quat_angle(q: Quat) -> float:
    """Rotation angle (radians, in [0, pi]) encoded by a quaternion."""
    w = abs(float(quat_normalize(q)[3]))
    return 2.0 * float(np.arccos(min(1.0, w)))


def quat_rotate_vec3(q: Quat, v: Vec3) -> Vec3:
    """Rotate a vector by a quaternion."""
    qv = q[:3]
    w = q[3]
    t = 2.0 * np.cross(qv, v)
    return v + w * t + np.cross(qv, t)


# Vector operations

def normalize(v: Vec3) -> Vec3:
    n = np.linalg.norm(v)
    if n < 1e-10:
        return np.zeros_like(v)
    return v / n


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def lerp_vec3(a: Vec3, b: Vec3, t: float) -> Vec3:
    return a + (b - a) * t


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
