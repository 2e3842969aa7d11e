"""3D geometry utilities: rotations, Euler angles, sensor look direction."""

from __future__ import annotations

import logging
import math

import numpy as np

logger = logging.getLogger(__name__)

UNIT_X = np.array([1.0, 0.0, 0.0])
UNIT_Z = np.array([0.0, 0.0, 1.0])


def qvec2rotmat(qvec: list[float] | tuple[float, ...] | np.ndarray) -> np.ndarray:
    """Convert quaternion (w, x, y, z) to 3x3 rotation matrix."""
    w, x, y, z = qvec
    return np.array([
        [1 - 2*y*y - 2*z*z, 2*x*y - 2*w*z, 2*x*z + 2*w*y],
        [2*x*y + 2*w*z, 1 - 2*x*x - 2*z*z, 2*y*z - 2*w*x],
        [2*x*z - 2*w*y, 2*y*z + 2*w*x, 1 - 2*x*x - 2*y*y],
    ])


def rotmat2qvec(R: np.ndarray) -> np.ndarray:
    """Convert 3x3 rotation matrix to quaternion (w, x, y, z)."""
    trace = R[0, 0] + R[1, 1] + R[2, 2]
    if trace > 0:
        s = 0.5 / np.sqrt(trace + 1.0)
        w = 0.25 / s
        x = (R[2, 1] - R[1, 2]) * s
        y = (R[0, 2] - R[2, 0]) * s
        z = (R[1, 0] - R[0, 1]) * s
    elif R[0, 0] > R[1, 1] and R[0, 0] > R[2, 2]:
        s = 2.0 * np.sqrt(1.0 + R[0, 0] - R[1, 1] - R[2, 2])
        w = (R[2, 1] - R[1, 2]) / s
        x = 0.25 * s
        y = (R[0, 1] + R[1, 0]) / s
        z = (R[0, 2] + R[2, 0]) / s
    elif R[1, 1] > R[2, 2]:
        s = 2.0 * np.sqrt(1.0 + R[1, 1] - R[0, 0] - R[2, 2])
        w = (R[0, 2] - R[2, 0]) / s
        x = (R[0, 1] + R[1, 0]) / s
        y = 0.25 * s
        z = (R[1, 2] + R[2, 1]) / s
    else:
        s = 2.0 * np.sqrt(1.0 + R[2, 2] - R[0, 0] - R[1, 1])
        w = (R[1, 0] - R[0, 1]) / s
        x = (R[0, 2] + R[2, 0]) / s
        y = (R[1, 2] + R[2, 1]) / s
        z = 0.25 * s
    return np.array([w, x, y, z])


def euler2qvec(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """Convert roll/pitch/yaw (ZYX convention, radians) to quaternion (w, x, y, z)."""
    cr, sr = math.cos(roll / 2), math.sin(roll / 2)
    cp, sp = math.cos(pitch / 2), math.sin(pitch / 2)
    cy, sy = math.cos(yaw / 2), math.sin(yaw / 2)
    return np.array([
        cr * cp * cy + sr * sp * sy,
        sr * cp * cy - cr * sp * sy,
        cr * sp * cy + sr * cp * sy,
        cr * cp * sy - sr * sp * cy,
    ])


def quat_to_euler(qvec) -> tuple[float, float, float]:
    """Convert quaternion (w, x, y, z) to (roll, pitch, yaw) in radians.

    The pitch argument is clamped to [-1, 1]: near gimbal lock, rounding can
    push ``2(wy - zx)`` slightly past 1 and ``asin`` would return NaN.
    """
    w, x, y, z = (float(c) for c in qvec)
    roll = math.atan2(2.0 * (w * x + y * z), 1.0 - 2.0 * (x * x + y * y))
    sin_pitch = 2.0 * (w * y - z * x)
    pitch = math.asin(max(-1.0, min(1.0, sin_pitch)))
    yaw = math.atan2(2.0 * (w * z + x * y), 1.0 - 2.0 * (y * y + z * z))
    return roll, pitch, yaw


def direction_from_yaw_pitch(yaw: float, pitch: float) -> np.ndarray:
    """Forward unit vector for a heading ``yaw`` and an elevation ``pitch``."""
    return np.array([
        math.cos(yaw) * math.cos(pitch),
        math.sin(yaw) * math.cos(pitch),
        math.sin(pitch),
    ])


def sensor_look_dir(qvec) -> np.ndarray:
    """Sensor looking direction for a body orientation quaternion (w, x, y, z).

    Roll is ignored. Pitch is negated: a positive body pitch (nose down in
    the ZYX convention) makes the sensor look below the horizon.
    """
    _, pitch, yaw = quat_to_euler(qvec)
    return direction_from_yaw_pitch(yaw, -pitch)


def look_rotation(look_dir: np.ndarray, up: np.ndarray = UNIT_Z) -> np.ndarray:
    """Rotation matrix whose z column points along ``look_dir``.

    Columns are ``[rx, ry, rz]`` with ``rz = look_dir``, ``rx = rz x up`` and
    ``ry = rz x rx``, all normalized. When ``look_dir`` is parallel to ``up``
    the cross product vanishes and global X is used as the secondary axis.
    """
    rz = np.asarray(look_dir, dtype=np.float64)
    norm = np.linalg.norm(rz)
    if norm < 1e-12:
        raise ValueError("look direction must be non-zero")
    rz = rz / norm

    rx = np.cross(rz, up)
    if np.linalg.norm(rx) < 1e-9:
        logger.warning(
            f"Look direction {rz.round(3)} is parallel to up axis, using global X as fallback"
        )
        rx = np.cross(rz, UNIT_X)
    rx = rx / np.linalg.norm(rx)
    ry = np.cross(rz, rx)
    ry = ry / np.linalg.norm(ry)
    return np.column_stack([rx, ry, rz])
