# sinewave/utils/geometry_utils.py

import numpy as np
import quaternion  # numpy-quaternion
import logging
from typing import Any, Sequence

from sinewave.core.common_types import Vector3D, Quaternion

logger = logging.getLogger(__name__)

_X_AXIS = np.array([1.0, 0.0, 0.0])
_Y_AXIS = np.array([0.0, 1.0, 0.0])
_Z_AXIS = np.array([0.0, 0.0, 1.0])


def as_vector3(value: Any, name: str = "vector") -> Vector3D:
    """
    Converts a sequence of three numbers into a float NumPy vector.

    Raises:
        ValueError: If the value does not hold exactly three numeric components.
    """
    try:
        vec = np.asarray(value, dtype=float)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a sequence of 3 numbers, got {value!r}") from e
    if vec.shape != (3,):
        raise ValueError(f"{name} must have exactly 3 components, got shape {vec.shape}")
    return vec.copy()


def as_bool3(value: Any, name: str = "flags") -> Sequence[bool]:
    """Converts a sequence of three truthy values into a list of bools."""
    if isinstance(value, bool):
        return [value, value, value]
    try:
        flags = [bool(v) for v in value]
    except TypeError as e:
        raise ValueError(f"{name} must be a bool or a sequence of 3 bools, got {value!r}") from e
    if len(flags) != 3:
        raise ValueError(f"{name} must have exactly 3 components, got {len(flags)}")
    return flags


def wrap_degrees(angles_deg: np.ndarray) -> np.ndarray:
    """Wraps angles into [0, 360)."""
    wrapped = np.mod(np.asarray(angles_deg, dtype=float), 360.0)
    # np.mod can return 360.0 for tiny negative inputs
    wrapped[np.isclose(wrapped, 360.0)] = 0.0
    return wrapped


def euler_degrees_to_quaternion(euler_deg: Vector3D) -> Quaternion:
    """
    Builds a rotation from Euler angles in degrees.

    The rotation about Z is applied first, then X, then Y, so the
    resulting quaternion is q_y * q_x * q_z.
    """
    euler_rad = np.radians(as_vector3(euler_deg, "euler_deg"))
    q_x = quaternion.from_rotation_vector(_X_AXIS * euler_rad[0])
    q_y = quaternion.from_rotation_vector(_Y_AXIS * euler_rad[1])
    q_z = quaternion.from_rotation_vector(_Z_AXIS * euler_rad[2])
    return (q_y * q_x * q_z).normalized()


def quaternion_to_euler_degrees(q: Quaternion) -> Vector3D:
    """
    Decomposes a rotation into Euler angles in degrees, each wrapped into [0, 360).

    Inverse of euler_degrees_to_quaternion. At the X = +/-90 degree
    singularity the Z angle is reported as 0 and Y absorbs the remainder.
    """
    if not isinstance(q, np.quaternion):  # type: ignore
        raise TypeError("Rotation must be a numpy.quaternion.")
    if q.norm() < 1e-12:
        raise ValueError("Cannot decompose a zero quaternion.")

    m = quaternion.as_rotation_matrix(q.normalized())
    sin_x = np.clip(-m[1, 2], -1.0, 1.0)
    x = np.arcsin(sin_x)

    if np.abs(sin_x) < 1.0 - 1e-9:
        y = np.arctan2(m[0, 2], m[2, 2])
        z = np.arctan2(m[1, 0], m[1, 1])
    else:
        logger.debug("Euler decomposition at X = +/-90 degrees, folding Z into Y")
        y = np.arctan2(-m[2, 0], m[0, 0])
        z = 0.0

    return wrap_degrees(np.degrees(np.array([x, y, z])))


def rotate_vector(q: Quaternion, vector: Vector3D) -> Vector3D:
    """Rotates a 3-vector by a quaternion."""
    return quaternion.rotate_vectors(q, as_vector3(vector))


def trs_matrix(position: Vector3D, rotation: Quaternion, scale: Vector3D) -> np.ndarray:
    """Builds a 4x4 translate-rotate-scale matrix."""
    matrix = np.eye(4)
    matrix[:3, :3] = quaternion.as_rotation_matrix(rotation) @ np.diag(scale)
    matrix[:3, 3] = position
    return matrix


def angles_close(a_deg: Vector3D, b_deg: Vector3D, atol: float = 1e-6) -> bool:
    """Compares two sets of angles in degrees modulo 360."""
    diff = np.mod(np.asarray(a_deg, dtype=float) - np.asarray(b_deg, dtype=float) + 180.0, 360.0) - 180.0
    return bool(np.all(np.abs(diff) <= atol))
