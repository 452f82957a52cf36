"""Quaternion conversion and interpolation utilities in JAX.

Quaternions are stored as (..., 4) arrays in (w, x, y, z) order.
"""

import jax.numpy as jnp

from ..config import DTYPE
from ..types import Array, Quat, Rot3, Scalar


def normalize_quaternions(quaternions: Array) -> Array:
    """Normalize quaternions to unit length."""
    return quaternions / jnp.linalg.norm(quaternions, axis=-1, keepdims=True)


def quaternion_to_matrix(quaternions: Quat) -> Rot3:
    """
    Convert quaternions to rotation matrices.

    Args:
        quaternions: (..., 4) array of quaternions in (w, x, y, z) format

    Returns:
        (..., 3, 3) array of rotation matrices
    """
    q = normalize_quaternions(jnp.asarray(quaternions, dtype=DTYPE))
    w, x, y, z = jnp.moveaxis(q, -1, 0)

    return jnp.stack([
        jnp.stack([1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - w * z), 2.0 * (x * z + w * y)], axis=-1),
        jnp.stack([2.0 * (x * y + w * z), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - w * x)], axis=-1),
        jnp.stack([2.0 * (x * z - w * y), 2.0 * (y * z + w * x), 1.0 - 2.0 * (x * x + y * y)], axis=-1)
    ], axis=-2)


def matrix_to_quaternion(matrix: Rot3) -> Quat:
    """
    Convert rotation matrices to unit quaternions (w, x, y, z).

    Shepperd's method: one candidate per quaternion component, each scaled
    by four times that component, and the candidate built around the
    largest component is kept. The scalar part of the result is made
    non-negative.

    Args:
        matrix: (..., 3, 3) array of rotation matrices

    Returns:
        (..., 4) array of quaternions in (w, x, y, z) format
    """
    m = jnp.asarray(matrix, dtype=DTYPE)
    m00, m01, m02 = m[..., 0, 0], m[..., 0, 1], m[..., 0, 2]
    m10, m11, m12 = m[..., 1, 0], m[..., 1, 1], m[..., 1, 2]
    m20, m21, m22 = m[..., 2, 0], m[..., 2, 1], m[..., 2, 2]
    trace = m00 + m11 + m22

    candidates = jnp.stack([
        jnp.stack([1.0 + trace, m21 - m12, m02 - m20, m10 - m01], axis=-1),
        jnp.stack([m21 - m12, 1.0 + m00 - m11 - m22, m01 + m10, m02 + m20], axis=-1),
        jnp.stack([m02 - m20, m01 + m10, 1.0 - m00 + m11 - m22, m12 + m21], axis=-1),
        jnp.stack([m10 - m01, m02 + m20, m12 + m21, 1.0 - m00 - m11 + m22], axis=-1)
    ], axis=-2)

    best = jnp.argmax(jnp.stack([trace, m00, m11, m22], axis=-1), axis=-1)
    q = jnp.take_along_axis(candidates, best[..., None, None], axis=-2)[..., 0, :]
    q = normalize_quaternions(q)

    return jnp.where(q[..., 0:1] < 0, -q, q)


def quaternion_slerp(q_from: Quat, q_to: Quat, t: Scalar) -> Quat:
    """
    Spherical linear interpolation between unit quaternions.

    Follows the shortest arc: q_to is flipped when the two quaternions lie
    in opposite hemispheres. Falls back to normalized linear interpolation
    when they are (almost) parallel.

    Args:
        q_from: (..., 4) quaternion returned for t = 0
        q_to: (..., 4) quaternion returned for t = 1
        t: interpolation parameter in [0, 1]

    Returns:
        (..., 4) interpolated unit quaternion
    """
    q_from = normalize_quaternions(jnp.asarray(q_from, dtype=DTYPE))
    q_to = normalize_quaternions(jnp.asarray(q_to, dtype=DTYPE))
    t = jnp.asarray(t, dtype=DTYPE)[..., None]

    dot = jnp.sum(q_from * q_to, axis=-1, keepdims=True)
    q_to = jnp.where(dot < 0.0, -q_to, q_to)
    dot = jnp.clip(jnp.abs(dot), 0.0, 1.0)

    theta = jnp.arccos(dot)
    sin_theta = jnp.sin(theta)
    parallel = sin_theta < 1e-8
    safe_sin = jnp.where(parallel, 1.0, sin_theta)

    w_from = jnp.where(parallel, 1.0 - t, jnp.sin((1.0 - t) * theta) / safe_sin)
    w_to = jnp.where(parallel, t, jnp.sin(t * theta) / safe_sin)

    return normalize_quaternions(w_from * q_from + w_to * q_to)
