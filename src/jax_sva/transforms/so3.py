"""SO(3) helpers in JAX.

Rotation matrices in this library describe a change of frame, so the
elementary rotations are the transposes of the usual "rotate the vector"
matrices. All functions are pure, JIT-able, and operate on JAX arrays.
"""

import jax.numpy as jnp

from ..config import DTYPE
from ..types import Array, Mat3, Rot3, Vec3


def skew_symmetric(v: Vec3) -> Mat3:
    """
    Convert 3D vector to skew-symmetric (cross product) matrix.

    ``skew_symmetric(a) @ b == cross(a, b)``.

    Args:
        v: (..., 3) vector

    Returns:
        (..., 3, 3) skew-symmetric matrix
    """
    v = jnp.asarray(v)
    zeros = jnp.zeros(v.shape[:-1], dtype=v.dtype)

    return jnp.stack([
        jnp.stack([zeros, -v[..., 2], v[..., 1]], axis=-1),
        jnp.stack([v[..., 2], zeros, -v[..., 0]], axis=-1),
        jnp.stack([-v[..., 1], v[..., 0], zeros], axis=-1)
    ], axis=-2)


vector3_to_cross_matrix = skew_symmetric


def sinc_inv(x: Array) -> Array:
    """
    Reciprocal of the unnormalized sinc function, ``x / sin(x)``.

    Near zero the direct quotient is 0/0, so a 4th order Taylor series is
    used instead:

        x / sin(x) = 1 + x^2/6 + 7 x^4/360 + O(x^6)

    Below ``eps`` only the constant term is kept, below ``sqrt(eps)`` the
    quartic term is dropped, and from ``eps^(1/4)`` upwards the sixth order
    remainder stops being negligible so the quotient is evaluated directly.

    Args:
        x: (...) angle(s) in radians

    Returns:
        (...) value of x / sin(x)
    """
    x = jnp.asarray(x, dtype=DTYPE)
    eps = jnp.finfo(x.dtype).eps
    taylor_0_bound = eps
    taylor_2_bound = jnp.sqrt(taylor_0_bound)
    taylor_n_bound = jnp.sqrt(taylor_2_bound)

    abs_x = jnp.abs(x)
    x2 = x * x

    taylor = (1.0
              + jnp.where(abs_x >= taylor_0_bound, x2 / 6.0, 0.0)
              + jnp.where(abs_x >= taylor_2_bound, 7.0 * (x2 * x2) / 360.0, 0.0))

    # Keep the unused branch finite so gradients stay clean under jnp.where
    use_direct = abs_x >= taylor_n_bound
    safe_x = jnp.where(use_direct, x, 1.0)
    direct = safe_x / jnp.sin(safe_x)

    return jnp.where(use_direct, direct, taylor)


def rot_x(theta: Array) -> Rot3:
    """
    Frame rotation of angle theta around the x axis.

    Args:
        theta: (...) angle in radians

    Returns:
        (..., 3, 3) rotation matrix [[1, 0, 0], [0, c, s], [0, -s, c]]
    """
    theta = jnp.asarray(theta, dtype=DTYPE)
    s, c = jnp.sin(theta), jnp.cos(theta)
    zeros, ones = jnp.zeros_like(theta), jnp.ones_like(theta)

    return jnp.stack([
        jnp.stack([ones, zeros, zeros], axis=-1),
        jnp.stack([zeros, c, s], axis=-1),
        jnp.stack([zeros, -s, c], axis=-1)
    ], axis=-2)


def rot_y(theta: Array) -> Rot3:
    """
    Frame rotation of angle theta around the y axis.

    Args:
        theta: (...) angle in radians

    Returns:
        (..., 3, 3) rotation matrix [[c, 0, -s], [0, 1, 0], [s, 0, c]]
    """
    theta = jnp.asarray(theta, dtype=DTYPE)
    s, c = jnp.sin(theta), jnp.cos(theta)
    zeros, ones = jnp.zeros_like(theta), jnp.ones_like(theta)

    return jnp.stack([
        jnp.stack([c, zeros, -s], axis=-1),
        jnp.stack([zeros, ones, zeros], axis=-1),
        jnp.stack([s, zeros, c], axis=-1)
    ], axis=-2)


def rot_z(theta: Array) -> Rot3:
    """
    Frame rotation of angle theta around the z axis.

    Args:
        theta: (...) angle in radians

    Returns:
        (..., 3, 3) rotation matrix [[c, s, 0], [-s, c, 0], [0, 0, 1]]
    """
    theta = jnp.asarray(theta, dtype=DTYPE)
    s, c = jnp.sin(theta), jnp.cos(theta)
    zeros, ones = jnp.zeros_like(theta), jnp.ones_like(theta)

    return jnp.stack([
        jnp.stack([c, s, zeros], axis=-1),
        jnp.stack([-s, c, zeros], axis=-1),
        jnp.stack([zeros, zeros, ones], axis=-1)
    ], axis=-2)


def rotation_velocity(E_a_b: Rot3) -> Vec3:
    """
    Recover the rotation vector whose exponential is the frame rotation E_a_b.

    The angle comes from the trace, clamped into the domain of arccos, and
    the axis from the antisymmetric part of the matrix scaled by
    ``sinc_inv(theta) / 2``. Stable as theta goes to zero, gradients
    included.

    Args:
        E_a_b: (..., 3, 3) rotation matrix

    Returns:
        (..., 3) rotation vector
    """
    E_a_b = jnp.asarray(E_a_b, dtype=DTYPE)
    trace = jnp.trace(E_a_b, axis1=-2, axis2=-1)
    cos_angle = jnp.clip((trace - 1.0) * 0.5, -1.0, 1.0)

    # arccos has an infinite slope at 1; keep it out of the identity branch
    rotated = cos_angle < 1.0 - jnp.finfo(cos_angle.dtype).eps
    safe_cos = jnp.where(rotated, cos_angle, 0.0)
    theta = jnp.where(rotated, jnp.arccos(safe_cos), 0.0)

    w = jnp.stack([
        E_a_b[..., 1, 2] - E_a_b[..., 2, 1],
        E_a_b[..., 2, 0] - E_a_b[..., 0, 2],
        E_a_b[..., 0, 1] - E_a_b[..., 1, 0]
    ], axis=-1)

    return w * (sinc_inv(theta) * 0.5)[..., None]


def rotation_error(E_a_b: Rot3, E_a_c: Rot3) -> Vec3:
    """
    Rotation velocity of frame c relative to frame b, expressed in frame a.

    Args:
        E_a_b: (..., 3, 3) rotation from a to b
        E_a_c: (..., 3, 3) rotation from a to c

    Returns:
        (..., 3) rotation error vector
    """
    E_a_b_T = jnp.swapaxes(E_a_b, -1, -2)
    E_b_c = jnp.matmul(E_a_c, E_a_b_T)
    return jnp.einsum('...ij,...j->...i', E_a_b_T, rotation_velocity(E_b_c))
