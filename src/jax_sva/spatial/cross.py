"""6D cross-product matrices for motion and force vectors.

A flat 6-vector is ordered (angular, linear) for motions and
(couple, force) for forces.
"""

import jax.numpy as jnp

from ..transforms.so3 import vector3_to_cross_matrix
from ..types import Mat6, Vec3, Vec6


def first_vec3(vector: Vec6) -> Vec3:
    """Angular (or couple) block of a (..., 6) vector."""
    return vector[..., :3]


def second_vec3(vector: Vec6) -> Vec3:
    """Linear (or force) block of a (..., 6) vector."""
    return vector[..., 3:]


def vector6_to_cross_matrix(vector: Vec6) -> Mat6:
    """
    Motion cross-product matrix of a motion 6-vector.

    For m = (w, v):

        [m]x = [[ [w]x,   0   ],
                [ [v]x,  [w]x ]]

    so that ``[m]x @ m2 == cross(m, m2)``.

    Args:
        vector: (..., 6) motion vector

    Returns:
        (..., 6, 6) cross-product matrix
    """
    vector = jnp.asarray(vector)
    w_x = vector3_to_cross_matrix(first_vec3(vector))
    v_x = vector3_to_cross_matrix(second_vec3(vector))
    zeros = jnp.zeros_like(w_x)

    top = jnp.concatenate([w_x, zeros], axis=-1)
    bottom = jnp.concatenate([v_x, w_x], axis=-1)
    return jnp.concatenate([top, bottom], axis=-2)


def vector6_to_cross_dual_matrix(vector: Vec6) -> Mat6:
    """
    Force cross-product matrix of a motion 6-vector, ``-[m]x^T``.

    Args:
        vector: (..., 6) motion vector

    Returns:
        (..., 6, 6) dual cross-product matrix
    """
    return -jnp.swapaxes(vector6_to_cross_matrix(vector), -1, -2)
