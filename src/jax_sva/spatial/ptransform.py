"""Plücker coordinate transforms implemented with JAX."""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from typing import Optional, Tuple

import jax.numpy as jnp
import numpy as np
from jax.tree_util import register_pytree_node_class

from ..config import DTYPE
from ..transforms.rotation import (
    matrix_to_quaternion,
    quaternion_slerp,
    quaternion_to_matrix,
)
from ..transforms.so3 import rotation_velocity, vector3_to_cross_matrix
from ..types import Array, Mat6, Quat, Rot3, Scalar, Vec3, check_shape
from .inertia import RBInertia
from .vectors import ForceVector, MotionVector

logger = logging.getLogger(__name__)


def _matvec(matrix: Array, vector: Array) -> Array:
    return jnp.einsum("...ij,...j->...i", matrix, vector)


def _transpose(matrix: Array) -> Array:
    return jnp.swapaxes(matrix, -1, -2)


@register_pytree_node_class  # let PTransform work with jit / grad / vmap …
@dataclass(frozen=True, eq=False)
class PTransform:
    """Immutable change of frame from A to B – batch-friendly & JIT-friendly.

    ``rotation`` is the orientation of B in A (a frame rotation, see
    ``so3.rot_x``) and ``translation`` the position of B's origin in A.
    The rotation is trusted to be orthonormal.
    """
    rotation: Array  # shape (..., 3, 3)
    translation: Array  # shape (..., 3)

    __array_ufunc__ = None

    # Constructors
    @classmethod
    def identity(cls, batch_shape: Tuple[int, ...] = (), *, dtype=DTYPE) -> "PTransform":
        rotation = jnp.broadcast_to(jnp.eye(3, dtype=dtype), batch_shape + (3, 3))
        return cls(rotation, jnp.zeros(batch_shape + (3,), dtype=dtype))

    @classmethod
    def from_rotation_translation(cls, rotation: Rot3, translation: Vec3) -> "PTransform":
        rotation = jnp.asarray(rotation, dtype=DTYPE)
        translation = jnp.asarray(translation, dtype=DTYPE)
        check_shape("rotation", rotation, (3, 3))
        check_shape("translation", translation, (3,))
        return cls(rotation, translation)

    @classmethod
    def from_rotation(cls, rotation: Rot3) -> "PTransform":
        rotation = jnp.asarray(rotation, dtype=DTYPE)
        return cls.from_rotation_translation(rotation, jnp.zeros(rotation.shape[:-1], dtype=DTYPE))

    @classmethod
    def from_translation(cls, translation: Vec3) -> "PTransform":
        translation = jnp.asarray(translation, dtype=DTYPE)
        rotation = jnp.broadcast_to(jnp.eye(3, dtype=DTYPE), translation.shape + (3,))
        return cls.from_rotation_translation(rotation, translation)

    @classmethod
    def from_quaternion(cls, quat: Quat, translation: Optional[Vec3] = None) -> "PTransform":
        """Build from a (w, x, y, z) quaternion and an optional translation."""
        rotation = quaternion_to_matrix(quat)
        if translation is None:
            return cls.from_rotation(rotation)
        return cls.from_rotation_translation(rotation, translation)

    # PyTree boiler-plate
    def tree_flatten(self):
        return (self.rotation, self.translation), None

    @classmethod
    def tree_unflatten(cls, aux, children):
        rotation, translation = children
        return cls(rotation, translation)

    # 6x6 forms
    def matrix(self) -> Mat6:
        """Motion transform [[E, 0], [-E [r]x, E]]."""
        E = self.rotation
        off_diagonal = -jnp.matmul(E, vector3_to_cross_matrix(self.translation))
        zeros = jnp.zeros_like(E)
        top = jnp.concatenate([E, zeros], axis=-1)
        bottom = jnp.concatenate([off_diagonal, E], axis=-1)
        return jnp.concatenate([top, bottom], axis=-2)

    def dual_matrix(self) -> Mat6:
        """Force transform [[E, -E [r]x], [0, E]], the inverse transpose of matrix()."""
        E = self.rotation
        off_diagonal = -jnp.matmul(E, vector3_to_cross_matrix(self.translation))
        zeros = jnp.zeros_like(E)
        top = jnp.concatenate([E, off_diagonal], axis=-1)
        bottom = jnp.concatenate([zeros, E], axis=-1)
        return jnp.concatenate([top, bottom], axis=-2)

    # Motion vectors
    def angular_mul(self, mv: MotionVector) -> Vec3:
        return _matvec(self.rotation, mv.angular)

    def linear_mul(self, mv: MotionVector) -> Array:
        return _matvec(self.rotation, mv.linear - jnp.cross(self.translation, mv.angular))

    def inv_mul(self, mv: MotionVector) -> MotionVector:
        """Apply the inverse transform without building it."""
        return MotionVector(self.angular_inv_mul(mv), self.linear_inv_mul(mv))

    def angular_inv_mul(self, mv: MotionVector) -> Array:
        return _matvec(_transpose(self.rotation), mv.angular)

    def linear_inv_mul(self, mv: MotionVector) -> Array:
        E_T = _transpose(self.rotation)
        return _matvec(E_T, mv.linear) + jnp.cross(self.translation, _matvec(E_T, mv.angular))

    # Force vectors and rigid-body inertias
    def dual_mul(self, value):
        """
        Dual (force space) action.

        Args:
            value: ForceVector, mapped with dual_matrix(), or RBInertia,
                mapped to ``X* I X^-1``

        Returns:
            Value of the same kind expressed in frame B
        """
        if isinstance(value, RBInertia):
            return self._dual_mul_inertia(value)
        return ForceVector(self.couple_dual_mul(value), self.force_dual_mul(value))

    def couple_dual_mul(self, fv: ForceVector) -> Array:
        return _matvec(self.rotation, fv.couple - jnp.cross(self.translation, fv.force))

    def force_dual_mul(self, fv: ForceVector) -> Array:
        return _matvec(self.rotation, fv.force)

    def trans_mul(self, value):
        """
        Transpose action, going back from frame B to frame A.

        Args:
            value: ForceVector, mapped with matrix()^T, or RBInertia,
                mapped to ``X^T I X``

        Returns:
            Value of the same kind expressed in frame A
        """
        if isinstance(value, RBInertia):
            return self._trans_mul_inertia(value)
        return ForceVector(self.couple_trans_mul(value), self.force_trans_mul(value))

    def couple_trans_mul(self, fv: ForceVector) -> Array:
        E_T = _transpose(self.rotation)
        return _matvec(E_T, fv.couple) + jnp.cross(self.translation, _matvec(E_T, fv.force))

    def force_trans_mul(self, fv: ForceVector) -> Array:
        return _matvec(_transpose(self.rotation), fv.force)

    def _dual_mul_inertia(self, rbi: RBInertia) -> RBInertia:
        E, r = self.rotation, self.translation
        h = rbi.momentum
        h_moved = h - rbi.mass[..., None] * r
        r_x = vector3_to_cross_matrix(r)
        inertia = (rbi.inertia()
                   + jnp.matmul(r_x, vector3_to_cross_matrix(h))
                   + jnp.matmul(vector3_to_cross_matrix(h_moved), r_x))
        inertia = jnp.matmul(jnp.matmul(E, inertia), _transpose(E))
        return RBInertia.from_inertia(rbi.mass, _matvec(E, h_moved), inertia)

    def _trans_mul_inertia(self, rbi: RBInertia) -> RBInertia:
        E, r = self.rotation, self.translation
        E_T = _transpose(E)
        Eh = _matvec(E_T, rbi.momentum)
        r_x = vector3_to_cross_matrix(r)
        inertia = (jnp.matmul(jnp.matmul(E_T, rbi.inertia()), E)
                   - jnp.matmul(r_x, vector3_to_cross_matrix(Eh))
                   - jnp.matmul(vector3_to_cross_matrix(Eh + rbi.mass[..., None] * r), r_x))
        return RBInertia.from_inertia(rbi.mass, Eh + rbi.mass[..., None] * r, inertia)

    # Group operations
    def inv(self) -> "PTransform":
        return PTransform(_transpose(self.rotation), -_matvec(self.rotation, self.translation))

    def __mul__(self, other):
        """Compose with another transform (``other`` applied first) or move a motion."""
        if isinstance(other, PTransform):
            return PTransform(
                jnp.matmul(self.rotation, other.rotation),
                other.translation + _matvec(_transpose(other.rotation), self.translation),
            )
        if isinstance(other, MotionVector):
            return MotionVector(self.angular_mul(other), self.linear_mul(other))
        return NotImplemented

    def __eq__(self, other):
        if not isinstance(other, PTransform):
            return NotImplemented
        return (bool(jnp.array_equal(self.rotation, other.rotation))
                and bool(jnp.array_equal(self.translation, other.translation)))

    def __str__(self) -> str:
        return str(np.asarray(self.matrix()))


def transform_velocity(X_a_b: PTransform) -> MotionVector:
    """Pose of b in a read as a motion: (rotation velocity, translation)."""
    return MotionVector(rotation_velocity(X_a_b.rotation), X_a_b.translation)


def transform_error(X_a_b: PTransform, X_a_c: PTransform) -> MotionVector:
    """
    Pose error of frame c relative to frame b, expressed in frame a.

    Args:
        X_a_b: transform from a to b
        X_a_c: transform from a to c

    Returns:
        MotionVector of the rotation and translation error
    """
    X_b_c = X_a_c * X_a_b.inv()
    return PTransform.from_rotation(_transpose(X_a_b.rotation)) * transform_velocity(X_b_c)


def interpolate(from_: PTransform, to: PTransform, t: Scalar) -> PTransform:
    """
    Interpolate between two transforms, t in [0, 1].

    The rotation is slerped along the shortest arc, ``from_`` at t = 0 and
    ``to`` at t = 1. The translation is ``from_.translation * t +
    to.translation * (1 - t)``, which weights the endpoints the other way
    round.

    Args:
        from_: start transform
        to: end transform
        t: interpolation parameter

    Returns:
        Interpolated PTransform
    """
    if isinstance(t, numbers.Real) and not 0.0 <= t <= 1.0:
        logger.warning("interpolate called with t=%s outside [0, 1]", t)

    q_from = matrix_to_quaternion(from_.rotation)
    q_to = matrix_to_quaternion(to.rotation)
    t_arr = jnp.asarray(t, dtype=DTYPE)
    translation = from_.translation * t_arr[..., None] + to.translation * (1.0 - t_arr)[..., None]
    return PTransform.from_quaternion(quaternion_slerp(q_from, q_to, t_arr), translation)
