"""Rigid-body and articulated-body spatial inertias.

These are immutable PyTree dataclasses, so they can be passed through
``jax.jit`` and ``jax.vmap`` like any array.
"""

from __future__ import annotations

import jax.numpy as jnp
import numpy as np
from flax import struct

from ..config import DTYPE
from ..transforms.so3 import vector3_to_cross_matrix
from ..types import Array, Mat3, Mat6, Vec3, check_shape, is_scalar
from .vectors import ForceVector, MotionVector


@struct.dataclass
class SymmetricMatrix3:
    """Symmetric 3x3 matrix stored through its lower triangle.

    Only the lower triangle of ``lower`` (diagonal included) is
    authoritative. The full matrix is rebuilt by mirroring the strictly
    lower part onto the upper triangle, so whatever sits above the
    diagonal of the storage is ignored on read.

    Attributes:
        lower: (..., 3, 3) packed storage, upper triangle expected to be zero.
    """
    lower: Array

    @classmethod
    def from_matrix(cls, matrix: Array) -> "SymmetricMatrix3":
        """Keep the lower triangle of ``matrix`` and discard the rest."""
        matrix = jnp.asarray(matrix, dtype=DTYPE)
        check_shape("matrix", matrix, (3, 3))
        return cls(jnp.tril(matrix))

    @classmethod
    def from_lower_triangle(cls, lower: Array) -> "SymmetricMatrix3":
        """Wrap already triangularized storage without copying it."""
        lower = jnp.asarray(lower, dtype=DTYPE)
        check_shape("lower", lower, (3, 3))
        return cls(lower)

    def lower_triangle(self) -> Array:
        return self.lower

    def matrix(self) -> Array:
        lower = jnp.tril(self.lower)
        return lower + jnp.swapaxes(jnp.tril(lower, -1), -1, -2)

    def __eq__(self, other):
        if not isinstance(other, SymmetricMatrix3):
            return NotImplemented
        return bool(jnp.array_equal(self.matrix(), other.matrix()))


@struct.dataclass
class RBInertia:
    """Spatial inertia of a rigid body, expressed at a frame origin.

    Attributes:
        mass: (...) body mass.
        momentum: (..., 3) first moment of mass, ``mass * com``.
        packed_inertia: rotational inertia about the frame origin.
    """
    mass: Array
    momentum: Array
    packed_inertia: SymmetricMatrix3

    __array_ufunc__ = None

    @classmethod
    def from_inertia(cls, mass, momentum: Array, inertia: Array) -> "RBInertia":
        """Build from a full 3x3 tensor; only its lower triangle is kept."""
        momentum = jnp.asarray(momentum, dtype=DTYPE)
        check_shape("momentum", momentum, (3,))
        return cls(jnp.asarray(mass, dtype=DTYPE), momentum, SymmetricMatrix3.from_matrix(inertia))

    @classmethod
    def from_lower_triangle(cls, mass, momentum: Array, lower: Array) -> "RBInertia":
        """Build from a tensor whose upper triangle is already zero."""
        momentum = jnp.asarray(momentum, dtype=DTYPE)
        check_shape("momentum", momentum, (3,))
        return cls(jnp.asarray(mass, dtype=DTYPE), momentum,
                   SymmetricMatrix3.from_lower_triangle(lower))

    @classmethod
    def zero(cls) -> "RBInertia":
        return cls.from_lower_triangle(0.0, jnp.zeros(3), jnp.zeros((3, 3)))

    def inertia(self) -> Array:
        return self.packed_inertia.matrix()

    def lower_triangular_inertia(self) -> Array:
        return self.packed_inertia.lower_triangle()

    def matrix(self) -> Mat6:
        """(..., 6, 6) matrix [[I, [h]x], [[h]x^T, m*1]]."""
        h_x = vector3_to_cross_matrix(self.momentum)
        m_eye = self.mass[..., None, None] * jnp.eye(3, dtype=h_x.dtype)
        top = jnp.concatenate([self.inertia(), h_x], axis=-1)
        bottom = jnp.concatenate([jnp.swapaxes(h_x, -1, -2), m_eye], axis=-1)
        return jnp.concatenate([top, bottom], axis=-2)

    def _combine(self, other: "RBInertia", op) -> "RBInertia":
        return RBInertia.from_lower_triangle(
            op(self.mass, other.mass),
            op(self.momentum, other.momentum),
            op(self.lower_triangular_inertia(), other.lower_triangular_inertia()),
        )

    def __add__(self, other):
        if not isinstance(other, RBInertia):
            return NotImplemented
        return self._combine(other, jnp.add)

    def __sub__(self, other):
        if not isinstance(other, RBInertia):
            return NotImplemented
        return self._combine(other, jnp.subtract)

    def __neg__(self):
        return RBInertia.from_lower_triangle(-self.mass, -self.momentum,
                                             -self.lower_triangular_inertia())

    def __mul__(self, other):
        if isinstance(other, MotionVector):
            # spatial momentum of the body moving with twist ``other``
            w, v = other.angular, other.linear
            couple = (jnp.einsum('...ij,...j->...i', self.inertia(), w)
                      + jnp.cross(self.momentum, v))
            force = self.mass[..., None] * v - jnp.cross(self.momentum, w)
            return ForceVector(couple, force)
        if not is_scalar(other):
            return NotImplemented
        return RBInertia.from_lower_triangle(other * self.mass, other * self.momentum,
                                             other * self.lower_triangular_inertia())

    def __rmul__(self, other):
        if not is_scalar(other):
            return NotImplemented
        return self * other

    def __eq__(self, other):
        if not isinstance(other, RBInertia):
            return NotImplemented
        return (bool(jnp.array_equal(self.mass, other.mass))
                and bool(jnp.array_equal(self.momentum, other.momentum))
                and self.packed_inertia == other.packed_inertia)

    def __str__(self) -> str:
        return str(np.asarray(self.inertia()))


@struct.dataclass
class ABInertia:
    """Articulated-body inertia, the three 3x3 blocks M, H and I.

    Plain aggregate: building and combining articulated inertias is up to
    the dynamics algorithm using them.
    """
    M: Array
    H: Array
    I: Array

    @classmethod
    def zero(cls) -> "ABInertia":
        zeros = jnp.zeros((3, 3), dtype=DTYPE)
        return cls(zeros, zeros, zeros)

    def __eq__(self, other):
        if not isinstance(other, ABInertia):
            return NotImplemented
        return all(bool(jnp.array_equal(a, b))
                   for a, b in zip((self.M, self.H, self.I), (other.M, other.H, other.I)))


def inertia_to_origin(inertia: Mat3, mass, com: Vec3, rotation: Mat3) -> Mat3:
    """
    Move a rotational inertia from the center of mass to the frame origin.

    Parallel axis theorem followed by a change of frame:

        R (I + m [c]x [c]x^T) R^T

    Args:
        inertia: (..., 3, 3) rotational inertia about the center of mass
        mass: (...) body mass
        com: (..., 3) center of mass position
        rotation: (..., 3, 3) frame rotation

    Returns:
        (..., 3, 3) rotational inertia about the origin
    """
    com = jnp.asarray(com, dtype=DTYPE)
    mass = jnp.asarray(mass, dtype=DTYPE)
    c_x = vector3_to_cross_matrix(com)
    trans = jnp.matmul(vector3_to_cross_matrix(mass[..., None] * com), jnp.swapaxes(c_x, -1, -2))
    return jnp.matmul(jnp.matmul(rotation, inertia + trans), jnp.swapaxes(rotation, -1, -2))
