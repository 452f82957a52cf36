"""Motion, force, impedance and admittance 6D vectors.

All four kinds share one representation: two 3D blocks (angular/linear, or
couple/force for forces) stored as JAX arrays with optional leading batch
dimensions. A role tag on each class selects which cross-space operations
are allowed, so the arithmetic is written once in ``SpatialVector``.

Values are immutable. Augmented assignments (``+=``, ``*=`` ...) rebind the
name to a new value and never touch the original.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, fields
from typing import ClassVar, Dict, Tuple, Type

import jax.numpy as jnp
import numpy as np
from jax.tree_util import register_pytree_node_class

from ..config import DTYPE
from ..types import Array, check_shape, is_scalar
from .cross import first_vec3, second_vec3


class Role(enum.Enum):
    """Physical meaning of a 6D vector."""

    MOTION = "motion"
    FORCE = "force"
    IMPEDANCE = "impedance"
    ADMITTANCE = "admittance"


_ROLE_TYPES: Dict[Role, Type["SpatialVector"]] = {}

# (left role, right role) -> role of the element-wise product
_HADAMARD_PRODUCTS: Dict[Tuple[Role, Role], Role] = {
    (Role.IMPEDANCE, Role.MOTION): Role.FORCE,
    (Role.MOTION, Role.IMPEDANCE): Role.FORCE,
    (Role.ADMITTANCE, Role.FORCE): Role.MOTION,
    (Role.FORCE, Role.ADMITTANCE): Role.MOTION,
}


def _spatial_vector(cls):
    """Turn a SpatialVector subclass into a frozen pytree dataclass."""
    cls = register_pytree_node_class(dataclass(frozen=True, eq=False)(cls))
    cls._block_names = tuple(f.name for f in fields(cls))
    _ROLE_TYPES[cls.role] = cls
    return cls


def _format_block(block: Array) -> str:
    values = np.asarray(block)
    if values.ndim != 1:
        return np.array2string(values)
    return "[" + " ".join(np.format_float_positional(v, trim="-") for v in values) + "]"


class SpatialVector:
    """Base class of every 6D vector kind."""

    role: ClassVar[Role]
    _block_names: ClassVar[Tuple[str, str]]

    # let numpy scalars defer to our reflected operators
    __array_ufunc__ = None

    # Constructors
    @classmethod
    def from_vectors(cls, first: Array, second: Array):
        first = jnp.asarray(first, dtype=DTYPE)
        second = jnp.asarray(second, dtype=DTYPE)
        check_shape(cls._block_names[0], first, (3,))
        check_shape(cls._block_names[1], second, (3,))
        return cls(first, second)

    @classmethod
    def from_vector(cls, vector: Array):
        """Build from a flat (..., 6) vector, first block first."""
        vector = jnp.asarray(vector, dtype=DTYPE)
        check_shape("vector", vector, (6,))
        return cls(first_vec3(vector), second_vec3(vector))

    @classmethod
    def zero(cls, batch_shape: Tuple[int, ...] = ()):
        zeros = jnp.zeros(batch_shape + (3,), dtype=DTYPE)
        return cls(zeros, zeros)

    # PyTree boiler-plate
    def tree_flatten(self):
        return self.blocks(), None

    @classmethod
    def tree_unflatten(cls, aux, children):
        return cls(*children)

    def blocks(self) -> Tuple[Array, Array]:
        return tuple(getattr(self, name) for name in self._block_names)

    def vector(self) -> Array:
        """Flat (..., 6) representation."""
        return jnp.concatenate(self.blocks(), axis=-1)

    def _same_role(self, other) -> bool:
        return isinstance(other, SpatialVector) and other.role is self.role

    # Vector space operations
    def __add__(self, other):
        if not self._same_role(other):
            return NotImplemented
        (a1, b1), (a2, b2) = self.blocks(), other.blocks()
        return type(self)(a1 + a2, b1 + b2)

    def __sub__(self, other):
        if not self._same_role(other):
            return NotImplemented
        (a1, b1), (a2, b2) = self.blocks(), other.blocks()
        return type(self)(a1 - a2, b1 - b2)

    def __neg__(self):
        a, b = self.blocks()
        return type(self)(-a, -b)

    def __mul__(self, other):
        if isinstance(other, SpatialVector):
            return _hadamard(self, other)
        if not is_scalar(other):
            return NotImplemented
        a, b = self.blocks()
        return type(self)(other * a, other * b)

    def __rmul__(self, other):
        if not is_scalar(other):
            return NotImplemented
        return self * other

    def __truediv__(self, other):
        if not is_scalar(other):
            return NotImplemented
        a, b = self.blocks()
        return type(self)(a / other, b / other)

    def __eq__(self, other):
        if not self._same_role(other):
            return NotImplemented
        return all(bool(jnp.array_equal(x, y)) for x, y in zip(self.blocks(), other.blocks()))

    def __str__(self) -> str:
        parts = (f"{name}: {_format_block(block)}"
                 for name, block in zip(self._block_names, self.blocks()))
        return "(" + ", ".join(parts) + ")"


def _hadamard(left: SpatialVector, right: SpatialVector):
    result_role = _HADAMARD_PRODUCTS.get((left.role, right.role))
    if result_role is None:
        return NotImplemented
    (a1, b1), (a2, b2) = left.blocks(), right.blocks()
    return _ROLE_TYPES[result_role](a1 * a2, b1 * b2)


class MotionLikeVector(SpatialVector):
    """Vector kinds that carry the spatial cross products."""

    def cross(self, other):
        """
        Motion cross product, the Lie bracket of two twists.

        angular' = w x w2
        linear'  = w x v2 + v x w2
        """
        if not self._same_role(other):
            raise TypeError(f"cannot cross {type(self).__name__} with {type(other).__name__}")
        (w, v), (w2, v2) = self.blocks(), other.blocks()
        return type(self)(jnp.cross(w, w2), jnp.cross(w, v2) + jnp.cross(v, w2))

    def cross_dual(self, other: "ForceVector") -> "ForceVector":
        """
        Force cross product, the action of this motion on a force.

        couple' = w x n + v x f
        force'  = w x f
        """
        if not isinstance(other, ForceVector):
            raise TypeError(f"cross_dual expects a ForceVector, got {type(other).__name__}")
        w, v = self.blocks()
        return ForceVector(jnp.cross(w, other.couple) + jnp.cross(v, other.force),
                           jnp.cross(w, other.force))

    def dot(self, other: "ForceVector") -> Array:
        """Power pairing with a force, w . n + v . f."""
        if not isinstance(other, ForceVector):
            raise TypeError(f"dot expects a ForceVector, got {type(other).__name__}")
        w, v = self.blocks()
        return jnp.sum(w * other.couple, axis=-1) + jnp.sum(v * other.force, axis=-1)


class GainVector(MotionLikeVector):
    """Diagonal operators between motion and force spaces."""

    @classmethod
    def from_scalars(cls, angular, linear):
        """Isotropic gain: each scalar is repeated over its 3D block."""
        angular = jnp.asarray(angular, dtype=DTYPE)
        linear = jnp.asarray(linear, dtype=DTYPE)
        if angular.shape != linear.shape:
            raise ValueError(f"angular and linear gains must have the same shape, "
                             f"got {angular.shape} and {linear.shape}")
        return cls(jnp.broadcast_to(angular[..., None], angular.shape + (3,)),
                   jnp.broadcast_to(linear[..., None], linear.shape + (3,)))


@_spatial_vector
class MotionVector(MotionLikeVector):
    """Twist: angular and linear velocity of a frame."""

    role = Role.MOTION

    angular: Array  # (..., 3)
    linear: Array  # (..., 3)


@_spatial_vector
class ForceVector(SpatialVector):
    """Wrench: couple and force acting on a frame."""

    role = Role.FORCE

    couple: Array  # (..., 3)
    force: Array  # (..., 3)


@_spatial_vector
class ImpedanceVector(GainVector):
    """Diagonal impedance, ``Z * motion -> force`` element-wise."""

    role = Role.IMPEDANCE

    angular: Array
    linear: Array


@_spatial_vector
class AdmittanceVector(GainVector):
    """Diagonal admittance, ``A * force -> motion`` element-wise."""

    role = Role.ADMITTANCE

    angular: Array
    linear: Array
