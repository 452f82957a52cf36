"""Primitive array aliases used across the library.

Shapes are conventions only; every alias is a ``jax.Array`` and may carry
leading batch dimensions.
"""

import numbers
from typing import Tuple, Union

import jax
import numpy as np

Array = jax.Array

Vec3 = Array  # (..., 3)
Vec6 = Array  # (..., 6)
Mat3 = Array  # (..., 3, 3)
Mat6 = Array  # (..., 6, 6)
Rot3 = Array  # (..., 3, 3) orthonormal
Quat = Array  # (..., 4) unit quaternion, (w, x, y, z)

Scalar = Union[float, Array]


def is_scalar(value) -> bool:
    """True for Python numbers and 0-d numpy / JAX arrays."""
    if isinstance(value, numbers.Number):
        return True
    return isinstance(value, (jax.Array, np.ndarray, np.generic)) and np.ndim(value) == 0


def check_shape(name: str, array: Array, trailing: Tuple[int, ...]) -> None:
    """Raise ValueError unless ``array`` ends with the ``trailing`` dimensions."""
    if array.shape[-len(trailing):] != trailing:
        expected = ",".join(str(d) for d in trailing)
        raise ValueError(f"{name} must have shape (...,{expected}), got {array.shape}")
