"""
Spatial vector algebra types.

- 6D vectors (vectors module): MotionVector, ForceVector, ImpedanceVector,
  AdmittanceVector
- Cross-product matrices (cross module)
- Spatial inertias (inertia module): RBInertia, ABInertia
- Plücker transforms (ptransform module): PTransform and pose helpers
"""

from . import cross
from . import vectors
from . import inertia
from . import ptransform

from .cross import (
    first_vec3,
    second_vec3,
    vector6_to_cross_dual_matrix,
    vector6_to_cross_matrix,
)
from .inertia import ABInertia, RBInertia, SymmetricMatrix3, inertia_to_origin
from .ptransform import PTransform, interpolate, transform_error, transform_velocity
from .vectors import (
    AdmittanceVector,
    ForceVector,
    ImpedanceVector,
    MotionVector,
    Role,
    SpatialVector,
)

__all__ = [
    "cross",
    "vectors",
    "inertia",
    "ptransform",
    "first_vec3",
    "second_vec3",
    "vector6_to_cross_matrix",
    "vector6_to_cross_dual_matrix",
    "SpatialVector",
    "Role",
    "MotionVector",
    "ForceVector",
    "ImpedanceVector",
    "AdmittanceVector",
    "SymmetricMatrix3",
    "RBInertia",
    "ABInertia",
    "inertia_to_origin",
    "PTransform",
    "transform_velocity",
    "transform_error",
    "interpolate",
]
