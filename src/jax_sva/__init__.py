"""
JAX SVA: spatial vector algebra for rigid-body dynamics.

This library provides immutable, JIT-compilable motion, force, impedance and
admittance vectors, Plücker coordinate transforms and spatial inertias
built on JAX.
"""

import logging

from . import config

logging.getLogger(__name__).addHandler(logging.NullHandler())

config.enable_x64()

# Import core modules
from . import transforms
from . import spatial

from .spatial import (
    ABInertia,
    AdmittanceVector,
    ForceVector,
    ImpedanceVector,
    MotionVector,
    PTransform,
    RBInertia,
)

__version__ = "0.1.0"
__all__ = [
    "transforms",
    "spatial",
    "config",
    "MotionVector",
    "ForceVector",
    "ImpedanceVector",
    "AdmittanceVector",
    "PTransform",
    "RBInertia",
    "ABInertia",
]
