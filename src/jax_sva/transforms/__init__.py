"""
Rotation math for the spatial algebra.

This module provides pure, JIT-compilable implementations of:
- SO(3) helpers (so3 module): cross matrices, elementary rotations and
  rotation-velocity recovery
- Quaternion conversions and interpolation (rotation module)
"""

from . import so3
from . import rotation

__all__ = [
    "so3",
    "rotation",
]
