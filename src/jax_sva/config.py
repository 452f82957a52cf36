"""Runtime configuration shared by every jax_sva module."""

import logging

import jax
import jax.numpy as jnp

logger = logging.getLogger(__name__)

# Spatial algebra is carried out in double precision.
DTYPE = jnp.float64


def enable_x64(enabled: bool = True) -> None:
    """Switch JAX double precision on or off.

    Called once when ``jax_sva`` is imported. Arrays created before the
    switch keep their original dtype.
    """
    jax.config.update("jax_enable_x64", enabled)
    logger.debug("jax_enable_x64 set to %s", enabled)
