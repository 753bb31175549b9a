"""
Cartesian state representation.
"""
from typing import NamedTuple
import jax.numpy as jnp


class CartesianState(NamedTuple):
    """
    Cartesian state of an orbiting body.

    Position and velocity are expressed in the inertial frame centred on the
    central mass. The state is compatible with JAX transformations.

    Attributes:
        r: Position vector [x, y, z] in km
        v: Velocity vector [vx, vy, vz] in km/s

    Examples:
        >>> import jax.numpy as jnp
        >>> state = CartesianState(
        ...     r=jnp.array([1.496e8, 0.0, 0.0]),  # 1 AU from the Sun
        ...     v=jnp.array([0.0, 29.78, 0.0])     # Earth's mean orbital speed
        ... )
    """
    r: jnp.ndarray  # position [x, y, z] (km)
    v: jnp.ndarray  # velocity [vx, vy, vz] (km/s)
