"""
Orbital elements representation for orbiting bodies.
"""
from typing import NamedTuple

import numpy as np

from impactsim.constants import DAY, MU_SUN


class OrbitalElements(NamedTuple):
    """
    Keplerian orbital elements for a body around a central mass.

    Unlike the JAX kernels, which work in radians and seconds, the elements are
    stored the way catalogues publish them: angles in degrees and the period in days.

    Attributes:
        a: Semi-major axis (km)
        e: Eccentricity (dimensionless, 0 ≤ e < 1)
        i: Inclination relative to reference plane (deg)
        Omega: Longitude of the ascending node (deg)
        omega: Argument of periapsis (deg)
        M0: Mean anomaly at epoch t=0 (deg)
        period_days: Orbital period (days)
        mu: Gravitational parameter of the central body (km^3/s^2)

    Note:
        - Angles may take any real value, they are reduced mod 360 before use.
        - Parabolic and hyperbolic orbits (e ≥ 1) are not supported.
    """
    a: float  # semi-major axis (km)
    e: float  # eccentricity
    i: float  # inclination (deg)
    Omega: float  # longitude of ascending node (deg)
    omega: float  # argument of periapsis (deg)
    M0: float  # mean anomaly at epoch (deg)
    period_days: float  # orbital period (days)
    mu: float = MU_SUN  # gravitational parameter (km^3/s^2)

    def to_array(self) -> np.ndarray:
        """
        Pack the elements into the row layout used by the propagation kernels.

        Returns:
            float64 array [a, e, i, Omega, omega, M0, period_s, mu] with the
            angles normalized to [0, 360) and converted to radians.
        """
        angles = np.deg2rad(np.mod([self.i, self.Omega, self.omega, self.M0], 360.0))
        return np.array([self.a, self.e, *angles, self.period_days * DAY, self.mu],
                        dtype=np.float64)
