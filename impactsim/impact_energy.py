"""
Impact energy estimates.

This module contains functions for turning a detected impact into rough physical
effects: projectile mass, kinetic energy, TNT equivalent and the transient crater
diameter from the Collins, Melosh & Marcus (2005) scaling law.
"""
from typing import NamedTuple

import jax.numpy as jnp
from jax import jit

from impactsim.constants import TNT_MEGATON_J

DEFAULT_PROJECTILE_DENSITY = 3000.0  # kg/m^3, stony asteroid
DEFAULT_TARGET_DENSITY = 2700.0  # kg/m^3, continental crust
SURFACE_GRAVITY = 9.81  # m/s^2


class ImpactEnergy(NamedTuple):
    mass_kg: float
    energy_j: float
    megatons: float
    crater_diameter_m: float


@jit
def projectile_mass(diameter_m: float, density: float = DEFAULT_PROJECTILE_DENSITY) -> float:
    """
    Mass of a spherical projectile, m = pi/6 * D^3 * rho.

    Args:
        diameter_m: projectile diameter (m)
        density: projectile density (kg/m^3)

    Returns:
        mass (kg)
    """
    return jnp.pi / 6.0 * diameter_m**3 * density


@jit
def kinetic_energy(mass_kg: float, speed_m_s: float) -> float:
    """Kinetic energy E = 1/2 m v^2 (J)."""
    return 0.5 * mass_kg * speed_m_s**2


@jit
def tnt_megatons(energy_j: float) -> float:
    """TNT equivalent of an energy in megatons."""
    return energy_j / TNT_MEGATON_J


@jit
def transient_crater_diameter(diameter_m: float, speed_m_s: float,
                              density: float = DEFAULT_PROJECTILE_DENSITY,
                              target_density: float = DEFAULT_TARGET_DENSITY,
                              gravity: float = SURFACE_GRAVITY) -> float:
    """
    Transient crater diameter (m) for a vertical impact,
    D_c = 1.161 * (rho / rho_t)^(1/3) * D^0.78 * v^0.44 * g^-0.22.
    """
    return (1.161 * (density / target_density)**(1.0 / 3.0)
            * diameter_m**0.78 * speed_m_s**0.44 * gravity**-0.22)


def estimate_event_energy(event, density: float = DEFAULT_PROJECTILE_DENSITY) -> ImpactEnergy:
    """
    Energy estimate for a collision event.

    The projectile is the body that is not the Earth-like planet, or the smaller
    of the two when neither is.

    Args:
        event: CollisionEvent to evaluate
        density: projectile density (kg/m^3)

    Returns:
        ImpactEnergy with SI values
    """
    a, b = event.body_a, event.body_b
    if a.is_earth_like():
        projectile = b
    elif b.is_earth_like():
        projectile = a
    else:
        projectile = a if a.radius <= b.radius else b

    diameter_m = 2.0 * projectile.radius * 1000.0
    speed_m_s = event.relative_speed_km_s * 1000.0

    mass = projectile_mass(diameter_m, density)
    energy = kinetic_energy(mass, speed_m_s)
    return ImpactEnergy(
        mass_kg=float(mass),
        energy_j=float(energy),
        megatons=float(tnt_megatons(energy)),
        crater_diameter_m=float(transient_crater_diameter(diameter_m, speed_m_s, density)),
    )
