"""
Physical and simulation constants for impactsim.

This module contains all constants used throughout the propagation and collision
detection engine. Distances are in km, times in seconds, angles in degrees unless
stated otherwise.
"""

# Basic astronomical and time constants
KMPAU = 149597870.7  # km per AU
MU_SUN = 1.32712440018e11  # km^3/s^2 (gravitational parameter of the Sun)
MU_EARTH = 3.986004418e5  # km^3/s^2 (gravitational parameter of the Earth)
DAY = 86400.0  # seconds per day
YEAR = 365.25 * DAY  # seconds per year

# Earth geometry used by the impact classifier
EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_TOLERANCE_KM = 1.0  # a planet within this of EARTH_RADIUS_KM is "Earth-like"
ATMOSPHERE_HEIGHT_KM = 100.0

# Collision detection
COLLISION_COOLDOWN_S = 2.0  # simulated seconds between events for the same pair

# Kepler solver limits
KEPLER_TOL = 1e-6  # rad, on the Newton step
KEPLER_MAX_ITER = 50

# Bodies with |a| below this are pinned to the origin
STATIONARY_EPS_KM = 1e-6

# Energy conversions
TNT_MEGATON_J = 4.184e15  # J per megaton of TNT

# Time-scale presets (simulated seconds per wall-clock second)
SPEED_PRESETS = (1, 60, 3600, 86400, 604800, 2592000)
