# Configure JAX to use double precision (64-bit floats) throughout the package
import jax
jax.config.update("jax_enable_x64", True)

from .orbital_elements import OrbitalElements
from .cartesian_state import CartesianState

from .constants import (
    # Constants
    KMPAU,
    MU_SUN,
    MU_EARTH,
    DAY,
    YEAR,
    EARTH_RADIUS_KM,
    ATMOSPHERE_HEIGHT_KM,
    COLLISION_COOLDOWN_S,
    SPEED_PRESETS,
)

from .astrodynamics import (
    # Functions
    solve_kepler,
    true_anomaly,
    elements_to_cartesian,
    elements_to_pos_vel,
    state_at,
    position_at,
    velocity_at,
    propagate_all,
    period_from_semi_major_axis,
    orbit_points,
)

from .bodies import (
    # Body class
    Body,
    BodyRole,
    load_bodies_data,
    bodies_data
)

from .clock import SimulationClock, format_time_scale

from .classification import (
    ImpactSeverity,
    CollisionKind,
    entry_angle_deg,
    impact_severity,
    collision_kind,
    classify,
)

from .collisions import CollisionEvent, pair_key, check_all_pairs

from .impact_energy import ImpactEnergy, estimate_event_energy

from .config import SimulationConfig, make_simulation_config

from .simulation import Simulation, TickResult

__all__ = [
    # Constants
    "KMPAU",
    "MU_SUN",
    "MU_EARTH",
    "DAY",
    "YEAR",
    "EARTH_RADIUS_KM",
    "ATMOSPHERE_HEIGHT_KM",
    "COLLISION_COOLDOWN_S",
    "SPEED_PRESETS",

    # Named tuples
    "OrbitalElements",
    "CartesianState",

    # Propagation
    "solve_kepler",
    "true_anomaly",
    "elements_to_cartesian",
    "elements_to_pos_vel",
    "state_at",
    "position_at",
    "velocity_at",
    "propagate_all",
    "period_from_semi_major_axis",
    "orbit_points",

    # Bodies
    "Body",
    "BodyRole",
    "load_bodies_data",
    "bodies_data",

    # Clock
    "SimulationClock",
    "format_time_scale",

    # Classification
    "ImpactSeverity",
    "CollisionKind",
    "entry_angle_deg",
    "impact_severity",
    "collision_kind",
    "classify",

    # Collisions
    "CollisionEvent",
    "pair_key",
    "check_all_pairs",

    # Energy
    "ImpactEnergy",
    "estimate_event_energy",

    # Simulation
    "SimulationConfig",
    "make_simulation_config",
    "Simulation",
    "TickResult",
]
