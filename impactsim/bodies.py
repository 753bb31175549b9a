import csv
import logging
import math
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

import numpy as np
import pydantic
from pydantic import ConfigDict, Field

from impactsim.constants import (
    DAY, YEAR, MU_SUN, EARTH_RADIUS_KM, EARTH_RADIUS_TOLERANCE_KM, STATIONARY_EPS_KM
)
from impactsim.orbital_elements import OrbitalElements

logger = logging.getLogger(__name__)


class BodyRole(str, Enum):
    """What a body represents. Only the impact classifier looks at this."""
    PLANET = 'planet'
    NEAR_EARTH_OBJECT = 'neo'
    IMPACTOR = 'impactor'


class Body(pydantic.BaseModel):
    """
    Represents an orbiting body in the simulation.

    Attributes:
        name: Unique name of the body (e.g., "Earth", "IMPACTOR-2025"), used as its id
        elements: Orbital elements of the body
        radius: Physical radius of the body (km)
        is_stationary: Pin the body to the origin, e.g. a planet used as the centre of the view
        role: Planet, near-Earth object or impactor

    Orbital elements are checked here, at the constructor boundary, so that the
    propagation kernels never see an orbit they cannot handle.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)  # Allow OrbitalElements (NamedTuple)

    name: str = Field(..., min_length=1)
    elements: OrbitalElements
    radius: float = Field(..., ge=0.0, description="Physical radius (km)")
    is_stationary: bool = False
    role: BodyRole = BodyRole.PLANET

    @pydantic.field_validator('elements')
    @classmethod
    def validate_elements(cls, v):
        if not all(math.isfinite(x) for x in v):
            raise ValueError(f"orbital elements must be finite, got {tuple(v)}")
        if not 0.0 <= v.e < 1.0:
            raise ValueError(f"eccentricity must be in [0, 1), got {v.e}")
        if v.mu <= 0.0:
            raise ValueError(f"gravitational parameter must be positive, got {v.mu}")
        return v

    @pydantic.model_validator(mode='after')
    def validate_orbit_size(self):
        if self.is_stationary:
            return self
        if self.elements.a <= 0.0:
            raise ValueError(f"{self.name}: semi-major axis must be positive for a moving body, "
                             f"got {self.elements.a}")
        if self.elements.period_days <= 0.0:
            raise ValueError(f"{self.name}: orbital period must be positive for a moving body, "
                             f"got {self.elements.period_days}")
        return self

    def get_state(self, epoch: float, time_units: str = 's'):
        """
        Get the Cartesian state (position and velocity) of the body at a given epoch.

        Args:
            epoch: Time past t=0 in the units specified by time_units
            time_units: Units of the input epoch. Options:
                - 's' or 'seconds': epoch in seconds (default)
                - 'day' or 'days': epoch in days
                - 'year' or 'years': epoch in years

        Returns:
            CartesianState with position in km and velocity in km/s

        Examples:
            >>> earth = bodies_data['Earth']
            >>> state = earth.get_state(0.0)
            >>> state = earth.get_state(0.5, time_units='year')
        """
        from impactsim.astrodynamics import state_at

        if time_units in ('s', 'seconds'):
            epoch_seconds = epoch
        elif time_units in ('day', 'days'):
            epoch_seconds = epoch * DAY
        elif time_units in ('year', 'years'):
            epoch_seconds = epoch * YEAR
        else:
            raise ValueError(f"Invalid time_units '{time_units}'. Must be one of: 's', 'day', 'year'")

        return state_at(self, epoch_seconds)

    def get_period(self, units: str = 'day') -> float:
        """
        Orbital period of the body as catalogued.

        Args:
            units: 's', 'day' (default) or 'year'

        Returns:
            Orbital period in the specified units
        """
        period_seconds = self.elements.period_days * DAY

        units_lower = units.lower()
        if units_lower in ('s', 'seconds'):
            return period_seconds
        elif units_lower in ('day', 'days'):
            return self.elements.period_days
        elif units_lower in ('year', 'years'):
            return period_seconds / YEAR
        else:
            raise ValueError(f"Invalid units '{units}'. Must be one of: 's', 'day', 'year'")

    def orbit_points(self, segments: int = 256) -> np.ndarray:
        """Points along the orbit ring (km), see ``astrodynamics.orbit_points``."""
        from impactsim.astrodynamics import orbit_points
        return orbit_points(self, segments)

    def is_earth_like(self) -> bool:
        """A planet whose radius matches the Earth's to within a kilometre."""
        return (self.role is BodyRole.PLANET
                and abs(self.radius - EARTH_RADIUS_KM) <= EARTH_RADIUS_TOLERANCE_KM)

    def __repr__(self) -> str:
        return f"Body(name='{self.name}', role={self.role.value}, radius={self.radius})"

    def __str__(self) -> str:
        return f"{self.name} ({self.role.value})"


DATA_DIR = Path(__file__).parent / 'data'

# Configuration for each catalogue file
BODY_CONFIGS = [
    {
        'filename': 'planets.csv',
        'role': BodyRole.PLANET,
    },
    {
        'filename': 'small_bodies.csv',
        'role_key': 'Role',
    },
]


def _optional_float(row: dict, key: str) -> Optional[float]:
    value = (row.get(key) or '').strip()
    return float(value) if value else None


def _body_from_row(row: dict, config: dict) -> Body:
    from impactsim.astrodynamics import period_from_semi_major_axis

    a = float(row['Semi-Major Axis (km)'])
    mu = _optional_float(row, 'GM (km3/s2)') or MU_SUN
    stationary = (row.get('Stationary') or '').strip().lower() in ('1', 'true', 'yes')

    # Catalogues may leave the period out, fall back to Kepler's third law
    period_days = _optional_float(row, 'Orbital Period (days)')
    if period_days is None:
        period_days = period_from_semi_major_axis(a, mu) / DAY if abs(a) >= STATIONARY_EPS_KM else 0.0

    elements = OrbitalElements(
        a=a,
        e=float(row['Eccentricity ()']),
        i=float(row['Inclination (deg)']),
        Omega=float(row['Longitude of the Ascending Node (deg)']),
        omega=float(row['Argument of Periapsis (deg)']),
        M0=float(row['Mean Anomaly at t=0 (deg)']),
        period_days=period_days,
        mu=mu,
    )

    if 'role_key' in config:
        role = BodyRole(row[config['role_key']].strip().lower())
    else:
        role = config['role']

    return Body(
        name=row['Name'].strip(),
        elements=elements,
        radius=float(row['Radius (km)']),
        is_stationary=stationary,
        role=role,
    )


def load_bodies_data(filenames: Optional[Iterable[str]] = None,
                     data_dir: Optional[Path] = None) -> dict[str, Body]:
    """
    Load bodies (planets, near-Earth objects, impactors) from CSV catalogues.

    Args:
        filenames: Restrict loading to these catalogue files. A requested file
            that does not exist raises FileNotFoundError. By default every known
            catalogue that is present is loaded.
        data_dir: Directory holding the catalogues (defaults to the bundled data)

    Returns:
        Dictionary mapping body name to Body object
    """
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
    bodies = {}

    if filenames is None:
        configs = BODY_CONFIGS
        required = False
    else:
        known = {config['filename']: config for config in BODY_CONFIGS}
        configs = [known.get(fn, {'filename': fn, 'role_key': 'Role'}) for fn in filenames]
        required = True

    for config in configs:
        filepath = data_dir / config['filename']

        if not filepath.exists():
            if required:
                raise FileNotFoundError(f"Body catalogue not found: {filepath}")
            continue

        with open(filepath, 'r', encoding='utf-8') as f:
            reader = csv.DictReader(f)
            for line_no, row in enumerate(reader, start=2):
                try:
                    body = _body_from_row(row, config)
                except (ValueError, pydantic.ValidationError) as exc:
                    logger.warning("Skipping %s line %d: %s", config['filename'], line_no, exc)
                    continue
                if body.name in bodies:
                    logger.warning("Duplicate body '%s' in %s line %d replaces the earlier entry",
                                   body.name, config['filename'], line_no)
                bodies[body.name] = body

    return bodies


bodies_data = load_bodies_data()
