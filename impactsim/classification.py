"""
Impact classification.

Given the relative geometry of a detected collision this module assigns an
entry-severity category from the entry angle, and a collision kind from how
deep the other body reached into an Earth-like planet.
"""
from enum import Enum
from typing import NamedTuple

import numpy as np

from impactsim.bodies import Body
from impactsim.constants import EARTH_RADIUS_KM, ATMOSPHERE_HEIGHT_KM


class ImpactSeverity(str, Enum):
    DIRECT_IMPACT = 'DIRECT_IMPACT'
    SEVERE_IMPACT = 'SEVERE_IMPACT'
    MODERATE_IMPACT = 'MODERATE_IMPACT'
    LIGHT_IMPACT = 'LIGHT_IMPACT'
    ATMOSPHERIC_GRAZING = 'ATMOSPHERIC_GRAZING'


class CollisionKind(str, Enum):
    CLOSE_APPROACH = 'CLOSE_APPROACH'
    ATMOSPHERIC_ENTRY = 'ATMOSPHERIC_ENTRY'
    SURFACE_IMPACT = 'SURFACE_IMPACT'


# Upper bounds (deg, exclusive) checked in order, lowest angle first
SEVERITY_THRESHOLDS = (
    (15.0, ImpactSeverity.DIRECT_IMPACT),
    (30.0, ImpactSeverity.SEVERE_IMPACT),
    (45.0, ImpactSeverity.MODERATE_IMPACT),
    (60.0, ImpactSeverity.LIGHT_IMPACT),
)

# Returned when either vector has zero length
DEGENERATE_ENTRY_ANGLE_DEG = 90.0


class Classification(NamedTuple):
    entry_angle_deg: float
    impact_severity: ImpactSeverity
    collision_kind: CollisionKind


def entry_angle_deg(relative_velocity, relative_position) -> float:
    """
    Angle (deg) between the relative velocity and the line of centres.

    The absolute value of the cosine is used, so the result lies in [0, 90] and an
    approach from one side is indistinguishable from its mirror image.
    """
    v = np.asarray(relative_velocity, dtype=float)
    p = np.asarray(relative_position, dtype=float)
    v_norm = np.linalg.norm(v)
    p_norm = np.linalg.norm(p)
    if v_norm == 0.0 or p_norm == 0.0:
        return DEGENERATE_ENTRY_ANGLE_DEG

    cos_angle = np.clip(abs(np.dot(v / v_norm, p / p_norm)), 0.0, 1.0)
    return float(np.degrees(np.arccos(cos_angle)))


def impact_severity(angle_deg: float) -> ImpactSeverity:
    for upper, severity in SEVERITY_THRESHOLDS:
        if angle_deg < upper:
            return severity
    return ImpactSeverity.ATMOSPHERIC_GRAZING


def collision_kind(body_a: Body, body_b: Body, center_distance_km: float) -> CollisionKind:
    """
    Decide whether an event is a surface impact, an atmospheric entry or just a close approach.

    Only pairs that involve an Earth-like planet can be more than a close approach.
    """
    if body_a.is_earth_like():
        other = body_b
    elif body_b.is_earth_like():
        other = body_a
    else:
        return CollisionKind.CLOSE_APPROACH

    if center_distance_km <= EARTH_RADIUS_KM + other.radius:
        return CollisionKind.SURFACE_IMPACT
    if center_distance_km <= EARTH_RADIUS_KM + ATMOSPHERE_HEIGHT_KM:
        return CollisionKind.ATMOSPHERIC_ENTRY
    return CollisionKind.CLOSE_APPROACH


def classify(body_a: Body, body_b: Body, relative_position, relative_velocity) -> Classification:
    """Run the whole classifier on one pair's relative geometry."""
    angle = entry_angle_deg(relative_velocity, relative_position)
    distance = float(np.linalg.norm(np.asarray(relative_position, dtype=float)))
    return Classification(
        entry_angle_deg=angle,
        impact_severity=impact_severity(angle),
        collision_kind=collision_kind(body_a, body_b, distance),
    )
