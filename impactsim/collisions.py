"""
Collision detection between propagated bodies.

Every tick, each unordered pair of bodies is checked for overlap of their
spheres. A pair that keeps overlapping is reported again only after a cooldown
of simulated time has passed, which keeps a long overlap from flooding the
caller with events.

The cooldown bookkeeping lives in a plain dict owned by the caller and passed in
on every call. Nothing else is mutated, so detection is deterministic and easy
to test.
"""
import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from impactsim.astrodynamics import propagate_all
from impactsim.bodies import Body
from impactsim.classification import CollisionKind, ImpactSeverity, classify
from impactsim.clock import SimulationClock
from impactsim.constants import COLLISION_COOLDOWN_S

logger = logging.getLogger(__name__)

PairKey = Tuple[str, str]
CooldownMap = Dict[PairKey, float]


def pair_key(body_a: Body, body_b: Body) -> PairKey:
    """Order-independent key for a pair of bodies."""
    if body_a.name <= body_b.name:
        return (body_a.name, body_b.name)
    return (body_b.name, body_a.name)


class CollisionEvent(BaseModel):
    """
    A single detected overlap between two bodies.
    """
    model_config = ConfigDict(frozen=True)

    body_a: Body
    body_b: Body
    distance_km: float = Field(..., ge=0.0, description="Centre-to-centre distance (km)")
    threshold_km: float = Field(..., ge=0.0, description="Sum of the two radii (km)")
    elapsed_seconds: float = Field(..., description="Simulated time of detection (s past epoch)")
    relative_speed_km_s: float = Field(..., ge=0.0, description="Magnitude of the relative velocity (km/s)")
    entry_angle_deg: float = Field(..., ge=0.0, le=90.0)
    impact_severity: ImpactSeverity
    collision_kind: CollisionKind

    @property
    def pair(self) -> PairKey:
        return pair_key(self.body_a, self.body_b)

    def describe(self) -> str:
        """One-line summary for logs and terminals."""
        return (
            f"t={self.elapsed_seconds:.1f} s {self.body_a.name} <-> {self.body_b.name}: "
            f"{self.collision_kind.value} / {self.impact_severity.value}, "
            f"distance {self.distance_km:.1f} km (threshold {self.threshold_km:.1f} km), "
            f"angle {self.entry_angle_deg:.1f} deg, v_rel {self.relative_speed_km_s:.3f} km/s"
        )


def check_all_pairs(
    bodies: Sequence[Body],
    clock: SimulationClock,
    last_flagged: CooldownMap,
    cooldown: float = COLLISION_COOLDOWN_S,
    states: Optional[Tuple[np.ndarray, np.ndarray]] = None,
) -> List[CollisionEvent]:
    """
    Detect and classify overlapping pairs at the clock's current time.

    Args:
        bodies: Bodies to check, every unordered pair is examined once.
        clock: Supplies the simulated time.
        last_flagged: Cooldown map, pair key -> elapsed time of the last event.
            Updated in place for every emitted event.
        cooldown: A pair must wait strictly longer than this many simulated
            seconds before it is reported again.
        states: Positions and velocities already propagated to the clock's
            time, as returned by ``propagate_all``. Computed when omitted.

    Returns:
        Newly detected events, in pair order.
    """
    t = clock.elapsed_seconds
    if states is None:
        states = propagate_all(bodies, t)
    r, v = states

    events = []
    n = len(bodies)
    for i in range(n):
        body_a = bodies[i]
        for j in range(i + 1, n):
            body_b = bodies[j]

            rel_p = r[j] - r[i]
            distance = float(np.linalg.norm(rel_p))
            threshold = body_a.radius + body_b.radius
            if not distance < threshold:
                continue

            key = pair_key(body_a, body_b)
            last = last_flagged.get(key)
            if last is not None and t - last <= cooldown:
                logger.debug("Overlap %s <-> %s at t=%.3f suppressed (last event at t=%.3f)",
                             key[0], key[1], t, last)
                continue
            last_flagged[key] = t

            rel_v = v[j] - v[i]
            result = classify(body_a, body_b, rel_p, rel_v)
            event = CollisionEvent(
                body_a=body_a,
                body_b=body_b,
                distance_km=distance,
                threshold_km=threshold,
                elapsed_seconds=t,
                relative_speed_km_s=float(np.linalg.norm(rel_v)),
                entry_angle_deg=result.entry_angle_deg,
                impact_severity=result.impact_severity,
                collision_kind=result.collision_kind,
            )
            logger.info("Collision: %s", event.describe())
            events.append(event)

    return events
