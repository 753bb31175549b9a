"""
Tick driver tying the clock, the propagator and the collision detector together.

A host (renderer, notebook, command line) calls ``Simulation.tick`` once per
frame with the wall-clock time that passed. Each tick advances the clock by that
time multiplied by the current time scale, propagates every body and returns
the positions along with any new collision events.
"""
from __future__ import annotations

import logging
import math
from collections import deque
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Sequence

import numpy as np

from impactsim.astrodynamics import propagate_all
from impactsim.bodies import Body
from impactsim.clock import SimulationClock, format_time_scale
from impactsim.collisions import CollisionEvent, CooldownMap, check_all_pairs
from impactsim.config import SimulationConfig

logger = logging.getLogger(__name__)


class TickResult(NamedTuple):
    elapsed_seconds: float
    positions: Dict[str, np.ndarray]
    events: List[CollisionEvent]


class Simulation:
    """
    Owns the body list, the clock, the cooldown map and a short log of recent events.

    Nothing here is shared between instances, so independent simulations can run
    side by side.
    """

    def __init__(self, bodies: Iterable[Body], config: Optional[SimulationConfig] = None) -> None:
        self.bodies: List[Body] = list(bodies)
        names = [body.name for body in self.bodies]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Body names must be unique, duplicated: {', '.join(duplicates)}")

        self.config = config if config is not None else SimulationConfig()
        self.clock = SimulationClock()
        self.last_flagged: CooldownMap = {}
        self.recent_events: deque[CollisionEvent] = deque(maxlen=self.config.event_log_size)
        self._time_scale = self.config.time_scale
        self._resume_scale = self._time_scale or 1.0

    @property
    def time_scale(self) -> float:
        return self._time_scale

    def set_time_scale(self, time_scale: float) -> None:
        if time_scale < 0.0:
            raise ValueError(f"time_scale must be non-negative, got {time_scale}")
        self._time_scale = float(time_scale)
        if time_scale > 0.0:
            self._resume_scale = self._time_scale
        logger.debug("Time scale set to %s", format_time_scale(self._time_scale))

    @property
    def paused(self) -> bool:
        return self._time_scale == 0.0

    def pause(self) -> None:
        if not self.paused:
            self._resume_scale = self._time_scale
        self._time_scale = 0.0

    def resume(self) -> None:
        self._time_scale = self._resume_scale

    def reset(self) -> None:
        """Back to the epoch, forgetting cooldowns and the event log."""
        self.clock.reset()
        self.last_flagged.clear()
        self.recent_events.clear()
        logger.debug("Simulation reset to epoch")

    @property
    def elapsed_seconds(self) -> float:
        return self.clock.elapsed_seconds

    def get_body(self, name: str) -> Body:
        for body in self.bodies:
            if body.name == name:
                return body
        raise KeyError(f"No body named '{name}' in this simulation")

    def positions(self) -> Dict[str, np.ndarray]:
        """Positions (km) of all bodies at the current simulated time."""
        r, _ = propagate_all(self.bodies, self.clock.elapsed_seconds)
        return {body.name: r[k] for k, body in enumerate(self.bodies)}

    def tick(self, wall_dt: Optional[float] = None) -> TickResult:
        """
        Advance by one frame.

        Args:
            wall_dt: Wall-clock seconds since the previous tick, defaults to the
                configured tick length.
        """
        if wall_dt is None:
            wall_dt = self.config.tick_seconds
        t = self.clock.advance(wall_dt, self._time_scale)

        states = propagate_all(self.bodies, t)
        events = check_all_pairs(self.bodies, self.clock, self.last_flagged,
                                 cooldown=self.config.cooldown_s, states=states)
        for event in events:
            self.recent_events.appendleft(event)

        positions = {body.name: states[0][k] for k, body in enumerate(self.bodies)}
        return TickResult(elapsed_seconds=t, positions=positions, events=events)

    def run(self, duration: float, wall_dt: Optional[float] = None) -> Iterator[TickResult]:
        """
        Yield ticks until ``duration`` simulated seconds have passed from the current time.

        The time scale must be positive, otherwise the clock would never get there.
        """
        if wall_dt is None:
            wall_dt = self.config.tick_seconds
        n_ticks = self.ticks_for(duration, wall_dt)
        for _ in range(n_ticks):
            yield self.tick(wall_dt)

    def ticks_for(self, duration: float, wall_dt: Optional[float] = None) -> int:
        """Number of ticks ``run`` needs to cover ``duration`` simulated seconds."""
        if wall_dt is None:
            wall_dt = self.config.tick_seconds
        if self._time_scale <= 0.0:
            raise ValueError("Cannot run a paused simulation, set a positive time scale first")
        return max(0, math.ceil(duration / (wall_dt * self._time_scale)))

    def collision_subset(self, names: Sequence[str]) -> 'Simulation':
        """
        A fresh simulation restricted to the named bodies, e.g. just the Earth and an impactor.

        The clock is carried over, cooldowns and the event log start empty.
        """
        subset = Simulation([self.get_body(name) for name in names], self.config)
        subset.clock.elapsed_seconds = self.clock.elapsed_seconds
        subset.set_time_scale(self._time_scale)
        return subset
