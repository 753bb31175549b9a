from __future__ import annotations

from dataclasses import dataclass

from impactsim.constants import COLLISION_COOLDOWN_S, DAY

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_TIME_SCALE = DAY  # one simulated day per wall-clock second
DEFAULT_TICK_SECONDS = 1.0 / 60.0  # wall-clock seconds per tick
DEFAULT_EVENT_LOG_SIZE = 10  # most recent events kept by a Simulation
DEFAULT_DURATION_DAYS = 120.0


@dataclass(frozen=True, slots=True)
class SimulationConfig:
    time_scale: float = DEFAULT_TIME_SCALE
    tick_seconds: float = DEFAULT_TICK_SECONDS
    cooldown_s: float = COLLISION_COOLDOWN_S
    event_log_size: int = DEFAULT_EVENT_LOG_SIZE


def make_simulation_config(
    time_scale: float = DEFAULT_TIME_SCALE,
    tick_seconds: float = DEFAULT_TICK_SECONDS,
    *,
    cooldown_s: float = COLLISION_COOLDOWN_S,
    event_log_size: int = DEFAULT_EVENT_LOG_SIZE,
) -> SimulationConfig:
    if time_scale < 0.0:
        raise ValueError(f"time_scale must be non-negative, got {time_scale}")
    if tick_seconds <= 0.0:
        raise ValueError(f"tick_seconds must be positive, got {tick_seconds}")
    if cooldown_s < 0.0:
        raise ValueError(f"cooldown_s must be non-negative, got {cooldown_s}")
    if event_log_size < 1:
        raise ValueError(f"event_log_size must be at least 1, got {event_log_size}")
    return SimulationConfig(
        time_scale=float(time_scale),
        tick_seconds=float(tick_seconds),
        cooldown_s=float(cooldown_s),
        event_log_size=int(event_log_size),
    )
