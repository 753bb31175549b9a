"""Simulation clock driven by wall-clock ticks and a time scale."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SimulationClock:
    """
    Accumulates simulated time since epoch.

    ``elapsed_seconds`` only grows while the simulation runs. A time scale of zero
    freezes it, which is how the simulation pauses.
    """

    elapsed_seconds: float = 0.0

    def advance(self, wall_dt: float, time_scale: float) -> float:
        """Add ``wall_dt * time_scale`` simulated seconds and return the new elapsed time."""
        if time_scale < 0.0:
            raise ValueError(f"time_scale must be non-negative, got {time_scale}")
        if wall_dt < 0.0:
            raise ValueError(f"wall_dt must be non-negative, got {wall_dt}")
        self.elapsed_seconds += wall_dt * time_scale
        return self.elapsed_seconds

    def reset(self) -> None:
        """Return to the epoch."""
        self.elapsed_seconds = 0.0


def format_time_scale(scale: float) -> str:
    """Human readable label for a time scale, e.g. ``"1.0 h"`` for 3600."""
    if scale < 60:
        return f"{scale:.0f} s"
    if scale < 3600:
        return f"{scale / 60:.{0 if scale >= 600 else 1}f} min"
    if scale < 86400:
        return f"{scale / 3600:.{0 if scale >= 36000 else 1}f} h"
    return f"{scale / 86400:.{0 if scale >= 86400 * 10 else 1}f} days"


__all__ = ["SimulationClock", "format_time_scale"]
