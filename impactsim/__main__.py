"""
Command-line interface for running a headless impactsim simulation.

Usage:
    # Earth and IMPACTOR-2025 (default), one simulated day per wall second
    python -m impactsim

    # Pick bodies from the catalogue and a faster clock
    python -m impactsim --bodies Earth Apophis Mars --time-scale 604800 --days 3650

    # Keep going after the first surface impact and show every event
    python -m impactsim --continue-after-impact --log-level INFO

    # List the catalogue
    python -m impactsim --list
"""

import argparse
import logging
import sys

from tqdm import tqdm

from impactsim.bodies import bodies_data
from impactsim.classification import CollisionKind
from impactsim.clock import format_time_scale
from impactsim.config import (
    DEFAULT_DURATION_DAYS,
    DEFAULT_TICK_SECONDS,
    DEFAULT_TIME_SCALE,
    make_simulation_config,
)
from impactsim.constants import DAY, KMPAU
from impactsim.impact_energy import estimate_event_energy
from impactsim.simulation import Simulation

DEFAULT_BODIES = ['Earth', 'IMPACTOR-2025']


def _build_parser():
    """
    Set up the argument parser.

    Returns
    -------
    argparse.ArgumentParser
        The configured parser
    """
    parser = argparse.ArgumentParser(
        prog='python -m impactsim',
        description='Propagate catalogue bodies on Keplerian orbits and report collisions.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m impactsim --bodies Earth IMPACTOR-2025 --days 120
  python -m impactsim --bodies Earth Apophis --time-scale 604800 --days 3650
"""
    )
    parser.add_argument('--bodies', nargs='+', default=DEFAULT_BODIES,
                        help=f"Catalogue bodies to simulate (default: {' '.join(DEFAULT_BODIES)})")
    parser.add_argument('--time-scale', type=float, default=DEFAULT_TIME_SCALE,
                        help='Simulated seconds per wall-clock second (default: %(default)s)')
    parser.add_argument('--tick', type=float, default=DEFAULT_TICK_SECONDS,
                        help='Wall-clock seconds per tick (default: %(default).4f)')
    parser.add_argument('--days', type=float, default=DEFAULT_DURATION_DAYS,
                        help='Simulated duration in days (default: %(default)s)')
    parser.add_argument('--continue-after-impact', action='store_true',
                        help='Keep running after the first surface impact')
    parser.add_argument('--density', type=float, default=None,
                        help='Projectile density in kg/m^3 for energy estimates')
    parser.add_argument('--list', action='store_true',
                        help='List the body catalogue and exit')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: %(default)s)')
    return parser


def _list_catalogue():
    for name, body in bodies_data.items():
        a_au = body.elements.a / KMPAU
        print(f"{name:<16} {body.role.value:<9} a={a_au:8.4f} AU  e={body.elements.e:.4f}  "
              f"radius={body.radius:g} km")


def _print_event(event, density):
    print(f"[{event.elapsed_seconds / DAY:10.4f} d] {event.describe()}")
    if event.collision_kind is not CollisionKind.CLOSE_APPROACH:
        energy = (estimate_event_energy(event) if density is None
                  else estimate_event_energy(event, density))
        print(f"    energy {energy.energy_j:.3e} J ({energy.megatons:.3e} Mt TNT), "
              f"transient crater {energy.crater_diameter_m / 1000.0:.2f} km")


def main(argv=None):
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    if args.list:
        _list_catalogue()
        return 0

    unknown = [name for name in args.bodies if name not in bodies_data]
    if unknown:
        raise SystemExit(f"Unknown bodies: {', '.join(unknown)}. Use --list to see the catalogue.")

    try:
        config = make_simulation_config(args.time_scale, args.tick)
    except ValueError as exc:
        raise SystemExit(str(exc))
    if config.time_scale == 0.0:
        raise SystemExit("--time-scale must be positive for a headless run")

    sim = Simulation([bodies_data[name] for name in args.bodies], config)
    duration = args.days * DAY
    n_ticks = sim.ticks_for(duration)
    print(f"Simulating {', '.join(args.bodies)} for {args.days:g} days "
          f"at {format_time_scale(config.time_scale)}/s ({n_ticks} ticks)")

    n_events = 0
    impacted = False
    for result in tqdm(sim.run(duration), total=n_ticks, unit='tick', file=sys.stderr):
        for event in result.events:
            n_events += 1
            _print_event(event, args.density)
            if event.collision_kind is CollisionKind.SURFACE_IMPACT:
                impacted = True
        if impacted and not args.continue_after_impact:
            print("Surface impact detected, simulation stopped.")
            break

    print(f"{n_events} collision event(s) in {sim.elapsed_seconds / DAY:.2f} simulated days")
    return 0


if __name__ == '__main__':
    sys.exit(main())
