import math
import unittest

from impactsim.bodies import Body, BodyRole
from impactsim.classification import CollisionKind, ImpactSeverity
from impactsim.collisions import CollisionEvent
from impactsim.constants import MU_EARTH
from impactsim.impact_energy import (
    estimate_event_energy,
    kinetic_energy,
    projectile_mass,
    tnt_megatons,
    transient_crater_diameter,
)
from impactsim.orbital_elements import OrbitalElements

PINNED = OrbitalElements(a=0.0, e=0.0, i=0.0, Omega=0.0, omega=0.0, M0=0.0, period_days=0.0, mu=MU_EARTH)


def _event(body_a, body_b, speed):
    return CollisionEvent(
        body_a=body_a, body_b=body_b, distance_km=0.0, threshold_km=body_a.radius + body_b.radius,
        elapsed_seconds=0.0, relative_speed_km_s=speed, entry_angle_deg=0.0,
        impact_severity=ImpactSeverity.DIRECT_IMPACT, collision_kind=CollisionKind.SURFACE_IMPACT,
    )


class TestImpactEnergy(unittest.TestCase):

    def test_projectile_mass(self):
        self.assertAlmostEqual(float(projectile_mass(1000.0, 3000.0)) / 1.5707963267948966e12, 1.0, places=12)
        self.assertAlmostEqual(float(projectile_mass(1000.0)) / 1.5707963267948966e12, 1.0, places=12)

    def test_kinetic_energy_and_tnt(self):
        self.assertAlmostEqual(float(kinetic_energy(2.0, 3.0)), 9.0)
        self.assertAlmostEqual(float(tnt_megatons(4.184e15)), 1.0)

    def test_crater_scaling(self):
        d = float(transient_crater_diameter(100.0, 20000.0, 3000.0, 2700.0, 9.81))
        expected = 1.161 * (3000.0 / 2700.0)**(1.0 / 3.0) * 100.0**0.78 * 20000.0**0.44 * 9.81**-0.22
        self.assertAlmostEqual(d / expected, 1.0, places=12)

        # Faster and bigger projectiles dig bigger craters
        self.assertGreater(float(transient_crater_diameter(200.0, 20000.0)), d)
        self.assertGreater(float(transient_crater_diameter(100.0, 30000.0)), d)

    def test_event_projectile_is_the_non_earth_body(self):
        earth = Body(name='Earth', elements=PINNED, radius=6371.0, is_stationary=True)
        rock = Body(name='Rock', elements=PINNED, radius=0.5, is_stationary=True, role=BodyRole.IMPACTOR)
        for event in (_event(earth, rock, 20.0), _event(rock, earth, 20.0)):
            energy = estimate_event_energy(event)
            mass = math.pi / 6.0 * 1000.0**3 * 3000.0
            self.assertAlmostEqual(energy.mass_kg / mass, 1.0, places=12)
            self.assertAlmostEqual(energy.energy_j / (0.5 * mass * 20000.0**2), 1.0, places=12)
            self.assertAlmostEqual(energy.megatons, energy.energy_j / 4.184e15)
            self.assertGreater(energy.crater_diameter_m, 1000.0)

    def test_smaller_body_without_earth(self):
        big = Body(name='Big', elements=PINNED, radius=5.0, is_stationary=True, role=BodyRole.NEAR_EARTH_OBJECT)
        small = Body(name='Small', elements=PINNED, radius=0.05, is_stationary=True, role=BodyRole.IMPACTOR)
        energy = estimate_event_energy(_event(big, small, 10.0), density=2000.0)
        self.assertAlmostEqual(energy.mass_kg / (math.pi / 6.0 * 100.0**3 * 2000.0), 1.0, places=12)


if __name__ == '__main__':
    unittest.main()
