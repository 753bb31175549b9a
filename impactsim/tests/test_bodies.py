"""Tests for Body validation and the CSV body catalogue."""
import math
import tempfile
import unittest
from pathlib import Path

import numpy as np
from pydantic import ValidationError

from impactsim.astrodynamics import period_from_semi_major_axis
from impactsim.bodies import Body, BodyRole, bodies_data, load_bodies_data
from impactsim.constants import DAY, KMPAU, MU_SUN, YEAR
from impactsim.orbital_elements import OrbitalElements

HEADER = ("Name,Role,Semi-Major Axis (km),Eccentricity (),Inclination (deg),"
          "Longitude of the Ascending Node (deg),Argument of Periapsis (deg),"
          "Mean Anomaly at t=0 (deg),Orbital Period (days),GM (km3/s2),Radius (km),Stationary\n")


def _elements(**overrides):
    values = dict(a=KMPAU, e=0.1, i=1.0, Omega=2.0, omega=3.0, M0=4.0, period_days=365.25)
    values.update(overrides)
    return OrbitalElements(**values)


class TestBodyValidation(unittest.TestCase):
    """Invalid orbits are rejected when the Body is built."""

    def test_valid_body(self):
        body = Body(name='Rock', elements=_elements(), radius=0.2, role=BodyRole.NEAR_EARTH_OBJECT)
        self.assertEqual(body.role, BodyRole.NEAR_EARTH_OBJECT)
        self.assertFalse(body.is_stationary)
        self.assertEqual(body.elements.mu, MU_SUN)

    def test_role_from_string(self):
        body = Body(name='Rock', elements=_elements(), radius=0.2, role='impactor')
        self.assertIs(body.role, BodyRole.IMPACTOR)

    def test_eccentricity_out_of_range(self):
        for e in (1.0, 1.5, -0.1):
            with self.assertRaises(ValidationError) as cm:
                Body(name='Rock', elements=_elements(e=e), radius=0.2)
            self.assertIn("eccentricity must be in [0, 1)", str(cm.exception))

    def test_non_positive_semi_major_axis(self):
        with self.assertRaises(ValidationError) as cm:
            Body(name='Rock', elements=_elements(a=0.0), radius=0.2)
        self.assertIn("semi-major axis must be positive", str(cm.exception))

    def test_non_positive_period(self):
        with self.assertRaises(ValidationError) as cm:
            Body(name='Rock', elements=_elements(period_days=-1.0), radius=0.2)
        self.assertIn("orbital period must be positive", str(cm.exception))

    def test_negative_radius(self):
        with self.assertRaises(ValidationError):
            Body(name='Rock', elements=_elements(), radius=-1.0)

    def test_non_finite_elements(self):
        for field in ('a', 'i', 'M0'):
            with self.assertRaises(ValidationError):
                Body(name='Rock', elements=_elements(**{field: math.nan}), radius=0.2)
        with self.assertRaises(ValidationError):
            Body(name='Rock', elements=_elements(Omega=math.inf), radius=0.2)

    def test_stationary_body_skips_orbit_size(self):
        body = Body(name='Earth', elements=_elements(a=0.0, e=0.0, period_days=0.0),
                    radius=6371.0, is_stationary=True)
        self.assertTrue(body.is_stationary)

    def test_body_is_frozen(self):
        body = Body(name='Rock', elements=_elements(), radius=0.2)
        with self.assertRaises(ValidationError):
            body.radius = 5.0


class TestBodyHelpers(unittest.TestCase):

    def test_get_period_units(self):
        earth = bodies_data['Earth']
        self.assertAlmostEqual(earth.get_period('day'), 365.256363004)
        self.assertAlmostEqual(earth.get_period('s'), 365.256363004 * DAY)
        self.assertAlmostEqual(earth.get_period('year'), 365.256363004 * DAY / YEAR)
        with self.assertRaises(ValueError):
            earth.get_period('fortnight')

    def test_get_state_units(self):
        mars = bodies_data['Mars']
        by_seconds = mars.get_state(30.0 * DAY)
        by_days = mars.get_state(30.0, time_units='day')
        np.testing.assert_allclose(by_days.r, by_seconds.r, rtol=1e-12)
        np.testing.assert_allclose(mars.get_state(0.5, time_units='year').r,
                                   mars.get_state(0.5 * YEAR).r, rtol=1e-12)
        with self.assertRaises(ValueError):
            mars.get_state(1.0, time_units='TU')

    def test_earth_like(self):
        self.assertTrue(bodies_data['Earth'].is_earth_like())
        self.assertFalse(bodies_data['Venus'].is_earth_like())
        self.assertFalse(bodies_data['IMPACTOR-2025'].is_earth_like())

        near = Body(name='Terra', elements=_elements(), radius=6371.9)
        far = Body(name='Terra', elements=_elements(), radius=6372.5)
        self.assertTrue(near.is_earth_like())
        self.assertFalse(far.is_earth_like())

        # Size alone is not enough, the body has to be a planet
        rogue = Body(name='Rogue', elements=_elements(), radius=6371.0, role=BodyRole.NEAR_EARTH_OBJECT)
        self.assertFalse(rogue.is_earth_like())


class TestCatalogue(unittest.TestCase):

    def test_bundled_catalogue(self):
        for name in ('Mercury', 'Venus', 'Earth', 'Mars', 'Jupiter', 'Saturn', 'Uranus', 'Neptune'):
            self.assertIn(name, bodies_data)
            self.assertIs(bodies_data[name].role, BodyRole.PLANET)
        self.assertIs(bodies_data['Apophis'].role, BodyRole.NEAR_EARTH_OBJECT)
        self.assertIs(bodies_data['IMPACTOR-2025'].role, BodyRole.IMPACTOR)
        self.assertEqual(bodies_data['Earth'].radius, 6371.0)

    def test_missing_period_uses_keplers_third_law(self):
        apophis = bodies_data['Apophis']
        expected = period_from_semi_major_axis(apophis.elements.a, MU_SUN) / DAY
        self.assertAlmostEqual(apophis.elements.period_days, expected, places=9)

    def test_explicit_file_selection(self):
        planets = load_bodies_data(['planets.csv'])
        self.assertIn('Earth', planets)
        self.assertNotIn('IMPACTOR-2025', planets)

    def test_missing_requested_file(self):
        with self.assertRaises(FileNotFoundError):
            load_bodies_data(['no_such_catalogue.csv'])

    def test_invalid_rows_are_skipped(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'extra.csv'
            path.write_text(
                HEADER
                + "Good,neo,150000000,0.1,1,2,3,4,,,0.3,\n"
                + "Hyperbolic,neo,150000000,1.2,1,2,3,4,400,,0.3,\n"
                + "Centre,planet,0,0,0,0,0,0,,398600.4418,6371,yes\n",
                encoding='utf-8',
            )
            with self.assertLogs('impactsim.bodies', level='WARNING') as logs:
                bodies = load_bodies_data(['extra.csv'], data_dir=Path(tmp))

        self.assertEqual(sorted(bodies), ['Centre', 'Good'])
        self.assertTrue(any('Hyperbolic' in line or 'line 3' in line for line in logs.output))
        self.assertTrue(bodies['Centre'].is_stationary)
        self.assertEqual(bodies['Centre'].elements.period_days, 0.0)

    def test_missing_column(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'broken.csv'
            path.write_text("Name,Role\nRock,neo\n", encoding='utf-8')
            with self.assertRaises(KeyError):
                load_bodies_data(['broken.csv'], data_dir=Path(tmp))


if __name__ == '__main__':
    unittest.main()
