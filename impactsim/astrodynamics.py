import jax
import jax.numpy as jnp
from jax import jit
from typing import TYPE_CHECKING, Sequence, Tuple
import numpy as np

from .cartesian_state import CartesianState
from .constants import (
    MU_SUN, KEPLER_TOL, KEPLER_MAX_ITER, STATIONARY_EPS_KM
)

if TYPE_CHECKING:
    from .bodies import Body


# Row substituted for stationary bodies before they reach the kernels so that
# a = 0 or period = 0 never produces NaN in the masked-out lanes.
_PLACEHOLDER_ROW = np.array([1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 1.0, 1.0])


def normalize_angle_deg(angle):
    """Reduce an angle in degrees to [0, 360)."""
    return jnp.mod(angle, 360.0)


@jit
def solve_kepler(M, e, tol=KEPLER_TOL, max_iter=KEPLER_MAX_ITER):
    """
    Solve Kepler's equation M = E - e*sin(E) for eccentric anomaly E
    using Newton-Raphson iteration.

    Iteration stops once the Newton step falls below ``tol`` or after ``max_iter``
    steps. A solve that has not converged by then is not an error: the last
    estimate is returned, which is adequate for visualization-grade orbits.

    Parameters
    ----------
    M : float or jnp.ndarray
        Mean anomaly (radians). Expected in [0, 2pi), callers normalize.
    e : float or jnp.ndarray
        Eccentricity in [0, 1).
    tol : float, optional
        Convergence tolerance on |dE|.
    max_iter : int, optional
        Iteration cap.

    Returns
    -------
    E : jnp.ndarray
        Eccentric anomaly (radians), same shape as M.
    """
    M = jnp.asarray(M, dtype=jnp.float64)
    # Starting at pi for high eccentricity keeps Newton monotone near periapsis.
    E0 = jnp.where(e < 0.8, M, jnp.pi * jnp.ones_like(M))

    def cond_fn(carry):
        _, delta, k = carry
        return (jnp.max(jnp.abs(delta)) >= tol) & (k < max_iter)

    def body_fn(carry):
        E, _, k = carry
        f = E - e * jnp.sin(E) - M
        fp = 1.0 - e * jnp.cos(E)
        delta = f / fp
        return E - delta, delta, k + 1

    E_final, _, _ = jax.lax.while_loop(cond_fn, body_fn, (E0, jnp.full_like(E0, jnp.inf), 0))
    return E_final


def true_anomaly(E, e):
    """True anomaly (radians) from eccentric anomaly E and eccentricity e."""
    return 2.0 * jnp.arctan2(
        jnp.sqrt(1.0 + e) * jnp.sin(E / 2.0),
        jnp.sqrt(1.0 - e) * jnp.cos(E / 2.0)
    )


def rotation_x(angle):
    c, s = jnp.cos(angle), jnp.sin(angle)
    return jnp.array([[1.0, 0.0, 0.0],
                      [0.0, c, -s],
                      [0.0, s, c]])


def rotation_z(angle):
    c, s = jnp.cos(angle), jnp.sin(angle)
    return jnp.array([[c, -s, 0.0],
                      [s, c, 0.0],
                      [0.0, 0.0, 1.0]])


def perifocal_to_inertial(Omega, i, omega):
    """
    Rotation matrix from the orbital (perifocal) plane to the inertial frame.

    The argument of periapsis is applied first (about Z), then the inclination
    (about X), then the longitude of the ascending node (about Z). The order
    matters for inclined orbits.
    """
    return rotation_z(Omega) @ rotation_x(i) @ rotation_z(omega)


@jit
def elements_to_cartesian(elements: jnp.ndarray, t: float) -> CartesianState:
    """
    Convert orbital elements to Cartesian state at time t.

    Parameters
    ----------
    elements : jnp.ndarray
        Row [a, e, i, Omega, omega, M0, period, mu] as produced by
        ``OrbitalElements.to_array()`` (km, radians, seconds, km^3/s^2).
    t : float
        Time since epoch in seconds.

    Returns
    -------
    CartesianState
        Position (km) and velocity (km/s) in the inertial frame.
    """
    a, e, i, Omega, omega, M0, period, mu = elements

    # Mean motion from the catalogued period
    n = 2.0 * jnp.pi / period

    # Mean anomaly at time t
    M = jnp.mod(M0 + n * t, 2.0 * jnp.pi)

    E = solve_kepler(M, e)
    theta = true_anomaly(E, e)

    # Position in the orbital plane
    p = a * (1.0 - e**2)
    r_mag = p / (1.0 + e * jnp.cos(theta))
    r_pf = jnp.array([r_mag * jnp.cos(theta), r_mag * jnp.sin(theta), 0.0])

    # Vis-viva radial and tangential components
    h_term = jnp.sqrt(mu / p)
    v_r = h_term * e * jnp.sin(theta)
    v_t = h_term * (1.0 + e * jnp.cos(theta))
    v_pf = jnp.array([
        v_r * jnp.cos(theta) - v_t * jnp.sin(theta),
        v_r * jnp.sin(theta) + v_t * jnp.cos(theta),
        0.0,
    ])

    rot = perifocal_to_inertial(Omega, i, omega)
    return CartesianState(r=rot @ r_pf, v=rot @ v_pf)


_elements_to_cartesian_vec = jax.vmap(elements_to_cartesian, in_axes=(0, None))


@jit
def elements_to_pos_vel(elements: jnp.ndarray, t: float, stationary=None) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """
    Convert orbital elements of many bodies to Cartesian position and velocity at time t.

    Parameters
    ----------
    elements : jnp.ndarray
        An (n, 8) array with one ``OrbitalElements.to_array()`` row per body.
    t : float
        The time since epoch (s) at which the cartesian state is requested.
    stationary : jnp.ndarray, optional
        Boolean mask of shape (n,). Flagged bodies, and any body with a
        vanishing semi-major axis, are pinned to the origin with zero velocity.

    Returns
    -------
    r : jnp.ndarray
        (n, 3) Cartesian positions in km.
    v : jnp.ndarray
        (n, 3) Cartesian velocities in km/s.
    """
    elements = jnp.atleast_2d(jnp.asarray(elements, dtype=jnp.float64))
    pinned = jnp.abs(elements[:, 0]) < STATIONARY_EPS_KM
    if stationary is not None:
        pinned = pinned | jnp.asarray(stationary, dtype=bool)

    safe = jnp.where(pinned[:, None], _PLACEHOLDER_ROW, elements)
    states = _elements_to_cartesian_vec(safe, t)

    r = jnp.where(pinned[:, None], 0.0, states.r)
    v = jnp.where(pinned[:, None], 0.0, states.v)
    return r, v


def is_pinned(body: 'Body') -> bool:
    """True when the body sits at the origin regardless of time."""
    return body.is_stationary or abs(body.elements.a) < STATIONARY_EPS_KM


def state_at(body: 'Body', t: float) -> CartesianState:
    """
    Cartesian state of a body t seconds after epoch.

    Stationary bodies short-circuit to the origin without any trigonometry.
    The result depends only on (body, t), so the call is safe from any thread.
    """
    if is_pinned(body):
        return CartesianState(r=np.zeros(3), v=np.zeros(3))
    state = elements_to_cartesian(jnp.asarray(body.elements.to_array()), t)
    return CartesianState(r=np.asarray(state.r), v=np.asarray(state.v))


def position_at(body: 'Body', t: float) -> np.ndarray:
    """Position (km) of a body t seconds after epoch."""
    return state_at(body, t).r


def velocity_at(body: 'Body', t: float) -> np.ndarray:
    """Velocity (km/s) of a body t seconds after epoch."""
    return state_at(body, t).v


def propagate_all(bodies: Sequence['Body'], t: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Propagate every body to time t in a single vectorized call.

    Returns
    -------
    r, v : np.ndarray
        (n, 3) positions (km) and velocities (km/s), in the order of ``bodies``.
    """
    if len(bodies) == 0:
        return np.zeros((0, 3)), np.zeros((0, 3))
    elements = np.stack([body.elements.to_array() for body in bodies])
    stationary = np.array([body.is_stationary for body in bodies], dtype=bool)
    r, v = elements_to_pos_vel(elements, t, stationary)
    return np.asarray(r), np.asarray(v)


def period_from_semi_major_axis(a: float, mu: float = MU_SUN) -> float:
    """
    Orbital period (s) from Kepler's third law, T = 2*pi*sqrt(a^3/mu).
    """
    return 2.0 * np.pi * np.sqrt(a**3 / mu)


@jit
def _orbit_ring(elements: jnp.ndarray, theta: jnp.ndarray) -> jnp.ndarray:
    a, e, i, Omega, omega = elements[0], elements[1], elements[2], elements[3], elements[4]
    r_mag = a * (1.0 - e**2) / (1.0 + e * jnp.cos(theta))
    r_pf = jnp.stack([r_mag * jnp.cos(theta), r_mag * jnp.sin(theta), jnp.zeros_like(theta)])
    return (perifocal_to_inertial(Omega, i, omega) @ r_pf).T


def orbit_points(body: 'Body', segments: int = 256) -> np.ndarray:
    """
    Sample the orbit ellipse uniformly in true anomaly.

    Returns an array of shape (segments + 1, 3) in km whose first and last points
    coincide. A stationary body degenerates to a single point at the origin.
    """
    if is_pinned(body):
        return np.zeros((1, 3))
    theta = jnp.linspace(0.0, 2.0 * jnp.pi, segments + 1)
    return np.asarray(_orbit_ring(jnp.asarray(body.elements.to_array()), theta))
