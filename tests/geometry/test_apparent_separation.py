"""Tests for the apparent separation kernels and partials"""

import numpy as np
import pytest

from pymutual.core.data_structures import LinkEndType, LinkGeometry
from pymutual.geometry import ApparentSeparation, line_of_sight_derivatives

ROLES = (LinkEndType.TRANSMITTER, LinkEndType.TRANSMITTER2, LinkEndType.RECEIVER)

STATES = {
    LinkEndType.TRANSMITTER: np.array([6.0e8, 2.0e5, -1.0e5, 10.0, 1.0e3, 30.0]),
    LinkEndType.TRANSMITTER2: np.array([6.2e8, -1.0e5, 3.0e5, -20.0, -1.0e3, 5.0]),
    LinkEndType.RECEIVER: np.array([1.0e6, 2.0e6, -5.0e5, 100.0, -300.0, 20.0]),
}
ACCELERATIONS = {
    LinkEndType.TRANSMITTER: np.array([0.0, -1.0e-3, 2.0e-3]),
    LinkEndType.RECEIVER: np.array([1.0e-2, 0.0, -5.0e-3]),
}


def perturbed_geometry(role, component, delta):
    states = {r: s.copy() for r, s in STATES.items()}
    states[role][component] += delta
    return LinkGeometry(states, ACCELERATIONS)


def numerical_partials(quantity, delta_position=100.0, delta_velocity=0.1):
    """Central differences of quantity(separation) w.r.t. every position and velocity component"""
    position_partials, velocity_partials = {}, {}
    for role in ROLES:
        rows = []
        for component in range(6):
            delta = delta_position if component < 3 else delta_velocity
            upper = quantity(ApparentSeparation.from_geometry(perturbed_geometry(role, component, delta)))
            lower = quantity(ApparentSeparation.from_geometry(perturbed_geometry(role, component, -delta)))
            rows.append((upper - lower) / (2 * delta))
        position_partials[role] = np.array(rows[:3])
        velocity_partials[role] = np.array(rows[3:])
    return position_partials, velocity_partials


def assert_rows_close(analytic, numerical):
    scale = max(np.max(np.abs(row)) for row in numerical.values())
    for role in ROLES:
        np.testing.assert_allclose(analytic[role], numerical[role], rtol=1e-5, atol=1e-6 * scale)


@pytest.fixture
def separation():
    return ApparentSeparation.from_geometry(LinkGeometry(STATES, ACCELERATIONS))


def test_line_of_sight_derivatives():
    rho = np.array([3.0e8, 4.0e8, 1.0e7])
    w = np.array([-2.0e3, 1.0e3, 5.0e2])
    a = np.array([0.1, -0.2, 0.05])
    dt = 1.0

    def unit(t):
        position = rho + w * t + 0.5 * a * t * t
        return position / np.linalg.norm(position)

    u, u_dot, u_ddot, du_drho, _ = line_of_sight_derivatives(rho, w, a)

    np.testing.assert_allclose(u, unit(0.0), atol=1e-15)
    np.testing.assert_allclose(u_dot, (unit(dt) - unit(-dt)) / (2 * dt), rtol=1e-8, atol=1e-16)
    np.testing.assert_allclose(u_ddot, (unit(dt) - 2 * unit(0.0) + unit(-dt)) / dt ** 2, rtol=1e-3, atol=1e-15)
    np.testing.assert_allclose(du_drho @ u * np.linalg.norm(rho), np.zeros(3), atol=1e-12)


def test_separation_values(separation):
    u1 = STATES[LinkEndType.TRANSMITTER][:3] - STATES[LinkEndType.RECEIVER][:3]
    u2 = STATES[LinkEndType.TRANSMITTER2][:3] - STATES[LinkEndType.RECEIVER][:3]
    expected = u2 / np.linalg.norm(u2) - u1 / np.linalg.norm(u1)

    np.testing.assert_allclose(separation.separation_vector, expected, atol=1e-15)
    assert separation.separation == pytest.approx(np.linalg.norm(expected))
    assert separation.rate_product == pytest.approx(separation.separation_vector @ separation.separation_rate)


def test_rate_product_partials(separation):
    analytic_position, analytic_velocity = separation.rate_product_partials()
    numerical_position, numerical_velocity = numerical_partials(lambda s: s.rate_product)

    assert_rows_close(analytic_position, numerical_position)
    assert_rows_close(analytic_velocity, numerical_velocity)


def test_separation_partials(separation):
    analytic = separation.separation_partials()
    numerical, numerical_velocity = numerical_partials(lambda s: s.separation)

    assert_rows_close(analytic, numerical)
    for role in ROLES:
        np.testing.assert_allclose(numerical_velocity[role], np.zeros(3), atol=1e-12)


def test_receiver_partials_balance_transmitters(separation):
    """Translating all link ends together leaves the apparent geometry unchanged"""
    position_partials, velocity_partials = separation.rate_product_partials()
    np.testing.assert_allclose(sum(position_partials.values()), np.zeros(3), atol=1e-25)
    np.testing.assert_allclose(sum(velocity_partials.values()), np.zeros(3), atol=1e-25)


def test_central_instant_scaling(separation):
    position_partials, _ = separation.rate_product_partials()
    central_position, _ = separation.central_instant_partials()
    for role in ROLES:
        np.testing.assert_allclose(central_position[role],
                                   -position_partials[role] / separation.rate_product_derivative)


def test_coincident_receiver():
    states = dict(STATES)
    states[LinkEndType.RECEIVER] = STATES[LinkEndType.TRANSMITTER].copy()
    with pytest.raises(ValueError, match="coincides"):
        ApparentSeparation.from_geometry(LinkGeometry(states))
