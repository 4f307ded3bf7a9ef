"""Tests for bodies and the body context"""

import numpy as np
import pytest

from pymutual.core.data_structures import LinkEndId, LinkEndType
from pymutual.environment import Body, ConstantEphemeris, LinearEphemeris, SystemOfBodies


def test_linear_ephemeris():
    ephemeris = LinearEphemeris(np.array([1.0, 2.0, 3.0, 10.0, 0.0, -1.0]), reference_epoch=5.0)
    np.testing.assert_allclose(ephemeris(7.0), [21.0, 2.0, 1.0, 10.0, 0.0, -1.0])

    with pytest.raises(ValueError):
        LinearEphemeris(np.zeros(3))


def test_duplicate_body():
    earth = Body("Earth", ConstantEphemeris(np.zeros(3)))
    with pytest.raises(ValueError, match="Duplicate"):
        SystemOfBodies([earth, earth])


def test_unknown_body(bodies):
    assert "Io" in bodies
    assert len(bodies) == 4
    with pytest.raises(ValueError, match="Ganymede"):
        bodies.get("Ganymede")


def test_reference_point_state(bodies):
    epoch = 120.0
    earth = bodies.get("Earth")
    station = earth.ground_station_position("Observatory")
    state = bodies.link_end_state(LinkEndId("Earth", "Observatory"), epoch)

    rotation = earth.rotation_model.rotation_to_inertial(epoch)
    np.testing.assert_allclose(state[:3], rotation @ station)
    np.testing.assert_allclose(np.linalg.norm(state[:3]), np.linalg.norm(station))
    np.testing.assert_allclose(state[3:], np.cross(earth.rotation_model.angular_velocity(epoch), state[:3]),
                               rtol=1e-9, atol=1e-9)


def test_reference_point_errors(bodies):
    with pytest.raises(ValueError, match="no reference point"):
        bodies.get("Earth").ground_station_position("Nowhere")
    with pytest.raises(ValueError, match="no rotation model"):
        bodies.link_end_state(LinkEndId("Io", "Pole"), 0.0)


def test_link_geometry(bodies, link_ends):
    geometry = bodies.link_geometry(link_ends, 10.0, accelerations={LinkEndType.TRANSMITTER: np.ones(3)})

    np.testing.assert_allclose(geometry.position(LinkEndType.TRANSMITTER), [6.0e8, -9.0e4, 0.0])
    np.testing.assert_allclose(geometry.state(LinkEndType.RECEIVER), np.zeros(6))
    np.testing.assert_allclose(geometry.acceleration(LinkEndType.TRANSMITTER), np.ones(3))
