"""Shared mutual approximation geometry for the test suite

Io and Europa move on straight lines seen from the Earth at the origin. Their
apparent separation is smallest about 50.8 s after epoch 0, with an impact
parameter of about 4.8e-4 rad.
"""

import numpy as np
import pytest

from pymutual.core.data_structures import LinkEnds
from pymutual.environment import (Body, ConstantEphemeris, LinearEphemeris,
                                  SimpleRotationalEphemeris, SystemOfBodies)

IO_STATE = np.array([6.0e8, -1.0e5, 0.0, 0.0, 1.0e3, 0.0])
EUROPA_STATE = np.array([6.2e8, 0.0, 3.0e5, 0.0, -1.0e3, 0.0])
JUPITER_POSITION = np.array([3.0e8, 5.0e7, 0.0])
JUPITER_GM = 1.26686534e17
EARTH_GM = 3.986004418e14
EARTH_ROTATION_RATE = 7.292115e-5
STATION_POSITION = np.array([4.0e6, 1.0e6, 4.5e6])
BRACKET = (-3600.0, 3600.0)


def build_bodies(io_state=IO_STATE, europa_state=EUROPA_STATE, reference_epoch=0.0,
                 station_position=STATION_POSITION, earth_rotation_rate=EARTH_ROTATION_RATE,
                 jupiter_gm=JUPITER_GM):
    """System of Earth, Io, Europa and Jupiter, with Io and Europa states given at reference_epoch"""
    earth = Body("Earth", ConstantEphemeris(np.zeros(3)),
                 rotation_model=SimpleRotationalEphemeris(0.0, np.pi / 2.0, 0.3, earth_rotation_rate),
                 ground_stations={"Observatory": station_position},
                 gravitational_parameter=EARTH_GM)
    io = Body("Io", LinearEphemeris(io_state, reference_epoch))
    europa = Body("Europa", LinearEphemeris(europa_state, reference_epoch))
    jupiter = Body("Jupiter", ConstantEphemeris(JUPITER_POSITION), gravitational_parameter=jupiter_gm)
    return SystemOfBodies([earth, io, europa, jupiter])


@pytest.fixture
def bodies():
    return build_bodies()


@pytest.fixture
def bodies_factory():
    return build_bodies


@pytest.fixture
def link_ends():
    return LinkEnds(transmitter="Io", transmitter2="Europa", receiver="Earth")


@pytest.fixture
def station_link_ends():
    return LinkEnds(transmitter="Io", transmitter2="Europa", receiver=("Earth", "Observatory"))


@pytest.fixture
def bracket():
    return BRACKET
