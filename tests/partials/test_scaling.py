"""Tests for the observable partial scaling, against numerically solved closest approaches"""

import numpy as np
import pytest

from pymutual.core.constants import CLIGHT
from pymutual.core.data_structures import LIGHT_TIME_LEGS, LinkEndType, LinkGeometry, ObservableType
from pymutual.geometry import compute_central_instant, compute_mutual_approximation_observation
from pymutual.partials import (ImpactParameterMutualApproxScaling, ModifiedMutualApproximationScaling,
                               MutualApproximationScaling, MutualApproximationWithImpactParameterScaling,
                               create_observation_scaling)

TRANSMITTERS = {LinkEndType.TRANSMITTER: "Io", LinkEndType.TRANSMITTER2: "Europa"}
STATE_DELTAS = (100.0, 100.0, 100.0, 1.0, 1.0, 1.0)
FIXED_EPOCH = 200.0


def observe(system, link_ends, observable_type, bracket, central_instant_observable=True):
    return compute_mutual_approximation_observation(
        observable_type, lambda epoch: system.link_geometry(link_ends, epoch), *bracket,
        central_instant_observable=central_instant_observable, observation_epoch=FIXED_EPOCH)


def numerical_state_partials(bodies, bodies_factory, link_ends, bracket, epoch, body, observable_type,
                             central_instant_observable=True):
    """Central differences w.r.t. the state of ``body`` at ``epoch``, shape (dimension, 6)"""
    columns = []
    for component, delta in enumerate(STATE_DELTAS):
        values = []
        for sign in (1.0, -1.0):
            states = {name: bodies.get(name).state(epoch).copy() for name in ("Io", "Europa")}
            states[body][component] += sign * delta
            system = bodies_factory(io_state=states["Io"], europa_state=states["Europa"],
                                    reference_epoch=epoch)
            values.append(observe(system, link_ends, observable_type, bracket, central_instant_observable))
        columns.append((values[0] - values[1]) / (2 * delta))
    return np.column_stack(columns)


def analytic_state_partials(scaling, role):
    return np.hstack([scaling.position_scaling(role), scaling.velocity_scaling(role)])


def assert_rows_close(analytic, numerical):
    for analytic_row, numerical_row in zip(analytic, numerical):
        np.testing.assert_allclose(analytic_row, numerical_row, rtol=1e-4,
                                   atol=1e-6 * np.max(np.abs(numerical_row)))


@pytest.fixture
def central_instant(bodies, link_ends, bracket):
    return compute_central_instant(lambda epoch: bodies.link_geometry(link_ends, epoch), *bracket)


@pytest.mark.parametrize("observable_type", list(ObservableType))
def test_state_partials_at_central_instant(bodies, bodies_factory, link_ends, bracket, central_instant,
                                           observable_type):
    scaling = create_observation_scaling(observable_type)
    scaling.update(central_instant, bodies.link_geometry(link_ends, central_instant))

    for role, body in TRANSMITTERS.items():
        numerical = numerical_state_partials(bodies, bodies_factory, link_ends, bracket, central_instant,
                                             body, observable_type)
        analytic = analytic_state_partials(scaling, role)
        assert analytic.shape == (observable_type.dimension, 6)
        assert_rows_close(analytic, numerical)


def test_state_partials_at_fixed_instant(bodies, bodies_factory, link_ends, bracket):
    scaling = create_observation_scaling(ObservableType.MUTUAL_APPROXIMATION, central_instant_observable=False)
    scaling.update(FIXED_EPOCH, bodies.link_geometry(link_ends, FIXED_EPOCH))

    for role, body in TRANSMITTERS.items():
        numerical = numerical_state_partials(bodies, bodies_factory, link_ends, bracket, FIXED_EPOCH, body,
                                             ObservableType.MUTUAL_APPROXIMATION,
                                             central_instant_observable=False)
        assert_rows_close(analytic_state_partials(scaling, role), numerical)


@pytest.mark.parametrize("leg", [0, 1])
def test_light_time_scaling(bodies, link_ends, bracket, central_instant, leg):
    """A correction on a leg delays the emission of its transmitter by correction / c"""
    delayed_role = LIGHT_TIME_LEGS[leg][0]
    correction = 3.0e5

    def central_instant_with_correction(sign):
        def geometry(epoch):
            states = {}
            for role, link_end in link_ends.items():
                emission_epoch = epoch - sign * correction / CLIGHT if role == delayed_role else epoch
                states[role] = bodies.link_end_state(link_end, emission_epoch)
            return LinkGeometry(states)
        return compute_central_instant(geometry, *bracket)

    numerical = (central_instant_with_correction(1.0) - central_instant_with_correction(-1.0)) / (2 * correction)

    scaling = MutualApproximationScaling()
    scaling.update(central_instant, bodies.link_geometry(link_ends, central_instant))
    assert scaling.light_time_scaling(leg).shape == (1,)
    assert scaling.light_time_scaling(leg)[0] == pytest.approx(numerical, rel=1e-4)


def test_receiver_rows_balance(bodies, link_ends, central_instant):
    scaling = MutualApproximationWithImpactParameterScaling()
    scaling.update(central_instant, bodies.link_geometry(link_ends, central_instant))

    total = sum(scaling.position_scaling(role) for role in LinkEndType if role != LinkEndType.REFLECTOR)
    np.testing.assert_allclose(total, np.zeros((2, 3)), atol=1e-18)


def test_evaluation_before_update():
    scaling = MutualApproximationScaling()
    assert scaling.epoch is None
    with pytest.raises(RuntimeError, match="before update"):
        scaling.position_scaling(LinkEndType.TRANSMITTER)
    with pytest.raises(RuntimeError):
        scaling.light_time_scaling(0)


def test_create_observation_scaling():
    assert isinstance(create_observation_scaling(ObservableType.MUTUAL_APPROXIMATION),
                      MutualApproximationScaling)
    assert isinstance(create_observation_scaling(ObservableType.MUTUAL_APPROXIMATION, False),
                      ModifiedMutualApproximationScaling)
    assert isinstance(create_observation_scaling(ObservableType.IMPACT_PARAMETER_MUTUAL_APPROX, False),
                      ImpactParameterMutualApproxScaling)

    scaling = create_observation_scaling(ObservableType.MUTUAL_APPROXIMATION_WITH_IMPACT_PARAMETER)
    assert isinstance(scaling, MutualApproximationWithImpactParameterScaling)
    assert scaling.dimension == 2
