"""Tests for single-link and batch partial assembly"""

import logging

import pytest

from pymutual.core.config import PartialAssemblyConfig
from pymutual.core.data_structures import LinkEnds, LinkEndType, ObservableType
from pymutual.estimation import (LinkPartials, PartialAssembler, assemble_partials,
                                 assemble_partials_batch, create_impact_parameter_partials,
                                 create_link_partials,
                                 create_mutual_approximation_partials,
                                 create_mutual_approximation_with_impact_parameter_partials,
                                 create_partials_for_links)
from pymutual.parameters import (EstimatableParameterSet, arc_wise_initial_body_state,
                                 constant_additive_observation_bias,
                                 constant_relative_observation_bias, constant_rotation_rate,
                                 create_parameter_set, gravitational_parameter,
                                 ground_station_position, initial_body_state, ppn_parameter_gamma)
from pymutual.partials import (FirstOrderRelativisticLightTimeCorrection, LinkObservationPartial,
                               MutualApproximationScaling, ModifiedMutualApproximationScaling,
                               ObservationBiasPartial)

MUTUAL_APPROXIMATION = ObservableType.MUTUAL_APPROXIMATION


@pytest.fixture
def shapiro(bodies):
    return FirstOrderRelativisticLightTimeCorrection(["Jupiter"], bodies)


@pytest.fixture
def abp_parameters():
    return EstimatableParameterSet([initial_body_state("A"), initial_body_state("B")],
                                   {20: gravitational_parameter("P")})


@pytest.fixture
def abp_link():
    return LinkEnds(transmitter="A", transmitter2="B", receiver="A")


def test_abp_scenario(bodies, abp_link, abp_parameters):
    blocks, scaling = create_link_partials(MUTUAL_APPROXIMATION, abp_link, bodies, abp_parameters)

    assert set(blocks) == {(0, 6), (6, 6)}
    assert (20, 1) not in blocks
    assert set(blocks[(0, 6)].position_partials) == {LinkEndType.TRANSMITTER, LinkEndType.RECEIVER}
    assert set(blocks[(6, 6)].position_partials) == {LinkEndType.TRANSMITTER2}


def test_abp_scenario_with_corrections(bodies, abp_link, abp_parameters, shapiro):
    blocks, _ = create_link_partials(MUTUAL_APPROXIMATION, abp_link, bodies, abp_parameters,
                                     correction_groups=[[shapiro], [shapiro]])
    assert set(blocks) == {(0, 6), (6, 6)}

    with pytest.raises(ValueError, match="instead of 2"):
        create_link_partials(MUTUAL_APPROXIMATION, abp_link, bodies, abp_parameters,
                             correction_groups=[[shapiro]])


def test_index_reservation(bodies, link_ends):
    """Every initial state advances the index by 6, coupled or not"""
    parameters = create_parameter_set([
        initial_body_state("Ganymede"), arc_wise_initial_body_state("Callisto"),
        initial_body_state("Io"), gravitational_parameter("Jupiter"),
    ])

    blocks, _ = create_link_partials(MUTUAL_APPROXIMATION, link_ends, bodies, parameters)

    assert list(blocks) == [(12, 6)]
    assert parameters.dynamical_size == 18
    assert list(parameters.scalar_parameters) == [18]


def test_scaling_shared_by_identity(bodies, station_link_ends):
    parameters = create_parameter_set([
        initial_body_state("Io"), initial_body_state("Europa"),
        constant_rotation_rate("Earth"), ground_station_position("Earth", "Observatory"),
    ])

    result = create_link_partials(MUTUAL_APPROXIMATION, station_link_ends, bodies, parameters)

    assert isinstance(result, LinkPartials)
    assert set(result.blocks) == {(0, 6), (6, 6), (12, 1), (13, 3)}
    assert all(block.scaling is result.scaling for block in result.blocks.values())


def test_role_validation(bodies, abp_parameters):
    incomplete = LinkEnds(transmitter="A", receiver="B")
    with pytest.raises(ValueError, match="transmitter2 not found"):
        create_link_partials(MUTUAL_APPROXIMATION, incomplete, bodies, abp_parameters)


def test_correction_parameters(bodies, link_ends, shapiro):
    parameters = create_parameter_set([
        initial_body_state("Io"), gravitational_parameter("Jupiter"), gravitational_parameter("Earth"),
        ppn_parameter_gamma(),
    ])

    without_corrections, _ = create_link_partials(MUTUAL_APPROXIMATION, link_ends, bodies, parameters)
    blocks, _ = create_link_partials(MUTUAL_APPROXIMATION, link_ends, bodies, parameters,
                                     correction_groups=[[shapiro], []])

    assert set(without_corrections) == {(0, 6)}
    assert set(blocks) == {(0, 6), (6, 1), (8, 1)}
    assert blocks[(6, 1)].number_of_correction_partials == 1
    assert blocks[(6, 1)].position_partials == {}


def test_bias_parameters(bodies, link_ends):
    other_link = LinkEnds(transmitter="Europa", transmitter2="Io", receiver="Earth")
    parameters = EstimatableParameterSet([], {}, {
        0: constant_additive_observation_bias(link_ends, MUTUAL_APPROXIMATION),
        1: constant_relative_observation_bias(other_link, MUTUAL_APPROXIMATION),
        2: constant_additive_observation_bias(link_ends, ObservableType.IMPACT_PARAMETER_MUTUAL_APPROX),
    })

    blocks, _ = create_link_partials(MUTUAL_APPROXIMATION, link_ends, bodies, parameters)

    assert list(blocks) == [(0, 1)]
    assert isinstance(blocks[(0, 1)], ObservationBiasPartial)


def test_two_valued_observable_uses_same_layout(bodies, station_link_ends):
    parameters = create_parameter_set([
        initial_body_state("Io"), initial_body_state("Jupiter"), gravitational_parameter("Jupiter"),
        ground_station_position("Earth", "Observatory"),
        constant_additive_observation_bias(station_link_ends,
                                           ObservableType.MUTUAL_APPROXIMATION_WITH_IMPACT_PARAMETER),
    ])

    single, _ = create_mutual_approximation_partials(station_link_ends, bodies, parameters)
    double, scaling = create_mutual_approximation_with_impact_parameter_partials(
        station_link_ends, bodies, parameters)
    impact, _ = create_impact_parameter_partials(station_link_ends, bodies, parameters)

    assert set(single) == {(0, 6), (13, 3)}
    assert set(double) == {(0, 6), (13, 3), (16, 2)}
    assert set(impact) == set(single)
    assert scaling.dimension == 2
    assert all(block.dimension == 2 for block in double.values())


def test_scaling_variant_flag(bodies, link_ends, abp_parameters):
    _, central = assemble_partials(link_ends, abp_parameters, None, True, bodies)
    _, fixed = assemble_partials(link_ends, abp_parameters, None, False, bodies)

    assert isinstance(central, MutualApproximationScaling)
    assert isinstance(fixed, ModifiedMutualApproximationScaling)


def test_batch_keeps_links_independent(bodies, link_ends, station_link_ends, shapiro):
    parameters = create_parameter_set([initial_body_state("Io"), gravitational_parameter("Jupiter")])

    results = create_partials_for_links(
        MUTUAL_APPROXIMATION, [link_ends, station_link_ends], bodies, parameters,
        correction_map={station_link_ends: [[shapiro], [shapiro]]})

    assert set(results) == {link_ends, station_link_ends}
    assert set(results[link_ends].blocks) == {(0, 6)}
    assert set(results[station_link_ends].blocks) == {(0, 6), (6, 1)}
    assert results[link_ends].scaling is not results[station_link_ends].scaling


def test_batch_lenient_leg_count(bodies, link_ends, station_link_ends, shapiro, caplog):
    parameters = create_parameter_set([initial_body_state("Io"), gravitational_parameter("Jupiter")])
    correction_map = {link_ends: [[shapiro]], station_link_ends: [[shapiro], [shapiro]]}

    with caplog.at_level(logging.WARNING, logger="pymutual.estimation.assembly"):
        results = assemble_partials_batch([link_ends, station_link_ends], parameters, correction_map, True, bodies)

    assert set(results[link_ends].blocks) == {(0, 6)}
    assert set(results[station_link_ends].blocks) == {(0, 6), (6, 1)}
    assert "instead of 2" in caplog.text


def test_batch_strict_leg_count(bodies, link_ends, station_link_ends, shapiro):
    parameters = create_parameter_set([initial_body_state("Io")])
    with pytest.raises(ValueError, match="instead of 2"):
        create_partials_for_links(MUTUAL_APPROXIMATION, [station_link_ends, link_ends], bodies, parameters,
                                  correction_map={link_ends: [[shapiro]]}, strict=True)


def test_batch_validates_roles_before_assembly(bodies, link_ends, caplog):
    parameters = create_parameter_set([initial_body_state("Io")])
    broken = LinkEnds(transmitter="Io", receiver="Earth")

    with caplog.at_level(logging.DEBUG, logger="pymutual.estimation.assembly"):
        with pytest.raises(ValueError, match="transmitter2"):
            create_partials_for_links(MUTUAL_APPROXIMATION, [link_ends, broken], bodies, parameters)

    assert "block" not in caplog.text


def test_trace_logging_of_elided_parameters(bodies, link_ends, abp_parameters, caplog):
    with caplog.at_level(5, logger="pymutual.estimation.assembly"):
        create_link_partials(MUTUAL_APPROXIMATION, link_ends, bodies, abp_parameters)

    assert [record.levelname for record in caplog.records].count("TRACE") == 3


def test_partial_assembler(bodies, link_ends, station_link_ends, shapiro):
    parameters = create_parameter_set([initial_body_state("Io"), gravitational_parameter("Jupiter")])
    config = PartialAssemblyConfig.from_dict({"central_instant_observable": False,
                                              "strict_batch_leg_count": True})
    assembler = PartialAssembler(bodies, parameters, config)

    blocks, scaling = assembler.create(MUTUAL_APPROXIMATION, link_ends, [[shapiro], [shapiro]])
    assert set(blocks) == {(0, 6), (6, 1)}
    assert isinstance(scaling, ModifiedMutualApproximationScaling)
    assert isinstance(blocks[(0, 6)], LinkObservationPartial)

    with pytest.raises(ValueError):
        assembler.create_batch(MUTUAL_APPROXIMATION, [link_ends, station_link_ends],
                               {station_link_ends: [[shapiro], [], []]})
