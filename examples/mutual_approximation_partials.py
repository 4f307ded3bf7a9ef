#!/usr/bin/env python3
"""
Mutual Approximation Partials Example
=====================================
This example assembles the observation partials of a mutual approximation
of Io and Europa observed from a ground station, and evaluates the design
matrix rows of the observed central instant and impact parameter.

Steps:
- Bodies with linear ephemerides and a rotating Earth carrying the station
- Parameter set with initial states, Jupiter's GM and the station position
- Shapiro delay of Jupiter on both light-time legs
- Central instant by root finding, then partial evaluation
"""

import numpy as np

from pymutual.core import LinkEnds, ObservableType, PartialAssemblyConfig
from pymutual.environment import (Body, ConstantEphemeris, LinearEphemeris,
                                  SimpleRotationalEphemeris, SystemOfBodies)
from pymutual.estimation import PartialAssembler, evaluate_link_partials, partials_to_dataframe
from pymutual.geometry import compute_mutual_approximation_observation
from pymutual.parameters import (create_parameter_set, gravitational_parameter,
                                 ground_station_position, initial_body_state, ppn_parameter_gamma)
from pymutual.partials import FirstOrderRelativisticLightTimeCorrection

config = PartialAssemblyConfig(module_levels={"pymutual.estimation.assembly": "TRACE"})
logger = config.configure_logging()


def create_bodies() -> SystemOfBodies:
    """Io and Europa passing each other about 50 s after epoch 0"""
    earth_rotation = SimpleRotationalEphemeris(0.0, np.pi / 2.0, 0.3, 7.292115e-5)
    return SystemOfBodies([
        Body("Earth", ConstantEphemeris(np.zeros(3)), rotation_model=earth_rotation,
             ground_stations={"Observatory": np.array([4.0e6, 1.0e6, 4.5e6])},
             gravitational_parameter=3.986004418e14),
        Body("Io", LinearEphemeris(np.array([6.0e8, -1.0e5, 0.0, 0.0, 1.0e3, 0.0]))),
        Body("Europa", LinearEphemeris(np.array([6.2e8, 0.0, 3.0e5, 0.0, -1.0e3, 0.0]))),
        Body("Jupiter", ConstantEphemeris(np.array([3.0e8, 5.0e7, 0.0])),
             gravitational_parameter=1.26686534e17),
    ])


def main():
    bodies = create_bodies()
    link_ends = LinkEnds(transmitter="Io", transmitter2="Europa", receiver=("Earth", "Observatory"))
    observable_type = ObservableType.MUTUAL_APPROXIMATION_WITH_IMPACT_PARAMETER

    parameters = create_parameter_set([
        initial_body_state("Io"),
        initial_body_state("Europa"),
        gravitational_parameter("Jupiter"),
        ppn_parameter_gamma(),
        ground_station_position("Earth", "Observatory"),
    ])

    shapiro = FirstOrderRelativisticLightTimeCorrection(["Jupiter"], bodies)
    assembler = PartialAssembler(bodies, parameters, config)
    link_partials = assembler.create(observable_type, link_ends, [[shapiro], [shapiro]])

    print("\nAssembled blocks:")
    print(partials_to_dataframe(link_partials.blocks).to_string(index=False))

    def geometry(epoch):
        return bodies.link_geometry(link_ends, epoch)

    central_instant, impact_parameter = compute_mutual_approximation_observation(
        observable_type, geometry, -3600.0, 3600.0)
    logger.info(f"Central instant {central_instant:.6f} s, "
                f"impact parameter {np.degrees(impact_parameter) * 3600.0:.3f} arcsec")

    rows = evaluate_link_partials(link_partials, central_instant, geometry(central_instant),
                                  parameters.total_size)
    np.set_printoptions(precision=3, linewidth=120)
    print("\nDesign matrix rows [central instant; impact parameter]:")
    print(rows)


if __name__ == "__main__":
    main()
