# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Partials of link end positions w.r.t. estimated parameters.

A position partial gives the derivative of the inertial position (and
velocity) of one link end w.r.t. one parameter at the evaluation epoch.
For initial state parameters the partial is taken w.r.t. the current state;
the batch solver maps it to the initial epoch with the state transition
matrix.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Union

import numpy as np

from ..core.constants import INITIAL_STATE_SIZE, POSITION_SIZE
from ..core.data_structures import LinkEnds, LinkEndType
from ..environment.bodies import SystemOfBodies
from ..parameters.estimatable_parameters import EstimatableParameter, ParameterType

logger = logging.getLogger(__name__)


class PositionPartial(ABC):
    """Partial of a link end position and velocity w.r.t. one parameter"""

    def __init__(self, parameter_size: int):
        self.parameter_size = parameter_size

    @abstractmethod
    def wrt_position(self, epoch: float, state: np.ndarray) -> np.ndarray:
        """Partial of the inertial position, shape (3, parameter_size)"""

    def wrt_velocity(self, epoch: float, state: np.ndarray) -> np.ndarray:
        """Partial of the inertial velocity, shape (3, parameter_size)"""
        return np.zeros((POSITION_SIZE, self.parameter_size))


class InitialStatePositionPartial(PositionPartial):
    """Partial w.r.t. the current translational state of the link end's body"""

    def __init__(self):
        super().__init__(INITIAL_STATE_SIZE)

    def wrt_position(self, epoch, state):
        return np.hstack([np.eye(POSITION_SIZE), np.zeros((POSITION_SIZE, POSITION_SIZE))])

    def wrt_velocity(self, epoch, state):
        return np.hstack([np.zeros((POSITION_SIZE, POSITION_SIZE)), np.eye(POSITION_SIZE)])


class GroundStationPositionPartial(PositionPartial):
    """Partial w.r.t. the body-fixed position of the link end's reference point"""

    def __init__(self, rotation_model):
        super().__init__(POSITION_SIZE)
        self.rotation_model = rotation_model

    def wrt_position(self, epoch, state):
        return self.rotation_model.rotation_to_inertial(epoch)

    def wrt_velocity(self, epoch, state):
        return self.rotation_model.rotation_derivative_to_inertial(epoch)


class RotationRatePositionPartial(PositionPartial):
    """Partial of a reference point position w.r.t. the rotation rate of its body"""

    def __init__(self, rotation_model, body_fixed_position: np.ndarray):
        super().__init__(1)
        self.rotation_model = rotation_model
        self.body_fixed_position = np.asarray(body_fixed_position, dtype=np.float64)

    def wrt_position(self, epoch, state):
        partial = self.rotation_model.rotation_partial_wrt_rate(epoch) @ self.body_fixed_position
        return partial.reshape(POSITION_SIZE, 1)

    def wrt_velocity(self, epoch, state):
        partial = self.rotation_model.rotation_derivative_partial_wrt_rate(epoch) @ self.body_fixed_position
        return partial.reshape(POSITION_SIZE, 1)


def create_position_partials_wrt_body(link_ends: LinkEnds, body: str) -> Dict[LinkEndType, PositionPartial]:
    """
    Position partials w.r.t. the translational state of ``body``.

    Returns one partial per role bound to the body, whether at its center or
    at a reference point on it; an empty map if the link does not involve it.
    """
    return {role: InitialStatePositionPartial() for role in link_ends.roles_of_body(body)}


def _rotation_model_of(bodies: SystemOfBodies, body_name: str):
    body = bodies.get(body_name)
    if body.rotation_model is None:
        raise ValueError(f"Body {body_name} has reference points in the link but no rotation model")
    return body.rotation_model


def create_position_partials_wrt_parameter(link_ends: LinkEnds, bodies: SystemOfBodies,
                                           parameter: EstimatableParameter) -> Dict[LinkEndType, PositionPartial]:
    """
    Position partials w.r.t. a scalar or vector parameter.

    Parameters:
    -----------
    link_ends : LinkEnds
        Link for which partials are created
    bodies : SystemOfBodies
        Body context providing rotation models and reference points
    parameter : EstimatableParameter
        Position-coupled parameter

    Returns:
    --------
    dict[LinkEndType, PositionPartial]
        Partial per dependent role; empty if no link end position depends on
        the parameter (gravitational parameters and PPN gamma act through
        the dynamics or the light-time corrections only)
    """
    partials = {}
    parameter_type = parameter.parameter_type

    if parameter_type == ParameterType.GROUND_STATION_POSITION:
        for role in link_ends.roles_of_body(parameter.body):
            if link_ends[role].reference_point == parameter.secondary_id:
                partials[role] = GroundStationPositionPartial(_rotation_model_of(bodies, parameter.body))

    elif parameter_type == ParameterType.CONSTANT_ROTATION_RATE:
        for role in link_ends.roles_of_body(parameter.body):
            link_end = link_ends[role]
            if link_end.has_reference_point:
                body = bodies.get(parameter.body)
                partials[role] = RotationRatePositionPartial(
                    _rotation_model_of(bodies, parameter.body),
                    body.ground_station_position(link_end.reference_point))

    return partials


class PositionPartialFactory:
    """
    Creates link end position partials for one system of bodies.

    Examples
    --------
    >>> factory = PositionPartialFactory(bodies)
    >>> partials = factory.try_create(link_ends, "Io")
    >>> sorted(role.name for role in partials)
    ['TRANSMITTER']
    """

    def __init__(self, bodies: SystemOfBodies):
        self.bodies = bodies

    def try_create(self, link_ends: LinkEnds,
                   parameter_or_body: Union[str, EstimatableParameter]) -> Dict[LinkEndType, PositionPartial]:
        """Role -> position partial map, empty when there is no dependency"""
        if isinstance(parameter_or_body, str):
            partials = create_position_partials_wrt_body(link_ends, parameter_or_body)
        else:
            partials = create_position_partials_wrt_parameter(link_ends, self.bodies, parameter_or_body)
        if partials:
            logger.debug(f"Position partials w.r.t. {parameter_or_body} for roles "
                         f"{[role.name for role in partials]}")
        return partials
