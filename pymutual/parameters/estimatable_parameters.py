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

"""Estimatable parameter definitions"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from ..core.constants import INITIAL_STATE_SIZE, POSITION_SIZE
from ..core.data_structures import LinkEnds, ObservableType


class ParameterCategory(Enum):
    """How a parameter is laid out in the global parameter vector.

    Attributes
    ----------
    DYNAMICAL : int
        Initial states, placed first in solve order, 6 entries each
    SCALAR : int
        Single-valued parameters with externally assigned index
    VECTOR : int
        Multi-valued parameters with externally assigned index and own size
    """
    DYNAMICAL = 1
    SCALAR = 2
    VECTOR = 3


class ParameterType(Enum):
    """Types of estimatable parameters"""
    INITIAL_BODY_STATE = 1
    ARC_WISE_INITIAL_BODY_STATE = 2
    INITIAL_ROTATIONAL_BODY_STATE = 3
    GRAVITATIONAL_PARAMETER = 4
    CONSTANT_ROTATION_RATE = 5
    PPN_PARAMETER_GAMMA = 6
    GROUND_STATION_POSITION = 7
    CONSTANT_ADDITIVE_OBSERVATION_BIAS = 8
    CONSTANT_RELATIVE_OBSERVATION_BIAS = 9

    @property
    def category(self) -> ParameterCategory:
        return _PARAMETER_CATEGORIES[self]


_PARAMETER_CATEGORIES = {
    ParameterType.INITIAL_BODY_STATE: ParameterCategory.DYNAMICAL,
    ParameterType.ARC_WISE_INITIAL_BODY_STATE: ParameterCategory.DYNAMICAL,
    ParameterType.INITIAL_ROTATIONAL_BODY_STATE: ParameterCategory.DYNAMICAL,
    ParameterType.GRAVITATIONAL_PARAMETER: ParameterCategory.SCALAR,
    ParameterType.CONSTANT_ROTATION_RATE: ParameterCategory.SCALAR,
    ParameterType.PPN_PARAMETER_GAMMA: ParameterCategory.SCALAR,
    ParameterType.GROUND_STATION_POSITION: ParameterCategory.VECTOR,
    ParameterType.CONSTANT_ADDITIVE_OBSERVATION_BIAS: ParameterCategory.VECTOR,
    ParameterType.CONSTANT_RELATIVE_OBSERVATION_BIAS: ParameterCategory.VECTOR,
}

_LINK_PROPERTY_TYPES = frozenset([
    ParameterType.CONSTANT_ADDITIVE_OBSERVATION_BIAS,
    ParameterType.CONSTANT_RELATIVE_OBSERVATION_BIAS,
])

# Dynamical parameter types whose state is the translational state of a body
_BODY_STATE_TYPES = frozenset([
    ParameterType.INITIAL_BODY_STATE,
    ParameterType.ARC_WISE_INITIAL_BODY_STATE,
])

_FIXED_SIZES = {
    ParameterType.INITIAL_BODY_STATE: INITIAL_STATE_SIZE,
    ParameterType.ARC_WISE_INITIAL_BODY_STATE: INITIAL_STATE_SIZE,
    ParameterType.INITIAL_ROTATIONAL_BODY_STATE: 7,  # quaternion + angular velocity
    ParameterType.GRAVITATIONAL_PARAMETER: 1,
    ParameterType.CONSTANT_ROTATION_RATE: 1,
    ParameterType.PPN_PARAMETER_GAMMA: 1,
    ParameterType.GROUND_STATION_POSITION: POSITION_SIZE,
}


def is_parameter_observation_link_property(parameter_type: ParameterType) -> bool:
    """Whether the parameter acts on the observation link rather than on a body position"""
    return parameter_type in _LINK_PROPERTY_TYPES


def is_body_state_parameter(parameter_type: ParameterType) -> bool:
    return parameter_type in _BODY_STATE_TYPES


@dataclass(frozen=True, eq=False)
class EstimatableParameter:
    """A parameter estimated in the batch least-squares solution.

    Attributes
    ----------
    parameter_type : ParameterType
        Type of the parameter
    body : str
        Associated body, empty for global parameters (PPN gamma, biases)
    secondary_id : str
        Secondary identifier, e.g. the ground station name
    size : int
        Number of entries in the global parameter vector
    value : np.ndarray, optional
        Current value
    link_ends : LinkEnds, optional
        Link the parameter belongs to (observation biases only)
    observable_type : ObservableType, optional
        Observable the parameter belongs to (observation biases only)
    """
    parameter_type: ParameterType
    body: str = ""
    secondary_id: str = ""
    size: int = 0
    value: Optional[np.ndarray] = None
    link_ends: Optional[LinkEnds] = None
    observable_type: Optional[ObservableType] = None

    def __post_init__(self):
        if self.size <= 0:
            if self.parameter_type in _FIXED_SIZES:
                object.__setattr__(self, "size", _FIXED_SIZES[self.parameter_type])
            elif self.observable_type is not None:
                object.__setattr__(self, "size", self.observable_type.dimension)
            else:
                raise ValueError(f"Cannot determine size of parameter {self.parameter_type.name}")
        if is_parameter_observation_link_property(self.parameter_type):
            if self.link_ends is None or self.observable_type is None:
                raise ValueError(f"{self.parameter_type.name} requires link ends and an observable type")
            if self.size != self.observable_type.dimension:
                raise ValueError(f"{self.parameter_type.name} size {self.size} does not match "
                                 f"observable dimension {self.observable_type.dimension}")

    @property
    def category(self) -> ParameterCategory:
        return self.parameter_type.category

    @property
    def identifier(self) -> Tuple:
        """Stable identity (type, (body, secondary id)[, link ends])"""
        if self.link_ends is not None:
            return (self.parameter_type, (self.body, self.secondary_id), self.link_ends)
        return (self.parameter_type, (self.body, self.secondary_id))

    @property
    def description(self) -> str:
        name = self.parameter_type.name.lower()
        if self.link_ends is not None:
            return f"{name} of {self.observable_type.name.lower()} for {self.link_ends!r}"
        target = "/".join(part for part in (self.body, self.secondary_id) if part)
        return f"{name} of {target}" if target else name

    def __repr__(self):
        return f"EstimatableParameter({self.description}, size={self.size})"


def initial_body_state(body: str, state: Optional[np.ndarray] = None) -> EstimatableParameter:
    """Initial translational state of a body"""
    return EstimatableParameter(ParameterType.INITIAL_BODY_STATE, body, value=state)


def arc_wise_initial_body_state(body: str, state: Optional[np.ndarray] = None) -> EstimatableParameter:
    """Translational state of a body at the start of the current arc"""
    return EstimatableParameter(ParameterType.ARC_WISE_INITIAL_BODY_STATE, body, value=state)


def initial_rotational_body_state(body: str) -> EstimatableParameter:
    return EstimatableParameter(ParameterType.INITIAL_ROTATIONAL_BODY_STATE, body)


def gravitational_parameter(body: str, value: Optional[float] = None) -> EstimatableParameter:
    return EstimatableParameter(ParameterType.GRAVITATIONAL_PARAMETER, body,
                                value=None if value is None else np.array([value]))


def constant_rotation_rate(body: str, value: Optional[float] = None) -> EstimatableParameter:
    return EstimatableParameter(ParameterType.CONSTANT_ROTATION_RATE, body,
                                value=None if value is None else np.array([value]))


def ppn_parameter_gamma(value: float = 1.0) -> EstimatableParameter:
    return EstimatableParameter(ParameterType.PPN_PARAMETER_GAMMA, value=np.array([value]))


def ground_station_position(body: str, station: str,
                            position: Optional[np.ndarray] = None) -> EstimatableParameter:
    """Body-fixed position of a reference point"""
    return EstimatableParameter(ParameterType.GROUND_STATION_POSITION, body, station, value=position)


def constant_additive_observation_bias(link_ends: LinkEnds,
                                       observable_type: ObservableType) -> EstimatableParameter:
    return EstimatableParameter(ParameterType.CONSTANT_ADDITIVE_OBSERVATION_BIAS,
                                link_ends=link_ends, observable_type=observable_type)


def constant_relative_observation_bias(link_ends: LinkEnds,
                                       observable_type: ObservableType) -> EstimatableParameter:
    return EstimatableParameter(ParameterType.CONSTANT_RELATIVE_OBSERVATION_BIAS,
                                link_ends=link_ends, observable_type=observable_type)
