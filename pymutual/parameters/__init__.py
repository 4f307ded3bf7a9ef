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
Estimatable parameters and the parameter catalog.

Parameter factory functions follow the naming of the parameter types, e.g.
``initial_body_state("Io")`` or ``ground_station_position("Earth", "Observatory")``.
"""

from .estimatable_parameters import (EstimatableParameter, ParameterCategory, ParameterType,
                                     arc_wise_initial_body_state,
                                     constant_additive_observation_bias,
                                     constant_relative_observation_bias, constant_rotation_rate,
                                     gravitational_parameter, ground_station_position,
                                     initial_body_state, initial_rotational_body_state,
                                     is_body_state_parameter,
                                     is_parameter_observation_link_property,
                                     ppn_parameter_gamma)
from .parameter_set import EstimatableParameterSet, create_parameter_set

__all__ = [
    'EstimatableParameter', 'ParameterCategory', 'ParameterType',
    'EstimatableParameterSet', 'create_parameter_set',
    'is_body_state_parameter', 'is_parameter_observation_link_property',
    'initial_body_state', 'arc_wise_initial_body_state', 'initial_rotational_body_state',
    'gravitational_parameter', 'constant_rotation_rate', 'ppn_parameter_gamma',
    'ground_station_position',
    'constant_additive_observation_bias', 'constant_relative_observation_bias',
]
