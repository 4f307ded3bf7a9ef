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
Partial building blocks for mutual approximation observables.

Modules
-------
position_partials : module
    Link end position and velocity partials w.r.t. parameters
light_time_corrections : module
    Light-time corrections, their partials and the per-leg chain
scaling : module
    Shared per-link scaling into observable partials
observation_partials : module
    Observation partials combining the above, and bias partials
"""

from .light_time_corrections import (CorrectionPartialChain,
                                     FirstOrderRelativisticLightTimeCorrection,
                                     FirstOrderRelativisticLightTimeCorrectionPartial,
                                     LightTimeCorrection, LightTimeCorrectionPartial,
                                     create_light_time_correction_partials)
from .observation_partials import (LinkObservationPartial, ObservationBiasPartial,
                                   ObservationPartial,
                                   create_observation_partial_wrt_link_property)
from .position_partials import (GroundStationPositionPartial, InitialStatePositionPartial,
                                PositionPartial, PositionPartialFactory,
                                RotationRatePositionPartial, create_position_partials_wrt_body,
                                create_position_partials_wrt_parameter)
from .scaling import (ImpactParameterMutualApproxScaling, ModifiedMutualApproximationScaling,
                      MutualApproximationScaling, MutualApproximationWithImpactParameterScaling,
                      ObservationPartialScaling, create_observation_scaling)

__all__ = [
    'CorrectionPartialChain', 'LightTimeCorrection', 'LightTimeCorrectionPartial',
    'FirstOrderRelativisticLightTimeCorrection', 'FirstOrderRelativisticLightTimeCorrectionPartial',
    'create_light_time_correction_partials',
    'ObservationPartial', 'LinkObservationPartial', 'ObservationBiasPartial',
    'create_observation_partial_wrt_link_property',
    'PositionPartial', 'InitialStatePositionPartial', 'GroundStationPositionPartial',
    'RotationRatePositionPartial', 'PositionPartialFactory',
    'create_position_partials_wrt_body', 'create_position_partials_wrt_parameter',
    'ObservationPartialScaling', 'MutualApproximationScaling', 'ModifiedMutualApproximationScaling',
    'ImpactParameterMutualApproxScaling', 'MutualApproximationWithImpactParameterScaling',
    'create_observation_scaling',
]
