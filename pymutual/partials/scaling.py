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
Scaling of link end partials into observable partials.

One scaling object is shared by all partials of a link. It is updated once
per observation with the link geometry and then provides

- position_scaling(role): d(observable)/d(position of role), (dimension, 3)
- velocity_scaling(role): d(observable)/d(velocity of role), (dimension, 3)
- light_time_scaling(leg): d(observable)/d(light-time correction of leg),
  (dimension,), per meter of correction

A light-time correction on a leg moves the emission epoch of its transmitter
back by correction / c, so its scaling follows from the transmitter position
and velocity scalings and the transmitter velocity and acceleration.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import numpy as np

from ..core.constants import CLIGHT, POSITION_SIZE
from ..core.data_structures import LIGHT_TIME_LEGS, LinkEndType, LinkGeometry, ObservableType
from ..geometry.apparent_separation import ApparentSeparation

logger = logging.getLogger(__name__)


def _geometry_key(geometry: LinkGeometry) -> tuple:
    # link end states and accelerations a scaling was computed from
    states = tuple(sorted((role.name, state.tobytes()) for role, state in geometry.states.items()))
    accelerations = tuple(sorted((role.name, acc.tobytes()) for role, acc in geometry.accelerations.items()))
    return states, accelerations


class ObservationPartialScaling(ABC):
    """
    Shared per-link scaling of mutual approximation partials.

    Subclasses implement ``_compute`` returning the observable partials
    w.r.t. the position and velocity of each link end.
    """

    dimension = 1

    def __init__(self):
        self._epoch: Optional[float] = None
        self._position_scaling: Dict[LinkEndType, np.ndarray] = {}
        self._velocity_scaling: Dict[LinkEndType, np.ndarray] = {}
        self._light_time_scaling: Dict[int, np.ndarray] = {}
        self._geometry_key: Optional[tuple] = None

    @abstractmethod
    def _compute(self, separation: ApparentSeparation):
        """Position and velocity partials per role, each of shape (dimension, 3)"""

    def update(self, epoch: float, geometry: LinkGeometry):
        """Recompute the scaling for the link geometry at ``epoch``"""
        separation = ApparentSeparation.from_geometry(geometry)
        position_scaling, velocity_scaling = self._compute(separation)
        self._position_scaling = {role: np.asarray(rows).reshape(self.dimension, POSITION_SIZE)
                                  for role, rows in position_scaling.items()}
        self._velocity_scaling = {role: np.asarray(rows).reshape(self.dimension, POSITION_SIZE)
                                  for role, rows in velocity_scaling.items()}

        self._light_time_scaling = {}
        for leg, (transmitter, _) in LIGHT_TIME_LEGS.items():
            delay_partial = -(self._position_scaling[transmitter] @ geometry.velocity(transmitter)
                              + self._velocity_scaling[transmitter] @ geometry.acceleration(transmitter))
            self._light_time_scaling[leg] = delay_partial / CLIGHT
        self._epoch = epoch
        self._geometry_key = _geometry_key(geometry)

    def is_current(self, epoch: float, geometry: LinkGeometry) -> bool:
        """True if the last update was made with ``geometry`` at ``epoch``"""
        return self._epoch == epoch and self._geometry_key == _geometry_key(geometry)

    @property
    def epoch(self) -> Optional[float]:
        """Epoch of the last update, None before the first one"""
        return self._epoch

    def _check_updated(self):
        if self._epoch is None:
            raise RuntimeError(f"{type(self).__name__} evaluated before update")

    def position_scaling(self, role: LinkEndType) -> np.ndarray:
        self._check_updated()
        return self._position_scaling[role]

    def velocity_scaling(self, role: LinkEndType) -> np.ndarray:
        self._check_updated()
        return self._velocity_scaling[role]

    def light_time_scaling(self, leg: int) -> np.ndarray:
        self._check_updated()
        return self._light_time_scaling[leg]


class MutualApproximationScaling(ObservationPartialScaling):
    """Observable is the central instant; scaled by -1/(df/dt)"""

    def _compute(self, separation):
        return separation.central_instant_partials()


class ModifiedMutualApproximationScaling(ObservationPartialScaling):
    """Observable is f = s . ds/dt at the fixed observation epoch"""

    def _compute(self, separation):
        return separation.rate_product_partials()


class ImpactParameterMutualApproxScaling(ObservationPartialScaling):
    """Observable is the apparent separation at the central instant"""

    def _compute(self, separation):
        return separation.impact_parameter_partials()


class MutualApproximationWithImpactParameterScaling(ObservationPartialScaling):
    """Observable is [central instant, impact parameter]"""

    dimension = 2

    def _compute(self, separation):
        tc_position, tc_velocity = separation.central_instant_partials()
        b_position, b_velocity = separation.impact_parameter_partials()
        position_scaling = {role: np.vstack([tc_position[role], b_position[role]]) for role in tc_position}
        velocity_scaling = {role: np.vstack([tc_velocity[role], b_velocity[role]]) for role in tc_velocity}
        return position_scaling, velocity_scaling


def create_observation_scaling(observable_type: ObservableType,
                               central_instant_observable: bool = True) -> ObservationPartialScaling:
    """
    Scaling object for one link.

    Parameters:
    -----------
    observable_type : ObservableType
        Observable whose partials are scaled
    central_instant_observable : bool
        For MUTUAL_APPROXIMATION, True when the observable is the central
        instant and False for the fixed-instant (modified) form. Ignored for
        the other observable types.
    """
    if observable_type == ObservableType.MUTUAL_APPROXIMATION:
        if central_instant_observable:
            return MutualApproximationScaling()
        return ModifiedMutualApproximationScaling()
    if observable_type == ObservableType.MUTUAL_APPROXIMATION_WITH_IMPACT_PARAMETER:
        return MutualApproximationWithImpactParameterScaling()
    if observable_type == ObservableType.IMPACT_PARAMETER_MUTUAL_APPROX:
        return ImpactParameterMutualApproxScaling()
    raise ValueError(f"No partial scaling for observable type {observable_type}")
