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
Observation partials: derivative of one observable of one link w.r.t. one
estimated parameter, of shape (observable dimension, parameter size).
"""

import logging
import weakref
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..core.data_structures import (LIGHT_TIME_LEGS, LinkEnds, LinkEndType, LinkGeometry,
                                    ObservableType, PartialCreationResult)
from ..parameters.estimatable_parameters import EstimatableParameter, ParameterType
from .light_time_corrections import CorrectionPartialFunction
from .position_partials import PositionPartial
from .scaling import ObservationPartialScaling

logger = logging.getLogger(__name__)


class ObservationPartial(ABC):
    """Partial of an observable w.r.t. one estimated parameter"""

    def __init__(self, observable_type: ObservableType, parameter: EstimatableParameter):
        self.observable_type = observable_type
        self.parameter = parameter

    @property
    def parameter_identifier(self) -> Tuple:
        return self.parameter.identifier

    @property
    def dimension(self) -> int:
        return self.observable_type.dimension

    @abstractmethod
    def evaluate(self, epoch: float, geometry: LinkGeometry,
                 observation: Optional[np.ndarray] = None) -> np.ndarray:
        """Partial at ``epoch``, shape (dimension, parameter size)"""


class LinkObservationPartial(ObservationPartial):
    """
    Partial through the link end states and light-time corrections.

    The scaling object is shared by all partials of the link and owned by
    the assembly result; this partial only keeps a weak reference to it.

    Parameters:
    -----------
    observable_type : ObservableType
        Observable of the link
    parameter : EstimatableParameter
        Parameter the partial is taken w.r.t.
    scaling : ObservationPartialScaling
        Shared scaling of the link
    position_partials : dict[LinkEndType, PositionPartial]
        Link end position partials w.r.t. the parameter
    correction_partials : Sequence[tuple[int, callable]]
        (leg index, partial function) of the light-time corrections
        depending on the parameter
    """

    def __init__(self, observable_type: ObservableType, parameter: EstimatableParameter,
                 scaling: ObservationPartialScaling,
                 position_partials: Dict[LinkEndType, PositionPartial],
                 correction_partials: Sequence[Tuple[int, CorrectionPartialFunction]] = ()):
        super().__init__(observable_type, parameter)
        self._scaling_reference = weakref.ref(scaling)
        self.position_partials = dict(position_partials)
        self.correction_partials: List[Tuple[int, CorrectionPartialFunction]] = list(correction_partials)

    @property
    def scaling(self) -> ObservationPartialScaling:
        """The link's shared scaling object"""
        scaling = self._scaling_reference()
        if scaling is None:
            raise RuntimeError(f"Scaling of the partial w.r.t. {self.parameter.description} was released; "
                               f"keep the assembly result alive while evaluating its partials")
        return scaling

    @property
    def number_of_correction_partials(self) -> int:
        return len(self.correction_partials)

    @property
    def parameter_size(self) -> int:
        if self.position_partials:
            return next(iter(self.position_partials.values())).parameter_size
        return self.parameter.size

    def evaluate(self, epoch, geometry, observation=None):
        """
        Partial at ``epoch``.

        The shared scaling is updated here unless its last update used the
        same epoch and link end states; callers evaluating several partials of
        a link update it once beforehand.
        """
        scaling = self.scaling
        if not scaling.is_current(epoch, geometry):
            scaling.update(epoch, geometry)

        partial = np.zeros((self.dimension, self.parameter_size))
        for role, position_partial in self.position_partials.items():
            state = geometry.state(role)
            partial += scaling.position_scaling(role) @ position_partial.wrt_position(epoch, state)
            partial += scaling.velocity_scaling(role) @ position_partial.wrt_velocity(epoch, state)

        for leg, correction_partial in self.correction_partials:
            transmitter, receiver = LIGHT_TIME_LEGS[leg]
            row = correction_partial(epoch, geometry.state(transmitter), geometry.state(receiver))
            partial += np.outer(scaling.light_time_scaling(leg), row)
        return partial


class ObservationBiasPartial(ObservationPartial):
    """Partial w.r.t. a constant absolute or relative observation bias"""

    def __init__(self, observable_type: ObservableType, parameter: EstimatableParameter):
        super().__init__(observable_type, parameter)
        self.relative = parameter.parameter_type == ParameterType.CONSTANT_RELATIVE_OBSERVATION_BIAS

    def evaluate(self, epoch, geometry=None, observation=None):
        if not self.relative:
            return np.eye(self.dimension)
        if observation is None:
            raise ValueError(f"Partial w.r.t. {self.parameter.description} requires the observation value")
        return np.diag(np.atleast_1d(np.asarray(observation, dtype=np.float64)))


_BIAS_PARAMETER_TYPES = (ParameterType.CONSTANT_ADDITIVE_OBSERVATION_BIAS,
                         ParameterType.CONSTANT_RELATIVE_OBSERVATION_BIAS)


def create_observation_partial_wrt_link_property(link_ends: LinkEnds, observable_type: ObservableType,
                                                 parameter: EstimatableParameter) -> PartialCreationResult:
    """
    Partial w.r.t. a parameter belonging to an observation link.

    Present only for a bias of the same link ends and observable type.
    """
    if parameter.parameter_type not in _BIAS_PARAMETER_TYPES:
        return PartialCreationResult.absent(f"{parameter.parameter_type.name} is not a link property "
                                            f"with an analytic partial")
    if parameter.link_ends != link_ends or parameter.observable_type != observable_type:
        return PartialCreationResult.absent("bias belongs to another link or observable")
    return PartialCreationResult.present(ObservationBiasPartial(observable_type, parameter))
