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
Light-time corrections and their partials.

Each propagation leg of a link (transmitter -> receiver and
transmitter2 -> receiver) carries its own list of light-time corrections.
A correction delays the emission on its leg; the partial of the correction
w.r.t. a parameter is scaled into an observable partial by the link's
scaling object.

All corrections and partials are expressed in meters (light time times c).
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from ..core.constants import CLIGHT, NUMBER_OF_LIGHT_TIME_LEGS, POSITION_SIZE
from ..environment.bodies import SystemOfBodies
from ..parameters.estimatable_parameters import EstimatableParameter, ParameterType

logger = logging.getLogger(__name__)

# fn(epoch, transmitter_state, receiver_state) -> partial row, shape (parameter size,)
CorrectionPartialFunction = Callable[[float, np.ndarray, np.ndarray], np.ndarray]


class LightTimeCorrection(ABC):
    """Correction to the geometric light time of one leg"""

    @abstractmethod
    def calculate(self, epoch: float, transmitter_state: np.ndarray,
                  receiver_state: np.ndarray) -> float:
        """Light-time correction (m)"""


class FirstOrderRelativisticLightTimeCorrection(LightTimeCorrection):
    """
    Shapiro delay of the perturbing bodies, first order in GM/c^2.

        dt * c = sum_b (1 + gamma) GM_b / c^2 ln((r_e + r_r + rho) / (r_e + r_r - rho))

    with r_e and r_r the distances of emitter and receiver from body b and
    rho the emitter-receiver distance.

    Parameters:
    -----------
    perturbing_bodies : Sequence[str]
        Bodies whose gravity delays the signal
    bodies : SystemOfBodies
        Body context providing ephemerides and gravitational parameters
    ppn_gamma : float
        PPN parameter gamma (1 in general relativity)
    """

    def __init__(self, perturbing_bodies: Sequence[str], bodies: SystemOfBodies, ppn_gamma: float = 1.0):
        self.perturbing_bodies = list(perturbing_bodies)
        for name in self.perturbing_bodies:
            bodies.get(name)
        self.bodies = bodies
        self.ppn_gamma = ppn_gamma

    def log_term(self, body: str, epoch: float, transmitter_state: np.ndarray,
                 receiver_state: np.ndarray) -> float:
        """ln((r_e + r_r + rho) / (r_e + r_r - rho)) for one perturbing body"""
        body_position = self.bodies.get(body).state(epoch)[:POSITION_SIZE]
        transmitter_distance = np.linalg.norm(transmitter_state[:POSITION_SIZE] - body_position)
        receiver_distance = np.linalg.norm(receiver_state[:POSITION_SIZE] - body_position)
        link_distance = np.linalg.norm(transmitter_state[:POSITION_SIZE] - receiver_state[:POSITION_SIZE])
        total = transmitter_distance + receiver_distance
        return float(np.log((total + link_distance) / (total - link_distance)))

    def gravitational_parameter(self, body: str) -> float:
        return self.bodies.get(body).gravitational_parameter

    def calculate(self, epoch, transmitter_state, receiver_state):
        correction = 0.0
        for body in self.perturbing_bodies:
            correction += (self.gravitational_parameter(body)
                           * self.log_term(body, epoch, transmitter_state, receiver_state))
        return (1.0 + self.ppn_gamma) * correction / CLIGHT ** 2


class LightTimeCorrectionPartial(ABC):
    """Partials of one light-time correction w.r.t. estimated parameters"""

    def __init__(self, correction: LightTimeCorrection):
        self.correction = correction

    @abstractmethod
    def get_partial_function(self, parameter: EstimatableParameter) -> Optional[CorrectionPartialFunction]:
        """Function evaluating the partial, or None if the correction does not depend on the parameter"""


class FirstOrderRelativisticLightTimeCorrectionPartial(LightTimeCorrectionPartial):
    """Partials of the Shapiro delay w.r.t. perturber GM and PPN gamma"""

    def get_partial_function(self, parameter):
        correction = self.correction
        if parameter.parameter_type == ParameterType.GRAVITATIONAL_PARAMETER:
            if parameter.body not in correction.perturbing_bodies:
                return None

            def wrt_gravitational_parameter(epoch, transmitter_state, receiver_state):
                log_term = correction.log_term(parameter.body, epoch, transmitter_state, receiver_state)
                return np.array([(1.0 + correction.ppn_gamma) * log_term / CLIGHT ** 2])
            return wrt_gravitational_parameter

        if parameter.parameter_type == ParameterType.PPN_PARAMETER_GAMMA:
            def wrt_ppn_gamma(epoch, transmitter_state, receiver_state):
                partial = 0.0
                for body in correction.perturbing_bodies:
                    partial += (correction.gravitational_parameter(body)
                                * correction.log_term(body, epoch, transmitter_state, receiver_state))
                return np.array([partial / CLIGHT ** 2])
            return wrt_ppn_gamma

        return None


def create_light_time_correction_partials(
        corrections: Sequence[LightTimeCorrection]) -> List[LightTimeCorrectionPartial]:
    """
    Create partial objects for the corrections of one leg.

    Corrections without analytic partials contribute nothing and are
    reported at WARNING level.
    """
    partials = []
    for correction in corrections:
        if isinstance(correction, FirstOrderRelativisticLightTimeCorrection):
            partials.append(FirstOrderRelativisticLightTimeCorrectionPartial(correction))
        else:
            logger.warning(f"No partials available for light-time correction "
                           f"{type(correction).__name__}, ignoring it in partial assembly")
    return partials


class CorrectionPartialChain:
    """
    Light-time correction partials of every leg of one link.

    Parameters:
    -----------
    leg_partials : Sequence[Sequence[LightTimeCorrectionPartial]]
        Correction partials per leg, in leg order

    Examples
    --------
    >>> chain = CorrectionPartialChain.from_correction_groups([[shapiro], [shapiro]])
    >>> [leg for leg, _ in chain.partial_functions(gravitational_parameter("Jupiter"))]
    [0, 1]
    """

    def __init__(self, leg_partials: Sequence[Sequence[LightTimeCorrectionPartial]]):
        self.legs = [list(partials) for partials in leg_partials]

    @classmethod
    def empty(cls, number_of_legs: int = NUMBER_OF_LIGHT_TIME_LEGS) -> "CorrectionPartialChain":
        return cls([[] for _ in range(number_of_legs)])

    @classmethod
    def from_correction_groups(cls, correction_groups: Optional[Sequence[Sequence[LightTimeCorrection]]],
                               number_of_legs: int = NUMBER_OF_LIGHT_TIME_LEGS) -> "CorrectionPartialChain":
        """
        Build the chain from the correction models of each leg.

        Raises:
        -------
        ValueError
            If corrections are given for a number of legs other than
            ``number_of_legs``
        """
        groups = list(correction_groups or [])
        if not groups:
            return cls.empty(number_of_legs)
        if len(groups) != number_of_legs:
            raise ValueError(f"Error when making observation partials, light time corrections for "
                             f"{len(groups)} links found, instead of {number_of_legs}.")
        return cls([create_light_time_correction_partials(group) for group in groups])

    @property
    def number_of_legs(self) -> int:
        return len(self.legs)

    def __len__(self):
        return sum(len(partials) for partials in self.legs)

    def partial_functions(self, parameter: EstimatableParameter) -> List[Tuple[int, CorrectionPartialFunction]]:
        """(leg index, partial function) of every correction depending on ``parameter``"""
        functions = []
        for leg, partials in enumerate(self.legs):
            for correction_partial in partials:
                function = correction_partial.get_partial_function(parameter)
                if function is not None:
                    functions.append((leg, function))
        return functions
