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

"""Central instant and impact parameter of a mutual approximation"""

import logging
from typing import Callable

import numpy as np
from scipy.optimize import brentq

from ..core.data_structures import LinkGeometry, ObservableType
from .apparent_separation import ApparentSeparation

logger = logging.getLogger(__name__)


def rate_product(geometry: LinkGeometry) -> float:
    """Apparent-separation rate product f = s . ds/dt at the geometry epoch"""
    return ApparentSeparation.from_geometry(geometry).rate_product


def compute_central_instant(geometry_function: Callable[[float], LinkGeometry],
                            lower_epoch: float, upper_epoch: float,
                            xtol: float = 1e-12) -> float:
    """
    Find the central instant of a mutual approximation.

    Parameters:
    -----------
    geometry_function : Callable[[float], LinkGeometry]
        Link geometry as a function of epoch
    lower_epoch, upper_epoch : float
        Epochs bracketing the closest apparent approach (s)
    xtol : float
        Absolute epoch tolerance (s)

    Returns:
    --------
    float
        Epoch at which f = s . ds/dt changes sign

    Raises:
    -------
    ValueError
        If the interval does not bracket a closest approach
    """
    f_lower = rate_product(geometry_function(lower_epoch))
    f_upper = rate_product(geometry_function(upper_epoch))
    if np.sign(f_lower) == np.sign(f_upper):
        raise ValueError(f"No closest apparent approach between {lower_epoch} and {upper_epoch}")

    central_instant = brentq(lambda epoch: rate_product(geometry_function(epoch)),
                             lower_epoch, upper_epoch, xtol=xtol)
    logger.debug(f"Central instant found at {central_instant:.6f} s")
    return central_instant


def compute_mutual_approximation_observation(observable_type: ObservableType,
                                             geometry_function: Callable[[float], LinkGeometry],
                                             lower_epoch: float, upper_epoch: float,
                                             central_instant_observable: bool = True,
                                             observation_epoch: float = None) -> np.ndarray:
    """
    Compute the value of a mutual approximation observable.

    For the fixed-instant mutual approximation (``central_instant_observable``
    False) the value is f at ``observation_epoch``; the bracket is unused.

    Returns:
    --------
    np.ndarray
        Observable value, shape (observable_type.dimension,)
    """
    if observable_type == ObservableType.MUTUAL_APPROXIMATION and not central_instant_observable:
        if observation_epoch is None:
            raise ValueError("Fixed-instant mutual approximation requires an observation epoch")
        return np.array([rate_product(geometry_function(observation_epoch))])

    central_instant = compute_central_instant(geometry_function, lower_epoch, upper_epoch)
    if observable_type == ObservableType.MUTUAL_APPROXIMATION:
        return np.array([central_instant])

    impact_parameter = ApparentSeparation.from_geometry(geometry_function(central_instant)).separation
    if observable_type == ObservableType.IMPACT_PARAMETER_MUTUAL_APPROX:
        return np.array([impact_parameter])
    return np.array([central_instant, impact_parameter])
