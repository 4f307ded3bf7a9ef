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

"""Translational ephemerides of bodies"""

import numpy as np

from ..core.constants import INITIAL_STATE_SIZE, POSITION_SIZE


class LinearEphemeris:
    """
    Constant-velocity ephemeris.

    Sufficient for the short arcs spanned by one mutual approximation event
    and for generating reference geometries; any callable
    ``epoch -> state`` can be used in its place.

    Parameters:
    -----------
    reference_state : np.ndarray
        Cartesian state [x, y, z, vx, vy, vz] at ``reference_epoch`` (m, m/s)
    reference_epoch : float
        Epoch of the reference state (s)
    """

    def __init__(self, reference_state: np.ndarray, reference_epoch: float = 0.0):
        self.reference_state = np.asarray(reference_state, dtype=np.float64)
        if self.reference_state.shape != (INITIAL_STATE_SIZE,):
            raise ValueError(f"Reference state must have shape (6,), got {self.reference_state.shape}")
        self.reference_epoch = reference_epoch

    def __call__(self, epoch: float) -> np.ndarray:
        dt = epoch - self.reference_epoch
        state = self.reference_state.copy()
        state[:POSITION_SIZE] += dt * self.reference_state[POSITION_SIZE:]
        return state


class ConstantEphemeris:
    """Ephemeris of a body at rest"""

    def __init__(self, position: np.ndarray):
        self.position = np.asarray(position, dtype=np.float64)

    def __call__(self, epoch: float) -> np.ndarray:
        return np.concatenate([self.position, np.zeros(POSITION_SIZE)])
