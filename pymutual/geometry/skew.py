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
Rotation generators of rotating bodies.

The cross-product matrix of the spin axis generates the rotation about it:
d/dtheta R(theta) = R(theta) [k]x for a rotation by theta about the unit
axis k.
"""

import numpy as np
from numba import njit


@njit(cache=True, fastmath=True)
def skew(v):
    """
    Cross-product matrix [v]x, so that [v]x r = v x r.

    Used as the generator of a body's rotation: with v the spin axis, the
    body-fixed to inertial rotation about it changes at rate R [v]x per
    radian, and with v the angular velocity a body-fixed point moves at
    [v]x r.

    Parameters
    ----------
    v : array_like, shape (3,)
        Spin axis or angular velocity

    Returns
    -------
    M : ndarray, shape (3, 3)
        Antisymmetric matrix of ``v``
    """
    return np.array([[0.0, -v[2], v[1]],
                     [v[2], 0.0, -v[0]],
                     [-v[1], v[0], 0.0]], dtype=np.double)


@njit(cache=True, fastmath=True)
def deskew(M):
    """
    Angular velocity from dR/dt R^T, the inverse of ``skew``.

    Reads M[2, 1], M[0, 2] and M[1, 0] only, so any residual symmetric part
    of a numerically computed generator is dropped.
    """
    return np.array([M[2, 1], M[0, 2], M[1, 0]], dtype=np.double)
