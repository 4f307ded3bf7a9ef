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

"""Rotational ephemerides of bodies"""

import numpy as np
from scipy.spatial.transform import Rotation

from ..geometry.skew import deskew, skew

# Generator of rotations about the body-fixed z axis
_Z_AXIS_GENERATOR = skew(np.array([0.0, 0.0, 1.0]))


class SimpleRotationalEphemeris:
    """
    Uniform rotation about a fixed pole.

    The body-fixed to inertial rotation is R(t) = Rz(ra + pi/2) Rx(pi/2 - dec) Rz(W(t))
    with W(t) = W0 + omega (t - t0), the IAU pole and prime meridian
    convention with a constant rotation rate.

    Parameters:
    -----------
    pole_right_ascension : float
        Right ascension of the pole (rad)
    pole_declination : float
        Declination of the pole (rad)
    initial_angle : float
        Prime meridian angle W0 at the reference epoch (rad)
    rotation_rate : float
        Rotation rate omega (rad/s)
    reference_epoch : float
        Reference epoch t0 (s)
    """

    def __init__(self, pole_right_ascension: float, pole_declination: float,
                 initial_angle: float, rotation_rate: float, reference_epoch: float = 0.0):
        self.pole_right_ascension = pole_right_ascension
        self.pole_declination = pole_declination
        self.initial_angle = initial_angle
        self.rotation_rate = rotation_rate
        self.reference_epoch = reference_epoch

    def rotation_angle(self, epoch: float) -> float:
        """Prime meridian angle W(t) (rad)"""
        return self.initial_angle + self.rotation_rate * (epoch - self.reference_epoch)

    def rotation_to_inertial(self, epoch: float) -> np.ndarray:
        """Body-fixed to inertial rotation matrix (3x3)"""
        return Rotation.from_euler(
            'ZXZ',
            [self.pole_right_ascension + np.pi / 2.0,
             np.pi / 2.0 - self.pole_declination,
             self.rotation_angle(epoch)]
        ).as_matrix()

    def rotation_derivative_to_inertial(self, epoch: float) -> np.ndarray:
        """Time derivative of the body-fixed to inertial rotation matrix (3x3)"""
        return self.rotation_rate * self.rotation_to_inertial(epoch) @ _Z_AXIS_GENERATOR

    def angular_velocity(self, epoch: float) -> np.ndarray:
        """Angular velocity vector in the inertial frame (rad/s)"""
        rotation = self.rotation_to_inertial(epoch)
        return deskew(np.ascontiguousarray(self.rotation_derivative_to_inertial(epoch) @ rotation.T))

    def rotation_partial_wrt_rate(self, epoch: float) -> np.ndarray:
        """Partial of R(t) w.r.t. the rotation rate (3x3)"""
        return (epoch - self.reference_epoch) * self.rotation_to_inertial(epoch) @ _Z_AXIS_GENERATOR

    def rotation_derivative_partial_wrt_rate(self, epoch: float) -> np.ndarray:
        """Partial of dR/dt w.r.t. the rotation rate (3x3)"""
        rotation_generator = self.rotation_to_inertial(epoch) @ _Z_AXIS_GENERATOR
        return (rotation_generator
                + self.rotation_rate * (epoch - self.reference_epoch) * rotation_generator @ _Z_AXIS_GENERATOR)
