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
Apparent separation of two bodies seen from an observer.

The apparent separation vector is the difference of the two line-of-sight
unit vectors, s = u2 - u1, with u_i pointing from the receiver to
transmitter i. For the small separations of mutual approximations |s| equals
the angular separation in radians to within O(|s|^3).

The closest apparent approach is reached when

    f = s . ds/dt = 0

f is the observable of the fixed-instant (modified) mutual approximation;
its root is the central instant t_c, and |s(t_c)| the impact parameter.
For a parameter p, the implicit function theorem gives

    dt_c/dp = -(df/dp) / (df/dt),   df/dt = |ds/dt|^2 + s . d2s/dt2

The kernels below provide the line-of-sight derivatives needed for these
expressions. All partials are with respect to the inertial positions and
velocities of the link ends at the evaluation epoch.

References:
    Morgado et al. (2016), A&A 588, A44, mutual approximations of the
    Galilean satellites
"""

import numpy as np
from numba import njit

from ..core.constants import MIN_RANGE, MIN_SEPARATION
from ..core.data_structures import LinkEndType


@njit(cache=True, fastmath=True)
def line_of_sight_derivatives(rho, w, a):
    """
    Unit line-of-sight vector, its time derivatives and its partials.

    Parameters
    ----------
    rho : ndarray, shape (3,)
        Relative position transmitter - receiver (m)
    w : ndarray, shape (3,)
        Relative velocity (m/s)
    a : ndarray, shape (3,)
        Relative acceleration (m/s^2)

    Returns
    -------
    u : ndarray, shape (3,)
        Unit vector rho / |rho|
    u_dot : ndarray, shape (3,)
        First time derivative of u
    u_ddot : ndarray, shape (3,)
        Second time derivative of u
    du_drho : ndarray, shape (3, 3)
        Partial of u (and of u_dot w.r.t. w) w.r.t. rho, (I - u u^T) / |rho|
    du_dot_drho : ndarray, shape (3, 3)
        Partial of u_dot w.r.t. rho at constant w
    """
    n = np.sqrt(np.sum(rho * rho))
    u = rho / n
    uw = np.sum(u * w)
    u_dot = (w - u * uw) / n
    u_ddot = (a - 2.0 * u_dot * uw - u * (np.sum(u_dot * w) + np.sum(u * a))) / n

    projection = np.eye(3) - np.outer(u, u)
    du_drho = projection / n
    du_dot_drho = -(uw * projection / (n * n) + (np.outer(u, u_dot) + np.outer(u_dot, u)) / n)
    return u, u_dot, u_ddot, du_drho, du_dot_drho


@njit(cache=True, fastmath=True)
def rate_product_rows(s, s_dot, du_drho, du_dot_drho):
    """
    Partials of f = s . ds/dt w.r.t. one line-of-sight vector.

    Returns the row vectors df/drho and df/dw for the transmitter whose unit
    vector enters s with a positive sign; negate both for the other one.
    """
    df_drho = s_dot @ du_drho + s @ du_dot_drho
    df_dw = s @ du_drho
    return df_drho, df_dw


class ApparentSeparation:
    """
    Apparent separation geometry of one link at one epoch.

    Attributes
    ----------
    separation_vector : np.ndarray
        s = u2 - u1
    separation_rate : np.ndarray
        ds/dt
    separation : float
        |s| (rad)
    rate_product : float
        f = s . ds/dt (rad^2/s)
    rate_product_derivative : float
        df/dt (rad^2/s^2)

    Examples
    --------
    >>> sep = ApparentSeparation.from_geometry(geometry)
    >>> dtc = sep.central_instant_partials()
    """

    def __init__(self, position_t1, velocity_t1, acceleration_t1,
                 position_t2, velocity_t2, acceleration_t2,
                 position_r, velocity_r, acceleration_r):
        rho1 = np.ascontiguousarray(position_t1 - position_r, dtype=np.float64)
        rho2 = np.ascontiguousarray(position_t2 - position_r, dtype=np.float64)
        if np.linalg.norm(rho1) < MIN_RANGE or np.linalg.norm(rho2) < MIN_RANGE:
            raise ValueError("Receiver coincides with a transmitter, line of sight undefined")

        w1 = np.ascontiguousarray(velocity_t1 - velocity_r, dtype=np.float64)
        w2 = np.ascontiguousarray(velocity_t2 - velocity_r, dtype=np.float64)
        a1 = np.ascontiguousarray(acceleration_t1 - acceleration_r, dtype=np.float64)
        a2 = np.ascontiguousarray(acceleration_t2 - acceleration_r, dtype=np.float64)

        u1, u1_dot, u1_ddot, self._du1_drho, self._du1_dot_drho = line_of_sight_derivatives(rho1, w1, a1)
        u2, u2_dot, u2_ddot, self._du2_drho, self._du2_dot_drho = line_of_sight_derivatives(rho2, w2, a2)

        self.separation_vector = u2 - u1
        self.separation_rate = u2_dot - u1_dot
        self.separation_acceleration = u2_ddot - u1_ddot
        self.separation = float(np.linalg.norm(self.separation_vector))
        self.rate_product = float(self.separation_vector @ self.separation_rate)
        self.rate_product_derivative = float(self.separation_rate @ self.separation_rate
                                             + self.separation_vector @ self.separation_acceleration)

    @classmethod
    def from_geometry(cls, geometry) -> "ApparentSeparation":
        """Build from a LinkGeometry holding transmitter, transmitter2 and receiver"""
        t1, t2, r = LinkEndType.TRANSMITTER, LinkEndType.TRANSMITTER2, LinkEndType.RECEIVER
        return cls(geometry.position(t1), geometry.velocity(t1), geometry.acceleration(t1),
                   geometry.position(t2), geometry.velocity(t2), geometry.acceleration(t2),
                   geometry.position(r), geometry.velocity(r), geometry.acceleration(r))

    def _per_role(self, row_t1, row_t2):
        # rho_i = r_Ti - r_R, so the receiver takes the negated sum
        return {
            LinkEndType.TRANSMITTER: row_t1,
            LinkEndType.TRANSMITTER2: row_t2,
            LinkEndType.RECEIVER: -(row_t1 + row_t2),
        }

    def rate_product_partials(self):
        """
        Partials of f w.r.t. link end positions and velocities.

        Returns
        -------
        position_partials : dict[LinkEndType, np.ndarray]
            df/dr per role, shape (3,)
        velocity_partials : dict[LinkEndType, np.ndarray]
            df/dv per role, shape (3,)
        """
        s = np.ascontiguousarray(self.separation_vector)
        s_dot = np.ascontiguousarray(self.separation_rate)
        df_drho2, df_dw2 = rate_product_rows(s, s_dot, self._du2_drho, self._du2_dot_drho)
        df_drho1, df_dw1 = rate_product_rows(s, s_dot, self._du1_drho, self._du1_dot_drho)
        return self._per_role(-df_drho1, df_drho2), self._per_role(-df_dw1, df_dw2)

    def central_instant_partials(self):
        """
        Partials of the central instant, -(df/dx) / (df/dt).

        Raises
        ------
        ValueError
            If df/dt vanishes (no isolated closest approach)
        """
        if self.rate_product_derivative == 0.0:
            raise ValueError("Degenerate mutual approximation geometry: df/dt is zero")
        factor = -1.0 / self.rate_product_derivative
        position_partials, velocity_partials = self.rate_product_partials()
        return ({role: factor * row for role, row in position_partials.items()},
                {role: factor * row for role, row in velocity_partials.items()})

    def separation_partials(self):
        """
        Partials of |s| w.r.t. link end positions at fixed epoch.

        The separation does not depend on the velocities at fixed epoch.
        """
        if self.separation < MIN_SEPARATION:
            raise ValueError("Apparent separation is zero, its direction is undefined")
        unit = self.separation_vector / self.separation
        row_t2 = unit @ self._du2_drho
        row_t1 = -(unit @ self._du1_drho)
        return self._per_role(row_t1, row_t2)

    def impact_parameter_partials(self):
        """
        Partials of the separation at the central instant.

        d|s(t_c)|/dx = d|s|/dx + (f / |s|) dt_c/dx. The second term vanishes
        exactly at the central instant but keeps the partial consistent when
        evaluated slightly away from it.
        """
        separation_rows = self.separation_partials()
        tc_position, tc_velocity = self.central_instant_partials()
        rate = self.rate_product / self.separation
        position_partials = {role: separation_rows[role] + rate * tc_position[role]
                             for role in separation_rows}
        velocity_partials = {role: rate * tc_velocity[role] for role in tc_velocity}
        return position_partials, velocity_partials
