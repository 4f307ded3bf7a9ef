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

"""Bodies and the read-only body context used during partial assembly"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Optional

import numpy as np

from ..core.data_structures import LinkEndId, LinkEnds, LinkEndType, LinkGeometry
from .rotation import SimpleRotationalEphemeris


@dataclass
class Body:
    """Body taking part in observation links.

    Attributes
    ----------
    name : str
        Body name
    ephemeris : Callable[[float], np.ndarray]
        Inertial Cartesian state of the body center as a function of epoch
    rotation_model : SimpleRotationalEphemeris, optional
        Body-fixed to inertial rotation, required for reference points
    ground_stations : dict[str, np.ndarray]
        Body-fixed positions of named reference points (m)
    gravitational_parameter : float
        GM of the body (m^3/s^2)
    """
    name: str
    ephemeris: Callable[[float], np.ndarray]
    rotation_model: Optional[SimpleRotationalEphemeris] = None
    ground_stations: Dict[str, np.ndarray] = field(default_factory=dict)
    gravitational_parameter: float = 0.0

    def __post_init__(self):
        self.ground_stations = {name: np.asarray(position, dtype=np.float64)
                                for name, position in self.ground_stations.items()}

    def state(self, epoch: float) -> np.ndarray:
        return np.asarray(self.ephemeris(epoch), dtype=np.float64)

    def ground_station_position(self, station: str) -> np.ndarray:
        if station not in self.ground_stations:
            raise ValueError(f"Body {self.name} has no reference point {station}")
        return self.ground_stations[station]

    def reference_point_state(self, station: str, epoch: float) -> np.ndarray:
        """Inertial state of a reference point on this body"""
        if self.rotation_model is None:
            raise ValueError(f"Body {self.name} has no rotation model, cannot place reference point {station}")
        body_fixed = self.ground_station_position(station)
        offset = np.concatenate([
            self.rotation_model.rotation_to_inertial(epoch) @ body_fixed,
            self.rotation_model.rotation_derivative_to_inertial(epoch) @ body_fixed,
        ])
        return self.state(epoch) + offset


class SystemOfBodies:
    """
    Read-only collection of bodies for one estimation run.

    Passed explicitly into every assembly call in place of a global body
    registry.

    Examples
    --------
    >>> bodies = SystemOfBodies([Body("Earth", ConstantEphemeris(np.zeros(3)))])
    >>> "Earth" in bodies
    True
    """

    def __init__(self, bodies: Iterable[Body] = ()):
        self._bodies = {}
        for body in bodies:
            if body.name in self._bodies:
                raise ValueError(f"Duplicate body {body.name}")
            self._bodies[body.name] = body

    def __contains__(self, name: str) -> bool:
        return name in self._bodies

    def __iter__(self):
        return iter(self._bodies.values())

    def __len__(self):
        return len(self._bodies)

    def get(self, name: str) -> Body:
        if name not in self._bodies:
            raise ValueError(f"Body {name} not found in system of bodies")
        return self._bodies[name]

    @property
    def body_names(self):
        return list(self._bodies)

    def link_end_state(self, link_end: LinkEndId, epoch: float) -> np.ndarray:
        """Inertial state of a body center or of a reference point on it"""
        body = self.get(link_end.body)
        if link_end.has_reference_point:
            return body.reference_point_state(link_end.reference_point, epoch)
        return body.state(epoch)

    def link_geometry(self, link_ends: LinkEnds, epoch: float,
                      accelerations: Optional[Dict[LinkEndType, np.ndarray]] = None) -> LinkGeometry:
        """States of all link ends at a common epoch"""
        states = {role: self.link_end_state(end, epoch) for role, end in link_ends.items()}
        return LinkGeometry(states, dict(accelerations or {}))
