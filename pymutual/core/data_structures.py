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

"""Core data structures for observation partial assembly"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .constants import INITIAL_STATE_SIZE, POSITION_SIZE


class LinkEndType(Enum):
    """Role of a body (or a reference point on it) in an observation link.

    Attributes
    ----------
    TRANSMITTER : int
        First observed body (emitter of the light received on leg 0)
    TRANSMITTER2 : int
        Second observed body (emitter of the light received on leg 1)
    RECEIVER : int
        Observer
    REFLECTOR : int
        Intermediate link end, not used by mutual approximation observables
    """
    TRANSMITTER = 1
    TRANSMITTER2 = 2
    RECEIVER = 3
    REFLECTOR = 4


@dataclass(frozen=True)
class LinkEndId:
    """Body, and optionally a named reference point on it, taking part in a link.

    Attributes
    ----------
    body : str
        Name of the body
    reference_point : str
        Name of the reference point (ground station) on the body, empty for
        the body center of mass
    """
    body: str
    reference_point: str = ""

    @property
    def has_reference_point(self) -> bool:
        return bool(self.reference_point)

    def __str__(self):
        if self.reference_point:
            return f"{self.body}/{self.reference_point}"
        return self.body


class LinkEnds(Mapping):
    """Immutable, hashable mapping of link end roles to link end identifiers.

    Two LinkEnds holding the same roles bound to the same identifiers compare
    and hash equal regardless of the order in which the roles were given, so
    they can key the per-link results of batch assembly.

    Examples
    --------
    >>> link = LinkEnds({LinkEndType.TRANSMITTER: LinkEndId("Io"),
    ...                  LinkEndType.TRANSMITTER2: LinkEndId("Europa"),
    ...                  LinkEndType.RECEIVER: LinkEndId("Earth")})
    >>> link[LinkEndType.RECEIVER].body
    'Earth'
    """

    __slots__ = ("_ends", "_hash")

    def __init__(self, ends: Optional[Mapping] = None, **kwargs):
        items = dict(ends or {})
        for role_name, end in kwargs.items():
            items[LinkEndType[role_name.upper()]] = end

        converted = {}
        for role, end in items.items():
            if not isinstance(role, LinkEndType):
                raise ValueError(f"Invalid link end role: {role!r}")
            if isinstance(end, str):
                end = LinkEndId(end)
            elif isinstance(end, tuple):
                end = LinkEndId(*end)
            converted[role] = end
        object.__setattr__(self, "_ends", converted)
        object.__setattr__(self, "_hash", hash(frozenset(converted.items())))

    def __setattr__(self, name, value):
        raise AttributeError("LinkEnds is immutable")

    def __getitem__(self, role: LinkEndType) -> LinkEndId:
        return self._ends[role]

    def __iter__(self):
        return iter(sorted(self._ends, key=lambda role: role.value))

    def __len__(self):
        return len(self._ends)

    def __hash__(self):
        return self._hash

    def __eq__(self, other):
        if isinstance(other, LinkEnds):
            return self._ends == other._ends
        return NotImplemented

    def __repr__(self):
        ends = ", ".join(f"{role.name.lower()}={self._ends[role]}" for role in self)
        return f"LinkEnds({ends})"

    def roles_of_body(self, body: str) -> Tuple[LinkEndType, ...]:
        """Roles in this link bound to ``body`` (any reference point)"""
        return tuple(role for role in self if self._ends[role].body == body)

    def missing_roles(self, required) -> Tuple[LinkEndType, ...]:
        """Required roles absent from this link, in role order"""
        return tuple(sorted((role for role in required if role not in self._ends),
                            key=lambda role: role.value))


class ObservableType(Enum):
    """Observable variants whose partials are assembled by this package.

    Attributes
    ----------
    MUTUAL_APPROXIMATION : int
        Central instant of the closest apparent approach of transmitter and
        transmitter2 as seen from the receiver (size 1)
    MUTUAL_APPROXIMATION_WITH_IMPACT_PARAMETER : int
        Central instant and apparent separation at that instant (size 2)
    IMPACT_PARAMETER_MUTUAL_APPROX : int
        Apparent separation at the central instant (size 1)
    """
    MUTUAL_APPROXIMATION = 1
    MUTUAL_APPROXIMATION_WITH_IMPACT_PARAMETER = 2
    IMPACT_PARAMETER_MUTUAL_APPROX = 3

    @property
    def dimension(self) -> int:
        """Number of scalar values in one observation"""
        return _OBSERVABLE_DIMENSIONS[self]

    @property
    def required_link_ends(self) -> Tuple[LinkEndType, ...]:
        """Roles a link must contain for this observable"""
        return _REQUIRED_LINK_ENDS[self]

    @property
    def number_of_legs(self) -> int:
        """Number of light propagation legs, one per transmitter"""
        return sum(1 for role in self.required_link_ends if role != LinkEndType.RECEIVER)


_MUTUAL_APPROXIMATION_ENDS = (LinkEndType.TRANSMITTER, LinkEndType.TRANSMITTER2, LinkEndType.RECEIVER)

_OBSERVABLE_DIMENSIONS = {
    ObservableType.MUTUAL_APPROXIMATION: 1,
    ObservableType.MUTUAL_APPROXIMATION_WITH_IMPACT_PARAMETER: 2,
    ObservableType.IMPACT_PARAMETER_MUTUAL_APPROX: 1,
}

_REQUIRED_LINK_ENDS = {
    ObservableType.MUTUAL_APPROXIMATION: _MUTUAL_APPROXIMATION_ENDS,
    ObservableType.MUTUAL_APPROXIMATION_WITH_IMPACT_PARAMETER: _MUTUAL_APPROXIMATION_ENDS,
    ObservableType.IMPACT_PARAMETER_MUTUAL_APPROX: _MUTUAL_APPROXIMATION_ENDS,
}

# Light propagation legs: leg index -> (emitting role, receiving role)
LIGHT_TIME_LEGS = {
    0: (LinkEndType.TRANSMITTER, LinkEndType.RECEIVER),
    1: (LinkEndType.TRANSMITTER2, LinkEndType.RECEIVER),
}


@dataclass
class LinkGeometry:
    """Inertial states of the link ends at one evaluation epoch.

    Attributes
    ----------
    states : dict[LinkEndType, np.ndarray]
        Cartesian state [x, y, z, vx, vy, vz] per role (m, m/s)
    accelerations : dict[LinkEndType, np.ndarray]
        Inertial acceleration per role (m/s^2); roles without an entry are
        taken as unaccelerated
    """
    states: Dict[LinkEndType, np.ndarray]
    accelerations: Dict[LinkEndType, np.ndarray] = field(default_factory=dict)

    def __post_init__(self):
        self.states = {role: np.asarray(state, dtype=np.float64)
                       for role, state in self.states.items()}
        for role, state in self.states.items():
            if state.shape != (INITIAL_STATE_SIZE,):
                raise ValueError(f"State of {role.name} must have shape (6,), got {state.shape}")
        self.accelerations = {role: np.asarray(acc, dtype=np.float64)
                              for role, acc in self.accelerations.items()}

    def state(self, role: LinkEndType) -> np.ndarray:
        if role not in self.states:
            raise ValueError(f"No state available for link end {role.name}")
        return self.states[role]

    def position(self, role: LinkEndType) -> np.ndarray:
        return self.state(role)[:POSITION_SIZE]

    def velocity(self, role: LinkEndType) -> np.ndarray:
        return self.state(role)[POSITION_SIZE:]

    def acceleration(self, role: LinkEndType) -> np.ndarray:
        return self.accelerations.get(role, np.zeros(POSITION_SIZE))


@dataclass(frozen=True)
class PartialCreationResult:
    """Outcome of trying to create a partial for one parameter.

    An absent result means the observable has no analytic dependency on the
    parameter; it is an expected outcome, not an error.
    """
    partial: Optional[Any] = None
    reason: str = ""

    @classmethod
    def present(cls, partial) -> "PartialCreationResult":
        if partial is None:
            raise ValueError("A present result requires a partial")
        return cls(partial=partial)

    @classmethod
    def absent(cls, reason: str = "no dependency") -> "PartialCreationResult":
        return cls(partial=None, reason=reason)

    @property
    def is_present(self) -> bool:
        return self.partial is not None
