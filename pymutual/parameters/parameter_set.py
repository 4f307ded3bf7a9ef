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
Estimated parameter catalog.

Orders the estimated parameters the way the global parameter vector is laid
out: initial states first in solve order with 6 entries each, followed by
scalar and vector parameters at their (possibly externally assigned, not
necessarily contiguous) indices.
"""

import logging
from typing import Dict, Iterable, List, Sequence, Tuple, Union

from ..core.constants import INITIAL_STATE_SIZE
from .estimatable_parameters import (EstimatableParameter, ParameterCategory,
                                     is_body_state_parameter)

logger = logging.getLogger(__name__)

IndexedParameters = Union[Dict[int, EstimatableParameter], Sequence[EstimatableParameter]]


class EstimatableParameterSet:
    """
    Catalog of all parameters estimated in one batch solution.

    Parameters:
    -----------
    initial_state_parameters : Sequence[EstimatableParameter]
        Dynamical parameters in solve order
    scalar_parameters : dict[int, EstimatableParameter] or sequence
        Scalar parameters keyed by global index; a sequence is packed after
        the dynamical block
    vector_parameters : dict[int, EstimatableParameter] or sequence
        Vector parameters keyed by global index; a sequence is packed after
        the scalar parameters

    Raises:
    -------
    ValueError
        If a parameter is listed under the wrong category, a dynamical
        parameter is not a body state, a scalar or vector parameter starts
        inside the dynamical block, or two index ranges overlap

    Examples
    --------
    >>> parameters = EstimatableParameterSet(
    ...     [initial_body_state("Io"), initial_body_state("Europa")],
    ...     {20: gravitational_parameter("Jupiter")})
    >>> list(parameters.scalar_parameters)
    [20]
    """

    def __init__(self, initial_state_parameters: Sequence[EstimatableParameter] = (),
                 scalar_parameters: IndexedParameters = (),
                 vector_parameters: IndexedParameters = ()):
        self._initial_state_parameters = list(initial_state_parameters)
        for parameter in self._initial_state_parameters:
            self._check_category(parameter, ParameterCategory.DYNAMICAL)
            self.dynamical_parameter_body(parameter)

        next_index = self.dynamical_size
        self._scalar_parameters, next_index = self._index_parameters(
            scalar_parameters, ParameterCategory.SCALAR, next_index)
        self._vector_parameters, _ = self._index_parameters(
            vector_parameters, ParameterCategory.VECTOR, next_index)

        self._check_index_ranges()
        logger.debug(f"Parameter set: {len(self._initial_state_parameters)} initial states, "
                     f"{len(self._scalar_parameters)} scalar, {len(self._vector_parameters)} vector, "
                     f"total size {self.total_size}")

    @staticmethod
    def _check_category(parameter: EstimatableParameter, category: ParameterCategory):
        if parameter.category != category:
            raise ValueError(f"Parameter {parameter.description} is {parameter.category.name.lower()}, "
                             f"listed as {category.name.lower()}")

    def _index_parameters(self, parameters: IndexedParameters, category: ParameterCategory,
                          next_index: int) -> Tuple[Dict[int, EstimatableParameter], int]:
        if isinstance(parameters, dict):
            indexed = dict(parameters)
        else:
            indexed = {}
            for parameter in parameters:
                indexed[next_index] = parameter
                next_index += parameter.size

        for index, parameter in indexed.items():
            self._check_category(parameter, category)
            if index < self.dynamical_size:
                raise ValueError(f"Parameter {parameter.description} at index {index} lies inside "
                                 f"the initial state block [0, {self.dynamical_size})")
            next_index = max(next_index, index + parameter.size)
        return dict(sorted(indexed.items())), next_index

    def _check_index_ranges(self):
        ranges = [(start, size, parameter) for start, size, parameter in self.parameter_indices()
                  if parameter.category != ParameterCategory.DYNAMICAL]
        for (start, size, parameter), (next_start, _, next_parameter) in zip(ranges, ranges[1:]):
            if start + size > next_start:
                raise ValueError(f"Index range [{start}, {start + size}) of {parameter.description} "
                                 f"overlaps {next_parameter.description} at {next_start}")

    @property
    def initial_state_parameters(self) -> List[EstimatableParameter]:
        """Dynamical parameters in solve order"""
        return list(self._initial_state_parameters)

    @property
    def scalar_parameters(self) -> Dict[int, EstimatableParameter]:
        """Scalar parameters keyed by global index, ascending"""
        return dict(self._scalar_parameters)

    @property
    def vector_parameters(self) -> Dict[int, EstimatableParameter]:
        """Vector parameters keyed by global index, ascending"""
        return dict(self._vector_parameters)

    @property
    def dynamical_size(self) -> int:
        """Size of the initial state block, 6 per dynamical parameter"""
        return INITIAL_STATE_SIZE * len(self._initial_state_parameters)

    @property
    def total_size(self) -> int:
        """Length of the global parameter vector"""
        ends = [start + size for start, size, _ in self.parameter_indices()]
        return max(ends, default=0)

    def __len__(self):
        return len(self._initial_state_parameters) + len(self._scalar_parameters) + len(self._vector_parameters)

    def __iter__(self):
        return (parameter for _, _, parameter in self.parameter_indices())

    def parameter_indices(self) -> List[Tuple[int, int, EstimatableParameter]]:
        """(start index, size, parameter) for every parameter, ascending start"""
        entries = [(i * INITIAL_STATE_SIZE, INITIAL_STATE_SIZE, parameter)
                   for i, parameter in enumerate(self._initial_state_parameters)]
        entries.extend((index, parameter.size, parameter) for index, parameter in self._scalar_parameters.items())
        entries.extend((index, parameter.size, parameter) for index, parameter in self._vector_parameters.items())
        return sorted(entries, key=lambda entry: entry[0])

    @staticmethod
    def dynamical_parameter_body(parameter: EstimatableParameter) -> str:
        """
        Body whose translational state a dynamical parameter represents.

        Raises:
        -------
        ValueError
            If the parameter is not a (single- or arc-wise) body state
        """
        if not is_body_state_parameter(parameter.parameter_type):
            raise ValueError(f"Error when making observation partials, could not identify parameter "
                             f"{parameter.description}")
        return parameter.body


def create_parameter_set(parameters: Iterable[EstimatableParameter]) -> EstimatableParameterSet:
    """
    Build a parameter set with packed indices.

    Initial states come first in the order given, then scalar parameters,
    then vector parameters, each in the order given.
    """
    parameters = list(parameters)
    return EstimatableParameterSet(
        [p for p in parameters if p.category == ParameterCategory.DYNAMICAL],
        [p for p in parameters if p.category == ParameterCategory.SCALAR],
        [p for p in parameters if p.category == ParameterCategory.VECTOR],
    )
