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

"""Core Partial Assembly Module.

Fundamental components shared by every stage of partial assembly:

- **Constants**: speed of light, state and leg sizes, numerical tolerances
- **Data Structures**: link end roles and identifiers, immutable link ends,
  observable types, link geometry and the explicit present/absent partial
  creation result
- **Configuration**: scaling variant selection and batch strictness
"""

from .config import PartialAssemblyConfig
from .constants import (CLIGHT, INITIAL_STATE_SIZE, NUMBER_OF_LIGHT_TIME_LEGS,
                        POSITION_SIZE)
from .data_structures import (LIGHT_TIME_LEGS, LinkEndId, LinkEnds, LinkEndType,
                              LinkGeometry, ObservableType, PartialCreationResult)

__all__ = [
    'PartialAssemblyConfig',
    'CLIGHT', 'INITIAL_STATE_SIZE', 'NUMBER_OF_LIGHT_TIME_LEGS', 'POSITION_SIZE',
    'LIGHT_TIME_LEGS', 'LinkEndId', 'LinkEnds', 'LinkEndType', 'LinkGeometry',
    'ObservableType', 'PartialCreationResult',
]
