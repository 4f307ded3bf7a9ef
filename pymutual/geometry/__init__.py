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
Geometry utilities for mutual approximation observables.

Modules
-------
apparent_separation : module
    Line-of-sight derivative kernels and apparent separation partials
central_instant : module
    Root finding of the closest apparent approach and observable values
skew : module
    Cross-product matrices generating body rotations
"""

from .apparent_separation import ApparentSeparation, line_of_sight_derivatives
from .central_instant import (compute_central_instant,
                              compute_mutual_approximation_observation, rate_product)
from .skew import deskew, skew

__all__ = [
    'ApparentSeparation', 'line_of_sight_derivatives',
    'compute_central_instant', 'compute_mutual_approximation_observation', 'rate_product',
    'skew', 'deskew',
]
