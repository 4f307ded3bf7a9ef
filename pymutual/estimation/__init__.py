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
Partial assembly for batch estimation.

Modules
-------
assembly : module
    Single-link and batch assembly of observation partial blocks
summary : module
    Design matrix evaluation and tabulation of block maps
"""

from .assembly import (LinkPartials, PartialAssembler, assemble_partials, assemble_partials_batch,
                       create_impact_parameter_partials, create_link_partials,
                       create_mutual_approximation_partials,
                       create_mutual_approximation_with_impact_parameter_partials,
                       create_partials_for_links, validate_link_ends)
from .summary import evaluate_link_partials, partials_to_dataframe

__all__ = [
    'LinkPartials', 'PartialAssembler',
    'create_link_partials', 'create_partials_for_links', 'validate_link_ends',
    'assemble_partials', 'assemble_partials_batch',
    'create_mutual_approximation_partials',
    'create_mutual_approximation_with_impact_parameter_partials',
    'create_impact_parameter_partials',
    'evaluate_link_partials', 'partials_to_dataframe',
]
