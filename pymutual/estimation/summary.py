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

"""Evaluation and tabulation of assembled partial blocks"""

import logging
from typing import Dict, Optional

import numpy as np
import pandas as pd

from ..core.data_structures import LinkGeometry

logger = logging.getLogger(__name__)


def evaluate_link_partials(link_partials, epoch: float, geometry: LinkGeometry, total_size: int,
                           observation: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Design matrix rows of one observation.

    Parameters:
    -----------
    link_partials : LinkPartials
        Assembly result of the link
    epoch : float
        Evaluation epoch (s)
    geometry : LinkGeometry
        Link end states at ``epoch``
    total_size : int
        Length of the global parameter vector
    observation : np.ndarray, optional
        Observation value, required by relative bias partials

    Returns:
    --------
    np.ndarray
        Partials of shape (observable dimension, total_size); columns of
        parameters without a block are zero
    """
    blocks, scaling = link_partials
    scaling.update(epoch, geometry)

    rows = np.zeros((scaling.dimension, total_size))
    for (start, size), partial in blocks.items():
        rows[:, start:start + size] = partial.evaluate(epoch, geometry, observation)
    return rows


def partials_to_dataframe(blocks: Dict) -> pd.DataFrame:
    """
    Tabulate a block map.

    Returns:
    --------
    pd.DataFrame
        One row per block with columns start, size, end, parameter and
        partial, sorted by start index
    """
    records = [{
        'start': start,
        'size': size,
        'end': start + size,
        'parameter': partial.parameter.description,
        'partial': type(partial).__name__,
    } for (start, size), partial in blocks.items()]
    df = pd.DataFrame(records, columns=['start', 'size', 'end', 'parameter', 'partial'])
    return df.sort_values('start').reset_index(drop=True)
