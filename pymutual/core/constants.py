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

"""Physical constants and fixed sizes used in partial assembly"""

# Physical Constants
CLIGHT = 299792458.0  # speed of light (m/s)

# Sizes
INITIAL_STATE_SIZE = 6         # Cartesian translational state [x, y, z, vx, vy, vz]
POSITION_SIZE = 3              # Cartesian position
NUMBER_OF_LIGHT_TIME_LEGS = 2  # transmitter->receiver, transmitter2->receiver

# Numerical tolerances
MIN_RANGE = 1.0e-3             # minimum line-of-sight length (m)
MIN_SEPARATION = 1.0e-15       # minimum apparent separation (rad)
