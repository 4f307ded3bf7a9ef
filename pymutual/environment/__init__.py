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
Environment models consumed by partial assembly.

Bodies, their translational and rotational ephemerides and the read-only
body context passed into every assembly call.
"""

from .bodies import Body, SystemOfBodies
from .ephemeris import ConstantEphemeris, LinearEphemeris
from .rotation import SimpleRotationalEphemeris

__all__ = [
    'Body', 'SystemOfBodies',
    'ConstantEphemeris', 'LinearEphemeris',
    'SimpleRotationalEphemeris',
]
