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
PyMutual - Observation partials for mutual approximations

A Python library assembling the partial derivatives of mutual approximation
observables (central instant and impact parameter of the closest apparent
approach of two bodies) w.r.t. the parameters of a batch orbit estimation.
"""

__version__ = "1.0.0"
__author__ = "PyMutual Development Team"
__title__ = "pymutual"
__description__ = "Observation partials for mutual approximations"

from .core import *
from .environment import *
from .parameters import *
from .geometry import *
from .partials import *
from .estimation import *
