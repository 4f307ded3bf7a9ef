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
Partial assembly configuration.

Central configuration object selecting the scaling variant and the handling
of malformed light-time correction input during batch assembly.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Dict


@dataclass
class PartialAssemblyConfig:
    """Partial assembly configuration.

    Attributes:
        central_instant_observable: Use the central instant itself as the
            mutual approximation observable. When False the observable is the
            apparent-separation rate product at the fixed observation epoch.
        strict_batch_leg_count: Raise when a link of a batch has a number of
            light-time correction groups different from its number of legs.
            When False the mismatch is logged and the link is assembled
            without corrections.
        log_level: Package log level applied by ``configure_logging``.
        module_levels: Per-module log levels, e.g.
            ``{"pymutual.estimation.assembly": "TRACE"}`` to report every
            parameter without a partial.
    """
    central_instant_observable: bool = True
    strict_batch_leg_count: bool = False
    log_level: str = "INFO"
    module_levels: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, config: dict) -> "PartialAssemblyConfig":
        """Build from a dictionary, rejecting unknown keys"""
        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise ValueError(f"Unknown partial assembly settings: {sorted(unknown)}")
        return cls(**config)

    def to_dict(self) -> dict:
        return asdict(self)

    def configure_logging(self, log_file=None, console=True):
        """Configure the package logger at ``log_level`` and the module levels"""
        from ..logger import LoggerConfig
        logger_config = LoggerConfig()
        logger_config.configure_from_dict({
            'default_level': self.log_level,
            'log_file': log_file,
            'console': console,
            'module_levels': self.module_levels,
        })
        return logger_config.setup_all_loggers()

    def describe(self) -> str:
        """Human-readable description of the active settings."""
        observable = "central instant" if self.central_instant_observable else "fixed instant"
        mode = "strict" if self.strict_batch_leg_count else "lenient"
        return f"observable: {observable}, batch leg count: {mode}"
