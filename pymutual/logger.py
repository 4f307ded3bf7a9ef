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

"""Logging configuration for partial assembly"""

import logging
import sys
from enum import Enum
from typing import Optional

ROOT_LOGGER_NAME = "pymutual"


class LogLevel(Enum):
    """Log levels used by pymutual"""
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


# TRACE sits below DEBUG and reports every elided parameter
logging.addLevelName(LogLevel.TRACE.value, "TRACE")


def _level_value(level: str) -> int:
    try:
        return LogLevel[level.upper()].value
    except KeyError:
        raise ValueError(f"Unknown log level {level}") from None


class ColoredFormatter(logging.Formatter):
    """Colored log formatter"""

    COLORS = {
        'TRACE': '\033[36m',     # Cyan
        'DEBUG': '\033[34m',     # Blue
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        record = logging.makeLogRecord(record.__dict__)
        log_color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logger(name: str = ROOT_LOGGER_NAME,
                 level: str = "INFO",
                 log_file: Optional[str] = None,
                 console: bool = True) -> logging.Logger:
    """
    Setup logger with specified configuration

    Parameters:
    -----------
    name : str
        Logger name. Module loggers of the library are children of
        ``pymutual`` so configuring the root name covers all of them.
    level : str
        Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_file : Optional[str]
        Log file path (if None, no file logging)
    console : bool
        Enable console output

    Returns:
    --------
    logging.Logger
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(_level_value(level))

    # Remove existing handlers
    logger.handlers = []

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(_level_value(level))
        console_handler.setFormatter(ColoredFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        ))
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(_level_value(level))
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    return logger


def trace(logger: logging.Logger, msg, *args, **kwargs):
    """Log ``msg`` on ``logger`` at TRACE level"""
    if logger.isEnabledFor(LogLevel.TRACE.value):
        logger.log(LogLevel.TRACE.value, msg, *args, **kwargs)


class LoggerConfig:
    """
    Package and per-module log levels of one partial assembly run.

    The package logger ``pymutual`` receives the handlers; module loggers
    such as ``pymutual.estimation.assembly`` only get their own level and
    propagate to it, so raising one module to TRACE reports its elided
    parameters without duplicating output.
    """

    def __init__(self):
        self.module_levels = {}
        self.default_level = "INFO"
        self.log_file = None
        self.console = True

    def set_module_level(self, module_name: str, level: str):
        """Set log level for one module, e.g. ``pymutual.partials.scaling``"""
        if not module_name.startswith(ROOT_LOGGER_NAME):
            raise ValueError(f"{module_name} is not a {ROOT_LOGGER_NAME} module")
        _level_value(level)
        self.module_levels[module_name] = level

    def get_level_for_module(self, module_name: str) -> str:
        return self.module_levels.get(module_name, self.default_level)

    def configure_from_dict(self, config: dict):
        """Configure from dictionary"""
        if 'default_level' in config:
            self.default_level = config['default_level']
        if 'log_file' in config:
            self.log_file = config['log_file']
        if 'console' in config:
            self.console = config['console']
        if 'module_levels' in config:
            for module, level in config['module_levels'].items():
                self.set_module_level(module, level)

    def setup_all_loggers(self) -> logging.Logger:
        """Configure the package logger and the module levels, return the package logger"""
        package_logger = setup_logger(ROOT_LOGGER_NAME, self.default_level, self.log_file, self.console)
        for module, level in self.module_levels.items():
            value = _level_value(level)
            logging.getLogger(module).setLevel(value)
            # handlers of the package logger must let the module records through
            for handler in package_logger.handlers:
                handler.setLevel(min(handler.level, value))
        return package_logger
