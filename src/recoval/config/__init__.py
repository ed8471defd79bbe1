"""Configuration loading and validation.

Main Entry Points
-----------------
load_config_file : Load a YAML configuration file
PrimaryParameters : Validated reconstructability parameters
"""

from .errors import (
    ConfigCycleError,
    ConfigError,
    ConfigIncludeError,
    ConfigValidationError,
)
from .loader import load_config, load_config_file
from .parameters import PrimaryParameters

__all__ = [
    "load_config",
    "load_config_file",
    "PrimaryParameters",
    "ConfigError",
    "ConfigIncludeError",
    "ConfigCycleError",
    "ConfigValidationError",
]
