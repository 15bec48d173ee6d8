"""Configuration module for ci-gen.

Provides configuration file loading, parsing, and validation with support for:
- Project-level config (.ci-gen.yml)
- Environment variable expansion
"""

from ci_gen.config.models import (
    CiGenConfig,
    TestConfig,
    UnitsConfig,
    WorkflowConfig,
)
from ci_gen.config.loader import ConfigError, find_project_config, load_config
from ci_gen.config.validation import validate_config, ConfigValidationWarning

__all__ = [
    "CiGenConfig",
    "TestConfig",
    "UnitsConfig",
    "WorkflowConfig",
    "ConfigError",
    "load_config",
    "find_project_config",
    "validate_config",
    "ConfigValidationWarning",
]
