"""Configuration file loading and merging.

Handles loading configuration from YAML files with:
- Project-level config (.ci-gen.yml in the repository root)
- Environment variable expansion (${VAR})
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ci_gen.config.models import (
    CiGenConfig,
    TestConfig,
    UnitsConfig,
    WorkflowConfig,
)
from ci_gen.config.validation import validate_config
from protoc_bin_vendored.core.logging import get_logger

LOGGER = get_logger(__name__)

# Config file names
PROJECT_CONFIG_NAMES = [".ci-gen.yml", ".ci-gen.yaml", "ci-gen.yml", "ci-gen.yaml"]

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^{}:]+)(?::-([^}]*))?\}")


class ConfigError(Exception):
    """Configuration loading or parsing error."""

    pass


def load_config(
    project_root: Path,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> CiGenConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom config file (cli_config_path) OR project config (.ci-gen.yml)
    3. Built-in defaults

    Args:
        project_root: Repository root for finding .ci-gen.yml.
        cli_config_path: Optional path to custom config file (--config flag).
        cli_overrides: Dict of CLI flag overrides.

    Returns:
        Merged CiGenConfig instance.

    Raises:
        ConfigError: If the config file doesn't exist, doesn't parse, or
            holds values of the wrong type.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        config_path: Optional[Path] = cli_config_path
        label = "custom"
    else:
        config_path = find_project_config(project_root)
        label = "project"

    if config_path is not None:
        try:
            file_dict = load_yaml_file(config_path)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        _check(file_dict, str(config_path))
        merged = merge_configs(merged, file_dict)
        sources.append(f"{label}:{config_path}")
        LOGGER.debug(f"Loaded {label} config from {config_path}")

    if cli_overrides:
        _check(cli_overrides, "cli")
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")
        LOGGER.debug("Applied CLI overrides")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def _check(data: Dict[str, Any], source: str) -> None:
    """Validate ``data`` and raise on the first fatal problem."""
    for warning in validate_config(data, source=source):
        if warning.fatal:
            raise ConfigError(f"{warning.message} in {source}")


def find_project_config(project_root: Path) -> Optional[Path]:
    """Find config file in the repository root.

    Args:
        project_root: Directory to search in.

    Returns:
        Path to config file if found, None otherwise.
    """
    for name in PROJECT_CONFIG_NAMES:
        config_path = project_root / name
        if config_path.exists():
            return config_path
    return None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Args:
        path: Path to YAML file.

    Returns:
        Parsed dictionary.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    data = yaml.safe_load(content)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax. GitHub expressions such as
    ``${{ secrets.TOKEN }}`` do not match and are left alone.

    Args:
        data: Config data (dict, list, or scalar).

    Returns:
        Data with environment variables expanded.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Rules:
    - Scalar values: overlay replaces base
    - Lists: overlay replaces base (no merging)
    - Dicts: recursive merge

    Args:
        base: Base configuration dictionary.
        overlay: Overlay configuration to merge on top.

    Returns:
        Merged configuration dictionary.
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def dict_to_config(data: Dict[str, Any]) -> CiGenConfig:
    """Convert validated dict to typed CiGenConfig.

    Missing keys keep their built-in defaults.

    Args:
        data: Configuration dictionary.

    Returns:
        Typed CiGenConfig instance.
    """
    defaults = CiGenConfig()

    workflow_data = data.get("workflow") or {}
    workflow = WorkflowConfig(
        name=str(workflow_data.get("name", defaults.workflow.name)),
        path=Path(workflow_data.get("path", defaults.workflow.path)),
        triggers=[str(t) for t in workflow_data.get("triggers", defaults.workflow.triggers)],
    )

    units_data = data.get("units") or {}
    units = UnitsConfig(
        manifest=str(units_data.get("manifest", defaults.units.manifest)),
        exclude=[str(p) for p in units_data.get("exclude", defaults.units.exclude)],
    )

    test_data = data.get("test") or {}
    test = TestConfig(
        timeout_minutes=int(test_data.get("timeout_minutes", defaults.test.timeout_minutes)),
    )

    # env replaces the default mapping as a whole
    env_data = data.get("env")
    env = defaults.env if env_data is None else {str(k): str(v) for k, v in env_data.items()}

    return CiGenConfig(workflow=workflow, units=units, test=test, env=env)


def get_default_config() -> CiGenConfig:
    """Get the built-in configuration.

    Returns:
        Default CiGenConfig instance.
    """
    return CiGenConfig()
