"""Configuration validation for ci-gen.

Validates configuration keys and value types and warns on unknown keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set

from protoc_bin_vendored.core.logging import get_logger

LOGGER = get_logger(__name__)

VALID_TOP_LEVEL_KEYS: Set[str] = {
    "workflow",
    "units",
    "test",
    "env",
}

VALID_SECTION_KEYS: Dict[str, Set[str]] = {
    "workflow": {"name", "path", "triggers"},
    "units": {"manifest", "exclude"},
    "test": {"timeout_minutes"},
}


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None
    # Wrong value types cannot be converted into a CiGenConfig
    fatal: bool = False


def validate_config(
    data: Dict[str, Any],
    source: str,
) -> List[ConfigValidationWarning]:
    """Validate configuration dictionary.

    Does not raise exceptions - returns warnings instead.

    Args:
        data: Config dictionary to validate.
        source: Source file path for warning messages.

    Returns:
        List of validation warnings.
    """
    warnings: List[ConfigValidationWarning] = []

    if not isinstance(data, dict):
        warnings.append(ConfigValidationWarning(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
        ))
        return warnings

    for key in data.keys():
        if key not in VALID_TOP_LEVEL_KEYS:
            _warn_unknown(warnings, str(key), str(key), VALID_TOP_LEVEL_KEYS, source)

    for section, valid_keys in VALID_SECTION_KEYS.items():
        value = data.get(section)
        if value is None:
            continue
        if not isinstance(value, dict):
            _warn_type(warnings, section, "a mapping", value, source)
            continue
        for key in value.keys():
            if key not in valid_keys:
                _warn_unknown(warnings, str(key), f"{section}.{key}", valid_keys, source)

    workflow = data.get("workflow")
    if isinstance(workflow, dict):
        for key in ("name", "path"):
            if key in workflow and not isinstance(workflow[key], str):
                _warn_type(warnings, f"workflow.{key}", "a string", workflow[key], source)
        if "triggers" in workflow and not isinstance(workflow["triggers"], list):
            _warn_type(warnings, "workflow.triggers", "a list", workflow["triggers"], source)

    units = data.get("units")
    if isinstance(units, dict):
        if "manifest" in units and not isinstance(units["manifest"], str):
            _warn_type(warnings, "units.manifest", "a string", units["manifest"], source)
        if "exclude" in units and not isinstance(units["exclude"], list):
            _warn_type(warnings, "units.exclude", "a list", units["exclude"], source)

    test = data.get("test")
    if isinstance(test, dict):
        timeout = test.get("timeout_minutes")
        if "timeout_minutes" in test and (
            isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0
        ):
            warnings.append(ConfigValidationWarning(
                message="'test.timeout_minutes' must be a positive integer",
                source=source,
                key="test.timeout_minutes",
                fatal=True,
            ))

    env = data.get("env")
    if env is not None and not isinstance(env, dict):
        _warn_type(warnings, "env", "a mapping", env, source)

    return warnings


def _warn_unknown(
    warnings: List[ConfigValidationWarning],
    key: str,
    full_key: str,
    valid_keys: Set[str],
    source: str,
) -> None:
    warning = ConfigValidationWarning(
        message=f"Unknown key '{full_key}'",
        source=source,
        key=full_key,
        suggestion=_suggest_key(key, valid_keys),
    )
    warnings.append(warning)
    _log_warning(warning)


def _warn_type(
    warnings: List[ConfigValidationWarning],
    key: str,
    expected: str,
    value: Any,
    source: str,
) -> None:
    warnings.append(ConfigValidationWarning(
        message=f"'{key}' must be {expected}, got {type(value).__name__}",
        source=source,
        key=key,
        fatal=True,
    ))


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(warning: ConfigValidationWarning) -> None:
    """Log a validation warning."""
    msg = f"{warning.message} in {warning.source}"
    if warning.suggestion:
        msg += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(msg)
