"""Configuration data models for ci-gen.

Defines typed configuration classes that represent .ci-gen.yml structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

DEFAULT_WORKFLOW_NAME = "CI"
DEFAULT_WORKFLOW_PATH = Path(".github") / "workflows" / "ci.yml"
DEFAULT_TRIGGERS = ["push", "pull_request"]
DEFAULT_TEST_TIMEOUT_MINUTES = 5
DEFAULT_ENV: Dict[str, str] = {"RUST_BACKTRACE": "1"}


@dataclass
class WorkflowConfig:
    """Where and under which name the workflow is written."""

    name: str = DEFAULT_WORKFLOW_NAME
    path: Path = DEFAULT_WORKFLOW_PATH
    triggers: List[str] = field(default_factory=lambda: list(DEFAULT_TRIGGERS))


@dataclass
class UnitsConfig:
    """How buildable units are discovered."""

    manifest: str = "Cargo.toml"
    exclude: List[str] = field(default_factory=list)


@dataclass
class TestConfig:
    """Settings of the per-unit test steps."""

    __test__ = False  # not a pytest test class

    timeout_minutes: int = DEFAULT_TEST_TIMEOUT_MINUTES


@dataclass
class CiGenConfig:
    """Complete ci-gen configuration."""

    workflow: WorkflowConfig = field(default_factory=WorkflowConfig)
    units: UnitsConfig = field(default_factory=UnitsConfig)
    test: TestConfig = field(default_factory=TestConfig)
    env: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ENV))

    # Where the configuration was loaded from (for diagnostics)
    _config_sources: List[str] = field(default_factory=list, repr=False)
