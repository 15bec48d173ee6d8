"""Data model of a GitHub Actions workflow.

Only the subset of the workflow syntax the generator emits is modelled.
Every type renders itself with ``to_dict`` into plain mappings, in the key
order GitHub documents, ready for YAML serialization.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Toolchain(str, Enum):
    """Rust release channels."""

    STABLE = "stable"
    BETA = "beta"
    NIGHTLY = "nightly"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Os:
    """A target operating system and the hosted runner image for it."""

    name: str
    runs_on: str


LINUX = Os(name="linux", runs_on="ubuntu-latest")
MACOS = Os(name="macos", runs_on="macos-latest")
WINDOWS = Os(name="windows", runs_on="windows-latest")


@dataclass
class Step:
    """A single job step: either ``uses`` an action or ``run``s a command."""

    name: str
    uses: Optional[str] = None
    run: Optional[str] = None
    with_: Dict[str, Any] = field(default_factory=dict)
    env: Dict[str, str] = field(default_factory=dict)
    timeout_minutes: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.uses:
            data["uses"] = self.uses
        if self.with_:
            data["with"] = dict(self.with_)
        if self.run:
            data["run"] = self.run
        if self.env:
            data["env"] = dict(self.env)
        if self.timeout_minutes is not None:
            data["timeout-minutes"] = self.timeout_minutes
        return data


@dataclass
class Job:
    """A workflow job, keyed by ``id`` in the rendered ``jobs`` mapping."""

    id: str
    name: str
    runs_on: str
    steps: List[Step] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    timeout_minutes: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "runs-on": self.runs_on}
        if self.timeout_minutes is not None:
            data["timeout-minutes"] = self.timeout_minutes
        if self.env:
            data["env"] = dict(self.env)
        data["steps"] = [step.to_dict() for step in self.steps]
        return data


@dataclass
class Workflow:
    """A complete workflow file."""

    name: str
    triggers: List[str]
    jobs: List[Job] = field(default_factory=list)

    def job_ids(self) -> List[str]:
        return [job.id for job in self.jobs]

    def to_dict(self) -> Dict[str, Any]:
        ids = self.job_ids()
        duplicates = sorted({job_id for job_id in ids if ids.count(job_id) > 1})
        assert not duplicates, f"duplicate job ids: {duplicates}"
        return {
            "name": self.name,
            "on": list(self.triggers),
            "jobs": {job.id: job.to_dict() for job in self.jobs},
        }
