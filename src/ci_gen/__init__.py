"""ci-gen: GitHub Actions workflow generator for a multi-crate repository.

Scans the repository root for crates, builds one test job per target
os/toolchain pair and writes ``.github/workflows/ci.yml``.
"""

from ci_gen.discovery import discover_units
from ci_gen.jobs import build_jobs, build_workflow
from ci_gen.models import Job, Os, Step, Toolchain, Workflow
from ci_gen.writer import render_workflow, write_workflow

__all__ = [
    "discover_units",
    "build_jobs",
    "build_workflow",
    "render_workflow",
    "write_workflow",
    "Job",
    "Os",
    "Step",
    "Toolchain",
    "Workflow",
]
