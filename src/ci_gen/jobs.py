"""Construction of the workflow job graph.

One matrix job per (os, channel) pair, each testing every discovered unit,
followed by the fixed documentation, formatting and lint jobs.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ci_gen.actions import (
    cargo_cache,
    cargo_doc,
    cargo_test,
    checkout_sources,
    mega_linter_job,
    rust_install_toolchain,
    rustfmt_check_job,
)
from ci_gen.config.models import CiGenConfig
from ci_gen.discovery import discover_units
from ci_gen.models import LINUX, MACOS, WINDOWS, Job, Os, Step, Toolchain, Workflow
from protoc_bin_vendored.core.logging import get_logger

LOGGER = get_logger(__name__)

CHANNELS: Tuple[Toolchain, ...] = (Toolchain.STABLE, Toolchain.BETA, Toolchain.NIGHTLY)
OSES: Tuple[Os, ...] = (LINUX, MACOS, WINDOWS)


def is_pruned(os: Os, channel: Toolchain) -> bool:
    """Whether the (os, channel) pair is left out of the matrix.

    Beta only runs on linux: macos and windows runners are expensive.
    """
    return channel == Toolchain.BETA and os in (MACOS, WINDOWS)


def setup_steps(channel: Toolchain) -> List[Step]:
    """Steps every matrix job starts with, in order."""
    return [
        cargo_cache(),
        checkout_sources(),
        rust_install_toolchain(channel),
    ]


def unit_test_steps(units: Sequence[str], manifest: str, timeout_minutes: int) -> List[Step]:
    """One ``cargo test`` step per unit."""
    steps = []
    for unit in units:
        step = cargo_test(f"cargo test {unit}", f"--manifest-path={unit}/{manifest}")
        step.timeout_minutes = timeout_minutes
        steps.append(step)
    return steps


def matrix_jobs(units: Sequence[str], config: Optional[CiGenConfig] = None) -> List[Job]:
    """Build the test jobs for every non-pruned (os, channel) pair."""
    config = config or CiGenConfig()
    jobs = []
    for channel in CHANNELS:
        for os in OSES:
            if is_pruned(os, channel):
                continue
            jobs.append(Job(
                id=f"{os.name}-{channel.value}",
                name=f"{os.name} {channel.value}",
                runs_on=os.runs_on,
                env=dict(config.env),
                steps=setup_steps(channel) + unit_test_steps(
                    units, config.units.manifest, config.test.timeout_minutes
                ),
            ))
    return jobs


def cargo_doc_job() -> Job:
    return Job(
        id="cargo-doc",
        name="cargo doc",
        runs_on=LINUX.runs_on,
        steps=setup_steps(Toolchain.STABLE) + [cargo_doc("cargo doc", "")],
    )


def fixed_jobs() -> List[Job]:
    """Jobs appended to every workflow regardless of the discovered units."""
    return [cargo_doc_job(), rustfmt_check_job(), mega_linter_job()]


def build_jobs(units: Sequence[str], config: Optional[CiGenConfig] = None) -> List[Job]:
    jobs = matrix_jobs(units, config)
    jobs.extend(fixed_jobs())
    return jobs


def build_workflow(root: Path, config: Optional[CiGenConfig] = None) -> Workflow:
    """Discover units under ``root`` and build the complete workflow.

    Raises:
        DiscoveryError: If no unit can be discovered.
    """
    config = config or CiGenConfig()
    units = discover_units(root, manifest=config.units.manifest, exclude=config.units.exclude)
    jobs = build_jobs(units, config)
    LOGGER.info(f"Generated {len(jobs)} job(s) for {len(units)} unit(s)")
    return Workflow(name=config.workflow.name, triggers=list(config.workflow.triggers), jobs=jobs)
