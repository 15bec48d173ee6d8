"""Discovery of buildable units (Cargo crates) under a repository root."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import pathspec

from ci_gen.exceptions import DiscoveryError
from protoc_bin_vendored.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_MANIFEST = "Cargo.toml"

# Not really a crate: template the per-platform crates are generated from.
ALWAYS_EXCLUDED = ["protoc-bin-vendored-arch-template"]


def _exclude_spec(patterns: Iterable[str]) -> pathspec.PathSpec:
    return pathspec.PathSpec.from_lines("gitignore", list(patterns))


def discover_units(
    root: Path,
    manifest: str = DEFAULT_MANIFEST,
    exclude: Iterable[str] = (),
) -> List[str]:
    """List the direct child directories of ``root`` holding ``manifest``.

    Args:
        root: Repository root.
        manifest: Manifest file name identifying a unit.
        exclude: Additional gitignore-style patterns, matched against the
            directory name.

    Returns:
        Unit directory names, sorted lexicographically.

    Raises:
        DiscoveryError: If ``root`` is not a directory or no unit is found.
    """
    if not root.is_dir():
        raise DiscoveryError(f"Repository root is not a directory: {root}")

    spec = _exclude_spec(exclude)
    units: List[str] = []
    for child in root.iterdir():
        if not child.is_dir() or not (child / manifest).is_file():
            continue
        # Never a unit, whatever the exclude patterns say
        if child.name in ALWAYS_EXCLUDED:
            continue
        if spec.match_file(f"{child.name}/"):
            LOGGER.debug(f"Skipping excluded unit: {child.name}")
            continue
        units.append(child.name)

    units.sort()
    if not units:
        raise DiscoveryError(f"No directories containing {manifest} under {root}")

    LOGGER.info(f"Discovered {len(units)} unit(s): {', '.join(units)}")
    return units
