"""Bundle validation.

Checks that every bundle's protoc executable is present and executable and
that the include directories are identical across bundles.
"""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from protoc_bin_vendored.arch import ArchBundle
from protoc_bin_vendored.bootstrap.paths import BundlePaths
from protoc_bin_vendored.core.logging import get_logger

LOGGER = get_logger(__name__)


class ToolStatus(str, Enum):
    """Status of a bundled binary."""

    PRESENT = "present"
    MISSING = "missing"
    NOT_EXECUTABLE = "not_executable"


@dataclass
class BundleValidationResult:
    """Result of validating the vendored bundles.

    Stores binary status per bundle directory name, plus the bundles whose
    include directory differs from the reference bundle.
    """

    statuses: Dict[str, ToolStatus] = field(default_factory=dict)
    include_mismatches: List[str] = field(default_factory=list)
    reference: Optional[str] = None

    def all_valid(self) -> bool:
        """Check if all bundles are present, executable and consistent."""
        if self.include_mismatches:
            return False
        return all(status == ToolStatus.PRESENT for status in self.statuses.values())

    def missing_bundles(self) -> List[str]:
        """Return bundles whose binary is missing or not executable."""
        return [
            name
            for name, status in self.statuses.items()
            if status != ToolStatus.PRESENT
        ]

    def get_status(self, bundle_name: str) -> ToolStatus:
        """Get status for a specific bundle."""
        return self.statuses.get(bundle_name, ToolStatus.MISSING)

    def to_dict(self) -> Dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "statuses": {name: status.value for name, status in self.statuses.items()},
            "include_mismatches": list(self.include_mismatches),
            "reference": self.reference,
        }


def validate_binary(path: Path, is_windows: bool = False) -> ToolStatus:
    """Validate a single binary file.

    Args:
        path: Path to the binary file.
        is_windows: Skip the executable bit check (Windows executables
            are recognized by extension).

    Returns:
        ToolStatus indicating whether the binary is present and executable.
    """
    if not path.is_file():
        return ToolStatus.MISSING

    if not is_windows and not os.access(path, os.X_OK):
        return ToolStatus.NOT_EXECUTABLE

    return ToolStatus.PRESENT


def digest_tree(directory: Path) -> Dict[str, str]:
    """Compute a sha256 digest for every file under ``directory``.

    Returns:
        Mapping of POSIX-style relative path to hex digest. Empty if the
        directory does not exist.
    """
    digests: Dict[str, str] = {}
    if not directory.is_dir():
        return digests
    for path in sorted(directory.rglob("*")):
        if path.is_file():
            rel = path.relative_to(directory).as_posix()
            digests[rel] = hashlib.sha256(path.read_bytes()).hexdigest()
    return digests


def validate_bundles(paths: Optional[BundlePaths] = None) -> BundleValidationResult:
    """Validate every bundle in the enumeration.

    The include directory of the first bundle that has one is used as the
    reference; every other bundle must match it file for file.

    Args:
        paths: Bundle layout to validate. Defaults to the shipped bundles.

    Returns:
        BundleValidationResult for all bundles.
    """
    paths = paths or BundlePaths.default()
    result = BundleValidationResult()

    include_digests: Dict[str, Dict[str, str]] = {}
    for bundle in ArchBundle:
        status = validate_binary(paths.protoc_path(bundle), is_windows=bundle.is_windows)
        result.statuses[bundle.dir_name] = status
        if status != ToolStatus.PRESENT:
            LOGGER.debug(f"{bundle.dir_name}: protoc {status.value}")
        include_digests[bundle.dir_name] = digest_tree(paths.include_dir(bundle))

    for name, digests in include_digests.items():
        if digests:
            result.reference = name
            break

    reference_digests = include_digests.get(result.reference or "", {})
    for name, digests in include_digests.items():
        if not digests or digests != reference_digests:
            LOGGER.debug(f"{name}: include directory differs from {result.reference}")
            result.include_mismatches.append(name)

    return result
