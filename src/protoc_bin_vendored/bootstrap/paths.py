"""Path management for the vendored protoc bundles.

Bundles live in the ``bundles`` directory shipped inside the package:

    bundles/
        version.txt                 - Pinned protoc release tag
        linux-x86_64/
            bin/protoc              - protoc executable
            include/google/...      - Well-known .proto files
        win32/
            bin/protoc.exe
            include/google/...
        ...
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, List

from protoc_bin_vendored.arch import ArchBundle

# Environment variable to override the bundle root
PROTOC_BIN_VENDORED_HOME_ENV = "PROTOC_BIN_VENDORED_HOME"

DEFAULT_BUNDLE_ROOT = Path(__file__).resolve().parent.parent / "bundles"


def get_bundle_root() -> Path:
    """Get the directory containing all platform bundles.

    Resolution order:
    1. PROTOC_BIN_VENDORED_HOME environment variable (if set)
    2. The ``bundles`` directory inside the installed package

    Returns:
        Path to the bundle root.
    """
    env_home = os.environ.get(PROTOC_BIN_VENDORED_HOME_ENV)
    if env_home:
        return Path(env_home)
    return DEFAULT_BUNDLE_ROOT


@dataclass
class BundlePaths:
    """Resolves paths inside a bundle root."""

    root: Path

    _BIN_DIR: ClassVar[str] = "bin"
    _INCLUDE_DIR: ClassVar[str] = "include"
    _VERSION_FILE: ClassVar[str] = "version.txt"

    @classmethod
    def default(cls) -> "BundlePaths":
        """Create paths from the default bundle root."""
        return cls(get_bundle_root())

    @property
    def version_file(self) -> Path:
        """File recording the pinned protoc release tag."""
        return self.root / self._VERSION_FILE

    def bundle_dir(self, bundle: ArchBundle) -> Path:
        return self.root / bundle.dir_name

    def bin_dir(self, bundle: ArchBundle) -> Path:
        return self.bundle_dir(bundle) / self._BIN_DIR

    def protoc_path(self, bundle: ArchBundle) -> Path:
        """Path where the bundle's protoc executable is expected."""
        return self.bin_dir(bundle) / bundle.executable

    def include_dir(self, bundle: ArchBundle) -> Path:
        """Directory holding the bundle's well-known .proto files."""
        return self.bundle_dir(bundle) / self._INCLUDE_DIR

    def existing_bundles(self) -> List[ArchBundle]:
        """Bundles whose directory exists under the root."""
        return [bundle for bundle in ArchBundle if self.bundle_dir(bundle).is_dir()]
