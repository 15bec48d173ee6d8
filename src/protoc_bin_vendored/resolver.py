"""Resolve the protoc executable and include directory for this platform."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Optional

from protoc_bin_vendored.arch import ArchBundle, detect_bundle
from protoc_bin_vendored.bootstrap.paths import BundlePaths
from protoc_bin_vendored.core.logging import get_logger
from protoc_bin_vendored.exceptions import BundleMissingError

LOGGER = get_logger(__name__)


def protoc_bin_path(
    bundle: Optional[ArchBundle] = None,
    paths: Optional[BundlePaths] = None,
) -> Path:
    """Return the path to the bundled ``protoc`` binary.

    Args:
        bundle: Bundle to resolve. Detected from the running platform when
            omitted.
        paths: Bundle layout. Defaults to the shipped bundles.

    Returns:
        Path to an existing protoc executable.

    Raises:
        UnsupportedPlatformError: If no bundle exists for this platform.
        BundleMissingError: If the bundle's executable is not on disk.
    """
    bundle = bundle or detect_bundle()
    paths = paths or BundlePaths.default()

    protoc = paths.protoc_path(bundle)
    if not protoc.is_file():
        raise BundleMissingError(protoc, "protoc")

    # Wheels and zip extraction can drop the executable bit
    if not bundle.is_windows and not os.access(protoc, os.X_OK):
        mode = protoc.stat().st_mode
        protoc.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        LOGGER.debug(f"Restored executable bit on {protoc}")

    return protoc


def include_path(
    bundle: Optional[ArchBundle] = None,
    paths: Optional[BundlePaths] = None,
) -> Path:
    """Return the directory holding the well-known ``.proto`` includes.

    Pass it to protoc as ``-I``/``--proto_path`` to compile files that
    import ``google/protobuf/*.proto``.

    Raises:
        UnsupportedPlatformError: If no bundle exists for this platform.
        BundleMissingError: If the include directory is not on disk.
    """
    bundle = bundle or detect_bundle()
    paths = paths or BundlePaths.default()

    include = paths.include_dir(bundle)
    if not include.is_dir():
        raise BundleMissingError(include, "include directory")
    return include
