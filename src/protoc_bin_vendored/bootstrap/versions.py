"""Pinned protoc version management.

The release tag of the vendored protoc is recorded in ``bundles/version.txt``
by the ``update`` command. This is the single source of truth for the
bundled version.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from protoc_bin_vendored.bootstrap.paths import BundlePaths
from protoc_bin_vendored.core.logging import get_logger

LOGGER = get_logger(__name__)

# Hardcoded fallback version (kept in sync with bundles/version.txt)
# Used if version.txt is missing from the installed package
_FALLBACK_VERSION = "v29.3"


@lru_cache(maxsize=8)
def _read_version_file(path: Path) -> Optional[str]:
    """Read a version tag from ``path``.

    Returns:
        The stripped tag, or None if the file is missing or empty.
    """
    if not path.exists():
        return None
    try:
        tag = path.read_text(encoding="utf-8").strip()
    except OSError as e:
        LOGGER.warning(f"Failed to read {path}: {e}")
        return None
    return tag or None


def get_protoc_version(paths: Optional[BundlePaths] = None) -> str:
    """Get the pinned protoc release tag (e.g. ``v29.3``).

    Args:
        paths: Bundle layout to read from. Defaults to the shipped bundles.

    Returns:
        Release tag string.
    """
    paths = paths or BundlePaths.default()
    tag = _read_version_file(paths.version_file)
    if tag is None:
        LOGGER.debug(f"No version recorded at {paths.version_file}, using fallback")
        return _FALLBACK_VERSION
    return tag


def write_protoc_version(tag: str, paths: Optional[BundlePaths] = None) -> Path:
    """Record ``tag`` as the pinned version.

    Returns:
        Path of the written version file.
    """
    paths = paths or BundlePaths.default()
    paths.root.mkdir(parents=True, exist_ok=True)
    paths.version_file.write_text(f"{tag}\n", encoding="utf-8")
    _read_version_file.cache_clear()
    return paths.version_file
