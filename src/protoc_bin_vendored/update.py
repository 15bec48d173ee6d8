"""Refresh the vendored bundles from an upstream protobuf release.

Maintenance tooling only: the resolver itself never touches the network.

For every bundle with an upstream release asset the release zip
``protoc-{version}-{asset}.zip`` is downloaded and ``bin/protoc`` (or
``bin/protoc.exe``) is extracted into the bundle. The ``include`` tree is
taken once from the linux-x86_64 archive and copied into every bundle,
including hand-maintained ones, so that all include directories stay
identical. Everything is staged in a temporary directory and only installed
once every download has succeeded.
"""

from __future__ import annotations

import json
import shutil
import tempfile
import zipfile
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import List, Optional
from urllib.error import URLError
from urllib.parse import urlparse
from urllib.request import urlopen

from protoc_bin_vendored.arch import ArchBundle
from protoc_bin_vendored.bootstrap.paths import BundlePaths
from protoc_bin_vendored.bootstrap.versions import write_protoc_version
from protoc_bin_vendored.core.logging import get_logger
from protoc_bin_vendored.exceptions import UpdateError

LOGGER = get_logger(__name__)

LATEST_RELEASE_API = "https://api.github.com/repos/protocolbuffers/protobuf/releases/latest"
RELEASE_DOWNLOAD_URL = (
    "https://github.com/protocolbuffers/protobuf/releases/download/"
    "{tag}/protoc-{version}-{asset}.zip"
)
ALLOWED_HOSTS = {"api.github.com", "github.com"}

# Archive the shared include tree is taken from
INCLUDE_SOURCE = ArchBundle.LINUX_X86_64

DOWNLOAD_TIMEOUT = 120


@dataclass
class UpdateResult:
    """Outcome of an update run."""

    tag: str
    updated: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


def secure_urlopen(url: str, timeout: int = DOWNLOAD_TIMEOUT):
    """Open ``url`` after checking it is an https URL on an allowed host.

    Raises:
        ValueError: If the scheme or host is not allowed.
    """
    parsed = urlparse(url)
    if parsed.scheme != "https" or parsed.hostname not in ALLOWED_HOSTS:
        raise ValueError(f"Invalid download URL: {url}")
    return urlopen(url, timeout=timeout)  # nosec B310


def fetch_latest_tag() -> str:
    """Ask the GitHub API for the latest protobuf release tag."""
    LOGGER.debug(f"Querying {LATEST_RELEASE_API}")
    try:
        with secure_urlopen(LATEST_RELEASE_API) as response:
            payload = json.load(response)
    except (URLError, json.JSONDecodeError) as e:
        raise UpdateError(f"Failed to query latest protobuf release: {e}") from e

    tag = payload.get("tag_name") if isinstance(payload, dict) else None
    if not tag:
        raise UpdateError("Latest release response has no tag_name")
    return str(tag)


def release_url(tag: str, asset: str) -> str:
    """Download URL of the protoc zip for ``asset`` at release ``tag``."""
    version = tag[1:] if tag.startswith("v") else tag
    return RELEASE_DOWNLOAD_URL.format(tag=tag, version=version, asset=asset)


def download_archive(url: str, dest: Path) -> Path:
    """Download ``url`` to ``dest``.

    Raises:
        UpdateError: On network failure.
    """
    LOGGER.info(f"Downloading {url}...")
    try:
        with secure_urlopen(url) as response, open(dest, "wb") as f:
            shutil.copyfileobj(response, f)
    except URLError as e:
        raise UpdateError(f"Failed to download {url}: {e}") from e
    return dest


def extract_protoc(archive: zipfile.ZipFile, bundle: ArchBundle, paths: BundlePaths) -> Path:
    """Extract the protoc executable from ``archive`` into ``bundle``.

    Returns:
        Path of the extracted executable.

    Raises:
        UpdateError: If the archive has no ``bin/<executable>`` member.
    """
    member = f"bin/{bundle.executable}"
    try:
        data = archive.read(member)
    except KeyError as e:
        raise UpdateError(f"{member} not found in archive for {bundle.dir_name}") from e

    target = paths.protoc_path(bundle)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    if not bundle.is_windows:
        target.chmod(0o755)
    return target


def extract_include(archive: zipfile.ZipFile, dest: Path) -> Path:
    """Extract the ``include/`` tree of ``archive`` under ``dest``.

    Returns:
        Path of the extracted ``include`` directory.

    Raises:
        UpdateError: On a path traversal attempt or an archive without
            include files.
    """
    include_root = dest / "include"
    found = False
    for name in archive.namelist():
        posix = PurePosixPath(name)
        if not posix.parts or posix.parts[0] != "include" or name.endswith("/"):
            continue
        if posix.is_absolute() or ".." in posix.parts:
            raise UpdateError(f"Path traversal detected: {name}")
        target = dest.joinpath(*posix.parts)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(archive.read(name))
        found = True

    if not found:
        raise UpdateError("Archive contains no include/ files")
    return include_root


def install_protoc(staged: BundlePaths, bundle: ArchBundle, paths: BundlePaths) -> Path:
    """Copy the staged executable of ``bundle`` into ``paths``."""
    target = paths.protoc_path(bundle)
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(staged.protoc_path(bundle), target)
    LOGGER.debug(f"Installed {target}")
    return target


def install_include(source: Path, paths: BundlePaths) -> None:
    """Replace the include directory of every bundle with a copy of ``source``."""
    for bundle in ArchBundle:
        target = paths.include_dir(bundle)
        if target.exists():
            shutil.rmtree(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, target)
        LOGGER.debug(f"Installed include files into {target}")


def update_bundles(tag: Optional[str] = None, paths: Optional[BundlePaths] = None) -> UpdateResult:
    """Refresh all bundles from the protobuf release ``tag``.

    Every archive is downloaded and extracted into a staging directory
    first; the bundles are only touched once all of them succeeded.

    Args:
        tag: Release tag such as ``v29.3``. The latest release when omitted.
        paths: Bundle layout to write to. Defaults to the shipped bundles.

    Returns:
        UpdateResult listing updated and skipped bundles.

    Raises:
        UpdateError: If any download or extraction fails.
    """
    paths = paths or BundlePaths.default()
    tag = tag or fetch_latest_tag()
    LOGGER.info(f"Updating protoc binaries to version {tag}")

    result = UpdateResult(tag=tag)
    with tempfile.TemporaryDirectory(prefix="protoc-update-") as tmp:
        tmp_dir = Path(tmp)
        staged = BundlePaths(tmp_dir / "staging")
        include_source: Optional[Path] = None

        for bundle in ArchBundle:
            if bundle.release_asset is None:
                LOGGER.warning(
                    f"{bundle.dir_name}: no upstream binary, keeping the existing one"
                )
                result.skipped.append(bundle.dir_name)
                continue

            archive_path = download_archive(
                release_url(tag, bundle.release_asset),
                tmp_dir / f"{bundle.dir_name}.zip",
            )
            try:
                with zipfile.ZipFile(archive_path) as archive:
                    extract_protoc(archive, bundle, staged)
                    if bundle is INCLUDE_SOURCE:
                        include_source = extract_include(archive, tmp_dir / "include-staging")
            except zipfile.BadZipFile as e:
                raise UpdateError(f"Corrupt archive for {bundle.dir_name}: {e}") from e
            finally:
                archive_path.unlink(missing_ok=True)

            result.updated.append(bundle.dir_name)

        if include_source is None:
            raise UpdateError(f"No include files extracted from {INCLUDE_SOURCE.dir_name}")

        for bundle in ArchBundle:
            if bundle.dir_name in result.updated:
                install_protoc(staged, bundle, paths)
        install_include(include_source, paths)

    write_protoc_version(tag, paths)
    LOGGER.info(f"Updated {len(result.updated)} bundle(s) to {tag}")
    return result
