"""Supported platform bundles and the (os, arch) lookup table."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple

from protoc_bin_vendored.bootstrap.platform import get_platform_info
from protoc_bin_vendored.core.logging import get_logger
from protoc_bin_vendored.exceptions import UnsupportedPlatformError

LOGGER = get_logger(__name__)


class ArchBundle(Enum):
    """One vendored protoc bundle.

    Each value is ``(directory name, upstream release asset, executable name)``.
    A ``None`` asset means upstream publishes no prebuilt binary and the
    bundle is maintained by hand.
    """

    LINUX_X86_32 = ("linux-x86_32", "linux-x86_32", "protoc")
    LINUX_X86_64 = ("linux-x86_64", "linux-x86_64", "protoc")
    LINUX_AARCH_64 = ("linux-aarch_64", "linux-aarch_64", "protoc")
    LINUX_PPCLE_64 = ("linux-ppcle_64", "linux-ppcle_64", "protoc")
    LINUX_RISCV64 = ("linux-riscv64", None, "protoc")
    MACOS_X86_64 = ("osx-x86_64", "osx-x86_64", "protoc")
    WIN32 = ("win32", "win32", "protoc.exe")

    def __init__(self, dir_name: str, release_asset: Optional[str], executable: str) -> None:
        self.dir_name = dir_name
        self.release_asset = release_asset
        self.executable = executable

    @property
    def is_windows(self) -> bool:
        return self.executable.endswith(".exe")


# Windows matches on os alone, see detect_bundle.
SUPPORTED_PLATFORMS: Dict[Tuple[str, str], ArchBundle] = {
    ("linux", "x86"): ArchBundle.LINUX_X86_32,
    ("linux", "x86_64"): ArchBundle.LINUX_X86_64,
    ("linux", "aarch64"): ArchBundle.LINUX_AARCH_64,
    ("linux", "ppc64le"): ArchBundle.LINUX_PPCLE_64,
    ("linux", "riscv64"): ArchBundle.LINUX_RISCV64,
    ("macos", "x86_64"): ArchBundle.MACOS_X86_64,
    # No upstream binary for Apple silicon; the x86_64 one runs under Rosetta.
    ("macos", "aarch64"): ArchBundle.MACOS_X86_64,
}


def detect_bundle(os: Optional[str] = None, arch: Optional[str] = None) -> ArchBundle:
    """Select the bundle for an (os, arch) pair.

    Args:
        os: Normalized OS identifier. Detected when omitted.
        arch: Normalized architecture identifier. Detected when omitted.

    Returns:
        The matching ArchBundle.

    Raises:
        UnsupportedPlatformError: If the pair is not in the table.
    """
    if os is None or arch is None:
        info = get_platform_info()
        os = info.os if os is None else os
        arch = info.arch if arch is None else arch

    if os == "windows":
        return ArchBundle.WIN32

    bundle = SUPPORTED_PLATFORMS.get((os, arch))
    if bundle is None:
        raise UnsupportedPlatformError(os, arch)

    LOGGER.debug(f"Platform {os}-{arch} uses bundle {bundle.dir_name}")
    return bundle
