"""Platform detection for bundle selection.

Normalizes ``platform.system()`` / ``platform.machine()`` into the small
vocabulary used by the bundle table. Unknown values are passed through
lower-cased so that an unsupported platform can be reported verbatim.
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass
from typing import Dict, Optional

OS_ALIASES: Dict[str, str] = {
    "linux": "linux",
    "darwin": "macos",
    "macos": "macos",
    "windows": "windows",
    "win32": "windows",
}

ARCH_ALIASES: Dict[str, str] = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "i386": "x86",
    "i486": "x86",
    "i586": "x86",
    "i686": "x86",
    "x86": "x86",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "ppc64le": "ppc64le",
    "powerpc64le": "ppc64le",
    "riscv64": "riscv64",
}


@dataclass(frozen=True)
class PlatformInfo:
    """Normalized operating system and architecture of the running process."""

    os: str
    arch: str

    def __str__(self) -> str:
        return f"{self.os}-{self.arch}"


def normalize_os(system: str) -> str:
    """Map a raw system name to ``linux``, ``macos`` or ``windows``."""
    key = system.strip().lower()
    return OS_ALIASES.get(key, key)


def normalize_arch(machine: str, is_64bit: bool = True) -> str:
    """Map a raw machine name to the bundle architecture vocabulary.

    Args:
        machine: Value reported by ``platform.machine()``.
        is_64bit: Whether the running interpreter is a 64-bit process. A
            32-bit interpreter on an x86_64 kernel needs the x86 binary.

    Returns:
        Normalized architecture identifier.
    """
    key = machine.strip().lower()
    arch = ARCH_ALIASES.get(key, key)
    if arch == "x86_64" and not is_64bit:
        return "x86"
    return arch


def get_platform_info(
    system: Optional[str] = None,
    machine: Optional[str] = None,
) -> PlatformInfo:
    """Detect the current platform.

    Args:
        system: Override for ``platform.system()``.
        machine: Override for ``platform.machine()``.

    Returns:
        PlatformInfo with normalized identifiers.
    """
    raw_system = system if system is not None else platform.system()
    raw_machine = machine if machine is not None else platform.machine()
    is_64bit = sys.maxsize > 2**32
    return PlatformInfo(
        os=normalize_os(raw_system),
        arch=normalize_arch(raw_machine, is_64bit=is_64bit),
    )
