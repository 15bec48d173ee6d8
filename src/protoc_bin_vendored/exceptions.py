"""Exceptions raised by the protoc bundle resolver."""

from __future__ import annotations

from pathlib import Path


class ProtocBinVendoredError(Exception):
    """Base class for all resolver errors."""


class UnsupportedPlatformError(ProtocBinVendoredError):
    """No bundled protoc binary exists for the detected platform.

    Attributes:
        os: Normalized operating system identifier that was not matched.
        arch: Normalized architecture identifier that was not matched.
    """

    def __init__(self, os: str, arch: str) -> None:
        self.os = os
        self.arch = arch
        super().__init__(f"protoc binary cannot be found for platform {os}-{arch}")


class BundleMissingError(ProtocBinVendoredError):
    """A file or directory of a supported bundle is missing on disk."""

    def __init__(self, path: Path, what: str = "file") -> None:
        self.path = path
        super().__init__(f"internal: bundled {what} not found: {path}")


class UpdateError(ProtocBinVendoredError):
    """Refreshing the bundles from an upstream release failed."""
