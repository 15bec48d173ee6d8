"""``protoc`` binary downloaded and stored inside the package.

Can be used to avoid downloading and installing ``protoc`` separately::

    from protoc_bin_vendored import protoc_bin_path, include_path

    subprocess.run([protoc_bin_path(), f"-I{include_path()}", ...])

Both functions raise ``UnsupportedPlatformError`` when no binary is bundled
for the current operating system and architecture.
"""

from protoc_bin_vendored.arch import ArchBundle, SUPPORTED_PLATFORMS, detect_bundle
from protoc_bin_vendored.exceptions import (
    BundleMissingError,
    ProtocBinVendoredError,
    UnsupportedPlatformError,
    UpdateError,
)
from protoc_bin_vendored.resolver import include_path, protoc_bin_path

__version__ = "0.3.0"

__all__ = [
    "ArchBundle",
    "SUPPORTED_PLATFORMS",
    "detect_bundle",
    "protoc_bin_path",
    "include_path",
    "ProtocBinVendoredError",
    "UnsupportedPlatformError",
    "BundleMissingError",
    "UpdateError",
]
