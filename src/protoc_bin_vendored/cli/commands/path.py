"""Path and include command implementations."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from protoc_bin_vendored.bootstrap.paths import BundlePaths

from protoc_bin_vendored.cli.commands import Command
from protoc_bin_vendored.cli.exit_codes import (
    EXIT_BUNDLE_ERROR,
    EXIT_SUCCESS,
    EXIT_UNSUPPORTED_PLATFORM,
)
from protoc_bin_vendored.core.logging import get_logger
from protoc_bin_vendored.exceptions import BundleMissingError, UnsupportedPlatformError
from protoc_bin_vendored.resolver import include_path, protoc_bin_path

LOGGER = get_logger(__name__)


class PathCommand(Command):
    """Prints the path to the protoc binary for this platform."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "path"

    def execute(self, args: Namespace, paths: "BundlePaths | None" = None) -> int:
        try:
            print(protoc_bin_path(paths=paths))
        except UnsupportedPlatformError as e:
            LOGGER.error(str(e))
            return EXIT_UNSUPPORTED_PLATFORM
        except BundleMissingError as e:
            LOGGER.error(str(e))
            return EXIT_BUNDLE_ERROR
        return EXIT_SUCCESS


class IncludeCommand(Command):
    """Prints the include directory for this platform."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "include"

    def execute(self, args: Namespace, paths: "BundlePaths | None" = None) -> int:
        try:
            print(include_path(paths=paths))
        except UnsupportedPlatformError as e:
            LOGGER.error(str(e))
            return EXIT_UNSUPPORTED_PLATFORM
        except BundleMissingError as e:
            LOGGER.error(str(e))
            return EXIT_BUNDLE_ERROR
        return EXIT_SUCCESS
