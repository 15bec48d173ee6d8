"""Update command implementation."""

from __future__ import annotations

from argparse import Namespace

import questionary

from protoc_bin_vendored.bootstrap.paths import BundlePaths
from protoc_bin_vendored.bootstrap.versions import get_protoc_version
from protoc_bin_vendored.cli.commands import Command
from protoc_bin_vendored.cli.exit_codes import (
    EXIT_INVALID_USAGE,
    EXIT_SUCCESS,
    EXIT_UPDATE_FAILURE,
)
from protoc_bin_vendored.core.logging import get_logger
from protoc_bin_vendored.exceptions import UpdateError
from protoc_bin_vendored.update import update_bundles

LOGGER = get_logger(__name__)


class UpdateCommand(Command):
    """Refreshes the bundled protoc binaries from an upstream release."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "update"

    def execute(self, args: Namespace, paths: "BundlePaths | None" = None) -> int:
        paths = paths or BundlePaths.default()

        if paths.existing_bundles() and not args.yes:
            current = get_protoc_version(paths)
            proceed = questionary.confirm(
                f"Replace the bundled protoc {current} in {paths.root}?",
                default=False,
            ).ask()
            if not proceed:
                print("Aborted.")
                return EXIT_INVALID_USAGE

        try:
            result = update_bundles(tag=args.tag, paths=paths)
        except (UpdateError, ValueError, OSError) as e:
            LOGGER.error(f"Update failed: {e}")
            return EXIT_UPDATE_FAILURE

        print(f"Updated to protoc {result.tag}")
        for name in result.updated:
            print(f"  updated: {name}")
        for name in result.skipped:
            print(f"  kept:    {name} (no upstream binary)")
        return EXIT_SUCCESS
