"""Status command implementation."""

from __future__ import annotations

import subprocess
from argparse import Namespace
from typing import Optional

from rich.console import Console
from rich.table import Table

from protoc_bin_vendored.arch import ArchBundle, detect_bundle
from protoc_bin_vendored.bootstrap.paths import BundlePaths
from protoc_bin_vendored.bootstrap.platform import get_platform_info
from protoc_bin_vendored.bootstrap.validation import ToolStatus, validate_bundles
from protoc_bin_vendored.bootstrap.versions import get_protoc_version
from protoc_bin_vendored.cli.commands import Command
from protoc_bin_vendored.cli.exit_codes import EXIT_BUNDLE_ERROR, EXIT_SUCCESS
from protoc_bin_vendored.core.logging import get_logger
from protoc_bin_vendored.exceptions import ProtocBinVendoredError, UnsupportedPlatformError
from protoc_bin_vendored.resolver import protoc_bin_path

LOGGER = get_logger(__name__)

SMOKE_MARKER = "libprotoc"

_STATUS_STYLES = {
    ToolStatus.PRESENT: "green",
    ToolStatus.MISSING: "red",
    ToolStatus.NOT_EXECUTABLE: "yellow",
}


class StatusCommand(Command):
    """Shows platform detection and bundle status."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, paths: "BundlePaths | None" = None) -> int:
        """Execute the status command.

        Returns:
            EXIT_SUCCESS if every bundle is valid (and the smoke test, when
            requested, passed), EXIT_BUNDLE_ERROR otherwise.
        """
        paths = paths or BundlePaths.default()
        console = Console()
        platform_info = get_platform_info()

        current: Optional[ArchBundle]
        try:
            current = detect_bundle(platform_info.os, platform_info.arch)
        except UnsupportedPlatformError as e:
            current = None
            LOGGER.debug(str(e))

        console.print(f"Platform: {platform_info}")
        console.print(f"Bundle: {current.dir_name if current else 'unsupported'}")
        console.print(f"Bundle root: {paths.root}")
        console.print(f"protoc version: {get_protoc_version(paths)}")
        console.print()

        result = validate_bundles(paths)

        table = Table(title="Bundles")
        table.add_column("Bundle")
        table.add_column("protoc")
        table.add_column("include")
        for bundle in ArchBundle:
            status = result.get_status(bundle.dir_name)
            include_state = (
                "mismatch" if bundle.dir_name in result.include_mismatches else "ok"
            )
            marker = " *" if bundle is current else ""
            table.add_row(
                f"{bundle.dir_name}{marker}",
                f"[{_STATUS_STYLES[status]}]{status.value}[/]",
                include_state,
            )
        console.print(table)

        exit_code = EXIT_SUCCESS if result.all_valid() else EXIT_BUNDLE_ERROR

        if getattr(args, "smoke", False):
            if current is None or not self._smoke(paths, current, console):
                exit_code = EXIT_BUNDLE_ERROR

        return exit_code

    def _smoke(self, paths: BundlePaths, bundle: ArchBundle, console: Console) -> bool:
        """Run ``protoc --version`` and check it identifies as libprotoc."""
        try:
            protoc = protoc_bin_path(bundle, paths)
            completed = subprocess.run(
                [str(protoc), "--version"],
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=30,
                check=False,
            )
        except (ProtocBinVendoredError, OSError, subprocess.TimeoutExpired) as e:
            LOGGER.error(f"Smoke test failed: {e}")
            return False

        output = completed.stdout.strip()
        if completed.returncode != 0 or SMOKE_MARKER not in output:
            LOGGER.error(f"Smoke test failed: unexpected protoc output {output!r}")
            return False

        console.print(f"Smoke test: {output}")
        return True
