"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from protoc_bin_vendored.bootstrap.paths import BundlePaths


class Command(ABC):
    """Base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier.

        Returns:
            String name of the command.
        """

    @abstractmethod
    def execute(self, args: Namespace, paths: "BundlePaths | None" = None) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            paths: Optional bundle layout (defaults to the shipped bundles).

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# Import command implementations for convenience
# ruff: noqa: E402
from protoc_bin_vendored.cli.commands.path import IncludeCommand, PathCommand
from protoc_bin_vendored.cli.commands.status import StatusCommand
from protoc_bin_vendored.cli.commands.update import UpdateCommand

__all__ = [
    "Command",
    "PathCommand",
    "IncludeCommand",
    "StatusCommand",
    "UpdateCommand",
]
