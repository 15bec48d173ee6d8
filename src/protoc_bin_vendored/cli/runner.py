"""CLI runner dispatching parsed arguments to commands."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from typing import Dict, Iterable, Optional

from protoc_bin_vendored.cli.arguments import build_parser
from protoc_bin_vendored.cli.commands import (
    Command,
    IncludeCommand,
    PathCommand,
    StatusCommand,
    UpdateCommand,
)
from protoc_bin_vendored.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from protoc_bin_vendored.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    try:
        return version("protoc-bin-vendored")
    except PackageNotFoundError:
        # Fallback for source checkouts that have not been installed.
        from protoc_bin_vendored import __version__

        return __version__


class CLIRunner:
    """Parses arguments, configures logging and runs the selected command."""

    def __init__(self) -> None:
        self.parser = build_parser()
        commands = [PathCommand(), IncludeCommand(), StatusCommand(), UpdateCommand()]
        self.commands: Dict[str, Command] = {command.name: command for command in commands}

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        argv_list = list(argv) if argv is not None else None

        # Handle --help specially to return 0
        if argv_list is not None and ("--help" in argv_list or "-h" in argv_list):
            self.parser.print_help()
            return EXIT_SUCCESS

        try:
            args = self.parser.parse_args(argv_list)
        except SystemExit as e:
            return EXIT_INVALID_USAGE if e.code else EXIT_SUCCESS

        configure_logging(debug=args.debug, verbose=args.verbose, quiet=args.quiet)

        if args.version:
            print(get_version())
            return EXIT_SUCCESS

        command = self.commands.get(args.command or "")
        if command is None:
            self.parser.print_help()
            return EXIT_INVALID_USAGE

        LOGGER.debug(f"Running command: {command.name}")
        return command.execute(args)
