from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from ci_gen.config import ConfigError, load_config
from ci_gen.exceptions import CiGenError
from ci_gen.writer import is_up_to_date, workflow_path, write_workflow
from protoc_bin_vendored.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_OUT_OF_DATE = 1
EXIT_GENERATION_ERROR = 2
EXIT_INVALID_USAGE = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ci-gen",
        description="ci-gen - Generate the GitHub Actions workflow for every crate in the repository.",
    )

    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Repository root (default: current directory).",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: .ci-gen.yml in the repository root).",
    )
    parser.add_argument(
        "--output",
        metavar="PATH",
        default=None,
        help="Workflow file to write, relative to the root (default: .github/workflows/ci.yml).",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Do not write; exit with code 1 if the workflow on disk is out of date.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce logging output to errors only.",
    )

    return parser


def cli_args_to_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Convert CLI arguments to config override dict.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Dictionary of config overrides.
    """
    overrides: Dict[str, Any] = {}
    if args.output:
        overrides["workflow"] = {"path": args.output}
    return overrides


def main(argv: Optional[Iterable[str]] = None) -> int:
    """CLI entrypoint.

    Returns an exit code suitable for use as a console script.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(list(argv) if argv is not None else None)
    except SystemExit as e:
        return EXIT_INVALID_USAGE if e.code else EXIT_SUCCESS

    configure_logging(debug=args.debug, verbose=args.verbose, quiet=args.quiet)

    root = Path(args.root).resolve()

    try:
        config = load_config(
            project_root=root,
            cli_config_path=args.config,
            cli_overrides=cli_args_to_config_overrides(args),
        )
    except ConfigError as e:
        LOGGER.error(str(e))
        return EXIT_INVALID_USAGE

    try:
        if args.check:
            if is_up_to_date(root, config):
                print(f"{workflow_path(root, config)} is up to date")
                return EXIT_SUCCESS
            LOGGER.error(f"{workflow_path(root, config)} is out of date, run ci-gen to regenerate it")
            return EXIT_OUT_OF_DATE

        path = write_workflow(root, config)
    except CiGenError as e:
        LOGGER.error(str(e))
        return EXIT_GENERATION_ERROR
    except OSError as e:
        LOGGER.error(f"Failed to write workflow: {e}")
        return EXIT_GENERATION_ERROR

    print(f"Wrote {path}")
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    raise SystemExit(main())
