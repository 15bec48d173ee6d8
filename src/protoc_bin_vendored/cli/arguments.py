"""Argument parser for the protoc-bin-vendored CLI."""

from __future__ import annotations

import argparse


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show protoc-bin-vendored version and exit.",
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


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protoc-bin-vendored",
        description="protoc-bin-vendored - Locate and maintain the bundled protoc binaries.",
    )
    _add_global_options(parser)

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    subparsers.add_parser(
        "path",
        help="Print the path to the protoc binary for this platform.",
    )

    subparsers.add_parser(
        "include",
        help="Print the path to the well-known .proto include directory.",
    )

    status = subparsers.add_parser(
        "status",
        help="Show the detected platform and the state of every bundle.",
    )
    status.add_argument(
        "--smoke",
        action="store_true",
        help="Also run 'protoc --version' for this platform's bundle.",
    )

    update = subparsers.add_parser(
        "update",
        help="Refresh the bundles from an upstream protobuf release.",
    )
    update.add_argument(
        "--tag",
        metavar="TAG",
        default=None,
        help="Release tag to install, e.g. v29.3 (default: latest release).",
    )
    update.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Do not ask before overwriting existing bundles.",
    )

    return parser
