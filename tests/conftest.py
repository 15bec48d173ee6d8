"""Shared fixtures: fake bundle trees and fake crate repositories."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

import pytest

from protoc_bin_vendored.arch import ArchBundle
from protoc_bin_vendored.bootstrap.paths import BundlePaths
from protoc_bin_vendored.core.logging import ROOT_LOGGER_NAMES

INCLUDE_FILES: Dict[str, bytes] = {
    "google/protobuf/descriptor.proto": b'syntax = "proto2";\npackage google.protobuf;\n',
    "google/protobuf/timestamp.proto": b'syntax = "proto3";\nmessage Timestamp {}\n',
    "google/protobuf/compiler/plugin.proto": b'syntax = "proto2";\n',
}

FAKE_PROTOC = "#!/bin/sh\necho 'libprotoc 29.3'\n"


def write_include_tree(include_dir: Path) -> None:
    for rel, data in INCLUDE_FILES.items():
        target = include_dir / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)


def make_bundle(paths: BundlePaths, bundle: ArchBundle) -> None:
    protoc = paths.protoc_path(bundle)
    protoc.parent.mkdir(parents=True, exist_ok=True)
    protoc.write_text(FAKE_PROTOC, encoding="utf-8")
    protoc.chmod(0o755)
    write_include_tree(paths.include_dir(bundle))


@pytest.fixture
def bundle_paths(tmp_path: Path) -> BundlePaths:
    """A complete bundle root with every platform populated."""
    paths = BundlePaths(tmp_path / "bundles")
    for bundle in ArchBundle:
        make_bundle(paths, bundle)
    (paths.root / "version.txt").write_text("v29.3\n", encoding="utf-8")
    return paths


@pytest.fixture
def bundle_home(bundle_paths: BundlePaths, monkeypatch: pytest.MonkeyPatch) -> BundlePaths:
    """Point PROTOC_BIN_VENDORED_HOME at the fake bundle root."""
    monkeypatch.setenv("PROTOC_BIN_VENDORED_HOME", str(bundle_paths.root))
    return bundle_paths


@pytest.fixture
def crate_repo(tmp_path: Path) -> Path:
    """A repository root with crates, the template, and non-crate dirs."""
    root = tmp_path / "repo"
    root.mkdir()
    for name in [
        "protoc-bin-vendored-win32",
        "protoc-bin-vendored",
        "ci-gen",
        "protoc-bin-vendored-linux-x86_64",
        "protoc-bin-vendored-arch-template",
    ]:
        crate = root / name
        crate.mkdir()
        (crate / "Cargo.toml").write_text(f'[package]\nname = "{name}"\n', encoding="utf-8")
    (root / "docs").mkdir()
    (root / "docs" / "README.md").write_text("docs\n", encoding="utf-8")
    (root / "Cargo.toml").write_text("[workspace]\n", encoding="utf-8")
    return root


@pytest.fixture(autouse=True)
def reset_package_loggers():
    """Undo handler and level changes made by CLI entry points."""
    yield
    for name in ROOT_LOGGER_NAMES:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
