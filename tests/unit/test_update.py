"""Tests for protoc_bin_vendored.update."""

from __future__ import annotations

import io
import json
import os
import zipfile
from pathlib import Path
from typing import Dict, List
from unittest.mock import MagicMock, patch
from urllib.error import URLError

import pytest

from protoc_bin_vendored.arch import ArchBundle
from protoc_bin_vendored.bootstrap.paths import BundlePaths
from protoc_bin_vendored.bootstrap.validation import digest_tree, validate_bundles
from protoc_bin_vendored.bootstrap.versions import get_protoc_version
from protoc_bin_vendored.exceptions import UpdateError
from protoc_bin_vendored.update import (
    extract_include,
    extract_protoc,
    fetch_latest_tag,
    release_url,
    secure_urlopen,
    update_bundles,
)

INCLUDE_MEMBERS: Dict[str, bytes] = {
    "include/google/protobuf/any.proto": b"any",
    "include/google/protobuf/descriptor.proto": b"descriptor",
}


def make_release_zip(executable: str, with_include: bool = True) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("readme.txt", "protoc")
        zf.writestr(f"bin/{executable}", f"binary {executable}")
        if with_include:
            zf.writestr("include/", "")
            for name, data in INCLUDE_MEMBERS.items():
                zf.writestr(name, data)
    return buffer.getvalue()


def fake_download(urls: List[str]):
    """download_archive replacement writing a release zip for the URL's asset."""

    def _download(url: str, dest: Path) -> Path:
        urls.append(url)
        executable = "protoc.exe" if url.endswith("-win32.zip") else "protoc"
        dest.write_bytes(make_release_zip(executable))
        return dest

    return _download


class TestReleaseUrl:
    """Tests for release_url function."""

    def test_strips_v_from_version(self) -> None:
        assert release_url("v29.3", "linux-x86_64") == (
            "https://github.com/protocolbuffers/protobuf/releases/download/"
            "v29.3/protoc-29.3-linux-x86_64.zip"
        )

    def test_tag_without_v(self) -> None:
        assert release_url("29.3", "win32").endswith("/29.3/protoc-29.3-win32.zip")


class TestSecureUrlopen:
    """Tests for secure_urlopen function."""

    @pytest.mark.parametrize(
        "url",
        [
            "http://github.com/x",
            "https://example.com/protoc.zip",
            "file:///etc/passwd",
        ],
    )
    def test_rejects_disallowed_urls(self, url: str) -> None:
        with pytest.raises(ValueError, match="Invalid download URL"):
            secure_urlopen(url)

    def test_allows_github(self) -> None:
        with patch("protoc_bin_vendored.update.urlopen") as mock_urlopen:
            secure_urlopen("https://github.com/protocolbuffers/protobuf")
        mock_urlopen.assert_called_once()


class TestFetchLatestTag:
    """Tests for fetch_latest_tag function."""

    def _response(self, payload: bytes) -> MagicMock:
        response = MagicMock()
        response.__enter__.return_value = io.BytesIO(payload)
        return response

    def test_reads_tag_name(self) -> None:
        body = json.dumps({"tag_name": "v30.0"}).encode()
        with patch("protoc_bin_vendored.update.secure_urlopen", return_value=self._response(body)):
            assert fetch_latest_tag() == "v30.0"

    def test_missing_tag_name(self) -> None:
        with patch("protoc_bin_vendored.update.secure_urlopen", return_value=self._response(b"{}")):
            with pytest.raises(UpdateError, match="tag_name"):
                fetch_latest_tag()

    def test_network_error(self) -> None:
        with patch(
            "protoc_bin_vendored.update.secure_urlopen",
            side_effect=URLError("offline"),
        ):
            with pytest.raises(UpdateError, match="offline"):
                fetch_latest_tag()


class TestExtract:
    """Tests for archive extraction helpers."""

    def test_extract_protoc(self, tmp_path: Path) -> None:
        paths = BundlePaths(tmp_path)
        with zipfile.ZipFile(io.BytesIO(make_release_zip("protoc"))) as zf:
            target = extract_protoc(zf, ArchBundle.LINUX_X86_64, paths)
        assert target == paths.protoc_path(ArchBundle.LINUX_X86_64)
        assert target.read_text() == "binary protoc"
        if os.name != "nt":
            assert os.access(target, os.X_OK)

    def test_extract_protoc_missing_member(self, tmp_path: Path) -> None:
        with zipfile.ZipFile(io.BytesIO(make_release_zip("protoc"))) as zf:
            with pytest.raises(UpdateError, match="bin/protoc.exe"):
                extract_protoc(zf, ArchBundle.WIN32, BundlePaths(tmp_path))

    def test_extract_include(self, tmp_path: Path) -> None:
        with zipfile.ZipFile(io.BytesIO(make_release_zip("protoc"))) as zf:
            include = extract_include(zf, tmp_path)
        assert include == tmp_path / "include"
        assert sorted(digest_tree(include)) == [
            "google/protobuf/any.proto",
            "google/protobuf/descriptor.proto",
        ]

    def test_extract_include_without_files(self, tmp_path: Path) -> None:
        with zipfile.ZipFile(io.BytesIO(make_release_zip("protoc", with_include=False))) as zf:
            with pytest.raises(UpdateError, match="no include"):
                extract_include(zf, tmp_path)

    def test_extract_include_rejects_traversal(self, tmp_path: Path) -> None:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            zf.writestr("include/../../evil.proto", "x")
        with zipfile.ZipFile(buffer) as zf:
            with pytest.raises(UpdateError, match="Path traversal"):
                extract_include(zf, tmp_path / "dest")
        assert not (tmp_path / "evil.proto").exists()


class TestUpdateBundles:
    """Tests for update_bundles function."""

    def _seed_riscv(self, paths: BundlePaths) -> None:
        protoc = paths.protoc_path(ArchBundle.LINUX_RISCV64)
        protoc.parent.mkdir(parents=True)
        protoc.write_text("hand built")
        protoc.chmod(0o755)

    def test_updates_every_bundle_with_asset(self, tmp_path: Path) -> None:
        paths = BundlePaths(tmp_path / "bundles")
        self._seed_riscv(paths)
        urls: List[str] = []

        with patch("protoc_bin_vendored.update.download_archive", side_effect=fake_download(urls)):
            result = update_bundles(tag="v29.3", paths=paths)

        assert result.tag == "v29.3"
        assert result.skipped == ["linux-riscv64"]
        assert result.updated == [
            bundle.dir_name for bundle in ArchBundle if bundle.release_asset is not None
        ]
        assert len(urls) == len(result.updated)
        assert all("/v29.3/protoc-29.3-" in url for url in urls)

        assert get_protoc_version(paths) == "v29.3"
        assert paths.protoc_path(ArchBundle.LINUX_RISCV64).read_text() == "hand built"
        assert validate_bundles(paths).all_valid()

    def test_include_copied_into_hand_maintained_bundle(self, tmp_path: Path) -> None:
        paths = BundlePaths(tmp_path / "bundles")
        self._seed_riscv(paths)
        with patch("protoc_bin_vendored.update.download_archive", side_effect=fake_download([])):
            update_bundles(tag="v29.3", paths=paths)

        reference = digest_tree(paths.include_dir(ArchBundle.LINUX_X86_64))
        assert digest_tree(paths.include_dir(ArchBundle.LINUX_RISCV64)) == reference

    def test_replaces_stale_include_files(self, bundle_paths: BundlePaths) -> None:
        stale = bundle_paths.include_dir(ArchBundle.WIN32) / "google/protobuf/timestamp.proto"
        assert stale.exists()
        with patch("protoc_bin_vendored.update.download_archive", side_effect=fake_download([])):
            update_bundles(tag="v30.0", paths=bundle_paths)
        assert not stale.exists()

    def test_fetches_latest_tag_when_omitted(self, tmp_path: Path) -> None:
        paths = BundlePaths(tmp_path / "bundles")
        with patch("protoc_bin_vendored.update.fetch_latest_tag", return_value="v31.0") as mock_tag, \
                patch("protoc_bin_vendored.update.download_archive", side_effect=fake_download([])):
            result = update_bundles(paths=paths)
        mock_tag.assert_called_once()
        assert result.tag == "v31.0"

    def test_corrupt_archive(self, tmp_path: Path) -> None:
        def _bad_download(url: str, dest: Path) -> Path:
            dest.write_bytes(b"not a zip")
            return dest

        with patch("protoc_bin_vendored.update.download_archive", side_effect=_bad_download):
            with pytest.raises(UpdateError, match="Corrupt archive"):
                update_bundles(tag="v29.3", paths=BundlePaths(tmp_path))

    def test_download_failure_leaves_version_untouched(self, bundle_paths: BundlePaths) -> None:
        with patch(
            "protoc_bin_vendored.update.download_archive",
            side_effect=UpdateError("Failed to download"),
        ):
            with pytest.raises(UpdateError):
                update_bundles(tag="v99.0", paths=bundle_paths)
        assert get_protoc_version(bundle_paths) == "v29.3"

    def test_failed_download_leaves_bundles_untouched(self, bundle_paths: BundlePaths) -> None:
        calls: List[str] = []

        def _urlopen(url: str, timeout: int = 0) -> MagicMock:
            calls.append(url)
            if len(calls) == 3:
                raise URLError("connection reset")
            response = MagicMock()
            response.__enter__.return_value = io.BytesIO(make_release_zip("protoc"))
            return response

        before = {
            bundle: bundle_paths.protoc_path(bundle).read_bytes() for bundle in ArchBundle
        }
        with patch("protoc_bin_vendored.update.secure_urlopen", side_effect=_urlopen):
            with pytest.raises(UpdateError, match="connection reset"):
                update_bundles(tag="v30.0", paths=bundle_paths)

        assert len(calls) == 3
        for bundle, data in before.items():
            assert bundle_paths.protoc_path(bundle).read_bytes() == data
        assert validate_bundles(bundle_paths).all_valid()
        assert get_protoc_version(bundle_paths) == "v29.3"
