"""Tests for the ci-gen CLI."""

from __future__ import annotations

from pathlib import Path

import pytest

from ci_gen.cli import (
    EXIT_GENERATION_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_OUT_OF_DATE,
    EXIT_SUCCESS,
    build_parser,
    main,
)


class TestBuildParser:
    """Tests for the ci-gen argument parser."""

    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        assert args.root == "."
        assert args.config is None
        assert args.output is None
        assert not args.check

    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--help"])
        assert exc_info.value.code == 0


class TestMain:
    """Tests for the ci-gen entry point."""

    def test_writes_workflow(self, crate_repo: Path, capsys) -> None:
        exit_code = main([str(crate_repo)])
        path = crate_repo / ".github" / "workflows" / "ci.yml"
        assert exit_code == EXIT_SUCCESS
        assert path.is_file()
        assert f"Wrote {path}" in capsys.readouterr().out

    def test_output_override(self, crate_repo: Path) -> None:
        assert main([str(crate_repo), "--output", "out/ci.yml"]) == EXIT_SUCCESS
        assert (crate_repo / "out" / "ci.yml").is_file()

    def test_check_up_to_date(self, crate_repo: Path, capsys) -> None:
        main([str(crate_repo)])
        capsys.readouterr()
        assert main([str(crate_repo), "--check"]) == EXIT_SUCCESS
        assert "is up to date" in capsys.readouterr().out

    def test_check_out_of_date(self, crate_repo: Path, capsys) -> None:
        exit_code = main([str(crate_repo), "--check"])
        assert exit_code == EXIT_OUT_OF_DATE
        assert "out of date" in capsys.readouterr().err
        assert not (crate_repo / ".github").exists()

    def test_check_after_edit(self, crate_repo: Path) -> None:
        main([str(crate_repo)])
        path = crate_repo / ".github" / "workflows" / "ci.yml"
        path.write_text(path.read_text(encoding="utf-8") + "# local edit\n", encoding="utf-8")
        assert main([str(crate_repo), "--check"]) == EXIT_OUT_OF_DATE

    def test_no_units(self, tmp_path: Path, capsys) -> None:
        exit_code = main([str(tmp_path)])
        assert exit_code == EXIT_GENERATION_ERROR
        assert "No directories containing Cargo.toml" in capsys.readouterr().err

    def test_invalid_config(self, crate_repo: Path) -> None:
        (crate_repo / ".ci-gen.yml").write_text("test:\n  timeout_minutes: soon\n", encoding="utf-8")
        assert main([str(crate_repo)]) == EXIT_INVALID_USAGE

    def test_missing_config_file(self, crate_repo: Path) -> None:
        assert main([str(crate_repo), "--config", str(crate_repo / "nope.yml")]) == EXIT_INVALID_USAGE

    def test_unknown_option(self, crate_repo: Path) -> None:
        assert main([str(crate_repo), "--bogus"]) == EXIT_INVALID_USAGE

    def test_help(self, capsys) -> None:
        assert main(["--help"]) == EXIT_SUCCESS
        assert "usage:" in capsys.readouterr().out.lower()

    def test_null_workflow_path(self, crate_repo: Path) -> None:
        (crate_repo / ".ci-gen.yml").write_text("workflow:\n  path:\n", encoding="utf-8")
        assert main([str(crate_repo)]) == EXIT_INVALID_USAGE

    def test_config_excludes_units(self, crate_repo: Path) -> None:
        (crate_repo / ".ci-gen.yml").write_text(
            "units:\n  exclude: ['protoc-bin-vendored-*']\n", encoding="utf-8"
        )
        assert main([str(crate_repo)]) == EXIT_SUCCESS
        text = (crate_repo / ".github" / "workflows" / "ci.yml").read_text(encoding="utf-8")
        assert "protoc-bin-vendored-win32" not in text
        assert "cargo test ci-gen" in text
