"""Builders for the steps and fixed jobs used in the generated workflow."""

from __future__ import annotations

from typing import Optional

from ci_gen.models import LINUX, Job, Step, Toolchain

CACHE_ACTION = "actions/cache@v4"
CHECKOUT_ACTION = "actions/checkout@v4"
TOOLCHAIN_ACTION = "dtolnay/rust-toolchain@master"
MEGA_LINTER_ACTION = "oxsecurity/megalinter@v8"


def cargo_cache() -> Step:
    """Restore and save the cargo registry, git checkouts and target dir."""
    return Step(
        name="cargo cache",
        uses=CACHE_ACTION,
        with_={
            "path": "~/.cargo/registry\n~/.cargo/git\ntarget\n",
            "key": "${{ runner.os }}-cargo-${{ hashFiles('**/Cargo.toml') }}",
        },
    )


def checkout_sources() -> Step:
    return Step(name="Checkout sources", uses=CHECKOUT_ACTION)


def rust_install_toolchain(channel: Toolchain, components: Optional[str] = None) -> Step:
    """Install a Rust toolchain for ``channel``."""
    with_ = {"toolchain": channel.value}
    if components:
        with_["components"] = components
    return Step(name=f"Install toolchain {channel.value}", uses=TOOLCHAIN_ACTION, with_=with_)


def cargo_test(name: str, args: str) -> Step:
    return Step(name=name, run=f"cargo test {args}".rstrip())


def cargo_doc(name: str, args: str) -> Step:
    return Step(name=name, run=f"cargo doc {args}".rstrip())


def rustfmt_check_job() -> Job:
    """Job failing when any source is not rustfmt-formatted."""
    return Job(
        id="rustfmt-check",
        name="rustfmt check",
        runs_on=LINUX.runs_on,
        steps=[
            checkout_sources(),
            rust_install_toolchain(Toolchain.STABLE, components="rustfmt"),
            Step(name="cargo fmt check", run="cargo fmt --all -- --check"),
        ],
    )


def mega_linter_job() -> Job:
    """Job running MegaLinter over the whole repository."""
    return Job(
        id="mega-linter",
        name="mega-linter",
        runs_on=LINUX.runs_on,
        steps=[
            Step(name="Checkout sources", uses=CHECKOUT_ACTION, with_={"fetch-depth": 0}),
            Step(
                name="MegaLinter",
                uses=MEGA_LINTER_ACTION,
                env={
                    "VALIDATE_ALL_CODEBASE": "true",
                    "GITHUB_TOKEN": "${{ secrets.GITHUB_TOKEN }}",
                },
            ),
        ],
    )
