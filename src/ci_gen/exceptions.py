"""Exceptions raised while generating the CI workflow."""

from __future__ import annotations


class CiGenError(Exception):
    """Base class for workflow generation errors."""


class DiscoveryError(CiGenError):
    """The repository layout does not allow unit discovery."""
