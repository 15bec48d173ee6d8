"""
Bootstrap module for the vendored protoc bundles.

This module handles:
- Platform detection (OS + architecture)
- Bundle directory layout (bundles/<platform>/bin, bundles/<platform>/include)
- Bundle validation utilities
- The pinned protoc version

Modules are imported directly (``protoc_bin_vendored.bootstrap.paths``)
because ``paths`` depends on ``protoc_bin_vendored.arch``, which in turn
depends on ``platform``.
"""
