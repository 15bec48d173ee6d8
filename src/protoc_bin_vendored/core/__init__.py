"""Core utilities shared across protoc-bin-vendored modules."""
