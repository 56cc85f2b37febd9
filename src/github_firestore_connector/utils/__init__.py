"""Shared helpers."""

from .file_io import atomic_write, atomic_write_json

__all__ = ["atomic_write", "atomic_write_json"]
