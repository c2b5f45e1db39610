"""File I/O helpers: atomic writes plus YAML and JSON access."""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_directory,
    read_text,
    write_text,
)
from .json import dumps_canonical, write_json
from .yaml import read_yaml

__all__ = [
    "PathLike",
    "atomic_write",
    "ensure_directory",
    "read_text",
    "write_text",
    "dumps_canonical",
    "write_json",
    "read_yaml",
]
