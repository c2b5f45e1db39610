"""
InstructKit data resource helpers.

Bundled JSON Schemas (stored as YAML) and the standard module library are
shipped inside this package and located with importlib.resources.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """
    Get absolute path to a bundled data file or directory.

    Example:
        >>> get_data_path("schemas", "module.schema.yaml")
        PosixPath('/path/to/instructkit/data/schemas/module.schema.yaml')
    """
    base = Path(str(resources.files(__name__) / subpackage))
    return base / filename if filename else base


__all__ = ["get_data_path"]
