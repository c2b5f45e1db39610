"""JSON helpers: atomic report writes and canonical serialization."""
from __future__ import annotations

import json
from typing import Any

from .core import PathLike, atomic_write


def write_json(path: PathLike, data: Any, *, sort_keys: bool = False) -> None:
    """Atomically write ``data`` as 2-space indented UTF-8 JSON with a trailing newline.

    Key order is preserved unless ``sort_keys`` is set, so reports keep the
    field order their ``to_dict`` produces.
    """

    def _dump(handle) -> None:
        json.dump(data, handle, indent=2, sort_keys=sort_keys, ensure_ascii=False)
        handle.write("\n")

    atomic_write(path, _dump)


def dumps_canonical(data: Any) -> str:
    """Serialize ``data`` to a stable string for hashing.

    Keys are sorted and separators are compact, so equal values always yield
    byte-identical output regardless of mapping insertion order.
    """
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


__all__ = ["write_json", "dumps_canonical"]
