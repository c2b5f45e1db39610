"""Core I/O primitives.

Build artifacts (the Markdown document and its report) go through
:func:`atomic_write` so a crashed or interrupted build never leaves a
half-written file next to a complete one.
"""
from __future__ import annotations

import fcntl
import os
import tempfile
from pathlib import Path
from typing import Callable, TextIO, Union

PathLike = Union[str, Path]


def ensure_directory(path: PathLike, create: bool = True) -> Path:
    """Return ``path`` as an existing directory, creating it unless ``create`` is False.

    Raises:
        FileNotFoundError: ``create`` is False and the directory is missing
        NotADirectoryError: Something other than a directory is in the way
    """
    directory = Path(path)
    if directory.is_dir():
        return directory
    if directory.exists():
        raise NotADirectoryError(f"Path exists but is not a directory: {directory}")
    if not create:
        raise FileNotFoundError(f"Directory does not exist: {directory}")
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def atomic_write(
    path: PathLike,
    write_fn: Callable[[TextIO], None],
    *,
    encoding: str = "utf-8",
) -> None:
    """Write ``path`` through a locked, fsync'd sibling temp file, then rename over it.

    The temp file sits next to the target so ``os.replace`` stays on one
    filesystem. If ``write_fn`` raises, the target keeps its old content.
    """
    target = Path(path)
    ensure_directory(target.parent)

    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding) as handle:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
            try:
                write_fn(handle)
                handle.flush()
                os.fsync(handle.fileno())
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
        os.replace(tmp_path, target)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def read_text(path: PathLike) -> str:
    """Read a UTF-8 text file.

    Raises:
        FileNotFoundError: If the file does not exist
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"Text file not found: {source}")
    return source.read_text(encoding="utf-8")


def write_text(path: PathLike, content: str) -> None:
    atomic_write(path, lambda handle: handle.write(content))


__all__ = [
    "PathLike",
    "ensure_directory",
    "atomic_write",
    "read_text",
    "write_text",
]
