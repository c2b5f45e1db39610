from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from instructkit.core.utils.io import ensure_directory

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_INSTALLED_HANDLER: logging.Handler | None = None
_INSTALLED_TARGET: str | None = None
_NULL_HANDLER_INSTALLED: bool = False


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(level: str = "WARNING", *, log_path: Optional[Path] = None) -> None:
    """Install one InstructKit handler on the root logger.

    Logs go to ``log_path`` when given, otherwise to stderr (stdout stays
    reserved for command output). Idempotent per process: calling again with
    the same target only adjusts the level.
    """
    global _INSTALLED_HANDLER, _INSTALLED_TARGET

    target = str(Path(log_path).resolve()) if log_path is not None else "<stderr>"
    numeric = _level_from_name(level)
    root = logging.getLogger()
    root.setLevel(numeric)

    if _INSTALLED_HANDLER is not None and _INSTALLED_TARGET == target:
        _INSTALLED_HANDLER.setLevel(numeric)
        return

    if _INSTALLED_HANDLER is not None:
        root.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
        _INSTALLED_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        ensure_directory(Path(target).parent)
        handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)

    _INSTALLED_HANDLER = handler
    _INSTALLED_TARGET = target


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove the installed handler."""
    global _INSTALLED_HANDLER, _INSTALLED_TARGET
    if _INSTALLED_HANDLER is not None:
        logging.getLogger().removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
    _INSTALLED_HANDLER = None
    _INSTALLED_TARGET = None


def suppress_lastresort_handler() -> None:
    """Keep logging's implicit ``lastResort`` handler off stderr.

    Command output (text or ``--json``) carries warnings itself. Ensures the
    root logger has at least a NullHandler when nothing else is installed.
    """
    global _NULL_HANDLER_INSTALLED

    root = logging.getLogger()
    if root.handlers or _NULL_HANDLER_INSTALLED:
        return
    root.addHandler(logging.NullHandler())
    _NULL_HANDLER_INSTALLED = True


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging_for_tests", "suppress_lastresort_handler"]
