"""Module registry.

One registry is constructed per build and populated by discovery; the
resolver and report generator read from it. There is no process-wide
registry.
"""
from __future__ import annotations

from .conflict_aware import ConflictAwareRegistry

__all__ = ["ConflictAwareRegistry"]
