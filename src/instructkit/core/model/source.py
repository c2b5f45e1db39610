"""Module sources, conflict strategies and registry entries."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .module import Module


class SourceType(str, Enum):
    STANDARD = "standard"
    LOCAL = "local"
    REMOTE = "remote"


class ConflictStrategy(str, Enum):
    ERROR = "error"
    WARN = "warn"
    REPLACE = "replace"


def parse_source_type(raw: Optional[str]) -> SourceType:
    v = str(raw or "").strip().lower()
    for s in SourceType:
        if v == s.value:
            return s
    raise ValueError(f"Invalid module source type: {raw} (expected one of: standard, local, remote)")


def parse_conflict_strategy(raw: Any, default: Optional[ConflictStrategy] = None) -> ConflictStrategy:
    """Parse a strategy name (or pass an enum through).

    Empty values fall back to ``default`` when one is given.
    """
    if isinstance(raw, ConflictStrategy):
        return raw
    v = str(raw or "").strip().lower()
    if not v and default is not None:
        return default
    for s in ConflictStrategy:
        if v == s.value:
            return s
    raise ValueError(f"Invalid conflict strategy: {raw} (expected one of: error, warn, replace)")


@dataclass(frozen=True, slots=True)
class ModuleSource:
    """Where a module came from. Used for diagnostics and reports, never identity."""

    type: SourceType
    path: str

    @property
    def key(self) -> str:
        return f"{self.type.value}:{self.path}"

    def __str__(self) -> str:
        return self.key

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "path": self.path}


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    """One arrival of a module in the registry.

    Attributes:
        module: The module definition
        source: Where it was discovered
        added_at: Monotonic arrival sequence number within one registry
    """

    module: "Module"
    source: ModuleSource
    added_at: int


__all__ = [
    "SourceType",
    "ConflictStrategy",
    "ModuleSource",
    "RegistryEntry",
    "parse_source_type",
    "parse_conflict_strategy",
]
