"""Conflict-aware module registry.

Stores every arrival of a module id and defers conflict resolution to lookup
time, so the same registry can answer differently for different strategies.
"""
from __future__ import annotations

import itertools
import logging
import threading
from typing import Dict, Iterable, List, Optional

from instructkit.core.exceptions import ConflictError
from instructkit.core.model import (
    ConflictStrategy,
    Module,
    ModuleSource,
    RegistryEntry,
    parse_conflict_strategy,
)

logger = logging.getLogger(__name__)


class ConflictAwareRegistry:
    """Registry holding one or more entries per module id.

    Entries are kept in arrival order. ``warn`` resolves to the first-added
    entry and ``replace`` to the last-added one, so the order in which
    sources are registered is part of the contract.

    ``add`` is serialized with a lock: discovery may run on several threads,
    but arrival order must stay well defined.

    Example:
        registry = ConflictAwareRegistry(ConflictStrategy.WARN)
        registry.add(module, ModuleSource(SourceType.STANDARD, "/lib"))
        winner = registry.resolve(module.id)
    """

    def __init__(self, default_strategy: ConflictStrategy | str = ConflictStrategy.ERROR) -> None:
        self.default_strategy = parse_conflict_strategy(default_strategy)
        self._modules: Dict[str, List[RegistryEntry]] = {}
        self._lock = threading.Lock()
        self._sequence = itertools.count()

    # =========================================================================
    # Population
    # =========================================================================

    def add(self, module: Module, source: ModuleSource) -> None:
        """Append an entry for ``module.id``. Never raises for duplicates."""
        with self._lock:
            entry = RegistryEntry(module=module, source=source, added_at=next(self._sequence))
            self._modules.setdefault(module.id, []).append(entry)
        logger.debug("Registered %s from %s", module.id, source.key)

    def add_all(self, modules: Iterable[Module], source: ModuleSource) -> None:
        for module in modules:
            self.add(module, source)

    # =========================================================================
    # Inspection
    # =========================================================================

    def has(self, module_id: str) -> bool:
        return bool(self._modules.get(module_id))

    def size(self) -> int:
        """Number of distinct module ids."""
        return len(self._modules)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, module_id: object) -> bool:
        return isinstance(module_id, str) and self.has(module_id)

    def ids(self) -> List[str]:
        return list(self._modules.keys())

    def get_conflicts(self, module_id: str) -> Optional[List[RegistryEntry]]:
        """Return all entries for ``module_id``, or None when there is no conflict."""
        entries = self._modules.get(module_id)
        if entries and len(entries) > 1:
            return list(entries)
        return None

    def get_conflicting_ids(self) -> List[str]:
        return [module_id for module_id, entries in self._modules.items() if len(entries) > 1]

    def get_all_entries(self) -> Dict[str, List[RegistryEntry]]:
        return {module_id: list(entries) for module_id, entries in self._modules.items()}

    def get_source_summary(self) -> Dict[str, int]:
        """Count entries per ``"type:path"`` source key."""
        summary: Dict[str, int] = {}
        for entries in self._modules.values():
            for entry in entries:
                summary[entry.source.key] = summary.get(entry.source.key, 0) + 1
        return summary

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve_entry(
        self,
        module_id: str,
        strategy: ConflictStrategy | str | None = None,
    ) -> Optional[RegistryEntry]:
        """Return the winning entry for ``module_id``.

        Raises:
            ConflictError: Several entries exist and the strategy is ``error``.
        """
        entries = self._modules.get(module_id)
        if not entries:
            return None
        if len(entries) == 1:
            return entries[0]

        effective = parse_conflict_strategy(strategy, default=self.default_strategy)
        return self._resolve_conflict(module_id, entries, effective)

    def resolve(
        self,
        module_id: str,
        strategy: ConflictStrategy | str | None = None,
    ) -> Optional[Module]:
        entry = self.resolve_entry(module_id, strategy)
        return entry.module if entry is not None else None

    def resolve_all(self, strategy: ConflictStrategy | str | None = None) -> Dict[str, Module]:
        """Resolve every known id.

        Fail-fast: under ``error`` the first conflicting id aborts the call.
        """
        resolved: Dict[str, Module] = {}
        for module_id in list(self._modules.keys()):
            module = self.resolve(module_id, strategy)
            if module is not None:
                resolved[module_id] = module
        return resolved

    def _resolve_conflict(
        self,
        module_id: str,
        entries: List[RegistryEntry],
        strategy: ConflictStrategy,
    ) -> RegistryEntry:
        if strategy is ConflictStrategy.ERROR:
            sources = ", ".join(e.source.key for e in entries)
            raise ConflictError(
                f"Module conflict for '{module_id}': {len(entries)} candidates found ({sources})",
                module_id=module_id,
                conflict_count=len(entries),
                context={"sources": [e.source.key for e in entries]},
            )
        if strategy is ConflictStrategy.WARN:
            first = entries[0]
            logger.warning(
                "Module conflict for '%s': %d candidates found. Using first entry from %s",
                module_id,
                len(entries),
                first.source.key,
            )
            return first
        return entries[-1]


__all__ = ["ConflictAwareRegistry"]
