"""Persona records: an ordered composition request over module ids."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True, slots=True)
class ModuleGroup:
    """A named (or unnamed) run of module ids rendered together."""

    ids: Tuple[str, ...]
    group_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"ids": list(self.ids)}
        if self.group_name:
            result["group"] = self.group_name
        return result


ModuleEntry = Union[str, ModuleGroup]


@dataclass(frozen=True)
class Persona:
    """Composition request plus presentation options.

    ``modules`` order, and the order of ids inside each group, is the final
    document order.
    """

    name: str
    version: str
    schema_version: str
    description: str
    semantic: str
    identity: str = ""
    attribution: bool = False
    modules: Tuple[ModuleEntry, ...] = ()
    file_path: Optional[Path] = field(default=None, compare=False)

    def module_ids(self) -> List[str]:
        """All referenced ids in document order (duplicates kept)."""
        ids: List[str] = []
        for entry in self.modules:
            if isinstance(entry, ModuleGroup):
                ids.extend(entry.ids)
            else:
                ids.append(entry)
        return ids

    def groups(self) -> List[ModuleGroup]:
        """Group entries for rendering and reporting.

        Each group entry stays one group; runs of consecutive bare ids are
        coalesced into a single unnamed group.
        """
        groups: List[ModuleGroup] = []
        pending: List[str] = []
        for entry in self.modules:
            if isinstance(entry, ModuleGroup):
                if pending:
                    groups.append(ModuleGroup(ids=tuple(pending)))
                    pending = []
                groups.append(entry)
            else:
                pending.append(entry)
        if pending:
            groups.append(ModuleGroup(ids=tuple(pending)))
        return groups

    def entries_to_data(self) -> List[Any]:
        return [e.to_dict() if isinstance(e, ModuleGroup) else e for e in self.modules]

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "schemaVersion": self.schema_version,
            "description": self.description,
            "semantic": self.semantic,
            "identity": self.identity,
            "attribution": self.attribution,
            "modules": self.entries_to_data(),
        }
        if self.file_path is not None:
            result["filePath"] = str(self.file_path)
        return result


__all__ = ["ModuleGroup", "ModuleEntry", "Persona"]
