"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Tuple

from instructkit.core.build import BuildOptions, BuildOrchestrator
from instructkit.core.config import ModulesConfig
from instructkit.core.discovery import DiscoveryResult
from instructkit.core.model import Module, RegistryEntry, parse_conflict_strategy


def build_options_from_args(args: argparse.Namespace) -> BuildOptions:
    """Translate the shared source flags into :class:`BuildOptions`."""
    config_path = getattr(args, "config_path", None)
    standard_library = getattr(args, "standard_library", None)
    strategy = getattr(args, "conflict_strategy", None)
    return BuildOptions(
        config_path=Path(config_path) if config_path else None,
        conflict_strategy=parse_conflict_strategy(strategy) if strategy else None,
        include_standard=getattr(args, "include_standard", None),
        standard_library=Path(standard_library) if standard_library else None,
    )


def discover_from_args(args: argparse.Namespace) -> Tuple[ModulesConfig, DiscoveryResult]:
    """Load config and discover modules the same way ``build`` does."""
    orchestrator = BuildOrchestrator(build_options_from_args(args))
    config = orchestrator.load_config()
    return config, orchestrator.discover(config)


def representative_modules(result: DiscoveryResult, tier: Optional[str] = None) -> List[Tuple[Module, List[RegistryEntry]]]:
    """One module per id (first-added entry) with all of its entries.

    Sorted by module name, then id.
    """
    rows: List[Tuple[Module, List[RegistryEntry]]] = []
    for entries in result.registry.get_all_entries().values():
        module = entries[0].module
        if tier and module.tier != tier:
            continue
        rows.append((module, entries))
    rows.sort(key=lambda row: (row[0].metadata.name.lower(), row[0].id))
    return rows


def module_summary(module: Module, entries: List[RegistryEntry]) -> dict:
    return {
        "id": module.id,
        "name": module.metadata.name,
        "description": module.metadata.description,
        "version": module.version,
        "tier": module.tier,
        "tags": list(module.metadata.tags),
        "deprecated": module.metadata.deprecated,
        "sources": [entry.source.key for entry in entries],
    }


__all__ = [
    "build_options_from_args",
    "discover_from_args",
    "module_summary",
    "representative_modules",
]
