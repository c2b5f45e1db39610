"""
InstructKit inspect command.

SUMMARY: Inspect the module registry: conflicts, sources and individual modules
"""

from __future__ import annotations

import argparse
from typing import Any, Dict, List

from instructkit.cli import (
    OutputFormatter,
    add_conflict_strategy_flag,
    add_json_flag,
    add_standard_flags,
    discover_from_args,
)
from instructkit.core.build import BuildOrchestrator
from instructkit.core.exceptions import ConflictError, InstructKitError
from instructkit.core.model import RegistryEntry

SUMMARY = "Inspect the module registry: conflicts, sources and individual modules"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "module_id",
        nargs="?",
        default=None,
        help="Show every registered entry for this module id",
    )
    parser.add_argument(
        "--conflicts",
        action="store_true",
        help="List module ids defined by more than one source",
    )
    parser.add_argument(
        "--sources",
        action="store_true",
        help="Show how many modules each source contributed",
    )
    add_conflict_strategy_flag(parser)
    add_standard_flags(parser)
    add_json_flag(parser)


def _entry_payload(entry: RegistryEntry) -> Dict[str, Any]:
    return {
        "source": entry.source.key,
        "addedAt": entry.added_at,
        "version": entry.module.version,
        "name": entry.module.metadata.name,
        "filePath": str(entry.module.file_path) if entry.module.file_path else None,
    }


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        config, discovered = discover_from_args(args)
        registry = discovered.registry
        formatter.warnings(discovered.warnings)

        if args.module_id:
            entries = registry.get_all_entries().get(args.module_id)
            if not entries:
                formatter.error(KeyError(args.module_id), f"Module not found: {args.module_id}", error_code="not_found")
                return 1
            strategy = BuildOrchestrator.strategy_selector(config, registry)(args.module_id)
            conflict_message = None
            try:
                winner = registry.resolve_entry(args.module_id, strategy)
            except ConflictError as exc:
                winner = None
                conflict_message = str(exc)
            detail: Dict[str, Any] = {
                "id": args.module_id,
                "entries": [_entry_payload(e) for e in entries],
                "resolved": _entry_payload(winner) if winner else None,
                "strategy": strategy.value,
            }
            if conflict_message:
                detail["conflict"] = conflict_message
            if formatter.json_mode:
                formatter.json_output(detail)
                return 0
            formatter.text(f"{args.module_id}: {len(entries)} entr{'y' if len(entries) == 1 else 'ies'}")
            for entry in entries:
                chosen = " <- resolved" if winner is not None and entry.added_at == winner.added_at else ""
                formatter.text(f"  #{entry.added_at} {entry.source.key} (v{entry.module.version}){chosen}")
            if conflict_message:
                formatter.text(f"  unresolved: {conflict_message}")
            return 0

        conflicting = registry.get_conflicting_ids()
        payload: Dict[str, Any] = {
            "totalModules": registry.size(),
            "conflictCount": len(conflicting),
        }
        if args.conflicts:
            conflict_rows: List[Dict[str, Any]] = []
            for module_id in conflicting:
                entries = registry.get_conflicts(module_id) or []
                conflict_rows.append({"id": module_id, "sources": [e.source.key for e in entries]})
            payload["conflicts"] = conflict_rows
        if args.sources:
            payload["sources"] = registry.get_source_summary()

        if formatter.json_mode:
            formatter.json_output(payload)
            return 0

        formatter.text(f"Modules: {registry.size()}")
        formatter.text(f"Conflicting ids: {len(conflicting)}")
        for row in payload.get("conflicts", []):
            formatter.text(f"  {row['id']}")
            for source in row["sources"]:
                formatter.text(f"    - {source}")
        if "sources" in payload:
            formatter.text("Sources:")
            for source, count in payload["sources"].items():
                formatter.text_kv(source, count)
        return 0
    except InstructKitError as e:
        formatter.error(e, error_code="inspect_error")
        return 1

