"""
InstructKit validate command.

SUMMARY: Validate module and persona files
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from instructkit.cli import (
    OutputFormatter,
    add_json_flag,
    add_standard_flags,
    discover_from_args,
)
from instructkit.core.constants import MODULE_FILE_SUFFIXES, PERSONA_FILE_SUFFIXES
from instructkit.core.exceptions import InstructKitError, ModuleLoadError, PersonaLoadError
from instructkit.core.model import Module
from instructkit.core.parsing import load_module, load_persona
from instructkit.core.resolution import ModuleView, validate_module_references
from instructkit.core.validation import ValidationIssue, ValidationResult, validate_module, validate_persona

SUMMARY = "Validate module and persona files"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Files or directories to validate (default: current directory)",
    )
    parser.add_argument(
        "--references",
        action="store_true",
        help="Also check that personas only reference discoverable modules",
    )
    add_standard_flags(parser)
    add_json_flag(parser)


def collect_files(paths: List[str]) -> List[Path]:
    """Expand directories into module and persona files, keeping input order."""
    suffixes = MODULE_FILE_SUFFIXES + PERSONA_FILE_SUFFIXES
    files: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob("*") if p.is_file() and p.name.endswith(suffixes)))
        elif path.exists():
            files.append(path)
        else:
            raise FileNotFoundError(f"Path not found: {path}")
    return files


def _load_error(exc: InstructKitError) -> ValidationResult:
    issues = [
        ValidationIssue(path=str(issue.get("path", "")), message=str(issue.get("message", "")), section=issue.get("section"))
        for issue in exc.context.get("issues", [])
    ]
    return ValidationResult(errors=issues or [ValidationIssue(path="", message=str(exc))])


def validate_file(path: Path, view: Optional[ModuleView] = None) -> ValidationResult:
    if path.name.endswith(PERSONA_FILE_SUFFIXES):
        try:
            persona = load_persona(path, validate=False)
        except PersonaLoadError as exc:
            return _load_error(exc)
        result = validate_persona(persona)
        if view is not None:
            result = result.merge(validate_module_references(persona, view))
        return result

    try:
        loaded = load_module(path, validate=False)
    except ModuleLoadError as exc:
        return _load_error(exc)
    return validate_module(loaded.module)


def _module_view(args: argparse.Namespace) -> Dict[str, Module]:
    _, discovered = discover_from_args(args)
    return {
        module_id: entries[0].module
        for module_id, entries in discovered.registry.get_all_entries().items()
    }


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        files = collect_files(list(args.paths))
        view = _module_view(args) if args.references else None
    except (InstructKitError, FileNotFoundError) as e:
        formatter.error(e, error_code="validate_error")
        return 1

    reports: List[Dict[str, Any]] = []
    invalid = 0
    for path in files:
        result = validate_file(path, view)
        if not result.valid:
            invalid += 1
        reports.append({"file": str(path), **result.to_dict()})

        if not formatter.json_mode:
            status = "OK" if result.valid else "FAIL"
            formatter.text(f"[{status}] {path}")
            for issue in result.errors:
                formatter.text(f"    error: {issue}")
            for issue in result.warnings:
                formatter.text(f"    warning: {issue}")

    if formatter.json_mode:
        formatter.json_output(
            {"valid": invalid == 0, "files": reports, "checked": len(files), "invalid": invalid}
        )
    else:
        formatter.text(f"\n{len(files)} file(s) checked, {invalid} invalid")
    return 0 if invalid == 0 else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
