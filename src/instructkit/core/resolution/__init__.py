"""Persona-to-module resolution."""
from __future__ import annotations

from .resolver import (
    ModuleResolutionResult,
    ModuleView,
    StrategySelector,
    create_module_view,
    deprecation_warning,
    iter_entry_ids,
    resolve_modules,
    resolve_persona_entries,
    resolve_persona_modules,
    validate_module_references,
)

__all__ = [
    "ModuleResolutionResult",
    "ModuleView",
    "StrategySelector",
    "create_module_view",
    "deprecation_warning",
    "iter_entry_ids",
    "resolve_modules",
    "resolve_persona_entries",
    "resolve_persona_modules",
    "validate_module_references",
]
