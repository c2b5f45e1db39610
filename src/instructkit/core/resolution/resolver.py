"""Persona reference resolution.

Maps a persona's ordered module references onto a resolved registry view.
Everything here is pure: the only registry interaction is read-only
conflict resolution.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

from instructkit.core.model import (
    ConflictStrategy,
    Module,
    ModuleEntry,
    ModuleGroup,
    Persona,
    RegistryEntry,
)
from instructkit.core.registry import ConflictAwareRegistry
from instructkit.core.validation import ValidationIssue, ValidationResult

logger = logging.getLogger(__name__)

ModuleView = Mapping[str, Module]
StrategyLike = Union[ConflictStrategy, str, None]
StrategySelector = Union[StrategyLike, Callable[[str], StrategyLike]]


@dataclass
class ModuleResolutionResult:
    """Outcome of resolving persona references.

    Attributes:
        modules: Found modules in persona order
        warnings: Deprecation notices, one per deprecated module
        missing_modules: Referenced ids absent from the view, in persona order
    """

    modules: List[Module] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    missing_modules: List[str] = field(default_factory=list)


def iter_entry_ids(entries: Iterable[ModuleEntry]) -> Iterable[str]:
    """Yield referenced ids in document order: entries, then ids within a group."""
    for entry in entries:
        if isinstance(entry, ModuleGroup):
            yield from entry.ids
        else:
            yield entry


def deprecation_warning(module: Module) -> Optional[str]:
    meta = module.metadata
    if not meta.deprecated:
        return None
    if meta.replaced_by:
        return (
            f"Module '{module.id}' is deprecated and has been replaced by "
            f"'{meta.replaced_by}'. Please update your persona file."
        )
    return f"Module '{module.id}' is deprecated. This module may be removed in a future version."


def resolve_modules(entries: Iterable[ModuleEntry], view: ModuleView) -> ModuleResolutionResult:
    """Resolve ``entries`` against ``view`` in persona order.

    Missing ids are collected rather than raised; callers decide whether a
    missing module is fatal.
    """
    result = ModuleResolutionResult()
    for module_id in iter_entry_ids(entries):
        module = view.get(module_id)
        if module is None:
            result.missing_modules.append(module_id)
            continue
        result.modules.append(module)
        warning = deprecation_warning(module)
        if warning:
            result.warnings.append(warning)
    return result


def validate_module_references(persona: Persona, view: ModuleView) -> ValidationResult:
    """Check that every id the persona references exists in ``view``."""
    errors: List[ValidationIssue] = []
    for module_id in persona.module_ids():
        if module_id not in view:
            errors.append(
                ValidationIssue(
                    path="modules",
                    message=f"Module '{module_id}' referenced in persona but not found in registry",
                    section="module references",
                )
            )
    return ValidationResult(errors=errors)


def create_module_view(modules: Iterable[Module]) -> Dict[str, Module]:
    """Index modules by id; a later module with the same id replaces an earlier one."""
    view: Dict[str, Module] = {}
    for module in modules:
        view[module.id] = module
    return view


def _strategy_for(selector: StrategySelector, module_id: str) -> StrategyLike:
    if callable(selector) and not isinstance(selector, (str, ConflictStrategy)):
        return selector(module_id)
    return selector


def resolve_persona_entries(
    persona: Persona,
    registry: ConflictAwareRegistry,
    strategy: StrategySelector = None,
) -> Dict[str, RegistryEntry]:
    """Resolve only the ids ``persona`` references, keeping the winning entries.

    ``strategy`` is either one strategy for every id or a callable returning
    the strategy for a given id.

    Raises:
        ConflictError: A referenced id conflicts under the ``error`` strategy.
    """
    resolved: Dict[str, RegistryEntry] = {}
    for module_id in persona.module_ids():
        if module_id in resolved:
            continue
        entry = registry.resolve_entry(module_id, _strategy_for(strategy, module_id))
        if entry is not None:
            resolved[module_id] = entry
    return resolved


def resolve_persona_modules(
    persona: Persona,
    registry: ConflictAwareRegistry,
    strategy: StrategySelector = None,
) -> ModuleResolutionResult:
    """Convenience wrapper: resolve referenced ids, then resolve the persona."""
    entries = resolve_persona_entries(persona, registry, strategy)
    view = {module_id: entry.module for module_id, entry in entries.items()}
    result = resolve_modules(persona.modules, view)
    if result.missing_modules:
        logger.debug("Persona %s references missing modules: %s", persona.name, result.missing_modules)
    return result


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
