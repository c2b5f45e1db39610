"""Record types shared by the composition pipeline.

All records are frozen dataclasses: created by the parsers, consumed
read-only by the registry, resolver, renderer and report generator.
"""
from __future__ import annotations

from .module import (
    COMPONENTS_KEY,
    SHORTHAND_KEYS,
    Component,
    ComponentType,
    DataComponent,
    DataDirective,
    Example,
    InstructionComponent,
    KnowledgeComponent,
    Module,
    ModuleContent,
    ModuleMetadata,
    MultiComponent,
    iter_components,
)
from .persona import ModuleEntry, ModuleGroup, Persona
from .source import (
    ConflictStrategy,
    ModuleSource,
    RegistryEntry,
    SourceType,
    parse_conflict_strategy,
    parse_source_type,
)

__all__ = [
    "COMPONENTS_KEY",
    "SHORTHAND_KEYS",
    "Component",
    "ComponentType",
    "DataComponent",
    "DataDirective",
    "Example",
    "InstructionComponent",
    "KnowledgeComponent",
    "Module",
    "ModuleContent",
    "ModuleMetadata",
    "MultiComponent",
    "iter_components",
    "ModuleEntry",
    "ModuleGroup",
    "Persona",
    "ConflictStrategy",
    "ModuleSource",
    "RegistryEntry",
    "SourceType",
    "parse_conflict_strategy",
    "parse_source_type",
]
