"""YAML parsing of module and persona files into records."""
from __future__ import annotations

from .module_parser import (
    LoadedModule,
    build_component,
    load_module,
    module_from_dict,
    parse_module,
)
from .persona_parser import load_persona, parse_persona, persona_from_dict

__all__ = [
    "LoadedModule",
    "build_component",
    "load_module",
    "module_from_dict",
    "parse_module",
    "load_persona",
    "parse_persona",
    "persona_from_dict",
]
