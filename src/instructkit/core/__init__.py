"""InstructKit core: records, registry, resolution, rendering and validation."""
from __future__ import annotations

from .exceptions import (
    BuildError,
    ConfigError,
    ConflictError,
    InstructKitError,
    ModuleLoadError,
    PersonaLoadError,
    ValidationError,
)

__all__ = [
    "BuildError",
    "ConfigError",
    "ConflictError",
    "InstructKitError",
    "ModuleLoadError",
    "PersonaLoadError",
    "ValidationError",
]
