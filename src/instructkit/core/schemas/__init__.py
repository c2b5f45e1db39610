"""JSON Schema loading and validation for module, persona and config files."""
from __future__ import annotations

from .validation import (
    SchemaValidationError,
    load_schema,
    validate_payload,
    validate_payload_safe,
)

MODULE_SCHEMA = "module.schema.yaml"
PERSONA_SCHEMA = "persona.schema.yaml"
MODULES_CONFIG_SCHEMA = "modules-config.schema.yaml"

__all__ = [
    "MODULE_SCHEMA",
    "PERSONA_SCHEMA",
    "MODULES_CONFIG_SCHEMA",
    "load_schema",
    "validate_payload",
    "validate_payload_safe",
    "SchemaValidationError",
]
