"""Validators producing typed error and warning lists."""
from __future__ import annotations

from .module_validator import is_valid_module_id, validate_module
from .persona_validator import validate_persona
from .result import ValidationIssue, ValidationResult

__all__ = [
    "ValidationIssue",
    "ValidationResult",
    "is_valid_module_id",
    "validate_module",
    "validate_persona",
]
