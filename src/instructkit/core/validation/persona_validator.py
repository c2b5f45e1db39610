"""Structural validation of persona records."""
from __future__ import annotations

from typing import List, Set

from instructkit.core.constants import PERSONA_SCHEMA_VERSIONS, SEMVER_REGEX
from instructkit.core.model import ModuleGroup, Persona

from .module_validator import is_valid_module_id
from .result import ValidationIssue, ValidationResult

SECTION_PERSONA = "persona"


def validate_persona(persona: Persona) -> ValidationResult:
    """Validate a persona record.

    A module id may appear only once across all entries and groups; a repeat
    is a validation error rather than a registry conflict.
    """
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []

    if persona.schema_version not in PERSONA_SCHEMA_VERSIONS:
        expected = " or ".join(f"'{v}'" for v in PERSONA_SCHEMA_VERSIONS)
        errors.append(
            ValidationIssue(
                "schemaVersion",
                f"Invalid schema version: {persona.schema_version}, expected {expected}",
                SECTION_PERSONA,
            )
        )

    if not SEMVER_REGEX.match(persona.version or ""):
        errors.append(
            ValidationIssue("version", f"Invalid version format: {persona.version}, expected SemVer", SECTION_PERSONA)
        )

    for name in ("name", "description", "semantic"):
        if not str(getattr(persona, name) or "").strip():
            errors.append(ValidationIssue(name, f"Missing required field: {name}", SECTION_PERSONA))

    if not persona.modules:
        errors.append(ValidationIssue("modules", "Persona must reference at least one module", SECTION_PERSONA))
        return ValidationResult(errors=errors, warnings=warnings)

    seen: Set[str] = set()

    def _check_id(module_id: str, path: str, in_group: bool) -> None:
        if module_id in seen:
            where = " across groups" if in_group else ""
            errors.append(ValidationIssue(path, f"Duplicate module ID found{where}: {module_id}", SECTION_PERSONA))
        elif not is_valid_module_id(module_id):
            warnings.append(
                ValidationIssue(path, f"Module ID does not match the tier/segment format: {module_id}", SECTION_PERSONA)
            )
        seen.add(module_id)

    for i, entry in enumerate(persona.modules):
        if isinstance(entry, ModuleGroup):
            path = f"modules[{i}].ids"
            if not entry.ids:
                label = f" '{entry.group_name}'" if entry.group_name else ""
                errors.append(
                    ValidationIssue(path, f"Module group {i}{label} must have a non-empty 'ids' list", SECTION_PERSONA)
                )
                continue
            for module_id in entry.ids:
                _check_id(module_id, path, in_group=True)
        else:
            _check_id(entry, f"modules[{i}]", in_group=False)

    return ValidationResult(errors=errors, warnings=warnings)


__all__ = ["validate_persona"]
