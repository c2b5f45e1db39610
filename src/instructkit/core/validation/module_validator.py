"""Structural validation of module records."""
from __future__ import annotations

from typing import List

from instructkit.core.constants import (
    MAX_COGNITIVE_LEVEL,
    MEDIA_TYPE_LANGUAGES,
    MIN_COGNITIVE_LEVEL,
    MODULE_ID_REGEX,
    MODULE_SCHEMA_VERSION,
    SEMVER_REGEX,
    VALID_TIERS,
)
from instructkit.core.model import (
    COMPONENTS_KEY,
    SHORTHAND_KEYS,
    DataComponent,
    InstructionComponent,
    KnowledgeComponent,
    Module,
)

from .result import ValidationIssue, ValidationResult

SECTION_IDENTITY = "module identity"
SECTION_METADATA = "module metadata"
SECTION_CONTENT = "module content"


def is_valid_module_id(module_id: str) -> bool:
    return bool(MODULE_ID_REGEX.match(module_id or ""))


def _validate_id(module: Module, errors: List[ValidationIssue]) -> None:
    if is_valid_module_id(module.id):
        return
    tier = (module.id or "").split("/", 1)[0]
    if tier and tier not in VALID_TIERS and "/" in module.id:
        message = f"Invalid tier '{tier}' in module ID {module.id}, expected one of: {', '.join(VALID_TIERS)}"
    else:
        message = f"Invalid module ID format: {module.id}"
    errors.append(ValidationIssue("id", message, SECTION_IDENTITY))


def _validate_metadata(module: Module, errors: List[ValidationIssue]) -> None:
    meta = module.metadata
    for name in ("name", "description", "semantic"):
        if not str(getattr(meta, name) or "").strip():
            errors.append(
                ValidationIssue(f"metadata.{name}", f"Missing required field: metadata.{name}", SECTION_METADATA)
            )

    for i, tag in enumerate(meta.tags):
        if tag != tag.lower():
            errors.append(
                ValidationIssue(f"metadata.tags[{i}]", f"Tag must be lowercase: {tag}", SECTION_METADATA)
            )

    if meta.replaced_by:
        if not meta.deprecated:
            errors.append(
                ValidationIssue("metadata.replacedBy", "replacedBy requires deprecated: true", SECTION_METADATA)
            )
        if not is_valid_module_id(meta.replaced_by):
            errors.append(
                ValidationIssue(
                    "metadata.replacedBy",
                    f"replacedBy must be a valid module ID: {meta.replaced_by}",
                    SECTION_METADATA,
                )
            )


def _validate_content(
    module: Module,
    errors: List[ValidationIssue],
    warnings: List[ValidationIssue],
) -> None:
    declared = module.declared_content_keys
    shorthand = [key for key in declared if key in SHORTHAND_KEYS]

    if COMPONENTS_KEY in declared and shorthand:
        errors.append(
            ValidationIssue(
                COMPONENTS_KEY,
                "Module cannot declare both a components list and shorthand properties "
                f"({', '.join(shorthand)})",
                SECTION_CONTENT,
            )
        )
        return
    if len(shorthand) > 1:
        errors.append(
            ValidationIssue(
                shorthand[1],
                f"Module declares more than one shorthand component: {', '.join(shorthand)}",
                SECTION_CONTENT,
            )
        )
        return
    if module.content is None:
        errors.append(ValidationIssue(COMPONENTS_KEY, "Module must have at least one component", SECTION_CONTENT))
        return

    multi = COMPONENTS_KEY in declared
    for i, component in enumerate(module.components):
        prefix = f"{COMPONENTS_KEY}[{i}]" if multi else component.type.value
        if isinstance(component, (InstructionComponent, KnowledgeComponent)):
            if not component.goal.strip():
                errors.append(
                    ValidationIssue(f"{prefix}.goal", f"{component.type.value} component requires a goal", SECTION_CONTENT)
                )
        elif isinstance(component, DataComponent):
            media_type = component.data.media_type
            if media_type.lower() not in MEDIA_TYPE_LANGUAGES:
                warnings.append(
                    ValidationIssue(
                        f"{prefix}.mediaType",
                        f"Unknown mediaType '{media_type}'; data will render as an untagged code block",
                        SECTION_CONTENT,
                    )
                )
            if not component.data.value.strip():
                warnings.append(ValidationIssue(f"{prefix}.value", "Data value is empty", SECTION_CONTENT))


def validate_module(module: Module) -> ValidationResult:
    """Validate a module record.

    Covers identity (tier-qualified id, schema version, SemVer), required
    metadata, capability and tag rules, cognitive level range and the body
    rules for shorthand and multi-component content.
    """
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []

    _validate_id(module, errors)

    if module.schema_version != MODULE_SCHEMA_VERSION:
        errors.append(
            ValidationIssue(
                "schemaVersion",
                f"Invalid schema version: {module.schema_version}, expected '{MODULE_SCHEMA_VERSION}'",
                SECTION_IDENTITY,
            )
        )

    if not SEMVER_REGEX.match(module.version or ""):
        errors.append(
            ValidationIssue(
                "version",
                f"Invalid version format: {module.version}, expected SemVer (e.g., 1.0.0)",
                SECTION_IDENTITY,
            )
        )

    if not module.capabilities:
        errors.append(ValidationIssue("capabilities", "Module must have at least one capability", SECTION_IDENTITY))
    for i, capability in enumerate(module.capabilities):
        if not capability.strip():
            errors.append(ValidationIssue(f"capabilities[{i}]", "Capability must not be blank", SECTION_IDENTITY))

    if module.cognitive_level is not None and not (
        MIN_COGNITIVE_LEVEL <= module.cognitive_level <= MAX_COGNITIVE_LEVEL
    ):
        errors.append(
            ValidationIssue(
                "cognitiveLevel",
                f"Invalid cognitiveLevel: {module.cognitive_level}, "
                f"must be {MIN_COGNITIVE_LEVEL}-{MAX_COGNITIVE_LEVEL}",
                SECTION_IDENTITY,
            )
        )

    _validate_metadata(module, errors)
    _validate_content(module, errors, warnings)

    return ValidationResult(errors=errors, warnings=warnings)


__all__ = ["validate_module", "is_valid_module_id"]
