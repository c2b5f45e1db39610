"""Module file parsing: YAML text -> :class:`Module`.

Parsing happens in three steps: YAML decoding (``safe_load`` only), a JSON
Schema shape check, then record construction. With ``validate=True`` the
structural validator runs last and any error rejects the file.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from instructkit.core.exceptions import ModuleLoadError
from instructkit.core.model import (
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
)
from instructkit.core.schemas import MODULE_SCHEMA, validate_payload_safe
from instructkit.core.utils.io import read_text
from instructkit.core.validation import validate_module

logger = logging.getLogger(__name__)

_METADATA_KEYS = ("name", "description", "semantic", "tags", "deprecated", "replacedBy")
_DATA_KEYS = ("goal", "mediaType", "value")


@dataclass(frozen=True)
class LoadedModule:
    """A parsed module plus the exact text it came from (digest input)."""

    module: Module
    raw: str
    file_path: Optional[Path] = None


def _examples(raw: Any) -> Tuple[Example, ...]:
    return tuple(
        Example(
            title=item["title"],
            rationale=item["rationale"],
            snippet=item["snippet"],
            language=item.get("language"),
        )
        for item in raw or ()
    )


def _strings(raw: Any) -> Tuple[str, ...]:
    return tuple(raw or ())


def build_component(kind: str, body: Mapping[str, Any]) -> Component:
    """Construct one component from its directive mapping.

    Raises:
        ValueError: Unknown component type, unknown directive or a broken invariant.
    """
    component_type = ComponentType(kind)
    if component_type is ComponentType.DATA:
        allowed: Tuple[str, ...] = _DATA_KEYS
    elif component_type is ComponentType.INSTRUCTION:
        allowed = InstructionComponent.DIRECTIVES
    else:
        allowed = KnowledgeComponent.DIRECTIVES

    unknown = sorted(set(body) - set(allowed) - {"type"})
    if unknown:
        raise ValueError(f"Unknown directive(s) for {kind} component: {', '.join(unknown)}")

    if component_type is ComponentType.DATA:
        return DataComponent(
            data=DataDirective(media_type=body.get("mediaType", ""), value=body.get("value", "")),
            goal=body.get("goal"),
        )
    if component_type is ComponentType.INSTRUCTION:
        return InstructionComponent(
            goal=body.get("goal", ""),
            principles=_strings(body.get("principles")),
            constraints=_strings(body.get("constraints")),
            process=_strings(body.get("process")),
            criteria=_strings(body.get("criteria")),
            examples=_examples(body.get("examples")),
        )
    return KnowledgeComponent(
        goal=body.get("goal", ""),
        principles=_strings(body.get("principles")),
        examples=_examples(body.get("examples")),
    )


def _build_content(data: Mapping[str, Any], declared: Tuple[str, ...]) -> Optional[ModuleContent]:
    # Ambiguous or empty bodies are left for the validator to report.
    if len(declared) != 1:
        return None
    key = declared[0]
    if key == COMPONENTS_KEY:
        components: List[Component] = []
        for i, item in enumerate(data[COMPONENTS_KEY]):
            try:
                components.append(build_component(item["type"], item))
            except ValueError as exc:
                raise ValueError(f"components[{i}]: {exc}") from exc
        return MultiComponent(components=tuple(components))
    try:
        return build_component(key, data[key])
    except ValueError as exc:
        raise ValueError(f"{key}: {exc}") from exc


def module_from_dict(data: Mapping[str, Any], *, file_path: Optional[Path] = None) -> Module:
    """Build a :class:`Module` from an already shape-checked mapping."""
    meta = data["metadata"]
    metadata = ModuleMetadata(
        name=meta["name"],
        description=meta["description"],
        semantic=meta["semantic"],
        tags=_strings(meta.get("tags")),
        deprecated=bool(meta.get("deprecated", False)),
        replaced_by=meta.get("replacedBy"),
        extra={k: v for k, v in meta.items() if k not in _METADATA_KEYS},
    )
    declared = tuple(k for k in (*SHORTHAND_KEYS, COMPONENTS_KEY) if k in data)
    return Module(
        id=data["id"],
        version=data["version"],
        schema_version=str(data["schemaVersion"]),
        capabilities=_strings(data.get("capabilities")),
        metadata=metadata,
        content=_build_content(data, declared),
        cognitive_level=data.get("cognitiveLevel"),
        declared_content_keys=declared,
        file_path=file_path,
    )


def parse_module(content: str, *, file_path: Optional[Path] = None, validate: bool = True) -> Module:
    """Parse module YAML text.

    Raises:
        ModuleLoadError: Invalid YAML, schema violations, broken component
            invariants, or (with ``validate``) structural validation errors.
    """
    where = f" ({file_path})" if file_path else ""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ModuleLoadError(f"Failed to parse module{where}: invalid YAML: {exc}", file_path=file_path) from exc

    if not isinstance(data, dict):
        raise ModuleLoadError(
            f"Failed to parse module{where}: expected a mapping at the document root",
            file_path=file_path,
        )

    schema_errors = validate_payload_safe(data, MODULE_SCHEMA)
    if schema_errors:
        raise ModuleLoadError(
            f"Failed to parse module{where}: " + "; ".join(schema_errors),
            file_path=file_path,
            context={"schema_errors": schema_errors},
        )

    try:
        module = module_from_dict(data, file_path=file_path)
    except ValueError as exc:
        raise ModuleLoadError(f"Failed to parse module{where}: {exc}", file_path=file_path) from exc

    if validate:
        result = validate_module(module)
        if not result.valid:
            messages = "\n".join(f"  - {issue}" for issue in result.errors)
            raise ModuleLoadError(
                f"Module validation failed for '{module.id}'{where}:\n{messages}",
                file_path=file_path,
                context={"issues": [issue.to_dict() for issue in result.errors]},
            )
        for warning in result.warnings:
            logger.warning("Module %s: %s", module.id, warning)
    return module


def load_module(path: Path | str, *, validate: bool = True) -> LoadedModule:
    """Read and parse one module file, keeping its raw text."""
    file_path = Path(path)
    try:
        raw = read_text(file_path)
    except (OSError, UnicodeDecodeError) as exc:
        raise ModuleLoadError(f"Failed to read module file {file_path}: {exc}", file_path=file_path) from exc
    module = parse_module(raw, file_path=file_path, validate=validate)
    return LoadedModule(module=module, raw=raw, file_path=file_path)


__all__ = [
    "LoadedModule",
    "build_component",
    "load_module",
    "module_from_dict",
    "parse_module",
]
