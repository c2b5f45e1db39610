"""Persona file parsing: YAML text -> :class:`Persona`.

Schema 2.0 lists ``modules`` as bare ids or ``{group, ids}`` mappings.
Schema 1.0 files use ``moduleGroups: [{groupName, modules}]``; each legacy
group becomes a :class:`ModuleGroup`.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Optional

import yaml

from instructkit.core.exceptions import PersonaLoadError
from instructkit.core.model import ModuleEntry, ModuleGroup, Persona
from instructkit.core.schemas import PERSONA_SCHEMA, validate_payload_safe
from instructkit.core.utils.io import read_text
from instructkit.core.validation import validate_persona


def _entries(data: Mapping[str, Any]) -> List[ModuleEntry]:
    entries: List[ModuleEntry] = []
    if "modules" in data:
        for item in data["modules"]:
            if isinstance(item, str):
                entries.append(item)
            else:
                entries.append(ModuleGroup(ids=tuple(item["ids"]), group_name=item.get("group")))
        return entries
    for legacy in data.get("moduleGroups", ()):
        entries.append(ModuleGroup(ids=tuple(legacy["modules"]), group_name=legacy.get("groupName")))
    return entries


def persona_from_dict(data: Mapping[str, Any], *, file_path: Optional[Path] = None) -> Persona:
    return Persona(
        name=data["name"],
        version=data["version"],
        schema_version=str(data["schemaVersion"]),
        description=data["description"],
        semantic=data["semantic"],
        identity=data.get("identity") or "",
        attribution=bool(data.get("attribution", False)),
        modules=tuple(_entries(data)),
        file_path=file_path,
    )


def parse_persona(content: str, *, file_path: Optional[Path] = None, validate: bool = True) -> Persona:
    """Parse persona YAML text.

    Raises:
        PersonaLoadError: Invalid YAML, schema violations or (with
            ``validate``) structural validation errors.
    """
    where = f" ({file_path})" if file_path else ""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise PersonaLoadError(f"Failed to parse persona{where}: invalid YAML: {exc}", file_path=file_path) from exc

    if not isinstance(data, dict):
        raise PersonaLoadError(
            f"Failed to parse persona{where}: expected a mapping at the document root",
            file_path=file_path,
        )

    schema_errors = validate_payload_safe(data, PERSONA_SCHEMA)
    if schema_errors:
        raise PersonaLoadError(
            f"Failed to parse persona{where}: " + "; ".join(schema_errors),
            file_path=file_path,
            context={"schema_errors": schema_errors},
        )

    persona = persona_from_dict(data, file_path=file_path)

    if validate:
        result = validate_persona(persona)
        if not result.valid:
            messages = "\n".join(f"  - {issue}" for issue in result.errors)
            raise PersonaLoadError(
                f"Persona validation failed for '{persona.name}'{where}:\n{messages}",
                file_path=file_path,
                context={"issues": [issue.to_dict() for issue in result.errors]},
            )
    return persona


def load_persona(path: Path | str, *, validate: bool = True) -> Persona:
    file_path = Path(path)
    try:
        raw = read_text(file_path)
    except (OSError, UnicodeDecodeError) as exc:
        raise PersonaLoadError(f"Failed to read persona file {file_path}: {exc}", file_path=file_path) from exc
    return parse_persona(raw, file_path=file_path, validate=validate)


__all__ = ["load_persona", "parse_persona", "persona_from_dict"]
