"""Build reports: content-addressed provenance for one build.

Digests are lowercase hex SHA-256 and depend on content only; the build
timestamp is the single non-deterministic field and never feeds a digest.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from instructkit import __version__
from instructkit.core.constants import REPORT_FILE_SUFFIX, REPORT_SCHEMA_VERSION
from instructkit.core.model import Module, ModuleSource, Persona
from instructkit.core.utils.io import dumps_canonical
from instructkit.core.utils.time import utc_timestamp


@dataclass(frozen=True)
class BuildReportModule:
    id: str
    name: str
    version: str
    source: str
    digest: str
    deprecated: bool = False
    replaced_by: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "source": self.source,
            "digest": self.digest,
            "deprecated": self.deprecated,
        }
        if self.replaced_by:
            result["replacedBy"] = self.replaced_by
        return result


@dataclass(frozen=True)
class BuildReportGroup:
    group_name: str
    modules: List[BuildReportModule] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "groupName": self.group_name,
            "modules": [m.to_dict() for m in self.modules],
        }


@dataclass(frozen=True)
class BuildReport:
    persona_name: str
    schema_version: str
    tool_version: str
    persona_digest: str
    build_timestamp: str
    module_groups: List[BuildReportGroup] = field(default_factory=list)

    def module_entries(self) -> List[BuildReportModule]:
        return [m for group in self.module_groups for m in group.modules]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "personaName": self.persona_name,
            "schemaVersion": self.schema_version,
            "toolVersion": self.tool_version,
            "personaDigest": self.persona_digest,
            "buildTimestamp": self.build_timestamp,
            "moduleGroups": [g.to_dict() for g in self.module_groups],
        }


def _sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def generate_module_digest(content: str) -> str:
    """SHA-256 hex digest of a module's raw source text."""
    return _sha256_hex(content)


def generate_persona_digest(persona: Persona) -> str:
    """SHA-256 hex digest of the persona's content-bearing fields.

    Covers name, description, semantic, identity and the module entries in
    their authored form; version and attribution do not affect the digest.
    """
    payload = {
        "name": persona.name,
        "description": persona.description,
        "semantic": persona.semantic,
        "identity": persona.identity,
        "modules": persona.entries_to_data(),
    }
    return _sha256_hex(dumps_canonical(payload))


def _source_label(source: ModuleSource | str | None) -> str:
    if source is None:
        return ""
    if isinstance(source, ModuleSource):
        return source.key
    return str(source)


def generate_build_report(
    persona: Persona,
    modules: Iterable[Module],
    module_contents: Optional[Mapping[str, str]] = None,
    *,
    sources: Optional[Mapping[str, ModuleSource | str]] = None,
    tool_version: Optional[str] = None,
    now: Optional[datetime] = None,
) -> BuildReport:
    """Build the provenance report for ``persona``.

    Args:
        persona: The persona that was rendered
        modules: Resolved modules; matched to persona references by id
        module_contents: Raw source text per module id; a module without
            text gets an empty digest
        sources: Winning source per module id
        tool_version: Overrides the package version
        now: Overrides the build time
    """
    by_id: Dict[str, Module] = {}
    for module in modules:
        by_id.setdefault(module.id, module)
    contents = module_contents or {}
    source_map = sources or {}

    groups: List[BuildReportGroup] = []
    for group in persona.groups():
        entries: List[BuildReportModule] = []
        for module_id in group.ids:
            module = by_id.get(module_id)
            if module is None:
                continue
            raw = contents.get(module_id)
            entries.append(
                BuildReportModule(
                    id=module.id,
                    name=module.metadata.name,
                    version=module.version,
                    source=_source_label(source_map.get(module_id)),
                    digest=generate_module_digest(raw) if raw else "",
                    deprecated=module.metadata.deprecated,
                    replaced_by=module.metadata.replaced_by,
                )
            )
        groups.append(BuildReportGroup(group_name=group.group_name or "", modules=entries))

    return BuildReport(
        persona_name=persona.name,
        schema_version=REPORT_SCHEMA_VERSION,
        tool_version=tool_version or __version__,
        persona_digest=generate_persona_digest(persona),
        build_timestamp=utc_timestamp(now),
        module_groups=groups,
    )


def report_path_for(output_path: Path | str) -> Path:
    """``dist/persona.md`` -> ``dist/persona.build.json``."""
    path = Path(output_path)
    return path.with_name(path.stem + REPORT_FILE_SUFFIX)


__all__ = [
    "BuildReport",
    "BuildReportGroup",
    "BuildReportModule",
    "generate_build_report",
    "generate_module_digest",
    "generate_persona_digest",
    "report_path_for",
]
