"""Build orchestration.

discover -> register -> resolve -> render -> report, with optional writing
of the Markdown document and its ``.build.json`` report.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from instructkit.core.config import ModulesConfig, load_modules_config
from instructkit.core.discovery import DiscoveryResult, ModuleDiscovery, StandardLibrary
from instructkit.core.exceptions import BuildError
from instructkit.core.model import ConflictStrategy, Module, ModuleSource, Persona, parse_conflict_strategy
from instructkit.core.parsing import load_persona
from instructkit.core.registry import ConflictAwareRegistry
from instructkit.core.rendering import BuildReport, generate_build_report, render_markdown, report_path_for
from instructkit.core.resolution import resolve_modules, resolve_persona_entries
from instructkit.core.utils.io import write_json, write_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildOptions:
    """Knobs for one build.

    Attributes:
        config_path: ``modules.config.yml`` location (default: cwd)
        conflict_strategy: Overrides the config's ``conflictStrategy``
        include_standard: Overrides the config's ``includeStandard``
        standard_library: Overrides the standard library location
        now: Fixed build time (reports)
    """

    config_path: Optional[Path] = None
    conflict_strategy: Optional[ConflictStrategy] = None
    include_standard: Optional[bool] = None
    standard_library: Optional[Path] = None
    now: Optional[datetime] = None


@dataclass
class BuildResult:
    markdown: str
    persona: Persona
    modules: List[Module]
    report: BuildReport
    warnings: List[str] = field(default_factory=list)
    missing_modules: List[str] = field(default_factory=list)

    def require_complete(self) -> None:
        """Raise :class:`BuildError` when the persona referenced missing modules."""
        if self.missing_modules:
            raise BuildError(
                f"Persona '{self.persona.name}' references {len(self.missing_modules)} missing module(s): "
                + ", ".join(self.missing_modules),
                context={"missing_modules": list(self.missing_modules)},
            )


class BuildOrchestrator:
    """Runs the full build for one persona file.

    A fresh registry is created for every :meth:`build` call.
    """

    def __init__(
        self,
        options: Optional[BuildOptions] = None,
        *,
        discovery: Optional[ModuleDiscovery] = None,
    ) -> None:
        self.options = options or BuildOptions()
        self.discovery = discovery or ModuleDiscovery()

    def load_config(self) -> ModulesConfig:
        return load_modules_config(self.options.config_path)

    def source_roots(self, config: ModulesConfig) -> List[Tuple[Path, ModuleSource]]:
        """Source roots in registration order: standard library, then local paths."""
        roots: List[Tuple[Path, ModuleSource]] = []
        include_standard = (
            self.options.include_standard
            if self.options.include_standard is not None
            else config.include_standard
        )
        if include_standard:
            library = StandardLibrary(self.options.standard_library)
            if library.exists():
                roots.append((library.path, library.source()))
            else:
                logger.debug("Standard library not found at %s", library.path)
        for entry in config.local_module_paths:
            roots.append((entry.path, entry.source()))
        return roots

    def discover(self, config: ModulesConfig) -> DiscoveryResult:
        default = config.effective_strategy(self.options.conflict_strategy)
        return self.discovery.discover(self.source_roots(config), default_strategy=default)

    @staticmethod
    def strategy_selector(config: ModulesConfig, registry: ConflictAwareRegistry):
        """Per-id strategy: ``onConflict`` of the latest entry's local root, else the registry default."""

        def _select(module_id: str) -> ConflictStrategy:
            conflicts = registry.get_conflicts(module_id)
            if conflicts:
                override = config.strategy_for_source(conflicts[-1].source)
                if override is not None:
                    return override
            return registry.default_strategy

        return _select

    def build(self, persona_path: Path | str) -> BuildResult:
        """Build ``persona_path``.

        Raises:
            PersonaLoadError: The persona file is unreadable or invalid.
            ConfigError: ``modules.config.yml`` is invalid.
            ConflictError: A referenced id conflicts under the ``error`` strategy.
        """
        persona = load_persona(persona_path)
        config = self.load_config()
        discovered = self.discover(config)
        registry = discovered.registry
        warnings: List[str] = list(discovered.warnings)

        select = self.strategy_selector(config, registry)
        entries = resolve_persona_entries(persona, registry, select)

        for module_id, entry in entries.items():
            conflicts = registry.get_conflicts(module_id)
            if conflicts and select(module_id) is ConflictStrategy.WARN:
                warnings.append(
                    f"Module conflict for '{module_id}': {len(conflicts)} candidates found. "
                    f"Using first entry from {entry.source.key}"
                )

        view = {module_id: entry.module for module_id, entry in entries.items()}
        resolution = resolve_modules(persona.modules, view)
        warnings.extend(resolution.warnings)
        for module_id in resolution.missing_modules:
            warnings.append(f"Module '{module_id}' referenced in persona but not found in registry")

        markdown = render_markdown(persona, resolution.modules)

        contents: Dict[str, str] = {}
        sources: Dict[str, ModuleSource] = {}
        for module_id, entry in entries.items():
            sources[module_id] = entry.source
            raw = discovered.raw_for(entry.module.file_path)
            if raw is not None:
                contents[module_id] = raw
        report = generate_build_report(
            persona,
            resolution.modules,
            contents,
            sources=sources,
            now=self.options.now,
        )

        logger.info(
            "Built persona %s: %d module(s), %d warning(s), %d missing",
            persona.name,
            len(resolution.modules),
            len(warnings),
            len(resolution.missing_modules),
        )
        return BuildResult(
            markdown=markdown,
            persona=persona,
            modules=resolution.modules,
            report=report,
            warnings=warnings,
            missing_modules=resolution.missing_modules,
        )


def write_build_outputs(result: BuildResult, output_path: Path | str) -> Tuple[Path, Path]:
    """Atomically write the document and its ``.build.json`` report."""
    output = Path(output_path)
    report_path = report_path_for(output)
    write_text(output, result.markdown)
    write_json(report_path, result.report.to_dict())
    logger.info("Wrote %s and %s", output, report_path)
    return output, report_path


def build_persona(
    persona_path: Path | str,
    *,
    config_path: Path | str | None = None,
    conflict_strategy: ConflictStrategy | str | None = None,
    include_standard: Optional[bool] = None,
) -> BuildResult:
    """One-call build with default discovery."""
    options = BuildOptions(
        config_path=Path(config_path) if config_path else None,
        conflict_strategy=parse_conflict_strategy(conflict_strategy) if conflict_strategy else None,
        include_standard=include_standard,
    )
    return BuildOrchestrator(options).build(persona_path)


__all__ = [
    "BuildOptions",
    "BuildOrchestrator",
    "BuildResult",
    "build_persona",
    "write_build_outputs",
]
