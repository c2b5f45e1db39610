"""``modules.config.yml`` loading.

The config lists project-local module directories, each with an optional
``onConflict`` strategy, plus a build-wide ``conflictStrategy`` default.
Relative paths resolve against the directory that holds the config file.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from instructkit.core.constants import DEFAULT_CONFIG_FILENAME
from instructkit.core.exceptions import ConfigError
from instructkit.core.model import ConflictStrategy, ModuleSource, SourceType, parse_conflict_strategy
from instructkit.core.schemas import MODULES_CONFIG_SCHEMA, validate_payload_safe
from instructkit.core.utils.io import read_yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalModulePath:
    """One configured local module root.

    Attributes:
        path: Absolute directory path
        on_conflict: Strategy for ids whose latest entry comes from this root
    """

    path: Path
    on_conflict: Optional[ConflictStrategy] = None

    def source(self) -> ModuleSource:
        return ModuleSource(type=SourceType.LOCAL, path=str(self.path))

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"path": str(self.path)}
        if self.on_conflict is not None:
            result["onConflict"] = self.on_conflict.value
        return result


@dataclass(frozen=True)
class ModulesConfig:
    local_module_paths: Tuple[LocalModulePath, ...] = ()
    conflict_strategy: Optional[ConflictStrategy] = None
    include_standard: bool = True
    config_path: Optional[Path] = field(default=None, compare=False)

    def strategy_for_source(self, source: ModuleSource) -> Optional[ConflictStrategy]:
        """Return the ``onConflict`` of the local root ``source`` points at, if any."""
        if source.type is not SourceType.LOCAL:
            return None
        for entry in self.local_module_paths:
            if str(entry.path) == source.path:
                return entry.on_conflict
        return None

    def effective_strategy(self, override: ConflictStrategy | str | None = None) -> ConflictStrategy:
        """Build-wide default: explicit override > config ``conflictStrategy`` > ``error``."""
        if override:
            return parse_conflict_strategy(override)
        return self.conflict_strategy or ConflictStrategy.ERROR

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "localModulePaths": [p.to_dict() for p in self.local_module_paths],
            "includeStandard": self.include_standard,
        }
        if self.conflict_strategy is not None:
            result["conflictStrategy"] = self.conflict_strategy.value
        return result


def _resolve_entry_path(raw: str, base_dir: Path) -> Path:
    candidate = Path(raw).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return candidate.resolve()


def load_modules_config(
    config_path: Path | str | None = None,
    *,
    check_paths: bool = True,
) -> ModulesConfig:
    """Load ``modules.config.yml``.

    A missing file yields an empty config; it is not an error.

    Raises:
        ConfigError: Invalid YAML, schema violations or (with
            ``check_paths``) configured directories that do not exist.
    """
    path = Path(config_path) if config_path else Path.cwd() / DEFAULT_CONFIG_FILENAME
    path = path.resolve()
    if not path.exists():
        logger.debug("No module config at %s; using defaults", path)
        return ModulesConfig(config_path=None)

    try:
        data = read_yaml(path, default={}, raise_on_error=True)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to load config: {exc}", config_path=path) from exc

    errors = validate_payload_safe(data, MODULES_CONFIG_SCHEMA)
    if errors:
        raise ConfigError(
            f"Invalid configuration: {', '.join(errors)}",
            config_path=path,
            context={"errors": errors},
        )

    base_dir = path.parent
    entries: List[LocalModulePath] = []
    for item in data.get("localModulePaths") or []:
        on_conflict = item.get("onConflict")
        entries.append(
            LocalModulePath(
                path=_resolve_entry_path(item["path"], base_dir),
                on_conflict=parse_conflict_strategy(on_conflict) if on_conflict else None,
            )
        )

    if check_paths:
        missing = [entry for entry in entries if not entry.path.is_dir()]
        if missing:
            details = ", ".join(str(entry.path) for entry in missing)
            raise ConfigError(
                f"Invalid module paths in configuration: {details}",
                config_path=path,
                context={"missing_paths": [str(entry.path) for entry in missing]},
            )

    strategy = data.get("conflictStrategy")
    return ModulesConfig(
        local_module_paths=tuple(entries),
        conflict_strategy=parse_conflict_strategy(strategy) if strategy else None,
        include_standard=bool(data.get("includeStandard", True)),
        config_path=path,
    )


__all__ = ["LocalModulePath", "ModulesConfig", "load_modules_config"]
