"""File-system discovery of module files.

Files are parsed concurrently but registered in a fixed order (standard
library first, then configured local roots in config order, files sorted by
relative path within each root) so ``warn`` and ``replace`` outcomes are the
same on every run.
"""
from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from instructkit.core.constants import MODULE_FILE_SUFFIXES
from instructkit.core.exceptions import ModuleLoadError
from instructkit.core.model import ConflictStrategy, ModuleSource
from instructkit.core.parsing import LoadedModule, load_module
from instructkit.core.registry import ConflictAwareRegistry

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


@dataclass
class DiscoveryResult:
    """Populated registry plus everything needed downstream.

    Attributes:
        registry: One registry for this build
        raw_contents: Raw module text keyed by resolved file path
        warnings: Non-fatal problems (unparseable files, id/file name mismatches)
    """

    registry: ConflictAwareRegistry
    raw_contents: Dict[Path, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def raw_for(self, file_path: Optional[Path]) -> Optional[str]:
        if file_path is None:
            return None
        return self.raw_contents.get(Path(file_path).resolve())


def find_module_files(root: Path) -> List[Path]:
    """Return module files under ``root`` sorted by relative path."""
    root = Path(root)
    if not root.is_dir():
        return []
    files = {
        p for p in root.rglob("*") if p.is_file() and p.name.endswith(MODULE_FILE_SUFFIXES)
    }
    return sorted(files, key=lambda p: p.relative_to(root).as_posix())


def _file_stem(path: Path) -> str:
    name = path.name
    for suffix in MODULE_FILE_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return path.stem


class ModuleDiscovery:
    """Loads module files from source roots into a :class:`ConflictAwareRegistry`."""

    def __init__(self, *, max_workers: int = DEFAULT_MAX_WORKERS, validate: bool = True) -> None:
        self.max_workers = max(1, max_workers)
        self.validate = validate

    def _load_all(self, files: Sequence[Path]) -> List[Tuple[Path, Optional[LoadedModule], Optional[str]]]:
        """Parse ``files`` concurrently; results keep the input order."""
        results: Dict[Path, Tuple[Optional[LoadedModule], Optional[str]]] = {}
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {executor.submit(load_module, path, validate=self.validate): path for path in files}
            for future in concurrent.futures.as_completed(futures):
                path = futures[future]
                try:
                    results[path] = (future.result(), None)
                except ModuleLoadError as exc:
                    logger.warning("Skipping module file %s: %s", path, exc)
                    results[path] = (None, f"Failed to load {path}: {exc}")
        return [(path, *results[path]) for path in files]

    def discover(
        self,
        roots: Iterable[Tuple[Path, ModuleSource]],
        *,
        registry: Optional[ConflictAwareRegistry] = None,
        default_strategy: ConflictStrategy = ConflictStrategy.ERROR,
    ) -> DiscoveryResult:
        """Discover modules under each ``(root, source)`` pair, in the given order."""
        result = DiscoveryResult(registry=registry or ConflictAwareRegistry(default_strategy))

        for root, source in roots:
            files = find_module_files(root)
            logger.debug("Found %d module file(s) under %s", len(files), root)
            for path, loaded, error in self._load_all(files):
                if loaded is None:
                    result.warnings.append(error or f"Failed to load {path}")
                    continue
                module = loaded.module
                stem = _file_stem(path)
                if module.id.rsplit("/", 1)[-1] != stem:
                    result.warnings.append(
                        f"Module '{module.id}' in {path} does not match its file name '{stem}'"
                    )
                result.raw_contents[path.resolve()] = loaded.raw
                result.registry.add(module, source)

        return result


__all__ = ["DiscoveryResult", "ModuleDiscovery", "find_module_files"]
