"""Standard module library location."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from instructkit.core.constants import STANDARD_LIBRARY_ENV
from instructkit.core.model import ModuleSource, SourceType
from instructkit.data import get_data_path


class StandardLibrary:
    """Resolves the standard library root.

    Priority: explicit path > ``INSTRUCTKIT_STANDARD_LIBRARY`` > bundled
    ``instructkit.data/modules``.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self._path: Optional[Path] = Path(path) if path is not None else None

    @property
    def path(self) -> Path:
        if self._path is not None:
            return self._path.resolve()
        env_path = os.environ.get(STANDARD_LIBRARY_ENV, "").strip()
        if env_path:
            return Path(env_path).expanduser().resolve()
        return get_data_path("modules")

    def exists(self) -> bool:
        return self.path.is_dir()

    def source(self) -> ModuleSource:
        return ModuleSource(type=SourceType.STANDARD, path=str(self.path))


__all__ = ["StandardLibrary"]
