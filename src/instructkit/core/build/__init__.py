"""Build orchestration."""
from __future__ import annotations

from .orchestrator import (
    BuildOptions,
    BuildOrchestrator,
    BuildResult,
    build_persona,
    write_build_outputs,
)

__all__ = [
    "BuildOptions",
    "BuildOrchestrator",
    "BuildResult",
    "build_persona",
    "write_build_outputs",
]
