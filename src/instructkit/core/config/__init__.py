"""Module source configuration."""
from __future__ import annotations

from .modules_config import LocalModulePath, ModulesConfig, load_modules_config

__all__ = ["LocalModulePath", "ModulesConfig", "load_modules_config"]
