"""Module discovery across the standard library and local roots."""
from __future__ import annotations

from .module_discovery import DiscoveryResult, ModuleDiscovery, find_module_files
from .standard_library import StandardLibrary

__all__ = ["DiscoveryResult", "ModuleDiscovery", "StandardLibrary", "find_module_files"]
