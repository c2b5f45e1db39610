"""Test helper modules for the InstructKit test suite.

- factories: In-memory module/persona records and module file payloads
- io_utils: Writing module, persona and config files under a test directory
"""
from __future__ import annotations

from helpers.factories import make_module, make_persona, module_dict, persona_dict
from helpers.io_utils import write_config, write_module_file, write_persona_file, write_yaml

__all__ = [
    "make_module",
    "make_persona",
    "module_dict",
    "persona_dict",
    "write_config",
    "write_module_file",
    "write_persona_file",
    "write_yaml",
]
