"""
InstructKit CLI package.

Commands live in ``cli/commands/*.py`` and are registered automatically.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._args import (
    add_config_flag,
    add_conflict_strategy_flag,
    add_json_flag,
    add_standard_flags,
    add_tier_flag,
)
from ._output import OutputFormatter
from ._utils import (
    build_options_from_args,
    discover_from_args,
    module_summary,
    representative_modules,
)

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_config_flag",
    "add_conflict_strategy_flag",
    "add_json_flag",
    "add_standard_flags",
    "add_tier_flag",
    # Utilities
    "build_options_from_args",
    "discover_from_args",
    "module_summary",
    "representative_modules",
]
