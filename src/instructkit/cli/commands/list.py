"""
InstructKit list command.

SUMMARY: List available modules
"""

from __future__ import annotations

import argparse
import sys

from instructkit.cli import (
    OutputFormatter,
    add_json_flag,
    add_standard_flags,
    add_tier_flag,
    discover_from_args,
    module_summary,
    representative_modules,
)
from instructkit.core.exceptions import InstructKitError

SUMMARY = "List available modules"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_tier_flag(parser)
    add_standard_flags(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        _, discovered = discover_from_args(args)
        rows = representative_modules(discovered, tier=args.tier)

        formatter.warnings(discovered.warnings)
        if formatter.json_mode:
            formatter.json_output(
                {
                    "modules": [module_summary(module, entries) for module, entries in rows],
                    "count": len(rows),
                    "warnings": discovered.warnings,
                }
            )
            return 0

        if not rows:
            formatter.text("No modules found.")
            return 0
        for module, entries in rows:
            marker = f" [{len(entries)} sources]" if len(entries) > 1 else ""
            deprecated = " (deprecated)" if module.metadata.deprecated else ""
            formatter.text(f"{module.id}  {module.metadata.name}{deprecated}{marker}")
            formatter.text_kv("description", module.metadata.description, prefix="    ")
        formatter.text(f"\n{len(rows)} module(s)")
        return 0
    except InstructKitError as e:
        formatter.error(e, error_code="list_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
