"""
InstructKit search command.

SUMMARY: Search modules by name, description or tag
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
from instructkit.core.model import Module

SUMMARY = "Search modules by name, description or tag"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("query", help="Case-insensitive text to look for")
    add_tier_flag(parser)
    add_standard_flags(parser)
    add_json_flag(parser)


def matches(module: Module, query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    meta = module.metadata
    haystacks = [meta.name, meta.description, *meta.tags]
    return any(needle in text.lower() for text in haystacks)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        _, discovered = discover_from_args(args)
        rows = [
            (module, entries)
            for module, entries in representative_modules(discovered, tier=args.tier)
            if matches(module, args.query)
        ]

        formatter.warnings(discovered.warnings)
        if formatter.json_mode:
            formatter.json_output(
                {
                    "query": args.query,
                    "modules": [module_summary(module, entries) for module, entries in rows],
                    "count": len(rows),
                }
            )
            return 0

        if not rows:
            formatter.text(f"No modules found matching '{args.query}'.")
            return 0
        for module, _entries in rows:
            tags = f" [{', '.join(module.metadata.tags)}]" if module.metadata.tags else ""
            formatter.text(f"{module.id}  {module.metadata.name}{tags}")
            formatter.text_kv("description", module.metadata.description, prefix="    ")
        formatter.text(f"\n{len(rows)} match(es) for '{args.query}'")
        return 0
    except InstructKitError as e:
        formatter.error(e, error_code="search_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
