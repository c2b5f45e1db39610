"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse

from instructkit.core.constants import DEFAULT_CONFIG_FILENAME, VALID_TIERS
from instructkit.core.model import ConflictStrategy


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_config_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        dest="config_path",
        type=str,
        default=None,
        help=f"Path to the module config file (default: ./{DEFAULT_CONFIG_FILENAME})",
    )


def add_conflict_strategy_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--conflict-strategy",
        choices=[s.value for s in ConflictStrategy],
        default=None,
        help="How to resolve module ids defined by several sources (overrides the config)",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add the module-source flags shared by every command that discovers modules."""
    add_config_flag(parser)
    parser.add_argument(
        "--no-standard",
        dest="include_standard",
        action="store_false",
        default=None,
        help="Do not load the standard module library",
    )
    parser.add_argument(
        "--standard-library",
        type=str,
        default=None,
        help="Standard library directory (overrides INSTRUCTKIT_STANDARD_LIBRARY)",
    )


def add_tier_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--tier",
        choices=list(VALID_TIERS),
        default=None,
        help="Only include modules from this tier",
    )


__all__ = [
    "add_json_flag",
    "add_config_flag",
    "add_conflict_strategy_flag",
    "add_standard_flags",
    "add_tier_flag",
]
