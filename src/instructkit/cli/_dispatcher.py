"""
Auto-discovery CLI dispatcher for InstructKit.

Every module in ``cli/commands`` that does not start with ``_`` becomes a
subcommand. A command module exposes ``SUMMARY``, ``register_args(parser)``
and ``main(args) -> int``.
"""

from __future__ import annotations

import argparse
import importlib
import pkgutil
import sys
from functools import lru_cache
from pathlib import Path
from types import ModuleType
from typing import Callable, Dict, List, NamedTuple, Optional

from instructkit import __version__
from instructkit.core.logging_setup import configure_stdlib_logging, suppress_lastresort_handler

CommandMain = Callable[[argparse.Namespace], int]


class CommandSpec(NamedTuple):
    name: str
    module: ModuleType
    summary: str
    register_args: Optional[Callable[[argparse.ArgumentParser], None]]
    main: Optional[CommandMain]


@lru_cache(maxsize=1)
def discover_commands() -> Dict[str, CommandSpec]:
    """Import every public module under ``instructkit.cli.commands``."""
    from instructkit.cli import commands as commands_pkg

    found: Dict[str, CommandSpec] = {}
    for info in sorted(pkgutil.iter_modules(commands_pkg.__path__), key=lambda i: i.name):
        if info.name.startswith("_") or info.ispkg:
            continue
        try:
            module = importlib.import_module(f"{commands_pkg.__name__}.{info.name}")
        except ImportError as e:
            print(f"Warning: Could not import command {info.name}: {e}", file=sys.stderr)
            continue
        found[info.name] = CommandSpec(
            name=info.name.replace("_", "-"),
            module=module,
            summary=getattr(module, "SUMMARY", info.name),
            register_args=getattr(module, "register_args", None),
            main=getattr(module, "main", None),
        )
    return found


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with auto-discovered commands."""
    parser = argparse.ArgumentParser(
        prog="instructkit",
        description="InstructKit - compose persona instruction documents from reusable modules",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging (sent to stderr or --log-file)",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Write logs to this file instead of stderr",
    )

    subparsers = parser.add_subparsers(dest="command", title="commands", metavar="<command>")
    for spec in discover_commands().values():
        sub = subparsers.add_parser(spec.name, help=spec.summary, description=spec.summary)
        if spec.register_args is not None:
            spec.register_args(sub)
        if spec.main is not None:
            sub.set_defaults(_func=spec.main)
    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    log_file = Path(args.log_file) if args.log_file else None
    if args.verbose or log_file is not None:
        configure_stdlib_logging("DEBUG" if args.verbose else "INFO", log_path=log_file)
    else:
        # Commands report warnings themselves; keep stdlib logging quiet.
        suppress_lastresort_handler()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the InstructKit CLI.

    Returns:
        Exit code: 0 on success, 1 on failure, 130 when interrupted
    """
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    if not args.command:
        parser.print_help()
        return 0

    _configure_logging(args)

    func: Optional[CommandMain] = getattr(args, "_func", None)
    if func is None:
        parser.print_help()
        return 1

    try:
        return func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
