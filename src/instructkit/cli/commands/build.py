"""
InstructKit build command.

SUMMARY: Build a persona's instruction document and its build report
"""

from __future__ import annotations

import argparse
import sys

from instructkit.cli import (
    OutputFormatter,
    add_conflict_strategy_flag,
    add_json_flag,
    add_standard_flags,
    build_options_from_args,
)
from instructkit.core.build import BuildOrchestrator, write_build_outputs
from instructkit.core.exceptions import InstructKitError

SUMMARY = "Build a persona's instruction document and its build report"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("persona", help="Path to a *.persona.yml file")
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Write Markdown here (and <stem>.build.json beside it). Prints to stdout when omitted.",
    )
    parser.add_argument(
        "--allow-missing",
        action="store_true",
        help="Build even when the persona references modules that were not found",
    )
    add_conflict_strategy_flag(parser)
    add_standard_flags(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        result = BuildOrchestrator(build_options_from_args(args)).build(args.persona)
        if not args.allow_missing:
            result.require_complete()

        output_path = report_path = None
        if args.output:
            output_path, report_path = write_build_outputs(result, args.output)

        formatter.warnings(result.warnings)
        if formatter.json_mode:
            payload = {
                "persona": result.persona.name,
                "modules": [m.id for m in result.modules],
                "missingModules": result.missing_modules,
                "warnings": result.warnings,
                "report": result.report.to_dict(),
            }
            if output_path is not None:
                payload["outputPath"] = str(output_path)
                payload["reportPath"] = str(report_path)
            else:
                payload["markdown"] = result.markdown
            formatter.json_output({"status": "success", **payload})
        elif output_path is not None:
            formatter.text(
                f"Built persona '{result.persona.name}' ({len(result.modules)} modules) -> {output_path}"
            )
            formatter.text_kv("report", report_path)
        else:
            sys.stdout.write(result.markdown)
        return 0
    except InstructKitError as e:
        formatter.error(e, error_code="build_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
