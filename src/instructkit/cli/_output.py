"""CLI output formatting.

Every command supports a text mode and a ``--json`` mode. Command output goes
to stdout; errors and warnings go to stderr.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Iterable, Optional

from instructkit.core.exceptions import InstructKitError


class OutputFormatter:
    """Routes command results to text or JSON output."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def _dumps(self, data: Any) -> str:
        return json.dumps(data, indent=self.indent, default=str)

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Report ``error`` on stderr.

        In JSON mode InstructKit errors also carry their ``kind`` and context.
        """
        text = message or str(error)
        if not self.json_mode:
            print(f"Error: {text}", file=sys.stderr)
            return
        payload: Dict[str, Any] = {"error": error_code, "message": text}
        if isinstance(error, InstructKitError):
            details = error.to_json_error()
            payload["kind"] = details["kind"]
            payload["context"] = details["context"]
        print(self._dumps(payload), file=sys.stderr)

    def warnings(self, messages: Iterable[str]) -> None:
        """Print warnings to stderr in text mode; JSON payloads carry them instead."""
        if self.json_mode:
            return
        for message in messages:
            print(f"Warning: {message}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(self._dumps(data))

    def text(self, message: str) -> None:
        print(message)

    def text_kv(self, key: str, value: Any, prefix: str = "  ") -> None:
        if not self.json_mode:
            print(f"{prefix}{key}: {value}")


__all__ = ["OutputFormatter"]
