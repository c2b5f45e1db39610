"""Markdown rendering and build reports."""
from __future__ import annotations

from .markdown import (
    infer_language_from_media_type,
    render_directive,
    render_markdown,
    render_module,
)
from .report import (
    BuildReport,
    BuildReportGroup,
    BuildReportModule,
    generate_build_report,
    generate_module_digest,
    generate_persona_digest,
    report_path_for,
)

__all__ = [
    "infer_language_from_media_type",
    "render_directive",
    "render_markdown",
    "render_module",
    "BuildReport",
    "BuildReportGroup",
    "BuildReportModule",
    "generate_build_report",
    "generate_module_digest",
    "generate_persona_digest",
    "report_path_for",
]
