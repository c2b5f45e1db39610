"""Shared constants for module ids, schema versions and rendering."""
from __future__ import annotations

import re
from typing import Dict, Tuple

MODULE_SCHEMA_VERSION = "2.0"
PERSONA_SCHEMA_VERSIONS: Tuple[str, ...] = ("1.0", "2.0")
REPORT_SCHEMA_VERSION = "1.0"

VALID_TIERS: Tuple[str, ...] = ("foundation", "principle", "technology", "execution")

# Tier-qualified id: "<tier>/<segment>[/<segment>...]"
MODULE_ID_REGEX = re.compile(
    r"^(?:" + "|".join(VALID_TIERS) + r")(?:/[a-z0-9][a-z0-9-]*)+$"
)

SEMVER_REGEX = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)

MIN_COGNITIVE_LEVEL = 0
MAX_COGNITIVE_LEVEL = 6

# Directive render order. Stable regardless of authoring order.
RENDER_ORDER: Tuple[str, ...] = (
    "goal",
    "principles",
    "constraints",
    "process",
    "criteria",
    "data",
    "examples",
)

# IANA media type -> fenced code block language tag.
MEDIA_TYPE_LANGUAGES: Dict[str, str] = {
    "application/json": "json",
    "application/javascript": "javascript",
    "application/xml": "xml",
    "application/yaml": "yaml",
    "application/toml": "toml",
    "text/html": "html",
    "text/css": "css",
    "text/javascript": "javascript",
    "text/x-python": "python",
    "text/x-java": "java",
    "text/x-csharp": "csharp",
    "text/x-go": "go",
    "text/x-rust": "rust",
    "text/x-typescript": "typescript",
    "text/x-yaml": "yaml",
    "text/x-toml": "toml",
    "text/markdown": "markdown",
    "text/x-sh": "bash",
    "text/x-shellscript": "bash",
}

MODULE_FILE_SUFFIXES: Tuple[str, ...] = (".module.yml", ".module.yaml")
PERSONA_FILE_SUFFIXES: Tuple[str, ...] = (".persona.yml", ".persona.yaml")
REPORT_FILE_SUFFIX = ".build.json"

DEFAULT_CONFIG_FILENAME = "modules.config.yml"
STANDARD_LIBRARY_ENV = "INSTRUCTKIT_STANDARD_LIBRARY"

__all__ = [
    "MODULE_SCHEMA_VERSION",
    "PERSONA_SCHEMA_VERSIONS",
    "REPORT_SCHEMA_VERSION",
    "VALID_TIERS",
    "MODULE_ID_REGEX",
    "SEMVER_REGEX",
    "MIN_COGNITIVE_LEVEL",
    "MAX_COGNITIVE_LEVEL",
    "RENDER_ORDER",
    "MEDIA_TYPE_LANGUAGES",
    "MODULE_FILE_SUFFIXES",
    "PERSONA_FILE_SUFFIXES",
    "REPORT_FILE_SUFFIX",
    "DEFAULT_CONFIG_FILENAME",
    "STANDARD_LIBRARY_ENV",
]
