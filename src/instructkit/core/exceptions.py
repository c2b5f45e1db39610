from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Mapping, Optional, Sequence

if TYPE_CHECKING:
    from instructkit.core.validation.result import ValidationIssue


class InstructKitError(Exception):
    """Base exception for InstructKit.

    ``kind`` is a stable discriminant for callers that must tell errors apart
    without matching on messages or class names.
    """

    kind: ClassVar[str] = "error"
    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "kind": self.kind,
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConflictError(InstructKitError):
    """Raised when several sources define one module id under the ``error`` strategy."""

    kind = "conflict"

    def __init__(
        self,
        message: str,
        *,
        module_id: str,
        conflict_count: int,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        ctx["module_id"] = module_id
        ctx["conflict_count"] = conflict_count
        super().__init__(message, context=ctx)
        self.module_id = module_id
        self.conflict_count = conflict_count


class ValidationError(InstructKitError):
    """Raised when a module, persona or config violates its structural rules."""

    kind = "validation"

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        section: str | None = None,
        issues: Sequence["ValidationIssue"] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if path:
            ctx["path"] = path
        if section:
            ctx["section"] = section
        self.issues: List["ValidationIssue"] = list(issues or [])
        if self.issues:
            ctx["issues"] = [issue.to_dict() for issue in self.issues]
        super().__init__(message, context=ctx)
        self.path = path
        self.section = section


class ModuleLoadError(InstructKitError):
    """Raised when a module file cannot be read or parsed."""

    kind = "module_load"

    def __init__(
        self,
        message: str,
        *,
        file_path: Path | str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if file_path is not None:
            ctx["file_path"] = str(file_path)
        super().__init__(message, context=ctx)
        self.file_path: Optional[str] = str(file_path) if file_path is not None else None


class PersonaLoadError(InstructKitError):
    """Raised when a persona file cannot be read or parsed."""

    kind = "persona_load"

    def __init__(
        self,
        message: str,
        *,
        file_path: Path | str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if file_path is not None:
            ctx["file_path"] = str(file_path)
        super().__init__(message, context=ctx)
        self.file_path: Optional[str] = str(file_path) if file_path is not None else None


class ConfigError(InstructKitError):
    """Raised when ``modules.config.yml`` is malformed or points at missing paths."""

    kind = "config"

    def __init__(
        self,
        message: str,
        *,
        config_path: Path | str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if config_path is not None:
            ctx["config_path"] = str(config_path)
        super().__init__(message, context=ctx)
        self.config_path: Optional[str] = str(config_path) if config_path is not None else None


class BuildError(InstructKitError):
    """Generic build pipeline failure not covered by a more specific error."""

    kind = "build"


def is_instructkit_error(error: BaseException) -> bool:
    return isinstance(error, InstructKitError)


__all__ = [
    "InstructKitError",
    "ConflictError",
    "ValidationError",
    "ModuleLoadError",
    "PersonaLoadError",
    "ConfigError",
    "BuildError",
    "is_instructkit_error",
]
