"""Validation result records."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from instructkit.core.exceptions import ValidationError


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One problem found by a validator.

    Attributes:
        path: Dotted field path inside the validated document (``metadata.name``)
        message: Human-readable description
        section: Format-reference section the rule comes from, when known
    """

    path: str
    message: str
    section: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"path": self.path, "message": self.message}
        if self.section:
            result["section"] = self.section
        return result

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


@dataclass(frozen=True)
class ValidationResult:
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult(
            errors=[*self.errors, *other.errors],
            warnings=[*self.warnings, *other.warnings],
        )

    def raise_for_errors(self, subject: str) -> None:
        """Raise :class:`ValidationError` carrying every error when invalid."""
        if self.valid:
            return
        first = self.errors[0]
        details = "\n".join(f"  - {issue}" for issue in self.errors)
        raise ValidationError(
            f"{subject} failed validation with {len(self.errors)} error(s):\n{details}",
            path=first.path,
            section=first.section,
            issues=self.errors,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
        }


__all__ = ["ValidationIssue", "ValidationResult"]
