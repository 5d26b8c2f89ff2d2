"""Validation result models shared by every town validator."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single validator finding (error or warning)."""

    type: str  # machine-readable kind, e.g. "unreachable-sin"
    message: str
    sin_id: str | None = None
    npc_id: str | None = None


class ValidationResult(BaseModel):
    valid: bool = True
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)

    @classmethod
    def from_issues(
        cls,
        errors: list[ValidationIssue],
        warnings: list[ValidationIssue] | None = None,
    ) -> "ValidationResult":
        return cls(valid=not errors, errors=list(errors), warnings=list(warnings or []))

    @classmethod
    def merge(cls, *results: "ValidationResult") -> "ValidationResult":
        """Combine results: valid only if all are valid; lists concatenated in order."""
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []
        for r in results:
            errors.extend(r.errors)
            warnings.extend(r.warnings)
        return cls(valid=all(r.valid for r in results), errors=errors, warnings=warnings)

    def error_types(self) -> list[str]:
        return [e.type for e in self.errors]

    def warning_types(self) -> list[str]:
        return [w.type for w in self.warnings]
