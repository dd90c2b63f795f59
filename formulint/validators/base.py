"""Core validation data structures and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from ..errors import ErrorKind, ValidationIssue
from ..models import PackageDescriptor
from ..parser import FormulaDraft

DEFAULT_URL_SCHEMES = ("https", "http", "ftp")


class Validator(Protocol):
    """Protocol implemented by descriptor validators."""

    name: str

    def validate(self, context: "ValidationContext") -> List[ValidationIssue]:
        """Run validation and return any issues."""


@dataclass
class ValidationContext:
    """Context shared with validators when evaluating one formula."""

    draft: FormulaDraft
    url_schemes: Sequence[str] = DEFAULT_URL_SCHEMES

    def issue(
        self,
        kind: ErrorKind,
        field_name: str,
        detail: str,
        *,
        line: Optional[int] = None,
    ) -> ValidationIssue:
        if line is None:
            literal = self.draft.fields.get(field_name)
            line = literal.line if literal is not None else None
        return ValidationIssue(
            kind=kind,
            field=field_name,
            detail=detail,
            origin=self.draft.origin,
            line=line,
        )

    def malformed(self, field_name: str) -> Optional[ValidationIssue]:
        """Return a ``MalformedLiteral`` issue when the field could not be read."""
        literal = self.draft.fields.get(field_name)
        if literal is None or literal.error is None:
            return None
        return self.issue(ErrorKind.MALFORMED_LITERAL, field_name, literal.error)


@dataclass
class ValidationResult:
    """Outcome of validating one descriptor text."""

    origin: Optional[str]
    draft: FormulaDraft
    issues: List[ValidationIssue] = field(default_factory=list)
    descriptor: Optional[PackageDescriptor] = None
    # Digest of the formula file, set when the text was read from disk.
    sha256: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.issues and self.descriptor is not None

    @property
    def name(self) -> Optional[str]:
        return self.draft.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "origin": self.origin,
            "name": self.name,
            "valid": self.ok,
            "sha256": self.sha256,
            "issues": [issue.to_dict() for issue in self.issues],
        }
