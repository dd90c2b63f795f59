"""Issue records and exceptions reported by formulint."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class ErrorKind(str, Enum):
    MISSING_FIELD = "MissingField"
    INVALID_CHECKSUM = "InvalidChecksum"
    MALFORMED_LITERAL = "MalformedLiteral"
    INVALID_URL = "InvalidURL"
    INCONSISTENT_INSTALL_STEPS = "InconsistentInstallSteps"
    CONFLICTING_DESCRIPTORS = "ConflictingDescriptors"
    NAME_MISMATCH = "NameMismatch"
    INVALID_LICENSE = "InvalidLicense"
    UNSUPPORTED_STATEMENT = "UnsupportedStatement"
    MALFORMED_FORMULA = "MalformedFormula"
    UNREADABLE_FILE = "UnreadableFile"
    CHECKSUM_MISMATCH = "ChecksumMismatch"


@dataclass
class ValidationIssue:
    """A single problem found in a descriptor, tagged with the offending field."""

    kind: ErrorKind
    field: str
    detail: str
    origin: Optional[str] = None
    line: Optional[int] = None
    related: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "field": self.field,
            "detail": self.detail,
            "origin": self.origin,
            "line": self.line,
            "related": list(self.related),
        }

    def __str__(self) -> str:
        location = self.origin or "<text>"
        if self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location}: {self.kind.value} [{self.field}] {self.detail}"


class DescriptorValidationError(RuntimeError):
    """Raised when a descriptor is loaded strictly and fails validation."""

    def __init__(self, message: str, issues: Sequence[ValidationIssue]) -> None:
        super().__init__(message)
        self.issues = list(issues)


__all__ = ["DescriptorValidationError", "ErrorKind", "ValidationIssue"]
