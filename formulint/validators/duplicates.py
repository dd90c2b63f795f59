"""Detection of several formulae claiming the same package name."""

from __future__ import annotations

from typing import Dict, List, Sequence

from ..errors import ErrorKind, ValidationIssue
from ..models import name_from_class
from ..parser import FormulaDraft
from .base import ValidationResult


class DuplicateDetector:
    """Reports every package name declared by more than one formula.

    Conflicts are always errors: nothing is resolved by keeping the first or
    last declaration.
    """

    def detect(self, results: Sequence[ValidationResult]) -> List[ValidationIssue]:
        groups: Dict[str, List[ValidationResult]] = {}
        for result in results:
            if result.draft.class_name is None:
                continue
            # The declared class is the claim; file names are checked separately.
            groups.setdefault(result.draft.class_name.lower(), []).append(result)

        issues: List[ValidationIssue] = []
        for key in sorted(groups):
            members = groups[key]
            if len(members) < 2:
                continue
            origins: List[str] = []
            files: List[str] = []
            for member in members:
                label = origin_label(member.draft)
                if label not in origins:
                    origins.append(label)
                files.append(member.origin or "<text>")
            name = name_from_class(members[0].draft.class_name or key)
            detail = (
                f"{len(members)} descriptors declare '{name}' "
                f"({', '.join(files)}) from {len(origins)} origin(s): {', '.join(origins)}"
            )
            issues.append(
                ValidationIssue(
                    kind=ErrorKind.CONFLICTING_DESCRIPTORS,
                    field="name",
                    detail=detail,
                    related=origins,
                )
            )
        return issues


def origin_label(draft: FormulaDraft) -> str:
    """Where a formula says its package comes from: url, else homepage, else its file."""
    for field_name in ("sourceURL", "homepage"):
        literal = draft.fields.get(field_name)
        if literal is not None and literal.value:
            return literal.value
    return draft.origin or "<text>"


__all__ = ["DuplicateDetector", "origin_label"]
