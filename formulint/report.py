"""Batch results and the JSON report written after a check."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, List

from .errors import ValidationIssue
from .validators import ValidationResult

_REPORT_VERSION = 1


@dataclass
class BatchReport:
    """Per-descriptor results plus conflicts found across the whole batch."""

    results: List[ValidationResult] = field(default_factory=list)
    conflicts: List[ValidationIssue] = field(default_factory=list)

    @property
    def issues(self) -> List[ValidationIssue]:
        collected: List[ValidationIssue] = []
        for result in self.results:
            collected.extend(result.issues)
        collected.extend(self.conflicts)
        return collected

    @property
    def ok(self) -> bool:
        return not self.issues

    @property
    def valid_count(self) -> int:
        return sum(1 for result in self.results if result.ok)

    def counts_by_kind(self) -> Dict[str, int]:
        counter = Counter(issue.kind.value for issue in self.issues)
        return dict(sorted(counter.items()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": _REPORT_VERSION,
            "status": "passed" if self.ok else "failed",
            "generated_at": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "descriptors": len(self.results),
            "valid": self.valid_count,
            "issue_counts": self.counts_by_kind(),
            "results": [result.to_dict() for result in self.results],
            "conflicts": [issue.to_dict() for issue in self.conflicts],
        }


def write_report(report: BatchReport, path: Path) -> Path:
    """Write ``report`` as JSON to ``path``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report.to_dict(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return path


__all__ = ["BatchReport", "write_report"]
