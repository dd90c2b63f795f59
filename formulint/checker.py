"""Batch checking of formula files, taps and in-memory descriptor texts."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .config import FormulintConfig, load_config
from .errors import ErrorKind, ValidationIssue
from .integrity import hash_bytes
from .logging import get_logger
from .parser import FormulaDraft
from .report import BatchReport, write_report
from .repo_scanner import TapScanner
from .validators import (
    DescriptorValidator,
    DuplicateDetector,
    ValidationResult,
    build_validators,
)


class Checker:
    """Validates every descriptor of a batch and then looks for conflicts.

    A failure in one descriptor, including an unreadable file, never stops the
    others from being checked.
    """

    def __init__(
        self,
        scanner: TapScanner | None = None,
        detector: DuplicateDetector | None = None,
    ) -> None:
        self.scanner = scanner or TapScanner()
        self.detector = detector or DuplicateDetector()
        self.logger = get_logger("checker")
        self._validators: Dict[Path, DescriptorValidator] = {}

    def check_paths(
        self,
        paths: Sequence[str],
        *,
        write: bool = True,
        report_path: Path | None = None,
    ) -> BatchReport:
        """Check formula files and tap directories as one batch.

        When ``write`` is set the JSON report goes to ``report_path`` or, for a
        single tap directory, to the location its configuration names.
        """
        results: List[ValidationResult] = []
        configs: List[FormulintConfig] = []
        for raw in paths or ["."]:
            target = Path(raw).expanduser()
            if target.is_dir():
                config = load_config(target)
                configs.append(config)
                manifest = self.scanner.scan(str(target), config.exclude_paths)
                self.logger.info("Checking %d formula file(s) in %s", len(manifest.files), manifest.root)
                validator = self._validator_for(config)
                for relative in manifest.files:
                    results.append(self._check_file(Path(manifest.root) / relative, validator))
            elif target.exists():
                config = load_config(target.parent)
                results.append(self._check_file(target, self._validator_for(config)))
            else:
                raise FileNotFoundError(f"Formula path not found: {raw}")

        report = self._finish(results)
        if write:
            destination = report_path
            if destination is None and len(paths) <= 1 and len(configs) == 1:
                destination = configs[0].report_path
            if destination is not None:
                write_report(report, destination)
                self.logger.info("Report written to %s", _display_path(destination))
        return report

    def check_texts(
        self,
        items: Iterable[Tuple[str, Optional[str]]],
        *,
        validator: DescriptorValidator | None = None,
    ) -> BatchReport:
        """Check in-memory ``(text, origin)`` pairs as one batch."""
        validator = validator or DescriptorValidator()
        results = [validator.validate(text, origin) for text, origin in items]
        return self._finish(results)

    def _finish(self, results: List[ValidationResult]) -> BatchReport:
        conflicts = self.detector.detect(results)
        for conflict in conflicts:
            self.logger.warning("Conflict: %s", conflict.detail)
        report = BatchReport(results=results, conflicts=conflicts)
        self.logger.info(
            "%d of %d descriptor(s) valid, %d issue(s)",
            report.valid_count,
            len(results),
            len(report.issues),
        )
        return report

    def _check_file(self, path: Path, validator: DescriptorValidator) -> ValidationResult:
        origin = _display_path(path)
        try:
            data = path.read_bytes()
            text = data.decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.warning("Unable to read %s: %s", origin, exc)
            issue = ValidationIssue(
                kind=ErrorKind.UNREADABLE_FILE,
                field="formula",
                detail=f"cannot read file: {exc}",
                origin=origin,
            )
            return ValidationResult(origin=origin, draft=FormulaDraft(origin=origin), issues=[issue])
        result = validator.validate(text, origin)
        result.sha256 = hash_bytes(data)
        self.logger.debug("%s: %s", origin, "ok" if result.ok else f"{len(result.issues)} issue(s)")
        return result

    def _validator_for(self, config: FormulintConfig) -> DescriptorValidator:
        cached = self._validators.get(config.root)
        if cached is None:
            cached = DescriptorValidator(
                build_validators(config.checks.disabled),
                url_schemes=config.checks.url_schemes,
            )
            self._validators[config.root] = cached
        return cached


def _display_path(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


__all__ = ["Checker"]
