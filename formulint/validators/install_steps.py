"""Consistency checks between ``url``, the install block and the test block."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Dict, List, Optional, Set
from urllib.parse import unquote, urlsplit

from ..errors import ErrorKind, ValidationIssue
from .base import ValidationContext, Validator


class InstallStepsValidator(Validator):
    """Follows the file named by ``url`` through compile and install steps.

    Compile steps must read the fetched file, every installed artifact must be
    the fetched file or the output of an earlier compile step, every compiled
    binary must be installed, and the smoke test must run an installed binary.
    Arbitrary ``system`` commands (``make`` and friends) may produce anything,
    so the artifact check is skipped when one is present.
    """

    name = "install_steps"

    def validate(self, context: ValidationContext) -> List[ValidationIssue]:
        draft = context.draft
        fetched = fetched_filename(draft.value("sourceURL"))
        issues: List[ValidationIssue] = []
        produced: List[str] = []
        installed: Dict[str, Set[str]] = {}
        opaque_commands = False

        for step in draft.install_steps:
            if step.is_compile:
                if not step.inputs:
                    issues.append(self._issue(context, f"compile step '{step.compiler}' names no source file"))
                for source in step.inputs:
                    if fetched is not None and source != fetched:
                        issues.append(
                            self._issue(
                                context,
                                f"compile step reads {source!r} but url fetches {fetched!r}",
                            )
                        )
                output = step.output
                if output is not None and output not in produced:
                    produced.append(output)
            elif step.action == "system":
                opaque_commands = True
            elif step.action == "install":
                targets = installed.setdefault(step.directory or "", set())
                for artifact in step.artifacts:
                    targets.add(artifact)
                    if opaque_commands or fetched is None:
                        continue
                    if artifact not in produced and artifact != fetched:
                        issues.append(
                            self._issue(
                                context,
                                f"{step.directory}.install places {artifact!r} but no earlier step produces it",
                            )
                        )

        everything_installed = set().union(*installed.values()) if installed else set()
        for output in produced:
            if output not in everything_installed:
                issues.append(self._issue(context, f"compiled binary {output!r} is never installed"))

        test = draft.test
        binary = test.binary if test is not None else None
        if binary and installed and binary not in installed.get("bin", set()):
            issues.append(
                context.issue(
                    ErrorKind.INCONSISTENT_INSTALL_STEPS,
                    "testCommand",
                    f"test runs {binary!r} which is not installed into bin",
                    line=draft.test_line,
                )
            )
        return issues

    @staticmethod
    def _issue(context: ValidationContext, detail: str) -> ValidationIssue:
        return context.issue(
            ErrorKind.INCONSISTENT_INSTALL_STEPS,
            "installSteps",
            detail,
            line=context.draft.install_line,
        )


def fetched_filename(url: Optional[str]) -> Optional[str]:
    """Return the file name a download of ``url`` is staged under."""
    if not url:
        return None
    try:
        path = urlsplit(url).path
    except ValueError:
        return None
    name = PurePosixPath(unquote(path)).name
    return name or None


__all__ = ["InstallStepsValidator", "fetched_filename"]
