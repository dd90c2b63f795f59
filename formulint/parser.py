"""Line-oriented parser for Homebrew formula files.

The parser is deliberately lenient: it never raises on bad input. Anything it
cannot understand is recorded on the returned :class:`FormulaDraft` so the
validators can report every problem of a file in one pass.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Dict, List, Optional

from .errors import ErrorKind, ValidationIssue
from .literals import (
    LiteralError,
    has_non_ascii_quotes,
    scan_string,
    split_arguments,
    strip_non_ascii_quotes,
)
from .models import InstallStep, SmokeTest, name_from_class

_CLASS_HEADER = re.compile(r"^class\s+(?P<name>[A-Z][A-Za-z0-9_]*)\s*<\s*Formula\s*(#.*)?$")
_STANZA = re.compile(r"^(?P<keyword>[a-z_][a-z0-9_]*)(?:\s+(?P<rest>.*))?$")
_DIRECTORY_INSTALL = re.compile(r"^(?P<directory>[a-z_][a-z0-9_]*)\.install\s+(?P<rest>.+)$")
_ASSERT_MATCH = re.compile(r"^assert_match\s+(?P<rest>.+)$")
_SHELL_OUTPUT = re.compile(r"^shell_output\((?P<inner>.*)\)\s*(#.*)?$")

# Formula stanza keyword -> descriptor field name.
STANZA_FIELDS: Dict[str, str] = {
    "desc": "description",
    "homepage": "homepage",
    "url": "sourceURL",
    "sha256": "checksum",
    "license": "license",
    "version": "version",
}


@dataclass
class Literal:
    """Value of a single-argument stanza such as ``url "..."``."""

    value: str
    line: int
    error: Optional[str] = None


@dataclass
class FormulaDraft:
    """Everything the parser could recover from one formula file."""

    origin: Optional[str] = None
    class_name: Optional[str] = None
    class_line: Optional[int] = None
    fields: Dict[str, Literal] = field(default_factory=dict)
    install_declared: bool = False
    install_line: Optional[int] = None
    install_steps: List[InstallStep] = field(default_factory=list)
    test: Optional[SmokeTest] = None
    test_line: Optional[int] = None
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def file_stem(self) -> Optional[str]:
        if not self.origin:
            return None
        path = PurePath(self.origin)
        return path.stem if path.suffix == ".rb" else None

    @property
    def name(self) -> Optional[str]:
        stem = self.file_stem
        if stem:
            return stem
        if self.class_name:
            return name_from_class(self.class_name)
        return None

    def value(self, field_name: str) -> Optional[str]:
        """Return the field value when it was read without errors."""
        literal = self.fields.get(field_name)
        if literal is None or literal.error is not None:
            return None
        return literal.value


class FormulaParser:
    """Turns formula text into a :class:`FormulaDraft`."""

    def parse(self, text: str, origin: Optional[str] = None) -> FormulaDraft:
        draft = FormulaDraft(origin=origin)
        state = "preamble"
        block_line = 0
        for number, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if state == "preamble":
                state = self._parse_preamble(draft, line, number)
            elif state == "body":
                state = self._parse_body(draft, line, number)
                if state in {"install", "test"}:
                    block_line = number
            elif state == "install":
                state = self._parse_install(draft, line, number)
            elif state == "test":
                state = self._parse_test(draft, line, number)
            else:
                self._issue(
                    draft,
                    ErrorKind.MALFORMED_FORMULA,
                    "formula",
                    "content found after the end of the formula class",
                    number,
                )
                break

        if state in {"install", "test"}:
            block = "def install" if state == "install" else "test do"
            self._issue(
                draft,
                ErrorKind.MALFORMED_FORMULA,
                "installSteps" if state == "install" else "testCommand",
                f"'{block}' block is never closed with 'end'",
                block_line,
            )
        if state in {"body", "install", "test"}:
            self._issue(
                draft,
                ErrorKind.MALFORMED_FORMULA,
                "formula",
                f"class {draft.class_name} is never closed with 'end'",
                draft.class_line,
            )
        return draft

    def _parse_preamble(self, draft: FormulaDraft, line: str, number: int) -> str:
        match = _CLASS_HEADER.match(line)
        if match is None:
            # One report is enough; every later line would repeat it.
            if any(issue.field == "formula" for issue in draft.issues):
                return "preamble"
            self._issue(
                draft,
                ErrorKind.UNSUPPORTED_STATEMENT,
                "formula",
                f"expected 'class <Name> < Formula', found {line!r}",
                number,
            )
            return "preamble"
        draft.class_name = match.group("name")
        draft.class_line = number
        return "body"

    def _parse_body(self, draft: FormulaDraft, line: str, number: int) -> str:
        if line == "end":
            return "done"
        if line == "def install":
            if draft.install_declared:
                self._issue(
                    draft,
                    ErrorKind.MALFORMED_FORMULA,
                    "installSteps",
                    "install block is declared more than once",
                    number,
                )
            draft.install_declared = True
            draft.install_line = number
            return "install"
        if line == "test do":
            if draft.test_line is not None:
                self._issue(
                    draft,
                    ErrorKind.MALFORMED_FORMULA,
                    "testCommand",
                    "test block is declared more than once",
                    number,
                )
            draft.test_line = number
            return "test"

        match = _STANZA.match(line)
        keyword = match.group("keyword") if match else None
        if keyword not in STANZA_FIELDS:
            self._issue(
                draft,
                ErrorKind.UNSUPPORTED_STATEMENT,
                "formula",
                f"unsupported formula statement {line!r}",
                number,
            )
            return "body"

        field_name = STANZA_FIELDS[keyword]
        if field_name in draft.fields:
            self._issue(
                draft,
                ErrorKind.MALFORMED_FORMULA,
                field_name,
                f"'{keyword}' is declared more than once (first on line {draft.fields[field_name].line})",
                number,
            )
            return "body"
        draft.fields[field_name] = self._read_literal(match.group("rest") or "", number)
        return "body"

    def _parse_install(self, draft: FormulaDraft, line: str, number: int) -> str:
        if line == "end":
            return "body"
        try:
            if line.startswith("system ") or line == "system":
                arguments = split_arguments(line[len("system"):])
                if not arguments:
                    raise LiteralError("'system' called without a command")
                draft.install_steps.append(InstallStep("system", tuple(arguments)))
                return "install"
            match = _DIRECTORY_INSTALL.match(line)
            if match is not None:
                arguments = split_arguments(match.group("rest"))
                if not arguments:
                    raise LiteralError("'install' called without files")
                draft.install_steps.append(
                    InstallStep("install", tuple(arguments), directory=match.group("directory"))
                )
                return "install"
        except LiteralError as exc:
            self._issue(draft, ErrorKind.MALFORMED_LITERAL, "installSteps", f"{exc}: {line!r}", number)
            return "install"
        self._issue(
            draft,
            ErrorKind.UNSUPPORTED_STATEMENT,
            "installSteps",
            f"unsupported install statement {line!r}",
            number,
        )
        return "install"

    def _parse_test(self, draft: FormulaDraft, line: str, number: int) -> str:
        if line == "end":
            return "body"
        match = _ASSERT_MATCH.match(line)
        if match is None or draft.test is not None:
            self._issue(
                draft,
                ErrorKind.UNSUPPORTED_STATEMENT,
                "testCommand",
                f"unsupported test statement {line!r}",
                number,
            )
            return "test"
        try:
            draft.test = self._read_assertion(match.group("rest"))
        except LiteralError as exc:
            self._issue(draft, ErrorKind.MALFORMED_LITERAL, "testCommand", f"{exc}: {line!r}", number)
        return "test"

    @staticmethod
    def _read_literal(rest: str, number: int) -> Literal:
        text = rest.strip()
        if text[:1] in {'"', "'"}:
            try:
                value, end = scan_string(text, 0)
            except LiteralError as exc:
                return Literal(value=text, line=number, error=str(exc))
            remainder = text[end:].strip()
            if remainder and not remainder.startswith("#"):
                return Literal(value=value, line=number, error=f"unexpected text {remainder!r} after literal")
            return Literal(value=value, line=number)
        if has_non_ascii_quotes(text):
            return Literal(
                value=strip_non_ascii_quotes(text),
                line=number,
                error=f"{text} uses non-ASCII quotation marks",
            )
        if not text:
            return Literal(value="", line=number, error="missing value")
        return Literal(value=text, line=number, error=f"{text} is not a quoted string literal")

    @staticmethod
    def _read_assertion(rest: str) -> SmokeTest:
        text = rest.strip()
        if has_non_ascii_quotes(text):
            raise LiteralError("uses non-ASCII quotation marks")
        expected, end = scan_string(text, 0)
        remainder = text[end:].lstrip()
        if not remainder.startswith(","):
            raise LiteralError("expected ', shell_output(...)' after the expected text")
        call = _SHELL_OUTPUT.match(remainder[1:].strip())
        if call is None:
            raise LiteralError("assert_match must compare against shell_output(...)")
        arguments = split_arguments(call.group("inner"))
        if not arguments or not arguments[0].literal or len(arguments) > 2:
            raise LiteralError("shell_output takes a command string and an optional exit status")
        exit_status: Optional[int] = None
        if len(arguments) == 2:
            status = arguments[1]
            if status.literal or not status.value.isdigit():
                raise LiteralError("shell_output exit status must be an integer")
            exit_status = int(status.value)
        return SmokeTest(command=arguments[0].value, expected=expected, exit_status=exit_status)

    @staticmethod
    def _issue(
        draft: FormulaDraft,
        kind: ErrorKind,
        field_name: str,
        detail: str,
        line: Optional[int],
    ) -> None:
        draft.issues.append(
            ValidationIssue(kind=kind, field=field_name, detail=detail, origin=draft.origin, line=line)
        )


def parse_formula(text: str, origin: Optional[str] = None) -> FormulaDraft:
    """Parse formula ``text`` with a default :class:`FormulaParser`."""
    return FormulaParser().parse(text, origin)


__all__ = ["FormulaDraft", "FormulaParser", "Literal", "STANZA_FIELDS", "parse_formula"]
