"""Validators for single-value formula stanzas."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence
from urllib.parse import urlsplit

from ..errors import ErrorKind, ValidationIssue
from ..literals import has_non_ascii_quotes
from ..models import class_name_for
from .base import ValidationContext, Validator

_SHA256_PATTERN = re.compile(r"^[0-9a-f]{64}$")
_HEX_PATTERN = re.compile(r"^[0-9a-fA-F]*$")
_VERSION_PATTERN = re.compile(r"^[0-9A-Za-z][0-9A-Za-z._+~-]*$")
_LICENSE_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9.+-]*$")

_REQUIRED_STANZAS = (("sourceURL", "url"), ("version", "version"))


class RequiredFieldsValidator(Validator):
    """Reports fields a descriptor cannot be built without."""

    name = "required"

    def validate(self, context: ValidationContext) -> List[ValidationIssue]:
        draft = context.draft
        issues: List[ValidationIssue] = []
        if draft.class_name is None:
            issues.append(
                context.issue(
                    ErrorKind.MISSING_FIELD,
                    "name",
                    "formula does not declare 'class <Name> < Formula'",
                )
            )
        for field_name, keyword in _REQUIRED_STANZAS:
            if field_name not in draft.fields:
                issues.append(
                    context.issue(
                        ErrorKind.MISSING_FIELD,
                        field_name,
                        f"formula does not declare '{keyword}'",
                    )
                )
        if not draft.install_declared:
            issues.append(
                context.issue(
                    ErrorKind.MISSING_FIELD,
                    "installSteps",
                    "formula has no 'def install' block",
                )
            )
        elif not draft.install_steps and not _has_parser_issue(context, "installSteps"):
            issues.append(
                context.issue(
                    ErrorKind.MISSING_FIELD,
                    "installSteps",
                    "install block contains no steps",
                    line=draft.install_line,
                )
            )
        if (
            draft.test_line is not None
            and draft.test is None
            and not _has_parser_issue(context, "testCommand")
        ):
            issues.append(
                context.issue(
                    ErrorKind.MISSING_FIELD,
                    "testCommand",
                    "test block contains no assert_match assertion",
                    line=draft.test_line,
                )
            )
        return issues


class ChecksumValidator(Validator):
    """Accepts only lowercase SHA-256 hex digests."""

    name = "checksum"

    def validate(self, context: ValidationContext) -> List[ValidationIssue]:
        if "checksum" not in context.draft.fields:
            return []
        literal = context.draft.fields["checksum"]
        if literal.error is not None:
            # Placeholders such as :no_check are not digests either.
            return [context.issue(ErrorKind.INVALID_CHECKSUM, "checksum", literal.error)]
        value = literal.value
        if _SHA256_PATTERN.match(value):
            return []
        if len(value) != 64:
            detail = f"expected 64 hexadecimal characters, found {len(value)} in {value!r}"
        elif _HEX_PATTERN.match(value):
            detail = f"{value!r} must use lowercase hexadecimal digits"
        else:
            detail = f"{value!r} contains non-hexadecimal characters"
        return [context.issue(ErrorKind.INVALID_CHECKSUM, "checksum", detail)]


class VersionValidator(Validator):
    """Requires an ASCII-quoted version token."""

    name = "version"

    def validate(self, context: ValidationContext) -> List[ValidationIssue]:
        if "version" not in context.draft.fields:
            return []
        malformed = context.malformed("version")
        if malformed is not None:
            return [malformed]
        value = context.draft.fields["version"].value
        if has_non_ascii_quotes(value):
            detail = f"{value!r} contains non-ASCII quotation marks"
        elif not _VERSION_PATTERN.match(value):
            detail = f"{value!r} is not a version token"
        else:
            return []
        return [context.issue(ErrorKind.MALFORMED_LITERAL, "version", detail)]


class UrlValidator(Validator):
    """Checks ``url`` and ``homepage`` are absolute URIs."""

    name = "urls"

    def validate(self, context: ValidationContext) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        for field_name, require_file in (("sourceURL", True), ("homepage", False)):
            if field_name not in context.draft.fields:
                continue
            malformed = context.malformed(field_name)
            if malformed is not None:
                issues.append(malformed)
                continue
            value = context.draft.fields[field_name].value
            problem = url_problem(value, context.url_schemes, require_file=require_file)
            if problem is not None:
                issues.append(
                    context.issue(ErrorKind.INVALID_URL, field_name, f"{value!r} {problem}")
                )
        return issues


class NameValidator(Validator):
    """Requires the class name to match the file that contains it."""

    name = "name"

    def validate(self, context: ValidationContext) -> List[ValidationIssue]:
        draft = context.draft
        stem = draft.file_stem
        if draft.class_name is None or stem is None:
            return []
        expected = class_name_for(stem)
        if draft.class_name == expected:
            return []
        return [
            context.issue(
                ErrorKind.NAME_MISMATCH,
                "name",
                f"class {draft.class_name} does not match file {stem}.rb (expected class {expected})",
                line=draft.class_line,
            )
        ]


class LicenseValidator(Validator):
    """Accepts a single SPDX-style license identifier."""

    name = "license"

    def validate(self, context: ValidationContext) -> List[ValidationIssue]:
        if "license" not in context.draft.fields:
            return []
        malformed = context.malformed("license")
        if malformed is not None:
            return [malformed]
        value = context.draft.fields["license"].value
        if _LICENSE_PATTERN.match(value):
            return []
        return [
            context.issue(
                ErrorKind.INVALID_LICENSE,
                "license",
                f"{value!r} is not an SPDX license identifier",
            )
        ]


def url_problem(value: str, schemes: Sequence[str], *, require_file: bool = False) -> Optional[str]:
    """Describe why ``value`` is not an acceptable URI, or return None."""
    if not value.strip():
        return "is empty"
    if any(char.isspace() for char in value):
        return "contains whitespace"
    if has_non_ascii_quotes(value):
        return "contains non-ASCII quotation marks"
    try:
        parts = urlsplit(value)
        parts.port  # raises for out-of-range ports
    except ValueError as exc:
        return f"cannot be parsed ({exc})"
    if not parts.scheme:
        return "is not an absolute URI"
    if parts.scheme.lower() not in {scheme.lower() for scheme in schemes}:
        return f"uses unsupported scheme {parts.scheme!r}"
    if not parts.hostname:
        return "has no host"
    if require_file and (not parts.path or parts.path.endswith("/")):
        return "does not name a single file"
    return None


def _has_parser_issue(context: ValidationContext, field_name: str) -> bool:
    return any(issue.field == field_name for issue in context.draft.issues)


__all__ = [
    "ChecksumValidator",
    "LicenseValidator",
    "NameValidator",
    "RequiredFieldsValidator",
    "UrlValidator",
    "VersionValidator",
    "url_problem",
]
