"""Descriptor validation pipeline: formula text in, descriptor or issues out."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..errors import DescriptorValidationError
from ..logging import get_logger
from ..models import PackageDescriptor
from ..parser import FormulaDraft, FormulaParser
from .base import DEFAULT_URL_SCHEMES, ValidationContext, ValidationResult, Validator
from .fields import (
    ChecksumValidator,
    LicenseValidator,
    NameValidator,
    RequiredFieldsValidator,
    UrlValidator,
    VersionValidator,
)
from .install_steps import InstallStepsValidator

# Execution order is part of the contract: issues are reported in this order.
BUILTIN_VALIDATORS: Dict[str, Callable[[], Validator]] = {
    "required": RequiredFieldsValidator,
    "checksum": ChecksumValidator,
    "version": VersionValidator,
    "urls": UrlValidator,
    "install_steps": InstallStepsValidator,
    "name": NameValidator,
    "license": LicenseValidator,
}

MANDATORY_VALIDATORS = frozenset({"required"})


def build_validators(disabled: Iterable[str] = ()) -> List[Validator]:
    """Instantiate the built-in validators, skipping ``disabled`` names."""
    disabled_set = {name.lower() for name in disabled}
    unknown = disabled_set.difference(BUILTIN_VALIDATORS)
    if unknown:
        raise ValueError(f"Unknown checks: {', '.join(sorted(unknown))}")
    locked = disabled_set.intersection(MANDATORY_VALIDATORS)
    if locked:
        raise ValueError(f"Checks cannot be disabled: {', '.join(sorted(locked))}")
    return [factory() for name, factory in BUILTIN_VALIDATORS.items() if name not in disabled_set]


class DescriptorValidator:
    """Parses formula text and runs every validator over the result."""

    def __init__(
        self,
        validators: Optional[Iterable[Validator]] = None,
        *,
        url_schemes: Sequence[str] = DEFAULT_URL_SCHEMES,
        parser: FormulaParser | None = None,
    ) -> None:
        self.validators = list(validators) if validators is not None else build_validators()
        self.url_schemes = tuple(url_schemes)
        self.parser = parser or FormulaParser()
        self.logger = get_logger("validators")

    def validate(self, text: str, origin: Optional[str] = None) -> ValidationResult:
        """Return a validated descriptor or the full list of issues for ``text``."""
        return self.validate_draft(self.parser.parse(text, origin))

    def validate_draft(self, draft: FormulaDraft) -> ValidationResult:
        context = ValidationContext(draft=draft, url_schemes=self.url_schemes)
        issues = []
        for validator in self.validators:
            found = validator.validate(context)
            if found:
                self.logger.debug(
                    "%s: %s reported %d issue(s)", draft.origin or "<text>", validator.name, len(found)
                )
            issues.extend(found)
        issues.extend(draft.issues)

        descriptor = None if issues else _build_descriptor(draft)
        return ValidationResult(origin=draft.origin, draft=draft, issues=issues, descriptor=descriptor)


def _build_descriptor(draft: FormulaDraft) -> PackageDescriptor:
    def _value(field_name: str) -> Optional[str]:
        literal = draft.fields.get(field_name)
        return literal.value if literal is not None else None

    return PackageDescriptor(
        name=draft.name or "",
        source_url=_value("sourceURL") or "",
        version=_value("version") or "",
        install_steps=tuple(draft.install_steps),
        description=_value("description"),
        homepage=_value("homepage"),
        checksum=_value("checksum"),
        license=_value("license"),
        test=draft.test,
        origin=draft.origin,
    )


def validate_descriptor(text: str, origin: Optional[str] = None) -> ValidationResult:
    """Validate ``text`` with the default validator set."""
    return DescriptorValidator().validate(text, origin)


def load_descriptor(text: str, origin: Optional[str] = None) -> PackageDescriptor:
    """Return the descriptor for ``text`` or raise :class:`DescriptorValidationError`."""
    result = validate_descriptor(text, origin)
    if result.descriptor is None:
        label = origin or "descriptor"
        raise DescriptorValidationError(
            f"{label} failed validation with {len(result.issues)} issue(s)", result.issues
        )
    return result.descriptor
