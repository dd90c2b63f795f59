"""Validation package for formula descriptors."""

from .base import DEFAULT_URL_SCHEMES, ValidationContext, ValidationResult, Validator
from .descriptor import (
    BUILTIN_VALIDATORS,
    DescriptorValidator,
    build_validators,
    load_descriptor,
    validate_descriptor,
)
from .duplicates import DuplicateDetector
from .fields import (
    ChecksumValidator,
    LicenseValidator,
    NameValidator,
    RequiredFieldsValidator,
    UrlValidator,
    VersionValidator,
)
from .install_steps import InstallStepsValidator

__all__ = [
    "BUILTIN_VALIDATORS",
    "DEFAULT_URL_SCHEMES",
    "ChecksumValidator",
    "DescriptorValidator",
    "DuplicateDetector",
    "InstallStepsValidator",
    "LicenseValidator",
    "NameValidator",
    "RequiredFieldsValidator",
    "UrlValidator",
    "ValidationContext",
    "ValidationResult",
    "Validator",
    "VersionValidator",
    "build_validators",
    "load_descriptor",
    "validate_descriptor",
]
