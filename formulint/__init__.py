"""formulint: validation of Homebrew formula descriptors."""

from .errors import DescriptorValidationError, ErrorKind, ValidationIssue
from .models import InstallStep, PackageDescriptor, SmokeTest
from .validators import DescriptorValidator, DuplicateDetector, load_descriptor, validate_descriptor

__version__ = "0.1.0"

__all__ = [
    "DescriptorValidationError",
    "DescriptorValidator",
    "DuplicateDetector",
    "ErrorKind",
    "InstallStep",
    "PackageDescriptor",
    "SmokeTest",
    "ValidationIssue",
    "load_descriptor",
    "validate_descriptor",
]
