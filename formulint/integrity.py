"""SHA-256 helpers for formula files and downloaded artifacts."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Optional

from .errors import ErrorKind, ValidationIssue
from .models import PackageDescriptor

_CHUNK_SIZE = 1024 * 1024


def hash_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def hash_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def verify_artifact(descriptor: PackageDescriptor, artifact: Path) -> Optional[ValidationIssue]:
    """Compare a locally downloaded ``artifact`` with the descriptor's checksum.

    Returns None when the digests match.
    """
    if descriptor.checksum is None:
        return ValidationIssue(
            kind=ErrorKind.MISSING_FIELD,
            field="checksum",
            detail=f"{descriptor.name} declares no sha256 to verify {artifact.name} against",
            origin=descriptor.origin,
        )
    actual = hash_file(artifact)
    if actual == descriptor.checksum:
        return None
    return ValidationIssue(
        kind=ErrorKind.CHECKSUM_MISMATCH,
        field="checksum",
        detail=f"{artifact.name} has sha256 {actual}, expected {descriptor.checksum}",
        origin=descriptor.origin,
        related=[str(artifact)],
    )


__all__ = ["hash_bytes", "hash_file", "verify_artifact"]
