"""Tests for artifact checksum verification."""

from __future__ import annotations

import hashlib
from pathlib import Path

from formulint.errors import ErrorKind
from formulint.integrity import hash_file, verify_artifact
from formulint.validators import load_descriptor
from tests._fixtures.formulae import formula_text

_SOURCE = b'int main(void) { return 0; }\n'


def _artifact(tmp_path: Path, payload: bytes = _SOURCE) -> Path:
    path = tmp_path / "dote.c"
    path.write_bytes(payload)
    return path


def test_hash_file_matches_hashlib(tmp_path: Path) -> None:
    payload = b"x" * (3 * 1024 * 1024 + 7)
    path = _artifact(tmp_path, payload)

    assert hash_file(path) == hashlib.sha256(payload).hexdigest()


def test_matching_artifact_passes(tmp_path: Path) -> None:
    digest = hashlib.sha256(_SOURCE).hexdigest()
    descriptor = load_descriptor(formula_text(sha256=f'"{digest}"'), origin="dote.rb")

    assert verify_artifact(descriptor, _artifact(tmp_path)) is None


def test_mismatching_artifact_is_reported(tmp_path: Path) -> None:
    descriptor = load_descriptor(formula_text(), origin="dote.rb")
    artifact = _artifact(tmp_path)

    issue = verify_artifact(descriptor, artifact)

    assert issue is not None
    assert issue.kind is ErrorKind.CHECKSUM_MISMATCH
    assert issue.field == "checksum"
    assert issue.origin == "dote.rb"
    assert issue.related == [str(artifact)]
    assert hashlib.sha256(_SOURCE).hexdigest() in issue.detail


def test_descriptor_without_checksum_cannot_be_verified(tmp_path: Path) -> None:
    descriptor = load_descriptor(formula_text(sha256=None))

    issue = verify_artifact(descriptor, _artifact(tmp_path))

    assert issue is not None
    assert issue.kind is ErrorKind.MISSING_FIELD
