"""Helper utilities for constructing temporary taps in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from formulint.models import TapManifest
from formulint.repo_scanner import TapScanner


class TapBuilder:
    """Writes files into a throwaway tap and rescans it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "tap"
        self.root.mkdir()
        self._scanner = TapScanner()

    def write(self, files: Mapping[str, str]) -> None:
        """Write ``path -> contents`` entries into the tap."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")

    def scan(self) -> TapManifest:
        return self._scanner.scan(str(self.root))

    def path(self) -> Path:
        return self.root


__all__ = ["TapBuilder"]
