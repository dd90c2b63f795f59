"""Discovery of formula files inside a tap directory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from .config import load_config
from .logging import get_logger
from .models import TapManifest

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".formulint",
    # Tap directories that hold Ruby code which is not a formula.
    "cmd",
    "lib",
    "Casks",
    "Aliases",
}

_FORMULA_SUFFIX = ".rb"


@dataclass(frozen=True)
class ExcludePattern:
    """One ``.gitignore`` line or ``exclude_paths`` entry.

    Patterns containing a slash match the tap-relative path; others match a
    single file or directory name at any depth. Negated gitignore lines are
    not supported and are skipped.
    """

    glob: str
    directory_only: bool = False

    @classmethod
    def parse(cls, raw: str) -> Optional["ExcludePattern"]:
        text = raw.strip()
        if not text or text.startswith(("#", "!")):
            return None
        glob = text.strip("/")
        if not glob:
            return None
        return cls(glob=glob, directory_only=text.endswith("/"))

    def excludes(self, rel_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        if "/" in self.glob:
            return fnmatchcase(rel_path, self.glob)
        # Parents were already pruned during the walk, so the last segment is enough.
        return fnmatchcase(rel_path.rsplit("/", 1)[-1], self.glob)


def _exclude_patterns(root: Path, exclude_paths: Iterable[str]) -> List[ExcludePattern]:
    lines: List[str] = []
    gitignore = root / ".gitignore"
    if gitignore.is_file():
        lines.extend(gitignore.read_text(encoding="utf-8").splitlines())
    lines.extend(exclude_paths)
    return [pattern for pattern in map(ExcludePattern.parse, lines) if pattern is not None]


def _iter_formula_paths(root: Path, patterns: Sequence[ExcludePattern]) -> Iterator[str]:
    def excluded(rel_path: str, is_dir: bool) -> bool:
        return any(pattern.excludes(rel_path, is_dir) for pattern in patterns)

    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        prefix = "" if current == root else current.relative_to(root).as_posix() + "/"
        dirnames[:] = [
            name
            for name in sorted(dirnames)
            if name not in _EXCLUDED_DIRS and not excluded(prefix + name, True)
        ]
        for filename in sorted(filenames):
            if filename.endswith(_FORMULA_SUFFIX) and not excluded(prefix + filename, False):
                yield prefix + filename


class TapScanner:
    """Walks a tap to list its formula files."""

    def __init__(self) -> None:
        self.logger = get_logger("scanner")

    def scan(self, root: str, exclude_paths: Optional[Sequence[str]] = None) -> TapManifest:
        """Return the tap-relative paths of formula files beneath ``root``.

        ``exclude_paths`` defaults to the ones configured in the tap's
        ``.formulint.yml``.
        """
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Tap path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Tap path is not a directory: {root}")
        if exclude_paths is None:
            exclude_paths = load_config(root_path).exclude_paths

        patterns = _exclude_patterns(root_path, exclude_paths)
        files = list(_iter_formula_paths(root_path, patterns))
        self.logger.debug("Found %d formula file(s) under %s", len(files), root_path)
        return TapManifest(root=str(root_path), files=files)


__all__ = ["ExcludePattern", "TapScanner"]
