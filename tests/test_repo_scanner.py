"""Tests for formula discovery in taps."""

from __future__ import annotations

from pathlib import Path

import pytest

from formulint.repo_scanner import ExcludePattern, TapScanner
from tests._fixtures.formulae import formula_text
from tests._fixtures.tap_builder import TapBuilder


def _paths(builder: TapBuilder) -> list[str]:
    return builder.scan().files


def test_scan_lists_formula_files_in_order(tap_builder: TapBuilder) -> None:
    tap_builder.write(
        {
            "Formula/meteor.rb": formula_text(class_name="Meteor"),
            "Formula/dote.rb": formula_text(),
            "legacy.rb": formula_text(class_name="Legacy"),
            "README.md": "# tap\n",
        }
    )

    assert _paths(tap_builder) == ["legacy.rb", "Formula/dote.rb", "Formula/meteor.rb"]


def test_scan_skips_non_formula_directories(tap_builder: TapBuilder) -> None:
    tap_builder.write(
        {
            "Formula/dote.rb": formula_text(),
            "cmd/brew-dote.rb": "# external command\n",
            "Casks/dote.rb": "cask 'dote' do\nend\n",
            ".git/hooks/pre-commit.rb": "# hook\n",
            ".formulint/cache.rb": "# cache\n",
        }
    )

    assert _paths(tap_builder) == ["Formula/dote.rb"]


def test_scan_honours_gitignore_and_config_excludes(tap_builder: TapBuilder) -> None:
    tap_builder.write(
        {
            ".gitignore": "# local work\nscratch/\n*.bak.rb\n!keep.bak.rb\n",
            ".formulint.yml": "exclude_paths:\n  - Formula/wip-*.rb\n",
            "Formula/dote.rb": formula_text(),
            "Formula/wip-meteor.rb": formula_text(class_name="WipMeteor"),
            "Formula/old.bak.rb": "# old\n",
            "Formula/keep.bak.rb": "# kept\n",
            "scratch/dote.rb": formula_text(),
        }
    )

    assert _paths(tap_builder) == ["Formula/dote.rb"]


def test_scan_rejects_missing_or_file_roots(tmp_path: Path) -> None:
    scanner = TapScanner()
    (tmp_path / "dote.rb").write_text(formula_text(), encoding="utf-8")

    with pytest.raises(FileNotFoundError):
        scanner.scan(str(tmp_path / "missing"))
    with pytest.raises(NotADirectoryError):
        scanner.scan(str(tmp_path / "dote.rb"))


def test_explicit_excludes_override_config(tap_builder: TapBuilder) -> None:
    tap_builder.write(
        {
            ".formulint.yml": "exclude_paths: [Formula/dote.rb]\n",
            "Formula/dote.rb": formula_text(),
            "Formula/meteor.rb": formula_text(class_name="Meteor"),
        }
    )

    manifest = TapScanner().scan(str(tap_builder.path()), ["meteor.rb"])

    assert manifest.files == ["Formula/dote.rb"]


def test_exclude_pattern_shapes() -> None:
    anchored = ExcludePattern.parse("/Formula/dote.rb")
    directory = ExcludePattern.parse("vendor/")

    assert anchored is not None and anchored.excludes("Formula/dote.rb", False)
    assert not anchored.excludes("nested/Formula/dote.rb", False)
    assert directory is not None and directory.excludes("vendor", True)
    assert not directory.excludes("vendor", False)
    assert ExcludePattern.parse("   ") is None
    assert ExcludePattern.parse("!keep.rb") is None
    assert ExcludePattern.parse("# comment") is None
