from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.formulae import (
    DOTE_CHECKSUM,
    KMC_HOMEPAGE,
    KMC_URL,
    formula_text,
)
from tests._fixtures.tap_builder import TapBuilder


@pytest.fixture
def tap_builder(tmp_path: Path) -> TapBuilder:
    """Provide a reusable tap builder rooted at the pytest tmp_path."""
    return TapBuilder(tmp_path)


@pytest.fixture
def defective_tap(tap_builder: TapBuilder) -> TapBuilder:
    """Four conflicting dote formulae carrying the defects seen in the wild."""
    tap_builder.write(
        {
            "Ske-417/homebrew-dote/dote.rb": formula_text(sha256=f'"{DOTE_CHECKSUM}0"'),
            "Ske-417/homebrew-meteor/dote.rb": formula_text(sha256='"<後で差し替え>"'),
            "kmc2400/homebrew-dote/dote.rb": formula_text(
                homepage=f'"{KMC_HOMEPAGE}"',
                url=f'"{KMC_URL}"',
                version="“1.0.0”",
            ),
            "kmc2400/homebrew-dote-mirror/dote.rb": formula_text(
                homepage=f'"{KMC_HOMEPAGE}"',
                url=f'"{KMC_URL}"',
            ),
        }
    )
    return tap_builder
