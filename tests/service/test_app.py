"""Tests for the FastAPI service mode."""

from __future__ import annotations

from fastapi.testclient import TestClient

from formulint.service import create_app
from formulint.validators import DescriptorValidator, build_validators
from tests._fixtures.formulae import DOTE_FORMULA, formula_text


def _client(**kwargs: object) -> TestClient:
    return TestClient(create_app(**kwargs))  # type: ignore[arg-type]


def test_health() -> None:
    response = _client().get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_validate_returns_issues() -> None:
    response = _client().post(
        "/validate",
        json={"text": formula_text(version="“1.0.0”"), "origin": "kmc2400/homebrew-dote/dote.rb"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is False
    assert body["name"] == "dote"
    assert [(issue["kind"], issue["field"], issue["line"]) for issue in body["issues"]] == [
        ("MalformedLiteral", "version", 7)
    ]


def test_validate_uses_validator_factory() -> None:
    client = _client(validator_factory=lambda: DescriptorValidator(build_validators(["license"])))

    response = client.post("/validate", json={"text": formula_text(license='"MIT License"')})

    assert response.json()["valid"] is True


def test_batch_reports_conflicts() -> None:
    response = _client().post(
        "/validate/batch",
        json={
            "descriptors": [
                {"text": DOTE_FORMULA, "origin": "Ske-417/homebrew-dote/dote.rb"},
                {"text": DOTE_FORMULA, "origin": "kmc2400/homebrew-dote/dote.rb"},
            ]
        },
    )

    body = response.json()
    assert body["valid"] is False
    assert [result["valid"] for result in body["results"]] == [True, True]
    assert [conflict["kind"] for conflict in body["conflicts"]] == ["ConflictingDescriptors"]


def test_render_returns_canonical_text() -> None:
    response = _client().post("/render", json={"text": formula_text(license="'MIT'")})

    assert response.status_code == 200
    assert response.json() == {"name": "dote", "text": DOTE_FORMULA}


def test_render_rejects_invalid_descriptor() -> None:
    response = _client().post("/render", json={"text": formula_text(sha256='"<後で差し替え>"')})

    assert response.status_code == 422
    body = response.json()
    assert "failed validation" in body["detail"]
    assert body["issues"][0]["kind"] == "InvalidChecksum"
