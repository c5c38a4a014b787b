from __future__ import annotations

import pytest

import main
from config import Settings
from helpers import request
from services.recovery import FALLBACK_REASONING_SUMMARY

FINE_DETAILS = {
    "contravention_code": "12",
    "location": "Main St",
    "date": "2024-01-01",
    "amount": "60",
    "reason": "No permit",
}


def test_health_returns_ok() -> None:
    response = request("GET", "/health")

    assert response.status_code == 200
    assert response.json() == {"status": "OK", "message": "Appeal AI Backend is running"}


def test_appeal_check_end_to_end_strips_fences(fake_client) -> None:
    fake_client.text = (
        '```json\n{"appeal_strength":"strong","confidence_score":80,'
        '"reasoning_summary":"Medical emergencies are commonly accepted."}\n```'
    )

    response = request(
        "POST",
        "/api/appeal-check",
        json={"fineDetails": FINE_DETAILS, "appealReason": "Medical emergency"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "appeal_strength": "strong",
        "confidence_score": 80,
        "reasoning_summary": "Medical emergencies are commonly accepted.",
    }
    assert response.headers["X-Recovery-Status"] == "parsed"

    prompt = fake_client.calls[0]["messages"][1]["content"]
    assert "- Contravention Code: 12" in prompt
    assert "- Location: Main St" in prompt
    assert "- Category: General" in prompt
    assert "- Selected Reason: Medical emergency" in prompt
    assert "- Additional Details: None provided" in prompt


def test_appeal_check_structured_reason_in_prompt(fake_client) -> None:
    fake_client.text = '{"appeal_strength":"weak","confidence_score":20,"reasoning_summary":"Rarely accepted."}'

    response = request(
        "POST",
        "/api/appeal-check",
        json={
            "fineDetails": {"locationAddress": "Station Rd"},
            "appealReason": {"category": "Signage", "reason": "No sign", "personal_note": "Dark"},
        },
    )

    assert response.status_code == 200
    prompt = fake_client.calls[0]["messages"][1]["content"]
    assert "- Location: Station Rd" in prompt
    assert "- Date: Unknown" in prompt
    assert "- Category: Signage" in prompt
    assert "- Selected Reason: No sign" in prompt
    assert "- Additional Details: Dark" in prompt


def test_appeal_check_missing_fine_details_returns_400(fake_client) -> None:
    response = request("POST", "/api/appeal-check", json={"appealReason": "Medical emergency"})

    assert response.status_code == 400
    assert "fineDetails" in response.json()["error"]
    assert fake_client.calls == []


def test_appeal_check_missing_reason_returns_400(fake_client) -> None:
    response = request("POST", "/api/appeal-check", json={"fineDetails": FINE_DETAILS, "appealReason": ""})

    assert response.status_code == 400
    assert fake_client.calls == []


@pytest.mark.parametrize(
    "body",
    [
        {"fineDetails": False, "appealReason": "Medical emergency"},
        {"fineDetails": FINE_DETAILS, "appealReason": 0},
        {"fineDetails": FINE_DETAILS, "appealReason": "   "},
    ],
)
def test_appeal_check_falsy_fields_return_400(fake_client, body) -> None:
    response = request("POST", "/api/appeal-check", json=body)

    assert response.status_code == 400
    assert fake_client.calls == []


def test_appeal_check_empty_object_details_are_accepted(fake_client) -> None:
    fake_client.text = "no json"

    response = request("POST", "/api/appeal-check", json={"fineDetails": {}, "appealReason": "Medical emergency"})

    assert response.status_code == 200
    assert len(fake_client.calls) == 1


def test_appeal_check_non_json_body_returns_400(fake_client) -> None:
    response = request(
        "POST",
        "/api/appeal-check",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request body"
    assert fake_client.calls == []


def test_appeal_check_non_finite_score_returns_fallback(fake_client) -> None:
    fake_client.text = '{"appeal_strength":"strong","confidence_score":NaN,"reasoning_summary":"x"}'

    response = request(
        "POST",
        "/api/appeal-check",
        json={"fineDetails": FINE_DETAILS, "appealReason": "Medical emergency"},
    )

    assert response.status_code == 200
    assert response.json()["confidence_score"] == 50
    assert response.headers["X-Recovery-Status"] == "fallback"


def test_appeal_check_unparseable_output_returns_fallback(fake_client) -> None:
    fake_client.text = "I think this appeal has a decent chance."

    response = request(
        "POST",
        "/api/appeal-check",
        json={"fineDetails": FINE_DETAILS, "appealReason": "Medical emergency"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "appeal_strength": "medium",
        "confidence_score": 50,
        "reasoning_summary": FALLBACK_REASONING_SUMMARY,
    }
    assert response.headers["X-Recovery-Status"] == "fallback"


def test_appeal_check_upstream_failure_returns_500_with_details(failing_client) -> None:
    response = request(
        "POST",
        "/api/appeal-check",
        json={"fineDetails": FINE_DETAILS, "appealReason": "Medical emergency"},
    )

    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to analyze appeal chances",
        "details": "429 rate limit exceeded",
    }


def test_production_mode_hides_details(failing_client, monkeypatch) -> None:
    monkeypatch.setattr(main, "get_settings", lambda: Settings(environment="production"))

    response = request(
        "POST",
        "/api/appeal-check",
        json={"fineDetails": FINE_DETAILS, "appealReason": "Medical emergency"},
    )

    assert response.status_code == 500
    assert response.json()["details"] == "Something went wrong"
