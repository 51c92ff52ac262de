"""
Transform endpoint tests.

Coverage:
  - POST /transform happy path (Records[0] only)
  - Structured 422 responses for every error kind
  - GET / and GET /health
"""

import logging

import pytest
from fastapi.testclient import TestClient


# ---------------------------------------------------------------------------
# Payload builder helpers
# ---------------------------------------------------------------------------

def _make_record(
    source: str = "john.doe@example.com",
    destination: list | None = None,
    timestamp: str = "2024-03-15T10:00:00.000Z",
    processing_time_ms: int = 1500,
    spam: str = "PASS",
) -> dict:
    if destination is None:
        destination = ["a@x.com", "b@y.com"]
    return {
        "eventVersion": "1.0",
        "eventSource": "aws:ses",
        "ses": {
            "receipt": {
                "timestamp": timestamp,
                "processingTimeMillis": processing_time_ms,
                "recipients": destination,
                "spamVerdict": {"status": spam},
                "virusVerdict": {"status": "PASS"},
                "spfVerdict": {"status": "PASS"},
                "dkimVerdict": {"status": "PASS"},
                "dmarcVerdict": {"status": "GRAY"},
                "action": {"type": "Lambda", "invocationType": "Event"},
            },
            "mail": {
                "timestamp": timestamp,
                "source": source,
                "messageId": "o3vrnil0e2ic28trm7dfhrc2v0clambda4nbp0g1",
                "destination": destination,
                "headersTruncated": False,
            },
        },
    }


def _make_notification(*records: dict) -> dict:
    if not records:
        records = (_make_record(),)
    return {"Records": list(records)}


# ---------------------------------------------------------------------------
# App fixture
# ---------------------------------------------------------------------------

@pytest.fixture()
def client():
    """Return a TestClient for the FastAPI app."""
    from app.main import app
    return TestClient(app)


# ===========================================================================
# POST /transform - success
# ===========================================================================

class TestTransform:
    """POST /transform returns the flattened event."""

    def test_returns_transformed_event(self, client):
        response = client.post("/transform", json=_make_notification())

        assert response.status_code == 200
        assert response.json() == {
            "spam": True,
            "virus": True,
            "dns": False,
            "mes": "March",
            "retrasado": True,
            "emisor": "john.doe",
            "receptor": ["a", "b"],
        }

    def test_only_first_record_is_transformed(self, client):
        payload = _make_notification(
            _make_record(source="first@example.com"),
            _make_record(source="second@example.com"),
        )
        response = client.post("/transform", json=payload)

        assert response.status_code == 200
        assert response.json()["emisor"] == "first"

    def test_extra_records_are_logged(self, client, caplog):
        payload = _make_notification(_make_record(), _make_record())
        with caplog.at_level(logging.WARNING, logger="app.routers.ses_events"):
            client.post("/transform", json=payload)

        assert "Ignoring 1 additional record(s)" in caplog.text

    def test_response_has_exactly_seven_keys(self, client):
        response = client.post("/transform", json=_make_notification())
        assert sorted(response.json()) == sorted(
            ["spam", "virus", "dns", "mes", "retrasado", "emisor", "receptor"]
        )

    def test_identical_requests_give_identical_bodies(self, client):
        first = client.post("/transform", json=_make_notification())
        second = client.post("/transform", json=_make_notification())
        assert first.content == second.content


# ===========================================================================
# POST /transform - rejected payloads
# ===========================================================================

class TestTransformErrors:
    """Every payload problem is a 422 with a structured detail."""

    def _assert_error(self, response, error_code: str) -> dict:
        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["error_code"] == error_code
        assert isinstance(detail["detail"], str) and detail["detail"]
        return detail

    def test_missing_spam_verdict(self, client):
        record = _make_record()
        del record["ses"]["receipt"]["spamVerdict"]
        response = client.post("/transform", json=_make_notification(record))

        detail = self._assert_error(response, "missing_field")
        assert "receipt.spamVerdict" in detail["detail"]

    def test_missing_ses_key(self, client):
        record = _make_record()
        del record["ses"]
        response = client.post("/transform", json=_make_notification(record))
        self._assert_error(response, "missing_field")

    def test_missing_records(self, client):
        response = client.post("/transform", json={"records": []})
        self._assert_error(response, "missing_field")

    def test_empty_records(self, client):
        response = client.post("/transform", json={"Records": []})
        self._assert_error(response, "empty_records")

    def test_malformed_sender(self, client):
        record = _make_record(source="noatsign")
        response = client.post("/transform", json=_make_notification(record))
        self._assert_error(response, "malformed_address")

    def test_malformed_recipient(self, client):
        record = _make_record(destination=["ok@x.com", "broken"])
        response = client.post("/transform", json=_make_notification(record))
        self._assert_error(response, "malformed_address")

    def test_invalid_timestamp(self, client):
        record = _make_record(timestamp="not-a-date")
        response = client.post("/transform", json=_make_notification(record))
        self._assert_error(response, "invalid_timestamp")

    def test_body_not_an_object(self, client):
        response = client.post("/transform", json=[1, 2, 3])
        self._assert_error(response, "invalid_field_type")

    def test_records_not_a_list(self, client):
        response = client.post("/transform", json={"Records": "nope"})
        self._assert_error(response, "invalid_field_type")

    def test_rejection_is_logged(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="app.routers.ses_events"):
            client.post("/transform", json={"Records": []})
        assert "empty_records" in caplog.text

    def test_invalid_json_is_not_a_server_error(self, client):
        response = client.post(
            "/transform",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422


# ===========================================================================
# Landing and health
# ===========================================================================

class TestMeta:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "SES Event Transformer"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_transform_rejects_get(self, client):
        response = client.get("/transform")
        assert response.status_code == 405
