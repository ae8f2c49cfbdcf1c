from unittest.mock import AsyncMock, patch

from API_LAYER.app import app


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def assert_failure_envelope(body: dict, error_type: str = None):
    """
    Enforces the minimal failure response contract.
    """
    assert isinstance(body, dict), "Failure response must be a JSON object"
    assert "error" in body, "Missing 'error' key in failure response"

    error = body["error"]
    assert isinstance(error, dict), "'error' must be an object"
    assert isinstance(error.get("type"), str), "'error.type' must be a string"
    assert isinstance(error.get("message"), str), "'error.message' must be a string"

    if error_type is not None:
        assert error["type"] == error_type


# ------------------------------------------------------------
# Tests
# ------------------------------------------------------------

def test_missing_fields_return_validation_envelope(client):
    response = client.post("/process", json={"user_id": "u1"})

    assert response.status_code == 422
    assert_failure_envelope(response.json(), "validation_error")


def test_handler_crash_returns_500_envelope(client):
    with patch.object(app.state.handler, "handle", new_callable=AsyncMock) as mock_handle:
        mock_handle.side_effect = RuntimeError("boom")
        response = client.post("/process", json={"user_id": "u1", "text": "hello"})

    assert response.status_code == 500
    body = response.json()
    assert_failure_envelope(body, "http_error")
    assert "boom" not in body["error"]["message"]


def test_unknown_family_returns_404_envelope(client):
    response = client.get("/family/missing")

    assert response.status_code == 404
    assert_failure_envelope(response.json(), "family_group_not_found")


def test_unknown_profile_returns_404_envelope(client):
    response = client.get("/profile/nobody")

    assert response.status_code == 404
    assert_failure_envelope(response.json())


def test_family_transaction_outside_family_is_conflict(client):
    response = client.post("/family/transaction", json={"user_id": "solo", "amount": 1000})

    assert response.status_code == 409
    assert_failure_envelope(response.json(), "not_in_family_group")


def test_goal_calculate_rejects_unreadable_date(client):
    response = client.post("/goal/calculate", json={"amount": 1000, "target_date": "xyzzy"})

    assert response.status_code == 422
    assert_failure_envelope(response.json(), "invalid_timeline")


def test_goal_calculate_needs_exactly_one_timeline(client):
    response = client.post(
        "/goal/calculate",
        json={"amount": 1000, "timeline_days": 10, "target_date": "2030-01-01"},
    )

    assert response.status_code == 422
    assert_failure_envelope(response.json(), "validation_error")


def test_non_positive_deposit_is_rejected(client):
    response = client.post("/deposit", json={"user_id": "u1", "amount": 0})

    assert response.status_code == 422
    assert_failure_envelope(response.json(), "validation_error")
