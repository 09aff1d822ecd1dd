"""Tests for API health, profile listing and reconcile endpoint behavior."""

from fastapi.testclient import TestClient

from trade_reconciler.bootstrap import bootstrap_create_application
from trade_reconciler.config import ReconcilerSettings


def _build_client() -> TestClient:
    settings = ReconcilerSettings(_env_file=None, environment_name="test", default_source_profile="generic")
    return TestClient(bootstrap_create_application(settings=settings))


def _generic_row(date_text: str, code: str, quantity: str, amount: str) -> dict[str, str]:
    return {
        "symbol": "SPY",
        "date": date_text,
        "code": code,
        "quantity": quantity,
        "amount": amount,
        "option_type": "PUT",
        "strike": "500",
        "expiry": "2025-03-21",
    }


def test_api_health_and_index_report_up() -> None:
    """Return deterministic liveness payloads.

    Returns:
        None: Assertions validate response payloads.

    Raises:
        AssertionError: Raised when health payload deviates.
    """

    client = _build_client()

    health_response = client.get("/health")
    index_response = client.get("/")

    assert health_response.status_code == 200
    assert health_response.json() == {"status": "ok", "app": "up"}
    assert index_response.json()["environment"] == "test"


def test_api_profiles_lists_builtin_profiles() -> None:
    """List built-in source profiles with their policies.

    Returns:
        None: Assertions validate profile payload.

    Raises:
        AssertionError: Raised when profile listing deviates.
    """

    response = _build_client().get("/profiles")

    assert response.status_code == 200
    payload = response.json()
    assert payload["default_profile"] == "generic"
    assert [(item["name"], item["matching_policy"], item["row_order"]) for item in payload["items"]] == [
        ("generic", "FIFO", "CHRONOLOGICAL"),
        ("robinhood", "LIFO", "REVERSE_CHRONOLOGICAL"),
        ("tastytrade", "FIFO", "CHRONOLOGICAL"),
    ]


def test_api_reconciliation_returns_trades_and_report() -> None:
    """Reconcile posted rows and serialize decimals as strings.

    Returns:
        None: Assertions validate the reconcile payload.

    Raises:
        AssertionError: Raised when reconcile payload deviates.
    """

    body = {
        "profile": "generic",
        "rows": [
            _generic_row("2025-03-03", "STO", "2", "200"),
            _generic_row("2025-03-05", "BTC", "1", "-50"),
            _generic_row("2025-03-07", "BTC", "1", "-60"),
            {"symbol": "", "date": "2025-03-07", "code": "DIV", "quantity": "", "amount": "1.10"},
        ],
    }

    response = _build_client().post("/reconciliations", json=body)

    assert response.status_code == 200
    payload = response.json()
    assert payload["profile"] == "generic"
    assert payload["matching_policy"] == "FIFO"
    assert [(trade["credit"], trade["debit"], trade["profit_loss"]) for trade in payload["trades"]] == [
        ("100", "50", "50"),
        ("100", "60", "40"),
    ]
    assert payload["trades"][0]["open_date"] == "2025-03-03"
    assert payload["trades"][0]["strategy"] == "Short Put"
    assert payload["report"]["total_profit_loss"] == "90"
    assert payload["report"]["rejected_row_count"] == 1
    assert payload["report"]["is_complete"] is True
    assert [warning["code"] for warning in payload["report"]["warnings"]] == ["REJECTED_ROWS"]
    assert [event["stage"] for event in payload["report"]["diagnostics"]] == ["normalize", "match", "classify", "report"]
    assert payload["report"]["diagnostics"][0]["details"]["row_count"] == 4


def test_api_reconciliation_applies_policy_override_and_default_profile() -> None:
    """Use the configured default profile and honor an explicit policy.

    Returns:
        None: Assertions validate override handling.

    Raises:
        AssertionError: Raised when defaults or overrides are ignored.
    """

    body = {
        "matching_policy": "LIFO",
        "rows": [
            _generic_row("2025-03-03", "STO", "1", "100"),
            _generic_row("2025-03-04", "STO", "1", "150"),
            _generic_row("2025-03-05", "BTC", "1", "-40"),
        ],
    }

    payload = _build_client().post("/reconciliations", json=body).json()

    assert payload["profile"] == "generic"
    assert payload["matching_policy"] == "LIFO"
    assert [(trade["open_date"], trade["is_open"]) for trade in payload["trades"]] == [
        ("2025-03-04", False),
        ("2025-03-03", True),
    ]


def test_api_reconciliation_returns_not_found_for_unknown_profile() -> None:
    """Return 404 with a stable code for unknown source profiles.

    Returns:
        None: Assertions validate error payload.

    Raises:
        AssertionError: Raised when unknown profiles are accepted.
    """

    response = _build_client().post("/reconciliations", json={"profile": "etrade", "rows": []})

    assert response.status_code == 404
    assert response.json()["code"] == "UNKNOWN_SOURCE_PROFILE"


def test_api_reconciliation_rejects_invalid_policy() -> None:
    """Reject unsupported matching policies at request validation.

    Returns:
        None: Assertions validate request validation.

    Raises:
        AssertionError: Raised when invalid policy is accepted.
    """

    response = _build_client().post("/reconciliations", json={"matching_policy": "HIFO", "rows": []})

    assert response.status_code == 422


def test_api_reconciliation_detects_profile_from_row_columns() -> None:
    """Detect the Robinhood format when the request names no profile.

    Returns:
        None: Assertions validate header-based profile detection.

    Raises:
        AssertionError: Raised when the default profile is used instead.
    """

    description = "QQQ 4/17/2025 Put $460.00"
    body = {
        "rows": [
            {"Activity Date": "4/7/2025", "Instrument": "QQQ", "Description": description, "Trans Code": "BTC", "Quantity": "1", "Amount": "($40.00)"},
            {"Activity Date": "4/1/2025", "Instrument": "QQQ", "Description": description, "Trans Code": "STO", "Quantity": "1", "Amount": "$100.00"},
        ],
    }

    payload = _build_client().post("/reconciliations", json=body).json()

    assert payload["profile"] == "robinhood"
    assert payload["matching_policy"] == "LIFO"
    assert payload["report"]["rejected_row_count"] == 0
    assert [(trade["credit"], trade["debit"]) for trade in payload["trades"]] == [("100.00", "40.00")]
