"""Integration tests for API endpoints"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from budget_health.domain.exceptions import GoalWriteError
from budget_health.infrastructure.database.models import GoalRecord, UserSettingsRecord

pytestmark = pytest.mark.integration

TODAY = "2024-04-15"


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient, seeded_user: str):
    """Scores computed through the API show up in Prometheus output"""
    client.get("/v1/budget-score", params={"user_id": seeded_user, "today": TODAY})

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "budget_score_total" in response.text
    assert "http_request_duration_seconds" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_budget_score_endpoint(client: TestClient, seeded_user: str):
    response = client.get("/v1/budget-score", params={"user_id": seeded_user, "today": TODAY})

    assert response.status_code == 200
    data = response.json()
    assert 0 <= data["total_score"] <= 100
    assert set(data["pillars"]) == {
        "budget_compliance",
        "spending_consistency",
        "savings_health",
        "cash_survival_risk",
    }
    # R5,000 available against R5,500 committed
    assert data["metrics"]["remaining_balance_cents"] == -50_000
    assert data["metrics"]["days_until_payday"] == 10
    assert data["metrics"]["safe_to_spend_per_day_cents"] == 0
    assert data["risk_level"] == "danger"


def test_budget_score_unknown_user(client: TestClient, seeded_user: str):
    response = client.get("/v1/budget-score", params={"user_id": "nobody", "today": TODAY})
    assert response.status_code == 404


def test_budget_score_requires_user_id(client: TestClient):
    response = client.get("/v1/budget-score")
    assert response.status_code == 422


def test_budget_score_invalid_stored_strategy(client: TestClient, db: Session, seeded_user: str):
    record = db.get(UserSettingsRecord, seeded_user)
    record.savings_adjustment_strategy = "largest_first"
    db.commit()

    response = client.get("/v1/budget-score", params={"user_id": seeded_user, "today": TODAY})
    assert response.status_code == 422


def test_savings_status_shortfall(client: TestClient, seeded_user: str):
    response = client.get("/v1/savings-status", params={"user_id": seeded_user, "today": TODAY})

    assert response.status_code == 200
    data = response.json()
    assert data["has_shortfall"] is True
    assert data["expected_balance_cents"] == 550_000
    assert data["available_balance_cents"] == 500_000
    assert data["shortfall_cents"] == 50_000
    assert data["unabsorbed_shortfall_cents"] == 0
    assert data["strategy"] == "inverse_priority"

    # Lowest-priority goal absorbs the whole shortfall
    assert len(data["adjustments"]) == 1
    adjustment = data["adjustments"][0]
    assert adjustment["goal_id"] == "goal_holiday"
    assert adjustment["current_allocation_cents"] == 100_000
    assert adjustment["new_allocation_cents"] == 50_000
    assert adjustment["reduction_cents"] == 50_000
    assert adjustment["timeline_extension_months"] == 12
    assert adjustment["needs_review"] is False
    assert adjustment["proposed_due_date"] == "2026-03-25"


def test_apply_adjustments(client: TestClient, db: Session, seeded_user: str):
    response = client.post("/v1/savings-status/apply", json={"user_id": seeded_user, "today": TODAY})

    assert response.status_code == 200
    data = response.json()
    assert data["applied"] is True
    assert data["succeeded"] == ["goal_holiday"]
    assert data["failed"] == []

    holiday = db.get(GoalRecord, "goal_holiday")
    db.refresh(holiday)
    assert holiday.monthly_allocation_cents == 50_000
    assert holiday.due_date.isoformat() == "2026-03-25"

    after = client.get("/v1/savings-status", params={"user_id": seeded_user, "today": TODAY}).json()
    assert after["has_shortfall"] is False
    assert after["adjustments"] == []


def test_apply_adjustments_reports_failed_goals(client: TestClient, seeded_user: str, monkeypatch):
    class RejectingRepository:
        def __init__(self, db, user_id):
            pass

        def update_goal(self, goal_id, monthly_allocation_cents, due_date):
            raise GoalWriteError(goal_id, "permission denied")

    monkeypatch.setattr("budget_health.api.v1.savings.GoalRepository", RejectingRepository)

    response = client.post("/v1/savings-status/apply", json={"user_id": seeded_user, "today": TODAY})

    assert response.status_code == 200
    data = response.json()
    assert data["applied"] is False
    assert data["succeeded"] == []
    assert data["failed"] == [{"goal_id": "goal_holiday", "error": "permission denied"}]


def test_apply_adjustments_unknown_user(client: TestClient, seeded_user: str):
    response = client.post("/v1/savings-status/apply", json={"user_id": "nobody", "today": TODAY})
    assert response.status_code == 404


def test_snapshot_endpoint(client: TestClient, seeded_user: str):
    response = client.get("/v1/snapshot", params={"user_id": seeded_user, "year": 2024, "month": 4})

    assert response.status_code == 200
    data = response.json()
    assert data["monthly_income_cents"] == 2_500_000
    assert data["monthly_expenses_cents"] == 75_000
    assert data["net_balance_cents"] == 2_425_000
    assert data["available_balance_cents"] == 500_000
    assert data["account_balances"] == {"acc_main": 300_000, "acc_save": 200_000}
    assert data["top_spending"] == [{"name": "groceries", "amount_cents": 75_000}]


def test_snapshot_rejects_bad_month(client: TestClient, seeded_user: str):
    response = client.get("/v1/snapshot", params={"user_id": seeded_user, "year": 2024, "month": 13})
    assert response.status_code == 422


def test_budget_allocation_endpoint(client: TestClient, seeded_user: str):
    response = client.get("/v1/budget-allocation", params={"user_id": seeded_user})

    assert response.status_code == 200
    data = response.json()
    assert data["budget_method"] == "percentage_based"
    assert data["available_balance_cents"] == 500_000
    assert data["recommended"] == {"needs_cents": 250_000, "wants_cents": 150_000, "savings_cents": 100_000}
    assert data["planned"] == {"needs_cents": 250_000, "wants_cents": 0, "savings_cents": 0}


def test_budget_allocation_unknown_user(client: TestClient, seeded_user: str):
    response = client.get("/v1/budget-allocation", params={"user_id": "nobody"})
    assert response.status_code == 404


def test_monthly_series_endpoint(client: TestClient, seeded_user: str):
    response = client.get("/v1/snapshot/series", params={"user_id": seeded_user, "year": 2024})

    assert response.status_code == 200
    months = response.json()["months"]
    assert [m["month"] for m in months] == list(range(1, 13))
    assert months[3] == {
        "month": 4,
        "expenses_cents": 75_000,
        "savings_transfers_cents": 0,
        "net_balance_cents": 2_425_000,
    }
    assert months[4]["expenses_cents"] == 0
