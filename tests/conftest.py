"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from budget_health.api.main import create_app
from budget_health.infrastructure.database.models import (
    AccountRecord,
    Base,
    BudgetItemRecord,
    GoalRecord,
    TransactionRecord,
    UserSettingsRecord,
)
from budget_health.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test_budget_health.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def seeded_user(db: Session) -> str:
    """
    user_1 on 2024-04-15: R5,000 available across two active accounts,
    two goals allocating R2,000 + R1,000 and rent of R2,500 -> R500 shortfall.
    """
    user_id = "user_1"
    db.add(
        UserSettingsRecord(
            user_id=user_id,
            payday_of_month=25,
            income_cadence="monthly",
            budget_method="percentage_based",
            needs_percentage=50,
            wants_percentage=30,
            savings_percentage=20,
            savings_adjustment_strategy="inverse_priority",
        )
    )
    db.add_all(
        [
            AccountRecord(id="acc_main", user_id=user_id, available_balance_cents=300_000, status="active"),
            AccountRecord(id="acc_save", user_id=user_id, available_balance_cents=200_000, status="active"),
            AccountRecord(id="acc_old", user_id=user_id, available_balance_cents=1_000_000, status="disconnected"),
        ]
    )
    db.add_all(
        [
            GoalRecord(
                id="goal_emergency",
                user_id=user_id,
                name="Emergency fund",
                position=0,
                target_cents=2_000_000,
                saved_cents=500_000,
                monthly_allocation_cents=200_000,
                due_date=date(2025, 1, 25),
            ),
            GoalRecord(
                id="goal_holiday",
                user_id=user_id,
                name="Holiday",
                position=1,
                target_cents=1_200_000,
                saved_cents=0,
                monthly_allocation_cents=100_000,
                due_date=date(2025, 4, 25),
            ),
        ]
    )
    db.add(
        BudgetItemRecord(
            user_id=user_id,
            name="Rent",
            frequency="Monthly",
            amount_cents=250_000,
            parent_category="needs",
        )
    )

    db.add(
        TransactionRecord(
            id="tx_salary",
            user_id=user_id,
            account_id="acc_main",
            amount_cents=2_500_000,
            transaction_date=date(2024, 4, 1),
            description="SALARY ACME LTD",
        )
    )
    for day in range(15):
        db.add(
            TransactionRecord(
                id=f"tx_grocery_{day}",
                user_id=user_id,
                account_id="acc_main",
                amount_cents=-5_000,
                transaction_date=date(2024, 4, 1) + timedelta(days=day),
                description="Groceries",
                category="groceries",
            )
        )
    db.commit()
    return user_id
