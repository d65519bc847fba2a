"""Data access layer for budgeting entities"""

from datetime import date
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from budget_health.domain.exceptions import GoalWriteError, InvalidInputError
from budget_health.domain.models import (
    Account,
    AccountStatus,
    BudgetBucket,
    BudgetFrequency,
    BudgetItem,
    BudgetMethod,
    Goal,
    IncomeCadence,
    SavingsAdjustmentStrategy,
    Transaction,
    UserSettings,
)
from budget_health.infrastructure.database.models import (
    AccountRecord,
    BudgetItemRecord,
    GoalRecord,
    TransactionRecord,
    UserSettingsRecord,
)


def _enum(enum_cls, value, field: str):
    try:
        return enum_cls(value)
    except ValueError as e:
        raise InvalidInputError(f"Stored {field} is not a valid {enum_cls.__name__}: {value!r}") from e


class BudgetDataRepository:
    """Read-only snapshot of a user's budgeting data"""

    def __init__(self, db: Session):
        self.db = db

    def get_settings(self, user_id: str) -> Optional[UserSettings]:
        record = self.db.get(UserSettingsRecord, user_id)
        if record is None:
            return None
        return UserSettings(
            payday_of_month=record.payday_of_month,
            income_cadence=_enum(IncomeCadence, record.income_cadence, "income_cadence"),
            budget_method=_enum(BudgetMethod, record.budget_method, "budget_method"),
            needs_percentage=record.needs_percentage,
            wants_percentage=record.wants_percentage,
            savings_percentage=record.savings_percentage,
            savings_adjustment_strategy=_enum(
                SavingsAdjustmentStrategy, record.savings_adjustment_strategy, "savings_adjustment_strategy"
            ),
        )

    def get_accounts(self, user_id: str) -> List[Account]:
        records = (
            self.db.query(AccountRecord)
            .filter(AccountRecord.user_id == user_id)
            .order_by(AccountRecord.id)
            .all()
        )
        return [
            Account(
                account_id=r.id,
                available_balance_cents=r.available_balance_cents,
                status=_enum(AccountStatus, r.status, "account status"),
            )
            for r in records
        ]

    def get_transactions(self, user_id: str, since: date) -> List[Transaction]:
        """Transactions dated on or after `since`"""
        records = (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.user_id == user_id)
            .filter(TransactionRecord.transaction_date >= since)
            .order_by(TransactionRecord.transaction_date, TransactionRecord.id)
            .all()
        )
        return [
            Transaction(
                transaction_id=r.id,
                account_id=r.account_id,
                amount_cents=r.amount_cents,
                date=r.transaction_date,
                description=r.description,
                category=r.category,
            )
            for r in records
        ]

    def get_goals(self, user_id: str) -> List[Goal]:
        """Goals in priority order"""
        records = (
            self.db.query(GoalRecord)
            .filter(GoalRecord.user_id == user_id)
            .order_by(GoalRecord.position, GoalRecord.id)
            .all()
        )
        return [
            Goal(
                goal_id=r.id,
                name=r.name,
                target_cents=r.target_cents,
                saved_cents=r.saved_cents,
                monthly_allocation_cents=r.monthly_allocation_cents,
                due_date=r.due_date,
            )
            for r in records
        ]

    def get_budget_items(self, user_id: str) -> List[BudgetItem]:
        records = (
            self.db.query(BudgetItemRecord)
            .filter(BudgetItemRecord.user_id == user_id)
            .order_by(BudgetItemRecord.id)
            .all()
        )
        return [
            BudgetItem(
                name=r.name,
                frequency=_enum(BudgetFrequency, r.frequency, "budget frequency"),
                amount_cents=r.amount_cents,
                days_per_week=r.days_per_week,
                parent_category=_enum(BudgetBucket, r.parent_category, "parent category")
                if r.parent_category
                else None,
            )
            for r in records
        ]


class GoalRepository:
    """Per-goal writes for applying savings proposals"""

    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id

    def update_goal(self, goal_id: str, monthly_allocation_cents: int, due_date: Optional[date]) -> None:
        """
        Commit one goal's new allocation (and due date, when given).

        Raises:
            GoalWriteError: goal missing for this user, or the store rejected the write
        """
        try:
            record = (
                self.db.query(GoalRecord)
                .filter(GoalRecord.id == goal_id, GoalRecord.user_id == self.user_id)
                .first()
            )
            if record is None:
                raise GoalWriteError(goal_id, f"Goal {goal_id} not found")

            record.monthly_allocation_cents = monthly_allocation_cents
            if due_date is not None:
                record.due_date = due_date
            self.db.commit()

        except SQLAlchemyError as e:
            self.db.rollback()
            raise GoalWriteError(goal_id, f"Store rejected update: {e.__class__.__name__}") from e
