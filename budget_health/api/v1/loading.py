"""Load a consistent snapshot of one user's budgeting data for an endpoint"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from budget_health.config import settings
from budget_health.domain.aggregation import aggregate
from budget_health.domain.classifier import TransactionClassifier
from budget_health.domain.models import (
    Account,
    BudgetItem,
    FinancialSnapshot,
    Goal,
    Transaction,
    UserSettings,
)
from budget_health.infrastructure.database.repositories import BudgetDataRepository


@dataclass
class UserBudgetData:
    settings: UserSettings
    accounts: List[Account]
    transactions: List[Transaction]
    goals: List[Goal]
    budget_items: List[BudgetItem]
    snapshot: FinancialSnapshot


def load_user_budget_data(
    db: Session,
    user_id: str,
    today: date,
    classifier: TransactionClassifier,
) -> UserBudgetData:
    """
    Read everything the engines need and aggregate the current month.

    Raises:
        HTTPException(404): user has no settings row
    """
    repo = BudgetDataRepository(db)
    user_settings = repo.get_settings(user_id)
    if user_settings is None:
        raise HTTPException(status_code=404, detail="User settings not found")

    accounts = repo.get_accounts(user_id)
    transactions = repo.get_transactions(user_id, today - timedelta(days=settings.transaction_lookback_days))

    return UserBudgetData(
        settings=user_settings,
        accounts=accounts,
        transactions=transactions,
        goals=repo.get_goals(user_id),
        budget_items=repo.get_budget_items(user_id),
        snapshot=aggregate(transactions, accounts, today.year, today.month, classifier),
    )
