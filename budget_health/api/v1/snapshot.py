"""GET /v1/snapshot - Monthly financial aggregates and the yearly series"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from budget_health.api.dependencies import get_classifier, get_request_id, resolve_today
from budget_health.api.v1.schemas import (
    MonthlySeriesResponse,
    MonthSummarySchema,
    SnapshotResponse,
    SpendingCategorySchema,
)
from budget_health.domain.aggregation import aggregate, expense_breakdown, monthly_series
from budget_health.domain.classifier import TransactionClassifier
from budget_health.domain.exceptions import InvalidInputError
from budget_health.infrastructure.database.repositories import BudgetDataRepository
from budget_health.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/snapshot", response_model=SnapshotResponse)
def get_snapshot(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    year: Optional[int] = Query(None, description="Calendar year, defaults to the current year"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Calendar month, defaults to the current month"),
    db: Session = Depends(get_db),
    classifier: TransactionClassifier = Depends(get_classifier),
):
    """
    Income, expenses, savings transfers and net balance for one month,
    plus the current available balance and top spending groups.
    """
    request_id = get_request_id(request)
    today = resolve_today(None)
    year = year or today.year
    month = month or today.month

    try:
        repo = BudgetDataRepository(db)
        accounts = repo.get_accounts(user_id)
        transactions = repo.get_transactions(user_id, since=date(year, month, 1))
        snapshot = aggregate(transactions, accounts, year, month, classifier)
        top_spending = expense_breakdown(transactions, year, month)

    except (InvalidInputError, ValueError) as e:
        logging.warning(f"Invalid snapshot request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    return SnapshotResponse(
        user_id=user_id,
        year=year,
        month=month,
        monthly_income_cents=snapshot.monthly_income_cents,
        monthly_expenses_cents=snapshot.monthly_expenses_cents,
        monthly_savings_transfers_cents=snapshot.monthly_savings_transfers_cents,
        net_balance_cents=snapshot.net_balance_cents,
        available_balance_cents=snapshot.available_balance_cents,
        account_balances=snapshot.account_balances,
        top_spending=[SpendingCategorySchema.model_validate(c) for c in top_spending],
    )


@router.get("/snapshot/series", response_model=MonthlySeriesResponse)
def get_monthly_series(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    year: Optional[int] = Query(None, description="Calendar year, defaults to the current year"),
    db: Session = Depends(get_db),
    classifier: TransactionClassifier = Depends(get_classifier),
):
    """Twelve months of expenses, savings transfers and net balance for a year"""
    request_id = get_request_id(request)
    year = year or resolve_today(None).year

    try:
        transactions = BudgetDataRepository(db).get_transactions(user_id, since=date(year, 1, 1))
        series = monthly_series(transactions, year, classifier)

    except (InvalidInputError, ValueError) as e:
        logging.warning(f"Invalid series request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    return MonthlySeriesResponse(
        user_id=user_id,
        year=year,
        months=[MonthSummarySchema.model_validate(m) for m in series],
    )
