"""Savings shortfall endpoints: evaluate and apply a reallocation proposal"""

import logging
import time
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from budget_health.api.dependencies import get_classifier, get_request_id, resolve_today
from budget_health.api.v1.loading import load_user_budget_data
from budget_health.api.v1.schemas import (
    ApplyAdjustmentsRequest,
    ApplyAdjustmentsResponse,
    FailedGoalWrite,
    SavingsStatusResponse,
)
from budget_health.domain.adjustments import apply_adjustments
from budget_health.domain.classifier import TransactionClassifier
from budget_health.domain.exceptions import InvalidInputError
from budget_health.domain.models import SavingsStatus
from budget_health.domain.savings import evaluate_savings
from budget_health.infrastructure.database.repositories import GoalRepository
from budget_health.infrastructure.database.session import get_db
from budget_health.infrastructure.observability.logging import log_adjustments_applied, log_savings_status
from budget_health.infrastructure.observability.metrics import record_adjustments_applied, record_savings_status

router = APIRouter()


def _evaluate(db: Session, user_id: str, today: date, classifier: TransactionClassifier) -> SavingsStatus:
    data = load_user_budget_data(db, user_id, today, classifier)
    return evaluate_savings(data.goals, data.snapshot, data.settings, today, data.budget_items)


@router.get("/savings-status", response_model=SavingsStatusResponse)
def get_savings_status(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    today: Optional[date] = Query(None, description="Evaluation date, defaults to the server date"),
    db: Session = Depends(get_db),
    classifier: TransactionClassifier = Depends(get_classifier),
):
    """
    Compare committed savings and obligations with the available balance.

    Returns the reallocation proposal under the user's strategy when there
    is a shortfall, or the comparison alone when savings are covered.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    today = resolve_today(today)

    try:
        status = _evaluate(db, user_id, today, classifier)

    except HTTPException:
        raise

    except InvalidInputError as e:
        logging.warning(f"Cannot evaluate savings: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_savings_status(status)
    log_savings_status(request_id, user_id, status, duration_ms)

    return SavingsStatusResponse.model_validate(status)


@router.post("/savings-status/apply", response_model=ApplyAdjustmentsResponse)
def apply_savings_adjustments(
    request_body: ApplyAdjustmentsRequest,
    request: Request,
    db: Session = Depends(get_db),
    classifier: TransactionClassifier = Depends(get_classifier),
):
    """
    Recompute the proposal server-side and write it goal by goal.

    Goals written before a failure keep their new allocation; failures are
    reported per goal so the caller can retry just those.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    today = resolve_today(request_body.today)

    try:
        status = _evaluate(db, request_body.user_id, today, classifier)

    except HTTPException:
        raise

    except InvalidInputError as e:
        logging.warning(f"Cannot evaluate savings: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    result = apply_adjustments(status, GoalRepository(db, request_body.user_id))

    duration_ms = (time.time() - start_time) * 1000
    record_adjustments_applied(result)
    log_adjustments_applied(request_id, request_body.user_id, result, duration_ms)

    return ApplyAdjustmentsResponse(
        user_id=request_body.user_id,
        applied=bool(status.adjustments) and not result.partial_failure,
        succeeded=result.succeeded,
        failed=[FailedGoalWrite(goal_id=goal_id, error=error) for goal_id, error in result.failed],
    )
