"""GET /v1/budget-score - Composite budget health score"""

import logging
import time
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from budget_health.api.dependencies import get_classifier, get_request_id, resolve_today
from budget_health.api.v1.loading import load_user_budget_data
from budget_health.api.v1.schemas import BudgetScoreResponse
from budget_health.domain.classifier import TransactionClassifier
from budget_health.domain.exceptions import InvalidInputError
from budget_health.domain.scoring import calculate_budget_score
from budget_health.infrastructure.database.session import get_db
from budget_health.infrastructure.observability.logging import log_budget_score
from budget_health.infrastructure.observability.metrics import record_budget_score

router = APIRouter()


@router.get("/budget-score", response_model=BudgetScoreResponse)
def get_budget_score(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    today: Optional[date] = Query(None, description="Evaluation date, defaults to the server date"),
    db: Session = Depends(get_db),
    classifier: TransactionClassifier = Depends(get_classifier),
):
    """
    Score the user's current budget health.

    Flow:
    1. Load settings, accounts, transactions, goals and budget items
    2. Aggregate the current month
    3. Compute pillars, metrics and risk level
    """
    start_time = time.time()
    request_id = get_request_id(request)
    today = resolve_today(today)

    try:
        data = load_user_budget_data(db, user_id, today, classifier)
        result = calculate_budget_score(
            data.snapshot,
            data.transactions,
            data.goals,
            data.budget_items,
            data.settings,
            today,
        )

    except HTTPException:
        raise

    except InvalidInputError as e:
        logging.warning(f"Cannot score budget: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_budget_score(result)
    log_budget_score(request_id, user_id, result, duration_ms)

    return BudgetScoreResponse.model_validate(result)
