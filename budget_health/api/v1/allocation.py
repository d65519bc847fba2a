"""GET /v1/budget-allocation - Needs/wants/savings split"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from budget_health.api.dependencies import get_request_id
from budget_health.api.v1.schemas import AllocationSchema, BudgetAllocationResponse
from budget_health.domain.aggregation import available_balance
from budget_health.domain.budget_items import bucket_totals, percentage_allocation
from budget_health.domain.exceptions import InvalidInputError
from budget_health.domain.models import BudgetMethod
from budget_health.infrastructure.database.repositories import BudgetDataRepository
from budget_health.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/budget-allocation", response_model=BudgetAllocationResponse)
def get_budget_allocation(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """
    Planned spend per bucket from budget items and, for percentage-based
    budgets, the recommended split of the available balance.
    """
    request_id = get_request_id(request)
    repo = BudgetDataRepository(db)

    try:
        user_settings = repo.get_settings(user_id)
        if user_settings is None:
            raise HTTPException(status_code=404, detail="User settings not found")

        balance = available_balance(repo.get_accounts(user_id))
        planned = bucket_totals(repo.get_budget_items(user_id))
        recommended = (
            percentage_allocation(user_settings, balance)
            if user_settings.budget_method == BudgetMethod.PERCENTAGE_BASED
            else None
        )

    except InvalidInputError as e:
        logging.warning(f"Cannot allocate budget: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    return BudgetAllocationResponse(
        user_id=user_id,
        budget_method=user_settings.budget_method,
        available_balance_cents=balance,
        recommended=AllocationSchema.model_validate(recommended) if recommended else None,
        planned=AllocationSchema.model_validate(planned),
    )
