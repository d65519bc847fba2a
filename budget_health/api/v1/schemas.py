"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from budget_health.domain.models import BudgetMethod, RiskLevel, SavingsAdjustmentStrategy


class SpendingCategorySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    amount_cents: int


class SnapshotResponse(BaseModel):
    """Response for GET /v1/snapshot"""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    year: int
    month: int
    monthly_income_cents: int
    monthly_expenses_cents: int
    monthly_savings_transfers_cents: int
    net_balance_cents: int
    available_balance_cents: int
    account_balances: Dict[str, int]
    top_spending: List[SpendingCategorySchema]


class PillarsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    budget_compliance: float
    spending_consistency: float
    savings_health: float
    cash_survival_risk: float


class MetricsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    remaining_balance_cents: int
    days_until_payday: int
    avg_daily_spend_cents: float
    expected_spend_to_payday_cents: float
    risk_ratio: float
    safe_to_spend_per_day_cents: int


class BudgetScoreResponse(BaseModel):
    """Response for GET /v1/budget-score"""

    model_config = ConfigDict(from_attributes=True)

    total_score: int
    pillars: PillarsSchema
    metrics: MetricsSchema
    risk_level: RiskLevel


class GoalAdjustmentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    goal_id: str
    goal_name: str
    current_allocation_cents: int
    new_allocation_cents: int
    reduction_cents: int
    timeline_extension_months: Optional[int] = Field(
        None, description="Extra pay cycles to reach the target; null when the goal is paused"
    )
    needs_review: bool
    proposed_due_date: Optional[date] = None


class SavingsStatusResponse(BaseModel):
    """Response for GET /v1/savings-status"""

    model_config = ConfigDict(from_attributes=True)

    has_shortfall: bool
    expected_balance_cents: int
    available_balance_cents: int
    shortfall_cents: int
    unabsorbed_shortfall_cents: int
    strategy: SavingsAdjustmentStrategy
    adjustments: List[GoalAdjustmentSchema]


class ApplyAdjustmentsRequest(BaseModel):
    """Request body for POST /v1/savings-status/apply"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    today: Optional[date] = Field(None, description="Evaluation date, defaults to the server date")


class FailedGoalWrite(BaseModel):
    goal_id: str
    error: str


class ApplyAdjustmentsResponse(BaseModel):
    """Response for POST /v1/savings-status/apply"""

    user_id: str
    applied: bool
    succeeded: List[str]
    failed: List[FailedGoalWrite]


class AllocationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    needs_cents: int
    wants_cents: int
    savings_cents: int


class BudgetAllocationResponse(BaseModel):
    """Response for GET /v1/budget-allocation"""

    user_id: str
    budget_method: BudgetMethod
    available_balance_cents: int
    recommended: Optional[AllocationSchema] = Field(
        None, description="Percentage split of the available balance (percentage-based budgets)"
    )
    planned: AllocationSchema


class MonthSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: int
    expenses_cents: int
    savings_transfers_cents: int
    net_balance_cents: int


class MonthlySeriesResponse(BaseModel):
    """Response for GET /v1/snapshot/series"""

    user_id: str
    year: int
    months: List[MonthSummarySchema]
