"""Domain models - pure Python dataclasses representing budgeting entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple


class AccountStatus(str, Enum):
    ACTIVE = "active"
    DISCONNECTED = "disconnected"


class IncomeCadence(str, Enum):
    MONTHLY = "monthly"
    BI_WEEKLY = "bi-weekly"
    WEEKLY = "weekly"


class BudgetMethod(str, Enum):
    ZERO_BASED = "zero_based"
    PERCENTAGE_BASED = "percentage_based"


class BudgetFrequency(str, Enum):
    MONTHLY = "Monthly"
    WEEKLY = "Weekly"
    BI_WEEKLY = "Bi-weekly"
    DAILY = "Daily"
    ONCE_OFF = "Once-off"


class BudgetBucket(str, Enum):
    NEEDS = "needs"
    WANTS = "wants"
    SAVINGS = "savings"


class SavingsAdjustmentStrategy(str, Enum):
    INVERSE_PRIORITY = "inverse_priority"
    PROPORTIONAL = "proportional"
    EVEN_DISTRIBUTION = "even_distribution"


class RiskLevel(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class Account:
    """Linked bank account as last synced by the data store"""

    account_id: str
    available_balance_cents: int
    status: AccountStatus = AccountStatus.ACTIVE


@dataclass(frozen=True)
class Transaction:
    """Bank transaction; negative amount is an outflow"""

    transaction_id: str
    account_id: str
    amount_cents: int
    date: date
    description: str
    category: Optional[str] = None


@dataclass(frozen=True)
class BudgetItem:
    """Planned recurring (or once-off) expense line"""

    name: str
    frequency: BudgetFrequency
    amount_cents: int
    days_per_week: Optional[int] = None  # Daily items only
    parent_category: Optional[BudgetBucket] = None


@dataclass(frozen=True)
class Goal:
    """Savings goal; priority is its position in the goals list (index 0 first)"""

    goal_id: str
    name: str
    target_cents: int
    saved_cents: int
    monthly_allocation_cents: int
    due_date: date

    @property
    def remaining_cents(self) -> int:
        return max(self.target_cents - self.saved_cents, 0)

    @property
    def is_complete(self) -> bool:
        return self.saved_cents >= self.target_cents


@dataclass(frozen=True)
class UserSettings:
    """Per-user budgeting preferences"""

    payday_of_month: int = 25
    income_cadence: IncomeCadence = IncomeCadence.MONTHLY
    budget_method: BudgetMethod = BudgetMethod.PERCENTAGE_BASED
    needs_percentage: int = 50
    wants_percentage: int = 30
    savings_percentage: int = 20
    savings_adjustment_strategy: SavingsAdjustmentStrategy = SavingsAdjustmentStrategy.INVERSE_PRIORITY


@dataclass(frozen=True)
class FinancialSnapshot:
    """Monthly aggregates plus the current available balance"""

    monthly_income_cents: int
    monthly_expenses_cents: int
    monthly_savings_transfers_cents: int
    net_balance_cents: int
    available_balance_cents: int
    account_balances: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ScorePillars:
    """Independently scored dimensions, each on [0, 100]"""

    budget_compliance: float
    spending_consistency: float
    savings_health: float
    cash_survival_risk: float


@dataclass(frozen=True)
class ScoreMetrics:
    """Cash-runway figures behind the cash survival pillar"""

    remaining_balance_cents: int
    days_until_payday: int
    avg_daily_spend_cents: float
    expected_spend_to_payday_cents: float
    risk_ratio: float
    safe_to_spend_per_day_cents: int


@dataclass(frozen=True)
class BudgetScoreResult:
    """Output of the budget health assessment"""

    total_score: int
    pillars: ScorePillars
    metrics: ScoreMetrics
    risk_level: RiskLevel


@dataclass(frozen=True)
class GoalAdjustment:
    """Proposed allocation change for a single goal"""

    goal_id: str
    goal_name: str
    current_allocation_cents: int
    new_allocation_cents: int
    reduction_cents: int
    timeline_extension_months: Optional[int]  # None: target never reached at the new rate
    needs_review: bool
    proposed_due_date: Optional[date]


@dataclass(frozen=True)
class SavingsStatus:
    """Shortfall comparison and the reallocation proposal"""

    has_shortfall: bool
    expected_balance_cents: int
    available_balance_cents: int
    shortfall_cents: int
    strategy: SavingsAdjustmentStrategy
    adjustments: List[GoalAdjustment] = field(default_factory=list)
    unabsorbed_shortfall_cents: int = 0


@dataclass(frozen=True)
class BudgetAllocation:
    """Percentage-based split of an amount into needs, wants and savings"""

    needs_cents: int
    wants_cents: int
    savings_cents: int


@dataclass
class ApplyResult:
    """Outcome of writing a savings proposal back to the data store"""

    succeeded: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def partial_failure(self) -> bool:
        return bool(self.failed)
