"""Budget health scoring engine - composite 0-100 score from four pillars"""

import statistics
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Sequence

from budget_health.domain.budget_items import total_monthly_obligations
from budget_health.domain.models import (
    BudgetItem,
    BudgetMethod,
    BudgetScoreResult,
    FinancialSnapshot,
    Goal,
    RiskLevel,
    ScoreMetrics,
    ScorePillars,
    Transaction,
    UserSettings,
)
from budget_health.domain.pay_cycle import clamp_payday, days_until_payday, ensure_date
from budget_health.domain.validation import validate_goals
from budget_health.utils.date_utils import days_in_month, generate_date_range

# Pillar weights, sum to 1.0
WEIGHTS = {
    "budget_compliance": 0.30,
    "spending_consistency": 0.25,
    "savings_health": 0.25,
    "cash_survival_risk": 0.20,
}

TRAILING_WINDOW_DAYS = 30
NEUTRAL_SCORE = 50.0

SAFE_RISK_RATIO = 0.7
WARNING_RISK_RATIO = 1.0
RISK_RATIO_CAP = 999.0
RISK_RATIO_EPSILON_CENTS = 1

EMERGENCY_FUND_MONTHS = 3


def trailing_daily_spend(transactions: Sequence[Transaction], today: date) -> List[int]:
    """Outflow totals (positive cents) for each of the last 30 days, today included"""
    start = today - timedelta(days=TRAILING_WINDOW_DAYS - 1)
    spend_by_date: Dict[date, int] = defaultdict(int)
    for txn in transactions:
        if txn.amount_cents < 0 and start <= txn.date <= today:
            spend_by_date[txn.date] += -txn.amount_cents

    return [spend_by_date.get(day, 0) for day in generate_date_range(start, today)]


def calculate_budget_compliance(
    snapshot: FinancialSnapshot,
    budget_items: Sequence[BudgetItem],
    settings: UserSettings,
    today: date,
) -> float:
    """
    Month-to-date spend against the prorated monthly budget.

    The budget is the sum of budget items; a percentage-based user without
    items is budgeted (needs% + wants%) of monthly income. Spending at or under
    the prorated budget scores 100, falling linearly to 0 at twice the budget.
    No budget at all is neutral.
    """
    budget = total_monthly_obligations(budget_items)
    if budget <= 0 and settings.budget_method == BudgetMethod.PERCENTAGE_BASED:
        spendable_pct = settings.needs_percentage + settings.wants_percentage
        budget = snapshot.monthly_income_cents * spendable_pct // 100
    if budget <= 0:
        return NEUTRAL_SCORE

    prorated = budget * today.day / days_in_month(today.year, today.month)
    spend_ratio = snapshot.monthly_expenses_cents / prorated
    if spend_ratio <= 1.0:
        return 100.0
    return round(100.0 * max(0.0, 2.0 - spend_ratio), 2)


def calculate_spending_consistency(daily_spend: Sequence[int]) -> float:
    """
    Score = 100 / (1 + coefficient of variation of daily spend).

    Even spending every day scores 100; a single large outflow in the window
    drives the score down. No spending in the window is neutral.
    """
    total = sum(daily_spend)
    if total <= 0:
        return NEUTRAL_SCORE

    mean = total / len(daily_spend)
    cv = statistics.pstdev(daily_spend) / mean
    return round(100.0 / (1.0 + cv), 2)


def calculate_savings_health(snapshot: FinancialSnapshot, goals: Sequence[Goal]) -> float:
    """
    Weighted savings picture:
    - 40%: goal progress (saved / target across all goals, 0.5 without goals)
    - 30%: savings rate ((income - expenses) / income, floored at 0)
    - 30%: emergency cover (balance vs 3 months of expenses, capped at 1)
    """
    total_target = sum(g.target_cents for g in goals)
    if total_target > 0:
        goal_progress = min(sum(g.saved_cents for g in goals) / total_target, 1.0)
    else:
        goal_progress = 0.5

    income = snapshot.monthly_income_cents
    expenses = snapshot.monthly_expenses_cents
    savings_rate = max(0, income - expenses) / income if income > 0 else 0.0

    balance = max(snapshot.available_balance_cents, 0)
    if expenses > 0:
        emergency_cover = min(balance / (EMERGENCY_FUND_MONTHS * expenses), 1.0)
    else:
        emergency_cover = 1.0 if balance > 0 else 0.0

    return round(100.0 * (0.4 * goal_progress + 0.3 * savings_rate + 0.3 * emergency_cover), 2)


def calculate_risk_ratio(expected_spend_cents: float, remaining_balance_cents: int) -> float:
    """Expected spend to payday over remaining cash; above 1.0 means running dry before payday"""
    if expected_spend_cents <= 0:
        return 0.0
    ratio = expected_spend_cents / max(remaining_balance_cents, RISK_RATIO_EPSILON_CENTS)
    return round(min(ratio, RISK_RATIO_CAP), 4)


def calculate_cash_survival(remaining_balance_cents: int, expected_spend_cents: float) -> float:
    """100 while remaining cash covers expected spend to payday, then falls with coverage"""
    if expected_spend_cents <= 0:
        return 100.0
    if remaining_balance_cents <= 0:
        return 0.0
    # Raw amounts, not the rounded risk ratio
    coverage = remaining_balance_cents / expected_spend_cents
    return round(100.0 * min(1.0, coverage), 2)


def determine_risk_level(risk_ratio: float) -> RiskLevel:
    """
    Map risk ratio to a level:
    - <= 0.7: safe (30% headroom before payday)
    - <= 1.0: warning (cash just covers expected spend)
    - > 1.0:  danger (projected to run out before payday)
    """
    if risk_ratio <= SAFE_RISK_RATIO:
        return RiskLevel.SAFE
    elif risk_ratio <= WARNING_RISK_RATIO:
        return RiskLevel.WARNING
    else:
        return RiskLevel.DANGER


def calculate_budget_score(
    snapshot: FinancialSnapshot,
    transactions: Sequence[Transaction],
    goals: Sequence[Goal],
    budget_items: Sequence[BudgetItem],
    settings: UserSettings,
    today: date,
) -> BudgetScoreResult:
    """
    Main entry point: score a consistent snapshot of the user's finances.

    Missing goals, budget items or transactions degrade to neutral pillars;
    only malformed `today`, payday or goal data raises InvalidInputError.
    """
    today = ensure_date(today)
    clamp_payday(settings.payday_of_month)
    validate_goals(goals)

    committed = sum(g.monthly_allocation_cents for g in goals) + total_monthly_obligations(budget_items)
    remaining_balance = snapshot.available_balance_cents - committed
    days_to_payday = days_until_payday(today, settings.payday_of_month)

    daily_spend = trailing_daily_spend(transactions, today)
    avg_daily_spend = round(sum(daily_spend) / TRAILING_WINDOW_DAYS, 2)
    expected_spend = round(avg_daily_spend * days_to_payday, 2)
    risk_ratio = calculate_risk_ratio(expected_spend, remaining_balance)

    pillars = ScorePillars(
        budget_compliance=calculate_budget_compliance(snapshot, budget_items, settings, today),
        spending_consistency=calculate_spending_consistency(daily_spend),
        savings_health=calculate_savings_health(snapshot, goals),
        cash_survival_risk=calculate_cash_survival(remaining_balance, expected_spend),
    )

    weighted = sum(getattr(pillars, name) * weight for name, weight in WEIGHTS.items())
    total_score = max(0, min(100, round(weighted)))

    return BudgetScoreResult(
        total_score=total_score,
        pillars=pillars,
        metrics=ScoreMetrics(
            remaining_balance_cents=remaining_balance,
            days_until_payday=days_to_payday,
            avg_daily_spend_cents=avg_daily_spend,
            expected_spend_to_payday_cents=expected_spend,
            risk_ratio=risk_ratio,
            safe_to_spend_per_day_cents=max(remaining_balance, 0) // days_to_payday,
        ),
        risk_level=determine_risk_level(risk_ratio),
    )
