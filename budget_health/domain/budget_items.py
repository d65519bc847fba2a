"""Budget item helpers: monthly equivalents and the needs/wants/savings split"""

from typing import Iterable

from budget_health.domain.exceptions import InvalidInputError
from budget_health.domain.models import (
    BudgetAllocation,
    BudgetBucket,
    BudgetFrequency,
    BudgetItem,
    BudgetMethod,
    UserSettings,
)

WEEKS_PER_MONTH = 4

# Occurrences per month for fixed-frequency items
_MONTHLY_MULTIPLIER = {
    BudgetFrequency.MONTHLY: 1,
    BudgetFrequency.WEEKLY: WEEKS_PER_MONTH,
    BudgetFrequency.BI_WEEKLY: 2,
    BudgetFrequency.ONCE_OFF: 1,
}


def monthly_amount(item: BudgetItem) -> int:
    """
    Monthly equivalent of a budget item.

    Daily items cost `amount x days_per_week x 4`; without days_per_week every
    day of the week counts.
    """
    try:
        frequency = BudgetFrequency(item.frequency)
    except ValueError as e:
        raise InvalidInputError(f"Unknown budget frequency for {item.name!r}: {item.frequency!r}") from e

    if frequency == BudgetFrequency.DAILY:
        days = 7 if item.days_per_week is None else item.days_per_week
        if not 0 <= days <= 7:
            raise InvalidInputError(f"days_per_week must be within 0..7 for {item.name!r}, got {days}")
        return item.amount_cents * days * WEEKS_PER_MONTH

    return item.amount_cents * _MONTHLY_MULTIPLIER[frequency]


def total_monthly_obligations(items: Iterable[BudgetItem]) -> int:
    """Committed spend for one cycle across all budget items"""
    return sum(monthly_amount(item) for item in items)


def bucket_totals(items: Iterable[BudgetItem]) -> BudgetAllocation:
    """Planned monthly spend per bucket; items without a bucket are left out"""
    totals = {bucket: 0 for bucket in BudgetBucket}
    for item in items:
        if item.parent_category is None:
            continue
        try:
            bucket = BudgetBucket(item.parent_category)
        except ValueError as e:
            raise InvalidInputError(f"Unknown budget bucket for {item.name!r}: {item.parent_category!r}") from e
        totals[bucket] += monthly_amount(item)
    return BudgetAllocation(
        needs_cents=totals[BudgetBucket.NEEDS],
        wants_cents=totals[BudgetBucket.WANTS],
        savings_cents=totals[BudgetBucket.SAVINGS],
    )


def validate_percentages(settings: UserSettings) -> None:
    """Percentage-based budgets need non-negative percentages summing to 100"""
    percentages = (settings.needs_percentage, settings.wants_percentage, settings.savings_percentage)
    if any(p < 0 for p in percentages):
        raise InvalidInputError(f"Budget percentages must be non-negative, got {percentages}")
    if settings.budget_method == BudgetMethod.PERCENTAGE_BASED and sum(percentages) != 100:
        raise InvalidInputError(f"Budget percentages must sum to 100, got {sum(percentages)}")


def percentage_allocation(settings: UserSettings, amount_cents: int) -> BudgetAllocation:
    """
    Split an amount by the user's needs/wants/savings percentages.

    Wants and savings are rounded down; needs absorbs the remainder so the
    three parts always add up to the amount. Negative amounts allocate nothing.
    """
    validate_percentages(settings)
    if settings.needs_percentage + settings.wants_percentage + settings.savings_percentage != 100:
        raise InvalidInputError("A percentage split needs percentages summing to 100")
    amount = max(amount_cents, 0)

    wants = amount * settings.wants_percentage // 100
    savings = amount * settings.savings_percentage // 100

    return BudgetAllocation(needs_cents=amount - wants - savings, wants_cents=wants, savings_cents=savings)
