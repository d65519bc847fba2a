"""Savings shortfall detection and goal allocation reallocation"""

from datetime import date
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from budget_health.domain.budget_items import total_monthly_obligations
from budget_health.domain.models import (
    BudgetItem,
    FinancialSnapshot,
    Goal,
    GoalAdjustment,
    SavingsAdjustmentStrategy,
    SavingsStatus,
    UserSettings,
)
from budget_health.domain.pay_cycle import clamp_payday, ensure_date, nth_payday
from budget_health.domain.validation import ensure_strategy, validate_goals


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def apportion(amount: int, weights: Sequence[int]) -> List[int]:
    """
    Split `amount` cents across weights with largest-remainder rounding.

    Parts always sum to `amount`. Leftover cents go to the largest fractional
    remainders; ties go to the later (lower-priority) position first.
    """
    total = sum(weights)
    if total <= 0:
        raise ValueError("apportion needs a positive total weight")

    parts = [amount * w // total for w in weights]
    remainders = [amount * w % total for w in weights]
    leftover = amount - sum(parts)

    order = sorted(range(len(weights)), key=lambda i: (-remainders[i], -i))
    for i in order[:leftover]:
        parts[i] += 1
    return parts


def _clamp_and_redistribute(
    allocations: List[int],
    shortfall: int,
    weight_of: Callable[[int], int],
) -> List[int]:
    """
    Cut allocations by weighted shares of the shortfall, never below 0.

    Whatever a clamped goal could not absorb is shared again across the goals
    still above 0, until the shortfall is gone or every goal is at 0.
    """
    new_allocations = list(allocations)
    remaining = shortfall

    while remaining > 0:
        active = [i for i, allocation in enumerate(new_allocations) if allocation > 0]
        if not active:
            break

        cuts = apportion(remaining, [weight_of(i) for i in active])
        for i, cut in zip(active, cuts):
            taken = min(cut, new_allocations[i])
            new_allocations[i] -= taken
            remaining -= taken

    return new_allocations


def _reduce_evenly(allocations: List[int], shortfall: int) -> List[int]:
    return _clamp_and_redistribute(allocations, shortfall, lambda i: 1)


def _reduce_proportionally(allocations: List[int], shortfall: int) -> List[int]:
    # Weighted by the original allocation, so bigger goals give up more
    return _clamp_and_redistribute(allocations, shortfall, lambda i: allocations[i])


def _reduce_by_inverse_priority(allocations: List[int], shortfall: int) -> List[int]:
    """Drain the lowest-priority goal first, then the next one up"""
    new_allocations = list(allocations)
    remaining = shortfall
    for i in reversed(range(len(new_allocations))):
        if remaining <= 0:
            break
        taken = min(new_allocations[i], remaining)
        new_allocations[i] -= taken
        remaining -= taken
    return new_allocations


STRATEGY_HANDLERS: Dict[SavingsAdjustmentStrategy, Callable[[List[int], int], List[int]]] = {
    SavingsAdjustmentStrategy.EVEN_DISTRIBUTION: _reduce_evenly,
    SavingsAdjustmentStrategy.PROPORTIONAL: _reduce_proportionally,
    SavingsAdjustmentStrategy.INVERSE_PRIORITY: _reduce_by_inverse_priority,
}


def calculate_timeline_extension(goal: Goal, new_allocation_cents: int) -> Tuple[Optional[int], int]:
    """
    Extra pay cycles needed to reach the target at the new allocation.

    Returns (extension, cycles_at_new_rate). A new allocation of 0 never
    reaches the target: extension is None and cycles is 0.
    """
    remaining = goal.remaining_cents
    if remaining <= 0:
        return 0, 0
    if new_allocation_cents <= 0:
        return None, 0

    original_cycles = _ceil_div(remaining, goal.monthly_allocation_cents)
    new_cycles = _ceil_div(remaining, new_allocation_cents)
    return new_cycles - original_cycles, new_cycles


def evaluate_savings(
    goals: Sequence[Goal],
    snapshot: FinancialSnapshot,
    settings: UserSettings,
    today: date,
    budget_items: Sequence[BudgetItem] = (),
) -> SavingsStatus:
    """
    Compare committed outflows with the available balance and, on a
    shortfall, propose reduced goal allocations under the user's strategy.

    Expected balance is every goal allocation plus the monthly budget
    obligations. Allocations still going to completed goals are cut first
    (lowest priority first); the strategy then shares what is left across
    the goals still in progress. Goals with nothing allocated are left
    alone. Only goals that actually lose allocation appear in `adjustments`,
    in priority order.
    """
    today = ensure_date(today)
    clamp_payday(settings.payday_of_month)
    validate_goals(goals)
    strategy = ensure_strategy(settings.savings_adjustment_strategy)

    expected_balance = sum(g.monthly_allocation_cents for g in goals) + total_monthly_obligations(budget_items)
    available_balance = snapshot.available_balance_cents
    shortfall = max(expected_balance - available_balance, 0)

    if shortfall == 0:
        return SavingsStatus(
            has_shortfall=False,
            expected_balance_cents=expected_balance,
            available_balance_cents=available_balance,
            shortfall_cents=0,
            strategy=strategy,
        )

    funded = [g for g in goals if g.monthly_allocation_cents > 0]
    completed = [g for g in funded if g.is_complete]
    in_progress = [g for g in funded if not g.is_complete]

    # Completed goals fund nothing: their allocations are cut before any strategy runs
    completed_allocations = _reduce_by_inverse_priority([g.monthly_allocation_cents for g in completed], shortfall)
    remaining = shortfall - sum(g.monthly_allocation_cents for g in completed) + sum(completed_allocations)

    new_allocation_of = {g.goal_id: allocation for g, allocation in zip(completed, completed_allocations)}
    if in_progress and remaining > 0:
        proposed = STRATEGY_HANDLERS[strategy]([g.monthly_allocation_cents for g in in_progress], remaining)
        new_allocation_of.update((g.goal_id, allocation) for g, allocation in zip(in_progress, proposed))

    adjustments = []
    for goal in funded:
        new_allocation = new_allocation_of.get(goal.goal_id, goal.monthly_allocation_cents)
        reduction = goal.monthly_allocation_cents - new_allocation
        if reduction <= 0:
            continue

        extension, new_cycles = calculate_timeline_extension(goal, new_allocation)
        due_date = (
            nth_payday(today, settings.payday_of_month, settings.income_cadence, new_cycles)
            if new_cycles > 0
            else None
        )
        adjustments.append(
            GoalAdjustment(
                goal_id=goal.goal_id,
                goal_name=goal.name,
                current_allocation_cents=goal.monthly_allocation_cents,
                new_allocation_cents=new_allocation,
                reduction_cents=reduction,
                timeline_extension_months=extension,
                needs_review=new_allocation == 0 and not goal.is_complete,
                proposed_due_date=due_date,
            )
        )

    absorbed = sum(a.reduction_cents for a in adjustments)
    return SavingsStatus(
        has_shortfall=True,
        expected_balance_cents=expected_balance,
        available_balance_cents=available_balance,
        shortfall_cents=shortfall,
        strategy=strategy,
        adjustments=adjustments,
        unabsorbed_shortfall_cents=shortfall - absorbed,
    )
