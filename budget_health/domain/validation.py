"""Structural input checks shared by the scoring and savings engines"""

from typing import Sequence

from budget_health.domain.exceptions import InvalidInputError
from budget_health.domain.models import Goal, SavingsAdjustmentStrategy


def validate_goals(goals: Sequence[Goal]) -> None:
    """Reject goals that cannot be planned against (non-positive target, negative amounts, duplicate ids)"""
    seen = set()
    for goal in goals:
        if goal.target_cents <= 0:
            raise InvalidInputError(f"Goal {goal.goal_id} has a non-positive target: {goal.target_cents}")
        if goal.saved_cents < 0:
            raise InvalidInputError(f"Goal {goal.goal_id} has a negative saved amount: {goal.saved_cents}")
        if goal.monthly_allocation_cents < 0:
            raise InvalidInputError(
                f"Goal {goal.goal_id} has a negative allocation: {goal.monthly_allocation_cents}"
            )
        if goal.goal_id in seen:
            raise InvalidInputError(f"Duplicate goal id: {goal.goal_id}")
        seen.add(goal.goal_id)


def ensure_strategy(strategy) -> SavingsAdjustmentStrategy:
    try:
        return SavingsAdjustmentStrategy(strategy)
    except ValueError as e:
        raise InvalidInputError(f"Unknown savings adjustment strategy: {strategy!r}") from e
