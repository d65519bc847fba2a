"""Write an accepted savings proposal back to the data store, goal by goal"""

import logging
from datetime import date
from typing import Optional, Protocol

from budget_health.domain.exceptions import GoalWriteError
from budget_health.domain.models import ApplyResult, SavingsStatus

logger = logging.getLogger(__name__)


class GoalWriter(Protocol):
    """Store-side update of a single goal; raises GoalWriteError on failure"""

    def update_goal(self, goal_id: str, monthly_allocation_cents: int, due_date: Optional[date]) -> None: ...


def apply_adjustments(status: SavingsStatus, writer: GoalWriter) -> ApplyResult:
    """
    Apply each adjustment sequentially.

    Each goal write is all-or-nothing on its own, but nothing is rolled back
    across goals: a failure is recorded and the next goal is still written.
    Paused goals (no proposed due date) keep their existing due date.
    """
    result = ApplyResult()

    for adjustment in status.adjustments:
        try:
            writer.update_goal(
                adjustment.goal_id,
                adjustment.new_allocation_cents,
                adjustment.proposed_due_date,
            )
        except GoalWriteError as e:
            logger.warning(
                "Goal update failed",
                extra={"goal_id": adjustment.goal_id, "error": str(e)},
            )
            result.failed.append((adjustment.goal_id, str(e)))
        else:
            result.succeeded.append(adjustment.goal_id)

    return result
