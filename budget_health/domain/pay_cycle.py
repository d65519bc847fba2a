"""Pay-cycle arithmetic: next payday, Nth payday and pay periods until a date.

Short-month policy: a payday-of-month beyond the length of a month (e.g. 31 in
February) falls on that month's last day. It never rolls into the following
month, and monthly stepping re-applies the payday per month, so a 31st payday
lands on Feb 28, then Mar 31.
"""

from datetime import date, datetime, timedelta

from budget_health.domain.exceptions import InvalidInputError
from budget_health.domain.models import IncomeCadence
from budget_health.utils.date_utils import clamped_day, shift_month

MIN_PAYDAY = 1
MAX_PAYDAY = 31

CADENCE_STEP_DAYS = {
    IncomeCadence.BI_WEEKLY: 14,
    IncomeCadence.WEEKLY: 7,
}


def ensure_date(value, name: str = "today") -> date:
    """Accept a date (or datetime, truncated); reject anything else"""
    if isinstance(value, datetime):
        return value.date()
    if not isinstance(value, date):
        raise InvalidInputError(f"{name} must be a date, got {type(value).__name__}")
    return value


def clamp_payday(payday_of_month: int) -> int:
    """Validate payday type and clamp it to [1, 31]"""
    if isinstance(payday_of_month, bool) or not isinstance(payday_of_month, int):
        raise InvalidInputError(f"payday_of_month must be an integer, got {payday_of_month!r}")
    return max(MIN_PAYDAY, min(MAX_PAYDAY, payday_of_month))


def _ensure_cadence(cadence) -> IncomeCadence:
    try:
        return IncomeCadence(cadence)
    except ValueError as e:
        raise InvalidInputError(f"Unknown income cadence: {cadence!r}") from e


def next_payday(today: date, payday_of_month: int) -> date:
    """Next payday on or after `today`; rolls to next month once this month's has passed"""
    today = ensure_date(today)
    payday = clamp_payday(payday_of_month)

    candidate = clamped_day(today.year, today.month, payday)
    if candidate >= today:
        return candidate

    year, month = shift_month(today.year, today.month, 1)
    try:
        return clamped_day(year, month, payday)
    except ValueError as e:
        raise InvalidInputError(f"No payday after {today} within the supported calendar") from e


def nth_payday(today: date, payday_of_month: int, cadence: IncomeCadence, n: int) -> date:
    """
    The nth future payday (n=1 is `next_payday`).

    Monthly cadence steps one calendar month at a time, bi-weekly 14 days and
    weekly 7 days, all anchored on the next monthly payday.
    """
    if isinstance(n, bool) or not isinstance(n, int) or n < 1:
        raise InvalidInputError(f"n must be a positive integer, got {n!r}")
    cadence = _ensure_cadence(cadence)
    first = next_payday(today, payday_of_month)

    try:
        if cadence == IncomeCadence.MONTHLY:
            year, month = shift_month(first.year, first.month, n - 1)
            return clamped_day(year, month, clamp_payday(payday_of_month))

        return first + timedelta(days=CADENCE_STEP_DAYS[cadence] * (n - 1))
    except (ValueError, OverflowError) as e:
        raise InvalidInputError(f"Payday {n} from {today} is beyond the supported calendar") from e


def pay_periods_until(
    today: date,
    payday_of_month: int,
    cadence: IncomeCadence,
    target_date: date,
) -> int:
    """Count paydays from the next payday up to and including `target_date`"""
    target_date = ensure_date(target_date, "target_date")
    cadence = _ensure_cadence(cadence)
    first = next_payday(today, payday_of_month)

    if target_date < first:
        return 0

    if cadence != IncomeCadence.MONTHLY:
        return (target_date - first).days // CADENCE_STEP_DAYS[cadence] + 1

    # One payday per calendar month from the first payday's month through the target's
    months = (target_date.year - first.year) * 12 + (target_date.month - first.month)
    in_target_month = clamped_day(target_date.year, target_date.month, clamp_payday(payday_of_month))
    return months + (1 if in_target_month <= target_date else 0)


def days_until_payday(today: date, payday_of_month: int) -> int:
    """Whole days to the next payday, never less than 1 so callers can divide by it"""
    today = ensure_date(today)
    return max((next_payday(today, payday_of_month) - today).days, 1)
