"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta
from typing import List


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def shift_month(year: int, month: int, months: int) -> tuple[int, int]:
    """Move (year, month) by a number of months, either direction"""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def clamped_day(year: int, month: int, day: int) -> date:
    """Date for `day` in the given month, falling back to the month's last day"""
    return date(year, month, min(day, days_in_month(year, month)))
