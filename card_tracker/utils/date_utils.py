"""Date manipulation utilities"""

import calendar
import math
from datetime import date, datetime, timedelta

from card_tracker.config import settings


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, clamping day to the last day of the month (31 in April -> 30)"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def add_months(year: int, month: int, months: int) -> tuple[int, int]:
    """Shift a (year, month) pair by a number of months"""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def next_statement_date(statement_day: int, today: date | None = None) -> date:
    """
    Next closing date for a card that closes on statement_day each month.

    The current month's occurrence is returned when it falls on or after today,
    otherwise next month's. Days past the end of a month are clamped to that
    month's last day, so a 31st statement day closes on Apr 30 and Feb 28/29.
    """
    today = today or date.today()
    candidate = clamp_day(today.year, today.month, statement_day)
    if candidate < today:
        year, month = add_months(today.year, today.month, 1)
        candidate = clamp_day(year, month, statement_day)
    return candidate


def recommended_payment_date(due_date: date, offset_days: int | None = None) -> date:
    """Suggested pay-by date: due date minus the configured offset (7 days)"""
    if offset_days is None:
        offset_days = settings.recommended_payment_offset_days
    return due_date - timedelta(days=offset_days)


def days_until_due(statement_date: date | datetime, due_date: date | datetime) -> int:
    """Whole days between statement and due date, rounded up for partial days"""
    delta = due_date - statement_date
    return math.ceil(delta.total_seconds() / 86400)


def days_since(earlier: date, today: date | None = None) -> int:
    """Days elapsed from earlier to today (negative for future dates)"""
    today = today or date.today()
    return (today - earlier).days


def example_cycle_dates(statement_day: int, days_until_due: int, today: date | None = None) -> tuple[date, date]:
    """
    Rebuild a statement/due date pair for a card from its stored cycle fields.

    Only statement_day and days_until_due are stored, so the pair is placed in the
    current month. This is a display approximation for pre-filling edit forms.
    """
    today = today or date.today()
    statement_date = clamp_day(today.year, today.month, statement_day)
    return statement_date, statement_date + timedelta(days=days_until_due)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD, also accepting a trailing time component from the server"""
    return date.fromisoformat(value[:10])
