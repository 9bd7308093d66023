"""Display formatting for days, money and card numbers"""

from datetime import date
from decimal import Decimal

NOT_APPLICABLE = "N/A"
DATE_PLACEHOLDER = "---"


def format_ordinal(day: int) -> str:
    """1 -> 1st, 2 -> 2nd, 11 -> 11th, 21 -> 21st, 111 -> 111th"""
    if day % 100 in (11, 12, 13):
        return f"{day}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_currency(amount: Decimal | float | int | None) -> str:
    """USD with two decimals and thousands separators; zero or missing is N/A"""
    if amount is None or amount == 0:
        return NOT_APPLICABLE
    value = Decimal(str(amount)).quantize(Decimal("0.01"))
    if value < 0:
        return f"-${-value:,.2f}"
    return f"${value:,.2f}"


def format_last_four(digits: str) -> str:
    return f"•••• {digits}"


def format_short_date(value: date | None) -> str:
    """Month abbreviation and day, e.g. Nov 5"""
    if value is None:
        return DATE_PLACEHOLDER
    return f"{value.strftime('%b')} {value.day}"


def format_days(days: int) -> str:
    return f"{days} day" if days == 1 else f"{days} days"


def format_statement_count(count: int) -> str:
    noun = "statement" if count == 1 else "statements"
    return f"This card has {count} {noun}."
