"""Form validation rules for cards, statements and webhook settings

Validators return field-keyed error messages; an empty dict means the input is valid.
They never raise, so callers decide whether a failure blocks or is advisory.
"""

import math
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, NamedTuple, Optional

import httpx

from card_tracker.domain.exceptions import ValidationError
from card_tracker.domain.models import CardForm, StatementForm

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 255
LAST_FOUR_PATTERN = re.compile(r"[0-9]{4}")

WEBHOOK_HOSTS = ("discord.com", "discordapp.com")
WEBHOOK_PATH_PREFIX = "/api/webhooks/"


class WebhookValidation(NamedTuple):
    valid: bool
    error: str = ""


def parse_form_date(value: str) -> Optional[date]:
    """Parse a YYYY-MM-DD form value; None when blank or malformed"""
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def parse_form_amount(value: str) -> Optional[Decimal]:
    """Parse a money form value; None when blank, malformed or not representable as a JSON number"""
    try:
        amount = Decimal(value.strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or not math.isfinite(float(amount)):
        return None
    return amount


def raise_for_errors(errors: Dict[str, str]) -> None:
    """Raise ValidationError when a validator reported any field errors"""
    if errors:
        raise ValidationError(errors)


def _validate_date_pair(
    errors: Dict[str, str], statement_value: str, due_value: str, statement_label: str, due_label: str
) -> None:
    statement_date = due_date = None

    if not statement_value.strip():
        errors["statement_date"] = f"{statement_label} is required"
    else:
        statement_date = parse_form_date(statement_value)
        if statement_date is None:
            errors["statement_date"] = f"{statement_label} must be a valid date (YYYY-MM-DD)"

    if not due_value.strip():
        errors["due_date"] = f"{due_label} is required"
    else:
        due_date = parse_form_date(due_value)
        if due_date is None:
            errors["due_date"] = f"{due_label} must be a valid date (YYYY-MM-DD)"
        elif statement_date is not None and due_date <= statement_date:
            errors["due_date"] = f"{due_label} must be after {statement_label.lower()}"


def validate_card(form: CardForm) -> Dict[str, str]:
    """
    Validate the add/edit card form.

    Rules:
    - name: 2-255 characters after trimming
    - last_four: exactly 4 digits
    - statement_date, due_date: required, due strictly after statement
    - credit_limit: optional, non-negative when given
    """
    errors: Dict[str, str] = {}

    name = form.name.strip()
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        errors["name"] = f"Card name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"

    if not LAST_FOUR_PATTERN.fullmatch(form.last_four.strip()):
        errors["last_four"] = "Last four must be exactly 4 digits"

    _validate_date_pair(errors, form.statement_date, form.due_date, "Last statement date", "Last due date")

    if form.credit_limit.strip():
        credit_limit = parse_form_amount(form.credit_limit)
        if credit_limit is None:
            errors["credit_limit"] = "Credit limit must be a number"
        elif credit_limit < 0:
            errors["credit_limit"] = "Credit limit must be non-negative"

    return errors


def validate_statement(form: StatementForm) -> Dict[str, str]:
    """Validate the "enter statement data" form: every field required, due after statement"""
    errors: Dict[str, str] = {}

    if not form.card_id:
        errors["card_id"] = "Card is required"

    _validate_date_pair(errors, form.statement_date, form.due_date, "Statement date", "Due date")

    if not form.amount.strip():
        errors["amount"] = "Statement amount is required"
    else:
        amount = parse_form_amount(form.amount)
        if amount is None:
            errors["amount"] = "Statement amount must be a number"
        elif amount < 0:
            errors["amount"] = "Statement amount must be non-negative"

    return errors


def validate_webhook_url(url: Optional[str]) -> WebhookValidation:
    """
    Validate a Discord webhook URL.

    Blank is valid and disables notifications. Otherwise the URL must be https,
    hosted on discord.com or discordapp.com, under /api/webhooks/.
    """
    if url is None or not url.strip():
        return WebhookValidation(True)

    try:
        parsed = httpx.URL(url.strip())
    except httpx.InvalidURL:
        return WebhookValidation(False, "Invalid URL format")

    if not parsed.scheme or not parsed.host:
        return WebhookValidation(False, "Invalid URL format")

    if parsed.scheme != "https":
        return WebhookValidation(False, "Discord webhook URL must use HTTPS")

    if parsed.host not in WEBHOOK_HOSTS:
        return WebhookValidation(False, "URL must be a Discord webhook (discord.com or discordapp.com)")

    if not parsed.path.startswith(WEBHOOK_PATH_PREFIX):
        return WebhookValidation(
            False, "URL must be a valid Discord webhook URL (must contain /api/webhooks/)"
        )

    return WebhookValidation(True)
