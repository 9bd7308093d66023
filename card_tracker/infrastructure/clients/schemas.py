"""Pydantic schemas for request bodies sent to the tracker backend"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from card_tracker.domain.models import STATUS_PENDING, CardForm, StatementForm, WebhookSettings
from card_tracker.domain.validation import parse_form_amount, parse_form_date


class CardRequest(BaseModel):
    """Body for POST /api/v1/cards and PUT /api/v1/cards/{id}

    The backend derives statement_day and days_until_due from the two dates.
    """

    name: str = Field(..., min_length=2, max_length=255)
    last_four: str = Field(..., pattern=r"^\d{4}$")
    statement_date: date
    due_date: date
    credit_limit: Optional[float] = Field(None, ge=0)

    @classmethod
    def from_form(cls, form: CardForm) -> "CardRequest":
        """Build from an already validated form"""
        credit_limit = parse_form_amount(form.credit_limit) if form.credit_limit.strip() else None
        return cls(
            name=form.name.strip(),
            last_four=form.last_four.strip(),
            statement_date=parse_form_date(form.statement_date),
            due_date=parse_form_date(form.due_date),
            credit_limit=float(credit_limit) if credit_limit is not None else None,
        )


class StatementRequest(BaseModel):
    """Body for POST /api/v1/statements"""

    card_id: int
    statement_date: date
    due_date: date
    amount: float = Field(..., ge=0)
    status: str = STATUS_PENDING

    @classmethod
    def from_form(cls, form: StatementForm) -> "StatementRequest":
        return cls(
            card_id=form.card_id,
            statement_date=parse_form_date(form.statement_date),
            due_date=parse_form_date(form.due_date),
            amount=float(parse_form_amount(form.amount)),
        )


class ScheduleRequest(BaseModel):
    """Body for PUT /api/v1/statements/{id}/schedule"""

    scheduled_payment_date: date


class SettingsPayload(BaseModel):
    """Body and response for /api/settings"""

    model_config = ConfigDict(populate_by_name=True)

    discord_webhook_url: Optional[str] = Field("", alias="DiscordWebhookURL")

    @classmethod
    def from_settings(cls, webhook_settings: WebhookSettings) -> "SettingsPayload":
        return cls(discord_webhook_url=webhook_settings.discord_webhook_url)
