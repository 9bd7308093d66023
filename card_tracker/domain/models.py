"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

STATUS_PENDING = "pending"


@dataclass
class Card:
    """Tracked credit card with a monthly billing cycle"""

    id: int
    name: str
    last_four: str
    statement_day: int  # 1-31
    days_until_due: int
    credit_limit: Optional[Decimal] = None


@dataclass
class Statement:
    """One billing cycle for a card"""

    id: int
    card_id: int
    statement_date: date
    due_date: date
    amount: Decimal
    status: str  # "pending", "paid", "overdue"
    scheduled_payment_date: Optional[date] = None

    @property
    def is_pending(self) -> bool:
        return self.status == STATUS_PENDING

    @property
    def is_scheduled(self) -> bool:
        return self.scheduled_payment_date is not None


@dataclass
class WebhookSettings:
    """Singleton notification settings; empty URL disables Discord notifications"""

    discord_webhook_url: str = ""


@dataclass
class CardForm:
    """Raw card form input as typed by the user"""

    name: str = ""
    last_four: str = ""
    statement_date: str = ""  # YYYY-MM-DD
    due_date: str = ""  # YYYY-MM-DD
    credit_limit: str = ""


@dataclass
class StatementForm:
    """Raw "enter statement data" form input"""

    card_id: Optional[int] = None
    statement_date: str = ""
    due_date: str = ""
    amount: str = ""
