"""View models - plain data handed to the presentation adapter"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional


@dataclass
class UpcomingStatementRow:
    card_id: int
    card_name: str
    next_statement_date: date
    display_date: str


@dataclass
class ActionItem:
    """Card that needs its latest statement entered"""

    card_id: int
    card_name: str


@dataclass
class PendingPaymentRow:
    statement_id: int
    card_id: int
    card_name: str
    amount_display: str
    due_date: date
    recommended_payment_date: date
    recommended_display: str
    days_until_due: int
    days_until_due_display: str
    scheduled_payment_date: Optional[date] = None


@dataclass
class CardDetailView:
    """Headline card panel; placeholders when the card has no statements"""

    card_id: int
    card_name: str
    due_date_display: str
    amount_display: str
    recommended_display: Optional[str] = None

    @property
    def show_recommended(self) -> bool:
        return self.recommended_display is not None


@dataclass
class DashboardView:
    upcoming: List[UpcomingStatementRow] = field(default_factory=list)
    action_required: List[ActionItem] = field(default_factory=list)
    pending_payments: List[PendingPaymentRow] = field(default_factory=list)
    detail: Optional[CardDetailView] = None

    @property
    def all_caught_up(self) -> bool:
        return not self.action_required


@dataclass
class CardRow:
    card_id: int
    name: str
    last_four_display: str
    statement_day_display: str
    days_until_due_display: str
    credit_limit_display: str


@dataclass
class CardTableView:
    rows: List[CardRow] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows


@dataclass
class CardModalView:
    title: str
    submit_label: str
    fields: Dict[str, str]
    submitting: bool = False


@dataclass
class DeleteConfirmationView:
    card_id: int
    card_name: str
    last_four_display: str
    statement_count_text: str
    deleting: bool = False


@dataclass
class StatementEntryView:
    card_id: int
    card_name: str
    fields: Dict[str, str]
    submitting: bool = False


@dataclass
class SettingsView:
    discord_webhook_url: str
    saving: bool = False
