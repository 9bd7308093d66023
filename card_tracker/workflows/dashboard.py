"""Dashboard workflow - loads data, enters statements and schedules payments"""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Callable, List, Optional

from card_tracker.domain.dashboard import build_dashboard
from card_tracker.domain.exceptions import ApiError, ValidationError
from card_tracker.domain.models import Card, Statement, StatementForm
from card_tracker.domain.validation import parse_form_amount, parse_form_date, raise_for_errors, validate_statement
from card_tracker.infrastructure.clients.tracker import TrackerClient
from card_tracker.infrastructure.observability.metrics import record_workflow_outcome
from card_tracker.presentation.presenter import Presenter, Severity
from card_tracker.presentation.view_models import DashboardView, StatementEntryView
from card_tracker.utils.date_utils import recommended_payment_date
from card_tracker.workflows.state import ModalState


@dataclass
class StatementEntrySession:
    """Open "enter statement data" modal for one card"""

    card_id: int
    card_name: str
    form: StatementForm
    state: ModalState = ModalState.OPEN
    errors: dict = field(default_factory=dict)

    def view(self) -> StatementEntryView:
        return StatementEntryView(
            card_id=self.card_id,
            card_name=self.card_name,
            fields={
                "statement_date": self.form.statement_date,
                "due_date": self.form.due_date,
                "amount": self.form.amount,
            },
            submitting=self.state == ModalState.SUBMITTING,
        )


class DashboardWorkflow:
    """At-a-glance dashboard

    Cards and statements are fetched concurrently and replaced wholesale on every load.
    A failed fetch degrades that collection to empty so the dashboard always renders.
    """

    def __init__(self, client: TrackerClient, presenter: Presenter, today: Callable[[], date] = date.today):
        self.client = client
        self.presenter = presenter
        self.today = today
        self.cards: List[Card] = []
        self.statements: List[Statement] = []
        self.view: Optional[DashboardView] = None
        self.entry: Optional[StatementEntrySession] = None

    async def _fetch_cards(self) -> List[Card]:
        try:
            return await self.client.list_cards()
        except ApiError as e:
            logging.warning("Dashboard cards unavailable", extra={"operation": e.operation, "error": str(e)})
            return []

    async def _fetch_statements(self) -> List[Statement]:
        try:
            return await self.client.list_statements()
        except ApiError as e:
            logging.warning("Dashboard statements unavailable", extra={"operation": e.operation, "error": str(e)})
            return []

    async def load(self) -> DashboardView:
        self.cards, self.statements = await asyncio.gather(self._fetch_cards(), self._fetch_statements())
        self.view = build_dashboard(self.cards, self.statements, self.today())
        self.presenter.render_view("dashboard", self.view)
        return self.view

    # Statement entry

    def open_statement_entry(self, card_id: int) -> Optional[StatementEntrySession]:
        card = next((c for c in self.cards if c.id == card_id), None)
        if card is None:
            self.presenter.show_notification("Card not found", Severity.ERROR)
            return None

        self.entry = StatementEntrySession(
            card_id=card.id,
            card_name=card.name,
            form=StatementForm(card_id=card.id, statement_date=self.today().isoformat()),
        )
        self.presenter.clear_field_errors()
        self.presenter.render_view("statement_modal", self.entry.view())
        return self.entry

    def close_statement_entry(self) -> None:
        self.entry = None
        self.presenter.clear_field_errors()
        self.presenter.render_view("statement_modal", None)

    async def submit_statement(self, form: StatementForm) -> bool:
        """Validate and record a statement; the modal stays open on any failure"""
        entry = self.entry
        if entry is None or entry.state == ModalState.SUBMITTING:
            return False

        form = replace(form, card_id=entry.card_id)
        entry.form = form
        self.presenter.clear_field_errors()

        try:
            raise_for_errors(validate_statement(form))
        except ValidationError as e:
            entry.errors = e.errors
            for name, message in e.errors.items():
                self.presenter.show_field_error(name, message)
            record_workflow_outcome("statement_entry", "invalid")
            return False
        entry.errors = {}

        entry.state = ModalState.SUBMITTING
        self.presenter.render_view("statement_modal", entry.view())

        try:
            await self.client.create_statement(
                entry.card_id,
                parse_form_date(form.statement_date),
                parse_form_date(form.due_date),
                parse_form_amount(form.amount),
            )
        except ApiError as e:
            entry.state = ModalState.OPEN
            self.presenter.render_view("statement_modal", entry.view())
            self.presenter.show_notification(
                e.user_message or "Failed to create statement. Please try again.", Severity.ERROR
            )
            record_workflow_outcome("statement_entry", "failed")
            return False

        await self.load()
        self.close_statement_entry()
        self.presenter.show_notification("Statement created successfully!", Severity.SUCCESS)
        record_workflow_outcome("statement_entry", "succeeded")
        return True

    # Payment scheduling

    async def schedule_payment(self, statement_id: int, scheduled_date: Optional[date] = None) -> bool:
        """
        Commit a pay date for a pending statement.

        Defaults to the recommended payment date. A statement is scheduled at most
        once; there is no reschedule or unschedule.
        """
        statement = next((s for s in self.statements if s.id == statement_id), None)
        if statement is None:
            self.presenter.show_notification("Statement not found", Severity.ERROR)
            return False

        if statement.is_scheduled:
            self.presenter.show_notification("Payment is already scheduled for this statement", Severity.ERROR)
            return False

        if scheduled_date is None:
            scheduled_date = recommended_payment_date(statement.due_date)

        try:
            await self.client.schedule_payment(statement_id, scheduled_date)
        except ApiError as e:
            self.presenter.show_notification(e.user_message or "Failed to schedule payment", Severity.ERROR)
            record_workflow_outcome("schedule_payment", "failed")
            return False

        self.presenter.show_notification("Payment scheduled successfully", Severity.SUCCESS)
        record_workflow_outcome("schedule_payment", "succeeded")
        await self.load()
        return True
