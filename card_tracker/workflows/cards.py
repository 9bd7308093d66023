"""Card registry workflow - add, edit and delete tracked cards"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List, Optional

from card_tracker.domain.exceptions import ApiError, CardNotFoundError, ValidationError
from card_tracker.domain.models import Card, CardForm, Statement
from card_tracker.domain.validation import raise_for_errors, validate_card
from card_tracker.infrastructure.clients.schemas import CardRequest
from card_tracker.infrastructure.clients.tracker import TrackerClient
from card_tracker.infrastructure.observability.metrics import record_workflow_outcome
from card_tracker.presentation.presenter import Presenter, Severity
from card_tracker.presentation.view_models import CardModalView, CardRow, CardTableView, DeleteConfirmationView
from card_tracker.utils.date_utils import example_cycle_dates
from card_tracker.utils.formatting import (
    format_currency,
    format_days,
    format_last_four,
    format_ordinal,
    format_statement_count,
)
from card_tracker.workflows.state import DeleteState, ModalMode, ModalState


@dataclass
class CardModalSession:
    mode: ModalMode
    form: CardForm
    card_id: Optional[int] = None
    state: ModalState = ModalState.OPEN
    errors: Dict[str, str] = field(default_factory=dict)

    def view(self) -> CardModalView:
        editing = self.mode == ModalMode.EDIT
        submitting = self.state == ModalState.SUBMITTING
        if submitting:
            label = "Updating..." if editing else "Saving..."
        else:
            label = "Update Card" if editing else "Save Card"
        return CardModalView(
            title="Edit Credit Card" if editing else "Add Credit Card",
            submit_label=label,
            fields={
                "name": self.form.name,
                "last_four": self.form.last_four,
                "statement_date": self.form.statement_date,
                "due_date": self.form.due_date,
                "credit_limit": self.form.credit_limit,
            },
            submitting=submitting,
        )


@dataclass
class DeleteSession:
    card: Card
    statement_count: int
    state: DeleteState = DeleteState.CONFIRM_OPEN

    def view(self) -> DeleteConfirmationView:
        return DeleteConfirmationView(
            card_id=self.card.id,
            card_name=self.card.name,
            last_four_display=format_last_four(self.card.last_four),
            statement_count_text=format_statement_count(self.statement_count),
            deleting=self.state == DeleteState.DELETING,
        )


def card_table(cards: List[Card]) -> CardTableView:
    """Management table rows, sorted case-insensitively by card name"""
    return CardTableView(
        rows=[
            CardRow(
                card_id=card.id,
                name=card.name,
                last_four_display=format_last_four(card.last_four),
                statement_day_display=format_ordinal(card.statement_day),
                days_until_due_display=format_days(card.days_until_due),
                credit_limit_display=format_currency(card.credit_limit),
            )
            for card in sorted(cards, key=lambda c: c.name.casefold())
        ]
    )


class CardRegistryWorkflow:
    """Card management screen

    Holds the loaded cards and statements plus at most one open card modal and one
    open delete confirmation. Actions are invoked by the presentation layer.
    """

    def __init__(self, client: TrackerClient, presenter: Presenter, today: Callable[[], date] = date.today):
        self.client = client
        self.presenter = presenter
        self.today = today
        self.cards: List[Card] = []
        self.statements: List[Statement] = []
        self.modal: Optional[CardModalSession] = None
        self.deletion: Optional[DeleteSession] = None

    async def _fetch_cards(self) -> List[Card]:
        try:
            return await self.client.list_cards()
        except ApiError as e:
            logging.warning("Cards unavailable", extra={"operation": e.operation, "error": str(e)})
            self.presenter.show_notification("Failed to load credit cards", Severity.ERROR)
            return []

    async def _fetch_statements(self) -> List[Statement]:
        try:
            return await self.client.list_statements()
        except ApiError as e:
            logging.warning("Statements unavailable", extra={"operation": e.operation, "error": str(e)})
            return []

    async def load(self) -> CardTableView:
        self.cards, self.statements = await asyncio.gather(self._fetch_cards(), self._fetch_statements())
        table = card_table(self.cards)
        self.presenter.render_view("cards", table)
        return table

    def find_card(self, card_id: int) -> Card:
        for card in self.cards:
            if card.id == card_id:
                return card
        raise CardNotFoundError(f"Card {card_id} not found")

    def statement_count(self, card_id: int) -> int:
        return sum(1 for stmt in self.statements if stmt.card_id == card_id)

    # Add / edit

    def _open(self, session: CardModalSession) -> CardModalSession:
        self.modal = session
        self.presenter.clear_field_errors()
        self.presenter.render_view("card_modal", session.view())
        return session

    def open_add_card(self) -> CardModalSession:
        return self._open(CardModalSession(mode=ModalMode.ADD, form=CardForm(statement_date=self.today().isoformat())))

    def open_edit_card(self, card_id: int) -> Optional[CardModalSession]:
        """
        Open the modal pre-filled from a card.

        Only statement_day and days_until_due are stored, so the date fields show an
        example cycle placed in the current month rather than the dates last entered.
        """
        try:
            card = self.find_card(card_id)
        except CardNotFoundError:
            self.presenter.show_notification("Card not found", Severity.ERROR)
            return None

        statement_date, due_date = example_cycle_dates(card.statement_day, card.days_until_due, self.today())
        form = CardForm(
            name=card.name,
            last_four=card.last_four,
            statement_date=statement_date.isoformat(),
            due_date=due_date.isoformat(),
            credit_limit=str(card.credit_limit) if card.credit_limit else "",
        )
        return self._open(CardModalSession(mode=ModalMode.EDIT, form=form, card_id=card.id))

    def close_card_modal(self) -> None:
        self.modal = None
        self.presenter.clear_field_errors()
        self.presenter.render_view("card_modal", None)

    async def submit_card(self, form: CardForm) -> bool:
        """
        Validate and save the open modal.

        Field errors keep the modal open with only the violated fields annotated.
        API failures keep it open and re-enabled, with a notification.
        """
        session = self.modal
        if session is None or session.state == ModalState.SUBMITTING:
            return False

        session.form = form
        self.presenter.clear_field_errors()

        try:
            raise_for_errors(validate_card(form))
        except ValidationError as e:
            session.errors = e.errors
            for name, message in e.errors.items():
                self.presenter.show_field_error(name, message)
            record_workflow_outcome("card_modal", "invalid")
            return False
        session.errors = {}

        session.state = ModalState.SUBMITTING
        self.presenter.render_view("card_modal", session.view())
        request = CardRequest.from_form(form)

        try:
            if session.mode == ModalMode.EDIT:
                await self.client.update_card(session.card_id, request)
                message = "Credit card updated successfully"
            else:
                await self.client.create_card(request)
                message = "Credit card created successfully"
        except ApiError as e:
            session.state = ModalState.OPEN
            self.presenter.render_view("card_modal", session.view())
            self.presenter.show_notification(e.user_message or "Failed to save credit card", Severity.ERROR)
            record_workflow_outcome("card_modal", "failed")
            return False

        self.presenter.show_notification(message, Severity.SUCCESS)
        record_workflow_outcome("card_modal", "succeeded")
        self.close_card_modal()
        await self.load()
        return True

    # Delete

    def open_delete_confirmation(self, card_id: int) -> Optional[DeleteSession]:
        """Show the confirmation; a card with statements can still be deleted"""
        try:
            card = self.find_card(card_id)
        except CardNotFoundError:
            self.presenter.show_notification("Card not found", Severity.ERROR)
            return None

        self.deletion = DeleteSession(card=card, statement_count=self.statement_count(card_id))
        self.presenter.render_view("delete_modal", self.deletion.view())
        return self.deletion

    def close_delete_modal(self) -> None:
        self.deletion = None
        self.presenter.render_view("delete_modal", None)

    async def confirm_delete(self) -> bool:
        session = self.deletion
        if session is None or session.state == DeleteState.DELETING:
            return False

        session.state = DeleteState.DELETING
        self.presenter.render_view("delete_modal", session.view())

        try:
            await self.client.delete_card(session.card.id)
        except ApiError as e:
            session.state = DeleteState.CONFIRM_OPEN
            self.presenter.render_view("delete_modal", session.view())
            self.presenter.show_notification(e.user_message or "Failed to delete credit card", Severity.ERROR)
            record_workflow_outcome("delete_card", "failed")
            return False

        self.presenter.show_notification("Credit card deleted successfully", Severity.SUCCESS)
        record_workflow_outcome("delete_card", "succeeded")
        self.close_delete_modal()
        await self.load()
        return True
