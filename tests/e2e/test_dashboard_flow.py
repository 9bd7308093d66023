"""End-to-end tests driving the dashboard through the app factory and in-memory backend"""

import logging
import pytest
import httpx
from datetime import date
from card_tracker.app import TrackerApp, create_app
from card_tracker.domain.models import CardForm, StatementForm
from card_tracker.infrastructure.clients.schemas import CardRequest
from card_tracker.presentation.presenter import Severity
from card_tracker.workflows.state import ModalState


@pytest.fixture
def app(client, presenter, today) -> TrackerApp:
    return create_app(presenter, client=client, today=lambda: today)


async def add_card(app: TrackerApp, name: str, statement_date: str, due_date: str):
    form = CardForm(name=name, last_four="4242", statement_date=statement_date, due_date=due_date)
    return await app.client.create_card(CardRequest.from_form(form))


async def test_new_card_needs_statement_entry(app: TrackerApp, presenter):
    """Test one card, no statements: action required, no pending payments, placeholder detail"""
    await add_card(app, "A", "2024-10-15", "2024-11-09")

    view = await app.dashboard.load()

    assert [item.card_name for item in view.action_required] == ["A"]
    assert view.pending_payments == []
    assert view.detail.card_name == "A"
    assert view.detail.due_date_display == "---"
    assert view.detail.amount_display == "N/A"
    assert [row.display_date for row in view.upcoming] == ["Nov 15"]
    assert presenter.views["dashboard"] is view


async def test_empty_backend_renders_empty_dashboard(app: TrackerApp):
    view = await app.dashboard.load()

    assert view.upcoming == []
    assert view.all_caught_up is True
    assert view.detail is None


async def test_enter_statement_then_schedule_payment(app: TrackerApp, presenter, backend):
    card = await add_card(app, "Amex Gold", "2024-10-05", "2024-10-26")
    await app.dashboard.load()

    entry = app.dashboard.open_statement_entry(card.id)
    assert entry.form.statement_date == "2024-11-10"
    assert presenter.views["statement_modal"].card_name == "Amex Gold"

    created = await app.dashboard.submit_statement(
        StatementForm(statement_date="2024-11-05", due_date="2024-11-26", amount="842.17")
    )

    assert created is True
    assert app.dashboard.entry is None
    assert presenter.views["statement_modal"] is None
    view = presenter.views["dashboard"]
    assert view.all_caught_up is True
    [row] = view.pending_payments
    assert row.amount_display == "$842.17"
    assert row.days_until_due_display == "21 days"
    assert row.recommended_payment_date == date(2024, 11, 19)
    assert view.detail.recommended_display == "Nov 19"

    scheduled = await app.dashboard.schedule_payment(row.statement_id)

    assert scheduled is True
    assert backend.state.statements[row.statement_id]["scheduled_payment_date"] == "2024-11-19"
    assert presenter.views["dashboard"].pending_payments[0].scheduled_payment_date == date(2024, 11, 19)

    again = await app.dashboard.schedule_payment(row.statement_id, date(2024, 11, 20))

    assert again is False
    assert presenter.last_notification == ("Payment is already scheduled for this statement", Severity.ERROR)
    assert backend.state.statements[row.statement_id]["scheduled_payment_date"] == "2024-11-19"


async def test_statement_entry_validation_keeps_modal_open(app: TrackerApp, presenter, backend):
    card = await add_card(app, "Amex Gold", "2024-10-05", "2024-10-26")
    await app.dashboard.load()
    app.dashboard.open_statement_entry(card.id)

    created = await app.dashboard.submit_statement(
        StatementForm(statement_date="2024-11-05", due_date="2024-11-01", amount="")
    )

    assert created is False
    assert set(presenter.field_errors) == {"due_date", "amount"}
    assert app.dashboard.entry is not None
    assert backend.state.statements == {}


async def test_statement_entry_overflowing_amount_is_a_field_error(app: TrackerApp, presenter, backend):
    card = await add_card(app, "Amex Gold", "2024-10-05", "2024-10-26")
    await app.dashboard.load()
    app.dashboard.open_statement_entry(card.id)

    created = await app.dashboard.submit_statement(
        StatementForm(statement_date="2024-11-05", due_date="2024-11-26", amount="1e400")
    )

    assert created is False
    assert presenter.field_errors == {"amount": "Statement amount must be a number"}
    assert app.dashboard.entry.state == ModalState.OPEN
    assert presenter.views["statement_modal"].submitting is False
    assert backend.state.statements == {}


async def test_submit_statement_leaves_caller_form_untouched(app: TrackerApp, presenter):
    card = await add_card(app, "Amex Gold", "2024-10-05", "2024-10-26")
    await app.dashboard.load()
    app.dashboard.open_statement_entry(card.id)
    form = StatementForm(statement_date="2024-11-05", due_date="2024-11-01", amount="842.17")

    await app.dashboard.submit_statement(form)

    assert form.card_id is None
    assert app.dashboard.entry.form.card_id == card.id
    assert app.dashboard.entry.form is not form


async def test_statement_entry_server_rejection_notifies(app: TrackerApp, presenter):
    card = await add_card(app, "Amex Gold", "2024-10-05", "2024-10-26")
    await app.dashboard.load()
    app.dashboard.open_statement_entry(card.id)

    # backend refuses zero amounts
    created = await app.dashboard.submit_statement(
        StatementForm(statement_date="2024-11-05", due_date="2024-11-26", amount="0")
    )

    assert created is False
    assert presenter.last_notification == ("amount must be greater than 0", Severity.ERROR)
    assert presenter.views["statement_modal"].submitting is False


async def test_statements_failure_degrades_to_cards_only(presenter, mock_client, today, caplog):
    client = mock_client({
        ("GET", "/api/v1/cards"): httpx.Response(
            200, json=[{"id": 1, "name": "A", "last_four": "1111", "statement_day": 15, "days_until_due": 25}]
        ),
        ("GET", "/api/v1/statements"): httpx.Response(500, text="Internal server error"),
    })
    app = create_app(presenter, client=client, today=lambda: today)

    with caplog.at_level(logging.WARNING):
        view = await app.dashboard.load()

    assert [item.card_id for item in view.action_required] == [1]
    assert view.pending_payments == []
    assert app.dashboard.statements == []
    [record] = [r for r in caplog.records if r.getMessage() == "Dashboard statements unavailable"]
    assert record.operation == "fetch statements"
    assert record.error == "Failed to fetch statements: 500"


async def test_open_statement_entry_unknown_card(app: TrackerApp, presenter):
    await app.dashboard.load()

    assert app.dashboard.open_statement_entry(99) is None
    assert presenter.last_notification == ("Card not found", Severity.ERROR)
