"""Dashboard aggregation - derives the dashboard panels from cards and statements"""

import logging
from datetime import date
from typing import Dict, List, Optional

from card_tracker.config import settings
from card_tracker.domain.models import Card, Statement
from card_tracker.presentation.view_models import (
    ActionItem,
    CardDetailView,
    DashboardView,
    PendingPaymentRow,
    UpcomingStatementRow,
)
from card_tracker.utils.date_utils import days_since, days_until_due, next_statement_date, recommended_payment_date
from card_tracker.utils.formatting import DATE_PLACEHOLDER, format_currency, format_days, format_short_date


def upcoming_statements(cards: List[Card], today: date, limit: Optional[int] = None) -> List[UpcomingStatementRow]:
    """
    Cards ordered by their next closing date, soonest first.

    sorted() is stable, so cards closing on the same day keep their original order.
    """
    if limit is None:
        limit = settings.upcoming_statements_limit

    dated = [(next_statement_date(card.statement_day, today), card) for card in cards]
    dated.sort(key=lambda pair: pair[0])

    return [
        UpcomingStatementRow(
            card_id=card.id,
            card_name=card.name,
            next_statement_date=closing,
            display_date=format_short_date(closing),
        )
        for closing, card in dated[:limit]
    ]


def needs_statement_entry(
    card: Card, statements: List[Statement], today: date, window_days: Optional[int] = None
) -> bool:
    """True when the card has no statement dated within the last window_days (inclusive)"""
    if window_days is None:
        window_days = settings.action_required_window_days

    return not any(
        stmt.card_id == card.id and days_since(stmt.statement_date, today) <= window_days
        for stmt in statements
    )


def action_required(
    cards: List[Card], statements: List[Statement], today: date, window_days: Optional[int] = None
) -> List[ActionItem]:
    """Cards lacking a recent statement, in original card order"""
    return [
        ActionItem(card_id=card.id, card_name=card.name)
        for card in cards
        if needs_statement_entry(card, statements, today, window_days)
    ]


def pending_payments(cards: List[Card], statements: List[Statement]) -> List[PendingPaymentRow]:
    """
    Pending statements ordered by due date.

    A statement whose card is not in the collection is skipped and logged.
    """
    cards_by_id: Dict[int, Card] = {card.id: card for card in cards}
    rows = []

    for stmt in sorted((s for s in statements if s.is_pending), key=lambda s: s.due_date):
        card = cards_by_id.get(stmt.card_id)
        if card is None:
            logging.warning(
                "Skipping pending statement with unknown card",
                extra={"statement_id": stmt.id, "card_id": stmt.card_id},
            )
            continue

        recommended = recommended_payment_date(stmt.due_date)
        cycle_days = days_until_due(stmt.statement_date, stmt.due_date)
        rows.append(
            PendingPaymentRow(
                statement_id=stmt.id,
                card_id=card.id,
                card_name=card.name,
                amount_display=format_currency(stmt.amount),
                due_date=stmt.due_date,
                recommended_payment_date=recommended,
                recommended_display=format_short_date(recommended),
                days_until_due=cycle_days,
                days_until_due_display=format_days(cycle_days),
                scheduled_payment_date=stmt.scheduled_payment_date,
            )
        )

    return rows


def latest_statement(card: Card, statements: List[Statement]) -> Optional[Statement]:
    """Most recent statement for the card by statement date"""
    own = [stmt for stmt in statements if stmt.card_id == card.id]
    return max(own, key=lambda stmt: stmt.statement_date, default=None)


def select_detail_card(cards: List[Card], statements: List[Statement]) -> Optional[Card]:
    """First card with a pending statement, else the first card, else None"""
    if not cards:
        return None

    pending_card_ids = {stmt.card_id for stmt in statements if stmt.is_pending}
    return next((card for card in cards if card.id in pending_card_ids), cards[0])


def card_detail(card: Card, statement: Optional[Statement]) -> CardDetailView:
    if statement is None:
        return CardDetailView(
            card_id=card.id,
            card_name=card.name,
            due_date_display=DATE_PLACEHOLDER,
            amount_display=format_currency(None),
        )

    return CardDetailView(
        card_id=card.id,
        card_name=card.name,
        due_date_display=format_short_date(statement.due_date),
        amount_display=format_currency(statement.amount),
        recommended_display=format_short_date(recommended_payment_date(statement.due_date)),
    )


def build_dashboard(cards: List[Card], statements: List[Statement], today: date) -> DashboardView:
    """
    Main entry point: derive every dashboard panel from the loaded collections.

    Panels:
    - upcoming: next closing date per card, soonest first, capped
    - action_required: cards with no statement in the recent window
    - pending_payments: pending statements by due date with recommended pay-by date
    - detail: headline card and its latest statement (None when there are no cards)
    """
    detail = None
    detail_card = select_detail_card(cards, statements)
    if detail_card is not None:
        detail = card_detail(detail_card, latest_statement(detail_card, statements))

    return DashboardView(
        upcoming=upcoming_statements(cards, today),
        action_required=action_required(cards, statements, today),
        pending_payments=pending_payments(cards, statements),
        detail=detail,
    )
