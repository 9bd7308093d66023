"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import httpx
from fastapi import FastAPI

from card_tracker.domain.models import Card, Statement
from card_tracker.infrastructure.clients.tracker import TrackerClient
from card_tracker.presentation.presenter import Severity
from mock_api.main import create_app as create_backend


TODAY = date(2024, 11, 10)


class RecordingPresenter:
    """Presenter that remembers everything the workflows asked it to show"""

    def __init__(self) -> None:
        self.views: Dict[str, Any] = {}
        self.renders: List[Tuple[str, Any]] = []
        self.notifications: List[Tuple[str, Severity]] = []
        self.field_errors: Dict[str, str] = {}

    def render_view(self, name: str, data: Any) -> None:
        self.views[name] = data
        self.renders.append((name, data))

    def show_notification(self, message: str, severity: Severity = Severity.INFO) -> None:
        self.notifications.append((message, severity))

    def show_field_error(self, field: str, message: str) -> None:
        self.field_errors[field] = message

    def clear_field_errors(self) -> None:
        self.field_errors.clear()

    @property
    def last_notification(self) -> Optional[Tuple[str, Severity]]:
        return self.notifications[-1] if self.notifications else None


def json_routes(routes: Dict[Tuple[str, str], httpx.Response]):
    """Handler answering (method, path) pairs with canned responses, 404 otherwise"""

    def handler(request: httpx.Request) -> httpx.Response:
        return routes.get((request.method, request.url.path), httpx.Response(404, json={"error": "not found"}))

    return handler


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def mock_client():
    """Factory for clients backed by httpx.MockTransport

    Accepts either a request handler or a {(method, path): response} mapping.
    """

    def factory(handler) -> TrackerClient:
        if isinstance(handler, dict):
            handler = json_routes(handler)
        return TrackerClient(base_url="http://tracker.test", transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def backend() -> FastAPI:
    """Fresh in-memory backend per test"""
    return create_backend()


@pytest.fixture
def client(backend: FastAPI) -> TrackerClient:
    """Client talking to the in-memory backend over ASGI"""
    return TrackerClient(base_url="http://testserver", transport=httpx.ASGITransport(app=backend))


@pytest.fixture
def sample_cards() -> list[Card]:
    return [
        Card(id=1, name="Chase Sapphire", last_four="1234", statement_day=15, days_until_due=25),
        Card(id=2, name="Amex Gold", last_four="5678", statement_day=5, days_until_due=21, credit_limit=Decimal("10000")),
        Card(id=3, name="Citi Double Cash", last_four="9012", statement_day=28, days_until_due=25),
    ]


@pytest.fixture
def sample_statements() -> list[Statement]:
    return [
        Statement(
            id=10,
            card_id=2,
            statement_date=date(2024, 11, 5),
            due_date=date(2024, 11, 26),
            amount=Decimal("842.17"),
            status="pending",
        ),
        Statement(
            id=11,
            card_id=2,
            statement_date=date(2024, 10, 5),
            due_date=date(2024, 10, 26),
            amount=Decimal("512.00"),
            status="paid",
        ),
        Statement(
            id=12,
            card_id=3,
            statement_date=date(2024, 10, 28),
            due_date=date(2024, 11, 22),
            amount=Decimal("120.50"),
            status="pending",
        ),
    ]
