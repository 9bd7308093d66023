"""Tracker backend HTTP client for cards, statements and settings"""

import time
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

import httpx

from card_tracker.config import settings
from card_tracker.domain.exceptions import ApiError, DecodeError, HttpError, NetworkError
from card_tracker.domain.models import Card, Statement, WebhookSettings
from card_tracker.infrastructure.clients.schemas import (
    CardRequest,
    ScheduleRequest,
    SettingsPayload,
    StatementRequest,
)
from card_tracker.infrastructure.observability.logging import log_api_call
from card_tracker.infrastructure.observability.metrics import api_failure_counter, api_request_latency_histogram
from card_tracker.utils.date_utils import parse_iso_date

CARDS_PATH = "/api/v1/cards"
STATEMENTS_PATH = "/api/v1/statements"
SETTINGS_PATH = "/api/settings"


def parse_card(data: Dict[str, Any]) -> Card:
    credit_limit = data.get("credit_limit")
    return Card(
        id=int(data["id"]),
        name=data["name"],
        last_four=data["last_four"],
        statement_day=int(data["statement_day"]),
        days_until_due=int(data["days_until_due"]),
        credit_limit=Decimal(str(credit_limit)) if credit_limit is not None else None,
    )


def parse_statement(data: Dict[str, Any]) -> Statement:
    scheduled = data.get("scheduled_payment_date")
    return Statement(
        id=int(data["id"]),
        card_id=int(data["card_id"]),
        statement_date=parse_iso_date(data["statement_date"]),
        due_date=parse_iso_date(data["due_date"]),
        amount=Decimal(str(data["amount"])),
        status=data["status"],
        scheduled_payment_date=parse_iso_date(scheduled) if scheduled else None,
    )


def parse_settings(data: Any) -> Optional[WebhookSettings]:
    if data is None:
        return None
    payload = SettingsPayload.model_validate(data)
    return WebhookSettings(discord_webhook_url=payload.discord_webhook_url or "")


def _list_of(parse: Callable[[Dict[str, Any]], Any]) -> Callable[[Any], List[Any]]:
    def parse_list(data: Any) -> List[Any]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise TypeError(f"expected a JSON array, got {type(data).__name__}")
        return [parse(item) for item in data]

    return parse_list


def _error_message(response: httpx.Response) -> Optional[str]:
    """User-facing message from a JSON {"error": ...} body, if the backend sent one"""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
        return body["error"]
    return None


class TrackerClient:
    """Client for the card tracker backend API

    Every call either returns parsed domain objects or raises an ApiError subclass:
    NetworkError, HttpError or DecodeError. Nothing is retried or cached.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.api_base_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def _call(
        self,
        operation: str,
        method: str,
        path: str,
        parse: Callable[[Any], Any],
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        start_time = time.perf_counter()
        status = None

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            ) as client:
                try:
                    with api_request_latency_histogram.labels(operation=operation).time():
                        response = await client.request(method, path, json=json)
                except httpx.TimeoutException as e:
                    raise NetworkError(operation, f"Failed to {operation}: timeout after {self.timeout}s") from e
                except httpx.RequestError as e:
                    raise NetworkError(operation, f"Failed to {operation}: {e}") from e

            status = response.status_code
            if not response.is_success:
                raise HttpError(operation, status, response.text, _error_message(response))

            try:
                data = response.json() if response.content else None
                result = parse(data)
            except (KeyError, ValueError, TypeError, ArithmeticError) as e:
                raise DecodeError(operation, f"Invalid response to {operation}: {e}") from e

        except ApiError as e:
            api_failure_counter.labels(operation=operation, kind=e.kind).inc()
            log_api_call(operation, method, path, (time.perf_counter() - start_time) * 1000, status, str(e))
            raise

        log_api_call(operation, method, path, (time.perf_counter() - start_time) * 1000, status)
        return result

    async def list_cards(self) -> List[Card]:
        return await self._call("fetch cards", "GET", CARDS_PATH, _list_of(parse_card))

    async def create_card(self, card: CardRequest) -> Card:
        return await self._call(
            "create card", "POST", CARDS_PATH, parse_card, json=card.model_dump(mode="json", exclude_none=True)
        )

    async def update_card(self, card_id: int, card: CardRequest) -> Card:
        return await self._call(
            "update card",
            "PUT",
            f"{CARDS_PATH}/{card_id}",
            parse_card,
            json=card.model_dump(mode="json", exclude_none=True),
        )

    async def delete_card(self, card_id: int) -> bool:
        """Delete a card; the backend removes its statements too"""
        return await self._call("delete card", "DELETE", f"{CARDS_PATH}/{card_id}", lambda data: True)

    async def list_statements(self) -> List[Statement]:
        return await self._call("fetch statements", "GET", STATEMENTS_PATH, _list_of(parse_statement))

    async def create_statement(
        self, card_id: int, statement_date: date, due_date: date, amount: Decimal | float
    ) -> Statement:
        """Record a statement; the backend stores it as pending"""
        body = StatementRequest(card_id=card_id, statement_date=statement_date, due_date=due_date, amount=float(amount))
        return await self._call(
            "create statement", "POST", STATEMENTS_PATH, parse_statement, json=body.model_dump(mode="json")
        )

    async def schedule_payment(self, statement_id: int, scheduled_date: date) -> Statement:
        body = ScheduleRequest(scheduled_payment_date=scheduled_date)
        return await self._call(
            "schedule payment",
            "PUT",
            f"{STATEMENTS_PATH}/{statement_id}/schedule",
            parse_statement,
            json=body.model_dump(mode="json"),
        )

    async def get_settings(self) -> Optional[WebhookSettings]:
        return await self._call("fetch settings", "GET", SETTINGS_PATH, parse_settings)

    async def put_settings(self, webhook_settings: WebhookSettings) -> WebhookSettings:
        body = SettingsPayload.from_settings(webhook_settings)
        saved = await self._call(
            "save settings", "PUT", SETTINGS_PATH, parse_settings, json=body.model_dump(by_alias=True)
        )
        return saved if saved is not None else webhook_settings
