"""In-memory tracker backend serving the card, statement and settings API for tests"""

from datetime import date, datetime, timezone
from itertools import count
from typing import Dict, Optional

from fastapi import FastAPI, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field


class CardIn(BaseModel):
    name: str
    last_four: str
    statement_date: date
    due_date: date
    credit_limit: Optional[float] = None


class StatementIn(BaseModel):
    card_id: int
    statement_date: date
    due_date: date
    amount: float
    status: str = "pending"


class ScheduleIn(BaseModel):
    scheduled_payment_date: date


class SettingsIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    discord_webhook_url: str = Field("", alias="DiscordWebhookURL")


def error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app() -> FastAPI:
    """Fresh backend with empty storage"""
    app = FastAPI(title="Mock Card Tracker Backend", version="1.0.0")
    cards: Dict[int, dict] = {}
    statements: Dict[int, dict] = {}
    card_ids = count(1)
    statement_ids = count(1)
    app.state.cards = cards
    app.state.statements = statements
    app.state.settings = {"DiscordWebhookURL": ""}

    def card_fields(body: CardIn) -> dict | JSONResponse:
        if not 2 <= len(body.name) <= 255:
            return error(400, "name must be between 2 and 255 characters")
        if len(body.last_four) != 4 or not body.last_four.isdigit():
            return error(400, "last_four must be exactly 4 digits")
        if body.due_date <= body.statement_date:
            return error(400, "due_date must be after statement_date")
        fields = {
            "name": body.name,
            "last_four": body.last_four,
            "statement_day": body.statement_date.day,
            "days_until_due": (body.due_date - body.statement_date).days,
        }
        if body.credit_limit:
            fields["credit_limit"] = body.credit_limit
        return fields

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/api/v1/cards")
    def list_cards():
        return list(cards.values())

    @app.post("/api/v1/cards")
    def create_card(body: CardIn):
        fields = card_fields(body)
        if isinstance(fields, JSONResponse):
            return fields
        card_id = next(card_ids)
        cards[card_id] = {"id": card_id, **fields, "created_at": datetime.now(timezone.utc).isoformat()}
        return cards[card_id]

    @app.put("/api/v1/cards/{card_id}")
    def update_card(card_id: int, body: CardIn):
        if card_id not in cards:
            return error(404, "Card not found")
        fields = card_fields(body)
        if isinstance(fields, JSONResponse):
            return fields
        cards[card_id] = {"id": card_id, **fields}
        return cards[card_id]

    @app.delete("/api/v1/cards/{card_id}")
    def delete_card(card_id: int):
        if cards.pop(card_id, None) is None:
            return error(404, "Card not found")
        for statement_id in [s["id"] for s in statements.values() if s["card_id"] == card_id]:
            del statements[statement_id]
        return Response(status_code=204)

    @app.get("/api/v1/statements")
    def list_statements():
        return list(statements.values())

    @app.post("/api/v1/statements")
    def create_statement(body: StatementIn):
        if body.card_id not in cards:
            return error(400, "card_id does not exist")
        if body.amount <= 0:
            return error(400, "amount must be greater than 0")
        statement_id = next(statement_ids)
        statements[statement_id] = {
            "id": statement_id,
            "card_id": body.card_id,
            "statement_date": body.statement_date.isoformat(),
            "due_date": body.due_date.isoformat(),
            "amount": body.amount,
            "status": "pending",
            "notified_statement": False,
            "notified_payment": False,
        }
        return statements[statement_id]

    @app.put("/api/v1/statements/{statement_id}/schedule")
    def schedule_payment(statement_id: int, body: ScheduleIn):
        if statement_id not in statements:
            return error(404, "Statement not found")
        statements[statement_id]["scheduled_payment_date"] = body.scheduled_payment_date.isoformat()
        return statements[statement_id]

    @app.get("/api/settings")
    def get_settings():
        return app.state.settings

    @app.put("/api/settings")
    def put_settings(body: SettingsIn):
        url = body.discord_webhook_url
        if url and not url.startswith(("https://discord.com/api/webhooks/", "https://discordapp.com/api/webhooks/")):
            return error(
                400,
                "discord webhook URL must start with https://discord.com/api/webhooks/ "
                "or https://discordapp.com/api/webhooks/",
            )
        app.state.settings = {"DiscordWebhookURL": url}
        return app.state.settings

    return app


app = create_app()
