"""Settings workflow - the Discord webhook URL form"""

import logging
from typing import Dict, Optional

from card_tracker.domain.exceptions import ApiError, ValidationError
from card_tracker.domain.models import WebhookSettings
from card_tracker.domain.validation import WebhookValidation, raise_for_errors, validate_webhook_url
from card_tracker.infrastructure.clients.tracker import TrackerClient
from card_tracker.infrastructure.observability.metrics import record_workflow_outcome
from card_tracker.presentation.presenter import Presenter, Severity
from card_tracker.presentation.view_models import SettingsView

WEBHOOK_FIELD = "discord_webhook_url"


def webhook_errors(url: str) -> Dict[str, str]:
    """Webhook check as field-keyed errors, like the other form validators"""
    result = validate_webhook_url(url)
    return {} if result.valid else {WEBHOOK_FIELD: result.error}


class SettingsWorkflow:
    """Single-field form bound to the settings singleton

    Blur validation is advisory; submit validation blocks. The in-memory settings are
    only replaced by a successful save.
    """

    def __init__(self, client: TrackerClient, presenter: Presenter):
        self.client = client
        self.presenter = presenter
        self.settings: Optional[WebhookSettings] = None
        self.saving = False

    def _render(self, url: Optional[str] = None) -> SettingsView:
        if url is None:
            url = self.settings.discord_webhook_url if self.settings else ""
        view = SettingsView(discord_webhook_url=url, saving=self.saving)
        self.presenter.render_view("settings", view)
        return view

    async def load(self) -> SettingsView:
        try:
            loaded = await self.client.get_settings()
        except ApiError as e:
            logging.warning("Settings unavailable", extra={"operation": e.operation, "error": str(e)})
            self.presenter.show_notification("Failed to load settings", Severity.ERROR)
            return self._render()

        if loaded is not None:
            self.settings = loaded
        self.presenter.clear_field_errors()
        return self._render()

    def on_blur(self, url: str) -> WebhookValidation:
        result = validate_webhook_url(url)
        if result.valid:
            self.presenter.clear_field_errors()
        else:
            self.presenter.show_field_error(WEBHOOK_FIELD, result.error)
        return result

    def on_input(self) -> None:
        self.presenter.clear_field_errors()

    async def submit(self, url: str) -> bool:
        if self.saving:
            return False

        url = url.strip()
        try:
            raise_for_errors(webhook_errors(url))
        except ValidationError as e:
            for name, message in e.errors.items():
                self.presenter.show_field_error(name, message)
            record_workflow_outcome("settings", "invalid")
            return False

        self.presenter.clear_field_errors()
        self.saving = True
        self._render(url)

        try:
            saved = await self.client.put_settings(WebhookSettings(discord_webhook_url=url))
        except ApiError as e:
            self.saving = False
            self._render()
            self.presenter.show_notification(e.user_message or "Failed to save settings", Severity.ERROR)
            record_workflow_outcome("settings", "failed")
            return False

        self.saving = False
        self.settings = saved
        self._render()
        self.presenter.show_notification("Settings saved successfully!", Severity.SUCCESS)
        record_workflow_outcome("settings", "succeeded")
        return True
