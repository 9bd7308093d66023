"""Integration tests for the webhook settings workflow"""

import pytest
import httpx
from card_tracker.domain.models import WebhookSettings
from card_tracker.presentation.presenter import Severity
from card_tracker.workflows.settings import WEBHOOK_FIELD, SettingsWorkflow, webhook_errors

WEBHOOK = "https://discord.com/api/webhooks/123/abc"


@pytest.fixture
def workflow(client, presenter) -> SettingsWorkflow:
    return SettingsWorkflow(client, presenter)


async def test_load_renders_current_url(workflow: SettingsWorkflow, presenter, backend):
    backend.state.settings = {"DiscordWebhookURL": WEBHOOK}

    view = await workflow.load()

    assert view.discord_webhook_url == WEBHOOK
    assert presenter.views["settings"].discord_webhook_url == WEBHOOK


async def test_submit_valid_url_replaces_settings(workflow: SettingsWorkflow, presenter, backend):
    await workflow.load()

    saved = await workflow.submit(f"  {WEBHOOK}  ")

    assert saved is True
    assert workflow.settings == WebhookSettings(discord_webhook_url=WEBHOOK)
    assert backend.state.settings == {"DiscordWebhookURL": WEBHOOK}
    assert presenter.last_notification == ("Settings saved successfully!", Severity.SUCCESS)
    assert presenter.views["settings"].saving is False


async def test_submit_blank_disables_notifications(workflow: SettingsWorkflow, backend):
    backend.state.settings = {"DiscordWebhookURL": WEBHOOK}
    await workflow.load()

    assert await workflow.submit("") is True
    assert backend.state.settings == {"DiscordWebhookURL": ""}


async def test_submit_invalid_url_blocks_save(workflow: SettingsWorkflow, presenter, backend):
    saved = await workflow.submit("http://discord.com/api/webhooks/1/a")

    assert saved is False
    assert presenter.field_errors == {WEBHOOK_FIELD: "Discord webhook URL must use HTTPS"}
    assert backend.state.settings == {"DiscordWebhookURL": ""}


def test_blur_is_advisory_and_input_clears(workflow: SettingsWorkflow, presenter):
    result = workflow.on_blur("https://evil.com/api/webhooks/1")

    assert result.valid is False
    assert WEBHOOK_FIELD in presenter.field_errors

    workflow.on_input()
    assert presenter.field_errors == {}

    workflow.on_blur("https://evil.com/api/webhooks/1")
    workflow.on_blur(WEBHOOK)
    assert presenter.field_errors == {}


async def test_failed_save_keeps_prior_value(presenter, mock_client):
    client = mock_client({
        ("GET", "/api/settings"): httpx.Response(200, json={"DiscordWebhookURL": WEBHOOK}),
        ("PUT", "/api/settings"): httpx.Response(500, text="Failed to save settings"),
    })
    workflow = SettingsWorkflow(client, presenter)
    await workflow.load()

    saved = await workflow.submit("https://discordapp.com/api/webhooks/9/z")

    assert saved is False
    assert workflow.settings.discord_webhook_url == WEBHOOK
    assert presenter.views["settings"].discord_webhook_url == WEBHOOK
    assert presenter.last_notification == ("Failed to save settings", Severity.ERROR)


async def test_load_failure_notifies(presenter, mock_client):
    workflow = SettingsWorkflow(mock_client({}), presenter)

    view = await workflow.load()

    assert view.discord_webhook_url == ""
    assert presenter.last_notification == ("Failed to load settings", Severity.ERROR)


def test_webhook_errors_keyed_by_field():
    assert webhook_errors(WEBHOOK) == {}
    assert webhook_errors("") == {}
    assert webhook_errors("https://evil.com/api/webhooks/1") == {
        WEBHOOK_FIELD: "URL must be a Discord webhook (discord.com or discordapp.com)"
    }
