"""Application factory wiring the workflows to a presenter and backend client"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from card_tracker.config import settings
from card_tracker.infrastructure.clients.tracker import TrackerClient
from card_tracker.infrastructure.observability.logging import setup_logging
from card_tracker.presentation.presenter import Presenter
from card_tracker.workflows.cards import CardRegistryWorkflow
from card_tracker.workflows.dashboard import DashboardWorkflow
from card_tracker.workflows.settings import SettingsWorkflow

# Setup structured logging
setup_logging(settings.log_level)


@dataclass
class TrackerApp:
    client: TrackerClient
    dashboard: DashboardWorkflow
    cards: CardRegistryWorkflow
    settings: SettingsWorkflow


def create_app(
    presenter: Presenter,
    client: Optional[TrackerClient] = None,
    today: Callable[[], date] = date.today,
) -> TrackerApp:
    """Create the dashboard, card and settings workflows sharing one client"""
    client = client or TrackerClient()
    return TrackerApp(
        client=client,
        dashboard=DashboardWorkflow(client, presenter, today),
        cards=CardRegistryWorkflow(client, presenter, today),
        settings=SettingsWorkflow(client, presenter),
    )
