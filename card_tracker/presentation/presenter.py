"""Boundary between workflows and whatever draws the screen"""

from enum import Enum
from typing import Any, Protocol


class Severity(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Presenter(Protocol):
    """Presentation adapter driven by the workflows

    Views are named ("dashboard", "cards", "card_modal", ...) and receive a view model
    from card_tracker.presentation.view_models, or None to hide the view.
    """

    def render_view(self, name: str, data: Any) -> None: ...

    def show_notification(self, message: str, severity: Severity = Severity.INFO) -> None: ...

    def show_field_error(self, field: str, message: str) -> None: ...

    def clear_field_errors(self) -> None: ...
