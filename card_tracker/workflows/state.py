"""Modal session states shared by the workflows"""

from enum import Enum


class ModalMode(str, Enum):
    ADD = "add"
    EDIT = "edit"


class ModalState(str, Enum):
    """Lifecycle of an open modal: open -> submitting, then closed (session dropped) or back to open

    A closed modal has no session object at all.
    """

    OPEN = "open"
    SUBMITTING = "submitting"


class DeleteState(str, Enum):
    CONFIRM_OPEN = "confirm_open"
    DELETING = "deleting"
