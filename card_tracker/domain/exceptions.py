"""Domain-specific exceptions"""

from typing import Dict, Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Form input violates field rules; never sent to the backend"""

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__(", ".join(f"{field}: {message}" for field, message in errors.items()))


class CardNotFoundError(DomainException):
    """Action referenced a card id missing from the loaded collection"""

    pass


class ApiError(DomainException):
    """Backend call failed

    user_message is the text the backend wants shown to the user, if it sent one.
    """

    kind = "unknown"

    def __init__(self, operation: str, message: str, user_message: Optional[str] = None):
        self.operation = operation
        self.user_message = user_message
        super().__init__(message)


class NetworkError(ApiError):
    """Transport failure: connection refused, DNS, timeout"""

    kind = "network"


class HttpError(ApiError):
    """Backend answered with a non-2xx status"""

    kind = "http"

    def __init__(self, operation: str, status: int, body: str, user_message: Optional[str] = None):
        self.status = status
        self.body = body
        super().__init__(operation, f"Failed to {operation}: {status}", user_message)


class DecodeError(ApiError):
    """Backend answered 2xx but the body is not the expected JSON"""

    kind = "decode"
