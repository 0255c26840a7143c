"""Exceptions raised by the analytics client and dashboard controller."""


class ExpenseFlowError(Exception):
    """Base class for all ExpenseFlow errors."""


class AuthError(ExpenseFlowError):
    """No bearer token is available. Raised before any request is sent."""

    def __init__(self, message: str = "No authentication token found"):
        super().__init__(message)


class TransportError(ExpenseFlowError):
    """The analytics API answered with a non-2xx status or could not be reached.

    Attributes:
        status_code: HTTP status, or None when no response was received.
        status_text: Reason phrase or transport error description.
        endpoint: API endpoint that failed.
    """

    def __init__(
        self,
        status_code: int | None,
        status_text: str,
        endpoint: str | None = None,
    ):
        self.status_code = status_code
        self.status_text = status_text
        self.endpoint = endpoint
        if status_code is None:
            message = f"API request failed: {status_text}"
        else:
            message = f"API request failed: {status_code} {status_text}"
        super().__init__(message)


class DriverError(ExpenseFlowError):
    """The dashboard could not launch or join its widget tasks."""
