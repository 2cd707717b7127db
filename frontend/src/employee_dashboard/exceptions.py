"""Errors raised by the dashboard client."""

from typing import Any

NETWORK_ERROR_MESSAGE = "Network error or server unavailable"


class APIError(Exception):
    """Non-2xx response from the employee API.

    Attributes:
        message: Server-provided message, or a generic HTTP message
        status: HTTP status code (0 for transport failures)
        data: Parsed error body, if any
    """

    def __init__(self, message: str, status: int, data: dict[str, Any] | None = None) -> None:
        self.message = message
        self.status = status
        self.data = data
        super().__init__(message)

    @property
    def is_validation_error(self) -> bool:
        return self.status == 400

    @property
    def is_not_found_error(self) -> bool:
        return self.status == 404

    @property
    def is_conflict_error(self) -> bool:
        return self.status == 409

    @property
    def is_server_error(self) -> bool:
        return self.status >= 500

    def error_message(self) -> str:
        """Message suitable for a notification.

        Per-field messages from a validation response are joined, otherwise
        the top-level message is used.
        """
        if self.data and self.data.get("errors"):
            return ", ".join(str(error) for error in self.data["errors"])
        return self.message


class NetworkError(APIError):
    """DNS failure, refused connection, timeout or similar."""

    def __init__(self) -> None:
        super().__init__(NETWORK_ERROR_MESSAGE, 0, None)


class ClientValidationError(Exception):
    """Form data rejected before any request was sent."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(", ".join(errors))
