"""Custom exceptions for the Zammad client."""


class ZammadError(Exception):
    """Base exception for Zammad client errors."""


class TokenNotSetError(ZammadError):
    """No API token configured."""


class AuthenticationError(ZammadError):
    """Server rejected the API token (HTTP 401)."""


class ServerError(ZammadError):
    """Server answered with a non-success status code."""

    def __init__(self, status_code: int, message: str | None = None) -> None:
        self.status_code = status_code
        super().__init__(message or f"Server error: status {status_code}")


class DecodingError(ZammadError):
    """Response body could not be decoded into the expected shape."""


class MalformedTicketError(DecodingError):
    """A ticket is missing a field or carries a value of the wrong type."""
