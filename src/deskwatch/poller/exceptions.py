"""Exceptions for the Poller module."""


class PollerError(Exception):
    """Base exception for poller errors."""

    pass


class CycleCancelledError(PollerError):
    """The cycle was cancelled or ran past its deadline."""

    pass
