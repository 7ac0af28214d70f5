"""Custom exceptions for notifiers."""


class NotifierError(Exception):
    """Base exception for notifier errors."""


class DeliveryError(NotifierError):
    """A notification could not be delivered."""
