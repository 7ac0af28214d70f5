"""Notification sinks: where a cycle's aggregated notification ends up."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from deskwatch.notifier.exceptions import DeliveryError

logger = logging.getLogger("deskwatch.notifier")


class NotificationSink(Protocol):
    """Interface for anything that can show a notification to the agent."""

    def deliver(
        self,
        title: str,
        body: str,
        ticket_id: int | None = None,
        badge_count: int = 1,
    ) -> None:
        """Show one notification. May raise NotifierError."""
        ...


class LogNotifier:
    """Writes notifications to the log. Default sink when nothing else is set up."""

    def deliver(
        self,
        title: str,
        body: str,
        ticket_id: int | None = None,
        badge_count: int = 1,
    ) -> None:
        logger.info(
            "Notification [badge=%d, ticket=%s] %s: %s",
            badge_count,
            ticket_id,
            title,
            body.replace("\n", " | "),
        )


class WebhookNotifier:
    """Posts notifications as JSON to an HTTP endpoint (ntfy, Slack relay, ...)."""

    def __init__(self, url: str, timeout: float = 10.0) -> None:
        """Initialize the webhook notifier.

        Args:
            url: Endpoint receiving ``{title, body, ticket_id, badge}``.
            timeout: HTTP timeout in seconds.
        """
        self.url = url
        self.timeout = timeout
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout)
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def deliver(
        self,
        title: str,
        body: str,
        ticket_id: int | None = None,
        badge_count: int = 1,
    ) -> None:
        """POST the notification.

        Raises:
            DeliveryError: On transport failure or a non-2xx response.
        """
        payload: dict[str, Any] = {
            "title": title,
            "body": body,
            "ticket_id": ticket_id,
            "badge": badge_count,
        }
        try:
            response = self.client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            raise DeliveryError(f"Webhook request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise DeliveryError(f"Webhook returned status {response.status_code}")
        logger.debug("Delivered notification to webhook (ticket=%s)", ticket_id)


@dataclass
class DeliveredNotification:
    """A notification captured by RecordingNotifier."""

    title: str
    body: str
    ticket_id: int | None
    badge_count: int


class RecordingNotifier:
    """Keeps delivered notifications in memory (dry runs and tests)."""

    def __init__(self) -> None:
        self.delivered: list[DeliveredNotification] = []

    def deliver(
        self,
        title: str,
        body: str,
        ticket_id: int | None = None,
        badge_count: int = 1,
    ) -> None:
        self.delivered.append(DeliveredNotification(title, body, ticket_id, badge_count))
