"""ZammadClient - Reads the agent's open tickets from the Zammad REST API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from deskwatch.diff_engine import LiveTicket
from deskwatch.logging import sanitize_for_log, truncate_output
from deskwatch.zammad.exceptions import (
    AuthenticationError,
    DecodingError,
    ServerError,
    TokenNotSetError,
    ZammadError,
)
from deskwatch.zammad.models import ZammadUser, parse_ticket, parse_user

logger = logging.getLogger("deskwatch.zammad")

# Every state an agent still has to act on
DEFAULT_OPEN_QUERY = 'state.name:(new OR open OR "pending reminder" OR "pending close")'


def normalize_base_url(server_url: str) -> str:
    """Turn a user-entered server address into the API base URL.

    ``helpdesk.example.com`` becomes ``https://helpdesk.example.com/api/v1/``.
    """
    url = server_url.strip()
    if not url.lower().startswith("http"):
        url = "https://" + url
    url = url.rstrip("/")
    if not url.endswith("/api/v1"):
        url += "/api/v1"
    return url + "/"


class ZammadClient:
    """Client for the subset of the Zammad REST API needed for polling.

    Uses token authentication (``Authorization: Token token=...``).
    """

    def __init__(
        self,
        server_url: str,
        token: str,
        query: str = DEFAULT_OPEN_QUERY,
        per_page: int = 200,
        timeout: float = 120.0,
    ) -> None:
        """Initialize the Zammad client.

        Args:
            server_url: Zammad host or URL; normalized to the ``/api/v1/`` base.
            token: Personal access token of the agent.
            query: Search query selecting the tickets to watch.
            per_page: Page size for ticket search.
            timeout: HTTP timeout in seconds.
        """
        self.base_url = normalize_base_url(server_url)
        self.token = token
        self.query = query
        self.per_page = per_page
        self.timeout = timeout
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if not self.token:
            raise TokenNotSetError("Zammad API token is not configured")
        if self._client is None:
            self._client = httpx.Client(
                headers={
                    "Authorization": f"Token token={self.token}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> ZammadClient:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """Issue a GET request and decode the JSON body.

        Raises:
            AuthenticationError: On HTTP 401.
            ServerError: On any other non-2xx status.
            DecodingError: If the body is not JSON.
            ZammadError: On transport failures.
        """
        url = self.base_url + endpoint
        try:
            response = self.client.get(url, params=params)
        except httpx.HTTPError as e:
            raise ZammadError(f"Request to {endpoint} failed: {e}") from e

        if response.status_code == 401:
            raise AuthenticationError("Authentication failed, check the API token")
        if not 200 <= response.status_code < 300:
            logger.error(
                "Server error (%d) for %s: %s",
                response.status_code,
                endpoint,
                truncate_output(sanitize_for_log(response.text)),
            )
            raise ServerError(response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise DecodingError(f"Response from {endpoint} is not valid JSON") from e

    def fetch_current_user(self) -> ZammadUser:
        """Get the agent that owns the API token."""
        return parse_user(self._get("users/me"))

    def search_tickets(self, query: str | None = None) -> list[LiveTicket]:
        """Search tickets and return them as LiveTicket objects.

        Args:
            query: Search query. Defaults to the client's configured query.

        Raises:
            MalformedTicketError: If any ticket lacks a field needed for diffing.
            DecodingError: If the response has an unexpected shape.
        """
        params = {
            "query": query or self.query,
            "expand": "true",
            "per_page": self.per_page,
        }
        data = self._get("tickets/search", params=params)
        tickets = [parse_ticket(entry) for entry in _ticket_entries(data)]
        logger.info("Fetched %d ticket(s)", len(tickets))
        return tickets

    def fetch_open_tickets_and_user(self) -> tuple[int, list[LiveTicket]]:
        """Get the current user id and the open tickets to diff."""
        user = self.fetch_current_user()
        tickets = self.search_tickets()
        return user.id, tickets


def _ticket_entries(data: Any) -> list[Any]:
    """Extract ticket objects from either search response shape.

    With ``expand=true`` Zammad returns a plain list. Older servers ignore it
    and return ``{"tickets": [ids], "assets": {"Ticket": {id: {...}}}}``.
    """
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("tickets"), list):
        assets = (data.get("assets") or {}).get("Ticket") or {}
        try:
            return [assets[str(ticket_id)] for ticket_id in data["tickets"]]
        except KeyError as e:
            raise DecodingError(f"Ticket {e.args[0]} missing from search assets") from e
    raise DecodingError("Unexpected ticket search response shape")
