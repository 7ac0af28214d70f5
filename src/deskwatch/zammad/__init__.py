"""Zammad client - Fetches the current agent and their open tickets."""

from deskwatch.zammad.client import DEFAULT_OPEN_QUERY, ZammadClient, normalize_base_url
from deskwatch.zammad.exceptions import (
    AuthenticationError,
    DecodingError,
    MalformedTicketError,
    ServerError,
    TokenNotSetError,
    ZammadError,
)
from deskwatch.zammad.models import ZammadUser, parse_ticket, parse_user

__all__ = [
    "DEFAULT_OPEN_QUERY",
    "AuthenticationError",
    "DecodingError",
    "MalformedTicketError",
    "ServerError",
    "TokenNotSetError",
    "ZammadClient",
    "ZammadError",
    "ZammadUser",
    "normalize_base_url",
    "parse_ticket",
    "parse_user",
]
