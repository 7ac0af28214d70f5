"""Data models for the Zammad client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from deskwatch.diff_engine import LiveTicket
from deskwatch.zammad.exceptions import DecodingError, MalformedTicketError


@dataclass
class ZammadUser:
    """The authenticated agent (``users/me``)."""

    id: int
    firstname: str = ""
    lastname: str = ""
    email: str = ""
    role_ids: list[int] = field(default_factory=list)

    @property
    def fullname(self) -> str:
        return f"{self.firstname} {self.lastname}".strip()


def _require_int(payload: dict[str, Any], key: str) -> int:
    value = payload.get(key)
    # bool is an int subclass but never a valid id
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedTicketError(f"Ticket field '{key}' must be an integer, got {value!r}")
    return value


def parse_ticket(payload: Any) -> LiveTicket:
    """Build a LiveTicket from one ``tickets/search`` entry.

    Raises:
        MalformedTicketError: If a field needed for diffing is missing or mistyped.
    """
    if not isinstance(payload, dict):
        raise MalformedTicketError(f"Ticket entry must be an object, got {type(payload).__name__}")

    ticket_id = _require_int(payload, "id")
    owner_id = _require_int(payload, "owner_id")

    updated_at = payload.get("updated_at")
    if not isinstance(updated_at, str) or not updated_at:
        raise MalformedTicketError(f"Ticket {ticket_id} has no valid 'updated_at'")

    number = payload.get("number")
    if isinstance(number, int) and not isinstance(number, bool):
        number = str(number)
    if not isinstance(number, str) or not number:
        raise MalformedTicketError(f"Ticket {ticket_id} has no valid 'number'")

    title = payload.get("title") or ""
    if not isinstance(title, str):
        raise MalformedTicketError(f"Ticket {ticket_id} has a non-string 'title'")

    return LiveTicket(
        id=ticket_id,
        owner_id=owner_id,
        updated_at=updated_at,
        number=number,
        title=title,
    )


def parse_user(payload: Any) -> ZammadUser:
    """Build a ZammadUser from the ``users/me`` response.

    Raises:
        DecodingError: If the payload has no integer ``id``.
    """
    if not isinstance(payload, dict):
        raise DecodingError("User response must be an object")
    user_id = payload.get("id")
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise DecodingError(f"User response has no valid 'id': {user_id!r}")
    return ZammadUser(
        id=user_id,
        firstname=payload.get("firstname") or "",
        lastname=payload.get("lastname") or "",
        email=payload.get("email") or "",
        role_ids=list(payload.get("role_ids") or []),
    )
