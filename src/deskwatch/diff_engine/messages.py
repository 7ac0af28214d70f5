"""Localized notification text."""

from __future__ import annotations

from typing import Any

DEFAULT_LOCALE = "en"

_CATALOGS: dict[str, dict[str, str]] = {
    "en": {
        "new_ticket_title": "New ticket",
        "new_ticket_body": "Ticket #{number} has been created.",
        "new_assignment_title": "Ticket assigned to you",
        "new_assignment_body": "Ticket #{number} is now assigned to you.",
        "new_reply_title": "New reply",
        "new_reply_body": "Ticket #{number} has a new reply.",
        "summary_title": "{count} new ticket updates",
        "summary_line": "#{number} {title}",
    },
    "nl": {
        "new_ticket_title": "Nieuw ticket",
        "new_ticket_body": "Ticket #{number} is aangemaakt.",
        "new_assignment_title": "Ticket aan jou toegewezen",
        "new_assignment_body": "Ticket #{number} is nu aan jou toegewezen.",
        "new_reply_title": "Nieuwe reactie",
        "new_reply_body": "Ticket #{number} heeft een nieuwe reactie.",
        "summary_title": "{count} nieuwe ticketupdates",
        "summary_line": "#{number} {title}",
    },
}


class MessageCatalog:
    """Template lookup for one locale, falling back to English."""

    def __init__(self, locale: str = DEFAULT_LOCALE) -> None:
        language = locale.split("_")[0].split("-")[0].lower() if locale else DEFAULT_LOCALE
        self.locale = language if language in _CATALOGS else DEFAULT_LOCALE
        self._templates = _CATALOGS[self.locale]

    def format(self, key: str, **values: Any) -> str:
        """Render the template ``key`` with ``values``.

        Raises:
            KeyError: If ``key`` is not a known message.
        """
        template = self._templates.get(key) or _CATALOGS[DEFAULT_LOCALE][key]
        return template.format(**values).strip()

    @staticmethod
    def available_locales() -> list[str]:
        """Return the supported locale codes."""
        return sorted(_CATALOGS)
