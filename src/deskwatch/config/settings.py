"""Environment-driven settings and notification preferences."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from deskwatch.config.exceptions import ConfigError
from deskwatch.diff_engine import NotificationPreferences
from deskwatch.zammad import DEFAULT_OPEN_QUERY

ENV_PREFIX = "DESKWATCH_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_bool(value: str | None, default: bool, name: str = "value") -> bool:
    """Parse a boolean environment value.

    Raises:
        ConfigError: If the value is set but not a recognised boolean.
    """
    if value is None or value.strip() == "":
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def _parse_positive_float(value: str | None, default: float, name: str) -> float:
    if value is None or value.strip() == "":
        return default
    try:
        parsed = float(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e
    if parsed <= 0:
        raise ConfigError(f"{name} must be positive, got {value!r}")
    return parsed


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for deskwatch.

    Attributes:
        server_url: Zammad host or URL.
        api_token: Zammad personal access token.
        db_path: SQLite file holding the snapshot and cycle history.
        poll_interval: Seconds between polling cycles.
        cycle_timeout: Seconds a single cycle may run before it is cancelled.
        query: Ticket search query selecting the watched tickets.
        locale: Language for notification text.
        webhook_url: Optional webhook notifications are posted to.
    """

    server_url: str = ""
    api_token: str = ""
    db_path: str = "deskwatch.db"
    poll_interval: float = 60.0
    cycle_timeout: float = 25.0
    query: str = DEFAULT_OPEN_QUERY
    locale: str = "en"
    webhook_url: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``DESKWATCH_*`` environment variables.

        Raises:
            ConfigError: If a numeric value is invalid.
        """
        env = os.environ if environ is None else environ

        def get(key: str) -> str | None:
            return env.get(ENV_PREFIX + key)

        return cls(
            server_url=get("SERVER_URL") or "",
            api_token=get("API_TOKEN") or "",
            db_path=get("DB_PATH") or cls.db_path,
            poll_interval=_parse_positive_float(
                get("POLL_INTERVAL"), cls.poll_interval, "DESKWATCH_POLL_INTERVAL"
            ),
            cycle_timeout=_parse_positive_float(
                get("CYCLE_TIMEOUT"), cls.cycle_timeout, "DESKWATCH_CYCLE_TIMEOUT"
            ),
            query=get("QUERY") or cls.query,
            locale=get("LOCALE") or cls.locale,
            webhook_url=get("WEBHOOK_URL") or None,
        )

    def validate(self) -> None:
        """Check the settings needed to talk to Zammad.

        Raises:
            ConfigError: If the server URL or API token is missing.
        """
        if not self.server_url:
            raise ConfigError("DESKWATCH_SERVER_URL is not set")
        if not self.api_token:
            raise ConfigError("DESKWATCH_API_TOKEN is not set")


def preferences_from_env(environ: Mapping[str, str] | None = None) -> NotificationPreferences:
    """Read notification toggles from the environment."""
    env = os.environ if environ is None else environ
    toggles = {
        "master_enabled": ("NOTIFY", True),
        "new_ticket_enabled": ("NOTIFY_NEW_TICKETS", True),
        "assignment_enabled": ("NOTIFY_ASSIGNMENTS", True),
        "reply_enabled": ("NOTIFY_REPLIES", True),
        "realtime_mode_enabled": ("REALTIME", False),
    }
    values = {
        field: parse_bool(env.get(ENV_PREFIX + key), default, ENV_PREFIX + key)
        for field, (key, default) in toggles.items()
    }
    return NotificationPreferences(**values)


class PreferencesSource(Protocol):
    """Interface for reading the current notification preferences."""

    def load(self) -> NotificationPreferences:
        """Return the preferences in effect right now."""
        ...


class EnvPreferences:
    """Preferences re-read from the environment on every cycle."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def load(self) -> NotificationPreferences:
        return preferences_from_env(self._environ)


class StaticPreferences:
    """Fixed preferences."""

    def __init__(self, preferences: NotificationPreferences | None = None) -> None:
        self.preferences = preferences or NotificationPreferences()

    def load(self) -> NotificationPreferences:
        return self.preferences
