"""Unit tests for settings and preference loading."""

import pytest

from deskwatch.config import (
    ConfigError,
    EnvPreferences,
    Settings,
    StaticPreferences,
    parse_bool,
    preferences_from_env,
)
from deskwatch.diff_engine import NotificationPreferences
from deskwatch.zammad import DEFAULT_OPEN_QUERY


@pytest.mark.unit
class TestParseBool:
    """Tests for parse_bool."""

    @pytest.mark.parametrize("value", ["1", "true", "Yes", " ON "])
    def test_true_values(self, value: str) -> None:
        assert parse_bool(value, default=False) is True

    @pytest.mark.parametrize("value", ["0", "false", "NO", "off"])
    def test_false_values(self, value: str) -> None:
        assert parse_bool(value, default=True) is False

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_unset_uses_default(self, value) -> None:
        assert parse_bool(value, default=True) is True

    def test_garbage_raises(self) -> None:
        with pytest.raises(ConfigError, match="DESKWATCH_NOTIFY"):
            parse_bool("maybe", default=True, name="DESKWATCH_NOTIFY")


@pytest.mark.unit
class TestSettings:
    """Tests for Settings.from_env and validate."""

    def test_defaults(self) -> None:
        settings = Settings.from_env({})

        assert settings.server_url == ""
        assert settings.db_path == "deskwatch.db"
        assert settings.poll_interval == 60.0
        assert settings.cycle_timeout == 25.0
        assert settings.query == DEFAULT_OPEN_QUERY
        assert settings.locale == "en"
        assert settings.webhook_url is None

    def test_reads_environment(self) -> None:
        settings = Settings.from_env(
            {
                "DESKWATCH_SERVER_URL": "helpdesk.example.com",
                "DESKWATCH_API_TOKEN": "abc",
                "DESKWATCH_DB_PATH": "/var/lib/deskwatch/state.db",
                "DESKWATCH_POLL_INTERVAL": "30",
                "DESKWATCH_CYCLE_TIMEOUT": "12.5",
                "DESKWATCH_QUERY": "state.name:open",
                "DESKWATCH_LOCALE": "nl",
                "DESKWATCH_WEBHOOK_URL": "https://hooks.example.com/x",
            }
        )

        assert settings.server_url == "helpdesk.example.com"
        assert settings.api_token == "abc"
        assert settings.db_path == "/var/lib/deskwatch/state.db"
        assert settings.poll_interval == 30.0
        assert settings.cycle_timeout == 12.5
        assert settings.query == "state.name:open"
        assert settings.locale == "nl"
        assert settings.webhook_url == "https://hooks.example.com/x"

    @pytest.mark.parametrize("value", ["soon", "0", "-5"])
    def test_invalid_interval(self, value: str) -> None:
        with pytest.raises(ConfigError):
            Settings.from_env({"DESKWATCH_POLL_INTERVAL": value})

    def test_validate_requires_server_and_token(self) -> None:
        with pytest.raises(ConfigError, match="SERVER_URL"):
            Settings(api_token="abc").validate()
        with pytest.raises(ConfigError, match="API_TOKEN"):
            Settings(server_url="helpdesk.example.com").validate()

        Settings(server_url="helpdesk.example.com", api_token="abc").validate()


@pytest.mark.unit
class TestPreferences:
    """Tests for preference sources."""

    def test_defaults_all_on_realtime_off(self) -> None:
        assert preferences_from_env({}) == NotificationPreferences()

    def test_reads_toggles(self) -> None:
        prefs = preferences_from_env(
            {
                "DESKWATCH_NOTIFY": "yes",
                "DESKWATCH_NOTIFY_NEW_TICKETS": "off",
                "DESKWATCH_NOTIFY_ASSIGNMENTS": "1",
                "DESKWATCH_NOTIFY_REPLIES": "false",
                "DESKWATCH_REALTIME": "true",
            }
        )

        assert prefs == NotificationPreferences(
            master_enabled=True,
            new_ticket_enabled=False,
            assignment_enabled=True,
            reply_enabled=False,
            realtime_mode_enabled=True,
        )

    def test_env_preferences_reread_each_time(self) -> None:
        """Changes take effect on the next load."""
        environ = {"DESKWATCH_NOTIFY_REPLIES": "on"}
        source = EnvPreferences(environ)
        assert source.load().reply_enabled is True

        environ["DESKWATCH_NOTIFY_REPLIES"] = "off"

        assert source.load().reply_enabled is False

    def test_static_preferences(self) -> None:
        prefs = NotificationPreferences(reply_enabled=False)

        assert StaticPreferences(prefs).load() is prefs
        assert StaticPreferences().load() == NotificationPreferences()
