"""Tests for environment-driven settings."""

from pathlib import Path

from bulletin.config import Settings


class TestFromEnv:

    def test_defaults(self, monkeypatch):
        for name in ("PORT", "HOST", "ADMIN_PASSWORD", "DATA_FILE", "REQUIRE_ADMIN_AUTH", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()
        assert settings.port == 3000
        assert settings.admin_password == "admin2024"
        assert settings.data_file == Path("data.json")
        assert settings.require_admin_auth is False

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("ADMIN_PASSWORD", "hunter2")
        monkeypatch.setenv("DATA_FILE", "/var/lib/board/data.json")
        monkeypatch.setenv("REQUIRE_ADMIN_AUTH", "yes")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings.from_env()
        assert settings.port == 8080
        assert settings.admin_password == "hunter2"
        assert settings.data_file == Path("/var/lib/board/data.json")
        assert settings.require_admin_auth is True
        assert settings.log_level == "DEBUG"
