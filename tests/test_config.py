"""Tests for configuration helpers and the server entry point."""

from unittest.mock import patch

from calendar_oauth_app import main
from calendar_oauth_app.config import Settings, _as_bool, _first_env, settings


class TestAsBool:
    def test_truthy(self) -> None:
        for value in ("1", "true", "YES", " on "):
            assert _as_bool(value) is True

    def test_falsy(self) -> None:
        assert _as_bool("0") is False
        assert _as_bool("off") is False

    def test_none_uses_default(self) -> None:
        assert _as_bool(None, default=True) is True


class TestFirstEnv:
    def test_prefers_first_name(self, monkeypatch) -> None:
        monkeypatch.setenv("GOOGLE_CLIENT_ID", "new")
        monkeypatch.setenv("CLIENT_ID_ENV", "legacy")
        assert _first_env("GOOGLE_CLIENT_ID", "CLIENT_ID_ENV") == "new"

    def test_falls_back_to_alias(self, monkeypatch) -> None:
        monkeypatch.delenv("GOOGLE_CLIENT_ID", raising=False)
        monkeypatch.setenv("CLIENT_ID_ENV", "legacy")
        assert _first_env("GOOGLE_CLIENT_ID", "CLIENT_ID_ENV") == "legacy"

    def test_default(self, monkeypatch) -> None:
        monkeypatch.delenv("UNSET_VAR_FOR_TEST", raising=False)
        assert _first_env("UNSET_VAR_FOR_TEST", default="x") == "x"


class TestSettings:
    def test_documented_defaults(self) -> None:
        assert Settings.CALENDAR_ID == "primary"
        assert settings.STATIC_DIR.name == "public"


class TestMain:
    def test_runs_uvicorn_on_configured_port(self) -> None:
        with patch.object(main.uvicorn, "run") as run, patch.object(main.logging, "basicConfig"):
            main.run()
        args, kwargs = run.call_args
        assert args == ("calendar_oauth_app.api:app",)
        assert kwargs["port"] == settings.BACKEND_PORT
        assert kwargs["host"] == settings.BACKEND_HOST
