"""Tests for api/settings module."""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from api.settings import Settings


class TestDefaults:
    """Defaults suitable for local development."""

    def test_engine_defaults(self):
        """Chunk sizes and collections default to the engine constants."""
        with patch.dict("os.environ", {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.infra_chunk_size == 500
        assert settings.paid_status_chunk_size == 200
        assert settings.projects_collection == "projects"
        assert settings.infra_collection == "infra_payments"
        assert settings.openai_api_key == ""

    def test_allowed_origins_parsed_from_env(self):
        """ALLOWED_ORIGINS is a comma-separated list with blanks dropped."""
        with patch.dict("os.environ", {"ALLOWED_ORIGINS": "https://a.example, https://b.example,,"}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.allowed_origins == ["https://a.example", "https://b.example"]


class TestChunkSizeValidation:
    """Chunk sizes must fit the store's request limits."""

    def test_infra_chunk_size_from_env(self):
        """INFRA_CHUNK_SIZE overrides the default."""
        with patch.dict("os.environ", {"INFRA_CHUNK_SIZE": "250"}, clear=True):
            assert Settings(_env_file=None).infra_chunk_size == 250

    @pytest.mark.parametrize("value", ["0", "1001"])
    def test_infra_chunk_size_out_of_range(self, value):
        """Sizes outside 1..1000 are rejected at startup."""
        with patch.dict("os.environ", {"INFRA_CHUNK_SIZE": value}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_paid_status_chunk_size_capped(self):
        """Lookup chunks above 200 plots are rejected."""
        with patch.dict("os.environ", {"PAID_STATUS_CHUNK_SIZE": "201"}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)


class TestImportSessionLimits:
    """Bounds for staged imports awaiting confirmation."""

    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.import_session_ttl_seconds == 3600.0
        assert settings.max_import_sessions == 50

    def test_from_env(self):
        env = {"IMPORT_SESSION_TTL_SECONDS": "120", "MAX_IMPORT_SESSIONS": "5"}
        with patch.dict("os.environ", env, clear=True):
            settings = Settings(_env_file=None)

        assert settings.import_session_ttl_seconds == 120.0
        assert settings.max_import_sessions == 5

    @pytest.mark.parametrize("env", [{"IMPORT_SESSION_TTL_SECONDS": "0"}, {"MAX_IMPORT_SESSIONS": "0"}])
    def test_out_of_range(self, env):
        with patch.dict("os.environ", env, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)


class TestPasswordWarning:
    """Insecure admin passwords are allowed but logged."""

    def test_warns_on_empty_password(self, caplog):
        """An unset password produces a security warning."""
        with patch.dict("os.environ", {}, clear=True), caplog.at_level(logging.WARNING):
            Settings(_env_file=None)
        assert "well-known default" in caplog.text

    def test_no_warning_for_strong_password(self, caplog):
        """A non-default password is accepted silently."""
        env = {"POCKETBASE_ADMIN_PASSWORD": "c0rrect-horse-battery"}
        with patch.dict("os.environ", env, clear=True), caplog.at_level(logging.WARNING):
            Settings(_env_file=None)
        assert "well-known default" not in caplog.text
