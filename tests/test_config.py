"""
Tests for configuration loading and the live-credentials startup gate.
"""
import logging

import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient
from pydantic import ValidationError

from app import __main__ as entrypoint
from app.config import Settings, check_live_credentials
from app.errors import ConfigurationError
from app.log import JsonFormatter
from tests.conftest import make_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("PORT", "IS_LIVE", "CURRENCY"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.port == 3030
        assert settings.is_live is False
        assert settings.currency == "BDT"
        assert settings.mode == "sandbox"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("IS_LIVE", "true")
        monkeypatch.setenv("SSLC_STORE_ID", "shopantik01")
        monkeypatch.setenv("FRONTEND_URL", "https://shop.example.com")
        settings = Settings(_env_file=None)
        assert settings.is_live is True
        assert settings.sslc_store_id == "shopantik01"
        assert settings.frontend_url == "https://shop.example.com"

    def test_settings_are_frozen(self):
        settings = make_settings()
        with pytest.raises(ValidationError):
            settings.is_live = True


class TestLiveCredentialGate:
    def test_live_with_test_password_rejected(self):
        with pytest.raises(ConfigurationError):
            check_live_credentials(make_settings(is_live=True, sslc_store_password="shop_test_pw"))

    def test_live_with_test_store_id_rejected(self):
        with pytest.raises(ConfigurationError):
            check_live_credentials(make_settings(is_live=True, sslc_store_id="testbox01"))

    def test_live_with_real_credentials_allowed(self):
        check_live_credentials(make_settings(is_live=True))

    def test_sandbox_with_test_credentials_allowed(self):
        check_live_credentials(make_settings(is_live=False, sslc_store_id="testbox01"))

    def test_entrypoint_exits_before_binding(self):
        settings = make_settings(is_live=True, sslc_store_password="test123")
        with patch.object(entrypoint, "get_settings", return_value=settings), \
                patch.object(entrypoint.uvicorn, "run") as run:
            assert entrypoint.main() == 1
        run.assert_not_called()

    def test_entrypoint_starts_server_on_configured_port(self):
        settings = make_settings(port=8080)
        with patch.object(entrypoint, "get_settings", return_value=settings), \
                patch.object(entrypoint.uvicorn, "run") as run:
            assert entrypoint.main() == 0
        assert run.call_args.kwargs["port"] == 8080

    def test_lifespan_refuses_to_start(self):
        from app.main import app
        settings = make_settings(is_live=True, sslc_store_id="test01")
        with patch("app.main.get_settings", return_value=settings):
            with pytest.raises(ConfigurationError):
                with TestClient(app):
                    pass


class TestJsonFormatter:
    def test_includes_extra_fields(self):
        record = logging.LogRecord("app.x", logging.INFO, __file__, 1, "Order reconciled", None, None)
        record.order_id = 42
        record.status = "paid"
        output = JsonFormatter().format(record)
        assert '"order_id": 42' in output
        assert '"status": "paid"' in output
        assert '"message": "Order reconciled"' in output
