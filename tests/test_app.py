"""Tests for the FastAPI application factory."""

import httpx
from fastapi.testclient import TestClient

from passthrough.app import create_app
from passthrough.config import Settings
from passthrough.services import Forwarder


class TestCreateApp:
    """Tests for create_app."""

    def test_lifespan_wires_forwarder(self, test_settings, transport, request_logger):
        """Test startup builds the forwarder and shutdown releases the log."""
        app = create_app(test_settings, transport=transport, request_logger=request_logger)

        with TestClient(app):
            forwarder = app.state.forwarder
            assert isinstance(forwarder, Forwarder)
            assert forwarder.base_url == "http://api.internal"
            assert not request_logger.closed
            assert len(forwarder.client.headers) == 0

        assert request_logger.closed
        assert forwarder.client.is_closed

    def test_client_uses_configured_timeout(self, log_path, transport, request_logger):
        settings = Settings(
            base_url="http://api.internal",
            log_file=str(log_path),
            upstream_timeout=2.5,
            follow_redirects=False,
        )
        app = create_app(settings, transport=transport, request_logger=request_logger)

        with TestClient(app):
            client = app.state.forwarder.client
            assert client.timeout == httpx.Timeout(2.5)
            assert client.follow_redirects is False

    def test_default_request_log_uses_settings(self, test_settings, transport, log_path):
        """Test the file-backed log is created from settings."""
        app = create_app(test_settings, transport=transport)

        with TestClient(app) as client:
            client.get("/ping")

        assert "Sending GET request\n- To http://api.internal/ping" in log_path.read_text(
            encoding="utf-8"
        )

    def test_settings_loaded_from_environment(self, monkeypatch, tmp_path, transport):
        from passthrough.config import get_settings

        monkeypatch.setenv("BASE_URL", "http://from-env")
        monkeypatch.setenv("LOG_FILE", str(tmp_path / "env-log.txt"))
        get_settings.cache_clear()

        try:
            app = create_app(transport=transport)
            with TestClient(app):
                assert app.state.forwarder.base_url == "http://from-env"
        finally:
            get_settings.cache_clear()

    def test_no_docs_routes(self, client, upstream):
        """Test every path, including /docs, is forwarded."""
        client.get("/docs")

        assert str(upstream.last.url) == "http://api.internal/docs"
