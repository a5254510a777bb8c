"""Pytest configuration and fixtures."""

import io

import httpx
import pytest
from fastapi.testclient import TestClient
from rich.console import Console

from passthrough.app import create_app
from passthrough.config import Settings
from passthrough.services import RequestLogger

BASE_URL = "http://api.internal"


class Upstream:
    """Fake upstream recording every request it receives."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.headers = {"content-type": "application/json"}
        self.content = b'{"ok": true}'
        self.error: Exception | None = None
        self.stream: bytes | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.stream is not None:
            return httpx.Response(
                self.status_code, headers=self.headers, stream=httpx.ByteStream(self.stream)
            )
        return httpx.Response(self.status_code, headers=self.headers, content=self.content)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def upstream():
    """Fake upstream service."""
    return Upstream()


@pytest.fixture
def transport(upstream):
    """Outbound transport routed to the fake upstream."""
    return httpx.MockTransport(upstream)


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "log.txt"


@pytest.fixture
def console_output():
    return io.StringIO()


@pytest.fixture
def request_logger(log_path, console_output):
    """Request logger writing to a temp file and an in-memory console."""
    console = Console(
        file=console_output, markup=False, highlight=False, emoji=False, width=10000
    )
    return RequestLogger(log_path, console=console)


@pytest.fixture
def test_settings(log_path):
    """Settings pointing at the fake upstream."""
    return Settings(base_url=BASE_URL, log_file=str(log_path))


@pytest.fixture
def client(test_settings, transport, request_logger):
    """Test client with the full app wired to the fake upstream."""
    app = create_app(test_settings, transport=transport, request_logger=request_logger)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("BASE_URL", BASE_URL)
