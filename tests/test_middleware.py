"""
Tests — request logging middleware and app factory
--------------------------------------------------
Drives a real FastAPI app through TestClient and inspects the sink.
Run with: pytest tests/ -v
"""

import io
import json

import pytest
from fastapi.testclient import TestClient

from sdl.core.config import Config, get_settings
from sdl.main import create_app
from sdl.services.logger import Logger
from sdl.services.request_logger import REPORTED_ERROR_EVENT_TYPE


def _records(buffer: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in buffer.getvalue().splitlines()]


@pytest.fixture
def buffer():
    return io.StringIO()


@pytest.fixture
def app(buffer):
    logger = Logger(Config(
        logging_level="info",
        service_name="svc",
        version="9.9.9",
        write_location=buffer,
    ))
    app = create_app(logger)

    @app.get("/items")
    async def items():
        return {"items": []}

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    return app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


class TestSuccessfulRequests:
    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "svc"}

    def test_one_info_record_per_request(self, client, buffer):
        client.get("/health")
        records = _records(buffer)
        assert len(records) == 1
        record = records[0]
        assert record["severity"] == "INFO"
        assert record["message"] == ""
        assert record["httpRequest"]["requestMethod"] == "GET"
        assert record["httpRequest"]["status"] == 200
        assert record["httpRequest"]["requestUrl"].endswith("/health")
        assert record["httpRequest"]["userAgent"] == "testclient"
        assert record["latency"].endswith("s")

    def test_api_key_never_logged(self, client, buffer):
        client.get("/items", params={"key": "SECRET_API_KEY", "page": "2"})
        url = _records(buffer)[0]["httpRequest"]["requestUrl"]
        assert "SECRET_API_KEY" not in url
        assert "page=2" in url

    def test_not_found_status_logged(self, client, buffer):
        client.get("/missing")
        assert _records(buffer)[0]["httpRequest"]["status"] == 404


class TestFailingRequests:
    def test_error_response_contract(self, client):
        response = client.get("/boom")
        assert response.status_code == 500
        assert response.json()["error"] == "internal_server_error"
        assert "kaboom" not in response.text

    def test_error_event_logged(self, client, buffer):
        client.get("/boom")
        records = _records(buffer)
        assert len(records) == 1
        record = records[0]
        assert record["severity"] == "ERROR"
        assert record["message"] == "kaboom"
        assert record["@type"] == REPORTED_ERROR_EVENT_TYPE
        assert record["serviceContext"] == {"service": "svc", "version": "9.9.9"}
        assert record["context"]["httpRequest"]["responseStatusCode"] == 500
        assert record["context"]["httpRequest"]["url"].endswith("/boom")


class TestAppFactory:
    def test_logger_from_environment(self, monkeypatch):
        monkeypatch.setenv("SDL_SERVICE_NAME", "from-env")
        monkeypatch.setenv("SDL_LOGGING_LEVEL", "error")
        get_settings.cache_clear()
        try:
            app = create_app()
            assert app.state.logger.service_context.service == "from-env"
            response = TestClient(app).get("/health")
            assert response.json()["service"] == "from-env"
        finally:
            get_settings.cache_clear()
