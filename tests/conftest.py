"""
Module: conftest.py
Description: Shared pytest fixtures for custom events client tests.

Provides request factories, an in-memory log sink and a recording sleep
function so the retry loop runs without real waits. HTTP traffic is
mocked with pytest-httpx's httpx_mock fixture.
"""

import io
import os

import pytest

from custom_events.delivery.sender import EventSender
from custom_events.models.request import create_delivery_request
from custom_events.utils.logger import create_logger

APPLIANCE_URL = "https://appliance.example.com"
SESSION_ID = "3f2a9c1e-7b4d-4e8a-9f00-12ab34cd56ef"
API_KEY = "le_api_Zk93hQ2xLmP0sT7vWc4R"
EVENT_URL = (
    f"{APPLIANCE_URL}/publicApi/v8-preview/user-sessions/{SESSION_ID}/events"
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """
    Keep CUSTOM_EVENTS_* variables and .env files out of the tests.
    """
    for name in list(os.environ):
        if name.upper().startswith("CUSTOM_EVENTS_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def request_values():
    """Raw values of a valid delivery request."""
    return {
        "endpoint_base": APPLIANCE_URL,
        "api_version": "v8-preview",
        "session_id": SESSION_ID,
        "credential": API_KEY,
        "message": "StoreFront connector initialized",
        "max_retries": 2,
        "timeout": 10,
    }


@pytest.fixture
def make_request(request_values):
    """
    Factory building validated DeliveryRequests with field overrides.
    """
    def _make(**overrides):
        return create_delivery_request(**{**request_values, **overrides})
    return _make


@pytest.fixture
def log_stream():
    return io.StringIO()


@pytest.fixture
def capture_logger(log_stream):
    """Isolated logger writing JSON lines into log_stream."""
    return create_logger(level="DEBUG", console=log_stream, secrets=[API_KEY])


@pytest.fixture
def sleeps():
    """Records backoff waits instead of sleeping."""
    return []


@pytest.fixture
def sender(capture_logger, sleeps):
    """EventSender with recorded sleeps and captured logs."""
    with EventSender(logger=capture_logger, sleep=sleeps.append) as event_sender:
        yield event_sender


@pytest.fixture
def api_key():
    return API_KEY


@pytest.fixture
def event_url():
    return EVENT_URL
