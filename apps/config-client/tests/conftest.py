"""
File: tests/conftest.py
Purpose: Fixtures for client tests: a canned server document and a mock transport factory.
"""

import httpx
import pytest

DOCUMENT = {
    "aws": {"cognito": {"userPoolId": "us-east-1_pool", "appClientId": "client-1"}},
    "api": {"websocketEndpoint": "wss://ws.example.com"},
    "bot": {"botId": "bot-1", "foundationModel": "claude-v3.5-sonnet"},
    "features": {"darkMode": True, "analytics": True, "newCheckout": False},
    "version": "1.0.0",
    "metadata": {
        "timestamp": "2024-05-01T12:00:00.000Z",
        "requestId": "req_1714564800000_abc123xyz",
        "serverVersion": "1.0.0",
        "environment": "production",
    },
}


@pytest.fixture
def document() -> dict:
    return {**DOCUMENT}


@pytest.fixture
def mock_http():
    """Build an AsyncClient whose requests are answered by handler; requests are recorded."""
    def build(handler):
        seen = []

        def record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(record))
        client.seen = seen
        return client
    return build
