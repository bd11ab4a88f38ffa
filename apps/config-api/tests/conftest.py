"""
File: tests/conftest.py
Purpose: Shared fixtures: isolated settings, a fake environment and a TestClient per test.
"""

import json
import pytest
from fastapi.testclient import TestClient
from config_api.config import Settings
from config_api.main import create_app

IOS_KEY = "ios-secure-key-12345"
ANDROID_KEY = "android-secure-key-12345"
WEB_KEY = "web-secure-key-12345"
ADMIN_KEY = "admin-secret"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ENV="development",
        API_KEY_IOS=IOS_KEY,
        API_KEY_ANDROID=ANDROID_KEY,
        API_KEY_WEB=WEB_KEY,
        ADMIN_API_KEY=ADMIN_KEY,
        RL_REQUESTS=100,
        RL_WINDOW_SECS=60,
    )


@pytest.fixture
def environ() -> dict:
    return {
        "APP_CONFIG": json.dumps({
            "aws": {"cognito": {"userPoolId": "us-east-1_pool", "appClientId": "client-default"}},
            "api": {"websocketEndpoint": "wss://ws.example.com"},
            "bot": {"botId": "bot-default", "foundationModel": "claude-v3.5-sonnet"},
            "features": {"darkMode": False, "analytics": True, "newCheckout": False},
            "version": "1.0.0",
        }),
        "APP_CONFIG_TEST": json.dumps({
            "aws": {"cognito": {"userPoolId": "us-east-1_testpool", "appClientId": "client-test"}},
            "version": "1.0.0-test",
        }),
        "APP_CONFIG_2": json.dumps({
            "bot": {"botId": "bot-v2", "foundationModel": "claude-v4"},
            "version": "2.0.0",
        }),
    }


@pytest.fixture
def app(settings, environ):
    return create_app(settings, environ)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


def _headers(key: str = IOS_KEY, **extra) -> dict:
    h = {"X-API-Key": key, "X-App-Id": "com.example.app", "X-App-Version": "1.0.0", "X-Platform": "ios"}
    h.update(extra)
    return h


@pytest.fixture
def make_headers():
    """Factory for request headers; pass key= to swap the API key."""
    return _headers


@pytest.fixture
def auth_headers() -> dict:
    return _headers()


@pytest.fixture
def keys() -> dict:
    return {"ios": IOS_KEY, "android": ANDROID_KEY, "web": WEB_KEY, "admin": ADMIN_KEY}
