"""
File: tests/test_loader.py
Purpose: Structured and legacy configuration sources.
"""

import json
from config_api.instrumentation import REGISTRY
from config_api.loader import load_legacy, load_structured, structured_key


def _fallbacks(key: str, reason: str) -> float:
    return REGISTRY.get_sample_value("config_source_fallbacks_total", {"key": key, "reason": reason}) or 0.0


def test_structured_key_composition():
    assert structured_key("APP_CONFIG") == "APP_CONFIG"
    assert structured_key("APP_CONFIG", "2") == "APP_CONFIG_2"
    assert structured_key("APP_CONFIG", "", "test") == "APP_CONFIG_TEST"
    assert structured_key("APP_CONFIG", "2", "test") == "APP_CONFIG_2_TEST"


def test_absent_structured_input_returns_none():
    assert load_structured({}, "APP_CONFIG") is None


def test_partial_document_gets_defaults():
    doc = load_structured({"APP_CONFIG": json.dumps({"features": {"darkMode": True, "beta": True}})}, "APP_CONFIG")
    assert doc.features == {"darkMode": True, "analytics": True, "newCheckout": False, "beta": True}
    assert doc.bot.foundationModel == "claude-v3.5-sonnet"
    assert doc.aws.cognito.userPoolId == ""
    assert doc.version == "1.0.0"


def test_invalid_json_is_logged_and_counted(caplog):
    before = _fallbacks("APP_CONFIG_9", "invalid_json")
    assert load_structured({"APP_CONFIG_9": "{not json"}, "APP_CONFIG_9") is None
    assert _fallbacks("APP_CONFIG_9", "invalid_json") == before + 1
    assert any("APP_CONFIG_9" in r.getMessage() for r in caplog.records)


def test_invalid_shape_is_counted():
    before = _fallbacks("APP_CONFIG_8", "invalid_shape")
    raw = json.dumps({"features": {"darkMode": "yes"}})
    assert load_structured({"APP_CONFIG_8": raw}, "APP_CONFIG_8") is None
    assert _fallbacks("APP_CONFIG_8", "invalid_shape") == before + 1


def test_legacy_defaults_when_nothing_is_set():
    doc = load_legacy({})
    assert doc.bot.foundationModel == "claude-v3.5-sonnet"
    assert doc.features == {"darkMode": False, "analytics": True, "newCheckout": False}
    assert doc.version == "1.0.0"
    assert doc.api.websocketEndpoint == ""


def test_legacy_fields_and_flags():
    doc = load_legacy({
        "USER_POOL_ID": "pool",
        "APP_CLIENT_ID": "client",
        "WEBSOCKET_ENDPOINT": "wss://x",
        "BOT_ID": "bot",
        "FOUNDATION_MODEL": "model-x",
        "FEATURE_DARK_MODE": "true",
        "FEATURE_ANALYTICS": "false",
        "FEATURE_NEW_CHECKOUT": "TRUE",
        "CONFIG_VERSION": "3.1.0",
    })
    assert doc.aws.cognito.userPoolId == "pool"
    assert doc.aws.cognito.appClientId == "client"
    assert doc.api.websocketEndpoint == "wss://x"
    assert doc.bot.botId == "bot"
    assert doc.bot.foundationModel == "model-x"
    assert doc.features == {"darkMode": True, "analytics": False, "newCheckout": True}
    assert doc.version == "3.1.0"
