"""
File: loader.py
Purpose: Build configuration documents from the process environment.

Two sources are understood:
  - a structured JSON blob per (version, environment), e.g. APP_CONFIG_2_TEST
  - legacy individual variables (USER_POOL_ID, BOT_ID, FEATURE_DARK_MODE, ...)

Structured inputs that are present but unusable are logged and counted, never raised.
"""

import json
import logging
from typing import Mapping, Optional
from pydantic import ValidationError
from .instrumentation import CONFIG_FALLBACKS
from .schemas.config import (
    ConfigurationDocument,
    DEFAULT_CONFIG_VERSION,
    DEFAULT_FOUNDATION_MODEL,
)

_logger = logging.getLogger(__name__)


def structured_key(base: str, version: str = "", environment: str = "") -> str:
    """Compose the variable name for a (version, environment) pair: APP_CONFIG[_2][_TEST]."""
    key = base
    if version:
        key += f"_{version}"
    if environment:
        key += f"_{environment.upper()}"
    return key


def load_structured(environ: Mapping[str, str], key: str) -> Optional[ConfigurationDocument]:
    """Parse the JSON document stored under key; None when absent or unusable."""
    raw = environ.get(key)
    if not raw:
        _logger.debug("No structured config under %s", key)
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        _logger.error("Failed to parse %s JSON; falling back", key, extra={"config_key": key, "reason": str(e)})
        CONFIG_FALLBACKS.labels(key=key, reason="invalid_json").inc()
        return None
    try:
        doc = ConfigurationDocument.model_validate(data)
    except ValidationError as e:
        _logger.error("Config under %s has an invalid shape; falling back", key,
                      extra={"config_key": key, "reason": e.errors(include_url=False)})
        CONFIG_FALLBACKS.labels(key=key, reason="invalid_shape").inc()
        return None
    _logger.info("Configuration loaded from %s", key)
    return doc


def _flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    if default:
        return raw.strip().lower() != "false"
    return raw.strip().lower() == "true"


def load_legacy(environ: Mapping[str, str]) -> ConfigurationDocument:
    """Assemble the document field by field from individually named variables."""
    return ConfigurationDocument.model_validate({
        "aws": {
            "cognito": {
                "userPoolId": environ.get("USER_POOL_ID", ""),
                "appClientId": environ.get("APP_CLIENT_ID", ""),
            }
        },
        "api": {"websocketEndpoint": environ.get("WEBSOCKET_ENDPOINT", "")},
        "bot": {
            "botId": environ.get("BOT_ID", ""),
            "foundationModel": environ.get("FOUNDATION_MODEL") or DEFAULT_FOUNDATION_MODEL,
        },
        "features": {
            "darkMode": _flag(environ, "FEATURE_DARK_MODE", False),
            "analytics": _flag(environ, "FEATURE_ANALYTICS", True),
            "newCheckout": _flag(environ, "FEATURE_NEW_CHECKOUT", False),
        },
        "version": environ.get("CONFIG_VERSION") or DEFAULT_CONFIG_VERSION,
    })
