"""Client for the Configuration API: fetch, cache and read app configuration."""

from .cache import ConfigCache, InMemoryConfigCache
from .errors import (
    BadRequest,
    ConfigError,
    DecodingError,
    Forbidden,
    InvalidURL,
    NetworkError,
    RateLimited,
    ServerError,
    Unauthorized,
)
from .models import AppConfig, ConfigVersion
from .service import BotSettings, CognitoSettings, ConfigurationService, Feature

__all__ = [
    "AppConfig",
    "BadRequest",
    "BotSettings",
    "CognitoSettings",
    "ConfigCache",
    "ConfigError",
    "ConfigVersion",
    "ConfigurationService",
    "DecodingError",
    "Feature",
    "Forbidden",
    "InMemoryConfigCache",
    "InvalidURL",
    "NetworkError",
    "RateLimited",
    "ServerError",
    "Unauthorized",
]
