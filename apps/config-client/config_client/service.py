"""
File: service.py
Purpose: Async client that fetches, caches and exposes configuration from the Configuration API.

Fetch failures never leave the caller without a document if one was ever fetched:
the last good document stays current, or is reloaded from the cache when none is held.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Mapping, NamedTuple, Optional, Union
import httpx
from pydantic import ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
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

_logger = logging.getLogger(__name__)


class Feature(str, Enum):
    DARK_MODE = "darkMode"
    ANALYTICS = "analytics"
    NEW_CHECKOUT = "newCheckout"


class CognitoSettings(NamedTuple):
    user_pool_id: str
    app_client_id: str


class BotSettings(NamedTuple):
    bot_id: str
    model: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConfigurationService:
    """Holds the current configuration for application code."""

    def __init__(self, base_url: str, api_key: str, *, app_id: Optional[str] = None,
                 app_version: Optional[str] = None, platform: str = "python", timeout: float = 30.0,
                 refresh_interval: float = 300.0, cache: Optional[ConfigCache] = None,
                 http: Optional[httpx.AsyncClient] = None, clock: Callable[[], datetime] = _utcnow):
        self.base_url = base_url.strip().rstrip("/")
        self.api_key = api_key
        self.app_id = app_id
        self.app_version = app_version
        self.platform = platform
        self.refresh_interval = refresh_interval
        self._cache = cache if cache is not None else InMemoryConfigCache()
        self._clock = clock
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

        self.current_config: Optional[AppConfig] = None
        self.last_update_time: Optional[datetime] = None
        self.error: Optional[ConfigError] = None
        self.is_loading = False

        self._load_cached_configuration()

    async def __aenter__(self) -> "ConfigurationService":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # Fetching

    async def fetch_configuration(self, version: Optional[str] = None,
                                  environment: Optional[str] = None) -> Optional[AppConfig]:
        """Fetch the latest document; on failure keep (or restore) the last good one."""
        self.is_loading = True
        self.error = None
        try:
            path = f"/v{version}/config" if version else "/config"
            if environment:
                path += f"/{environment}"
            data = await self._request("GET", path)
            config = self._decode(AppConfig, data)
            self.current_config = config
            self.last_update_time = self._clock()
            self._cache.save(config, self.last_update_time)
            _logger.info("Configuration fetched successfully", extra={"config_version": config.version})
        except ConfigError as e:
            self.error = e
            _logger.warning("Configuration fetch failed: %s", e)
            if self.current_config is None:
                self._load_cached_configuration()
        except Exception as e:
            self.error = NetworkError(e)
            _logger.exception("Unexpected error while fetching configuration")
            if self.current_config is None:
                self._load_cached_configuration()
        finally:
            self.is_loading = False
        return self.current_config

    def should_refresh_configuration(self) -> bool:
        """True when never fetched or the last successful fetch is older than refresh_interval."""
        if self.last_update_time is None:
            return True
        return (self._clock() - self.last_update_time).total_seconds() > self.refresh_interval

    async def fetch_configuration_if_needed(self) -> Optional[AppConfig]:
        if self.should_refresh_configuration():
            return await self.fetch_configuration()
        return self.current_config

    async def fetch_configuration_version(self) -> ConfigVersion:
        """Current version and checksum without the full document. Raises ConfigError."""
        return self._decode(ConfigVersion, await self._request("GET", "/config/version"))

    async def update_features(self, flags: Mapping[str, bool], admin_key: str) -> Dict[str, bool]:
        """Admin: merge flags on the server and return the resulting flag map. Raises ConfigError."""
        data = await self._request("POST", "/config/features", json={"features": dict(flags)},
                                   extra_headers={"X-Admin-Key": admin_key})
        features = data.get("features") if isinstance(data, dict) else None
        if not isinstance(features, dict):
            raise DecodingError(ValueError("response has no features object"))
        return features

    # Accessors

    def is_feature_enabled(self, feature: Union[Feature, str]) -> bool:
        if self.current_config is None:
            return False
        name = feature.value if isinstance(feature, Feature) else feature
        return bool(self.current_config.features.get(name, False))

    def get_cognito_config(self) -> Optional[CognitoSettings]:
        if self.current_config is None:
            return None
        cognito = self.current_config.aws.cognito
        return CognitoSettings(cognito.userPoolId, cognito.appClientId)

    def get_websocket_endpoint(self) -> Optional[str]:
        return self.current_config.api.websocketEndpoint if self.current_config else None

    def get_bot_config(self) -> Optional[BotSettings]:
        if self.current_config is None:
            return None
        return BotSettings(self.current_config.bot.botId, self.current_config.bot.foundationModel)

    def clear_cache(self) -> None:
        """Drop the cached and current document."""
        self._cache.clear()
        self.current_config = None
        self.last_update_time = None
        _logger.info("Configuration cache cleared")

    # Internals

    def _url(self, path: str) -> str:
        try:
            url = httpx.URL(self.base_url + path)
        except httpx.InvalidURL:
            raise InvalidURL(self.base_url)
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidURL(self.base_url)
        return str(url)

    def _headers(self) -> Dict[str, str]:
        headers = {"X-API-Key": self.api_key, "X-Platform": self.platform, "Accept": "application/json"}
        if self.app_id:
            headers["X-App-Id"] = self.app_id
        if self.app_version:
            headers["X-App-Version"] = self.app_version
        return headers

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=2),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        return await self._http.request(method, url, **kwargs)

    async def _request(self, method: str, path: str, json: Any = None,
                       extra_headers: Optional[Dict[str, str]] = None) -> Any:
        url = self._url(path)
        headers = self._headers()
        if extra_headers:
            headers.update(extra_headers)
        try:
            resp = await self._send(method, url, headers=headers, json=json)
        except httpx.HTTPError as e:
            raise NetworkError(e) from e
        _raise_for_status(resp)
        try:
            return resp.json()
        except ValueError as e:
            raise DecodingError(e) from e

    @staticmethod
    def _decode(model, data: Any):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            _logger.error("Configuration response did not match the expected shape: %s", e)
            raise DecodingError(e) from e

    def _load_cached_configuration(self) -> None:
        try:
            cached = self._cache.load()
        except Exception as e:
            _logger.warning("Failed to load cached configuration: %s", e)
            try:
                self._cache.clear()
            except Exception as clear_err:
                _logger.warning("Failed to clear cached configuration: %s", clear_err)
            return
        if cached is None:
            _logger.debug("No cached configuration found")
            return
        self.current_config, self.last_update_time = cached
        _logger.info("Loaded cached configuration")


def _retry_after(resp: httpx.Response) -> Optional[int]:
    header = resp.headers.get("retry-after")
    if header and header.isdigit():
        return int(header)
    try:
        value = resp.json().get("retryAfter")
    except (ValueError, AttributeError):
        return None
    return value if isinstance(value, int) else None


def _raise_for_status(resp: httpx.Response) -> None:
    """Map HTTP status codes onto the client error taxonomy."""
    code = resp.status_code
    if 200 <= code < 300:
        return
    if code == 401:
        raise Unauthorized()
    if code == 403:
        raise Forbidden()
    if code == 429:
        raise RateLimited(_retry_after(resp))
    if code == 400:
        try:
            message = resp.json().get("message", "Bad request")
        except (ValueError, AttributeError):
            message = "Bad request"
        raise BadRequest(message)
    raise ServerError(code)
