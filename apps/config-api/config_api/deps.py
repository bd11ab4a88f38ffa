"""
File: deps.py
Purpose: Dependency helpers for the request gate (rate limit, API key, advisory headers, admin key).

Routes list them in gate order: enforce_rate_limit -> require_api_key -> check_client_headers.
"""

import hmac
import logging
from typing import Optional
from fastapi import Depends, Request
from .config import Settings
from .errors import Forbidden, RateLimited, Unauthorized
from .instrumentation import AUTH_FAILURES, RATE_LIMITED
from .limiter import FixedWindowRateLimiter
from .store import ConfigStore

_logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> ConfigStore:
    return request.app.state.store


def get_limiter(request: Request) -> FixedWindowRateLimiter:
    return request.app.state.limiter


def client_ip(req: Request, trust_proxy: bool = False) -> str:
    """Extract best-effort client IP, optionally from forwarding headers."""
    if trust_proxy:
        for hdr in ("x-forwarded-for", "x-original-forwarded-for", "x-client-ip"):
            v = req.headers.get(hdr)
            if v:
                return v.split(",")[0].strip()
    return req.client.host if req.client else "unknown"


def extract_api_key(req: Request) -> Optional[str]:
    """Candidate key from X-API-Key, then Authorization (Bearer), then ?apiKey=."""
    key = req.headers.get("x-api-key")
    if key:
        return key
    auth = req.headers.get("authorization")
    if auth:
        key = auth[len("Bearer "):] if auth.startswith("Bearer ") else auth
        if key:
            return key
    return req.query_params.get("apiKey") or None


def enforce_rate_limit(req: Request, settings: Settings = Depends(get_settings),
                       limiter: FixedWindowRateLimiter = Depends(get_limiter)) -> None:
    """Reject with 429 once the caller's fixed-window budget is spent."""
    if not settings.RL_ENABLED:
        return
    ip = client_ip(req, settings.TRUST_PROXY_HEADERS)
    identity = (ip, req.headers.get("x-app-id") or "unknown")
    decision = limiter.allow(identity)
    if not decision.allowed:
        RATE_LIMITED.inc()
        _logger.warning("Rate limit exceeded", extra={"client_ip": ip, "app_id": identity[1],
                                                      "retry_after": decision.retry_after})
        raise RateLimited(decision.retry_after)


def require_api_key(req: Request, settings: Settings = Depends(get_settings)) -> str:
    """Validate inbound platform API key for protected endpoints."""
    key = extract_api_key(req)
    if not key:
        AUTH_FAILURES.labels(reason="missing_key").inc()
        raise Unauthorized("API key is required. Provide it in X-API-Key header, "
                           "Authorization header, or apiKey query parameter.")
    platform = settings.platform_keys.get(key)
    if platform is None:
        AUTH_FAILURES.labels(reason="invalid_key").inc()
        _logger.warning("Invalid API key attempt: %s... from IP: %s", key[:8],
                        client_ip(req, settings.TRUST_PROXY_HEADERS))
        raise Unauthorized("Invalid API key provided.")
    req.state.api_key = key
    req.state.platform = platform
    return key


def check_client_headers(req: Request, settings: Settings = Depends(get_settings)) -> None:
    """Advisory only: log missing app identity headers, never block."""
    ip = client_ip(req, settings.TRUST_PROXY_HEADERS)
    if not req.headers.get("x-app-id"):
        _logger.warning("Missing X-App-Id header from IP: %s", ip)
    if not req.headers.get("x-app-version"):
        _logger.warning("Missing X-App-Version header from IP: %s", ip)


def require_admin_key(req: Request, settings: Settings = Depends(get_settings)) -> None:
    """Second factor for the admin route; an unset ADMIN_API_KEY forbids everyone."""
    supplied = req.headers.get("x-admin-key") or ""
    expected = settings.ADMIN_API_KEY
    if not expected or not hmac.compare_digest(supplied.encode(), expected.encode()):
        AUTH_FAILURES.labels(reason="bad_admin_key").inc()
        _logger.warning("Admin access denied for platform %s", getattr(req.state, "platform", "unknown"))
        raise Forbidden("Admin access required")


GATE = [Depends(enforce_rate_limit), Depends(require_api_key), Depends(check_client_headers)]
