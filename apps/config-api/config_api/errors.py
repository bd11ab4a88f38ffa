"""
File: errors.py
Purpose: Domain errors raised by the request gate and routes, and the JSON error contract.
"""

import logging
from http import HTTPStatus
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from .utils import utc_timestamp

_logger = logging.getLogger(__name__)


class ConfigApiError(Exception):
    """Base error carrying an HTTP status and a machine-readable label."""
    status_code = 500
    label = "Internal Server Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def body(self) -> dict:
        return {"error": self.label, "message": self.message, "timestamp": utc_timestamp()}


class Unauthorized(ConfigApiError):
    """Missing or unknown API key."""
    status_code = 401
    label = "Unauthorized"


class Forbidden(ConfigApiError):
    """Valid API key but wrong or missing admin key."""
    status_code = 403
    label = "Forbidden"


class BadRequest(ConfigApiError):
    """Malformed admin payload."""
    status_code = 400
    label = "Bad Request"


class RateLimited(ConfigApiError):
    """Fixed-window budget exhausted for the calling client."""
    status_code = 429
    label = "Too Many Requests"

    def __init__(self, retry_after: int, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message)
        self.retry_after = retry_after

    def body(self) -> dict:
        data = super().body()
        data["retryAfter"] = self.retry_after
        return data


def error_response(status_code: int, label: str, message: str, headers: Optional[dict] = None) -> JSONResponse:
    """Render the shared {error, message, timestamp} body."""
    body = {"error": label, "message": message, "timestamp": utc_timestamp()}
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_error_handlers(app: FastAPI, production: bool) -> None:
    """Translate domain errors, unknown routes and crashes to the JSON error contract."""

    @app.exception_handler(ConfigApiError)
    async def _domain_error(request: Request, exc: ConfigApiError) -> JSONResponse:
        headers = None
        if isinstance(exc, RateLimited):
            headers = {"Retry-After": str(exc.retry_after)}
        return JSONResponse(status_code=exc.status_code, content=exc.body(), headers=headers)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return error_response(404, "Not Found", f"Route {request.url.path} not found")
        return error_response(exc.status_code, HTTPStatus(exc.status_code).phrase, str(exc.detail),
                              headers=exc.headers)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        _logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = "Something went wrong" if production else str(exc)
        return error_response(500, "Internal Server Error", message)
