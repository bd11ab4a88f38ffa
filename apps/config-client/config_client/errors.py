"""
File: errors.py
Purpose: Error taxonomy surfaced by the configuration client.
"""

from typing import Optional


class ConfigError(Exception):
    """Base class for every failure the client reports."""


class InvalidURL(ConfigError):
    def __init__(self, url: str):
        super().__init__(f"Invalid configuration URL: {url!r}")
        self.url = url


class Unauthorized(ConfigError):
    def __init__(self):
        super().__init__("Invalid API key")


class Forbidden(ConfigError):
    def __init__(self):
        super().__init__("Admin access required")


class BadRequest(ConfigError):
    def __init__(self, message: str = "Bad request"):
        super().__init__(message)


class RateLimited(ConfigError):
    def __init__(self, retry_after: Optional[int] = None):
        if retry_after is not None:
            msg = f"Rate limit exceeded. Retry after {retry_after} seconds."
        else:
            msg = "Rate limit exceeded. Please try again later."
        super().__init__(msg)
        self.retry_after = retry_after


class ServerError(ConfigError):
    """Any non-success HTTP status not covered by a more specific error."""
    def __init__(self, status_code: int):
        super().__init__(f"Server error (HTTP {status_code})")
        self.status_code = status_code


class NetworkError(ConfigError):
    def __init__(self, cause: BaseException):
        super().__init__(f"Network error: {cause}")
        self.cause = cause


class DecodingError(ConfigError):
    def __init__(self, cause: BaseException):
        super().__init__(f"Failed to decode configuration: {cause}")
        self.cause = cause
