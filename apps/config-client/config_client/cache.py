"""
File: cache.py
Purpose: Last-known-good storage for the client's configuration document.
"""

from datetime import datetime
from typing import Optional, Tuple
from .models import AppConfig


class ConfigCache:
    """Interface for where the client keeps its last good document."""

    def load(self) -> Optional[Tuple[AppConfig, Optional[datetime]]]:
        raise NotImplementedError

    def save(self, config: AppConfig, fetched_at: datetime) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class InMemoryConfigCache(ConfigCache):
    """Process-local cache; the document is stored as JSON so a bad write cannot poison reads."""

    def __init__(self):
        self._raw: Optional[str] = None
        self._fetched_at: Optional[datetime] = None

    def load(self) -> Optional[Tuple[AppConfig, Optional[datetime]]]:
        if self._raw is None:
            return None
        return AppConfig.model_validate_json(self._raw), self._fetched_at

    def save(self, config: AppConfig, fetched_at: datetime) -> None:
        self._raw = config.model_dump_json()
        self._fetched_at = fetched_at

    def clear(self) -> None:
        self._raw = None
        self._fetched_at = None
