"""
File: store.py
Purpose: In-memory configuration table keyed by (api version, environment).

The table is filled once when the app is created. Lookups walk
(version, env) -> (version, "") -> ("", ""); the ("", "") slot always holds a
document, so resolve() never fails. The only mutation is the admin feature-flag
merge into that default slot.
"""

import logging
import os
import threading
from typing import Dict, Iterable, Mapping, Optional, Tuple
from .loader import load_legacy, load_structured, structured_key
from .schemas.config import ConfigurationDocument

_logger = logging.getLogger(__name__)

DEFAULT_VERSIONS = ("", "2", "3", "4", "5")
DEFAULT_ENVIRONMENTS = ("", "test")

CacheKey = Tuple[str, str]
_ROOT: CacheKey = ("", "")


class ConfigStore:
    """Owns the configuration documents served by the API."""

    def __init__(self, documents: Mapping[CacheKey, ConfigurationDocument],
                 versions: Iterable[str] = DEFAULT_VERSIONS):
        if _ROOT not in documents:
            raise ValueError("ConfigStore requires a default ('', '') document")
        self._documents: Dict[CacheKey, ConfigurationDocument] = dict(documents)
        self._versions = frozenset(versions) | {""}
        self._lock = threading.Lock()

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None, base_key: str = "APP_CONFIG",
             versions: Iterable[str] = DEFAULT_VERSIONS,
             environments: Iterable[str] = DEFAULT_ENVIRONMENTS) -> "ConfigStore":
        """Read every declared (version, environment) source once."""
        environ = os.environ if environ is None else environ
        versions = list(versions)
        documents: Dict[CacheKey, ConfigurationDocument] = {}
        for version in versions:
            for env in environments:
                env = env.lower()
                doc = load_structured(environ, structured_key(base_key, version, env))
                if doc is not None:
                    documents[(version, env)] = doc
        if _ROOT not in documents:
            _logger.info("Using individual environment variables for the default configuration")
            documents[_ROOT] = load_legacy(environ)
        _logger.info("Configuration table ready", extra={"slots": sorted("/".join(k) for k in documents)})
        return cls(documents, versions)

    @property
    def default(self) -> ConfigurationDocument:
        return self._documents[_ROOT]

    @property
    def versions(self) -> frozenset:
        return self._versions

    def resolve(self, api_version: Optional[str] = None, environment: Optional[str] = None) -> ConfigurationDocument:
        """Return the most specific document for the request, falling back to the default."""
        version = api_version or ""
        env = (environment or "").lower()
        if version not in self._versions:
            return self.default
        for key in ((version, env), (version, ""), _ROOT):
            doc = self._documents.get(key)
            if doc is not None:
                return doc
        return self.default

    def merge_features(self, flags: Mapping[str, bool]) -> Dict[str, bool]:
        """Shallow-merge flags into the default document; return the resulting flag map."""
        with self._lock:
            current = self._documents[_ROOT]
            features = {**current.features, **flags}
            self._documents[_ROOT] = current.model_copy(update={"features": features})
        return dict(features)
