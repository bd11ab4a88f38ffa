"""
File: config.py
Purpose: Centralized configuration using environment variables (12-factor).
"""

from typing import Dict, List
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """Load service configuration from environment variables."""
    ENV: str = "development"
    SERVICE_NAME: str = "config-api"
    SERVICE_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Per-platform client keys
    API_KEY_IOS: str = ""
    API_KEY_ANDROID: str = ""
    API_KEY_WEB: str = ""
    ADMIN_API_KEY: str = ""  # empty => admin endpoint always forbidden

    # Configuration documents (APP_CONFIG, APP_CONFIG_TEST, APP_CONFIG_2, ...)
    APP_CONFIG_KEY: str = "APP_CONFIG"
    CONFIG_VERSIONS: List[str] = ["", "2", "3", "4", "5"]
    CONFIG_ENVIRONMENTS: List[str] = ["", "test"]
    CACHE_MAX_AGE_SECS: int = 300

    # Rate limiting (fixed window, in-process)
    RL_ENABLED: bool = True
    RL_REQUESTS: int = 100        # max requests
    RL_WINDOW_SECS: int = 60      # per window
    RL_MAX_CLIENTS: int = 10000   # LRU bound on tracked identities
    TRUST_PROXY_HEADERS: bool = False  # honour X-Forwarded-For for client ip

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def platform_keys(self) -> Dict[str, str]:
        """Return configured API keys mapped to their platform, skipping blanks."""
        keys = {
            self.API_KEY_IOS: "ios",
            self.API_KEY_ANDROID: "android",
            self.API_KEY_WEB: "web",
        }
        keys.pop("", None)
        return keys

    @property
    def is_production(self) -> bool:
        return self.ENV.lower() == "production"

settings = Settings()
