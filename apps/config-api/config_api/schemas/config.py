"""
File: schemas/config.py
Purpose: Pydantic models for the configuration document and the response envelopes.
"""

from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

DEFAULT_FOUNDATION_MODEL = "claude-v3.5-sonnet"
DEFAULT_CONFIG_VERSION = "1.0.0"
DEFAULT_FEATURES: Dict[str, bool] = {"darkMode": False, "analytics": True, "newCheckout": False}


class CognitoConfig(BaseModel):
    userPoolId: str = ""
    appClientId: str = ""


class AWSConfig(BaseModel):
    cognito: CognitoConfig = Field(default_factory=CognitoConfig)


class APIConfig(BaseModel):
    websocketEndpoint: str = ""


class BotConfig(BaseModel):
    botId: str = ""
    foundationModel: str = DEFAULT_FOUNDATION_MODEL


class ConfigurationDocument(BaseModel):
    """Configuration served to clients.

    Every field has a default so partial sources still produce a full document:
    missing strings become "", the foundation model and version get their named
    defaults, and the known flags are filled in under whatever flags the source gives.
    """
    model_config = ConfigDict(frozen=True)

    aws: AWSConfig = Field(default_factory=AWSConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    bot: BotConfig = Field(default_factory=BotConfig)
    features: Dict[str, StrictBool] = Field(default_factory=lambda: dict(DEFAULT_FEATURES))
    version: str = DEFAULT_CONFIG_VERSION

    @field_validator("features")
    @classmethod
    def _fill_known_flags(cls, value: Dict[str, bool]) -> Dict[str, bool]:
        return {**DEFAULT_FEATURES, **value}


class RequestMetadata(BaseModel):
    """Per-response metadata appended to every served document."""
    timestamp: str
    requestId: str
    serverVersion: str
    environment: str
    apiVersion: Optional[str] = None


class ConfigVersionResponse(BaseModel):
    version: str
    timestamp: str
    checksum: str


class FeatureUpdateRequest(BaseModel):
    """Admin payload: {"features": {"newCheckout": true}}."""
    features: Dict[str, StrictBool]


class FeatureUpdateResponse(BaseModel):
    message: str
    features: Dict[str, bool]
    timestamp: str
