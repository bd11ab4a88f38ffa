"""
File: models.py
Purpose: Pydantic models for the documents returned by the Configuration API.
"""

from typing import Dict, Optional
from pydantic import BaseModel, Field


class CognitoConfig(BaseModel):
    userPoolId: str
    appClientId: str


class AWSConfig(BaseModel):
    cognito: CognitoConfig


class APIConfig(BaseModel):
    websocketEndpoint: str


class BotConfig(BaseModel):
    botId: str
    foundationModel: str


class ConfigMetadata(BaseModel):
    timestamp: str
    requestId: str
    serverVersion: str
    environment: str
    apiVersion: Optional[str] = None


class AppConfig(BaseModel):
    """Configuration document as served, including per-response metadata."""
    aws: AWSConfig
    api: APIConfig
    bot: BotConfig
    features: Dict[str, bool] = Field(default_factory=dict)
    version: str
    metadata: Optional[ConfigMetadata] = None


class ConfigVersion(BaseModel):
    version: str
    timestamp: str
    checksum: str
