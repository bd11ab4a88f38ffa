"""
File: routers/config.py
Purpose: Configuration endpoints (plain, per-environment, versioned) behind the request gate.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from ..config import Settings
from ..deps import GATE, enforce_rate_limit, get_settings, get_store, require_api_key
from ..schemas.config import ConfigVersionResponse, RequestMetadata
from ..store import ConfigStore
from ..utils import document_digest, new_request_id, utc_timestamp

router = APIRouter()
_logger = logging.getLogger(__name__)


def _serve(req: Request, store: ConfigStore, settings: Settings,
           api_version: Optional[str] = None, environment: Optional[str] = None) -> JSONResponse:
    """Resolve the document, decorate it with metadata and cache headers."""
    doc = store.resolve(api_version, environment)
    payload = doc.model_dump(mode="json")
    metadata = RequestMetadata(
        timestamp=utc_timestamp(),
        requestId=new_request_id(),
        serverVersion=settings.SERVICE_VERSION,
        environment=environment or settings.ENV,
        apiVersion=api_version,
    )
    _logger.info(
        "Config served",
        extra={
            "app_id": req.headers.get("x-app-id", "unknown"),
            "app_version": req.headers.get("x-app-version", "unknown"),
            "platform": req.headers.get("x-platform", "unknown"),
            "key_platform": getattr(req.state, "platform", None),
            "api_version": api_version,
            "environment": environment,
            "request_id": metadata.requestId,
        },
    )
    headers = {
        "Cache-Control": f"public, max-age={settings.CACHE_MAX_AGE_SECS}",
        "ETag": f'"{document_digest(payload)}"',
    }
    body = {**payload, "metadata": metadata.model_dump(exclude_none=True)}
    return JSONResponse(content=body, headers=headers)


@router.get("/config", dependencies=GATE)
def get_config(req: Request, store: ConfigStore = Depends(get_store),
               settings: Settings = Depends(get_settings)) -> JSONResponse:
    """Default document for the unversioned API."""
    return _serve(req, store, settings)


# Declared before /config/{environment} so "version" is not taken as an environment.
@router.get("/config/version", response_model=ConfigVersionResponse,
            dependencies=[Depends(enforce_rate_limit), Depends(require_api_key)])
def get_config_version(store: ConfigStore = Depends(get_store)) -> ConfigVersionResponse:
    """Lightweight change check: document version plus a digest prefix."""
    doc = store.default
    return ConfigVersionResponse(
        version=doc.version,
        timestamp=utc_timestamp(),
        checksum=document_digest(doc.model_dump(mode="json"))[:16],
    )


@router.get("/config/{environment}", dependencies=GATE)
def get_config_for_environment(environment: str, req: Request, store: ConfigStore = Depends(get_store),
                               settings: Settings = Depends(get_settings)) -> JSONResponse:
    return _serve(req, store, settings, environment=environment)


@router.get("/v{version}/config", dependencies=GATE)
def get_versioned_config(version: str, req: Request, store: ConfigStore = Depends(get_store),
                         settings: Settings = Depends(get_settings)) -> JSONResponse:
    return _serve(req, store, settings, api_version=version)


@router.get("/v{version}/config/{environment}", dependencies=GATE)
def get_versioned_config_for_environment(version: str, environment: str, req: Request,
                                         store: ConfigStore = Depends(get_store),
                                         settings: Settings = Depends(get_settings)) -> JSONResponse:
    return _serve(req, store, settings, api_version=version, environment=environment)
