"""
File: routers/admin.py
Purpose: Admin endpoint to update feature flags at runtime (in-memory, not persisted).
"""

import json
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError
from ..deps import get_store, require_admin_key, require_api_key
from ..errors import BadRequest
from ..instrumentation import FLAG_UPDATES
from ..schemas.config import FeatureUpdateRequest, FeatureUpdateResponse
from ..store import ConfigStore
from ..utils import utc_timestamp

router = APIRouter()
_logger = logging.getLogger(__name__)


# Registered ahead of the config router so "features" is never served as an environment.
@router.get("/config/features", include_in_schema=False)
async def features_not_readable() -> None:
    raise HTTPException(status_code=405, detail="Method Not Allowed", headers={"Allow": "POST"})


@router.post("/config/features", response_model=FeatureUpdateResponse,
             dependencies=[Depends(require_api_key), Depends(require_admin_key)])
async def update_features(req: Request, store: ConfigStore = Depends(get_store)) -> FeatureUpdateResponse:
    """Merge the posted flags into the live default document and return the full flag map."""
    # Body is parsed here, after both key checks, so auth failures win over payload errors.
    try:
        body = await req.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise BadRequest("Features object is required")
    if not isinstance(body, dict) or not isinstance(body.get("features"), dict):
        raise BadRequest("Features object is required")
    try:
        update = FeatureUpdateRequest.model_validate(body)
    except ValidationError:
        raise BadRequest("Feature flag values must be booleans")

    features = store.merge_features(update.features)
    FLAG_UPDATES.inc()
    _logger.info("Feature flags updated by admin", extra={"flags": update.features,
                                                         "platform": getattr(req.state, "platform", None)})
    return FeatureUpdateResponse(
        message="Feature flags updated successfully",
        features=features,
        timestamp=utc_timestamp(),
    )
