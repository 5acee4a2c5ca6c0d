"""Model catalogue endpoint."""

from fastapi import APIRouter

from docjson.core.config import settings

router = APIRouter(prefix="/api/models", tags=["models"])


@router.get("", response_model=list[str])
def list_models():
    """Models that support JSON schema extraction."""
    return settings.ALLOWED_MODELS
