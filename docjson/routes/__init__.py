"""API routes package."""

from docjson.routes.extraction import router as extraction_router
from docjson.routes.health import router as health_router
from docjson.routes.models import router as models_router

__all__ = ["extraction_router", "health_router", "models_router"]
