"""Health check endpoints."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    """Liveness probe."""
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness probe - checks the OpenAI client and pricing table."""
    checks = {}
    all_ok = True

    # Check OpenAI client
    if getattr(request.app.state, "openai", None) is not None:
        checks["openai"] = "ok"
    else:
        checks["openai"] = "not configured"
        all_ok = False

    # Check pricing; an empty table only disables cost estimates
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is not None and len(orchestrator.pricing):
        checks["pricing"] = f"{len(orchestrator.pricing)} models"
    else:
        checks["pricing"] = "empty"

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={"status": "ok" if all_ok else "degraded", "checks": checks},
    )
