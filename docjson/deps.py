"""Shared dependencies for FastAPI routes."""

from __future__ import annotations

from fastapi import Request

from docjson.core.config import settings
from docjson.services.extractor import ExtractionOrchestrator


def get_orchestrator(request: Request) -> ExtractionOrchestrator:
    """Get the orchestrator built at startup, building one lazily if missing.

    The lazy path covers apps used without running the lifespan. Its client is
    never closed explicitly and lives as long as the process.
    """
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        from docjson.services.factory import build_client, build_orchestrator

        orchestrator = build_orchestrator(settings, build_client(settings))
        request.app.state.orchestrator = orchestrator
    return orchestrator


__all__ = ["get_orchestrator"]
