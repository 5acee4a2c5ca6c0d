"""Document extraction endpoint."""

import asyncio
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from docjson.core.config import settings
from docjson.deps import get_orchestrator
from docjson.schemas.api import ExtractionRequest, ExtractionResponse
from docjson.services.extractor import ExtractionOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["extraction"])


async def _watch_disconnect(request: Request, cancel_event: asyncio.Event, interval: float) -> None:
    """Set ``cancel_event`` once the client goes away."""
    while not cancel_event.is_set():
        if await request.is_disconnected():
            logger.info("Client disconnected; cancelling extraction")
            cancel_event.set()
            return
        await asyncio.sleep(interval)


@router.post("/extract", response_model=ExtractionResponse, response_model_exclude_none=True)
async def extract(
    request: Request,
    body: ExtractionRequest,
    orchestrator: ExtractionOrchestrator = Depends(get_orchestrator),
):
    """Extract a JSON answer from the uploaded files."""
    logger.info("Extraction requested for %d file(s)", len(body.files))

    cancel_event = asyncio.Event()
    watcher = asyncio.create_task(
        _watch_disconnect(request, cancel_event, settings.DISCONNECT_POLL_S)
    )
    try:
        outcome = await orchestrator.extract(body, cancel_event)
    finally:
        watcher.cancel()
        await asyncio.gather(watcher, return_exceptions=True)

    return JSONResponse(status_code=outcome.status_code, content=outcome.response.to_wire())
