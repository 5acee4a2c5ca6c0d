"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from docjson.core.config import settings
from docjson.core.logging import setup_logging
from docjson.routes import extraction_router, health_router, models_router
from docjson.services.factory import build_client, build_orchestrator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize resources on startup, cleanup on shutdown."""
    setup_logging()

    # One pooled client shared by all requests
    client = build_client(settings)
    if client is None:
        logger.warning("OPENAI_API_KEY is not set; extraction requests will be rejected")
    else:
        logger.info("OpenAI client configured for %s", settings.OPENAI_BASE_URL)

    app.state.openai = client
    app.state.orchestrator = build_orchestrator(settings, client)
    logger.info("Loaded pricing for %d models", len(app.state.orchestrator.pricing))

    yield

    if client is not None:
        await client.close()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# Register routers
app.include_router(health_router)
app.include_router(models_router)
app.include_router(extraction_router)
