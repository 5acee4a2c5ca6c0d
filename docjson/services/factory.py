"""Factory for building the OpenAI client and orchestrator from settings."""

from __future__ import annotations

from typing import Optional

from openai import AsyncOpenAI

from docjson.core.config import Settings
from docjson.services.extractor import ExtractionOrchestrator
from docjson.services.pricing import PricingTable


def build_client(settings: Settings) -> Optional[AsyncOpenAI]:
    """Build the shared OpenAI client, or None when no API key is configured.

    The client never times out and never retries on its own: provider calls
    are bounded only by request cancellation, and failures are terminal.
    """
    if not settings.OPENAI_API_KEY.strip():
        return None
    return AsyncOpenAI(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_BASE_URL,
        timeout=None,
        max_retries=0,
    )


def build_pricing(settings: Settings) -> PricingTable:
    """Build the pricing table from MODEL_PRICING and MODEL_ALIASES."""
    return PricingTable.from_config(settings.MODEL_PRICING, settings.MODEL_ALIASES)


def build_orchestrator(
    settings: Settings, client: Optional[AsyncOpenAI] = None
) -> ExtractionOrchestrator:
    return ExtractionOrchestrator(
        client,
        build_pricing(settings),
        default_model=settings.DEFAULT_MODEL,
        upload_purpose=settings.UPLOAD_PURPOSE,
        timeout_threshold_s=settings.TIMEOUT_THRESHOLD_S,
    )


__all__ = ["build_client", "build_orchestrator", "build_pricing"]
