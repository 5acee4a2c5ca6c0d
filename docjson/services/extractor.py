"""Extraction orchestration.

One request runs through: validate -> upload files -> check schema -> build
payload -> invoke -> parse -> price -> assemble. The first failing stage ends
the request with an error response; nothing is retried and files uploaded
before a failure are left on the provider side.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from openai import AsyncOpenAI

from docjson.core.errors import ConfigurationError, ExtractionError, ValidationError
from docjson.schemas.api import ExtractionRequest, ExtractionResponse, RunDetails, Usage
from docjson.services.cancellation import DEFAULT_TIMEOUT_THRESHOLD_S, CancellationScope
from docjson.services.invoker import InferenceInvoker
from docjson.services.payload import build_payload, parse_schema, resolve_model
from docjson.services.pricing import PricingTable
from docjson.services.response_parser import ErrorEnvelope, load_body, parse_output, parse_usage
from docjson.services.uploader import DEFAULT_UPLOAD_PURPOSE, FileUploader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionOutcome:
    """HTTP status plus the body to send back."""

    status_code: int
    response: ExtractionResponse


def validate_request(request: ExtractionRequest, client: Optional[AsyncOpenAI]) -> None:
    """Preconditions checked before any remote call."""
    if not request.files:
        raise ValidationError("No files provided.")
    if client is None:
        raise ConfigurationError("OpenAI API key not configured.")


class ExtractionOrchestrator:
    """Runs extraction requests against OpenAI.

    Holds no per-request state: one instance serves all concurrent requests.
    """

    def __init__(
        self,
        client: Optional[AsyncOpenAI],
        pricing: PricingTable,
        *,
        default_model: Optional[str] = None,
        upload_purpose: str = DEFAULT_UPLOAD_PURPOSE,
        timeout_threshold_s: float = DEFAULT_TIMEOUT_THRESHOLD_S,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.client = client
        self.pricing = pricing
        self.default_model = default_model
        self.upload_purpose = upload_purpose
        self.timeout_threshold_s = timeout_threshold_s
        self.clock = clock

    async def extract(
        self,
        request: ExtractionRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ExtractionOutcome:
        """Run one extraction. Failures come back as ``is_error`` responses."""
        scope = CancellationScope(
            cancel_event,
            timeout_threshold_s=self.timeout_threshold_s,
            clock=self.clock,
        )
        try:
            response = await self._run(request, scope)
        except ExtractionError as e:
            logger.warning(
                "Extraction failed with status %d after %dms: %s",
                e.status_code,
                scope.elapsed_ms(),
                e.message,
            )
            return ExtractionOutcome(e.status_code, ExtractionResponse.failure(e.message))
        return ExtractionOutcome(200, response)

    async def _run(self, request: ExtractionRequest, scope: CancellationScope) -> ExtractionResponse:
        validate_request(request, self.client)

        uploader = FileUploader(self.client, purpose=self.upload_purpose)
        files = await uploader.upload_all(request.files, scope)

        schema = parse_schema(request.json_schema)

        model = resolve_model(request.model, self.default_model)
        payload = build_payload(
            model=model,
            prompt=request.prompt,
            file_ids=[f.file_id for f in files],
            schema=schema,
            schema_name=request.schema_name,
        )

        invocation = await InferenceInvoker(self.client).invoke(payload, scope)

        body = load_body(invocation.body)
        output = parse_output(body)
        if isinstance(output, ErrorEnvelope):
            # Provider-reported error on a 2xx: soft error, status 200
            logger.warning("OpenAI returned an error envelope: %s", output.message)
            return ExtractionResponse.failure(output.message)

        usage = parse_usage(body)
        # Priced by the requested model, not the one the provider reports
        cost = self.pricing.estimate_usd(
            model,
            usage.input_tokens,
            usage.output_tokens,
            cached_input_tokens=usage.cached_input_tokens,
        )

        logger.info(
            "Extraction complete: model=%s files=%d tokens=%d latency=%dms cost=$%s",
            model,
            len(files),
            usage.total_tokens,
            invocation.latency_ms,
            cost,
        )

        return ExtractionResponse(
            is_error=False,
            data=output.text,
            details=RunDetails(
                model=model,
                input_tokens=usage.input_tokens,
                output_tokens=usage.output_tokens,
                total_tokens=usage.total_tokens,
                latency_ms=invocation.latency_ms,
                estimated_cost_usd=float(cost),
            ),
            usage=Usage(
                input_tokens=usage.input_tokens,
                output_tokens=usage.output_tokens,
                total_tokens=usage.total_tokens,
                reasoning_tokens=usage.reasoning_tokens,
            ),
            files=files,
        )


__all__ = ["ExtractionOrchestrator", "ExtractionOutcome", "validate_request"]
