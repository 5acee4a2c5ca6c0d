"""Responses API invocation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from docjson.core.errors import UpstreamError
from docjson.services.cancellation import CancellationScope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Invocation:
    """Raw 2xx body plus wall-clock latency since the request started."""

    body: str
    latency_ms: int


class InferenceInvoker:
    """Sends one payload to the Responses API and returns the raw body.

    The client must be built with ``timeout=None`` and ``max_retries=0``: the
    call may legitimately run for minutes and is bounded only by the scope's
    cancellation signal.
    """

    def __init__(self, client: AsyncOpenAI):
        self.client = client

    async def invoke(self, payload: dict[str, Any], scope: CancellationScope) -> Invocation:
        """Send ``payload``.

        Raises:
            UpstreamError: Non-2xx status (passthrough) or transport failure.
            RequestCancelledError: The caller cancelled.
            ProviderTimeoutError: The call was aborted past the threshold.
        """
        try:
            raw = await scope.run(self.client.responses.with_raw_response.create(**payload))
        except APIStatusError as e:
            logger.warning("Responses call failed with status %d", e.status_code)
            raise UpstreamError(e.status_code, e.response.text)
        except APIConnectionError as e:
            # A long call dropped by the provider or a gateway is a timeout
            if scope.past_threshold():
                raise scope.abort_error() from e
            raise UpstreamError(502, f"Responses call failed: {e}")

        body = raw.http_response.text
        return Invocation(body=body, latency_ms=scope.elapsed_ms())


__all__ = ["InferenceInvoker", "Invocation"]
