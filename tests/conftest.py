"""Pytest configuration and fixtures."""

import os

# No real credential BEFORE any app imports
os.environ["OPENAI_API_KEY"] = ""

import json
from decimal import Decimal
from typing import Callable, Union

import httpx
import pytest
from openai import AsyncOpenAI

from docjson.schemas.api import ExtractionRequest, FilePart
from docjson.services.extractor import ExtractionOrchestrator
from docjson.services.pricing import PricingRate, PricingTable

Reply = Union[httpx.Response, Callable[[httpx.Request], object]]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeOpenAI:
    """Scripted OpenAI Files + Responses endpoints for httpx.MockTransport.

    Uploads are answered from ``upload_replies`` in order, falling back to a
    generated ``file-N`` id. The Responses endpoint answers with
    ``inference_reply``.
    """

    def __init__(self):
        self.upload_replies: list[Reply] = []
        self.inference_reply: Reply = httpx.Response(
            200,
            json={
                "output_text": ['{"total": 42}'],
                "usage": {"input_tokens": 1000, "output_tokens": 500, "total_tokens": 1500},
            },
        )
        self.upload_requests: list[httpx.Request] = []
        self.inference_requests: list[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.upload_requests) + len(self.inference_requests)

    def inference_payload(self, index: int = -1) -> dict:
        return json.loads(self.inference_requests[index].content)

    async def handle(self, request: httpx.Request) -> httpx.Response:
        await request.aread()
        if request.url.path.endswith("/files"):
            self.upload_requests.append(request)
            number = len(self.upload_requests)
            if number <= len(self.upload_replies):
                return await self._reply(self.upload_replies[number - 1], request)
            return httpx.Response(
                200, json={"id": f"file-{number}", "object": "file", "purpose": "assistants"}
            )
        if request.url.path.endswith("/responses"):
            self.inference_requests.append(request)
            return await self._reply(self.inference_reply, request)
        return httpx.Response(404, json={"error": {"message": "unknown route"}})

    @staticmethod
    async def _reply(reply: Reply, request: httpx.Request) -> httpx.Response:
        if isinstance(reply, httpx.Response):
            return reply
        result = reply(request)
        if hasattr(result, "__await__"):
            result = await result
        return result

    def client(self) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key="test-key",
            base_url="https://openai.test/v1",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(self.handle)),
            timeout=None,
            max_retries=0,
        )


def _make_request(*names: str, **kwargs) -> ExtractionRequest:
    kwargs.setdefault("prompt", "Extract the invoice total.")
    files = [FilePart(file_name=name, bytes=f"content of {name}".encode()) for name in names]
    return ExtractionRequest(files=files, **kwargs)


@pytest.fixture
def make_request():
    """Build an ExtractionRequest with one small file per name."""
    return _make_request


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def pricing():
    return PricingTable(
        [
            PricingRate("gpt-4.1", Decimal("2"), Decimal("8"), Decimal("0.5")),
            PricingRate("gpt-4.1-mini", Decimal("0.4"), Decimal("1.6"), Decimal("0.1")),
        ],
        {"gpt-4.1-2025-04-14": "gpt-4.1"},
    )


@pytest.fixture
def orchestrator(fake_openai, pricing, clock):
    return ExtractionOrchestrator(
        fake_openai.client(),
        pricing,
        default_model="gpt-4.1",
        timeout_threshold_s=90.0,
        clock=clock,
    )
