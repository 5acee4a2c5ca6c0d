"""Per-request cancellation and timeout classification.

Provider calls run with no client-side timeout. A call can only end early
because the caller asked for it (the scope's event is set) or because
something below us gave up on the connection. The second case counts as a
provider timeout once the request has been running for at least the
threshold; anything shorter is treated as a cancellation.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Optional, TypeVar

from openai import APITimeoutError

from docjson.core.errors import ExtractionError, ProviderTimeoutError, RequestCancelledError

T = TypeVar("T")

DEFAULT_TIMEOUT_THRESHOLD_S = 90.0


class CancellationScope:
    """Cancellation signal and wall clock shared by the stages of one request."""

    def __init__(
        self,
        event: Optional[asyncio.Event] = None,
        *,
        timeout_threshold_s: float = DEFAULT_TIMEOUT_THRESHOLD_S,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.event = event if event is not None else asyncio.Event()
        self.timeout_threshold_s = timeout_threshold_s
        self._clock = clock
        self.started = clock()

    @property
    def cancel_requested(self) -> bool:
        return self.event.is_set()

    def elapsed_s(self) -> float:
        return self._clock() - self.started

    def elapsed_ms(self) -> int:
        return max(0, int(self.elapsed_s() * 1000))

    def raise_if_cancelled(self) -> None:
        if self.cancel_requested:
            raise RequestCancelledError()

    def past_threshold(self) -> bool:
        """True once the request has run the threshold without caller cancellation."""
        return not self.cancel_requested and self.elapsed_s() >= self.timeout_threshold_s

    def abort_error(self) -> ExtractionError:
        """Classify a call that ended without producing a response."""
        if self.past_threshold():
            return ProviderTimeoutError()
        return RequestCancelledError()

    async def run(self, call: Awaitable[T]) -> T:
        """Await ``call`` unless the caller cancels first.

        Raises:
            RequestCancelledError: The caller cancelled, or the call was
                aborted before the timeout threshold.
            ProviderTimeoutError: The call was aborted after the threshold
                without the caller cancelling.
        """
        if self.cancel_requested:
            if asyncio.iscoroutine(call):
                call.close()
            raise RequestCancelledError()

        task = asyncio.ensure_future(call)
        waiter = asyncio.ensure_future(self.event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
                await asyncio.wait({task})

        if task not in done:
            raise RequestCancelledError()

        try:
            return task.result()
        except (APITimeoutError, asyncio.CancelledError) as exc:
            raise self.abort_error() from exc


__all__ = ["CancellationScope", "DEFAULT_TIMEOUT_THRESHOLD_S"]
