"""SSE stream engine.

Drives one long-lived ``text/event-stream`` response from a lazy,
possibly infinite, async iterable of SSEEvent values.

State machine (per connection):

    INITIATED --first chunk--> PRODUCING --source exhausted--> COMPLETED
                                   |------source raised------> FAILED
                                   |------peer disconnected--> CANCELLED

- INITIATED: headers go out with the first chunk, a comment line that
  forces intermediaries to open the stream.
- PRODUCING: one event is pulled, formatted and handed to the transport
  before the next is pulled (backpressure comes from the transport).
  With a keep-alive interval, a comment is written whenever the source
  stays silent that long; the pending pull is kept, so order is unchanged.
- COMPLETED / FAILED: the body generator returns, which ends the chunked
  response. A failure is logged, never turned into a JSON error: the
  status line is already on the wire.
- CANCELLED: the source is no longer pulled and is closed (``aclose()``)
  so upstream subscriptions can release their resources.

Usage:
    async def ticks() -> AsyncIterator[SSEEvent]:
        for n in range(3):
            yield SSEEvent(data=str(n))

    response = build_sse_response(ticks(), logger=logger)
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable, AsyncIterator
from enum import StrEnum
from typing import Any

import anyio
from starlette import status
from starlette.responses import StreamingResponse

from api_server.core.trace import get_trace_id
from api_server.domain.events.sse_event import SSEConstants, SSEEvent
from api_server.domain.protocols.logger_protocol import LoggerProtocol
from api_server.presentation.http.response import StreamResponse

_EXHAUSTED = object()


class SSEStreamState(StrEnum):
    """Lifecycle of one SSE connection."""

    INITIATED = "initiated"
    PRODUCING = "producing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class SSEStream:
    """One SSE connection's producer.

    Args:
        source: Async iterable of events, consumed at most once.
        logger: Logger for completion, failure and cancellation records.
        keepalive_interval: Seconds of source silence before a keep-alive
            comment is written (None disables keep-alives).
        initial_comment: Comment written before the first event.
    """

    def __init__(
        self,
        source: AsyncIterable[SSEEvent],
        logger: LoggerProtocol,
        *,
        keepalive_interval: float | None = None,
        initial_comment: str = SSEConstants.INITIAL_COMMENT,
    ) -> None:
        if keepalive_interval is not None and keepalive_interval <= 0:
            raise ValueError("keepalive_interval must be positive")
        self._source = source
        self._logger = logger
        self._keepalive_interval = keepalive_interval
        self._initial_comment = initial_comment
        self.state = SSEStreamState.INITIATED
        self.event_count = 0

    async def body(self) -> AsyncIterator[bytes]:
        """Yield the encoded chunks of the stream, in order."""
        if self.state is not SSEStreamState.INITIATED:
            raise RuntimeError("SSE stream body can only be iterated once")

        iterator = aiter(self._source)
        pending: asyncio.Task[Any] | None = None
        try:
            yield SSEEvent.comment(self._initial_comment).encode()
            self.state = SSEStreamState.PRODUCING

            while True:
                if self._keepalive_interval is None:
                    item = await _pull(iterator)
                else:
                    if pending is None:
                        pending = asyncio.ensure_future(_pull(iterator))
                    done, _ = await asyncio.wait(
                        {pending}, timeout=self._keepalive_interval
                    )
                    if not done:
                        yield SSEEvent.comment("keepalive").encode()
                        continue
                    item, pending = pending.result(), None

                if item is _EXHAUSTED:
                    break
                yield item.encode()
                self.event_count += 1

        except (asyncio.CancelledError, GeneratorExit):
            self.state = SSEStreamState.CANCELLED
            self._logger.info("Stream cancelled", event_count=self.event_count)
            raise
        except Exception as exc:
            self.state = SSEStreamState.FAILED
            self._logger.error("Stream failed", error=exc, event_count=self.event_count)
        else:
            self.state = SSEStreamState.COMPLETED
            self._logger.info("Stream completed", event_count=self.event_count)
        finally:
            with anyio.CancelScope(shield=True):
                if pending is not None and not pending.done():
                    pending.cancel()
                    await asyncio.gather(pending, return_exceptions=True)
                await _close(iterator)


async def _pull(iterator: AsyncIterator[SSEEvent]) -> Any:
    try:
        return await anext(iterator)
    except StopAsyncIteration:
        return _EXHAUSTED


async def _close(iterator: AsyncIterator[SSEEvent]) -> None:
    aclose = getattr(iterator, "aclose", None)
    if aclose is not None:
        await aclose()


def build_sse_response(
    source: AsyncIterable[SSEEvent],
    *,
    logger: LoggerProtocol,
    keepalive_interval: float | None = None,
) -> StreamResponse:
    """Wrap an event source in a 200 ``text/event-stream`` response.

    Args:
        source: Async iterable of events.
        logger: Logger passed to the stream. The current trace ID, if any,
            is bound onto it because the body runs after the request's
            trace context has been reset.
        keepalive_interval: See SSEStream.

    Returns:
        StreamResponse: Streaming response with the four SSE headers.
    """
    trace_id = get_trace_id()
    if trace_id is not None:
        logger = logger.bind(trace_id=trace_id)
    stream = SSEStream(source, logger, keepalive_interval=keepalive_interval)
    return StreamResponse(
        StreamingResponse(
            stream.body(),
            status_code=status.HTTP_200_OK,
            headers=dict(SSEConstants.DEFAULT_HEADERS),
        )
    )
