"""Server-Sent-Events consumer that follows a run to its terminal status.

Frames are separated by a blank line.  Each read's buffer is consumed in full
and then reset: a frame that arrives split across two reads is parsed as two
separate (usually unparseable) frames.  The events endpoint flushes whole
frames, so partial frames are not carried over between reads.
"""

from __future__ import annotations

import asyncio
import codecs
import json
from datetime import datetime
from typing import Any

import httpx
from loguru import logger

from suitewatch.client.events import (
    StatusClass,
    StreamEvent,
    StreamOutcome,
    StreamState,
    classify_status,
)
from suitewatch.errors import StreamConnectError
from suitewatch.report.sink import ReportSink

EVENTS_PATH = "/external/actions/run/{run_id}/events"
FRAME_DELIMITER = "\n\n"
CONNECT_TIMEOUT = 30.0


def events_url(origin_url: str, run_id: str) -> str:
    return f"{origin_url}{EVENTS_PATH.format(run_id=run_id)}"


def split_frames(buffer: str) -> list[str]:
    """Split *buffer* into non-blank frames."""
    return [frame for frame in buffer.split(FRAME_DELIMITER) if frame.strip()]


def _field(lines: list[str], prefix: str) -> str | None:
    for line in lines:
        if line.startswith(prefix):
            return line[len(prefix):].strip()
    return None


def parse_frame(frame: str) -> tuple[str | None, str | None]:
    """Return ``(event_type, data)``; either may be None."""
    lines = frame.split("\n")
    return _field(lines, "event:"), _field(lines, "data:")


def decode_event(frame: str) -> StreamEvent | None:
    """Decode one frame into a :class:`StreamEvent`.

    Returns None for frames without a payload and for payloads that are not a
    JSON object; the latter are logged as warnings.
    """
    event_type, data = parse_frame(frame)
    logger.debug(f"Event type: {event_type}")
    logger.debug(f"Event data: {data}")
    if not data:
        return None
    try:
        payload = json.loads(data)
    except ValueError:
        logger.warning(f"Failed to parse event data: {data}")
        return None
    if not isinstance(payload, dict):
        logger.warning(f"Ignoring non-object event data: {data}")
        return None
    return StreamEvent(event_type=event_type, payload=payload)


def _format_ts(ts: Any) -> str:
    if not ts:
        return "-"
    try:
        return datetime.fromisoformat(str(ts)).isoformat()
    except ValueError:
        return str(ts)


def describe_event(event: StreamEvent) -> str:
    elapsed = f"({event.elapsed} seconds)" if event.elapsed else "-"
    return f"{event.event_type} at {_format_ts(event.ts)}: {event.status} {elapsed}"


class EventStreamConsumer:
    """Consume the events endpoint of one run.

    Reports ``status`` and any failure to *sink* itself; callers only look at
    the returned :class:`StreamOutcome`.  The consumer never retries.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        sink: ReportSink,
        *,
        timeout: float | None = None,
    ):
        self._client = client
        self._sink = sink
        self.timeout = timeout
        self.state = StreamState.IDLE
        self._response: httpx.Response | None = None
        self._cancelled = False

    async def consume(self, url: str, api_key: str) -> StreamOutcome:
        if self._cancelled:
            logger.debug("SSE consumer already cancelled, not connecting")
            return self._closed()
        try:
            if self.timeout is None:
                return await self._consume(url, api_key)
            return await asyncio.wait_for(self._consume(url, api_key), timeout=self.timeout)
        except asyncio.TimeoutError:
            return self._fail(f"SSE connection error: no terminal status within {self.timeout}s")
        except Exception as e:
            return self._fail(f"SSE connection error: {str(e) or type(e).__name__}")

    async def cancel(self) -> None:
        """Close the stream; an in-flight read then ends as a normal close.

        For callers embedding the consumer in their own task structure; the
        runner never cancels.  Cancellation is final: a later :meth:`consume`
        returns an ``ended`` outcome without connecting.
        """
        self._cancelled = True
        if self._response is not None:
            await self._response.aclose()

    # -- internals -----------------------------------------------------------

    async def _consume(self, url: str, api_key: str) -> StreamOutcome:
        self.state = StreamState.CONNECTING
        logger.info(f"Connecting to SSE endpoint: {url}")
        async with self._client.stream(
            "GET",
            url,
            headers={"X-Api-Key": api_key},
            timeout=httpx.Timeout(CONNECT_TIMEOUT, read=None),
        ) as response:
            self._response = response
            try:
                if self._cancelled:
                    return self._closed()
                if not response.is_success:
                    raise StreamConnectError(response.status_code)
                self.state = StreamState.STREAMING
                return await self._read(response)
            except (httpx.StreamError, httpx.TransportError):
                if not self._cancelled:
                    raise
                logger.debug("SSE reader aborted")
                return self._closed()
            finally:
                self._response = None

    async def _read(self, response: httpx.Response) -> StreamOutcome:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        buffer = ""
        async for chunk in response.aiter_bytes():
            buffer += decoder.decode(chunk)
            frames = split_frames(buffer)
            buffer = ""
            for frame in frames:
                outcome = self._handle_frame(frame)
                if outcome is not None:
                    return outcome
            if self._cancelled:
                logger.debug("SSE reader cancelled")
                return self._closed()

        logger.warning("Event stream ended before the run reached a terminal status")
        return self._closed()

    def _handle_frame(self, frame: str) -> StreamOutcome | None:
        event = decode_event(frame)
        if event is None:
            return None

        logger.info(f"Event received: {json.dumps(event.payload)}")
        logger.info(describe_event(event))

        if not event.is_run_event:
            return None

        status = event.status
        if status is None:
            logger.warning(f"Run event without a status: {json.dumps(event.payload)}")
            return None

        status_class = classify_status(status)
        if not status_class.is_terminal():
            return None

        self.state = StreamState.COMPLETED
        self._sink.set_output("status", status)
        if status_class is StatusClass.FAILURE:
            message = f"Test suite execution failed with status: {status}"
            self._sink.fail(message)
            return StreamOutcome.completed(status, message)
        logger.info(f"Test suite run finished with status: {status}")
        return StreamOutcome.completed(status)

    def _closed(self) -> StreamOutcome:
        self.state = StreamState.COMPLETED
        return StreamOutcome.ended()

    def _fail(self, message: str) -> StreamOutcome:
        self.state = StreamState.FAILED
        self._sink.fail(message)
        return StreamOutcome.failed(message)
