"""Trigger a test suite run and follow it to its terminal status."""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from loguru import logger

from suitewatch.client.events import StreamOutcome
from suitewatch.client.stream import EventStreamConsumer, events_url
from suitewatch.client.trigger import TriggerClient
from suitewatch.client.version import probe_version
from suitewatch.config.schema import ActionConfig
from suitewatch.errors import SuitewatchError
from suitewatch.report.sink import ReportSink

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"
REQUEST_TIMEOUT = 30.0


@dataclass
class RunResult:
    """Summary of one run, mirroring what was reported to the sink."""

    version: str | None = None
    run_id: str | None = None
    outcome: StreamOutcome | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.outcome is not None and self.outcome.ok


class ActionRunner:
    """Sequence version probe, trigger and event stream for one run."""

    def __init__(
        self,
        config: ActionConfig,
        sink: ReportSink,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config
        self.sink = sink
        self._client = client

    async def run(self) -> RunResult:
        if self._client is not None:
            return await self._run(self._client)
        async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
            return await self._run(client)

    async def _run(self, client: httpx.AsyncClient) -> RunResult:
        result = RunResult()
        cfg = self.config
        try:
            logger.debug("Inputs:")
            logger.debug(f"- originUrl: {cfg.origin_url}")
            logger.debug(
                f"- suiteIds: {', '.join(cfg.suite_ids) if cfg.suite_ids else 'not provided'}"
            )
            logger.debug(f"- failFast: {cfg.fail_fast}")
            logger.debug(f"- block: {cfg.block}")
            logger.debug(f"- maxRetries: {cfg.max_retries}")

            result.version = await probe_version(client, cfg.origin_url, self.sink)

            trigger = TriggerClient(client, cfg.origin_url, cfg.api_key, cfg.max_retries)
            result.run_id = await trigger.trigger(cfg.job_request())
            logger.info(f"Run ID: {result.run_id}")
            self.sink.set_output("runId", result.run_id)

            consumer = EventStreamConsumer(client, self.sink, timeout=cfg.stream_timeout)
            result.outcome = await consumer.consume(
                events_url(cfg.origin_url, result.run_id), cfg.api_key
            )
            if result.outcome.state == "failed":
                # Already reported by the consumer.
                result.error = result.outcome.message
            else:
                logger.info("Test suite execution completed")
        except (SuitewatchError, httpx.HTTPError) as e:
            result.error = str(e) or type(e).__name__
            self.sink.fail(result.error)
        except Exception:
            logger.exception("Unexpected error during run")
            result.error = UNKNOWN_ERROR_MESSAGE
            self.sink.fail(result.error)
        return result
