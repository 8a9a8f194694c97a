"""Start a remote test suite run."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from suitewatch.client.retry import retry_with_backoff
from suitewatch.errors import InvalidResponseError, MissingRunIdError, TriggerError

TRIGGER_PATH = "/external/actions/trigger"

# Matches the status code embedded in a TriggerError message.
_TRIGGER_STATUS_RE = re.compile(r"Failed to trigger action: (\d{3})\b")


@dataclass(frozen=True)
class JobRequest:
    """What to run.  ``suite_ids=None`` lets the service pick the suites."""

    suite_ids: tuple[str, ...] | None = None
    fail_fast: bool = False
    # Accepted as input but not sent: the endpoint does not support it yet.
    block: bool = False

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.suite_ids is not None:
            body["suite_ids"] = list(self.suite_ids)
        body["fail_fast"] = self.fail_fast
        return body


def _status_code_of(err: Exception) -> int | None:
    code = getattr(err, "status_code", None)
    if isinstance(code, int):
        return code
    match = _TRIGGER_STATUS_RE.search(str(err))
    return int(match.group(1)) if match else None


def is_retryable_trigger_error(err: Exception) -> bool:
    """Retry network failures and 5xx answers; never 4xx."""
    if isinstance(err, httpx.TransportError):
        return True
    code = _status_code_of(err)
    return code is not None and 500 <= code < 600


class TriggerClient:
    """Issue the job-start request and return the run id."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        origin_url: str,
        api_key: str,
        max_retries: int = 0,
    ):
        self._client = client
        self.url = f"{origin_url}{TRIGGER_PATH}"
        self._api_key = api_key
        self.max_retries = max_retries
        self.attempts = 0

    async def trigger(self, request: JobRequest) -> str:
        body = request.to_body()
        logger.info("Triggering test suite execution...")
        logger.debug(f"Request body: {json.dumps(body)}")

        if self.max_retries > 0:
            response = await retry_with_backoff(
                lambda: self._post(body),
                max_retries=self.max_retries,
                is_retryable=is_retryable_trigger_error,
                label="Trigger",
            )
        else:
            response = await self._post(body)

        try:
            data = response.json()
        except ValueError as e:
            raise InvalidResponseError(f"Invalid JSON from the trigger endpoint: {e}") from e

        run_id = data.get("run_id") if isinstance(data, dict) else None
        if not run_id:
            raise MissingRunIdError()
        return str(run_id)

    async def _post(self, body: dict[str, Any]) -> httpx.Response:
        self.attempts += 1
        r = await self._client.post(
            self.url,
            headers={"Content-Type": "application/json", "X-Api-Key": self._api_key},
            content=json.dumps(body),
        )
        if not r.is_success:
            raise TriggerError(r.status_code, r.text)
        return r
