"""Best-effort probe of the remote service version."""

from __future__ import annotations

import httpx
from loguru import logger

from suitewatch.client.retry import always_retry, retry_with_backoff
from suitewatch.report.sink import ReportSink

VERSION_PATH = "/version"
VERSION_MAX_RETRIES = 3


async def probe_version(
    client: httpx.AsyncClient,
    origin_url: str,
    sink: ReportSink,
    *,
    max_retries: int = VERSION_MAX_RETRIES,
) -> str | None:
    """Fetch ``/version`` and report it.  Never raises; returns None on failure."""

    async def _fetch() -> str:
        r = await client.get(f"{origin_url}{VERSION_PATH}")
        r.raise_for_status()
        data = r.json()
        version = data.get("version") if isinstance(data, dict) else None
        return str(version) if version else "unknown"

    try:
        version = await retry_with_backoff(
            _fetch,
            max_retries=max_retries,
            is_retryable=always_retry,
            label="Version probe",
        )
    except Exception as e:
        logger.warning(f"Could not determine service version: {e}")
        return None

    logger.info(f"Service version: {version}")
    sink.set_output("version", version)
    return version
