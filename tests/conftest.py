from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest


@pytest.fixture
def backoff_sleep():
    """Patch the retrier's sleep so backoff delays are recorded, not waited."""
    with patch("suitewatch.client.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        yield mock_sleep
