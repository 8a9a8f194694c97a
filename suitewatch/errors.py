"""Exception hierarchy for expected failures.

Anything derived from :class:`SuitewatchError` carries a message that is safe
to surface to the user as-is.  Everything else is treated as a bug.
"""

from __future__ import annotations


class SuitewatchError(Exception):
    """Base class for expected, user-facing failures."""


class ConfigError(SuitewatchError):
    """Invalid or missing configuration input."""


class TriggerError(SuitewatchError):
    """The trigger endpoint answered with a non-2xx status.

    The message format ``Failed to trigger action: <status> <body>`` is relied
    upon by :func:`suitewatch.client.trigger.is_retryable_trigger_error`.
    """

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Failed to trigger action: {status_code} {body}")


class MissingRunIdError(SuitewatchError):
    """The trigger call succeeded but returned no run identifier."""

    def __init__(self, message: str = "No run ID received from the trigger endpoint"):
        super().__init__(message)


class InvalidResponseError(SuitewatchError):
    """A 2xx response whose body could not be decoded."""


class StreamConnectError(SuitewatchError):
    """The events endpoint refused the streaming connection."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Failed to connect to SSE endpoint: {status_code}")
