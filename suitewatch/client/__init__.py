"""HTTP client components: retrier, version probe, trigger and event stream."""

from suitewatch.client.events import (
    RunStatus,
    StatusClass,
    StreamEvent,
    StreamOutcome,
    classify_status,
)
from suitewatch.client.retry import retry_with_backoff
from suitewatch.client.stream import EventStreamConsumer
from suitewatch.client.trigger import JobRequest, TriggerClient, is_retryable_trigger_error
from suitewatch.client.version import probe_version

__all__ = [
    "RunStatus",
    "StatusClass",
    "StreamEvent",
    "StreamOutcome",
    "classify_status",
    "retry_with_backoff",
    "EventStreamConsumer",
    "JobRequest",
    "TriggerClient",
    "is_retryable_trigger_error",
    "probe_version",
]
