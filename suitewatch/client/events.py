"""Run status classification and stream event types."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

RUN_EVENT_TYPE = "test_suite_run.event"


class RunStatus(str, enum.Enum):
    """Statuses the events endpoint is known to emit."""

    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FLAKY = "flaky"
    FAILED = "failed"
    FAILED_PENDING = "failed_pending"
    ERROR = "error"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


class StatusClass(enum.Enum):
    """Coarse outcome class of a run status."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"

    def is_terminal(self) -> bool:
        return self is not StatusClass.PENDING


PENDING_STATUSES = frozenset({RunStatus.PENDING.value, RunStatus.RUNNING.value})
SUCCESS_STATUSES = frozenset({RunStatus.PASSED.value, RunStatus.FLAKY.value})


def classify_status(status: str) -> StatusClass:
    """Map a status string onto its class.

    Unknown values are failures: a status we do not understand must never be
    mistaken for a passing run.
    """
    if status in PENDING_STATUSES:
        return StatusClass.PENDING
    if status in SUCCESS_STATUSES:
        return StatusClass.SUCCESS
    return StatusClass.FAILURE


@dataclass(frozen=True)
class StreamEvent:
    """One decoded SSE frame."""

    event_type: str | None
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def status(self) -> str | None:
        value = self.payload.get("status")
        return value if isinstance(value, str) else None

    @property
    def ts(self) -> Any:
        return self.payload.get("ts")

    @property
    def elapsed(self) -> Any:
        return self.payload.get("elapsed")

    @property
    def is_run_event(self) -> bool:
        """Frames without an ``event:`` label are treated as run events."""
        return self.event_type is None or self.event_type == RUN_EVENT_TYPE


class StreamState(str, enum.Enum):
    """Lifecycle of an :class:`EventStreamConsumer`."""

    IDLE = "idle"
    CONNECTING = "connecting"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class StreamOutcome:
    """How a stream consumption ended.

    ``completed`` carries the terminal status (which may itself be a failing
    one), ``failed`` carries the connection error message and ``ended`` means
    the stream closed before any terminal status arrived.
    """

    state: str
    status: str | None = None
    message: str | None = None

    @classmethod
    def completed(cls, status: str, message: str | None = None) -> StreamOutcome:
        return cls(state="completed", status=status, message=message)

    @classmethod
    def failed(cls, message: str) -> StreamOutcome:
        return cls(state="failed", message=message)

    @classmethod
    def ended(cls) -> StreamOutcome:
        return cls(state="ended")

    @property
    def ok(self) -> bool:
        if self.state == "failed":
            return False
        if self.status is None:
            return True
        return classify_status(self.status) is StatusClass.SUCCESS
