"""Report sinks.

The client reports key/value outputs (``version``, ``runId``, ``status``) and
failure messages through a sink instead of printing or exiting directly.
"""

from __future__ import annotations

import os
from pathlib import Path
from uuid import uuid4

from loguru import logger


class ReportSink:
    """Record outputs and failures.  Subclasses decide where they go."""

    def __init__(self) -> None:
        self.outputs: dict[str, str] = {}
        self.failures: list[str] = []

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    def set_output(self, name: str, value: str) -> None:
        self.outputs[name] = value
        self._publish_output(name, value)

    def fail(self, message: str) -> None:
        self.failures.append(message)
        self._publish_failure(message)

    def _publish_output(self, name: str, value: str) -> None:
        pass

    def _publish_failure(self, message: str) -> None:
        pass


class MemorySink(ReportSink):
    """Keep everything in memory."""


class ConsoleSink(ReportSink):
    """Log outputs and failures."""

    def _publish_output(self, name: str, value: str) -> None:
        logger.info(f"Output {name}={value}")

    def _publish_failure(self, message: str) -> None:
        logger.error(message)


class GithubOutputSink(ConsoleSink):
    """Publish through GitHub Actions workflow files and commands.

    Outputs are appended to the file named by ``$GITHUB_OUTPUT``; values
    containing line breaks use the multiline ``name<<DELIMITER`` form so they
    cannot add output lines of their own.  Failures are printed as ``::error::``
    workflow commands.
    """

    def __init__(self, output_path: str | Path | None = None) -> None:
        super().__init__()
        path = output_path or os.environ.get("GITHUB_OUTPUT")
        self.output_path = Path(path) if path else None

    def _publish_output(self, name: str, value: str) -> None:
        super()._publish_output(name, value)
        if self.output_path is None:
            return
        with self.output_path.open("a", encoding="utf-8") as f:
            f.write(_format_output(name, value))

    def _publish_failure(self, message: str) -> None:
        super()._publish_failure(message)
        print(f"::error::{_escape_command_data(message)}")


def _format_output(name: str, value: str) -> str:
    if "\n" not in value and "\r" not in value:
        return f"{name}={value}\n"
    delimiter = f"ghadelimiter_{uuid4()}"
    while delimiter in value:
        delimiter = f"ghadelimiter_{uuid4()}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def _escape_command_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
