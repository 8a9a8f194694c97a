"""Report sinks: where run outputs and failures are published."""

from suitewatch.report.sink import ConsoleSink, GithubOutputSink, MemorySink, ReportSink

__all__ = ["ReportSink", "MemorySink", "ConsoleSink", "GithubOutputSink"]
