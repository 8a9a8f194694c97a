"""CLI commands for suitewatch."""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

import click
from loguru import logger

from suitewatch import __version__
from suitewatch.config.loader import load_config
from suitewatch.errors import ConfigError
from suitewatch.report.sink import ConsoleSink, GithubOutputSink, ReportSink
from suitewatch.runner import ActionRunner

EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 2


def configure_logging(verbose: bool = False) -> None:
    """Send loguru output to stderr at INFO, or DEBUG when *verbose*."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


@click.group()
@click.version_option(version=__version__, prog_name="suitewatch")
def app() -> None:
    """Trigger remote test suite runs and follow them to completion."""


@app.command("run")
@click.option("--api-key", envvar="SUITEWATCH_API_KEY", default=None, help="API key (X-Api-Key).")
@click.option("--origin-url", default=None, help="Base URL of the API.")
@click.option("--suite-ids", default=None, help="Comma-separated suite IDs to run.")
@click.option("--fail-fast/--no-fail-fast", default=None, help="Stop on first failure.")
@click.option("--block/--no-block", default=None, help="Request blocking execution.")
@click.option(
    "--max-retries",
    type=click.IntRange(min=0),
    default=None,
    help="Retries for the trigger call (0 disables retries).",
)
@click.option(
    "--stream-timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Give up waiting for a terminal status after this many seconds.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with inputs.",
)
@click.option(
    "--github/--no-github",
    default=None,
    help="Publish outputs to $GITHUB_OUTPUT (default: on inside GitHub Actions).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def run(
    api_key: str | None,
    origin_url: str | None,
    suite_ids: str | None,
    fail_fast: bool | None,
    block: bool | None,
    max_retries: int | None,
    stream_timeout: float | None,
    config_path: Path | None,
    github: bool | None,
    verbose: bool,
) -> None:
    """Trigger a test suite run and stream its events until it finishes."""
    configure_logging(verbose)

    try:
        config = load_config(
            config_path,
            api_key=api_key,
            origin_url=origin_url,
            suite_ids=suite_ids,
            fail_fast=fail_fast,
            block=block,
            max_retries=max_retries,
            stream_timeout=stream_timeout,
        )
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(EXIT_CONFIG_ERROR)

    sink = _make_sink(github)
    asyncio.run(ActionRunner(config, sink).run())
    if sink.failed:
        sys.exit(EXIT_FAILED)


def _make_sink(github: bool | None) -> ReportSink:
    if github is None:
        github = os.environ.get("GITHUB_ACTIONS") == "true"
    return GithubOutputSink() if github else ConsoleSink()
