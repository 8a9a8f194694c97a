"""Tests for the suitewatch CLI."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from suitewatch.cli.commands import EXIT_CONFIG_ERROR, EXIT_FAILED, app
from suitewatch.report.sink import ConsoleSink, GithubOutputSink
from suitewatch.runner import RunResult


class FakeRunner:
    """Stands in for ActionRunner; records what the CLI built."""

    instances: list[FakeRunner] = []
    fail_with: str | None = None

    def __init__(self, config, sink):
        self.config = config
        self.sink = sink
        FakeRunner.instances.append(self)

    async def run(self) -> RunResult:
        self.sink.set_output("runId", "r1")
        if FakeRunner.fail_with:
            self.sink.fail(FakeRunner.fail_with)
            return RunResult(run_id="r1", error=FakeRunner.fail_with)
        self.sink.set_output("status", "passed")
        return RunResult(run_id="r1")


@pytest.fixture(autouse=True)
def fake_runner(monkeypatch):
    for var in ("INPUT_APIKEY", "INPUT_SUITEIDS", "INPUT_MAXRETRIES", "SUITEWATCH_API_KEY", "GITHUB_ACTIONS"):
        monkeypatch.delenv(var, raising=False)
    FakeRunner.instances = []
    FakeRunner.fail_with = None
    with patch("suitewatch.cli.commands.ActionRunner", FakeRunner), patch(
        "suitewatch.cli.commands.configure_logging"
    ):
        yield FakeRunner


def test_run_success():
    """Options are parsed into the config and a console sink is used."""
    result = CliRunner().invoke(
        app,
        ["run", "--api-key", "k", "--suite-ids", "a,b", "--fail-fast", "--max-retries", "2", "--no-github"],
    )

    assert result.exit_code == 0, result.output
    runner = FakeRunner.instances[0]
    assert runner.config.api_key == "k"
    assert runner.config.suite_ids == ("a", "b")
    assert runner.config.fail_fast is True
    assert runner.config.max_retries == 2
    assert type(runner.sink) is ConsoleSink


def test_run_failure_exit_code():
    """A failure recorded by the sink exits with status 1."""
    FakeRunner.fail_with = "Failed to trigger action: 401 Unauthorized"

    result = CliRunner().invoke(app, ["run", "--api-key", "k", "--no-github"])

    assert result.exit_code == EXIT_FAILED


def test_missing_api_key_is_config_error():
    """Without an API key the run never starts."""
    result = CliRunner().invoke(app, ["run", "--no-github"])

    assert result.exit_code == EXIT_CONFIG_ERROR
    assert FakeRunner.instances == []


def test_inputs_from_action_env(tmp_path):
    """Inside GitHub Actions inputs come from INPUT_* and outputs go to $GITHUB_OUTPUT."""
    out = tmp_path / "gh_output"
    env = {
        "INPUT_APIKEY": "env-key",
        "INPUT_SUITEIDS": "s1",
        "GITHUB_ACTIONS": "true",
        "GITHUB_OUTPUT": str(out),
    }

    result = CliRunner().invoke(app, ["run"], env=env)

    assert result.exit_code == 0, result.output
    runner = FakeRunner.instances[0]
    assert runner.config.api_key == "env-key"
    assert runner.config.suite_ids == ("s1",)
    assert isinstance(runner.sink, GithubOutputSink)
    assert out.read_text() == "runId=r1\nstatus=passed\n"


def test_negative_retries_rejected_by_cli():
    """Negative retry counts are a usage error."""
    result = CliRunner().invoke(app, ["run", "--api-key", "k", "--max-retries", "-1"])

    assert result.exit_code == 2
    assert FakeRunner.instances == []


def test_version_option():
    result = CliRunner().invoke(app, ["--version"])

    assert result.exit_code == 0
    assert "suitewatch" in result.output
