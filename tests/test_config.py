"""Tests for suitewatch.config: schema parsing and source precedence."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from suitewatch.config import DEFAULT_ORIGIN_URL, ActionConfig, load_config
from suitewatch.errors import ConfigError


class TestActionConfig:
    def test_defaults(self):
        """Only the API key is required."""
        cfg = ActionConfig(api_key="k")
        assert cfg.origin_url == DEFAULT_ORIGIN_URL
        assert cfg.suite_ids is None
        assert cfg.fail_fast is False
        assert cfg.block is False
        assert cfg.max_retries == 0
        assert cfg.stream_timeout is None

    def test_camel_case_aliases(self):
        """Action input names are accepted and normalized."""
        cfg = ActionConfig.model_validate(
            {"apiKey": "k", "originUrl": "https://x.io/", "failFast": "TRUE", "maxRetries": "2"}
        )
        assert cfg.origin_url == "https://x.io"
        assert cfg.fail_fast is True
        assert cfg.max_retries == 2

    def test_suite_ids_from_comma_string(self):
        """Comma-separated IDs keep order and duplicates, blanks dropped."""
        cfg = ActionConfig(api_key="k", suite_ids=" a, b ,,c ,a")
        assert cfg.suite_ids == ("a", "b", "c", "a")

    def test_suite_ids_from_list(self):
        assert ActionConfig(api_key="k", suite_ids=["x", " y "]).suite_ids == ("x", "y")

    @pytest.mark.parametrize("value", ["", " , ", []])
    def test_empty_suite_ids_become_none(self, value):
        """No usable IDs means the service picks the suites."""
        assert ActionConfig(api_key="k", suite_ids=value).suite_ids is None

    @pytest.mark.parametrize("value,expected", [("true", True), ("True", True), ("false", False), ("yes", False), ("1", False), ("", False)])
    def test_string_flags_only_accept_true(self, value, expected):
        """Only a literal "true" switches a flag on."""
        assert ActionConfig(api_key="k", fail_fast=value).fail_fast is expected

    def test_api_key_required(self):
        """Missing API key is a validation error."""
        with pytest.raises(ValidationError):
            ActionConfig.model_validate({})

    def test_blank_api_key_rejected(self):
        """Whitespace is not an API key."""
        with pytest.raises(ValidationError):
            ActionConfig(api_key="   ")

    def test_negative_retries_rejected(self):
        """maxRetries must be zero or more."""
        with pytest.raises(ValidationError):
            ActionConfig(api_key="k", max_retries=-1)

    def test_bad_origin_rejected(self):
        """Origin must be an http(s) URL."""
        with pytest.raises(ValidationError):
            ActionConfig(api_key="k", origin_url="ftp://x.io")

    def test_api_key_hidden_from_repr(self):
        """The API key never shows up in repr."""
        assert "s3cret" not in repr(ActionConfig(api_key="s3cret"))

    def test_job_request(self):
        req = ActionConfig(api_key="k", suite_ids="a,b", fail_fast="true").job_request()
        assert req.to_body() == {"suite_ids": ["a", "b"], "fail_fast": True}


class TestLoadConfig:
    def test_reads_action_inputs_from_env(self):
        """GitHub Actions INPUT_* variables are read."""
        env = {
            "INPUT_APIKEY": "env-key",
            "INPUT_ORIGINURL": "https://env.example",
            "INPUT_SUITEIDS": "s1,s2",
            "INPUT_FAILFAST": "true",
            "INPUT_MAXRETRIES": "3",
        }
        cfg = load_config(environ=env)
        assert cfg.api_key == "env-key"
        assert cfg.origin_url == "https://env.example"
        assert cfg.suite_ids == ("s1", "s2")
        assert cfg.fail_fast is True
        assert cfg.max_retries == 3

    def test_blank_env_values_ignored(self):
        """Empty INPUT_* variables fall back to defaults."""
        cfg = load_config(environ={"INPUT_APIKEY": "k", "INPUT_ORIGINURL": "", "INPUT_MAXRETRIES": ""})
        assert cfg.origin_url == DEFAULT_ORIGIN_URL
        assert cfg.max_retries == 0

    def test_precedence_file_env_overrides(self, tmp_path):
        """Overrides beat env, env beats the config file."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"apiKey": "file-key", "max_retries": 1, "originUrl": "https://file.io"}))

        cfg = load_config(path, environ={"INPUT_MAXRETRIES": "2"}, api_key="cli-key", origin_url=None)

        assert cfg.api_key == "cli-key"
        assert cfg.max_retries == 2
        assert cfg.origin_url == "https://file.io"

    def test_missing_api_key(self):
        """Validation errors are raised as ConfigError naming the field."""
        with pytest.raises(ConfigError, match="apiKey"):
            load_config(environ={})

    def test_invalid_retries(self):
        with pytest.raises(ConfigError, match="maxRetries"):
            load_config(environ={"INPUT_APIKEY": "k", "INPUT_MAXRETRIES": "lots"})

    def test_unreadable_file(self, tmp_path):
        """Broken JSON in the config file is a ConfigError."""
        path = tmp_path / "broken.json"
        path.write_text("{nope")
        with pytest.raises(ConfigError, match="Failed to load config"):
            load_config(path, environ={})

    def test_non_object_file(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1]")
        with pytest.raises(ConfigError, match="JSON object"):
            load_config(path, environ={})
