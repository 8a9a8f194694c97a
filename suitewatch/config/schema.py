"""Configuration schema using Pydantic."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from suitewatch.client.trigger import JobRequest

DEFAULT_ORIGIN_URL = "https://api.desplega.ai"


class ActionConfig(BaseModel):
    """Inputs of one trigger-and-follow run.

    Field aliases are the camelCase input names (``apiKey``, ``suiteIds`` ...);
    snake_case names are accepted too.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    api_key: str = Field(min_length=1, repr=False)
    origin_url: str = DEFAULT_ORIGIN_URL
    suite_ids: tuple[str, ...] | None = None
    fail_fast: bool = False
    block: bool = False
    max_retries: int = Field(default=0, ge=0)
    stream_timeout: float | None = Field(default=None, gt=0)

    @field_validator("api_key", mode="before")
    @classmethod
    def _strip_api_key(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("origin_url", mode="before")
    @classmethod
    def _normalize_origin(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_ORIGIN_URL
        if isinstance(v, str):
            v = v.strip().rstrip("/")
            if not v.startswith(("http://", "https://")):
                raise ValueError(f"origin URL must start with http:// or https://, got {v!r}")
        return v

    @field_validator("suite_ids", mode="before")
    @classmethod
    def _parse_suite_ids(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, str):
            v = v.split(",")
        ids = [str(item).strip() for item in v]
        ids = [item for item in ids if item]
        return tuple(ids) or None

    @field_validator("fail_fast", "block", mode="before")
    @classmethod
    def _parse_flag(cls, v: Any) -> Any:
        # Only a literal "true" (any case) switches a string flag on.
        if isinstance(v, str):
            return v.strip().lower() == "true"
        return v

    @field_validator("max_retries", mode="before")
    @classmethod
    def _parse_max_retries(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return 0
        return v

    @field_validator("stream_timeout", mode="before")
    @classmethod
    def _parse_stream_timeout(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def job_request(self) -> JobRequest:
        return JobRequest(suite_ids=self.suite_ids, fail_fast=self.fail_fast, block=self.block)
