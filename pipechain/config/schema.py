"""Pydantic models for the pipechain configuration file."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from pipechain.constants import (
    DEFAULT_HOST,
    DEFAULT_MEDIA_TYPE,
    DEFAULT_PIPELINE_PATH,
    DEFAULT_PORT,
    DEFAULT_TIME_COOKIE,
)


class ServerSettings(BaseModel):
    """Listener settings (host, port)."""

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)


class PipelineSettings(BaseModel):
    """Parameters for the interceptors in the served pipeline."""

    path: str = DEFAULT_PIPELINE_PATH
    media_type: str = DEFAULT_MEDIA_TYPE
    cookie_name: str = Field(default=DEFAULT_TIME_COOKIE, min_length=1)
    fallback: Literal["not_found", "no_content"] = Field(
        default="not_found",
        description="Handler substituted when a chain is composed without a terminal.",
    )
    recover_errors: bool = True

    @field_validator("path")
    @classmethod
    def _leading_slash(cls, v: str) -> str:
        """Route paths must be absolute."""
        if not v.startswith("/"):
            raise ValueError(f"pipeline path must start with '/': {v!r}")
        return v


class PipechainConfig(BaseModel):
    """Top-level configuration."""

    server: ServerSettings = Field(default_factory=ServerSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
