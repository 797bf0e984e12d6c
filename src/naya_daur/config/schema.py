"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces configuration
values from the environment, ``.env`` files and programmatic overrides into the
correct types with proper defaults.
"""

from typing import Any, Self

import httpx
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from naya_daur.constants import (
    DEFAULT_IMAGE_MODEL,
    DEFAULT_IMAGE_SAMPLE_COUNT,
    DEFAULT_TEXT_MODEL,
    GEMINI_API_BASE_URL,
    MAX_IMAGE_SAMPLE_COUNT,
    MAX_RETRIES,
    NETWORK_TIMEOUT,
    RETRY_INITIAL_DELAY,
)


class NayaDaurSettings(BaseSettings):
    """Pydantic settings schema for the generation client.

    Integrates with environment variables using the GEMINI_ prefix, so
    ``GEMINI_API_KEY`` and ``GEMINI_MODEL`` work as expected.
    """

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=None,  # Only used when explicitly requested
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        description="Generative Language API key",
    )

    model: str = Field(
        default=DEFAULT_TEXT_MODEL,
        description="Model used for grounded and structured generation",
        min_length=1,
    )

    image_model: str = Field(
        default=DEFAULT_IMAGE_MODEL,
        description="Model used for campaign image generation",
        min_length=1,
    )

    base_url: str = Field(
        default=GEMINI_API_BASE_URL,
        description="Base URL of the generative-language REST API",
    )

    max_retries: int = Field(
        default=MAX_RETRIES,
        description="Retries after the first attempt on 429 or transport errors",
        ge=0,
    )

    retry_initial_delay: float = Field(
        default=RETRY_INITIAL_DELAY,
        description="Delay before the first retry in seconds; doubles each retry",
        ge=0,
    )

    retry_max_delay: float | None = Field(
        default=None,
        description="Optional cap on the backoff delay; None leaves it uncapped",
        gt=0,
    )

    request_timeout: float = Field(
        default=NETWORK_TIMEOUT,
        description="Per-request HTTP timeout in seconds",
        gt=0,
    )

    image_sample_count: int = Field(
        default=DEFAULT_IMAGE_SAMPLE_COUNT,
        description="Number of images requested per concept",
        ge=1,
        le=MAX_IMAGE_SAMPLE_COUNT,
    )

    @field_validator("base_url", mode="after")
    @classmethod
    def normalize_base_url(cls, v: str) -> str:
        """Require an absolute http(s) URL and drop any trailing slash."""
        try:
            url = httpx.URL(v)
        except httpx.InvalidURL as e:
            raise ValueError(f"base_url is not a valid URL: {e}") from e
        if url.scheme not in {"http", "https"} or not url.host:
            raise ValueError(f"base_url must be an absolute http(s) URL, got {v!r}")
        return v.rstrip("/")

    @field_validator("api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def check_delay_cap(self) -> Self:
        """A cap below the initial delay would make every retry wait the cap."""
        if (
            self.retry_max_delay is not None
            and self.retry_max_delay < self.retry_initial_delay
        ):
            raise ValueError(
                "retry_max_delay must be greater than or equal to retry_initial_delay"
            )
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary suitable for source annotation."""
        return {name: getattr(self, name) for name in type(self).model_fields}
