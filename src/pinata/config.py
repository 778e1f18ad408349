# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run settings for the pinning pipeline."""

from __future__ import annotations

from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

DEFAULT_API_URL: Final[str] = "https://api.github.com"
DEFAULT_TIMEOUT_SECONDS: Final[float] = 15.0
DEFAULT_USER_AGENT: Final[str] = "pinata"
DEFAULT_WORKFLOWS_DIR: Final[str] = ".github/workflows"
TOKEN_ENV: Final[str] = "GITHUB_TOKEN"
API_URL_ENV: Final[str] = "GITHUB_API_URL"


class PinSettings(BaseModel):
    """Validated settings shared by the GitHub client and resolver."""

    model_config = ConfigDict(frozen=True)

    token: str | None = None
    api_url: str = DEFAULT_API_URL
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)

    @field_validator("token", mode="before")
    @classmethod
    def _blank_token_is_none(cls, value: str | None) -> str | None:
        """Return ``None`` for unset or whitespace-only tokens.

        Args:
            value: Raw token value supplied by the caller.

        Returns:
            str | None: Stripped token, or ``None`` when empty.
        """

        if value is None:
            return None
        stripped = str(value).strip()
        return stripped or None

    @field_validator("api_url")
    @classmethod
    def _normalise_api_url(cls, value: str) -> str:
        """Return ``value`` without trailing slashes, requiring an HTTP scheme.

        Args:
            value: Base URL of the GitHub REST API.

        Returns:
            str: Normalised base URL.

        Raises:
            ValueError: If ``value`` is not an ``http`` or ``https`` URL.
        """

        stripped = value.strip().rstrip("/")
        if not stripped.startswith(("http://", "https://")):
            raise ValueError("api_url must start with http:// or https://")
        return stripped

    @property
    def authenticated(self) -> bool:
        """Return ``True`` when a bearer token is configured."""

        return self.token is not None


def build_settings(
    *,
    token: str | None = None,
    api_url: str = DEFAULT_API_URL,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    user_agent: str = DEFAULT_USER_AGENT,
) -> PinSettings:
    """Return validated :class:`PinSettings` for the supplied values.

    Args:
        token: Optional bearer token used for higher rate limits.
        api_url: Base URL of the GitHub REST API.
        timeout: Per-request timeout in seconds.
        user_agent: ``User-Agent`` header sent with every request.

    Returns:
        PinSettings: Frozen settings instance.

    Raises:
        ConfigError: If any value fails validation.
    """

    try:
        return PinSettings(token=token, api_url=api_url, timeout=timeout, user_agent=user_agent)
    except ValidationError as exc:
        details = "; ".join(f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors())
        raise ConfigError(f"invalid settings: {details}") from exc


__all__ = [
    "API_URL_ENV",
    "DEFAULT_API_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_USER_AGENT",
    "DEFAULT_WORKFLOWS_DIR",
    "PinSettings",
    "TOKEN_ENV",
    "build_settings",
]
