"""Client configuration model and the process-wide default instance.

Every client and email accepts an explicit :class:`ClientConfig`. The
process-wide instance returned by :func:`configuration` is only the fallback
used when none is passed. It is created lazily, mutated in place by
:func:`configure`, and replaced by :func:`reset_configuration`.

Note:
    The process-wide instance is not synchronized. Configure it once during
    single-threaded start-up; concurrent mutation from several threads must
    be serialized by the caller.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import TrackLinks

API_BASE_URL = "https://api.postmarkapp.com"
API_TOKEN_ENV_VAR = "POSTMARK_API_TOKEN"
DEFAULT_MESSAGE_STREAM = "outbound"


def _api_token_from_env() -> str | None:
    return os.environ.get(API_TOKEN_ENV_VAR) or None


class ClientConfig(BaseModel):
    """Validated client settings.

    Assignments are validated too, so ``configure`` callbacks cannot put the
    model into an invalid state.

    Example:
        >>> config = ClientConfig(api_token="server-token", timeout=60)
        >>> config.default_message_stream
        'outbound'
        >>> config.track_links
        <TrackLinks.NONE: 'None'>
        >>> "server-token" in repr(config)
        False
    """

    model_config = ConfigDict(validate_assignment=True)

    api_token: str | None = Field(default_factory=_api_token_from_env)
    default_message_stream: str = DEFAULT_MESSAGE_STREAM
    timeout: float = 30.0
    open_timeout: float = 10.0
    track_opens: bool = False
    track_links: TrackLinks = TrackLinks.NONE
    base_url: str = API_BASE_URL

    @field_validator("api_token", mode="before")
    @classmethod
    def _coerce_empty_token_to_none(cls, v: Any) -> Any:
        """Treat empty or whitespace-only tokens as "not configured"."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _validate_timeouts(self) -> ClientConfig:
        """Reject non-positive timeouts early with a clear message.

        Example:
            >>> ClientConfig(timeout=0)  # doctest: +IGNORE_EXCEPTION_DETAIL
            Traceback (most recent call last):
            ...
            ValidationError: ...
        """
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.open_timeout <= 0:
            raise ValueError(f"open_timeout must be positive, got {self.open_timeout}")
        return self

    def __repr__(self) -> str:
        """Return a representation with the API token redacted."""
        fields: list[str] = []
        for name, value in self:
            if name == "api_token" and value is not None:
                fields.append(f"{name}='[REDACTED]'")
            else:
                fields.append(f"{name}={value!r}")
        return f"ClientConfig({', '.join(fields)})"


_configuration: ClientConfig | None = None


def configuration() -> ClientConfig:
    """Return the process-wide configuration, creating it on first access."""
    global _configuration
    if _configuration is None:
        _configuration = ClientConfig()
    return _configuration


def configure(callback: Callable[[ClientConfig], None]) -> ClientConfig:
    """Mutate the process-wide configuration through *callback*.

    Example:
        >>> def use_token(config: ClientConfig) -> None:
        ...     config.api_token = "server-token"
        >>> configure(use_token).api_token
        'server-token'
        >>> reset_configuration()
    """
    config = configuration()
    callback(config)
    return config


def set_configuration(config: ClientConfig) -> None:
    """Replace the process-wide configuration wholesale."""
    global _configuration
    _configuration = config


def reset_configuration() -> None:
    """Drop the process-wide configuration; the next access rebuilds defaults."""
    global _configuration
    _configuration = None


__all__ = [
    "API_BASE_URL",
    "API_TOKEN_ENV_VAR",
    "DEFAULT_MESSAGE_STREAM",
    "ClientConfig",
    "configuration",
    "configure",
    "reset_configuration",
    "set_configuration",
]
