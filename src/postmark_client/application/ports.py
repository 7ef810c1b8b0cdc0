"""Application ports: callable Protocol definitions for adapter functions.

Each Protocol mirrors the signature of the adapter it stands for, so the
module-level adapter functions satisfy them by structural subtyping and the
in-memory adapters can replace them in tests.

System Role:
    Sits between domain and adapters. ``Config`` is imported under
    ``TYPE_CHECKING`` only so this layer has no runtime dependency on
    lib_layered_config.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from ..domain.configuration import ClientConfig
from ..domain.email import Email
from ..domain.email_response import EmailResponse
from ..domain.enums import OutputFormat

if TYPE_CHECKING:
    from lib_layered_config import Config


class GetConfig(Protocol):
    """Load layered configuration with application defaults."""

    def __call__(self, *, profile: str | None = ..., start_dir: str | None = ...) -> Config: ...


class GetDefaultConfigPath(Protocol):
    """Return the path to the bundled default configuration file."""

    def __call__(self) -> Path: ...


class DisplayConfig(Protocol):
    """Display the provided configuration in the requested format."""

    def __call__(
        self, config: Config, *, output_format: OutputFormat = ..., section: str | None = ..., profile: str | None = ...
    ) -> None: ...


class LoadClientConfigFromDict(Protocol):
    """Build a ClientConfig from a configuration dictionary."""

    def __call__(self, config_dict: Mapping[str, Any]) -> ClientConfig: ...


class EmailSender(Protocol):
    """Anything that can send single emails and batches."""

    def send(self, email: Email | Mapping[str, Any]) -> EmailResponse: ...

    def send_batch(self, emails: Sequence[Email | Mapping[str, Any]]) -> list[EmailResponse]: ...

    def close(self) -> None: ...


class BuildEmailsClient(Protocol):
    """Create an email sender bound to the given settings."""

    def __call__(
        self,
        *,
        config: ClientConfig,
        api_token: str | None = ...,
        base_url: str | None = ...,
    ) -> EmailSender: ...


class InitLogging(Protocol):
    """Initialize lib_log_rich runtime with the provided configuration."""

    def __call__(self, config: Config) -> None: ...


__all__ = [
    "BuildEmailsClient",
    "DisplayConfig",
    "EmailSender",
    "GetConfig",
    "GetDefaultConfigPath",
    "InitLogging",
    "LoadClientConfigFromDict",
]
