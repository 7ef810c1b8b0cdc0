"""Thin client for the Postmark transactional email API.

Build an :class:`Email`, hand it to an :class:`Emails` client and get an
:class:`EmailResponse` back. Settings shared by every client live in the
process-wide :class:`ClientConfig` returned by :func:`configuration`.

Example:
    >>> import postmark_client
    >>> email = postmark_client.Email(from_="a@b.com", to="c@d.com", subject="Hi", text_body="Hello")
    >>> email.is_valid()
    True
    >>> postmark_client.deliver(email).success  # doctest: +SKIP
    True
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

# Metadata
from .__init__conf__ import print_info

# HTTP adapters
from .adapters.http import BATCH_LIMIT, BaseClient, Emails

# Domain exports
from .domain.attachment import Attachment
from .domain.configuration import ClientConfig, configuration, configure, reset_configuration
from .domain.email import Email
from .domain.email_response import EmailResponse
from .domain.enums import TrackLinks
from .domain.errors import (
    ApiError,
    ArgumentError,
    ConfigurationError,
    ConnectionError,  # noqa: A004
    PostmarkError,
    ValidationError,
)


def emails(api_token: str | None = None) -> Emails:
    """Return an Emails client using *api_token* or the configured token.

    Raises:
        ConfigurationError: When no token is given or configured.
    """
    return Emails(api_token)


def deliver(email: Email | Mapping[str, Any]) -> EmailResponse:
    """Send one message with a client built from the process-wide configuration.

    Raises:
        ConfigurationError: When no API token is configured.
        ValidationError: When the message is invalid; nothing is sent.
        ApiError: When the API answers with an error status.
        ConnectionError: On network failures.
    """
    client = emails()
    try:
        return client.send(email)
    finally:
        client.close()


__all__ = [
    "BATCH_LIMIT",
    "ApiError",
    "ArgumentError",
    "Attachment",
    "BaseClient",
    "ClientConfig",
    "ConfigurationError",
    "ConnectionError",
    "Email",
    "EmailResponse",
    "Emails",
    "PostmarkError",
    "TrackLinks",
    "ValidationError",
    "configuration",
    "configure",
    "deliver",
    "emails",
    "print_info",
    "reset_configuration",
]
