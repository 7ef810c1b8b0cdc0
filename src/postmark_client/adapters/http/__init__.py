"""HTTP adapter - Postmark API clients built on httpx.

Contents:
    * :class:`.client.BaseClient` - Authenticated JSON client and error mapping
    * :class:`.emails.Emails` - Single and batch email sends
"""

from __future__ import annotations

from .client import AUTH_HEADER, BaseClient
from .emails import BATCH_LIMIT, Emails, build_emails_client

__all__ = [
    "AUTH_HEADER",
    "BATCH_LIMIT",
    "BaseClient",
    "Emails",
    "build_emails_client",
]
