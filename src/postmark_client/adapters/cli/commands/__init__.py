"""CLI command implementations.

Contents:
    * :mod:`.info` - Package metadata
    * :mod:`.config` - Merged configuration display
    * :mod:`.email` - ``send-email`` and ``send-batch``
"""

from __future__ import annotations

from .config import cli_config
from .email import cli_send_batch, cli_send_email
from .info import cli_info

__all__ = [
    "cli_config",
    "cli_info",
    "cli_send_batch",
    "cli_send_email",
]
