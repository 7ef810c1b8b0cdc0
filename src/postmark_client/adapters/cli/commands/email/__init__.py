"""Email sending CLI commands.

Contents:
    * :func:`cli_send_email` - Send one message built from options
    * :func:`cli_send_batch` - Send messages read from a JSON file
"""

from __future__ import annotations

from .send_batch import cli_send_batch
from .send_email import cli_send_email

__all__ = ["cli_send_batch", "cli_send_email"]
