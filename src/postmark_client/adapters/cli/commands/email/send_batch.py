"""``send-batch`` command: send messages read from a JSON file in one request."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, cast

import lib_log_rich.runtime
import orjson
import rich_click as click

from postmark_client.domain.configuration import ClientConfig
from postmark_client.domain.email import Email
from postmark_client.domain.email_response import EmailResponse
from postmark_client.domain.errors import ArgumentError

from ...constants import CLICK_CONTEXT_SETTINGS
from ...context import get_cli_context
from ._common import client_options, execute_with_email_error_handling, load_client_config, open_sender

logger = logging.getLogger(__name__)


def read_batch_file(path: Path, client_config: ClientConfig) -> list[Email]:
    """Parse a JSON array of messages into Emails.

    Each item may use API casing (``"TextBody"``) or attribute names
    (``"text_body"``).

    Raises:
        FileNotFoundError: When *path* does not exist.
        orjson.JSONDecodeError: When the file is not valid JSON.
        ArgumentError: When the JSON is not an array of objects, or an item
            holds an unknown field or a malformed attachment.
    """
    payload: Any = orjson.loads(path.read_bytes())
    if not isinstance(payload, list):
        raise ArgumentError(f"{path.name} must contain a JSON array of messages")

    emails: list[Email] = []
    for index, item in enumerate(cast(list[Any], payload)):
        if not isinstance(item, Mapping):
            raise ArgumentError(f"Message {index} is not a JSON object")
        try:
            emails.append(Email.from_mapping(cast(Mapping[str, Any], item), config=client_config))
        except (TypeError, ArgumentError) as exc:
            raise ArgumentError(f"Message {index}: {exc}") from exc
    return emails


@click.command("send-batch", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@client_options
@click.pass_context
def cli_send_batch(ctx: click.Context, file: Path, api_token: str | None, base_url: str | None) -> None:
    """Send up to 500 messages from a JSON file in a single batch request.

    Example:
        >>> from click.testing import CliRunner
        >>> runner = CliRunner()
        >>> # Real invocation tested in test_cli_email.py
    """
    cli_ctx = get_cli_context(ctx)
    extra = {"command": "send-batch", "file": str(file)}

    with lib_log_rich.runtime.bind(job_id="cli-send-batch", extra=extra):
        client_config = load_client_config(cli_ctx.config, cli_ctx.services.load_client_config_from_dict)

        def operation() -> list[EmailResponse]:
            emails = read_batch_file(file, client_config)
            logger.info("Sending batch from CLI", extra={"count": len(emails)})
            with open_sender(cli_ctx.services, client_config, api_token=api_token, base_url=base_url) as sender:
                return sender.send_batch(emails)

        execute_with_email_error_handling(operation=operation, message_type="Batch")


__all__ = ["cli_send_batch", "read_batch_file"]
