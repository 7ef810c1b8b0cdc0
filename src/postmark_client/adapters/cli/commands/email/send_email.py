"""``send-email`` command: build one message from options and send it."""

from __future__ import annotations

import logging

import lib_log_rich.runtime
import rich_click as click

from postmark_client.domain.configuration import ClientConfig
from postmark_client.domain.email import Email
from postmark_client.domain.email_response import EmailResponse
from postmark_client.domain.enums import TrackLinks

from ...constants import CLICK_CONTEXT_SETTINGS
from ...context import get_cli_context
from ._common import client_options, execute_with_email_error_handling, load_client_config, open_sender

logger = logging.getLogger(__name__)


def _parse_metadata(ctx: click.Context, param: click.Parameter, value: tuple[str, ...]) -> dict[str, str]:
    """Turn repeated ``KEY=VALUE`` options into a dict.

    Raises:
        click.BadParameter: If an item has no ``=`` or an empty key.
    """
    metadata: dict[str, str] = {}
    for item in value:
        key, separator, content = item.partition("=")
        if not separator or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}")
        metadata[key] = content
    return metadata


def _build_email(
    client_config: ClientConfig,
    *,
    from_address: str,
    recipients: tuple[str, ...],
    cc: tuple[str, ...],
    bcc: tuple[str, ...],
    subject: str,
    text_body: str | None,
    html_body: str | None,
    reply_to: str | None,
    tag: str | None,
    track_opens: bool | None,
    track_links: str | None,
    message_stream: str | None,
    metadata: dict[str, str],
    attachments: tuple[str, ...],
) -> Email:
    """Assemble the Email; attachment files are read here.

    Raises:
        FileNotFoundError: When an attachment path does not exist.
    """
    email = Email(
        from_=from_address,
        to=list(recipients),
        cc=list(cc),
        bcc=list(bcc),
        subject=subject,
        text_body=text_body,
        html_body=html_body,
        reply_to=reply_to,
        tag=tag,
        track_opens=track_opens,
        track_links=track_links,
        metadata=metadata,
        message_stream=message_stream,
        config=client_config,
    )
    for path in attachments:
        email.attach_file(path)
    return email


@click.command("send-email", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--from", "from_address", required=True, help="Sender address, e.g. 'Acme <ops@acme.test>'")
@click.option("--to", "recipients", multiple=True, required=True, help="Recipient address (repeatable)")
@click.option("--subject", required=True, help="Subject line")
@click.option("--text-body", default=None, help="Plain-text body")
@click.option("--html-body", default=None, help="HTML body")
@click.option("--cc", multiple=True, default=(), help="Carbon-copy address (repeatable)")
@click.option("--bcc", multiple=True, default=(), help="Blind carbon-copy address (repeatable)")
@click.option("--reply-to", default=None, help="Reply-To address")
@click.option("--tag", default=None, help="Tag for categorizing the message")
@click.option("--track-opens/--no-track-opens", default=None, help="Enable or disable open tracking")
@click.option(
    "--track-links",
    type=click.Choice(TrackLinks.values()),
    default=None,
    help="Link tracking mode",
)
@click.option("--message-stream", default=None, help="Message stream (defaults to postmark.default_message_stream)")
@click.option(
    "--metadata",
    multiple=True,
    default=(),
    metavar="KEY=VALUE",
    callback=_parse_metadata,
    help="Custom metadata entry (repeatable)",
)
@click.option(
    "--attachment",
    "attachments",
    multiple=True,
    type=click.Path(path_type=str),
    help="File to attach (repeatable)",
)
@client_options
@click.pass_context
def cli_send_email(
    ctx: click.Context,
    from_address: str,
    recipients: tuple[str, ...],
    subject: str,
    text_body: str | None,
    html_body: str | None,
    cc: tuple[str, ...],
    bcc: tuple[str, ...],
    reply_to: str | None,
    tag: str | None,
    track_opens: bool | None,
    track_links: str | None,
    message_stream: str | None,
    metadata: dict[str, str],
    attachments: tuple[str, ...],
    api_token: str | None,
    base_url: str | None,
) -> None:
    """Send a single email through the Postmark API.

    Example:
        >>> from click.testing import CliRunner
        >>> runner = CliRunner()
        >>> # Real invocation tested in test_cli_email.py
    """
    cli_ctx = get_cli_context(ctx)
    extra = {"command": "send-email", "recipients": list(recipients), "subject": subject}

    with lib_log_rich.runtime.bind(job_id="cli-send-email", extra=extra):
        client_config = load_client_config(cli_ctx.config, cli_ctx.services.load_client_config_from_dict)

        def operation() -> list[EmailResponse]:
            email = _build_email(
                client_config,
                from_address=from_address,
                recipients=recipients,
                cc=cc,
                bcc=bcc,
                subject=subject,
                text_body=text_body,
                html_body=html_body,
                reply_to=reply_to,
                tag=tag,
                track_opens=track_opens,
                track_links=track_links,
                message_stream=message_stream,
                metadata=metadata,
                attachments=attachments,
            )
            with open_sender(cli_ctx.services, client_config, api_token=api_token, base_url=base_url) as sender:
                return [sender.send(email)]

        logger.info("Sending email from CLI", extra={"attachment_count": len(attachments)})
        execute_with_email_error_handling(operation=operation, message_type="Email")


__all__ = ["cli_send_email"]
