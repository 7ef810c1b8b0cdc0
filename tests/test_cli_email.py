"""CLI email stories: send-email, send-batch, exit codes and client overrides."""

from __future__ import annotations

import base64
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import orjson
import pytest
from click.testing import CliRunner, Result
from lib_layered_config import Config

from postmark_client.adapters import cli as cli_mod
from postmark_client.adapters.cli.exit_codes import ExitCode
from postmark_client.composition import AppServices, build_production
from postmark_client.domain.errors import ApiError, ConnectionError

if TYPE_CHECKING:
    from conftest import EmailCliContext

_MINIMAL_SEND = [
    "send-email",
    "--from",
    "sender@example.com",
    "--to",
    "recipient@example.com",
    "--subject",
    "Hello",
    "--text-body",
    "Hello, World!",
]


def _write_batch(path: Path, messages: list[Any]) -> Path:
    path.write_bytes(orjson.dumps(messages))
    return path


# ======================== send-email ========================


@pytest.mark.os_agnostic
def test_send_email_sends_one_message(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
) -> None:
    ctx = email_cli_context()

    result: Result = cli_runner.invoke(cli_mod.cli, _MINIMAL_SEND, obj=ctx.factory)

    assert result.exit_code == 0
    assert "Email sent successfully" in result.output
    assert "Email sent to recipient@example.com" in result.output
    assert len(ctx.spy.sent_emails) == 1
    sent = ctx.spy.sent_emails[0]
    assert sent.from_ == "sender@example.com"
    assert sent.to == ["recipient@example.com"]
    assert sent.subject == "Hello"
    assert sent.message_stream == "outbound"


@pytest.mark.os_agnostic
def test_send_email_passes_every_option(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
    tmp_path: Path,
) -> None:
    ctx = email_cli_context()
    attachment = tmp_path / "invoice.pdf"
    attachment.write_bytes(b"%PDF")

    result: Result = cli_runner.invoke(
        cli_mod.cli,
        [
            "send-email",
            "--from",
            "sender@example.com",
            "--to",
            "a@example.com",
            "--to",
            "b@example.com",
            "--cc",
            "cc@example.com",
            "--bcc",
            "bcc@example.com",
            "--subject",
            "Invoice",
            "--html-body",
            "<p>Attached</p>",
            "--reply-to",
            "billing@example.com",
            "--tag",
            "invoice",
            "--no-track-opens",
            "--track-links",
            "HtmlOnly",
            "--message-stream",
            "billing",
            "--metadata",
            "order=42",
            "--metadata",
            "customer=acme",
            "--attachment",
            str(attachment),
        ],
        obj=ctx.factory,
    )

    assert result.exit_code == 0, result.output
    payload = ctx.spy.sent_emails[0].to_dict()
    assert payload["To"] == "a@example.com, b@example.com"
    assert payload["Cc"] == "cc@example.com"
    assert payload["Bcc"] == "bcc@example.com"
    assert payload["ReplyTo"] == "billing@example.com"
    assert payload["Tag"] == "invoice"
    assert payload["TrackOpens"] is False
    assert payload["TrackLinks"] == "HtmlOnly"
    assert payload["MessageStream"] == "billing"
    assert payload["Metadata"] == {"order": "42", "customer": "acme"}
    assert payload["Attachments"][0]["Name"] == "invoice.pdf"
    assert base64.b64decode(payload["Attachments"][0]["Content"]) == b"%PDF"


@pytest.mark.os_agnostic
def test_send_email_uses_configured_message_stream(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
) -> None:
    ctx = email_cli_context({"default_message_stream": "broadcast"})

    result: Result = cli_runner.invoke(cli_mod.cli, _MINIMAL_SEND, obj=ctx.factory)

    assert result.exit_code == 0
    assert ctx.spy.sent_emails[0].message_stream == "broadcast"


@pytest.mark.os_agnostic
def test_send_email_passes_client_overrides(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
) -> None:
    ctx = email_cli_context({"timeout": 45})

    result: Result = cli_runner.invoke(
        cli_mod.cli,
        [*_MINIMAL_SEND, "--api-token", "cli-token", "--base-url", "https://mock.test"],
        obj=ctx.factory,
    )

    assert result.exit_code == 0
    client = ctx.spy.clients[0]
    assert client["api_token"] == "cli-token"
    assert client["base_url"] == "https://mock.test"
    assert client["config"].timeout == 45


@pytest.mark.os_agnostic
def test_send_email_without_body_exits_with_invalid_argument(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
) -> None:
    ctx = email_cli_context()

    result: Result = cli_runner.invoke(
        cli_mod.cli,
        ["send-email", "--from", "s@example.com", "--to", "r@example.com", "--subject", "Hi"],
        obj=ctx.factory,
    )

    assert result.exit_code == 22
    assert "Either HtmlBody or TextBody is required" in result.output
    assert ctx.spy.sent_emails == []


@pytest.mark.os_agnostic
def test_send_email_with_missing_attachment_exits_with_file_not_found(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
    tmp_path: Path,
) -> None:
    ctx = email_cli_context()

    result: Result = cli_runner.invoke(
        cli_mod.cli, [*_MINIMAL_SEND, "--attachment", str(tmp_path / "missing.pdf")], obj=ctx.factory
    )

    assert result.exit_code == 2
    assert "File not found" in result.output
    assert ctx.spy.sent_emails == []


@pytest.mark.os_agnostic
def test_send_email_rejects_malformed_metadata(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
) -> None:
    ctx = email_cli_context()

    result: Result = cli_runner.invoke(cli_mod.cli, [*_MINIMAL_SEND, "--metadata", "no-equals"], obj=ctx.factory)

    assert result.exit_code == 2
    assert "KEY=VALUE" in result.output


@pytest.mark.os_agnostic
def test_send_email_rejects_unknown_track_links(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
) -> None:
    ctx = email_cli_context()

    result: Result = cli_runner.invoke(cli_mod.cli, [*_MINIMAL_SEND, "--track-links", "Always"], obj=ctx.factory)

    assert result.exit_code == 2
    assert ctx.spy.sent_emails == []


@pytest.mark.os_agnostic
def test_send_email_remote_rejection_exits_with_api_failure(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
) -> None:
    ctx = email_cli_context()
    ctx.spy.error_code = 406
    ctx.spy.error_message = "Inactive recipient"

    result: Result = cli_runner.invoke(cli_mod.cli, _MINIMAL_SEND, obj=ctx.factory)

    assert result.exit_code == 69
    assert "Error 406: Inactive recipient" in result.output


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    "error",
    [ApiError("Invalid email request", error_code=300), ConnectionError("Connection failed: timed out")],
)
def test_send_email_api_and_network_errors_exit_with_api_failure(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
    error: Exception,
) -> None:
    ctx = email_cli_context()
    ctx.spy.raise_exception = error

    result: Result = cli_runner.invoke(cli_mod.cli, _MINIMAL_SEND, obj=ctx.factory)

    assert result.exit_code == 69
    assert str(error) in result.output


@pytest.mark.os_agnostic
def test_send_email_unexpected_error_exits_with_general_error(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("DEVELOPMENT_MODE", raising=False)
    ctx = email_cli_context()
    ctx.spy.raise_exception = RuntimeError("spy exploded")

    result: Result = cli_runner.invoke(cli_mod.cli, _MINIMAL_SEND, obj=ctx.factory)

    assert result.exit_code == 1
    assert "Unexpected error" in result.output


@pytest.mark.os_agnostic
def test_send_email_invalid_postmark_section_exits_with_config_error(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
) -> None:
    ctx = email_cli_context({"timeout": -5})

    result: Result = cli_runner.invoke(cli_mod.cli, _MINIMAL_SEND, obj=ctx.factory)

    assert result.exit_code == 78
    assert "Invalid [postmark] configuration" in result.output


@pytest.mark.os_agnostic
def test_send_email_without_token_exits_with_config_error(
    cli_runner: CliRunner,
    config_cli_context: Callable[[dict[str, Any]], Callable[[], AppServices]],
) -> None:
    """The production client refuses to start without a token."""
    factory = config_cli_context({"postmark": {"api_token": ""}})

    result: Result = cli_runner.invoke(cli_mod.cli, _MINIMAL_SEND, obj=factory)

    assert result.exit_code == 78
    assert "API token is required" in result.output
    assert "POSTMARK_API_TOKEN" in result.output


# ======================== send-batch ========================


@pytest.mark.os_agnostic
def test_send_batch_sends_every_message(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
    tmp_path: Path,
) -> None:
    ctx = email_cli_context()
    batch = _write_batch(
        tmp_path / "batch.json",
        [
            {"From": "s@example.com", "To": "a@example.com", "TextBody": "one"},
            {"from": "s@example.com", "to": "b@example.com", "html_body": "<p>two</p>"},
        ],
    )

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-batch", str(batch)], obj=ctx.factory)

    assert result.exit_code == 0, result.output
    assert "Batch sent successfully" in result.output
    sent = ctx.spy.sent_batches[0]
    assert [email.to for email in sent] == ["a@example.com", "b@example.com"]
    assert sent[1].html_body == "<p>two</p>"


@pytest.mark.os_agnostic
def test_send_batch_with_missing_file_exits_with_file_not_found(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
    tmp_path: Path,
) -> None:
    ctx = email_cli_context()

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-batch", str(tmp_path / "none.json")], obj=ctx.factory)

    assert result.exit_code == 2
    assert ctx.spy.sent_batches == []


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    "content",
    [
        b"{not json",
        b'{"From": "s@example.com"}',
        b"[1, 2]",
        b'[{"From": "s@example.com", "To": "a@example.com", "TextBody": "x", "Unknown": 1}]',
        b'[{"From": "s@example.com", "TextBody": "x"}]',
    ],
)
def test_send_batch_with_invalid_content_exits_with_invalid_argument(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
    tmp_path: Path,
    content: bytes,
) -> None:
    ctx = email_cli_context()
    batch = tmp_path / "batch.json"
    batch.write_bytes(content)

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-batch", str(batch)], obj=ctx.factory)

    assert result.exit_code == 22
    assert ctx.spy.sent_batches == []


@pytest.mark.os_agnostic
def test_send_batch_over_the_limit_exits_with_invalid_argument(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
    tmp_path: Path,
) -> None:
    ctx = email_cli_context()
    message = {"From": "s@example.com", "To": "a@example.com", "TextBody": "x"}
    batch = _write_batch(tmp_path / "batch.json", [message] * 501)

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-batch", str(batch)], obj=ctx.factory)

    assert result.exit_code == 22
    assert "Batch cannot exceed 500 emails" in result.output


@pytest.mark.os_agnostic
def test_send_batch_with_rejected_messages_exits_with_api_failure(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
    tmp_path: Path,
) -> None:
    ctx = email_cli_context()
    ctx.spy.error_code = 300
    ctx.spy.error_message = "Invalid email request"
    batch = _write_batch(tmp_path / "batch.json", [{"From": "s@example.com", "To": "a@example.com", "TextBody": "x"}])

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-batch", str(batch)], obj=ctx.factory)

    assert result.exit_code == 69
    assert "1 of 1 message(s) rejected" in result.output


@pytest.mark.os_agnostic
def test_send_batch_through_production_wiring_without_token_fails(
    cli_runner: CliRunner,
    tmp_path: Path,
    clear_config_cache: None,
) -> None:
    prod = build_production()
    config = Config({}, {})
    services = AppServices(
        get_config=lambda **_kwargs: config,
        get_default_config_path=prod.get_default_config_path,
        display_config=prod.display_config,
        load_client_config_from_dict=prod.load_client_config_from_dict,
        build_emails_client=prod.build_emails_client,
        init_logging=prod.init_logging,
    )
    batch = _write_batch(tmp_path / "batch.json", [{"From": "s@example.com", "To": "a@example.com", "TextBody": "x"}])

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-batch", str(batch)], obj=lambda: services)

    assert result.exit_code == 78


@pytest.mark.os_agnostic
def test_send_batch_with_malformed_attachment_exits_with_invalid_argument(
    cli_runner: CliRunner,
    email_cli_context: Callable[..., EmailCliContext],
    tmp_path: Path,
) -> None:
    ctx = email_cli_context()
    batch = _write_batch(
        tmp_path / "batch.json",
        [
            {
                "From": "s@example.com",
                "To": "a@example.com",
                "TextBody": "x",
                "Attachments": [{"Name": "a.txt", "ContentType": "text/plain"}],
            }
        ],
    )

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-batch", str(batch)], obj=ctx.factory)

    assert result.exit_code == ExitCode.INVALID_ARGUMENT
    assert "Message 0: Attachment is missing Content" in result.output
    assert ctx.spy.sent_batches == []
