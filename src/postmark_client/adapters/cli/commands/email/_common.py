"""Shared utilities for the email CLI commands.

Contains client option decorators, ``[postmark]`` config loading and the
error handling shared by ``send-email`` and ``send-batch``.
"""

from __future__ import annotations

import functools
import logging
import os
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import pydantic
import rich_click as click
from lib_layered_config import Config

from postmark_client import __init__conf__
from postmark_client.application.ports import EmailSender, LoadClientConfigFromDict
from postmark_client.domain.configuration import API_TOKEN_ENV_VAR, ClientConfig
from postmark_client.domain.email_response import EmailResponse
from postmark_client.domain.errors import ApiError, ConfigurationError, ConnectionError, ValidationError

from ...exit_codes import ExitCode

if TYPE_CHECKING:
    from postmark_client.composition import AppServices

logger = logging.getLogger(__name__)


def client_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the ``--api-token`` and ``--base-url`` overrides to a command."""
    options = [
        click.option(
            "--api-token",
            default=None,
            help=f"Server API token (defaults to postmark.api_token or ${API_TOKEN_ENV_VAR})",
        ),
        click.option("--base-url", default=None, help="Override the API base URL"),
    ]
    return functools.reduce(lambda f, opt: opt(f), reversed(options), func)


def load_client_config(config: Config, loader: LoadClientConfigFromDict) -> ClientConfig:
    """Build the ClientConfig from the ``[postmark]`` section.

    Raises:
        SystemExit: When the section holds invalid values (exit code 78 / CONFIG_ERROR).
    """
    try:
        return loader(config.as_dict())
    except pydantic.ValidationError as exc:
        logger.error("Invalid postmark configuration", extra={"error": str(exc)})
        click.echo(f"\nError: Invalid [postmark] configuration - {exc}", err=True)
        click.echo(f"See: {__init__conf__.shell_command} config --section postmark", err=True)
        raise SystemExit(ExitCode.CONFIG_ERROR) from exc


@contextmanager
def open_sender(
    services: AppServices,
    client_config: ClientConfig,
    *,
    api_token: str | None,
    base_url: str | None,
) -> Iterator[EmailSender]:
    """Yield an email sender from the composition root and close it afterwards.

    Raises:
        ConfigurationError: When no API token can be resolved.
    """
    sender = services.build_emails_client(config=client_config, api_token=api_token, base_url=base_url)
    try:
        yield sender
    finally:
        sender.close()


def execute_with_email_error_handling(
    *,
    operation: Callable[[], Sequence[EmailResponse]],
    message_type: str,
) -> None:
    """Run a send operation and map its outcome onto exit codes.

    Exceptions are caught most specific first:

    1. ConfigurationError -> CONFIG_ERROR (78)
    2. FileNotFoundError -> FILE_NOT_FOUND (2)
    3. ValidationError, ValueError -> INVALID_ARGUMENT (22)
    4. ConnectionError, ApiError -> API_FAILURE (69)
    5. Exception -> GENERAL_ERROR (1), re-raised when ``DEVELOPMENT_MODE`` is set

    Responses carrying a non-zero ErrorCode also exit with API_FAILURE.

    Raises:
        SystemExit: On any failure.
    """
    try:
        responses = operation()
    except ConfigurationError as exc:
        _handle_send_error(
            exc,
            "Postmark client configuration error",
            "Configuration error",
            ExitCode.CONFIG_ERROR,
            hint=f"Set postmark.api_token or ${API_TOKEN_ENV_VAR}, or pass --api-token.",
        )
    except FileNotFoundError as exc:
        _handle_send_error(exc, "File not found", "File not found", ExitCode.FILE_NOT_FOUND)
    except (ValidationError, ValueError) as exc:
        _handle_send_error(
            exc,
            f"Invalid {message_type.lower()}",
            f"Invalid {message_type.lower()}",
            ExitCode.INVALID_ARGUMENT,
        )
    except ConnectionError as exc:
        _handle_send_error(exc, "Postmark API unreachable", "Could not reach Postmark", ExitCode.API_FAILURE)
    except ApiError as exc:
        _handle_send_error(
            exc,
            "Postmark API request failed",
            f"Postmark API error {exc.error_code}",
            ExitCode.API_FAILURE,
        )
    except Exception as exc:
        if os.environ.get("DEVELOPMENT_MODE"):
            raise
        _handle_send_error(
            exc,
            f"Unexpected error sending {message_type.lower()}",
            "Unexpected error",
            ExitCode.GENERAL_ERROR,
            log_traceback=True,
        )
    else:
        _handle_send_results(responses, message_type)


def _handle_send_results(responses: Sequence[EmailResponse], message_type: str) -> None:
    """Print one line per response; exit with API_FAILURE if any was rejected.

    Raises:
        SystemExit: If at least one message was rejected.
    """
    for response in responses:
        click.echo(str(response), err=response.error)

    failed = sum(1 for response in responses if response.error)
    logger.info("%s submitted via CLI", message_type, extra={"count": len(responses), "failed": failed})
    if failed:
        click.echo(f"\n{failed} of {len(responses)} message(s) rejected by Postmark.", err=True)
        raise SystemExit(ExitCode.API_FAILURE)
    click.echo(f"\n{message_type} sent successfully!")


def _handle_send_error(
    exc: Exception,
    log_message: str,
    user_message: str,
    exit_code: ExitCode,
    *,
    log_traceback: bool = False,
    hint: str | None = None,
) -> None:
    """Log *exc*, print it (and an optional *hint*) for the user and exit.

    Raises:
        SystemExit: Always, with *exit_code*.
    """
    logger.error(
        log_message,
        extra={"error": str(exc), "error_type": type(exc).__name__},
        exc_info=log_traceback,
    )
    click.echo(f"\nError: {user_message} - {exc}", err=True)
    if hint:
        click.echo(hint, err=True)
    raise SystemExit(exit_code) from exc


__all__ = [
    "client_options",
    "execute_with_email_error_handling",
    "load_client_config",
    "open_sender",
]
