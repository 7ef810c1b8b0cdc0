"""Shared pytest fixtures for library, CLI and module-entry tests.

- All shared fixtures live here
- HTTP is faked with ``httpx.MockTransport``; no test touches the network
- The process-wide configuration is reset around every test
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
import lib_cli_exit_tools
import orjson
import pytest
from click.testing import CliRunner
from lib_layered_config import Config

from postmark_client.domain.configuration import API_TOKEN_ENV_VAR, reset_configuration

if TYPE_CHECKING:
    from postmark_client.adapters.http import Emails
    from postmark_client.adapters.memory.email import EmailSpy
    from postmark_client.composition import AppServices


def _load_dotenv() -> None:
    """Load a project ``.env`` when present so local settings reach lib_log_rich."""
    from dotenv import load_dotenv

    env_file = Path(__file__).parent.parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)


_load_dotenv()

ANSI_ESCAPE_PATTERN = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
CONFIG_FIELDS: tuple[str, ...] = tuple(item.name for item in fields(type(lib_cli_exit_tools.config)))

SUBMITTED_AT = "2024-01-15T10:30:00.0000000-05:00"
MESSAGE_ID = "abc123-def456-ghi789"


def api_success(to: str = "recipient@example.com", message_id: str = MESSAGE_ID) -> dict[str, Any]:
    """Return the body Postmark sends for an accepted message."""
    return {"To": to, "SubmittedAt": SUBMITTED_AT, "MessageID": message_id, "ErrorCode": 0, "Message": "OK"}


def api_failure(error_code: int, message: str) -> dict[str, Any]:
    """Return the body Postmark sends for a rejected message."""
    return {"ErrorCode": error_code, "Message": message}


def _remove_ansi_codes(text: str) -> str:
    return ANSI_ESCAPE_PATTERN.sub("", text)


def _snapshot_cli_config() -> dict[str, object]:
    return {name: getattr(lib_cli_exit_tools.config, name) for name in CONFIG_FIELDS}


def _restore_cli_config(snapshot: dict[str, object]) -> None:
    for name, value in snapshot.items():
        setattr(lib_cli_exit_tools.config, name, value)


@pytest.fixture(autouse=True)
def isolated_configuration(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test without an environment token and with fresh settings."""
    monkeypatch.delenv(API_TOKEN_ENV_VAR, raising=False)
    reset_configuration()
    yield
    reset_configuration()


@dataclass
class FakePostmarkApi:
    """Records requests and answers them with a canned response.

    Attributes:
        requests: Every request the transport received, in order.
        status_code: Status of the canned response.
        payload: JSON body of the canned response.
        content: Raw body used instead of *payload* when set.
        timeout: When True, every request raises ``httpx.ConnectTimeout``.
        refuse: When True, every request raises ``httpx.ConnectError``.
    """

    requests: list[httpx.Request] = field(default_factory=list)
    status_code: int = 200
    payload: Any = None
    content: bytes | None = None
    timeout: bool = False
    refuse: bool = False

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.timeout:
            raise httpx.ConnectTimeout("timed out", request=request)
        if self.refuse:
            raise httpx.ConnectError("refused", request=request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def body(self, index: int = -1) -> Any:
        """Decode the JSON body of a recorded request."""
        return orjson.loads(self.requests[index].content)


@pytest.fixture
def postmark_api() -> FakePostmarkApi:
    """Provide a fake API that accepts every message."""
    return FakePostmarkApi(payload=api_success())


@pytest.fixture
def emails_client(postmark_api: FakePostmarkApi) -> Iterator[Emails]:
    """Provide an Emails client wired to :func:`postmark_api`."""
    from postmark_client.adapters.http import Emails

    client = Emails(api_token="test-server-token", transport=postmark_api.transport)
    try:
        yield client
    finally:
        client.close()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a fresh CliRunner per test.

    Use ``result.stdout`` for clean output (e.g. JSON parsing) and
    ``result.output`` when stderr messages matter too.
    """
    return CliRunner()


@pytest.fixture
def production_factory() -> Callable[[], AppServices]:
    """Provide the production services factory for tests."""
    from postmark_client.composition import build_production

    return build_production


@pytest.fixture
def strip_ansi() -> Callable[[str], str]:
    """Return a helper that strips ANSI escape sequences from a string."""
    return _remove_ansi_codes


@pytest.fixture
def managed_traceback_state() -> Iterator[None]:
    """Reset traceback flags to a known baseline and restore after the test."""
    lib_cli_exit_tools.reset_config()
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    snapshot = _snapshot_cli_config()
    try:
        yield
    finally:
        _restore_cli_config(snapshot)


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Clear the get_config lru_cache before the test.

    Only clears before, so a monkeypatched loader without ``cache_clear``
    does not break teardown.
    """
    from postmark_client.adapters.config import loader as config_mod

    config_mod.get_config.cache_clear()
    yield


@pytest.fixture
def config_factory() -> Callable[[dict[str, Any]], Config]:
    """Create real Config instances from test data dicts without filesystem I/O."""

    def _factory(data: dict[str, Any]) -> Config:
        return Config(data, {})

    return _factory


@pytest.fixture
def config_cli_context(
    clear_config_cache: None,
) -> Callable[[dict[str, Any]], Callable[[], AppServices]]:
    """Return a function turning a config dict into a services factory.

    Only ``get_config`` is replaced; every other service is production.
    """
    from postmark_client.composition import AppServices, build_production

    def _create(config_data: dict[str, Any]) -> Callable[[], AppServices]:
        config = Config(config_data, {})
        prod = build_production()

        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        test_services = AppServices(
            get_config=_fake_get_config,
            get_default_config_path=prod.get_default_config_path,
            display_config=prod.display_config,
            load_client_config_from_dict=prod.load_client_config_from_dict,
            build_emails_client=prod.build_emails_client,
            init_logging=prod.init_logging,
        )
        return lambda: test_services

    return _create


@dataclass
class EmailCliContext:
    """Services factory and EmailSpy for email CLI tests."""

    factory: Callable[[], Any]
    spy: EmailSpy


@pytest.fixture
def email_cli_context(
    clear_config_cache: None,
) -> Callable[..., EmailCliContext]:
    """Create an email CLI context whose sends land in an EmailSpy.

    The returned function takes the ``[postmark]`` section contents.

    Example:
        def test_send(cli_runner, email_cli_context) -> None:
            ctx = email_cli_context({"default_message_stream": "outbound"})
            cli_runner.invoke(cli, ["send-email", ...], obj=ctx.factory)
            assert ctx.spy.sent_emails[0].subject == "Hi"
    """
    from postmark_client.adapters.memory.email import EmailSpy as EmailSpyImpl
    from postmark_client.composition import AppServices, build_production

    def _create(postmark_data: dict[str, Any] | None = None, *, spy: EmailSpy | None = None) -> EmailCliContext:
        email_spy = spy if spy is not None else EmailSpyImpl()
        config = Config({"postmark": postmark_data or {}}, {})
        prod = build_production()

        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        test_services = AppServices(
            get_config=_fake_get_config,
            get_default_config_path=prod.get_default_config_path,
            display_config=prod.display_config,
            load_client_config_from_dict=prod.load_client_config_from_dict,
            build_emails_client=email_spy.build_emails_client,
            init_logging=prod.init_logging,
        )
        return EmailCliContext(factory=lambda: test_services, spy=email_spy)

    return _create
