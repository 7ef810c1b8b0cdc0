"""Package-level helpers: emails(), deliver() and the public surface."""

from __future__ import annotations

import pytest
from conftest import FakePostmarkApi

import postmark_client
from postmark_client import ConfigurationError, Email, Emails


@pytest.mark.os_agnostic
def test_emails_uses_explicit_token() -> None:
    client = postmark_client.emails("server-token")

    assert isinstance(client, Emails)
    assert client.api_token == "server-token"


@pytest.mark.os_agnostic
def test_emails_uses_configured_token() -> None:
    postmark_client.configure(lambda config: setattr(config, "api_token", "configured"))

    assert postmark_client.emails().api_token == "configured"


@pytest.mark.os_agnostic
def test_emails_without_token_fails() -> None:
    with pytest.raises(ConfigurationError):
        postmark_client.emails()


@pytest.mark.os_agnostic
def test_deliver_sends_with_a_default_client(
    monkeypatch: pytest.MonkeyPatch,
    postmark_api: FakePostmarkApi,
) -> None:
    monkeypatch.setattr(
        postmark_client,
        "emails",
        lambda api_token=None: Emails("server-token", transport=postmark_api.transport),
    )

    response = postmark_client.deliver(Email(from_="a@b.com", to="c@d.com", text_body="hi"))

    assert response.success
    assert postmark_api.body()["From"] == "a@b.com"


@pytest.mark.os_agnostic
def test_deliver_without_token_fails_before_sending() -> None:
    with pytest.raises(ConfigurationError):
        postmark_client.deliver({"From": "a@b.com", "To": "c@d.com", "TextBody": "hi"})


@pytest.mark.os_agnostic
def test_public_surface_is_exported() -> None:
    for name in ("Attachment", "BaseClient", "EmailResponse", "TrackLinks", "ValidationError", "reset_configuration"):
        assert name in postmark_client.__all__
        assert hasattr(postmark_client, name)
