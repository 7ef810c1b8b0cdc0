"""Base HTTP client for the Postmark API.

Owns the ``httpx.Client``, the server-token header and the timeouts, and
translates transport and HTTP failures into the package's error types.
Resource clients subclass :class:`BaseClient` and call its verb methods.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType
from typing import Any, TypeVar, cast

import httpx
import orjson

from postmark_client.domain.configuration import ClientConfig, configuration
from postmark_client.domain.errors import ApiError, ConfigurationError, ConnectionError

logger = logging.getLogger(__name__)

AUTH_HEADER = "X-Postmark-Server-Token"

_ClientT = TypeVar("_ClientT", bound="BaseClient")

_JSON_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


def parse_error_body(content: bytes) -> dict[str, Any]:
    """Parse an error payload, falling back to an empty dict.

    Example:
        >>> parse_error_body(b'{"ErrorCode": 300, "Message": "Invalid email address"}')
        {'ErrorCode': 300, 'Message': 'Invalid email address'}
        >>> parse_error_body(b"<html>Bad Gateway</html>")
        {}
        >>> parse_error_body(b"")
        {}
    """
    if not content:
        return {}
    try:
        parsed = orjson.loads(content)
    except orjson.JSONDecodeError:
        return {}
    if isinstance(parsed, dict):
        return cast(dict[str, Any], parsed)
    return {}


class BaseClient:
    """Authenticated JSON client bound to one API token.

    Args:
        api_token: Server token. Falls back to ``config.api_token``.
        config: Settings to use; the process-wide configuration when None.
        timeout: Request timeout in seconds; ``config.timeout`` when None.
        open_timeout: Connect timeout in seconds; ``config.open_timeout`` when None.
        base_url: API origin; ``config.base_url`` when None.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.

    Raises:
        ConfigurationError: When no non-empty token can be resolved.

    Example:
        >>> BaseClient(api_token="")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ConfigurationError: API token is required
    """

    def __init__(
        self,
        api_token: str | None = None,
        *,
        config: ClientConfig | None = None,
        timeout: float | None = None,
        open_timeout: float | None = None,
        base_url: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config if config is not None else configuration()
        token = api_token if api_token is not None else self.config.api_token
        if not token:
            raise ConfigurationError("API token is required")
        self.api_token: str = token
        self.timeout = timeout if timeout is not None else self.config.timeout
        self.open_timeout = open_timeout if open_timeout is not None else self.config.open_timeout
        self.base_url = base_url if base_url is not None else self.config.base_url
        self._transport = transport
        self._client: httpx.Client | None = None

    def __enter__(self: _ClientT) -> _ClientT:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying connection pool if one was opened."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        """Send a GET request with query parameters."""
        return self._request("GET", path, params=params)

    def post(self, path: str, body: Any = None) -> Any:
        """Send a POST request with a JSON body."""
        return self._request("POST", path, body={} if body is None else body)

    def put(self, path: str, body: Any = None) -> Any:
        """Send a PUT request with a JSON body."""
        return self._request("PUT", path, body={} if body is None else body)

    def delete(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        """Send a DELETE request with query parameters."""
        return self._request("DELETE", path, params=params)

    def _http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers={**_JSON_HEADERS, AUTH_HEADER: self.api_token},
                timeout=httpx.Timeout(self.timeout, connect=self.open_timeout),
                transport=self._transport,
            )
        return self._client

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> Any:
        """Perform one request and return the parsed JSON body.

        Raises:
            ConnectionError: On timeouts and connection failures.
            ApiError: When the API answers with an error status.
        """
        content = orjson.dumps(body) if body is not None else None
        logger.debug("Postmark request", extra={"method": method, "path": path})

        try:
            response = self._http().request(method, path, params=dict(params) if params else None, content=content)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise self._api_error(exc.response) from exc
        except httpx.TransportError as exc:
            logger.debug("Postmark transport failure", exc_info=True)
            raise ConnectionError(f"Connection failed: {exc}") from exc

        if not response.content:
            return {}
        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as exc:
            raise ApiError(
                "Response body is not valid JSON",
                error_code=response.status_code,
            ) from exc

    @staticmethod
    def _api_error(response: httpx.Response) -> ApiError:
        """Translate an error response into an ApiError."""
        body = parse_error_body(response.content)
        error_code = body.get("ErrorCode")
        if error_code is None:
            error_code = response.status_code
        message = body.get("Message") or f"Server responded with status {response.status_code}"
        logger.warning(
            "Postmark API error",
            extra={"status": response.status_code, "error_code": error_code, "error": message},
        )
        return ApiError(str(message), error_code=error_code, response=body)


__all__ = ["AUTH_HEADER", "BaseClient", "parse_error_body"]
