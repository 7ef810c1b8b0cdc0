"""Layered configuration loading and the ``[postmark]`` section bridge."""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol, cast

from lib_layered_config import (
    DEFAULT_MAX_PROFILE_LENGTH,
    Config,
    read_config,
    validate_profile_name,
)

from postmark_client import __init__conf__
from postmark_client.domain.configuration import ClientConfig

#: Name of the configuration section holding client settings.
CLIENT_SECTION = "postmark"


class ConfigLoaderProtocol(Protocol):
    """Protocol for config loader with cache_clear method."""

    def __call__(self, *, profile: str | None = None, start_dir: str | None = None) -> Config: ...
    def cache_clear(self) -> None: ...


def validate_profile(profile: str, max_length: int | None = None) -> None:
    """Validate a profile name using lib_layered_config.

    Raises:
        ValueError: If the name is empty, too long, contains path separators
            or other disallowed characters.

    Examples:
        >>> validate_profile("production")

        >>> validate_profile("../etc/passwd")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ValueError: profile contains invalid characters: ../etc/passwd
    """
    length = max_length if max_length is not None else DEFAULT_MAX_PROFILE_LENGTH
    validate_profile_name(profile, max_length=length)


@lru_cache(maxsize=1)
def get_default_config_path() -> Path:
    """Return the path to the bundled ``defaultconfig.toml``.

    Example:
        >>> get_default_config_path().name
        'defaultconfig.toml'
    """
    return Path(__file__).parent / "defaultconfig.toml"


@lru_cache(maxsize=4)
def _get_config_impl(*, profile: str | None = None, start_dir: str | None = None) -> Config:
    """Cached read; the caller validates the profile first."""
    return read_config(
        vendor=__init__conf__.LAYEREDCONF_VENDOR,
        app=__init__conf__.LAYEREDCONF_APP,
        slug=__init__conf__.LAYEREDCONF_SLUG,
        profile=profile,
        default_file=get_default_config_path(),
        start_dir=start_dir,
    )


def _get_config(*, profile: str | None = None, start_dir: str | None = None) -> Config:
    """Load layered configuration with the bundled defaults.

    Precedence: defaults → app → host → user → dotenv → env.

    Args:
        profile: Optional profile name; inserts ``profile/<name>/`` into all
            configuration paths.
        start_dir: Directory that seeds ``.env`` discovery; the current
            working directory when None.

    Note:
        Cached per (profile, start_dir). Call ``get_config.cache_clear()``
        to force a re-read.
    """
    if profile is not None:
        validate_profile(profile)
    return _get_config_impl(profile=profile, start_dir=start_dir)


def _cache_clear() -> None:
    _get_config_impl.cache_clear()


# lru_cache's cache_clear is invisible to type checkers once cast to the Protocol.
_get_config.cache_clear = _cache_clear  # type: ignore[attr-defined]
get_config: ConfigLoaderProtocol = cast(ConfigLoaderProtocol, _get_config)


def load_client_config_from_dict(config_dict: Mapping[str, Any]) -> ClientConfig:
    """Build a ClientConfig from the ``[postmark]`` section of a config dict.

    Missing keys keep their model defaults, so an absent ``api_token``
    still falls back to the ``POSTMARK_API_TOKEN`` environment variable.

    Raises:
        pydantic.ValidationError: When the section holds invalid values.

    Example:
        >>> config = load_client_config_from_dict({"postmark": {"api_token": "t", "timeout": 60}})
        >>> config.timeout
        60.0
        >>> load_client_config_from_dict({}).default_message_stream
        'outbound'
    """
    section: Any = config_dict.get(CLIENT_SECTION, {})
    if not isinstance(section, Mapping):
        return ClientConfig.model_validate(section)
    raw = {key: value for key, value in cast(Mapping[str, Any], section).items() if value is not None}
    # Empty strings from TOML mean "not configured" for the token.
    if raw.get("api_token") == "":
        del raw["api_token"]
    return ClientConfig.model_validate(raw)


__all__ = [
    "CLIENT_SECTION",
    "get_config",
    "get_default_config_path",
    "load_client_config_from_dict",
    "validate_profile",
]
