"""Static package metadata surfaced to CLI commands and documentation.

The ``version`` line is kept in sync with ``pyproject.toml`` on release.
The ``LAYEREDCONF_*`` identifiers decide the platform-specific directories
``lib_layered_config`` searches for configuration files.
"""

from __future__ import annotations

name = "postmark_client"
title = "Typed Python client for the Postmark transactional email API"
version = "1.0.0"
homepage = "https://postmarkapp.com/developer"
author = "postmark_client contributors"
shell_command = "postmark-client"

#: Vendor, application and slug identifiers for lib_layered_config.
LAYEREDCONF_VENDOR = "postmark_client"
LAYEREDCONF_APP = "postmark_client"
LAYEREDCONF_SLUG = "postmark-client"


def print_info() -> None:
    """Print the summarised metadata block used by the ``info`` command.

    Example:
        >>> print_info()  # doctest: +ELLIPSIS
        Info for postmark_client:
        ...
    """
    fields = (
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("shell_command", shell_command),
    )
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    print("\n".join(lines))


__all__ = [
    "LAYEREDCONF_APP",
    "LAYEREDCONF_SLUG",
    "LAYEREDCONF_VENDOR",
    "author",
    "homepage",
    "name",
    "print_info",
    "shell_command",
    "title",
    "version",
]
