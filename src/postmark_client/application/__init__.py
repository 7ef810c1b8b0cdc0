"""Application layer - port definitions.

Contents:
    * :mod:`.ports` - Callable Protocol definitions for adapter functions
"""

from __future__ import annotations

from .ports import (
    BuildEmailsClient,
    DisplayConfig,
    EmailSender,
    GetConfig,
    GetDefaultConfigPath,
    InitLogging,
    LoadClientConfigFromDict,
)

__all__ = [
    "BuildEmailsClient",
    "DisplayConfig",
    "EmailSender",
    "GetConfig",
    "GetDefaultConfigPath",
    "InitLogging",
    "LoadClientConfigFromDict",
]
