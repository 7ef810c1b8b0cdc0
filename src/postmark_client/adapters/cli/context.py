"""Per-invocation CLI state and lib_cli_exit_tools traceback switches.

The root group resolves configuration and services once, then parks them
in ``ctx.obj`` as a :class:`CLIContext`. ``send-email``, ``send-batch`` and
``config`` read it back through :func:`get_cli_context` instead of loading
settings again.

The traceback helpers keep ``--traceback`` and lib_cli_exit_tools' global
flags in step, and let :func:`~postmark_client.adapters.cli.main.main` put
the flags back once a run is over so embedding callers see no side effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import lib_cli_exit_tools
import rich_click as click
from lib_layered_config import Config

if TYPE_CHECKING:
    from postmark_client.composition import AppServices

TracebackState = tuple[bool, bool]
"""``(traceback, traceback_force_color)`` as read from lib_cli_exit_tools."""


@dataclass(slots=True)
class CLIContext:
    """State the root group hands to every subcommand.

    Attributes:
        traceback: Whether ``--traceback`` was given.
        config: Layered configuration with ``--set`` overrides applied.
        services: Adapter functions for this run (production or in-memory).
        profile: Profile from the root ``--profile`` option, if any.
        set_overrides: Raw ``--set`` strings, kept so ``config --profile``
            can reapply them after reloading.
    """

    traceback: bool
    config: Config
    services: AppServices
    profile: str | None = None
    set_overrides: tuple[str, ...] = ()


def store_cli_context(
    ctx: click.Context,
    *,
    traceback: bool,
    config: Config,
    services: AppServices,
    profile: str | None = None,
    set_overrides: tuple[str, ...] = (),
) -> None:
    """Replace ``ctx.obj`` (the services factory) with a :class:`CLIContext`.

    Args:
        ctx: Click context of the root group.
        traceback: Value of ``--traceback``.
        config: Configuration the subcommands should see.
        services: Services built from the factory passed to ``main``.
        profile: Active profile name.
        set_overrides: Raw ``--set`` values.

    Example:
        >>> from unittest.mock import MagicMock
        >>> from postmark_client.composition import build_testing
        >>> ctx = MagicMock()
        >>> store_cli_context(ctx, traceback=False, config=MagicMock(), services=build_testing(), profile="staging")
        >>> ctx.obj.profile
        'staging'
    """
    ctx.obj = CLIContext(
        traceback=traceback,
        config=config,
        services=services,
        profile=profile,
        set_overrides=set_overrides,
    )


def get_cli_context(ctx: click.Context) -> CLIContext:
    """Fetch the state stored by the root group.

    Args:
        ctx: Context of any subcommand.

    Returns:
        The :class:`CLIContext` for this invocation.

    Raises:
        RuntimeError: When a subcommand is invoked without the root group,
            so ``ctx.obj`` still holds something else.
    """
    if not isinstance(ctx.obj, CLIContext):
        raise RuntimeError("CLI context not initialized. Call store_cli_context first.")
    return ctx.obj


def apply_traceback_preferences(enabled: bool) -> None:
    """Turn lib_cli_exit_tools' full and coloured tracebacks on or off together.

    Example:
        >>> apply_traceback_preferences(False)
        >>> bool(lib_cli_exit_tools.config.traceback)
        False
    """
    lib_cli_exit_tools.config.traceback = bool(enabled)
    lib_cli_exit_tools.config.traceback_force_color = bool(enabled)


def snapshot_traceback_state() -> TracebackState:
    """Read the current traceback flags.

    Returns:
        A :data:`TracebackState` to hand to :func:`restore_traceback_state`.
    """
    return (
        bool(getattr(lib_cli_exit_tools.config, "traceback", False)),
        bool(getattr(lib_cli_exit_tools.config, "traceback_force_color", False)),
    )


def restore_traceback_state(state: TracebackState) -> None:
    """Write back flags captured by :func:`snapshot_traceback_state`.

    Example:
        >>> saved = snapshot_traceback_state()
        >>> apply_traceback_preferences(True)
        >>> restore_traceback_state(saved)
        >>> snapshot_traceback_state() == saved
        True
    """
    traceback_enabled, force_color = state
    lib_cli_exit_tools.config.traceback = traceback_enabled
    lib_cli_exit_tools.config.traceback_force_color = force_color


__all__ = [
    "CLIContext",
    "TracebackState",
    "apply_traceback_preferences",
    "get_cli_context",
    "restore_traceback_state",
    "snapshot_traceback_state",
    "store_cli_context",
]
