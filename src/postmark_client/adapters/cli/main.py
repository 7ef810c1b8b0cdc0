"""Run ``postmark-client`` and turn every outcome into a process exit code.

Contents:
    * :func:`main` - entry used by ``entry.py``, ``__main__.py`` and tests.

``main`` never lets an exception escape. Click usage errors print Click's
own message; everything else (including ``SystemExit`` raised by the send
commands with an :class:`~.exit_codes.ExitCode`) is reported through
lib_cli_exit_tools, honouring ``--traceback``.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import click
import lib_cli_exit_tools
import lib_log_rich.runtime

from postmark_client import __init__conf__

from .constants import TRACEBACK_SUMMARY_LIMIT, TRACEBACK_VERBOSE_LIMIT
from .context import (
    apply_traceback_preferences,
    restore_traceback_state,
    snapshot_traceback_state,
)

if TYPE_CHECKING:
    from postmark_client.composition import AppServices


def _report_failure(exc: BaseException) -> int:
    """Print *exc* through lib_cli_exit_tools and return its exit code.

    The traceback length limit follows the ``--traceback`` flag the root
    group stored in lib_cli_exit_tools' config.
    """
    verbose = bool(getattr(lib_cli_exit_tools.config, "traceback", False))
    apply_traceback_preferences(verbose)
    lib_cli_exit_tools.print_exception_message(
        trace_back=verbose,
        length_limit=TRACEBACK_VERBOSE_LIMIT if verbose else TRACEBACK_SUMMARY_LIMIT,
    )
    return lib_cli_exit_tools.get_system_exit_code(exc)


def _run_cli(argv: Sequence[str] | None, *, services_factory: Callable[[], AppServices]) -> int:
    """Invoke the root group once in non-standalone mode.

    ``lib_cli_exit_tools.run_cli`` has no way to pass ``obj``, so the
    services factory is handed to ``cli.main`` here directly.

    Args:
        argv: Arguments without the program name; ``sys.argv[1:]`` when None.
        services_factory: Placed in ``ctx.obj`` for the root group to call.

    Returns:
        0 on success, Click's code for usage errors and ``--help``, or the
        code lib_cli_exit_tools derives from any other exception.
    """
    from .root import cli

    try:
        cli.main(
            args=list(argv) if argv is not None else sys.argv[1:],
            prog_name=__init__conf__.shell_command,
            obj=services_factory,
            standalone_mode=False,
        )
    except click.exceptions.Exit as exc:
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except BaseException as exc:
        # SystemExit and KeyboardInterrupt too: their codes come from lib_cli_exit_tools.
        return _report_failure(exc)
    return 0


def main(
    argv: Sequence[str] | None = None,
    *,
    restore_traceback: bool = True,
    services_factory: Callable[[], AppServices] | None = None,
) -> int:
    """Run the CLI and return its exit code.

    Args:
        argv: CLI arguments; ``sys.argv[1:]`` when None.
        restore_traceback: Put lib_cli_exit_tools' traceback flags back to
            their values from before the run.
        services_factory: Builds the AppServices for this run.
            ``build_production`` for real use, ``build_testing`` in tests.

    Returns:
        The process exit code, see :class:`~.exit_codes.ExitCode`.

    Raises:
        ValueError: If *services_factory* is missing.

    Example:
        >>> from postmark_client.composition import build_testing
        >>> main(["info"], services_factory=build_testing)  # doctest: +SKIP
        0
    """
    if services_factory is None:
        raise ValueError("services_factory is required. Pass build_production from composition layer.")

    saved_state = snapshot_traceback_state()
    try:
        return _run_cli(argv, services_factory=services_factory)
    finally:
        if restore_traceback:
            restore_traceback_state(saved_state)
        # Only the main thread owns the lib_log_rich runtime.
        if threading.current_thread() is threading.main_thread() and lib_log_rich.runtime.is_initialised():
            lib_log_rich.runtime.shutdown()


__all__ = ["main"]
