"""Exit codes for CLI error paths.

Signal codes (130, 141, 143) are informational; ``lib_cli_exit_tools``
translates signals itself and no command raises them.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes following errno and sysexits.h conventions.

    * 2: ENOENT, a missing attachment or batch file
    * 22: EINVAL, a message that fails validation or a bad argument
    * 69: EX_UNAVAILABLE, the API could not be reached or rejected a message
    * 78: EX_CONFIG, a missing token or invalid ``[postmark]`` settings

    Example:
        >>> int(ExitCode.API_FAILURE)
        69
        >>> ExitCode(78).name
        'CONFIG_ERROR'
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    FILE_NOT_FOUND = 2
    INVALID_ARGUMENT = 22
    API_FAILURE = 69
    CONFIG_ERROR = 78
    SIGNAL_INT = 130
    BROKEN_PIPE = 141
    SIGNAL_TERM = 143


__all__ = ["ExitCode"]
