"""Exception hierarchy for servebuild.

All exceptions inherit from :class:`ServeBuildError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`servebuild.exit_codes`.
The top-level error handler in :func:`servebuild.app.main` catches
``ServeBuildError`` and exits with the appropriate code.

A failing build or copy is not an exception: its exit status is returned
by the dispatcher and becomes the process exit status as-is.

Subclass hierarchy::

    ServeBuildError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ConfigError         (exit 1)
    +-- ToolNotFoundError   (exit 127)
"""

from servebuild.exit_codes import (
    EXIT_COMMAND_NOT_FOUND,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class ServeBuildError(Exception):
    """Base exception for all servebuild errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ServeBuildError):
    """Raised for an unknown operation name or invalid arguments."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(ServeBuildError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE


class ToolNotFoundError(ServeBuildError):
    """Raised when an external command cannot be spawned because it is not installed.

    Args:
        command: The executable name that could not be found.
    """

    exit_code = EXIT_COMMAND_NOT_FOUND

    def __init__(self, command: str):
        super().__init__(f"Command not found: {command}")
        self.command = command
