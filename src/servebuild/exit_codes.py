"""Numeric process exit codes used by servebuild itself.

Delegated commands (the build tool, ``cp``) pass their own exit status
through unchanged; these constants only cover failures that originate in
servebuild. Each one is referenced by the matching
:class:`~servebuild.exceptions.ServeBuildError` subclass.

Example::

    $ servebuild --build-tool nope
    $ echo $?
    127   # EXIT_COMMAND_NOT_FOUND -- the build tool is not on PATH
"""

EXIT_SUCCESS = 0
"""The operation completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Unknown operation or invalid arguments."""

EXIT_COMMAND_NOT_FOUND = 127
"""An external command could not be found (same code the shell uses)."""

EXIT_INTERRUPTED = 130
"""Interrupted by SIGINT (Ctrl-C)."""
