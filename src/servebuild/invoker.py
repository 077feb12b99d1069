"""Synchronous invocation of external commands.

The dispatcher never spawns processes itself; it goes through an
:class:`Invoker`. :class:`SubprocessInvoker` is the real implementation,
:class:`DryRunInvoker` backs ``--dry-run``, and tests pass their own fake.

The child inherits stdin, stdout and stderr. Its output is never captured
or inspected, only its exit status.

While a child runs, SIGINT is swallowed by the front-end so Ctrl-C reaches
only the child (through the terminal's process group) and the child decides
how to stop. Its status is returned once it exits.
"""

from __future__ import annotations

import contextlib
import logging
import signal
import subprocess
import threading
from typing import Any, Iterator, Optional, Protocol, Sequence

from servebuild.exceptions import ToolNotFoundError
from servebuild.output import info

logger = logging.getLogger(__name__)

SIGNAL_EXIT_BASE = 128


class Invoker(Protocol):
    """Runs an external command and returns its exit status."""

    def invoke(self, args: Sequence[str]) -> int: ...


def shell_exit_status(returncode: int) -> int:
    """Map a :attr:`subprocess.Popen.returncode` to the status a shell reports.

    A child killed by signal N has ``returncode == -N``; shells report that
    as ``128 + N``.
    """
    if returncode < 0:
        return SIGNAL_EXIT_BASE - returncode
    return returncode


@contextlib.contextmanager
def _deferred_sigint() -> Iterator[None]:
    """Swallow SIGINT in this process for the duration of the block.

    The handler must stay a Python callable: caught signals revert to
    ``SIG_DFL`` on ``exec``, ignored ones stay ignored in the child.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _swallow(signum: int, frame: Any) -> None:  # noqa: ANN401
        logger.debug("SIGINT received while child is running; waiting for it")

    previous = signal.signal(signal.SIGINT, _swallow)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


class SubprocessInvoker:
    """Run commands as child processes and block until they exit.

    Args:
        cwd: Working directory for the child. ``None`` keeps the current one.
        echo: Show each command line on stderr before running it.
    """

    def __init__(self, cwd: Optional[str] = None, echo: bool = True) -> None:
        self._cwd = cwd
        self._echo = echo

    def invoke(self, args: Sequence[str]) -> int:
        """Run *args* and return the child's exit status.

        A child terminated by a signal is reported as ``128 + signal``.

        Raises:
            ToolNotFoundError: If the executable does not exist.
        """
        command = list(args)
        if self._echo:
            info(" ".join(command))
        logger.debug("Spawning %s (cwd=%s)", command, self._cwd)
        try:
            with _deferred_sigint():
                completed = subprocess.run(command, cwd=self._cwd)
        except FileNotFoundError as exc:
            raise ToolNotFoundError(command[0]) from exc
        logger.debug("%s exited with %d", command[0], completed.returncode)
        return shell_exit_status(completed.returncode)


class DryRunInvoker:
    """Show commands without running them. Every invocation succeeds."""

    def __init__(self) -> None:
        self.commands: list[list[str]] = []

    def invoke(self, args: Sequence[str]) -> int:
        command = list(args)
        self.commands.append(command)
        info(" ".join(command))
        return 0
