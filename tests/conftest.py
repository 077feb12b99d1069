"""Shared test fixtures for servebuild.

Provides isolated environment and config fixtures, output state management,
a recording fake invoker, and a CLI runner. These fixtures are automatically
discovered by pytest and available to all test modules.
"""

from __future__ import annotations

import os
import signal
import subprocess
import sys
import time
from pathlib import Path
from typing import Sequence

import pytest

from servebuild.models import BuildConfig, Platform
from servebuild.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fake invoker
# ---------------------------------------------------------------------------


class RecordingInvoker:
    """Records every command and answers with scripted exit statuses.

    ``statuses`` maps the second argument of a command (``build``, ``run``,
    ``cp`` ...) or its first argument to the status to return. Unlisted
    commands succeed.
    """

    def __init__(self, statuses: dict[str, int] | None = None) -> None:
        self.statuses = statuses or {}
        self.calls: list[list[str]] = []

    def invoke(self, args: Sequence[str]) -> int:
        command = list(args)
        self.calls.append(command)
        for key in command[:2]:
            if key in self.statuses:
                return self.statuses[key]
        return 0


@pytest.fixture
def recorder() -> RecordingInvoker:
    """A RecordingInvoker where every command succeeds."""
    return RecordingInvoker()


@pytest.fixture
def default_config() -> BuildConfig:
    return BuildConfig()


@pytest.fixture(params=[Platform.POSIX_LIKE, Platform.WINDOWS_LIKE], ids=["posix", "windows"])
def any_platform(request: pytest.FixtureRequest) -> Platform:
    """Parametrise a test over both platform classes."""
    return request.param


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate the environment to a temporary project directory.

    Clears the ``OS`` signal and all SERVEBUILD_* variables, points
    XDG_DATA_HOME into tmp_path, and changes the working directory to
    tmp_path so no real ``servebuild.json`` is picked up.

    Returns:
        The tmp_path root directory.
    """
    for var in [
        "OS",
        "SERVEBUILD_PROGRAM",
        "SERVEBUILD_BUILD_TOOL",
        "SERVEBUILD_INSTALL_DIR",
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a PLAIN, colourless OutputManager for the duration of the test."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON OutputManager for the duration of the test."""
    output = OutputManager(format=OutputFormat.JSON, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


# ---------------------------------------------------------------------------
# Real child processes for interrupt handling
# ---------------------------------------------------------------------------


SRC_DIR = Path(__file__).resolve().parent.parent / "src"

_GRACEFUL_CHILD = """\
#!{python}
import pathlib
import signal
import sys
import time

READY = pathlib.Path({ready!r})
STOPPED = pathlib.Path({stopped!r})


def _stop(signum, frame):
    time.sleep(0.5)
    STOPPED.write_text("stopped")
    sys.exit(0)


signal.signal(signal.SIGINT, _stop)
READY.write_text("ready")
time.sleep(30)
sys.exit(5)
"""


class GracefulChild:
    """An executable that exits 0 after a slow, clean SIGINT shutdown.

    ``ready`` appears once its handler is installed; ``stopped`` only if
    the handler ran to completion.
    """

    def __init__(self, root: Path) -> None:
        self.ready = root / "ready"
        self.stopped = root / "stopped"
        self.tool = root / "graceful-tool"
        self.tool.write_text(
            _GRACEFUL_CHILD.format(
                python=sys.executable, ready=str(self.ready), stopped=str(self.stopped)
            )
        )
        self.tool.chmod(0o755)

    def run_front_end(self, code: str, timeout: float = 20.0) -> int:
        """Run *code* in a new session, interrupt its process group once the child is up.

        Returns:
            The front-end's exit status.
        """
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(
            p for p in (str(SRC_DIR), env.get("PYTHONPATH", "")) if p
        )
        proc = subprocess.Popen(
            [sys.executable, "-c", code], env=env, start_new_session=True
        )
        try:
            deadline = time.monotonic() + timeout
            while not self.ready.exists():
                if proc.poll() is not None or time.monotonic() > deadline:
                    raise AssertionError("child never became ready")
                time.sleep(0.05)
            os.killpg(proc.pid, signal.SIGINT)
            return proc.wait(timeout=timeout)
        finally:
            if proc.poll() is None:
                os.killpg(proc.pid, signal.SIGKILL)
                proc.wait()


@pytest.fixture
def graceful_child(tmp_path: Path) -> GracefulChild:
    if sys.platform == "win32":
        pytest.skip("process groups and SIGINT delivery are POSIX-only")
    return GracefulChild(tmp_path)
