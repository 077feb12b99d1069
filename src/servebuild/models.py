"""Canonical Pydantic models and enums shared across servebuild modules.

**Configuration model** -- read from ``./servebuild.json`` and layered with
environment variables and CLI flags:
    :class:`BuildConfig`.

**Operation models** -- the static operation table built once at startup:
    :class:`Platform`, :class:`OperationName`, :class:`CommandAction`,
    :class:`MessageAction`, and :class:`OperationSpec`.

Operation models are frozen. Once the table is built nothing in it can be
reassigned.
"""

from __future__ import annotations

import enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Platform ---


class Platform(str, enum.Enum):
    """Host operating system class."""

    WINDOWS_LIKE = "windows"
    POSIX_LIKE = "posix"


# --- Configuration ---


class BuildConfig(BaseModel):
    """Build and install settings.

    The defaults reproduce the stock behaviour: build ``serve`` with
    ``cargo`` and install it into ``/usr/bin`` through ``sudo``.

    Example::

        BuildConfig(program_name="serve", install_dir="/usr/local/bin")
    """

    model_config = ConfigDict(extra="forbid")

    program_name: str = Field(
        default="serve", min_length=1, description="Name of the compiled program"
    )
    build_tool: str = Field(
        default="cargo", min_length=1, description="Build tool executable"
    )
    release_dir: str = Field(
        default="target/release",
        description="Directory where the build tool writes release binaries",
    )
    install_dir: str = Field(
        default="/usr/bin", description="System binary directory for POSIX installs"
    )
    privilege_command: Optional[str] = Field(
        default="sudo",
        description="Command prefixed to the install copy; null runs cp directly",
    )


# --- Operations ---


class OperationName(str, enum.Enum):
    """Named operations exposed on the command line."""

    BUILD = "build"
    DEBUG = "debug"
    INSTALL = "install"
    RUN = "run"
    HELP = "help"


class CommandAction(BaseModel):
    """An external command to execute; its exit status is the operation's result."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["command"] = "command"
    args: tuple[str, ...] = Field(min_length=1)

    def render(self) -> str:
        """Return the command as a single space-separated line."""
        return " ".join(self.args)


class MessageAction(BaseModel):
    """Literal lines printed to stdout. Always succeeds."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["message"] = "message"
    lines: tuple[str, ...] = ()

    def render(self) -> str:
        return f"print {len(self.lines)} line(s)"


Action = Union[CommandAction, MessageAction]


class OperationSpec(BaseModel):
    """One entry of the operation table.

    ``depends_on`` lists operations that must succeed, in order, before
    ``action`` runs.
    """

    model_config = ConfigDict(frozen=True)

    name: OperationName
    description: str = ""
    action: Action = Field(discriminator="kind")
    depends_on: tuple[OperationName, ...] = ()
