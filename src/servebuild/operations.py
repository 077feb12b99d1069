"""Static operation table.

:func:`build_operation_table` turns a resolved :class:`Platform` and
:class:`BuildConfig` into one frozen :class:`OperationSpec` per
:class:`OperationName`. The table is built once per process and only read
afterwards.

Only three build tool invocations exist:

============  ===========================
build         ``cargo build --release``
debug         ``cargo run``
run           ``cargo run --release``
============  ===========================
"""

from __future__ import annotations

import posixpath

from servebuild.models import (
    BuildConfig,
    CommandAction,
    MessageAction,
    OperationName,
    OperationSpec,
    Platform,
)
from servebuild.paths import build_artifact_path

CLI_NAME = "servebuild"

WINDOWS_INSTALL_INSTRUCTIONS = (
    '1. Add a folder in "/Program Files"',
    "2. Copy the program there",
    "3. Add the folder to the PATH environment variable",
)


def help_lines(cli_name: str = CLI_NAME) -> tuple[str, ...]:
    """Return the usage list printed by ``help``, one invocation per line."""
    return (
        cli_name,
        f"{cli_name} {OperationName.DEBUG.value}",
        f"{cli_name} {OperationName.INSTALL.value}",
        f"{cli_name} {OperationName.RUN.value}",
    )


def build_tool_command(build_tool: str, *, release: bool, run: bool) -> CommandAction:
    """Return the build tool invocation for a build mode and post-build action."""
    args = [build_tool, "run" if run else "build"]
    if release:
        args.append("--release")
    return CommandAction(args=tuple(args))


def install_action(platform: Platform, config: BuildConfig) -> CommandAction | MessageAction:
    """Return the step that makes the built program available system-wide.

    POSIX-like hosts copy the release binary into ``config.install_dir``
    (through ``config.privilege_command`` when set). Windows-like hosts get
    manual instructions and nothing is written.
    """
    if platform == Platform.WINDOWS_LIKE:
        return MessageAction(lines=WINDOWS_INSTALL_INSTRUCTIONS)

    artifact = build_artifact_path(
        platform, config.program_name, release_dir=config.release_dir
    )
    args = ["cp", artifact, config.install_dir]
    if config.privilege_command:
        args.insert(0, config.privilege_command)
    return CommandAction(args=tuple(args))


def install_target(platform: Platform, config: BuildConfig) -> str | None:
    """Return the path the install step writes to, or ``None`` on Windows-like hosts."""
    if platform == Platform.WINDOWS_LIKE:
        return None
    return posixpath.join(config.install_dir, config.program_name)


def build_operation_table(
    platform: Platform, config: BuildConfig
) -> dict[OperationName, OperationSpec]:
    """Build the operation table for *platform*.

    Args:
        platform: Resolved host platform.
        config: Effective build configuration.

    Returns:
        A dict with exactly one :class:`OperationSpec` per
        :class:`OperationName`.
    """
    tool = config.build_tool
    specs = [
        OperationSpec(
            name=OperationName.BUILD,
            description="Compile in release mode.",
            action=build_tool_command(tool, release=True, run=False),
        ),
        OperationSpec(
            name=OperationName.DEBUG,
            description="Compile in debug mode and run.",
            action=build_tool_command(tool, release=False, run=True),
        ),
        OperationSpec(
            name=OperationName.INSTALL,
            description="Compile in release mode, then install.",
            action=install_action(platform, config),
            depends_on=(OperationName.BUILD,),
        ),
        OperationSpec(
            name=OperationName.RUN,
            description="Compile in release mode and run.",
            action=build_tool_command(tool, release=True, run=True),
        ),
        OperationSpec(
            name=OperationName.HELP,
            description="List available invocations.",
            action=MessageAction(lines=help_lines()),
        ),
    ]
    return {spec.name: spec for spec in specs}
