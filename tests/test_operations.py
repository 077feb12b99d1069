"""Tests for servebuild.operations -- the static operation table."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from servebuild.models import (
    BuildConfig,
    CommandAction,
    MessageAction,
    OperationName,
    Platform,
)
from servebuild.operations import (
    WINDOWS_INSTALL_INSTRUCTIONS,
    build_operation_table,
    build_tool_command,
    help_lines,
    install_action,
    install_target,
)


# ---------------------------------------------------------------------------
# Build tool commands
# ---------------------------------------------------------------------------


class TestBuildToolCommands:
    def test_default_build_is_release_compile_only(self, any_platform, default_config) -> None:
        table = build_operation_table(any_platform, default_config)
        assert table[OperationName.BUILD].action == CommandAction(
            args=("cargo", "build", "--release")
        )

    def test_debug_is_debug_compile_and_run(self, any_platform, default_config) -> None:
        table = build_operation_table(any_platform, default_config)
        assert table[OperationName.DEBUG].action.args == ("cargo", "run")

    def test_run_is_release_compile_and_run(self, any_platform, default_config) -> None:
        table = build_operation_table(any_platform, default_config)
        assert table[OperationName.RUN].action.args == ("cargo", "run", "--release")

    def test_custom_build_tool(self) -> None:
        action = build_tool_command("cross", release=True, run=False)
        assert action.args == ("cross", "build", "--release")

    def test_only_install_has_dependencies(self, any_platform, default_config) -> None:
        table = build_operation_table(any_platform, default_config)
        for name, spec in table.items():
            if name == OperationName.INSTALL:
                assert spec.depends_on == (OperationName.BUILD,)
            else:
                assert spec.depends_on == ()


# ---------------------------------------------------------------------------
# Install action
# ---------------------------------------------------------------------------


class TestInstallAction:
    def test_posix_copies_with_sudo(self, default_config) -> None:
        action = install_action(Platform.POSIX_LIKE, default_config)
        assert isinstance(action, CommandAction)
        assert action.args == ("sudo", "cp", "target/release/serve", "/usr/bin")

    def test_posix_without_privilege_command(self) -> None:
        config = BuildConfig(privilege_command=None, install_dir="/opt/bin")
        action = install_action(Platform.POSIX_LIKE, config)
        assert action.args == ("cp", "target/release/serve", "/opt/bin")

    def test_windows_prints_three_instructions(self, default_config) -> None:
        action = install_action(Platform.WINDOWS_LIKE, default_config)
        assert isinstance(action, MessageAction)
        assert action.lines == WINDOWS_INSTALL_INSTRUCTIONS
        assert len(action.lines) == 3
        assert "Program Files" in action.lines[0]
        assert "Copy" in action.lines[1]
        assert "PATH" in action.lines[2]

    def test_install_target(self, default_config) -> None:
        assert install_target(Platform.POSIX_LIKE, default_config) == "/usr/bin/serve"
        assert install_target(Platform.WINDOWS_LIKE, default_config) is None


# ---------------------------------------------------------------------------
# Table shape and immutability
# ---------------------------------------------------------------------------


class TestOperationTable:
    def test_one_entry_per_operation(self, any_platform, default_config) -> None:
        table = build_operation_table(any_platform, default_config)
        assert set(table) == set(OperationName)
        for name, spec in table.items():
            assert spec.name == name

    def test_help_is_platform_independent(self, default_config) -> None:
        posix = build_operation_table(Platform.POSIX_LIKE, default_config)
        windows = build_operation_table(Platform.WINDOWS_LIKE, default_config)
        assert posix[OperationName.HELP] == windows[OperationName.HELP]

    def test_help_lines(self) -> None:
        assert help_lines() == (
            "servebuild",
            "servebuild debug",
            "servebuild install",
            "servebuild run",
        )

    def test_specs_are_frozen(self, default_config) -> None:
        spec = build_operation_table(Platform.POSIX_LIKE, default_config)[OperationName.RUN]
        with pytest.raises(ValidationError):
            spec.depends_on = (OperationName.BUILD,)
        with pytest.raises(ValidationError):
            spec.action.args = ("rm", "-rf", "/")

    def test_command_action_requires_args(self) -> None:
        with pytest.raises(ValidationError):
            CommandAction(args=())

    def test_render(self) -> None:
        assert CommandAction(args=("cargo", "run")).render() == "cargo run"
        assert MessageAction(lines=("a", "b")).render() == "print 2 line(s)"
