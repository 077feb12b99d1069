"""Release artifact path construction."""

from __future__ import annotations

from servebuild.models import Platform

RELEASE_DIR = "target/release"
WINDOWS_EXECUTABLE_SUFFIX = ".exe"


def executable_name(platform: Platform, program_name: str) -> str:
    """Return the file name of *program_name* as built on *platform*."""
    if platform == Platform.WINDOWS_LIKE:
        return program_name + WINDOWS_EXECUTABLE_SUFFIX
    return program_name


def build_artifact_path(
    platform: Platform,
    program_name: str,
    *,
    release_dir: str = RELEASE_DIR,
) -> str:
    """Return the path the build tool writes the release binary to.

    The path is relative to the project root and always uses ``/``. It is
    computed whether or not a build has happened.

    Args:
        platform: Resolved host platform.
        program_name: Name of the compiled program (e.g. ``"serve"``).
        release_dir: Release output directory of the build tool.

    Returns:
        ``"<release_dir>/<program_name>"``, with ``.exe`` appended on
        Windows-like hosts.
    """
    return f"{release_dir.rstrip('/')}/{executable_name(platform, program_name)}"
