"""servebuild -- build, run and install the ``serve`` program.

This package is a thin front-end over the project's build tool (``cargo``).
It resolves the host platform, works out where the release binary lands,
and maps a handful of named operations onto build tool invocations or
install steps.

Typical workflow::

    servebuild            # release build
    servebuild run        # release build and run
    servebuild install    # release build, then copy into /usr/bin

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models and enums shared across the package.
    config: Project config and precedence resolution.
    platforms: Host platform detection.
    paths: Release artifact path construction.
    operations: Static operation table.
    invoker: Subprocess invocation of external commands.
    dispatcher: Runs operations and their dependencies.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
