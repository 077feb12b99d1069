"""Operation dispatcher.

:class:`Dispatcher` looks an operation up in the table built by
:func:`~servebuild.operations.build_operation_table`, runs its dependencies
first and then its own action. Any non-zero status stops the sequence and
is returned unchanged, so a failed build never reaches the install step.
"""

from __future__ import annotations

from typing import Optional, Union

from servebuild.exceptions import InvalidUsageError
from servebuild.invoker import Invoker, SubprocessInvoker
from servebuild.models import (
    BuildConfig,
    CommandAction,
    MessageAction,
    OperationName,
    OperationSpec,
    Platform,
)
from servebuild.operations import build_operation_table
from servebuild.output import debug, print_lines
from servebuild.platforms import resolve_platform


class Dispatcher:
    """Run named operations against one resolved platform.

    Args:
        platform: Host platform. Resolved from the environment when omitted.
        config: Build configuration. Defaults to :class:`BuildConfig`.
        invoker: Runs external commands. Defaults to
            :class:`~servebuild.invoker.SubprocessInvoker`.

    Example::

        status = Dispatcher().dispatch("install")
    """

    def __init__(
        self,
        platform: Optional[Platform] = None,
        config: Optional[BuildConfig] = None,
        invoker: Optional[Invoker] = None,
    ) -> None:
        self.platform = platform if platform is not None else resolve_platform()
        self.config = config if config is not None else BuildConfig()
        self.invoker = invoker if invoker is not None else SubprocessInvoker()
        self.operations = build_operation_table(self.platform, self.config)

    def get(self, operation: Union[OperationName, str]) -> OperationSpec:
        """Return the spec for *operation*.

        Raises:
            InvalidUsageError: If *operation* is not a known operation name.
        """
        try:
            name = OperationName(operation)
        except ValueError:
            known = ", ".join(op.value for op in OperationName)
            raise InvalidUsageError(
                f"Unknown operation '{operation}'. Expected one of: {known}"
            ) from None
        return self.operations[name]

    def dispatch(self, operation: Union[OperationName, str]) -> int:
        """Run *operation* and return its exit status.

        Dependencies run first, in order. The first non-zero status aborts
        the operation and is returned as-is.
        """
        spec = self.get(operation)
        for dependency in spec.depends_on:
            status = self.dispatch(dependency)
            if status != 0:
                debug(f"{dependency.value} failed with {status}, skipping {spec.name.value}")
                return status

        debug(f"Running {spec.name.value} on {self.platform.value}")
        return self._run_action(spec)

    def _run_action(self, spec: OperationSpec) -> int:
        action = spec.action
        if isinstance(action, CommandAction):
            return self.invoker.invoke(action.args)
        if isinstance(action, MessageAction):
            print_lines(list(action.lines))
            return 0
        raise TypeError(f"Unsupported action for {spec.name.value}: {action!r}")
