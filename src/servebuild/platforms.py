"""Host platform detection.

The platform class is read from the ``OS`` environment variable, which
Windows sets to ``Windows_NT`` for every process. Anything else, including
an unset variable, is treated as POSIX-like.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

from servebuild.models import Platform

OS_ENV_VAR = "OS"
WINDOWS_SIGNAL = "Windows_NT"


def resolve_platform(environ: Optional[Mapping[str, str]] = None) -> Platform:
    """Return the platform class of the current host.

    Args:
        environ: Environment to inspect. Defaults to ``os.environ``.

    Returns:
        :attr:`Platform.WINDOWS_LIKE` when ``OS`` is ``Windows_NT``,
        otherwise :attr:`Platform.POSIX_LIKE`.
    """
    env = os.environ if environ is None else environ
    if env.get(OS_ENV_VAR) == WINDOWS_SIGNAL:
        return Platform.WINDOWS_LIKE
    return Platform.POSIX_LIKE
