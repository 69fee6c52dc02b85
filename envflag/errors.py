"""Exceptions raised while overlaying environment values onto flags."""

from __future__ import annotations

__all__ = ["EnvflagError", "SetError", "OverlayPanic"]


class EnvflagError(Exception):
    """Base class for envflag errors."""


class SetError(EnvflagError, ValueError):
    """A flag rejected the string found in its environment variable.

    The underlying parse failure is chained as ``__cause__``.
    """

    def __init__(self, flag: str, env_key: str, value: str, reason: str) -> None:
        self.flag = flag
        self.env_key = env_key
        self.value = value
        self.reason = reason
        super().__init__(f'invalid value "{value}" for flag -{flag} (from ${env_key}): {reason}')


class OverlayPanic(BaseException):
    """Raised instead of returning when a flag set asks to panic on errors.

    Derives from ``BaseException`` so that ``except Exception`` blocks in the
    host program do not swallow it.
    """

    def __init__(self, error: SetError) -> None:
        self.error = error
        super().__init__(str(error))
