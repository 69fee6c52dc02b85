"""Overlay environment variables onto command-line flag definitions.

Precedence, lowest to highest: the flag's own default, the environment
variable, an explicit command-line value. Command-line parsing always runs
after :func:`load`, which only rewrites defaults.

Example::

    parser = argparse.ArgumentParser()
    parser.add_argument("--user-id", type=int, default=0)
    args = envflag.parse(parser)  # reads $<PROG>_USER_ID, then sys.argv

Use :func:`load` directly to pick another prefix or to skip argv parsing.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Mapping, Sequence

import typer

from .config import ErrorHandling, EXIT_STATUS
from .errors import OverlayPanic, SetError
from .flagsets import ClickFlagSet, as_flag_set

__all__ = ["env_key", "default_prefix", "load", "parse", "run"]

logger = logging.getLogger(__name__)


def env_key(prefix: str, name: str) -> str:
    """Environment variable name for flag ``name`` under ``prefix``.

    ``env_key("my-app", "user-id")`` is ``"MY_APP_USER_ID"``; an empty prefix
    gives just ``"USER_ID"``.
    """
    base = f"{prefix}-{name}" if prefix else name
    return base.replace("-", "_").upper()


def default_prefix(argv0: str | None = None) -> str:
    """Base file name of the running program, e.g. ``myprog`` for ``/usr/local/bin/myprog``."""
    if argv0 is None:
        argv0 = sys.argv[0] if sys.argv else ""
    return Path(argv0).name


def load(
    prefix: str,
    flags: Any,
    *,
    environ: Mapping[str, str] | None = None,
    error_handling: ErrorHandling | None = None,
) -> None:
    """Set each flag that has a matching environment variable.

    Flags without a variable keep their current value. An empty variable
    counts as set. Processing stops at the first value a flag rejects, which
    is then handled according to ``error_handling`` (defaulting to the flag
    set's own policy):

    - ``CONTINUE`` raises :class:`SetError`;
    - ``EXIT`` reports through the flag set and exits with status 2;
    - ``PANIC`` raises :class:`OverlayPanic`.
    """
    flag_set = as_flag_set(flags)
    env = os.environ if environ is None else environ

    error: SetError | None = None
    for flag in flag_set.visit_all():
        key = env_key(prefix, flag.name)
        value = env.get(key)
        if value is None:
            continue
        try:
            flag.set(value)
        except (ValueError, TypeError) as exc:
            error = SetError(flag.name, key, value, str(exc))
            error.__cause__ = exc
            break
        logger.debug("Set flag %s from $%s", flag.name, key)

    if error is None:
        return

    policy = error_handling or flag_set.error_handling
    if policy is ErrorHandling.CONTINUE:
        raise error
    if policy is ErrorHandling.EXIT:
        flag_set.fail(str(error))
        raise SystemExit(EXIT_STATUS)
    raise OverlayPanic(error) from error


def parse(
    parser: argparse.ArgumentParser,
    args: Sequence[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> argparse.Namespace:
    """Load ``$<PROG>_*`` variables into ``parser``, then parse the command line.

    The prefix comes from ``sys.argv[0]``. Failures follow the parser's own
    policy, which for a default ``ArgumentParser`` means exit status 2.
    """
    load(default_prefix(), parser, environ=environ)
    return parser.parse_args(args)


def run(
    app: Any,
    args: Sequence[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    prog_name: str | None = None,
    standalone_mode: bool = True,
) -> Any:
    """Same as :func:`parse` for a typer app or a click command."""
    if isinstance(app, typer.Typer):
        flag_set = ClickFlagSet.from_typer(app)
    else:
        flag_set = ClickFlagSet(app)
    load(default_prefix(prog_name), flag_set, environ=environ)
    return flag_set.command.main(
        args=list(args) if args is not None else None,
        prog_name=prog_name,
        standalone_mode=standalone_mode,
    )
