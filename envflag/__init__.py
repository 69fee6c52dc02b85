"""Read command-line flag values from environment variables.

A flag ``--user-id`` of a program called ``my-app`` is read from
``MY_APP_USER_ID``. Command-line values still take precedence because the
overlay only rewrites defaults before the parser runs. Works with
``argparse`` parsers and with click commands or typer apps.
"""

from __future__ import annotations

from .config import ErrorHandling
from .errors import EnvflagError, OverlayPanic, SetError
from .flagsets import ArgparseFlagSet, ClickFlagSet, Flag, FlagSet, as_flag_set
from .overlay import default_prefix, env_key, load, parse, run

__all__ = [
    "ArgparseFlagSet",
    "ClickFlagSet",
    "EnvflagError",
    "ErrorHandling",
    "Flag",
    "FlagSet",
    "OverlayPanic",
    "SetError",
    "as_flag_set",
    "default_prefix",
    "env_key",
    "load",
    "parse",
    "run",
]
