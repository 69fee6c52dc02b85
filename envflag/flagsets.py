from __future__ import annotations

import argparse
import logging
import shlex
from typing import Any, Callable, Iterator, NoReturn, Protocol

import click
import typer
from rich.console import Console
from rich.markup import escape
from typer.main import get_command

from .config import ErrorHandling, EXIT_STATUS, parse_bool

__all__ = [
    "Flag",
    "FlagSet",
    "ArgparseFlag",
    "ArgparseFlagSet",
    "ClickFlag",
    "ClickFlagSet",
    "as_flag_set",
]

logger = logging.getLogger(__name__)

error_console = Console(stderr=True, highlight=False)


class Flag(Protocol):
    name: str

    def set(self, value: str) -> None:  # pragma: no cover - protocol
        ...


class FlagSet(Protocol):
    @property
    def error_handling(self) -> ErrorHandling:  # pragma: no cover - protocol
        ...

    def visit_all(self) -> Iterator[Flag]:  # pragma: no cover - protocol
        ...

    def fail(self, message: str) -> NoReturn:  # pragma: no cover - protocol
        ...


def _is_multi(nargs: Any) -> bool:
    return nargs not in (None, argparse.OPTIONAL)


class ArgparseFlag:
    """One optional argument of an ``ArgumentParser``.

    ``set`` converts the string the same way a command-line value would be
    converted and stores the result with ``set_defaults``, so an explicit
    command-line value still wins when the parser runs.
    """

    def __init__(self, parser: argparse.ArgumentParser, action: argparse.Action, name: str) -> None:
        self._parser = parser
        self._action = action
        self.name = name

    def set(self, value: str) -> None:
        action = self._action
        if isinstance(action, (argparse.BooleanOptionalAction, argparse._StoreTrueAction)):
            self._store(parse_bool(value))
        elif isinstance(action, argparse._StoreFalseAction):
            self._store(not parse_bool(value))
        elif isinstance(action, argparse._StoreConstAction):
            if parse_bool(value):
                self._store(action.const)
        elif isinstance(action, argparse._CountAction):
            self._store(int(value))
        elif _is_multi(action.nargs):
            self._store(self._convert_many(shlex.split(value)))
        else:
            converted = self._convert(value)
            # argparse converts string defaults again at parse time.
            self._store(value if isinstance(converted, str) else converted)

    def _convert_many(self, values: list[str]) -> list[Any]:
        nargs = self._action.nargs
        if isinstance(nargs, int) and len(values) != nargs:
            raise ValueError(f"expected {nargs} values, got {len(values)}")
        if nargs == argparse.ONE_OR_MORE and not values:
            raise ValueError("expected at least one value")
        return [self._convert(item) for item in values]

    def _convert(self, value: str) -> Any:
        action = self._action
        type_func: Callable[[str], Any] = self._parser._registry_get("type", action.type, action.type)
        if not callable(type_func):
            raise ValueError(f"{type_func!r} is not callable")
        try:
            converted = type_func(value)
        except argparse.ArgumentTypeError as exc:
            raise ValueError(str(exc)) from exc
        if action.choices is not None and converted not in action.choices:
            choices = ", ".join(map(repr, action.choices))
            raise ValueError(f"invalid choice: {converted!r} (choose from {choices})")
        return converted

    def _store(self, value: Any) -> None:
        # A value from the environment satisfies a required option.
        self._action.required = False
        self._parser.set_defaults(**{self._action.dest: value})


_UNSUPPORTED_ACTIONS = (
    argparse._HelpAction,
    argparse._VersionAction,
    argparse._SubParsersAction,
    argparse._AppendAction,
    argparse._AppendConstAction,
)


class ArgparseFlagSet:
    def __init__(self, parser: argparse.ArgumentParser) -> None:
        self._parser = parser

    @property
    def error_handling(self) -> ErrorHandling:
        if getattr(self._parser, "exit_on_error", True):
            return ErrorHandling.EXIT
        return ErrorHandling.CONTINUE

    def visit_all(self) -> Iterator[ArgparseFlag]:
        for action in self._parser._actions:
            if not action.option_strings:
                continue
            if isinstance(action, _UNSUPPORTED_ACTIONS):
                logger.debug("Skipping %s: %s is not settable from the environment", action.dest, type(action).__name__)
                continue
            yield ArgparseFlag(self._parser, action, self._flag_name(action))

    def fail(self, message: str) -> NoReturn:
        self._parser.error(message)

    def _flag_name(self, action: argparse.Action) -> str:
        prefix_chars = self._parser.prefix_chars
        for option in action.option_strings:
            if len(option) > 2 and option[0] in prefix_chars and option[1] in prefix_chars:
                return option.lstrip(prefix_chars)
        return action.dest.replace("_", "-")


def _is_option(param: Any) -> bool:
    return getattr(param, "param_type_name", None) == "option"


def _is_command(obj: Any) -> bool:
    # typer may ship its own copy of click, so match on shape as well.
    return isinstance(obj, click.Command) or all(hasattr(obj, attr) for attr in ("params", "context_class", "main"))


def _is_bad_parameter(exc: BaseException) -> bool:
    return any(cls.__name__ == "BadParameter" for cls in type(exc).__mro__)


class ClickFlag:
    """One click option; values become the option's default."""

    def __init__(self, command: click.Command, option: click.Option, name: str) -> None:
        self._command = command
        self._option = option
        self.name = name

    def set(self, value: str) -> None:
        option = self._option
        if option.is_flag:
            enabled = parse_bool(value)
            if option.is_bool_flag:
                option.default = enabled
            elif enabled:
                option.default = option.flag_value
            return
        ctx = self._command.context_class(self._command)
        if option.multiple or option.nargs != 1:
            raw: Any = tuple(shlex.split(value))
        else:
            raw = value
        try:
            option.type_cast_value(ctx, raw)
        except Exception as exc:
            if not _is_bad_parameter(exc):
                raise
            raise ValueError(exc.format_message()) from exc
        option.default = raw


class ClickFlagSet:
    def __init__(self, command: click.Command, error_handling: ErrorHandling = ErrorHandling.EXIT) -> None:
        self._command = command
        self._error_handling = error_handling

    @classmethod
    def from_typer(cls, app: typer.Typer, error_handling: ErrorHandling = ErrorHandling.EXIT) -> ClickFlagSet:
        return cls(get_command(app), error_handling)

    @property
    def command(self) -> click.Command:
        return self._command

    @property
    def error_handling(self) -> ErrorHandling:
        return self._error_handling

    def visit_all(self) -> Iterator[ClickFlag]:
        for param in self._command.params:
            if not _is_option(param):
                continue
            if param.multiple and param.nargs != 1:
                logger.debug("Skipping %s: multi-value tuples are not settable from the environment", param.name)
                continue
            yield ClickFlag(self._command, param, self._flag_name(param))

    def fail(self, message: str) -> NoReturn:
        error_console.print(f"[bold red]Error:[/] {escape(message)}")
        raise SystemExit(EXIT_STATUS)

    @staticmethod
    def _flag_name(option: click.Option) -> str:
        for opt in option.opts:
            if opt.startswith("--") and len(opt) > 2:
                return opt[2:]
        return (option.name or "").replace("_", "-")


def as_flag_set(flags: Any) -> FlagSet:
    if isinstance(flags, argparse.ArgumentParser):
        return ArgparseFlagSet(flags)
    if isinstance(flags, typer.Typer):
        raise TypeError(
            "typer builds a new click command on every conversion; "
            "use ClickFlagSet.from_typer(app) or envflag.run(app) instead."
        )
    if _is_command(flags):
        return ClickFlagSet(flags)
    if all(hasattr(flags, attr) for attr in ("visit_all", "error_handling", "fail")):
        return flags
    raise TypeError(
        f"Cannot read flags from {type(flags).__name__}; pass an ArgumentParser, a click command "
        "or a FlagSet (build typer apps with ClickFlagSet.from_typer)."
    )
