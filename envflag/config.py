from __future__ import annotations

from enum import Enum


class ErrorHandling(Enum):
    """What to do when an environment value is rejected by a flag."""

    CONTINUE = "continue"
    EXIT = "exit"
    PANIC = "panic"


EXIT_STATUS = 2

# Spellings accepted for boolean flags set from the environment.
TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(value: str) -> bool:
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean value {value!r}")
