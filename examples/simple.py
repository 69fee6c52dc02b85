"""Print two flags that can come from argv or the environment.

    $ python examples/simple.py --foo hello
    $ cp examples/simple.py /tmp/simple && SIMPLE_FOO=env python /tmp/simple
"""

from __future__ import annotations

import argparse

from rich.console import Console
from rich.table import Table

import envflag

console = Console(highlight=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="envflag demo")
    parser.add_argument("--foo", default="asdf", help="some string param")
    parser.add_argument("--bar", type=int, default=123, help="some int param")
    return parser


def main() -> None:
    args = envflag.parse(build_parser())
    table = Table(show_edge=False, box=None)
    table.add_column("Flag", style="bold cyan")
    table.add_column("Value")
    table.add_row("foo", args.foo)
    table.add_row("bar", str(args.bar))
    console.print(table)


if __name__ == "__main__":
    main()
