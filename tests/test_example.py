"""Run the bundled example program the way a user would."""

import importlib.util
import sys
from pathlib import Path
from types import ModuleType

import pytest

EXAMPLE = Path(__file__).resolve().parent.parent / "examples" / "simple.py"


def _load_example() -> ModuleType:
    """Import examples/simple.py as a module."""
    spec = importlib.util.spec_from_file_location("envflag_example_simple", EXAMPLE)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestSimpleExample:
    """The example reads $SIMPLE_FOO and $SIMPLE_BAR when installed as ``simple``."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        """Without variables or flags the defaults are printed."""
        monkeypatch.setattr(sys, "argv", ["/usr/local/bin/simple"])
        monkeypatch.delenv("SIMPLE_FOO", raising=False)
        monkeypatch.delenv("SIMPLE_BAR", raising=False)
        _load_example().main()
        out = capsys.readouterr().out
        assert "asdf" in out
        assert "123" in out

    def test_env_and_argv(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        """argv beats the environment, which beats the default."""
        monkeypatch.setattr(sys, "argv", ["/usr/local/bin/simple", "--foo", "from-argv"])
        monkeypatch.setenv("SIMPLE_FOO", "from-env")
        monkeypatch.setenv("SIMPLE_BAR", "456")
        _load_example().main()
        out = capsys.readouterr().out
        assert "from-argv" in out
        assert "from-env" not in out
        assert "456" in out
