from __future__ import annotations

import json
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from deprules.cli import main
from deprules.exceptions import DepRulesError
from deprules.utils.console import reconfigure_console
from deprules.utils.logger import disable_logging


@pytest.fixture(autouse=True)
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DEPRULES_CONFIG", raising=False)
    reconfigure_console()
    yield
    reconfigure_console()
    disable_logging()


def _manifest(path: Path, *deprules: str) -> Path:
    package = {
        "name": "foo",
        "arch": "x86_64",
        "version": "1.0",
        "release": "1",
        "deprules": list(deprules),
    }
    path.write_text(json.dumps({"packages": [package]}), encoding="utf-8")
    return path


@pytest.mark.unit
class TestMain:
    """Tests for the cli.main() entry point."""

    def test_passing_inspection_returns_zero(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        manifest = _manifest(tmp_path / "after.json", "Requires: bar")
        monkeypatch.setattr(sys, "argv", ["deprules", "inspect", str(manifest)])

        assert main() == 0

    def test_failing_inspection_returns_one(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        manifest = _manifest(tmp_path / "after.json", "Requires: bar = %{version}")
        monkeypatch.setattr(
            sys, "argv", ["deprules", "inspect", str(manifest), "--format", "simple"]
        )

        assert main() == 1

    def test_usage_error_returns_two(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
    ) -> None:
        monkeypatch.setattr(sys, "argv", ["deprules", "inspect", "missing.json"])

        assert main() == 2
        assert "missing.json" in capsys.readouterr().err

    def test_application_error_returns_one(
        self, capsys: pytest.CaptureFixture
    ) -> None:
        """Test a DepRulesError escaping the command is reported, not raised."""
        with patch("deprules.cli.cli", side_effect=DepRulesError("boom")):
            assert main() == 1

        assert "boom" in capsys.readouterr().out

    def test_keyboard_interrupt_returns_130(self) -> None:
        with patch("deprules.cli.cli", side_effect=KeyboardInterrupt):
            assert main() == 130

    def test_unexpected_error_returns_one(self) -> None:
        with patch("deprules.cli.cli", side_effect=RuntimeError("surprise")):
            assert main() == 1
