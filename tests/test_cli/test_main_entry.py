"""Tests for __main__.py entry point."""

from __future__ import annotations

import builtins
from unittest.mock import MagicMock, patch

import pytest


class TestMainEntryPoint:
    """Tests for the __main__.py entry point."""

    @patch("harfile.cli.main.app")
    def test_main_calls_app(self, mock_app: MagicMock) -> None:
        """Test main() calls the typer app."""
        from harfile.__main__ import main

        main()

        mock_app.assert_called_once()

    def test_module_runnable(self) -> None:
        """Test module can be imported."""
        import harfile.__main__

        assert callable(harfile.__main__.main)

    def test_missing_typer(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a missing CLI dependency exits with an install hint."""
        from harfile.__main__ import main

        real_import = builtins.__import__

        def fake_import(name, *args, **kwargs):
            if name == "harfile.cli.main":
                raise ImportError("No module named 'typer'")
            return real_import(name, *args, **kwargs)

        with patch("builtins.__import__", side_effect=fake_import), pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "pip install harfile[cli]" in capsys.readouterr().err
