from __future__ import annotations

import sys
from unittest.mock import MagicMock, patch

import pytest

from verlimit.__main__ import _print_startup_error, main


@pytest.mark.unit
class TestMain:
    """Tests for main() entry point function."""

    @pytest.mark.parametrize(
        "exit_code",
        [0, 1, 130],
        ids=["success", "error", "interrupted"],
    )
    def test_returns_cli_exit_code(self, exit_code: int) -> None:
        mock_cli_module = MagicMock()
        mock_cli_module.main = MagicMock(return_value=exit_code)

        with patch.dict("sys.modules", {"verlimit.cli": mock_cli_module}):
            result = main()

        assert result == exit_code
        mock_cli_module.main.assert_called_once_with()

    def test_import_error_returns_one(self, capsys: pytest.CaptureFixture) -> None:
        """Test main returns 1 and reports when the CLI cannot be imported."""
        with patch.dict("sys.modules", {"verlimit.cli": None}):
            result = main()

        assert result == 1
        captured = capsys.readouterr()
        assert "ImportError:" in captured.err
        assert "verlimit version:" in captured.err


@pytest.mark.unit
class TestPrintStartupError:
    """Tests for _print_startup_error helper function."""

    def test_with_version(self, capsys: pytest.CaptureFixture) -> None:
        mock_version_module = MagicMock(__version__="1.2.3")

        with patch.dict(sys.modules, {"verlimit.__version__": mock_version_module}):
            _print_startup_error(ImportError("Test error message"))

        captured = capsys.readouterr()
        assert "verlimit version: 1.2.3" in captured.err
        assert f"Python version : {sys.version}" in captured.err
        assert "ImportError: Test error message" in captured.err

    def test_without_version(self, capsys: pytest.CaptureFixture) -> None:
        with patch.dict(sys.modules, {"verlimit.__version__": None}):
            _print_startup_error(ImportError("boom"))

        assert "verlimit version: <unknown>" in capsys.readouterr().err
