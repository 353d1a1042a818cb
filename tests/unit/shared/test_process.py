"""Unit tests for external command execution."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from lifecycle_probe.errors import ExternalCommandError
from lifecycle_probe.shared.process import MASK, mask_argv, run_command


class TestMaskArgv:
    """Tests for secret masking."""

    def test_masks_exact_values(self):
        argv = ["surfer", "login", "a.example.com", "--password", "hunter2"]
        assert mask_argv(argv, ("hunter2",)) == [
            "surfer",
            "login",
            "a.example.com",
            "--password",
            MASK,
        ]

    def test_no_secrets(self):
        assert mask_argv(["a", "b"]) == ["a", "b"]

    def test_empty_secret_ignored(self):
        assert mask_argv(["a", ""], ("",)) == ["a", ""]


class TestRunCommand:
    """Tests for run_command."""

    def test_returns_stdout(self):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout="index.html\n", stderr="")
            assert run_command(["surfer", "get"]) == "index.html\n"

    def test_passes_cwd_and_capture(self):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout=None, stderr=None)
            result = run_command(["cloudron", "build"], cwd=Path("/app"), capture=False)

        assert result == ""
        args, kwargs = mock_run.call_args
        assert args[0] == ["cloudron", "build"]
        assert kwargs["cwd"] == Path("/app")
        assert kwargs["capture_output"] is False
        assert kwargs["text"] is True

    def test_nonzero_exit_raises(self):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=3, stdout="", stderr="no such app")
            with pytest.raises(ExternalCommandError) as exc_info:
                run_command(["cloudron", "uninstall", "--app", "x"])

        assert exc_info.value.data["returncode"] == 3
        assert "no such app" in str(exc_info.value)

    def test_missing_executable_raises(self):
        with patch("subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(ExternalCommandError, match="Command not found: surfer"):
                run_command(["surfer", "get"])

    def test_timeout_raises(self):
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("surfer", 5)):
            with pytest.raises(ExternalCommandError) as exc_info:
                run_command(["surfer", "get"], timeout=5)

        assert exc_info.value.data["returncode"] == -1

    def test_secrets_masked_in_error(self):
        """A failing login never exposes the password in the error."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="denied")
            with pytest.raises(ExternalCommandError) as exc_info:
                run_command(["surfer", "login", "--password", "hunter2"], secrets=("hunter2",))

        assert "hunter2" not in str(exc_info.value)
        assert "hunter2" not in exc_info.value.data["argv"]
        # The real value is still what runs
        assert "hunter2" in mock_run.call_args[0][0]
