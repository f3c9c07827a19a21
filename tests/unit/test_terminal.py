"""Tests for the terminal command runner."""

import shlex
import sys

import pytest

from exceptions.probes import TerminalCommandError
from utils.terminal import TerminalTools


PYTHON = shlex.quote(sys.executable)

pytestmark = pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX command lines")


class TestTerminalTools:
    """Tests for TerminalTools.execute()."""

    def test_captures_output_and_exit_code(self) -> None:
        """Test a command that succeeds."""
        command = f"{PYTHON} -c \"print('line one'); print('line two')\""

        execution = TerminalTools().execute(command)

        assert execution.command == command
        assert execution.exit_code == 0
        assert execution.result == "line one\nline two"
        assert execution.time.tzinfo is not None

    def test_nonzero_exit_is_not_an_error(self) -> None:
        """Test that a failing command is a normal outcome."""
        execution = TerminalTools().execute(f"{PYTHON} -c \"import sys; sys.exit(3)\"")

        assert execution.exit_code == 3

    def test_stderr_is_merged(self) -> None:
        """Test that stderr lands in the same output."""
        execution = TerminalTools().execute(
            f"{PYTHON} -c \"import sys; sys.stderr.write('oops\\n')\""
        )

        assert "oops" in execution.result

    def test_missing_program(self) -> None:
        """Test that a command that can't start raises."""
        with pytest.raises(TerminalCommandError) as exc_info:
            TerminalTools().execute("definitely-not-a-real-program-1234 HOST")

        assert exc_info.value.message.startswith("Can't start the terminal command")
        assert exc_info.value.details["command"] == "definitely-not-a-real-program-1234 HOST"

    @pytest.mark.parametrize("command", ["", "   ", "ping 'unterminated"])
    def test_unparseable_command(self, command: str) -> None:
        """Test that an empty or malformed command raises."""
        with pytest.raises(TerminalCommandError):
            TerminalTools().execute(command)

    def test_timeout(self) -> None:
        """Test that a command outliving the timeout raises."""
        with pytest.raises(TerminalCommandError) as exc_info:
            TerminalTools(timeout=0.2).execute(f"{PYTHON} -c \"import time; time.sleep(5)\"")

        assert exc_info.value.message.startswith("Can't wait for exit of the terminal command")
