"""
============================================================================
PING ORCHESTRATOR - TERMINAL TOOLS
============================================================================
Runs ping/traceroute style commands and captures their output.

stdout and stderr are merged, and the captured lines are joined with
"\n". A command that runs and fails is a normal outcome (non-zero exit
code); only a command that cannot be started, read or waited for raises.
============================================================================
"""

import os
import shlex
import subprocess
from datetime import datetime, timezone
from typing import List, Optional, Union

from database.models import CommandExecution
from exceptions.probes import TerminalCommandError
from utils.logger import get_logger


logger = get_logger("Terminal")


class TerminalTools:
    """
    Blocking command runner.

    Parameters
    ----------
    timeout : Optional[float]
        Seconds to wait for a command before it is killed. None waits
        for as long as the process runs.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    @staticmethod
    def _split(command: str) -> Union[str, List[str]]:
        # Windows parses its own command lines
        if os.name == "nt":
            return command
        return shlex.split(command)

    def execute(self, command: str) -> CommandExecution:
        """
        Run *command* and return what it printed and how it exited.

        Raises
        ------
        TerminalCommandError
            If the process cannot be started, its output cannot be
            decoded, or it outlives the timeout.
        """
        started_at = datetime.now(timezone.utc)

        try:
            args = self._split(command)
            if not args:
                raise ValueError("empty command")
        except ValueError as e:
            raise TerminalCommandError(
                f"Can't start the terminal command: {command}",
                command=command,
                cause=e
            ) from e

        logger.debug(f"Running '{command}'")

        try:
            completed = subprocess.run(
                args,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=self.timeout,
                check=False,
                text=True,
            )
        except subprocess.TimeoutExpired as e:
            raise TerminalCommandError(
                f"Can't wait for exit of the terminal command: {command} "
                f"(no exit after {self.timeout}s)",
                command=command,
                cause=e
            ) from e
        except UnicodeDecodeError as e:
            raise TerminalCommandError(
                f"Can't get output lines of the terminal command: {command}",
                command=command,
                cause=e
            ) from e
        except OSError as e:
            raise TerminalCommandError(
                f"Can't start the terminal command: {command}",
                command=command,
                cause=e
            ) from e

        output = "\n".join((completed.stdout or "").splitlines())
        logger.debug(f"'{command}' exited with {completed.returncode}")

        return CommandExecution(
            command=command,
            exit_code=completed.returncode,
            result=output,
            time=started_at,
        )
