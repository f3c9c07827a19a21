"""
============================================================================
PING ORCHESTRATOR - PROBE RESULT MODELS
============================================================================
Immutable records of what a probe observed. Exactly one of each is kept
per host and probe kind; a new probe replaces the previous record.

Identity
--------
IcmpProbeResult    -> host (raw, may carry ":port")
TcpProbeResult     -> url  ("<protocol>://<host>")
TraceRouteResult   -> host (raw, may carry ":port")
============================================================================
"""

from dataclasses import dataclass
from datetime import datetime


# ============================================================================
# TERMINAL EVIDENCE
# ============================================================================

@dataclass(frozen=True)
class CommandExecution:
    """
    The outcome of running one external command.

    Attributes
    ----------
    command : str
        The command line as it was executed.
    exit_code : int
        Process exit status.
    result : str
        Captured stdout and stderr, lines joined by "\\n".
    time : datetime
        When the command was started.
    """
    command: str
    exit_code: int
    result: str
    time: datetime


# ============================================================================
# PROBE RESULTS
# ============================================================================

@dataclass(frozen=True)
class IcmpProbeResult:
    host: str
    terminal: CommandExecution
    success: bool


@dataclass(frozen=True)
class TcpProbeResult:
    """
    The outcome of a GET request against a host.

    response_code is -1 when the request never got a response and
    response_time is measured in milliseconds.
    """
    url: str
    response_code: int
    response_time: int
    time: datetime
    success: bool


@dataclass(frozen=True)
class TraceRouteResult:
    host: str
    terminal: CommandExecution
    success: bool
