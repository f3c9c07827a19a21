"""
Constants Module for Ping Orchestrator

Contains constant values and enumerations used throughout
the application.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Final, Tuple


class OperatingSystem(str, Enum):
    """
    Operating System Family

    Only the family matters: it picks the command template and the
    rule used to evaluate an ICMP probe.
    """

    UNIX = "unix"
    WINDOWS = "windows"


class ProbeKind(str, Enum):
    """The three diagnostic techniques applied to every host."""

    ICMP = "icmp"
    TCP = "tcp"
    TRACEROUTE = "traceroute"

    @property
    def description(self) -> str:
        """Human-readable job description used in logs and errors."""
        return PROBE_DESCRIPTIONS[self]


class HTTPMethods(str, Enum):
    """HTTP methods used by the transport."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"


class JobState(str, Enum):
    """
    Lifecycle of a recurring host/probe job.

    SCHEDULED -> RUNNING -> (IDLE | TERMINATED). An IDLE job goes
    back to RUNNING on its next tick.
    """

    SCHEDULED = "scheduled"
    RUNNING = "running"
    IDLE = "idle"
    TERMINATED = "terminated"


# ============================================================================
# COMMAND TEMPLATING
# ============================================================================

HOST_PLACEHOLDER: Final[str] = "HOST"

# Windows ping may exit 0 with every packet lost; this marks zero loss.
WINDOWS_ZERO_LOSS_MARKER: Final[str] = " = 0 (0% "

WINDOWS_INTERPRETER_PREFIX: Final[str] = "cmd.exe /c "


# ============================================================================
# NETWORK
# ============================================================================

# Status code recorded when the TCP request never got a response.
TRANSPORT_FAILURE_STATUS: Final[int] = -1

SUCCESS_STATUS_RANGE: Final[Tuple[int, int]] = (100, 599)

REPORT_ACCEPTED_STATUSES: Final[Tuple[int, ...]] = (200, 201)

SUPPORTED_PROTOCOLS: Final[Tuple[str, ...]] = ("http", "https")

TCP_REQUEST_HEADERS: Final[Dict[str, str]] = {"Content-Type": "text/plain"}

REPORT_REQUEST_HEADERS: Final[Dict[str, str]] = {"Content-Type": "application/json"}


# ============================================================================
# JOB DESCRIPTIONS
# ============================================================================

PROBE_DESCRIPTIONS: Final[Dict[ProbeKind, str]] = {
    ProbeKind.ICMP: "ICMP protocol Ping",
    ProbeKind.TCP: "TCP/IP protocol Ping",
    ProbeKind.TRACEROUTE: "Trace Route",
}

# Name used in "Host X not found on <name> database" lookups.
PROBE_STORE_NAMES: Final[Dict[ProbeKind, str]] = {
    ProbeKind.ICMP: "ICMP",
    ProbeKind.TCP: "TCP/IP",
    ProbeKind.TRACEROUTE: "Trace Route",
}

JOB_THREAD_NAME_TEMPLATE: Final[str] = "job-{host}-{kind}"
