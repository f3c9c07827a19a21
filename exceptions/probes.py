"""
Probe Exception Classes for Ping Orchestrator

Errors raised by the collaborators a probe depends on: the terminal
that runs ping/traceroute, operating system detection, the HTTP
transport and the reporting endpoint.
"""

from __future__ import annotations

from typing import Any, Optional

from exceptions.base import PingOrchestratorException


class ProbeException(PingOrchestratorException):
    """
    Base Probe Exception

    Parent class for every failure of an external dependency.
    """

    default_error_code = 2000
    default_recoverable = True


class TerminalCommandError(ProbeException):
    """
    Terminal Command Error

    Raised when a command cannot be started, its output cannot be
    read, or it does not finish within the configured timeout.
    """

    default_error_code = 2100

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)
        self.command = command

        if command:
            self.details["command"] = command


class OperatingSystemNotFoundError(ProbeException):
    """Raised when the running platform is neither Unix-like nor Windows."""

    default_error_code = 2200

    def __init__(self, os_name: str, **kwargs: Any) -> None:
        super().__init__(f"Operating System {os_name} not found.", **kwargs)
        self.os_name = os_name
        self.details["os_name"] = os_name


class NetworkToolsError(ProbeException):
    """
    Network Tools Error

    Raised when a request target cannot be built from its parts
    (unknown protocol, empty host, malformed query parameters).
    """

    default_error_code = 2300


class TransportError(ProbeException):
    """
    Transport Error

    Raised on an I/O level failure of an HTTP request: connection
    refused, DNS failure or timeout. Receiving an error status code
    is not a transport error.
    """

    default_error_code = 2400

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timed_out: bool = False,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)
        self.url = url
        self.timed_out = timed_out

        if url:
            self.details["url"] = url
        self.details["timed_out"] = timed_out


class ReportError(ProbeException):
    """
    Report Error

    Raised when an aggregate report cannot be delivered to the
    reporting endpoint.
    """

    default_error_code = 2500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)
        self.status_code = status_code

        if status_code is not None:
            self.details["status_code"] = status_code
