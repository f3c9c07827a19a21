"""
Orchestration Exception Classes for Ping Orchestrator

Raised inside a job body when a response envelope is not OK or when
report assembly cannot complete. The job body catches every one of
these, so none of them ever stops a recurring job.
"""

from __future__ import annotations

from typing import Any, Optional

from exceptions.base import PingOrchestratorException


class BatchJobError(PingOrchestratorException):
    """
    Batch Job Error

    A recoverable failure of a single tick. Logged at WARNING with
    its cause chain.
    """

    default_error_code = 3000
    default_recoverable = True
    log_level = "WARNING"

    def __init__(
        self,
        message: str,
        host: Optional[str] = None,
        job: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        """
        Initialize batch job error.

        Args:
            message: Error message
            host: Host the job was probing
            job: Description of the job step that failed
            **kwargs: Additional arguments
        """
        super().__init__(message, **kwargs)
        self.host = host
        self.job = job

        if host:
            self.details["host"] = host

        if job:
            self.details["job"] = job


class ResponseServerError(BatchJobError):
    """
    Response Server Error

    An unexpected failure inside this process surfaced through an
    INTERNAL_SERVER_ERROR envelope. The job keeps recurring but the
    error is logged at ERROR.
    """

    default_error_code = 3100
    default_recoverable = False
    log_level = "ERROR"


class AggregationError(BatchJobError):
    """Raised when the concurrent report fetches cannot be joined."""

    default_error_code = 3200
    log_level = "ERROR"
