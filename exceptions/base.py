"""
Base Exception Classes for Ping Orchestrator

Every error raised by the orchestrator derives from
PingOrchestratorException. The numeric code groups errors by layer:

    1xxx  configuration and wiring
    2xxx  external dependencies (terminal, OS, network, report)
    3xxx  job orchestration
    4xxx  input validation
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Type
from datetime import datetime, timezone


class PingOrchestratorException(Exception):
    """
    Base Exception Class

    Attributes:
        message: Human-readable error message
        error_code: Numeric error code for categorization
        details: Context such as host, command or URL
        cause: The wrapped exception, if any
        recoverable: Whether the job that raised it may keep running
        timestamp: When the exception occurred (UTC)
    """

    default_error_code: int = 1000
    default_recoverable: bool = True

    # Level used by the job bodies when this error ends a tick
    log_level: str = "WARNING"

    def __init__(
        self,
        message: str = "An error occurred",
        error_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        recoverable: Optional[bool] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        self.cause = cause
        self.recoverable = recoverable if recoverable is not None else self.default_recoverable
        self.timestamp = datetime.now(timezone.utc)

        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, error_code={self.error_code})"


class ConfigurationError(PingOrchestratorException):
    """
    Configuration Error

    Raised when settings fail validation or the job list cannot be
    built from them. Never recoverable: the process exits.
    """

    default_error_code = 1100
    default_recoverable = False
    log_level = "CRITICAL"

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[Type] = None,
        **kwargs: Any
    ) -> None:
        """
        Args:
            message: Error message
            config_key: Environment key or settings path at fault
            expected_type: Type the value should have had
        """
        super().__init__(message, **kwargs)

        if config_key:
            self.details["config_key"] = config_key

        if expected_type:
            self.details["expected_type"] = expected_type.__name__
