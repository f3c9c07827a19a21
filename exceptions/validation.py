"""
Validation Exception Classes for Ping Orchestrator

Raised when caller input (a host name, a request target) is rejected
before any probe is attempted.
"""

from __future__ import annotations

from typing import Any, Optional

from exceptions.base import PingOrchestratorException


class ValidationException(PingOrchestratorException):
    """
    Base Validation Exception

    Parent class for all validation-related exceptions.
    """

    default_error_code = 4000
    default_recoverable = True

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs: Any
    ) -> None:
        """
        Initialize validation exception.

        Args:
            message: Error message
            field: The field that failed validation
            value: The invalid value
            **kwargs: Additional arguments
        """
        super().__init__(message, **kwargs)

        if field:
            self.details["field"] = field

        if value is not None:
            self.details["value"] = self._sanitize_value(value)

    @staticmethod
    def _sanitize_value(value: Any) -> str:
        """Truncate long values before they reach the logs."""
        str_value = str(value)
        if len(str_value) > 100:
            return str_value[:100] + "..."
        return str_value


class InvalidHostError(ValidationException):
    """Raised when a host is empty or is not a hostname, IP or host:port."""

    default_error_code = 4001

    def __init__(self, host: Optional[str], **kwargs: Any) -> None:
        message = kwargs.pop("message", None) or f"Invalid host: {host!r}"
        super().__init__(message, field="host", value=host, **kwargs)
        self.host = host
