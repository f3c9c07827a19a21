"""
Exceptions Package for Ping Orchestrator

Provides the exception hierarchy used for error handling
throughout the application.
"""

from exceptions.base import (
    PingOrchestratorException,
    ConfigurationError
)

from exceptions.storage import StoreIdentityError

from exceptions.validation import (
    ValidationException,
    InvalidHostError
)

from exceptions.probes import (
    ProbeException,
    TerminalCommandError,
    OperatingSystemNotFoundError,
    NetworkToolsError,
    TransportError,
    ReportError
)

from exceptions.orchestration import (
    BatchJobError,
    ResponseServerError,
    AggregationError
)

__all__ = [
    # Base exceptions
    "PingOrchestratorException",
    "ConfigurationError",

    # Storage exceptions
    "StoreIdentityError",

    # Validation exceptions
    "ValidationException",
    "InvalidHostError",

    # Probe exceptions
    "ProbeException",
    "TerminalCommandError",
    "OperatingSystemNotFoundError",
    "NetworkToolsError",
    "TransportError",
    "ReportError",

    # Orchestration exceptions
    "BatchJobError",
    "ResponseServerError",
    "AggregationError"
]
