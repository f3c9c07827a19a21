"""
Database Package for Ping Orchestrator

In-memory storage of the latest probe result per host: the generic
keyed store, the result models and one repository per probe kind.
"""

from database.models import (
    CommandExecution,
    IcmpProbeResult,
    TcpProbeResult,
    TraceRouteResult
)

from database.store import KeyedStore

from database.repositories import (
    IcmpRepository,
    TcpRepository,
    TraceRouteRepository
)

__all__ = [
    # Models
    "CommandExecution",
    "IcmpProbeResult",
    "TcpProbeResult",
    "TraceRouteResult",

    # Stores
    "KeyedStore",
    "IcmpRepository",
    "TcpRepository",
    "TraceRouteRepository"
]
