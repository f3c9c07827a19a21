"""
Probe Result Repositories for Ping Orchestrator

One store per probe kind. Keys are never shared across kinds.
"""

from __future__ import annotations

from database.models import IcmpProbeResult, TcpProbeResult, TraceRouteResult
from database.store import KeyedStore


def icmp_identity(result: IcmpProbeResult) -> str:
    return result.host


def tcp_identity(result: TcpProbeResult) -> str:
    return result.url


def trace_route_identity(result: TraceRouteResult) -> str:
    return result.host


class IcmpRepository(KeyedStore[str, IcmpProbeResult]):
    """Latest ICMP ping result per host."""

    def __init__(self) -> None:
        super().__init__(icmp_identity, entity_name="IcmpProbeResult")


class TcpRepository(KeyedStore[str, TcpProbeResult]):
    """Latest TCP/IP ping result per request URL."""

    def __init__(self) -> None:
        super().__init__(tcp_identity, entity_name="TcpProbeResult")


class TraceRouteRepository(KeyedStore[str, TraceRouteResult]):
    """Latest traceroute result per host."""

    def __init__(self) -> None:
        super().__init__(trace_route_identity, entity_name="TraceRouteResult")
