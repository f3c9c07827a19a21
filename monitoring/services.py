"""
============================================================================
PING ORCHESTRATOR - PROBE SERVICES
============================================================================
One facade per probe kind over its evaluator and its store.

    build_command(host, os)            ICMP / traceroute only
    create_or_update(host, ...)        evaluate, save, return the schema
    get_current(host)                  latest schema for host, or None

Callers hand over raw evidence; the success flag is always derived by
the evaluator. A save replaces the previous result for the same key.
============================================================================
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Optional

from config.constants import (
    TCP_REQUEST_HEADERS,
    TRANSPORT_FAILURE_STATUS,
    HTTPMethods,
    OperatingSystem,
)
from config.settings import TcpSettings
from database.models import CommandExecution, IcmpProbeResult, TcpProbeResult, TraceRouteResult
from database.repositories import IcmpRepository, TcpRepository, TraceRouteRepository
from exceptions.probes import TransportError
from monitoring.evaluators import IcmpEvaluator, TcpEvaluator, TraceRouteEvaluator
from monitoring.mappers import icmp_to_dto, tcp_to_dto, trace_route_to_dto
from monitoring.schemas import PingIcmpDto, PingTcpIpDto, TraceRouteDto
from utils.logger import get_logger
from utils.network import HttpTransport, build_uri


logger = get_logger("ProbeService")


# ============================================================================
# ICMP
# ============================================================================

class IcmpProbeService:

    def __init__(self, repository: IcmpRepository, evaluator: IcmpEvaluator):
        self.repository = repository
        self.evaluator = evaluator

    def build_command(self, host: str, operating_system: OperatingSystem) -> str:
        return self.evaluator.command_for(host, operating_system)

    def create_or_update(
        self,
        host: str,
        execution: CommandExecution,
        operating_system: OperatingSystem,
    ) -> PingIcmpDto:
        success = self.evaluator.evaluate(operating_system, execution)
        stored = self.repository.put(
            IcmpProbeResult(host=host, terminal=execution, success=success)
        )
        logger.debug(f"[ICMP] {host} exit={execution.exit_code} success={success}")
        return icmp_to_dto(stored)

    def get_current(self, host: str) -> Optional[PingIcmpDto]:
        result = self.repository.get(host)
        return icmp_to_dto(result) if result else None


# ============================================================================
# TCP
# ============================================================================

class TcpProbeService:
    """
    TCP/IP ping: GET <protocol>://<host> and record the status code.

    The result is keyed by that URL, so lookups by host rebuild it the
    same way. A request that gets no response is stored with status -1
    instead of raising.
    """

    def __init__(
        self,
        repository: TcpRepository,
        evaluator: TcpEvaluator,
        transport: HttpTransport,
        settings: TcpSettings,
    ):
        self.repository = repository
        self.evaluator = evaluator
        self.transport = transport
        self.settings = settings

    def url_for(self, host: str) -> str:
        return build_uri(self.settings.request_protocol, host)

    def create_or_update(self, host: str) -> PingTcpIpDto:
        url = self.url_for(host)
        started_at = datetime.now(timezone.utc)
        start_time = time.perf_counter()

        try:
            response = self.transport.request(
                url,
                headers=dict(TCP_REQUEST_HEADERS),
                method=HTTPMethods.GET,
                body="",
                timeout_ms=self.settings.request_timeout,
            )
            status_code, elapsed_ms = response.status_code, response.elapsed_ms
        except TransportError as e:
            elapsed_ms = int(round((time.perf_counter() - start_time) * 1000))
            logger.debug(f"[TCP] {url} got no response: {e.message}")
            status_code = TRANSPORT_FAILURE_STATUS

        return self.record(host, status_code, elapsed_ms, started_at)

    def record(
        self,
        host: str,
        status_code: int,
        elapsed_ms: int,
        started_at: Optional[datetime] = None,
    ) -> PingTcpIpDto:
        """Evaluate and save evidence gathered elsewhere."""
        url = self.url_for(host)
        success = self.evaluator.evaluate(status_code)
        stored = self.repository.put(
            TcpProbeResult(
                url=url,
                response_code=status_code,
                response_time=elapsed_ms,
                time=started_at or datetime.now(timezone.utc),
                success=success,
            )
        )
        logger.debug(f"[TCP] {url} status={status_code} success={success}")
        return tcp_to_dto(stored)

    def get_current(self, host: str) -> Optional[PingTcpIpDto]:
        result = self.repository.get(self.url_for(host))
        return tcp_to_dto(result) if result else None


# ============================================================================
# TRACEROUTE
# ============================================================================

class TraceRouteProbeService:

    def __init__(self, repository: TraceRouteRepository, evaluator: TraceRouteEvaluator):
        self.repository = repository
        self.evaluator = evaluator

    def build_command(self, host: str, operating_system: OperatingSystem) -> str:
        return self.evaluator.command_for(host, operating_system)

    def create_or_update(
        self,
        host: str,
        execution: CommandExecution,
        operating_system: Optional[OperatingSystem] = None,
    ) -> TraceRouteDto:
        success = self.evaluator.evaluate(execution)
        stored = self.repository.put(
            TraceRouteResult(host=host, terminal=execution, success=success)
        )
        logger.debug(f"[TRACEROUTE] {host} exit={execution.exit_code} success={success}")
        return trace_route_to_dto(stored)

    def get_current(self, host: str) -> Optional[TraceRouteDto]:
        result = self.repository.get(host)
        return trace_route_to_dto(result) if result else None
